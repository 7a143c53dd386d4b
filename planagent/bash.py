"""A one-shot bash session used by the executor's bash tool."""

from __future__ import annotations

import subprocess


class BashTimeoutError(TimeoutError):
    """Raised when a bash command runs longer than the session allows."""


class BashSession:
    """Runs a command in a bash process and collects its output."""

    def __init__(self, timeout: float = 20.0, shell: str = "/bin/bash") -> None:
        self.timeout = timeout
        self.shell = shell
        self.sentinel = "<<exit>>"
        self._process: subprocess.Popen[str] | None = None

    @property
    def running(self) -> bool:
        """Whether the bash process has been started and not yet exited."""
        return self._process is not None and self._process.poll() is None

    def start(self) -> None:
        """Start the bash process."""
        self._process = subprocess.Popen(
            [self.shell],
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
        )

    def stop(self) -> None:
        """Kill the bash process if it is still running."""
        if self._process is None or self._process.poll() is not None:
            return
        self._process.kill()
        self._process.wait()

    def run(self, command: str) -> tuple[str, str]:
        """Run a command; return its standard output and standard error."""
        if self._process is None:
            raise RuntimeError("bash session has not been started")
        if self._process.poll() is not None:
            raise RuntimeError("bash session has finished")
        script = f"{command}; echo '{self.sentinel}'\n"
        try:
            output, err_output = self._process.communicate(script, timeout=self.timeout)
        except subprocess.TimeoutExpired as exc:
            self.stop()
            raise BashTimeoutError("bash command timeout") from exc
        index = output.find(self.sentinel)
        if index != -1:
            output = output[:index]
        return output, err_output

    def __enter__(self) -> BashSession:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()