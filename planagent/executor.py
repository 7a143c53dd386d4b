"""Runs single plan steps by letting the model call tools."""

from __future__ import annotations

import json
import sys
from typing import Protocol

from .bash import BashSession, BashTimeoutError
from .domain import Function, FunctionParameters, LLMRequest, LLMResponse, Msg, Role, Tool
from .params import bash_params, chat_params, go_params, trim_params

SYSTEM_PROMPT = (
    "You are an agent that can execute tool calls, only call tools when they are "
    "absolutely necessary. if the user's task is general or you already know the "
    'answer, respond without calling tools."'
)

NEXT_STEP_PROMPT = (
    "Based on user needs, proactively select the most appropriate tool or combination "
    "of tools. For complex tasks, you can break down the problem and use different "
    "tools step by step to solve it. After using each tool, clearly explain the "
    "execution results and suggest the next steps.\n"
    'If you want to stop the interaction at any point, use the "terminate" '
    "tool/function call."
)

BASH_TIMEOUT = 20.0

CODE_TOOL_NAME = "code_execute"


class LLMHandler(Protocol):
    """Anything that can answer a chat completion request."""

    def invoke(self, request: LLMRequest) -> LLMResponse: ...


def chat_tool() -> Tool:
    """Tool for a structured chat completion."""
    return Tool(
        Function(
            name="create_chat_completion",
            description="Creates a structured completion with specified output formatting.",
            parameters=FunctionParameters(properties=chat_params(), required=["response"]),
        )
    )


def terminate_tool() -> Tool:
    """Tool the model calls to end the interaction."""
    return Tool(
        Function(
            name="terminate",
            description=(
                "Terminate the interaction when the request is met OR if the assistant "
                "cannot proceed further with the task.  \n"
                "When you have finished all the tasks, call this tool to end the work."
            ),
            parameters=FunctionParameters(properties=trim_params(), required=["status"]),
        )
    )


def bash_tool() -> Tool:
    """Tool that runs a bash command."""
    return Tool(
        Function(
            name="bash",
            description=(
                "Execute a bash command in the terminal.\n"
                "* Long running commands: For commands that may run indefinitely, it "
                "should be run in the background and the output should be redirected to "
                'a file, e.g. command = "python3 app.py > server.log 2>&1 &".\n'
                '* Interactive: If a bash command returns exit code "-1", this means the '
                "process is not yet finished. The assistant must then send a second call "
                'to terminal with an empty "command" (which will retrieve any additional '
                'logs), or it can send additional text (set "command" to the text) to '
                'STDIN of the running process, or it can send command="ctrl+c" to '
                "interrupt the process.\n"
                '* Timeout: If a command execution result says "Command timed out. '
                'Sending SIGINT to the process", the assistant should retry running the '
                "command in the background."
            ),
            parameters=FunctionParameters(properties=bash_params(), required=["command"]),
        )
    )


def go_tool() -> Tool:
    """Tool that receives a piece of code to execute."""
    return Tool(
        Function(
            name=CODE_TOOL_NAME,
            description=(
                "Executes a code string. Note: Only print outputs are visible, "
                "function return values are not captured. Use print statements to see "
                "results."
            ),
            parameters=FunctionParameters(properties=go_params(), required=["code"]),
        )
    )


def _parse_string_map(args: str) -> dict[str, str]:
    """Decode a JSON object whose values are all strings."""
    data = json.loads(args)
    if not isinstance(data, dict):
        raise ValueError("expected a JSON object")
    for key, value in data.items():
        if not isinstance(value, str):
            raise ValueError(f"value of {key!r} is not a string")
    return data


class PlanExecutor:
    """Keeps the conversation with the model and carries out its tool calls."""

    def __init__(self, handler: LLMHandler, bash_timeout: float = BASH_TIMEOUT) -> None:
        self.handler = handler
        self.bash_timeout = bash_timeout
        self.messages: list[Msg] = []

    def run(self, step: str) -> str:
        """Ask the model to carry out a step; return the terminate arguments, if any."""
        self.messages.append(Msg(role=Role.USER, content=step))
        return self._step()

    def _step(self) -> str:
        request = LLMRequest(
            system_content=SYSTEM_PROMPT,
            msgs=[*self.messages, Msg(role=Role.USER, content=NEXT_STEP_PROMPT)],
            tools=[chat_tool(), terminate_tool(), go_tool(), bash_tool()],
        )
        response = self.handler.invoke(request)
        self.messages.append(Msg(role=Role.ASSISTANT, content=response.content))

        for call in response.tool_calls:
            name = call.function.name
            if name == "terminate":
                return call.function.arguments
            if name == CODE_TOOL_NAME:
                self.execute_code(call.function.arguments)
            elif name == "bash":
                self.execute_bash(call.function.arguments)
        return ""

    def execute_terminate(self, status: str) -> str:
        """Describe how the interaction finished."""
        return f"The interaction has been completed with status: {status}"

    def execute_bash(self, args: str) -> str:
        """Run the command in the arguments; return its error output or its output."""
        try:
            command = _parse_string_map(args).get("command", "")
        except ValueError as exc:
            return f"response format umarshal failed: {exc}"

        session = BashSession(self.bash_timeout)
        try:
            session.start()
        except OSError as exc:
            return str(exc)
        try:
            output, err_output = session.run(command)
        except (BashTimeoutError, RuntimeError, OSError) as exc:
            return str(exc)
        finally:
            session.stop()

        return err_output if err_output else output

    def execute_code(self, args: str) -> str:
        """Extract and echo the code carried in the arguments."""
        try:
            code = _parse_string_map(args).get("code", "")
        except ValueError as exc:
            return f"response format umarshal failed: {exc}"
        print(code, file=sys.stderr)
        return code