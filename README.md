# planagent

planagent turns a task written in plain language into a short plan. It then
works through the plan one step at a time. It uses a DeepSeek chat model that
supports tool calls. The model returns the plan through a `planning` tool.
While a step runs, the model is offered these tools:

- `bash` runs a shell command in a fresh `/bin/bash` session. The session times out after 20 seconds.
- `code_execute` receives a code string and echoes it to standard error. The code is not run.
- `create_chat_completion` is offered for a structured response. Calls to it are not acted on.
- `terminate` ends the step. Its arguments become the step's result.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Running the server

The API token is read from the `token` environment variable:

```
export token=token
planagent
```

The `planagent` command accepts these options:

- `--host`: the address to listen on. The default is `0.0.0.0`.
- `--port`: the port to listen on. The default is `8080`.
- `--index`: the file served at `/`. The default is `./internal/font/index.html`.

The server has these routes:

- `GET /` serves the index file.
- `POST /chat` takes a JSON body such as `{"message": "list the files in the current directory"}`.
  - It answers with `{"response": "<formatted plan>"}`.
  - A missing body or a missing `message` is treated as an empty message.
  - If the body is not valid JSON, is not an object, or its `message` is not a string, it answers with status 400 and `{"error": "Invalid request"}`.
  - If planning fails, it answers with status 400 and `{"error": "internal error"}`.
- `POST /code` answers with an empty body and status 200.

To build the application yourself, call `planagent.server.create_app(service, index_path)`. It returns a Flask app. The `service` can be any object with a `plan(task)` method.

## Using the library

```python
from planagent.llm import DeepSeekHandler
from planagent.executor import PlanExecutor
from planagent.planning import PlanService

handler = DeepSeekHandler("token")
executor = PlanExecutor(handler)
service = PlanService(handler, executor)

print(service.plan("list the files in the current directory"))
service.execute()
print(service.format_plan())
```

- `DeepSeekHandler.invoke` sends an `LLMRequest` (from `planagent.domain`) and returns an `LLMResponse`.
- `build_payload` and `parse_response` in `planagent.llm` convert between these types and the JSON of the chat completion API.
- `PlanService.plan` asks the model for a plan and returns it as formatted text.
- `PlanService.format_plan` renders the current plan as the same text. The text has these parts:
  - a title line
  - a progress line with the number of completed steps and the percentage
  - a count of steps in each state
  - one line per step with its marker:
    - `[-]` not started
    - `[→]` in progress
    - `[✓]` completed
    - `[!]` blocked
- `PlanService.execute` runs the pending steps in order. It hands each step to `PlanExecutor.run` and marks the step completed when the call returns.
- `PlanService.init_plan_from_args` fills the plan directly from the JSON arguments of a `planning` call.
- `PlanService.mark_step` sets the state of a single step. The states are listed in `StepState`.

Planning failures raise `PlanError`. Failed or malformed model calls raise `LLMError`.

`planagent.bash.BashSession` can also be used on its own as a context manager. Its `run(command)` returns the standard output and the standard error of the command. It raises `BashTimeoutError` when the command runs too long. Inside the executor, the bash tool reports errors and timeouts as text and does not raise them.

`planagent.params` describes tool arguments for the model. It has ready-made sets such as `plan_params()` and `bash_params()`. You can also build your own `Parameters` from `Value` entries. `to_dict()` gives the JSON-schema properties.

## What it does not do

- No index page ships with the package. Point `--index` at your own file.
- Code sent through `code_execute` is echoed, not executed.
- The output of tool calls is not sent back to the model.
- Plans are held in memory only and are not stored anywhere.