import json

import pytest

from planagent.domain import LLMResponse, LLMToolCall, LLMToolCallFunction, Role
from planagent.executor import (
    NEXT_STEP_PROMPT,
    SYSTEM_PROMPT,
    PlanExecutor,
    bash_tool,
    chat_tool,
    go_tool,
    terminate_tool,
)


class FakeHandler:
    def __init__(self, responses):
        self.responses = list(responses)
        self.requests = []

    def invoke(self, request):
        self.requests.append(request)
        return self.responses.pop(0)


def call(name, arguments):
    return LLMToolCall(function=LLMToolCallFunction(name=name, arguments=arguments))


@pytest.mark.parametrize(
    "factory, name, required, prop",
    [
        (chat_tool, "create_chat_completion", ["response"], "response"),
        (terminate_tool, "terminate", ["status"], "status"),
        (bash_tool, "bash", ["command"], "command"),
        (go_tool, "code_execute", ["code"], "code"),
    ],
)
def test_tool_definitions(factory, name, required, prop):
    tool = factory()
    assert tool.type == "function"
    assert tool.function.name == name
    assert tool.function.parameters.required == required
    assert list(tool.function.parameters.properties.to_dict()) == [prop]


def test_terminate_status_enum():
    props = terminate_tool().function.parameters.properties.to_dict()
    assert props["status"]["enum"] == ["success", "failure"]


def test_run_returns_terminate_arguments():
    handler = FakeHandler(
        [LLMResponse(content="done", tool_calls=[call("terminate", '{"status": "success"}')])]
    )
    executor = PlanExecutor(handler)
    assert executor.run("do it") == '{"status": "success"}'


def test_run_builds_request_and_records_messages():
    handler = FakeHandler([LLMResponse(content="reply")])
    executor = PlanExecutor(handler)
    assert executor.run("first step") == ""

    request = handler.requests[0]
    assert request.system_content == SYSTEM_PROMPT
    assert [m.content for m in request.msgs] == ["first step", NEXT_STEP_PROMPT]
    assert [t.function.name for t in request.tools] == [
        "create_chat_completion",
        "terminate",
        "code_execute",
        "bash",
    ]
    assert [(m.role, m.content) for m in executor.messages] == [
        (Role.USER, "first step"),
        (Role.ASSISTANT, "reply"),
    ]


def test_run_keeps_conversation_between_calls():
    handler = FakeHandler([LLMResponse(content="a"), LLMResponse(content="b")])
    executor = PlanExecutor(handler)
    executor.run("one")
    executor.run("two")
    contents = [m.content for m in handler.requests[1].msgs]
    assert contents == ["one", "a", "two", NEXT_STEP_PROMPT]
    assert len(executor.messages) == 4


def test_run_with_code_call_returns_empty(capsys):
    handler = FakeHandler(
        [LLMResponse(tool_calls=[call("code_execute", json.dumps({"code": "x := 1"}))])]
    )
    assert PlanExecutor(handler).run("step") == ""
    assert "x := 1" in capsys.readouterr().err


def test_execute_terminate():
    executor = PlanExecutor(FakeHandler([]))
    assert (
        executor.execute_terminate("success")
        == "The interaction has been completed with status: success"
    )


def test_execute_code_returns_code(capsys):
    executor = PlanExecutor(FakeHandler([]))
    assert executor.execute_code(json.dumps({"code": "print(1)"})) == "print(1)"
    assert "print(1)" in capsys.readouterr().err


@pytest.mark.parametrize("args", ["not json", "[1, 2]", '{"code": 5}'])
def test_execute_code_bad_arguments(args):
    result = PlanExecutor(FakeHandler([])).execute_code(args)
    assert result.startswith("response format umarshal failed: ")


def test_execute_bash_returns_output():
    result = PlanExecutor(FakeHandler([])).execute_bash(json.dumps({"command": "echo hello"}))
    assert result.strip() == "hello"
    assert "<<exit>>" not in result


def test_execute_bash_prefers_error_output():
    executor = PlanExecutor(FakeHandler([]))
    result = executor.execute_bash(json.dumps({"command": "echo out; echo problem 1>&2"}))
    assert result.strip() == "problem"


def test_execute_bash_bad_arguments():
    result = PlanExecutor(FakeHandler([])).execute_bash("{")
    assert result.startswith("response format umarshal failed: ")


def test_execute_bash_timeout_message():
    executor = PlanExecutor(FakeHandler([]), bash_timeout=0.5)
    result = executor.execute_bash(json.dumps({"command": "sleep 5"}))
    assert "timeout" in result