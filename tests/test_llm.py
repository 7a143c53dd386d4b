import json

import httpx
import pytest

from planagent.domain import (
    Function,
    FunctionParameters,
    LLMRequest,
    Msg,
    Role,
    Tool,
)
from planagent.llm import DeepSeekHandler, LLMError, build_payload, parse_response
from planagent.params import bash_params

REPLY = {
    "choices": [
        {
            "message": {
                "content": "done",
                "tool_calls": [
                    {
                        "index": 0,
                        "id": "call-1",
                        "type": "function",
                        "function": {"name": "planning", "arguments": '{"command": "create"}'},
                    }
                ],
            }
        }
    ]
}


def _request():
    return LLMRequest(
        system_content="sys",
        msgs=[
            Msg(role=Role.USER, content="hi"),
            Msg(role=Role.TOOL, content="ignored"),
            Msg(role=Role.ASSISTANT, content="hello"),
        ],
        tools=[
            Tool(
                function=Function(
                    name="bash",
                    description="run",
                    parameters=FunctionParameters(properties=bash_params(), required=["command"]),
                )
            )
        ],
    )


def test_build_payload_messages():
    payload = build_payload(_request(), "deepseek-chat")
    assert payload["model"] == "deepseek-chat"
    assert payload["tool_choice"] == "auto"
    assert payload["messages"] == [
        {"role": "system", "content": "sys"},
        {"role": "user", "content": "hi"},
        {"role": "assistant", "content": "hello"},
    ]


def test_build_payload_tools():
    tool = build_payload(_request(), "m")["tools"][0]
    assert tool["type"] == "function"
    assert tool["function"]["name"] == "bash"
    assert tool["function"]["parameters"] == {
        "type": "object",
        "properties": bash_params().to_dict(),
        "required": ["command"],
    }


def test_build_payload_without_system_or_tools():
    payload = build_payload(LLMRequest(msgs=[Msg(role=Role.USER, content="x")]), "m")
    assert payload["messages"] == [{"role": "user", "content": "x"}]
    assert "tools" not in payload


def test_parse_response_with_tool_calls():
    response = parse_response(REPLY)
    assert response.content == "done"
    assert len(response.tool_calls) == 1
    call = response.tool_calls[0]
    assert (call.id, call.type, call.index) == ("call-1", "function", 0)
    assert call.function.name == "planning"
    assert json.loads(call.function.arguments) == {"command": "create"}


def test_parse_response_null_content():
    response = parse_response({"choices": [{"message": {"content": None}}]})
    assert response.content == ""
    assert response.tool_calls == []


@pytest.mark.parametrize("data", [{}, {"choices": []}, {"choices": [{}]}])
def test_parse_response_malformed(data):
    with pytest.raises(LLMError):
        parse_response(data)


def test_invoke_posts_and_parses():
    seen = {}

    def handle(request):
        seen["auth"] = request.headers["Authorization"]
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=REPLY)

    client = httpx.Client(transport=httpx.MockTransport(handle))
    handler = DeepSeekHandler("token", base_url="http://localhost", client=client)
    response = handler.invoke(_request())
    assert response.tool_calls[0].function.name == "planning"
    assert seen["auth"] == "Bearer token"
    assert seen["path"] == "/chat/completions"
    assert seen["body"] == build_payload(_request(), handler.model)


def test_invoke_http_error_raises():
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(500)))
    handler = DeepSeekHandler("token", base_url="http://localhost", client=client)
    with pytest.raises(LLMError):
        handler.invoke(_request())