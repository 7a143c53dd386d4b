"""Chat completion client for the DeepSeek API."""

from __future__ import annotations

from typing import Any

import httpx

from .domain import LLMRequest, LLMResponse, LLMToolCall, LLMToolCallFunction, Role

DEFAULT_BASE_URL = "https://api.deepseek.com"
DEFAULT_MODEL = "deepseek-chat"


class LLMError(RuntimeError):
    """Raised when the chat completion call fails or its reply is malformed."""


def build_payload(request: LLMRequest, model: str) -> dict[str, Any]:
    """Turn a request into the JSON body of a chat completion call."""
    messages: list[dict[str, str]] = []
    if request.system_content:
        messages.append({"role": "system", "content": request.system_content})
    for msg in request.msgs:
        if msg.role == Role.USER:
            messages.append({"role": "user", "content": msg.content})
        elif msg.role == Role.ASSISTANT:
            messages.append({"role": "assistant", "content": msg.content})

    payload: dict[str, Any] = {"model": model, "messages": messages, "tool_choice": "auto"}
    if request.tools:
        tools = []
        for tool in request.tools:
            params = tool.function.parameters
            properties = params.properties.to_dict() if params and params.properties else {}
            required = list(params.required) if params else []
            tools.append(
                {
                    "type": tool.type,
                    "function": {
                        "name": tool.function.name,
                        "description": tool.function.description,
                        "parameters": {
                            "type": "object",
                            "properties": properties,
                            "required": required,
                        },
                    },
                }
            )
        payload["tools"] = tools
    return payload


def parse_response(data: dict[str, Any]) -> LLMResponse:
    """Read the first choice of a chat completion reply."""
    try:
        message = data["choices"][0]["message"]
        raw_calls = message.get("tool_calls") or []
        tool_calls = [
            LLMToolCall(
                index=call.get("index", 0),
                id=call.get("id", ""),
                type=call.get("type", ""),
                function=LLMToolCallFunction(
                    name=call.get("function", {}).get("name", ""),
                    arguments=call.get("function", {}).get("arguments", ""),
                ),
            )
            for call in raw_calls
        ]
    except (KeyError, IndexError, TypeError, AttributeError) as exc:
        raise LLMError("malformed chat completion response") from exc
    return LLMResponse(content=message.get("content") or "", tool_calls=tool_calls)


class DeepSeekHandler:
    """Sends requests to the chat completion endpoint."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        timeout: float = 120.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.model = model
        self._api_key = api_key
        self._url = base_url.rstrip("/") + "/chat/completions"
        self._client = client if client is not None else httpx.Client(timeout=timeout)

    def invoke(self, request: LLMRequest) -> LLMResponse:
        """Run one chat completion and return the model's reply."""
        payload = build_payload(request, self.model)
        headers = {"Authorization": f"Bearer {self._api_key}"}
        try:
            response = self._client.post(self._url, json=payload, headers=headers)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise LLMError(f"chat completion request failed: {exc}") from exc
        try:
            data = response.json()
        except ValueError as exc:
            raise LLMError("chat completion reply is not JSON") from exc
        return parse_response(data)

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self) -> DeepSeekHandler:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()