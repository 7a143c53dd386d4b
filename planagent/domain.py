"""Core data types shared by the planner, the executor and the LLM client."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .params import Parameters


class Role(str, Enum):
    """Author of a chat message."""

    SYSTEM = "SYSTEM"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


@dataclass
class LLMToolCallFunction:
    """Name and raw JSON arguments of a function the model asked to call."""

    name: str = ""
    arguments: str = ""


@dataclass
class LLMToolCall:
    """One tool call returned by the model."""

    index: int = 0
    id: str = ""
    type: str = ""
    function: LLMToolCallFunction = field(default_factory=LLMToolCallFunction)


@dataclass
class Msg:
    """A message in the conversation sent to the model."""

    role: Role
    content: str = ""
    id: str = ""
    tool_calls: list[LLMToolCall] = field(default_factory=list)


@dataclass
class FunctionParameters:
    """JSON-schema style description of a tool's arguments."""

    properties: Parameters | None = None
    required: list[str] = field(default_factory=list)
    type: str = ""


@dataclass
class Function:
    """A function the model may call."""

    name: str
    description: str = ""
    parameters: FunctionParameters | None = None


@dataclass
class Tool:
    """A tool offered to the model."""

    function: Function
    type: str = "function"


@dataclass
class LLMRequest:
    """Everything needed for one chat completion."""

    system_content: str = ""
    msgs: list[Msg] = field(default_factory=list)
    tools: list[Tool] = field(default_factory=list)
    choice: str = ""


@dataclass
class LLMResponse:
    """The model's reply: text and any tool calls."""

    content: str = ""
    done: bool = False
    tool_calls: list[LLMToolCall] = field(default_factory=list)


@dataclass
class Step:
    """A single step of a plan and its state."""

    state: str
    content: str


@dataclass
class Plan:
    """A plan produced by the model."""

    id: str = ""
    title: str = ""
    steps: list[Step] = field(default_factory=list)