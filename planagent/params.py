"""Argument schemas for the tools offered to the model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Value:
    """Schema of a single tool argument."""

    type: str
    description: str = ""
    enum: list[str] = field(default_factory=list)
    items: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-schema form, leaving out empty fields."""
        result: dict[str, Any] = {"type": self.type}
        if self.description:
            result["description"] = self.description
        if self.enum:
            result["enum"] = list(self.enum)
        if self.items:
            result["items"] = dict(self.items)
        return result


@dataclass
class Parameters:
    """A named set of argument schemas."""

    params: dict[str, Value] = field(default_factory=dict)

    def add(self, name: str, value: Value) -> Parameters:
        """Add or replace an argument and return self."""
        self.params[name] = value
        return self

    def to_dict(self) -> dict[str, dict[str, Any]]:
        """Return the JSON-schema properties mapping."""
        return {name: value.to_dict() for name, value in self.params.items()}


def plan_params() -> Parameters:
    """Arguments of the planning tool."""
    return (
        Parameters()
        .add(
            "command",
            Value(
                "string",
                "The command to execute. Available commands: create, update, list, get, "
                "set_active, mark_step, delete.",
                enum=["create", "update", "list", "get", "set_active", "mark_step", "delete"],
            ),
        )
        .add(
            "plan_id",
            Value(
                "string",
                "Unique identifier for the plan. Required for create, update, set_active, "
                "and delete commands. Optional for get and mark_step (uses active plan if "
                "not specified).",
            ),
        )
        .add(
            "title",
            Value(
                "string",
                "Title for the plan. Required for create command, optional for update command.",
            ),
        )
        .add(
            "steps",
            Value(
                "array",
                "List of plan steps. Required for create command, optional for update command.",
                items={"type": "string"},
            ),
        )
        .add(
            "step_index",
            Value(
                "integer",
                "Index of the step to update (0-based). Required for mark_step command.",
            ),
        )
        .add(
            "step_status",
            Value(
                "string",
                "Status to set for a step. Used with mark_step command.",
                enum=["not_started", "in_progress", "completed", "blocked"],
            ),
        )
        .add(
            "step_notes",
            Value("string", "Additional notes for a step. Optional for mark_step command."),
        )
    )


def trim_params() -> Parameters:
    """Arguments of the terminate tool."""
    return Parameters().add(
        "status",
        Value(
            "string",
            "the finish status of the interaction.",
            enum=["success", "failure"],
        ),
    )


def go_params() -> Parameters:
    """Arguments of the code execution tool."""
    return Parameters().add("code", Value("string", "The code to execute"))


def chat_params() -> Parameters:
    """Arguments of the chat completion tool."""
    return Parameters().add(
        "response",
        Value("string", "The response text that should be delivered to the user."),
    )


def bash_params() -> Parameters:
    """Arguments of the bash tool."""
    return Parameters().add(
        "command",
        Value(
            "string",
            "The bash command to execute. Can be empty to view additional logs when "
            "previous exit code is `-1`. Can be `ctrl+c` to interrupt the currently "
            "running process.",
        ),
    )


def browser_use_params() -> Parameters:
    """Arguments of the browser tool (an empty placeholder schema)."""
    return Parameters().add("", Value("", ""))