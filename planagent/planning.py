"""Creates a plan with the model and walks through its steps."""

from __future__ import annotations

import json
import re
from enum import Enum

from .domain import Function, FunctionParameters, LLMRequest, Msg, Plan, Role, Step, Tool
from .executor import LLMHandler, PlanExecutor
from .params import plan_params

PLANNING_SYSTEM_PROMPT = (
    "You are a planning assistant. Create a concise, actionable plan with clear steps. \n"
    "Focus on key milestones rather than detailed sub-steps. \n"
    "Optimize for clarity and efficiency."
)

_STEP_TYPE = re.compile(r"\[([A-Z_]+)\]")


class StepState(str, Enum):
    """Progress of a plan step."""

    NO_STARTED = "no_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    BLOCKED = "blocked"


_SYMBOLS = {
    StepState.NO_STARTED.value: "[-]",
    StepState.IN_PROGRESS.value: "[→]",
    StepState.COMPLETED.value: "[✓]",
    StepState.BLOCKED.value: "[!]",
}


class PlanError(Exception):
    """Raised when a plan cannot be created or updated."""


def plan_tool() -> Tool:
    """Tool through which the model hands back a plan."""
    return Tool(
        Function(
            name="planning",
            description=(
                "A planning that allows the agent to create and manage plans for solving "
                "complex tasks.\n The provides functionality for creating plans, updating "
                "plan steps, and tracking progress."
            ),
            parameters=FunctionParameters(properties=plan_params(), required=["command"]),
        )
    )


class PlanService:
    """Holds one plan, builds it from the model's answer and executes it."""

    def __init__(self, handler: LLMHandler, executor: PlanExecutor) -> None:
        self.id = ""
        self.handler = handler
        self.executor = executor
        self.current_plan = Plan(id="1")

    def plan(self, task: str) -> str:
        """Ask the model for a plan for the task and return it formatted."""
        request = LLMRequest(
            system_content=PLANNING_SYSTEM_PROMPT,
            msgs=[
                Msg(
                    role=Role.USER,
                    content=(
                        "Create a reasonable plan with clear steps to accomplish the "
                        f"task: {task}"
                    ),
                )
            ],
            tools=[plan_tool()],
        )
        self._create_initial_plan(request)
        return self.format_plan()

    def _create_initial_plan(self, request: LLMRequest) -> None:
        response = self.handler.invoke(request)
        if not response.tool_calls:
            raise PlanError("the model returned no tool calls")
        for call in response.tool_calls:
            if call.function.name == "planning":
                self.init_plan_from_args(call.function.arguments)
                return
        raise PlanError("the model returned an unknown function name")

    def execute(self) -> None:
        """Run every pending step in order until the last one is done."""
        last = len(self.current_plan.steps) - 1
        while (pending := self._next_step()) is not None:
            index, content = pending
            self._execute_step(index, content)
            if index == last:
                break

    def _next_step(self) -> tuple[int, str] | None:
        for index, step in enumerate(self.current_plan.steps):
            match = _STEP_TYPE.search(step.content)
            if match:
                print(f"step {index} type {match.group(1)}")
            if step.state == StepState.NO_STARTED.value:
                self.mark_step(index, StepState.IN_PROGRESS)
                return index, step.content
        return None

    def _execute_step(self, index: int, content: str) -> None:
        prompt = (
            "\nCURRENT PLAN STATUS:\n"
            f"{self.format_plan()}\n"
            "YOUR CURRENT TASK:\n"
            f"You are now working on step {index}: {content}\n"
            "Please execute this step using the appropriate tools. When you're done, "
            "provide a summary of what you accomplished.\n"
        )
        result = self.executor.run(prompt)
        print(result)
        self.mark_step(index, StepState.COMPLETED)

    def init_plan_from_args(self, args: str) -> None:
        """Fill the plan from the JSON arguments of a planning tool call."""
        try:
            parsed = json.loads(args)
        except ValueError as exc:
            raise PlanError(f"invalid planning arguments: {exc}") from exc
        if not isinstance(parsed, dict):
            raise PlanError("planning arguments are not an object")

        command = parsed.get("command")
        if not isinstance(command, str):
            raise PlanError("planning command is missing")
        if command != "create":
            raise PlanError("planning command is not create")

        title = parsed.get("title")
        steps = parsed.get("steps")
        if not isinstance(title, str):
            raise PlanError("plan title is missing")
        if not isinstance(steps, list):
            raise PlanError("plan steps are missing")

        self.current_plan.title = title
        self.current_plan.steps = [
            Step(StepState.NO_STARTED.value, step) if isinstance(step, str) else Step("", "")
            for step in steps
        ]

    def mark_step(self, index: int, state: StepState | str) -> None:
        """Set the state of the step at index."""
        if not 0 <= index < len(self.current_plan.steps):
            raise PlanError(f"step index {index} is out of range")
        self.current_plan.steps[index].state = (
            state.value if isinstance(state, StepState) else state
        )

    def format_plan(self) -> str:
        """Render the plan, its progress and its steps as text."""
        plan = self.current_plan
        header = f"Plan: {plan.title} (ID: {self.id})\n"
        output = header + "=" * len(header.encode("utf-8")) + "\n\n"

        states = [step.state for step in plan.steps]
        total = len(states)
        no_started = states.count(StepState.NO_STARTED.value)
        progress = states.count(StepState.IN_PROGRESS.value)
        completed = states.count(StepState.COMPLETED.value)
        blocked = states.count(StepState.BLOCKED.value)

        output += f"Progress: {completed} / {total} steps completed "
        if total > 0:
            output += f"({completed / total * 100:.1f}%)\n"
        else:
            output += "(0%)\n"

        output += (
            f"status: {completed} completed, {progress} progress, "
            f"{no_started} no strated, {blocked} blocked"
        )
        output += "Steps:\n"

        symbol = "[ ]"
        for index, step in enumerate(plan.steps):
            symbol = _SYMBOLS.get(step.state, symbol)
            output += f"{index}. {symbol} {step.content}\n"
        return output