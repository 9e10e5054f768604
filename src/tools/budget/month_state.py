from __future__ import annotations

from typing import Any

from domain.schemas import ToolRequest
from domain.tool_args import MonthStateArgs
from engine.budget import calculate_month_budget
from engine.money import format_cents
from tools.base import EngineTool
from tools.registry import register_tool


@register_tool
class MonthStateTool(EngineTool):
    name = "budget.month_state"
    description = (
        "Compute the envelope budget for one month: per-category and per-group availability, "
        "target progress, total overspending and the amount still ready to assign."
    )
    args_model = MonthStateArgs

    def execute(self, args: MonthStateArgs, request: ToolRequest) -> dict[str, Any]:
        state = calculate_month_budget(args.budget)
        return {
            "state": state.model_dump(mode="json"),
            "ready_to_assign_display": format_cents(state.ready_to_assign, request.context.base_currency),
        }
