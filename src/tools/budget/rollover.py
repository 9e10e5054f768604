from __future__ import annotations

from typing import Any

from domain.schemas import ToolRequest
from domain.tool_args import RolloverArgs
from engine.budget import calculate_month_budget, get_carry_forward
from engine.rollover import apply_rollovers, next_month, process_month_rollover
from tools.base import EngineTool
from tools.registry import register_tool


@register_tool
class RolloverTool(EngineTool):
    name = "budget.rollover"
    description = (
        "Close a budget month: carry every category's available balance into the next month "
        "and return the resulting allocations for that month."
    )
    args_model = RolloverArgs

    def execute(self, args: RolloverArgs, request: ToolRequest) -> dict[str, Any]:
        state = calculate_month_budget(args.budget)
        rollovers = process_month_rollover(state)
        return {
            "from_month": state.month,
            "to_month": next_month(state.month),
            "rollovers": [r.model_dump(mode="json") for r in rollovers],
            "carry_forwards": get_carry_forward(state),
            "next_allocations": apply_rollovers(args.next_allocations, rollovers),
        }
