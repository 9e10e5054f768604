from __future__ import annotations

from typing import Any

from domain.report_schemas import ReportCategory
from domain.schemas import ToolRequest
from domain.tool_args import BudgetVsSpentArgs
from engine.reporting import get_budgeted_vs_spent
from tools.base import EngineTool
from tools.registry import register_tool


@register_tool
class BudgetVsSpentTool(EngineTool):
    name = "reports.budget_vs_spent"
    description = "Compare each category's allocation for a month with what was actually spent, most used first."
    args_model = BudgetVsSpentArgs

    def execute(self, args: BudgetVsSpentArgs, request: ToolRequest) -> dict[str, Any]:
        categories = [
            ReportCategory(category_id=c.category_id, name=c.name, group_id=group.group_id, emoji=c.emoji)
            for group in args.budget.groups
            for c in group.categories
        ]
        rows = get_budgeted_vs_spent(args.budget.allocations, args.budget.activity, categories)
        return {"month": args.budget.month, "rows": [r.model_dump(mode="json") for r in rows]}
