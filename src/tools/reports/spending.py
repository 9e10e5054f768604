from __future__ import annotations

from typing import Any

from domain.report_schemas import SpendingReport
from domain.schemas import ToolRequest
from domain.tool_args import SpendingReportArgs
from engine.money import format_cents
from engine.reporting import get_monthly_spending_trend, get_spending_by_category, get_top_payees
from tools.base import EngineTool
from tools.registry import register_tool


@register_tool
class SpendingReportTool(EngineTool):
    name = "reports.spending"
    description = (
        "Break down spending in a date window by category and payee, with a monthly "
        "spent/income trend over the supplied transactions."
    )
    args_model = SpendingReportArgs

    def execute(self, args: SpendingReportArgs, request: ToolRequest) -> dict[str, Any]:
        window = args.window
        by_category = get_spending_by_category(args.transactions, args.splits, args.categories, window.start, window.end)
        in_window = [t for t in args.transactions if window.start <= t.posted_on <= window.end]
        report = SpendingReport(
            categories=by_category,
            top_payees=get_top_payees(in_window, args.top_payees),
            total_spent=sum(c.total_spent for c in by_category),
        )
        return {
            "window": window.model_dump(mode="json"),
            "report": report.model_dump(mode="json"),
            "total_spent_display": format_cents(report.total_spent, request.context.base_currency),
            "trend": [p.model_dump(mode="json") for p in get_monthly_spending_trend(args.transactions, args.trend_months)],
        }
