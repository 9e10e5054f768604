from __future__ import annotations

from typing import Any

from domain.schemas import ToolRequest
from domain.tool_args import SubscriptionSummaryArgs
from engine.money import format_cents
from engine.subscriptions import calculate_subscription_summary
from tools.base import EngineTool
from tools.registry import register_tool


@register_tool
class SubscriptionSummaryTool(EngineTool):
    name = "subscriptions.summary"
    description = (
        "Normalize active and trial subscriptions to monthly, annual and daily cost "
        "and break the monthly cost down by category."
    )
    args_model = SubscriptionSummaryArgs

    def execute(self, args: SubscriptionSummaryArgs, request: ToolRequest) -> dict[str, Any]:
        summary = calculate_subscription_summary(args.subscriptions)
        currency = request.context.base_currency
        return {
            "summary": summary.model_dump(mode="json"),
            "display": {
                "monthly_total": format_cents(summary.monthly_total, currency),
                "annual_total": format_cents(summary.annual_total, currency),
                "daily_cost": format_cents(summary.daily_cost, currency),
            },
        }
