from __future__ import annotations

from typing import Any

from domain.schemas import ToolRequest
from domain.tool_args import DebtPayoffArgs
from engine.debt_payoff import calculate_payoff
from engine.money import format_cents
from tools._support import resolve_today
from tools.base import EngineTool
from tools.registry import register_tool


@register_tool
class DebtPayoffTool(EngineTool):
    name = "debt.payoff"
    description = (
        "Plan paying off debts with the snowball (smallest balance first) or avalanche "
        "(highest rate first) strategy: months to debt free, total paid and total interest."
    )
    args_model = DebtPayoffArgs

    def execute(self, args: DebtPayoffArgs, request: ToolRequest) -> dict[str, Any]:
        today = resolve_today(args.today, request.context)
        plan = calculate_payoff(args.debts, args.strategy, args.extra_payment, today)
        exclude = None if args.include_schedule else {"schedule"}
        currency = request.context.base_currency
        return {
            "today": today.isoformat(),
            "plan": plan.model_dump(mode="json", exclude=exclude),
            "display": {
                "total_paid": format_cents(plan.total_paid, currency),
                "total_interest": format_cents(plan.total_interest, currency),
            },
        }
