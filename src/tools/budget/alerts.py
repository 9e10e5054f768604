from __future__ import annotations

from typing import Any

from domain.schemas import ToolRequest
from domain.tool_args import BudgetAlertsArgs
from engine.alerts import category_spend_states, check_alerts
from engine.budget import calculate_month_budget
from tools.base import EngineTool
from tools.registry import register_tool


@register_tool
class BudgetAlertsTool(EngineTool):
    name = "budget.alerts"
    description = (
        "Check category spending for a month against alert thresholds (percent of the category "
        "target) and return the alerts that have not fired yet this month."
    )
    args_model = BudgetAlertsArgs

    def execute(self, args: BudgetAlertsArgs, request: ToolRequest) -> dict[str, Any]:
        state = calculate_month_budget(args.budget)
        notifications = check_alerts(args.alerts, category_spend_states(state), args.history, state.month)
        return {"month": state.month, "alerts": [n.model_dump(mode="json") for n in notifications]}
