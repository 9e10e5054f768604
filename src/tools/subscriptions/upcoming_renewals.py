from __future__ import annotations

from typing import Any

from domain.schemas import ToolRequest
from domain.tool_args import UpcomingRenewalsArgs
from engine.renewal import get_renewal_reminders, get_upcoming_renewals
from tools._support import resolve_today
from tools.base import EngineTool
from tools.registry import register_tool


@register_tool
class UpcomingRenewalsTool(EngineTool):
    name = "subscriptions.upcoming_renewals"
    description = (
        "List active and trial subscriptions renewing within `days_ahead` days (default 30) "
        "and the renewal and trial-expiry reminders still due."
    )
    args_model = UpcomingRenewalsArgs

    def execute(self, args: UpcomingRenewalsArgs, request: ToolRequest) -> dict[str, Any]:
        today = resolve_today(args.today, request.context)
        upcoming = get_upcoming_renewals(args.subscriptions, days_ahead=args.days_ahead, today=today)
        reminders = get_renewal_reminders(args.subscriptions, today)
        return {
            "today": today.isoformat(),
            "days_ahead": args.days_ahead,
            "upcoming": [
                {
                    "subscription_id": sub.id,
                    "name": sub.name,
                    "price": sub.price,
                    "currency": sub.currency,
                    "next_renewal": sub.next_renewal.isoformat(),
                    "days_until": (sub.next_renewal - today).days,
                }
                for sub in upcoming
            ],
            "reminders": [r.model_dump(mode="json") for r in reminders],
        }
