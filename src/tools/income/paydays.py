from __future__ import annotations

from typing import Any

from domain.schemas import ToolRequest
from domain.tool_args import PaydaysArgs
from engine.payday import detect_paydays, predict_next_payday
from infrastructure.settings import get_settings
from tools._support import resolve_today
from tools.base import EngineTool
from tools.registry import register_tool


@register_tool
class PaydaysTool(EngineTool):
    name = "income.paydays"
    description = (
        "Detect recurring payday patterns (weekly, biweekly, semi-monthly, monthly) from deposit "
        "history and predict the next pay date for each."
    )
    args_model = PaydaysArgs

    def execute(self, args: PaydaysArgs, request: ToolRequest) -> dict[str, Any]:
        today = resolve_today(args.today, request.context)
        patterns = detect_paydays(args.transactions, get_settings().payday_config())
        return {
            "today": today.isoformat(),
            "paydays": [
                {
                    "pattern": pattern.model_dump(mode="json"),
                    "next": predict_next_payday(pattern, today).model_dump(mode="json"),
                }
                for pattern in patterns
            ],
        }
