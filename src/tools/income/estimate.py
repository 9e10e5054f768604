from __future__ import annotations

from typing import Any

from domain.schemas import ToolRequest
from domain.tool_args import IncomeEstimateArgs
from engine.income import estimate_monthly_income
from infrastructure.settings import get_settings
from tools.base import EngineTool
from tools.registry import register_tool


@register_tool
class IncomeEstimateTool(EngineTool):
    name = "income.estimate"
    description = (
        "Estimate average monthly income over a window (default: the calendar months from the first "
        "to the last deposit), with detected income streams and a confidence score."
    )
    args_model = IncomeEstimateArgs

    def execute(self, args: IncomeEstimateArgs, request: ToolRequest) -> dict[str, Any]:
        estimate = estimate_monthly_income(
            args.transactions,
            window_start=args.window.start if args.window else None,
            window_end=args.window.end if args.window else None,
            config=get_settings().income_config(),
        )
        return {"estimate": estimate.model_dump(mode="json")}
