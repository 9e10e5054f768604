from __future__ import annotations

from typing import Any

from domain.schemas import ToolRequest
from domain.tool_args import NetWorthArgs
from engine.money import format_cents
from engine.net_worth import calculate_net_worth
from tools.base import EngineTool
from tools.registry import register_tool


@register_tool
class NetWorthCurrentTool(EngineTool):
    name = "net_worth.current"
    description = "Compute assets, liabilities and net worth from active account balances."
    args_model = NetWorthArgs

    def execute(self, args: NetWorthArgs, request: ToolRequest) -> dict[str, Any]:
        result = calculate_net_worth(args.accounts)
        return {
            "net_worth": result.model_dump(mode="json"),
            "net_worth_display": format_cents(result.net_worth, request.context.base_currency),
        }
