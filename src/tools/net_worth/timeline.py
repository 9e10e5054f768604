from __future__ import annotations

from typing import Any

from domain.schemas import ToolRequest
from domain.tool_args import NetWorthTimelineArgs
from engine.net_worth import build_net_worth_timeline
from tools.base import EngineTool
from tools.registry import register_tool


@register_tool
class NetWorthTimelineTool(EngineTool):
    name = "net_worth.timeline"
    description = "Order stored net worth snapshots by month for charting."
    args_model = NetWorthTimelineArgs

    def execute(self, args: NetWorthTimelineArgs, request: ToolRequest) -> dict[str, Any]:
        points = build_net_worth_timeline(args.snapshots)
        change = points[-1].net_worth - points[0].net_worth if points else 0
        return {
            "points": [p.model_dump(mode="json") for p in points],
            "change": change,
        }
