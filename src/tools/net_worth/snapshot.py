from __future__ import annotations

from typing import Any

from domain.schemas import ToolRequest
from domain.tool_args import NetWorthSnapshotArgs
from engine.net_worth import capture_snapshot
from tools.base import EngineTool
from tools.registry import register_tool


@register_tool
class NetWorthSnapshotTool(EngineTool):
    name = "net_worth.snapshot"
    description = (
        "Capture a month-end net worth snapshot, including the per-account balances "
        "serialized for storage."
    )
    args_model = NetWorthSnapshotArgs

    def execute(self, args: NetWorthSnapshotArgs, request: ToolRequest) -> dict[str, Any]:
        snapshot = capture_snapshot(
            args.accounts,
            args.month,
            snapshot_id=args.snapshot_id,
            created_at=args.created_at,
        )
        return {"snapshot": snapshot.model_dump(mode="json")}
