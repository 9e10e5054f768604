from __future__ import annotations

from typing import Any

from domain.schemas import ToolRequest
from domain.tool_args import GoalsReportArgs
from engine.goals import build_goal_report
from infrastructure.settings import get_settings
from tools._support import resolve_today
from tools.base import EngineTool
from tools.registry import register_tool


@register_tool
class GoalsReportTool(EngineTool):
    name = "goals.report"
    description = (
        "Report progress, status (completed, on_track, behind, overdue), suggested monthly "
        "contribution and completion projection for each savings goal."
    )
    args_model = GoalsReportArgs

    def execute(self, args: GoalsReportArgs, request: ToolRequest) -> dict[str, Any]:
        today = resolve_today(args.today, request.context)
        config = get_settings().goal_pace_config()
        reports = [build_goal_report(goal, today, config) for goal in args.goals]
        counts: dict[str, int] = {}
        for report in reports:
            counts[report.status.value] = counts.get(report.status.value, 0) + 1
        return {
            "today": today.isoformat(),
            "goals": [r.model_dump(mode="json") for r in reports],
            "status_counts": counts,
        }
