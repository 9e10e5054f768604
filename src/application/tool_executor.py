from __future__ import annotations

import logging
import time
from typing import Iterable

from domain.schemas import BatchRequest, ToolCall, ToolContext, ToolRequest, ToolResponse
from tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


class ToolExecutor:
    def __init__(self, registry: ToolRegistry):
        self._registry = registry

    def run_call(self, request: ToolRequest) -> ToolResponse:
        logger.info("ToolExecutor running request_id=%s tool=%s", request.request_id, request.tool)
        t = time.perf_counter()
        try:
            tool = self._registry.get_tool(request.tool)
            response = tool.run(request)
        except Exception as exc:
            logger.exception("ToolExecutor failed request_id=%s tool=%s", request.request_id, request.tool)
            response = ToolResponse(
                request_id=request.request_id,
                tool=request.tool,
                ok=False,
                errors=[str(exc) or exc.__class__.__name__],
                context=request.context,
            )
        logger.info(
            "ToolExecutor finished request_id=%s tool=%s in %.3fs ok=%s",
            request.request_id,
            request.tool,
            time.perf_counter() - t,
            response.ok,
        )
        return response

    def run_calls(self, calls: Iterable[ToolCall], context: ToolContext, request_id: str = "batch") -> list[ToolResponse]:
        """Run every call in order; one failing call never stops the rest."""
        return [
            self.run_call(
                ToolRequest(
                    request_id=f"{request_id}:{call.id}",
                    tool=call.tool,
                    args=call.args,
                    context=context,
                )
            )
            for call in calls
        ]

    def run_batch(self, batch: BatchRequest) -> list[ToolResponse]:
        return self.run_calls(batch.calls, batch.context, request_id=batch.request_id)
