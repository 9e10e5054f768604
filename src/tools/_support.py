from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional, TypeVar
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ValidationError

from domain.schemas import ToolContext, ToolRequest, ToolResponse

logger = logging.getLogger(__name__)

ArgsT = TypeVar("ArgsT", bound=BaseModel)


def parse_args(model: type[ArgsT], request: ToolRequest) -> ArgsT:
    args = request.args if isinstance(request.args, dict) else {}
    return model.model_validate(args)


def format_validation_errors(exc: ValidationError) -> list[str]:
    errors = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "args"
        errors.append(f"{location}: {error.get('msg')}")
    return errors


def ok_response(request: ToolRequest, tool_name: str, result: dict[str, Any]) -> ToolResponse:
    return ToolResponse(request_id=request.request_id, tool=tool_name, result=result, context=request.context)


def error_response(request: ToolRequest, tool_name: str, errors: list[str]) -> ToolResponse:
    return ToolResponse(
        request_id=request.request_id,
        tool=tool_name,
        ok=False,
        errors=errors,
        context=request.context,
    )


def resolve_today(value: Optional[date], context: ToolContext) -> date:
    if value is not None:
        return value
    try:
        zone = ZoneInfo(context.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone=%s, falling back to UTC", context.timezone)
        zone = ZoneInfo("UTC")
    return datetime.now(zone).date()
