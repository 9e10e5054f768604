from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ValidationError

from domain.schemas import ToolRequest, ToolResponse
from tools._support import error_response, format_validation_errors, ok_response, parse_args


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    args_schema: dict[str, Any]


class Tool(ABC):
    name: str
    description: str = ""
    args_model: Optional[type[BaseModel]] = None

    @abstractmethod
    def run(self, request: ToolRequest) -> ToolResponse:
        raise NotImplementedError

    def spec(self) -> ToolSpec:
        schema = self.args_model.model_json_schema() if self.args_model is not None else {}
        return ToolSpec(name=self.name, description=self.description, args_schema=schema)


class EngineTool(Tool):
    """
    A tool that validates `request.args` against `args_model` and hands the
    parsed model to `execute`. Argument errors come back as a failed response
    instead of an exception.
    """

    args_model: type[BaseModel]

    @abstractmethod
    def execute(self, args: Any, request: ToolRequest) -> dict[str, Any]:
        raise NotImplementedError

    def run(self, request: ToolRequest) -> ToolResponse:
        try:
            args = parse_args(self.args_model, request)
        except ValidationError as exc:
            return error_response(request, self.name, format_validation_errors(exc))
        return ok_response(request, self.name, self.execute(args, request))
