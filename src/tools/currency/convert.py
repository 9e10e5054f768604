from __future__ import annotations

from pydantic import ValidationError

from domain.schemas import ToolRequest, ToolResponse
from domain.tool_args import CurrencyConvertArgs
from engine.money import ExchangeRateNotFoundError, convert_to_base, format_currency_amount
from tools._support import error_response, format_validation_errors, ok_response, parse_args
from tools.base import Tool
from tools.registry import register_tool


@register_tool
class CurrencyConvertTool(Tool):
    name = "currency.convert"
    description = (
        "Convert an amount in minor units between currencies using fixed-point exchange rates; "
        "an opposite-direction rate is inverted when no direct rate exists."
    )
    args_model = CurrencyConvertArgs

    def run(self, request: ToolRequest) -> ToolResponse:
        try:
            args = parse_args(CurrencyConvertArgs, request)
        except ValidationError as exc:
            return error_response(request, self.name, format_validation_errors(exc))

        to_currency = args.to_currency or request.context.base_currency.upper()
        try:
            converted = convert_to_base(args.amount, args.from_currency, to_currency, args.rates)
        except ExchangeRateNotFoundError as exc:
            return error_response(request, self.name, [str(exc)])

        return ok_response(
            request,
            self.name,
            {
                "amount": args.amount,
                "from_currency": args.from_currency,
                "to_currency": to_currency,
                "converted": converted,
                "display": format_currency_amount(converted, to_currency, args.currencies),
            },
        )
