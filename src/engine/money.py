"""Fixed-point money helpers shared by every engine module.

Amounts are integer minor units (cents). Exchange rates are integers scaled by
`RATE_PRECISION` so conversion never touches binary floating point.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Iterable, Union

if TYPE_CHECKING:
    from domain.schemas import CurrencyInfo, ExchangeRate

logger = logging.getLogger(__name__)

RATE_PRECISION = 1_000_000

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "CAD": "CA$",
    "AUD": "A$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "INR": "₹",
}

Number = Union[int, str, Decimal]


class ExchangeRateNotFoundError(LookupError):
    pass


def round_half_up(value: Number) -> int:
    """Round to the nearest integer; halves go away from zero."""
    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def rate_to_fixed(rate_decimal: Number) -> int:
    return round_half_up(Decimal(str(rate_decimal).strip()) * RATE_PRECISION)


def _group_digits(units: int, decimal_places: int) -> str:
    scaled = Decimal(units).scaleb(-decimal_places)
    if decimal_places == 0:
        return f"{scaled:,.0f}"
    return f"{scaled:,.{decimal_places}f}"


def _with_symbol(symbol: str, body: str, negative: bool) -> str:
    # Letter-only symbols such as ISO codes get a space (CHF 12.50); others hug the number ($12.50, CA$12.50).
    text = f"{symbol} {body}" if symbol.isalpha() else f"{symbol}{body}"
    return f"-{text}" if negative else text


def format_cents(cents: int, currency: str = "USD") -> str:
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), currency.upper())
    return _with_symbol(symbol, _group_digits(abs(cents), 2), cents < 0)


def format_currency_amount(amount: int, currency_code: str, currencies: Iterable["CurrencyInfo"]) -> str:
    currency = next((c for c in currencies if c.code == currency_code), None)
    symbol = currency.symbol if currency is not None else currency_code
    decimal_places = currency.decimal_places if currency is not None else 2
    return _with_symbol(symbol, _group_digits(abs(amount), decimal_places), amount < 0)


def convert_amount(amount: int, rate: int) -> int:
    return round_half_up(Decimal(amount) * Decimal(rate) / RATE_PRECISION)


def invert_rate(rate: int) -> int:
    return round_half_up(Decimal(RATE_PRECISION * RATE_PRECISION) / Decimal(rate))


def convert_to_base(
    amount: int,
    from_currency: str,
    base_currency: str,
    rates: Iterable["ExchangeRate"],
) -> int:
    """
    Convert `amount` (minor units of `from_currency`) into `base_currency`.

    A direct rate wins; otherwise the opposite-direction rate is inverted at
    fixed-point precision.
    """
    if from_currency == base_currency:
        return amount

    rates = list(rates)
    for rate in rates:
        if rate.from_currency == from_currency and rate.to_currency == base_currency:
            return convert_amount(amount, rate.rate)

    for rate in rates:
        if rate.from_currency == base_currency and rate.to_currency == from_currency:
            logger.debug("Using inverse rate %s->%s for conversion", base_currency, from_currency)
            return convert_amount(amount, invert_rate(rate.rate))

    raise ExchangeRateNotFoundError(f"No exchange rate found for {from_currency} -> {base_currency}")
