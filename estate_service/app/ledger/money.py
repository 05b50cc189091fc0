from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable

from .exceptions import LedgerInputError

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value: Any) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise LedgerInputError(f"Invalid money value: {value!r}")
    if isinstance(value, float):
        # go through str so 0.1 stays 0.1
        value = str(value)
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise LedgerInputError(f"Invalid money value: {value!r}")


def quantize(value: Any) -> Decimal:
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def money_sum(values: Iterable[Any]) -> Decimal:
    total = ZERO
    for v in values:
        total += to_decimal(v)
    return quantize(total)


def money_str(value: Any) -> str:
    return format(quantize(value), "f")
