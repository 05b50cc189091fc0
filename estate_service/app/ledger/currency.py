from decimal import Decimal
from typing import Any, TypeVar
from pydantic import BaseModel

from .exceptions import LedgerInputError
from .money import quantize, to_decimal

M = TypeVar("M", bound=BaseModel)


def to_display(amount: Any, exchange_rate: Any) -> Decimal:
    """Presentation-only conversion, stored amounts are never touched."""
    rate = to_decimal(exchange_rate)
    if rate <= 0:
        raise LedgerInputError("Exchange rate must be greater than zero")
    return quantize(to_decimal(amount) * rate)


def convert_amounts(value: Any, exchange_rate: Any) -> Any:
    # every Decimal in a ledger payload is money
    if isinstance(value, Decimal):
        return to_display(value, exchange_rate)
    if isinstance(value, dict):
        return {k: convert_amounts(v, exchange_rate) for k, v in value.items()}
    if isinstance(value, list):
        return [convert_amounts(v, exchange_rate) for v in value]
    return value


def convert_model(model: M, exchange_rate: Any) -> M:
    if to_decimal(exchange_rate) == 1:
        return model
    return type(model).model_validate(
        convert_amounts(model.model_dump(), exchange_rate))
