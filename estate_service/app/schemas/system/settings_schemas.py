from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field


class CurrencySettingsOut(BaseModel):
    base_currency: str
    display_currency: str
    exchange_rate: str


class CurrencySettingsUpdate(BaseModel):
    display_currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    exchange_rate: Optional[Decimal] = Field(default=None, gt=0)
