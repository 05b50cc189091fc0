from datetime import date
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field

from shared.core.schemas import CommonQueryParams


class DisplayCurrency(BaseModel):
    currency: Optional[str] = None
    exchange_rate: Optional[str] = None


class DateRangeParams(CommonQueryParams):
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class SettlementRequest(BaseModel):
    tenant_adjustment: Decimal = Field(default=Decimal("0"), ge=0)
    owner_adjustment: Decimal = Field(default=Decimal("0"), ge=0)
    use_security_deposit: bool = False
