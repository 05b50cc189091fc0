from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from ...ledger.months import MONTH_KEY_PATTERN
from ..common_schemas import DateRangeParams


def clean_rent_months(v: List[str]) -> List[str]:
    for key in v:
        if not MONTH_KEY_PATTERN.match(key):
            raise ValueError(f"Invalid rent month '{key}', expected YYYY-MM")
    # keep order, drop repeats
    return list(dict.fromkeys(v))


class PaymentCreate(BaseModel):
    tenant_id: int
    lease_id: int
    amount: Decimal = Field(gt=0)
    payment_date: date
    rent_months: List[str] = []
    receipt_number: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("rent_months")
    @classmethod
    def validate_rent_months(cls, v):
        return clean_rent_months(v)


class PaymentUpdate(BaseModel):
    # tenant and lease are fixed once recorded
    amount: Optional[Decimal] = Field(default=None, gt=0)
    payment_date: Optional[date] = None
    rent_months: Optional[List[str]] = None
    receipt_number: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("rent_months")
    @classmethod
    def validate_rent_months(cls, v):
        return None if v is None else clean_rent_months(v)


class PaymentOut(BaseModel):
    id: int
    tenant_id: int
    lease_id: int
    tenant_name: Optional[str] = None
    shop_number: Optional[str] = None
    amount: Decimal
    payment_date: date
    rent_months: Optional[List[str]] = None
    receipt_number: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class PaymentRequest(DateRangeParams):
    tenant_id: Optional[int] = None
    lease_id: Optional[int] = None


class PaymentListResponse(BaseModel):
    payments: List[PaymentOut]
    total: int
