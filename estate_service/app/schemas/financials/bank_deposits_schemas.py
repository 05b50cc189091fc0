from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

from ..common_schemas import DateRangeParams


class BankDepositCreate(BaseModel):
    owner_id: int
    amount: Decimal = Field(gt=0)
    deposit_date: date
    bank_name: str = Field(min_length=1)
    deposit_slip_ref: Optional[str] = None
    notes: Optional[str] = None


class BankDepositOut(BaseModel):
    id: int
    owner_id: int
    owner_name: Optional[str] = None
    amount: Decimal
    deposit_date: date
    bank_name: str
    deposit_slip_ref: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class BankDepositRequest(DateRangeParams):
    owner_id: Optional[int] = None


class BankDepositListResponse(BaseModel):
    deposits: List[BankDepositOut]
    total: int
    total_amount: Decimal
