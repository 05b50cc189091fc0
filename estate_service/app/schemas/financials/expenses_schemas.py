from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

from ...enum.financials_enum import ExpenseAllocation, ExpenseType
from ..common_schemas import DateRangeParams


class ExpenseCreate(BaseModel):
    model_config = {"use_enum_values": True}

    expense_type: ExpenseType
    description: str = Field(min_length=1)
    amount: Decimal = Field(gt=0)
    expense_date: date
    allocation: ExpenseAllocation
    owner_id: Optional[int] = None
    tenant_id: Optional[int] = None
    receipt_ref: Optional[str] = None


class ExpenseOut(BaseModel):
    id: int
    expense_type: str
    description: str
    amount: Decimal
    expense_date: date
    allocation: str
    owner_id: Optional[int] = None
    owner_name: Optional[str] = None
    tenant_id: Optional[int] = None
    receipt_ref: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ExpenseRequest(DateRangeParams):
    allocation: Optional[str] = None
    expense_type: Optional[str] = None
    owner_id: Optional[int] = None


class ExpenseListResponse(BaseModel):
    expenses: List[ExpenseOut]
    total: int
    total_amount: Decimal
