from datetime import date
from decimal import Decimal
from typing import List
from pydantic import BaseModel


class RentInvoiceOut(BaseModel):
    id: int
    lease_id: int
    tenant_id: int
    amount: Decimal
    paid_amount: Decimal
    due_date: date
    month: int
    year: int
    is_paid: bool

    model_config = {"from_attributes": True}


class GenerateMonthlyResponse(BaseModel):
    month_key: str
    generated: int
    lease_ids: List[int] = []


class RecalculateResponse(BaseModel):
    recalculated_count: int
