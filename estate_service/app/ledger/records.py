from datetime import date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, field_validator

from .months import parse_month_key

# Read-only snapshots of stored rows handed to the calculators.
# Built straight from ORM objects with Model.model_validate(row).


class RecordBase(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)


class LeaseRecord(RecordBase):
    id: int
    tenant_id: int
    shop_id: int
    start_date: date
    end_date: date
    monthly_rent: Decimal
    opening_due_balance: Decimal = Decimal("0")
    security_deposit: Decimal = Decimal("0")
    security_deposit_used: Decimal = Decimal("0")
    status: str = "active"

    @field_validator("opening_due_balance", "security_deposit", "security_deposit_used", mode="before")
    @classmethod
    def none_to_zero(cls, v):
        return Decimal("0") if v is None else v

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v):
        return v or "active"


class InvoiceRecord(RecordBase):
    id: Optional[int] = None
    lease_id: int
    tenant_id: Optional[int] = None
    amount: Decimal
    month: int
    year: int
    due_date: Optional[date] = None
    paid_amount: Optional[Decimal] = None
    is_paid: Optional[bool] = None

    @field_validator("month")
    @classmethod
    def valid_month(cls, v):
        if not 1 <= v <= 12:
            raise ValueError("month must be between 1 and 12")
        return v


class PaymentRecord(RecordBase):
    id: Optional[int] = None
    lease_id: int
    tenant_id: Optional[int] = None
    amount: Decimal
    payment_date: date
    rent_months: List[str] = []
    is_deleted: bool = False

    @field_validator("rent_months", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return [] if v is None else v

    @field_validator("rent_months")
    @classmethod
    def valid_month_keys(cls, v):
        for key in v:
            parse_month_key(key)
        return v

    @field_validator("is_deleted", mode="before")
    @classmethod
    def none_to_false(cls, v):
        return bool(v)


class AdjustmentRecord(RecordBase):
    id: Optional[int] = None
    lease_id: int
    previous_rent: Decimal
    new_rent: Decimal
    adjustment_amount: Decimal
    effective_date: date


class ExpenseRecord(RecordBase):
    id: Optional[int] = None
    expense_type: str
    description: Optional[str] = None
    amount: Decimal
    expense_date: date
    allocation: str
    owner_id: Optional[int] = None
    tenant_id: Optional[int] = None


class ShopRecord(RecordBase):
    id: int
    shop_number: str
    floor: str
    subedari_category: Optional[str] = None
    status: str
    ownership_type: str
    owner_id: Optional[int] = None


class DepositRecord(RecordBase):
    id: Optional[int] = None
    owner_id: int
    amount: Decimal
    deposit_date: date
    bank_name: Optional[str] = None
    deposit_slip_ref: Optional[str] = None
    is_deleted: bool = False

    @field_validator("is_deleted", mode="before")
    @classmethod
    def none_to_false(cls, v):
        return bool(v)


def active_payments(payments: List[PaymentRecord]) -> List[PaymentRecord]:
    return [p for p in payments if not p.is_deleted]
