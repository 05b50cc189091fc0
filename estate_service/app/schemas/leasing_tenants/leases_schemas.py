from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

from shared.core.schemas import CommonQueryParams
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel
from ...ledger.ledger_calculator import LeaseLedger
from ...ledger.payment_form import PaymentFormData
from ...ledger.settlement_calculator import SettlementResult
from ..common_schemas import DisplayCurrency, SettlementRequest


class LeaseBase(EmptyStringModel):
    tenant_id: Optional[int] = None
    shop_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    security_deposit: Optional[Decimal] = Field(default=None, ge=0)
    monthly_rent: Optional[Decimal] = Field(default=None, gt=0)
    opening_due_balance: Optional[Decimal] = Field(default=None, ge=0)
    notes: Optional[str] = None


class LeaseCreate(LeaseBase):
    tenant_id: int
    shop_id: int
    start_date: date
    end_date: date
    monthly_rent: Decimal = Field(gt=0)
    security_deposit: Decimal = Field(default=Decimal("0"), ge=0)
    opening_due_balance: Decimal = Field(default=Decimal("0"), ge=0)


class LeaseUpdate(LeaseBase):
    pass


class LeaseOut(BaseModel):
    id: int
    tenant_id: int
    shop_id: int
    tenant_name: Optional[str] = None
    shop_number: Optional[str] = None
    start_date: date
    end_date: date
    security_deposit: Decimal
    security_deposit_used: Decimal
    monthly_rent: Decimal
    # rent in force this month, follows the adjustment history
    current_rent: Optional[Decimal] = None
    opening_due_balance: Decimal
    status: str
    notes: Optional[str] = None
    termination_notes: Optional[str] = None
    terminated_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class LeaseRequest(CommonQueryParams):
    status: Optional[str] = None
    tenant_id: Optional[int] = None
    shop_id: Optional[int] = None


class LeaseListResponse(BaseModel):
    leases: List[LeaseOut]
    total: int


class LeaseLedgerOut(LeaseLedger, DisplayCurrency):
    pass


class PaymentFormOut(PaymentFormData, DisplayCurrency):
    tenant_name: Optional[str] = None


class SettlementPreviewOut(SettlementResult, DisplayCurrency):
    lease_id: int
    as_of: date


class TerminateRequest(SettlementRequest):
    termination_notes: Optional[str] = None
    termination_date: Optional[date] = None
    # preview-only unless explicitly committed
    commit_settlement: bool = False


class TerminateResponse(BaseModel):
    lease: LeaseOut
    settlement: SettlementResult
    settlement_committed: bool


class RentAdjustmentCreate(BaseModel):
    new_rent: Decimal = Field(gt=0)
    effective_date: date
    agreement_terms: Optional[str] = None
    notes: Optional[str] = None


class RentAdjustmentOut(BaseModel):
    id: int
    lease_id: int
    previous_rent: Decimal
    new_rent: Decimal
    adjustment_amount: Decimal
    effective_date: date
    agreement_terms: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
