from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

from shared.core.schemas import CommonQueryParams
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel
from ...ledger.ledger_calculator import LedgerSummary


class TenantBase(EmptyStringModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    business_name: Optional[str] = None
    nid_passport: Optional[str] = None
    permanent_address: Optional[str] = None
    photo_url: Optional[str] = None
    opening_due_balance: Optional[Decimal] = Field(default=None, ge=0)


class TenantCreate(TenantBase):
    name: str
    phone: str
    opening_due_balance: Decimal = Field(default=Decimal("0"), ge=0)


class TenantUpdate(TenantBase):
    pass


class TenantOut(TenantBase):
    id: int
    current_due: Optional[Decimal] = None
    active_lease_count: Optional[int] = 0
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TenantRequest(CommonQueryParams):
    has_dues: Optional[bool] = None


class TenantListResponse(BaseModel):
    tenants: List[TenantOut]
    total: int


class TenantLeaseSummary(BaseModel):
    lease_id: int
    shop_id: int
    shop_number: Optional[str] = None
    status: str
    monthly_rent: Decimal
    summary: LedgerSummary


class TenantDetailOut(BaseModel):
    tenant: TenantOut
    leases: List[TenantLeaseSummary]
    current_due: Decimal
