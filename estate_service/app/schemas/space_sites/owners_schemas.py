from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel

from shared.core.schemas import CommonQueryParams
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class OwnerBase(EmptyStringModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    bank_name: Optional[str] = None
    bank_account_number: Optional[str] = None
    bank_branch: Optional[str] = None


class OwnerCreate(OwnerBase):
    name: str


class OwnerUpdate(OwnerBase):
    pass


class OwnerOut(OwnerBase):
    id: int
    shop_count: Optional[int] = 0
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class OwnerRequest(CommonQueryParams):
    pass


class OwnerListResponse(BaseModel):
    owners: List[OwnerOut]
    total: int


class OwnerTenantRow(BaseModel):
    lease_id: int
    tenant_id: int
    tenant_name: str
    phone: Optional[str] = None
    shop_id: int
    shop_number: str
    floor: str
    floor_label: str
    monthly_rent: Decimal
    security_deposit: Decimal
    current_due: Decimal
    last_payment_date: Optional[str] = None


class OwnerDetailsOut(BaseModel):
    owner: OwnerOut
    shop_count: int
    tenants: List[OwnerTenantRow]
    total_security_deposit: Decimal
    total_outstanding_dues: Decimal
