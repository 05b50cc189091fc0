from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

from shared.core.schemas import CommonQueryParams
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel
from ...enum.space_sites_enum import OwnershipType, ShopFloor, ShopStatus, SubedariCategory


class ShopBase(EmptyStringModel):
    model_config = {"use_enum_values": True}

    shop_number: Optional[str] = None
    floor: Optional[ShopFloor] = None
    subedari_category: Optional[SubedariCategory] = None
    square_feet: Optional[Decimal] = Field(default=None, ge=0)
    ownership_type: Optional[OwnershipType] = None
    owner_id: Optional[int] = None
    description: Optional[str] = None


class ShopCreate(ShopBase):
    shop_number: str
    floor: ShopFloor
    ownership_type: OwnershipType = OwnershipType.sole


class ShopUpdate(ShopBase):
    status: Optional[ShopStatus] = None


class ShopOut(BaseModel):
    id: int
    shop_number: str
    floor: str
    subedari_category: Optional[str] = None
    square_feet: Optional[Decimal] = None
    status: str
    ownership_type: str
    owner_id: Optional[int] = None
    owner_name: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ShopRequest(CommonQueryParams):
    floor: Optional[str] = None
    status: Optional[str] = None
    ownership_type: Optional[str] = None
    owner_id: Optional[int] = None


class ShopListResponse(BaseModel):
    shops: List[ShopOut]
    total: int
