from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from shared.utils.enums import UserRole, UserStatus
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class LoginRequest(BaseModel):
    username: str
    password: str


class UserBase(EmptyStringModel):
    model_config = {"use_enum_values": True}

    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[UserRole] = None
    owner_id: Optional[int] = None
    status: Optional[UserStatus] = None


class UserCreate(UserBase):
    username: str = Field(min_length=3)
    password: str = Field(min_length=6)
    role: UserRole = UserRole.OWNER


class UserUpdate(UserBase):
    password: Optional[str] = Field(default=None, min_length=6)


class UserOut(BaseModel):
    id: int
    username: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    role: str
    owner_id: Optional[int] = None
    status: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UserListResponse(BaseModel):
    users: List[UserOut]
    total: int


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut
