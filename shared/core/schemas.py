from datetime import date
from pydantic import BaseModel, Field
from typing import Any, Generic, Optional, TypeVar, Union

from shared.wrappers.empty_string_model_wrapper import EmptyStringModel

# Shared properties
T = TypeVar("T")


class UserToken(BaseModel):
    user_id: int
    username: str
    role: str
    owner_id: Optional[int] = None
    status: Optional[str] = None
    exp: Optional[int] = None


class CommonQueryParams(EmptyStringModel):
    search: Optional[str] = None
    skip: Optional[int] = 0
    limit: Optional[int] = None


class Lookup(BaseModel):
    id: Union[str, int]
    name: str

    class Config:
        from_attributes = True


class DeletionRequest(BaseModel):
    reason: str = Field(min_length=1)
    deletion_date: Optional[date] = None


class JsonOutResult(BaseModel, Generic[T]):
    data: Optional[T] = None
    status: str
    status_code: str
    message: str


class SearchResult(BaseModel):
    type: str
    id: int
    title: str
    subtitle: str
    extra: Optional[Any] = None
