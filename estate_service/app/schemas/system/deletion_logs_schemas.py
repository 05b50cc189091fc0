from datetime import datetime
from typing import Any, List, Optional
from pydantic import BaseModel

from shared.core.schemas import CommonQueryParams


class DeletionLogOut(BaseModel):
    id: int
    record_type: str
    record_id: int
    record_details: Any
    reason: str
    deleted_by: Optional[int] = None
    deleted_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class DeletionLogRequest(CommonQueryParams):
    record_type: Optional[str] = None


class DeletionLogListResponse(BaseModel):
    logs: List[DeletionLogOut]
    total: int
