from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_super_admin
from shared.core.database import get_estate_db as get_db
from ...crud.system import deletion_logs_crud as crud
from ...schemas.system.deletion_logs_schemas import DeletionLogListResponse, DeletionLogRequest

router = APIRouter(
    prefix="/api/deletion-logs",
    tags=["deletion logs"],
    dependencies=[Depends(allow_super_admin)]
)


@router.get("", response_model=DeletionLogListResponse)
def get_deletion_logs(
    params: DeletionLogRequest = Depends(),
    db: Session = Depends(get_db)
):
    return crud.get_list(db, params)
