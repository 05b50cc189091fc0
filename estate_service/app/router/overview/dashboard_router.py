from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_estate_db as get_db
from shared.core.schemas import UserToken
from shared.helpers.property_helper import get_allowed_shop_ids
from ...crud.overview import dashboard_crud
from ...schemas.overview.dashboard_schema import DashboardStats

router = APIRouter(
    prefix="/api/dashboard",
    tags=["dashboard"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("/stats", response_model=DashboardStats)
def get_dashboard_stats(
    as_of: Optional[date] = Query(None),
    currency: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    try:
        return dashboard_crud.get_stats(
            db, get_allowed_shop_ids(db, current_user), as_of, currency)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
