from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.auth import allow_super_admin, validate_current_token
from shared.core.database import get_estate_db as get_db
from shared.core.schemas import UserToken
from shared.helpers.property_helper import ensure_allowed, get_allowed_lease_ids
from ...crud.leasing_tenants import rent_invoices_crud as crud
from ...schemas.leasing_tenants.invoices_schemas import (
    GenerateMonthlyResponse, RecalculateResponse, RentInvoiceOut
)

router = APIRouter(
    prefix="/api/invoices",
    tags=["invoices"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("", response_model=List[RentInvoiceOut])
def get_invoices(
    lease_id: int = Query(...),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    ensure_allowed(get_allowed_lease_ids(db, current_user), lease_id, "Lease")
    return crud.get_lease_invoices(db, lease_id)


@router.post("/generate-monthly", response_model=GenerateMonthlyResponse,
             dependencies=[Depends(allow_super_admin)])
def generate_monthly(
    as_of: Optional[date] = Query(None),
    db: Session = Depends(get_db)
):
    return crud.generate_monthly_invoices(db, as_of)


@router.post("/recalculate-fifo", response_model=RecalculateResponse,
             dependencies=[Depends(allow_super_admin)])
def recalculate_fifo(db: Session = Depends(get_db)):
    return {"recalculated_count": crud.recalculate_all(db)}
