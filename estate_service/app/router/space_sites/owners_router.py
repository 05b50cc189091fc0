from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from shared.core.auth import allow_super_admin, validate_current_token
from shared.core.database import get_estate_db as get_db
from shared.core.schemas import Lookup, UserToken
from shared.helpers.json_response_helper import error_response, not_found
from shared.utils.app_status_code import AppStatusCode
from shared.utils.enums import UserRole
from ...crud.financials import reports_crud
from ...crud.space_sites import owners_crud as crud
from ...schemas.financials.reports_schemas import (
    OwnerFinancialTransactionsOut, OwnerRentPaymentsOut, ReportPeriodParams, TopOutstandingsOut
)
from ...schemas.space_sites.owners_schemas import (
    OwnerCreate, OwnerDetailsOut, OwnerListResponse, OwnerOut, OwnerRequest, OwnerUpdate
)

router = APIRouter(
    prefix="/api/owners",
    tags=["owners"],
    dependencies=[Depends(validate_current_token)]
)


def check_own_owner(current_user: UserToken, owner_id: int):
    if current_user.role != UserRole.SUPER_ADMIN.value and current_user.owner_id != owner_id:
        return error_response(
            message="Access denied: you can only view your own owner record",
            status_code=AppStatusCode.AUTHENTICATION_UNAUTHORIZED_ACCESS,
            http_status=403
        )


@router.get("", response_model=OwnerListResponse, dependencies=[Depends(allow_super_admin)])
def get_owners(
    params: OwnerRequest = Depends(),
    db: Session = Depends(get_db)
):
    return crud.get_list(db, params)


@router.get("/lookup", response_model=List[Lookup], dependencies=[Depends(allow_super_admin)])
def owner_lookup(db: Session = Depends(get_db)):
    return crud.owner_lookup(db)


@router.get("/{owner_id}", response_model=OwnerOut)
def get_owner(
    owner_id: int,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    check_own_owner(current_user, owner_id)
    owner = crud.get_by_id(db, owner_id)
    if not owner:
        return not_found("Owner")
    return crud.owner_out(db, owner)


@router.get("/{owner_id}/details", response_model=OwnerDetailsOut)
def get_owner_details(
    owner_id: int,
    as_of: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    check_own_owner(current_user, owner_id)
    owner = crud.get_by_id(db, owner_id)
    if not owner:
        return not_found("Owner")
    return crud.get_details(db, owner, as_of)


@router.get("/{owner_id}/top-outstandings", response_model=TopOutstandingsOut)
def get_top_outstandings(
    owner_id: int,
    limit: int = Query(5, ge=1, le=50),
    as_of: Optional[date] = Query(None),
    currency: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    check_own_owner(current_user, owner_id)
    owner = crud.get_by_id(db, owner_id)
    if not owner:
        return not_found("Owner")
    try:
        return reports_crud.top_outstanding_tenants(db, owner, limit, as_of, currency)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{owner_id}/reports/rent-payments", response_model=OwnerRentPaymentsOut)
def get_owner_rent_payments(
    owner_id: int,
    params: ReportPeriodParams = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    check_own_owner(current_user, owner_id)
    owner = crud.get_by_id(db, owner_id)
    if not owner:
        return not_found("Owner")
    try:
        return reports_crud.owner_rent_payments(db, owner, params)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{owner_id}/reports/financial-transactions", response_model=OwnerFinancialTransactionsOut)
def get_owner_financial_transactions(
    owner_id: int,
    params: ReportPeriodParams = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    check_own_owner(current_user, owner_id)
    owner = crud.get_by_id(db, owner_id)
    if not owner:
        return not_found("Owner")
    try:
        return reports_crud.owner_transactions(db, owner, params)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("", response_model=OwnerOut, dependencies=[Depends(allow_super_admin)])
def create_owner(payload: OwnerCreate, db: Session = Depends(get_db)):
    owner = crud.create(db, payload)
    return crud.owner_out(db, owner)


@router.put("/{owner_id}", response_model=OwnerOut, dependencies=[Depends(allow_super_admin)])
def update_owner(owner_id: int, payload: OwnerUpdate, db: Session = Depends(get_db)):
    owner = crud.get_by_id(db, owner_id)
    if not owner:
        return not_found("Owner")
    return crud.owner_out(db, crud.update(db, owner, payload))


@router.delete("/{owner_id}", response_model=None, dependencies=[Depends(allow_super_admin)])
def delete_owner(owner_id: int, db: Session = Depends(get_db)):
    owner = crud.get_by_id(db, owner_id)
    if not owner:
        return not_found("Owner")
    try:
        return crud.delete(db, owner)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
