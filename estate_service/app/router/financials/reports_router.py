from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_estate_db as get_db
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import error_response, not_found
from shared.helpers.property_helper import (
    ensure_allowed, get_allowed_lease_ids, get_allowed_shop_ids, get_allowed_tenant_ids
)
from shared.utils.app_status_code import AppStatusCode
from shared.utils.enums import UserRole
from ...crud.financials import reports_crud as crud
from ...crud.leasing_tenants import tenants_crud
from ...crud.space_sites import owners_crud
from ...schemas.financials.reports_schemas import (
    CollectionReportOut, MonthlyDepositSummaryOut, OwnerStatementOut, OwnerStatementRequest,
    ShopAvailabilityOut, TenantStatementOut
)
from ..space_sites.owners_router import check_own_owner

router = APIRouter(
    prefix="/api/reports",
    tags=["reports"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("/owner-statement", response_model=OwnerStatementOut)
def get_owner_statement(
    params: OwnerStatementRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    check_own_owner(current_user, params.owner_id)
    owner = owners_crud.get_by_id(db, params.owner_id)
    if not owner:
        return not_found("Owner")
    try:
        return crud.owner_statement(db, owner, params.start_date, params.end_date, params.currency)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/tenant-ledger", response_model=TenantStatementOut)
def get_tenant_ledger(
    tenant_id: int = Query(...),
    as_of: Optional[date] = Query(None),
    currency: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    tenant = tenants_crud.get_by_id(db, tenant_id)
    if not tenant:
        return not_found("Tenant")
    ensure_allowed(get_allowed_tenant_ids(db, current_user), tenant.id, "Tenant")
    try:
        return crud.tenant_ledger(
            db, tenant, get_allowed_lease_ids(db, current_user), as_of, currency)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/collection", response_model=CollectionReportOut)
def get_collection_report(
    as_of: Optional[date] = Query(None),
    currency: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    try:
        return crud.collection(db, get_allowed_shop_ids(db, current_user), as_of, currency)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/monthly-deposit-summary", response_model=MonthlyDepositSummaryOut)
def get_monthly_deposit_summary(
    owner_id: Optional[int] = Query(None),
    year: Optional[int] = Query(None),
    currency: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    # owners only ever see their own rows
    if current_user.role != UserRole.SUPER_ADMIN.value:
        if current_user.owner_id is None:
            return error_response(
                message="Access denied: user is not linked to an owner",
                status_code=AppStatusCode.AUTHENTICATION_UNAUTHORIZED_ACCESS,
                http_status=403
            )
        owner_id = owner_id or current_user.owner_id
        check_own_owner(current_user, owner_id)

    if owner_id is not None and not owners_crud.get_by_id(db, owner_id):
        return not_found("Owner")
    try:
        return crud.monthly_deposits(db, owner_id, year, currency)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/shop-availability", response_model=ShopAvailabilityOut)
def get_shop_availability(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.shop_availability(db, get_allowed_shop_ids(db, current_user))
