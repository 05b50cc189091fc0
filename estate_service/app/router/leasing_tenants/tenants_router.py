from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_estate_db as get_db
from shared.core.schemas import DeletionRequest, UserToken
from shared.helpers.json_response_helper import not_found
from shared.helpers.property_helper import (
    ensure_allowed, get_allowed_lease_ids, get_allowed_tenant_ids
)
from ...crud.leasing_tenants import tenants_crud as crud
from ...schemas.leasing_tenants.tenants_schemas import (
    TenantCreate, TenantDetailOut, TenantListResponse, TenantOut, TenantRequest, TenantUpdate
)

router = APIRouter(
    prefix="/api/tenants",
    tags=["tenants"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("", response_model=TenantListResponse)
def get_tenants(
    params: TenantRequest = Depends(),
    as_of: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_list(
        db, params,
        get_allowed_tenant_ids(db, current_user),
        get_allowed_lease_ids(db, current_user),
        as_of,
    )


@router.get("/{tenant_id}", response_model=TenantDetailOut)
def get_tenant(
    tenant_id: int,
    as_of: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    tenant = crud.get_by_id(db, tenant_id)
    if not tenant:
        return not_found("Tenant")
    ensure_allowed(get_allowed_tenant_ids(db, current_user), tenant.id, "Tenant")
    return crud.get_detail(db, tenant, get_allowed_lease_ids(db, current_user), as_of)


@router.post("", response_model=TenantOut)
def create_tenant(payload: TenantCreate, db: Session = Depends(get_db)):
    return crud.create(db, payload)


@router.put("/{tenant_id}", response_model=TenantOut)
def update_tenant(
    tenant_id: int,
    payload: TenantUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    tenant = crud.get_by_id(db, tenant_id)
    if not tenant:
        return not_found("Tenant")
    ensure_allowed(get_allowed_tenant_ids(db, current_user), tenant.id, "Tenant")
    return crud.update(db, tenant, payload)


@router.delete("/{tenant_id}", response_model=None)
def delete_tenant(
    tenant_id: int,
    payload: DeletionRequest,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    tenant = crud.get_by_id(db, tenant_id)
    if not tenant:
        return not_found("Tenant")
    ensure_allowed(get_allowed_tenant_ids(db, current_user), tenant.id, "Tenant")
    try:
        return crud.delete(db, tenant, payload.reason, current_user.user_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
