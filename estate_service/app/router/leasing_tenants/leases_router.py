from datetime import date
from decimal import Decimal
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_estate_db as get_db
from shared.core.schemas import DeletionRequest, UserToken
from shared.helpers.json_response_helper import not_found
from shared.helpers.property_helper import ensure_allowed, get_allowed_shop_ids
from ...crud.leasing_tenants import leases_crud as crud
from ...crud.system.settings_crud import resolve_display
from ...ledger.currency import convert_model
from ...schemas.common_schemas import SettlementRequest
from ...schemas.leasing_tenants.leases_schemas import (
    LeaseCreate, LeaseLedgerOut, LeaseListResponse, LeaseOut, LeaseRequest, LeaseUpdate, PaymentFormOut,
    RentAdjustmentCreate, RentAdjustmentOut, SettlementPreviewOut, TerminateRequest, TerminateResponse
)

router = APIRouter(
    prefix="/api/leases",
    tags=["leases"],
    dependencies=[Depends(validate_current_token)]
)


def get_allowed_lease(db: Session, lease_id: int, current_user: UserToken):
    lease = crud.get_by_id(db, lease_id)
    if not lease:
        return not_found("Lease")
    ensure_allowed(get_allowed_shop_ids(db, current_user), lease.shop_id, "Lease")
    return lease


@router.get("", response_model=LeaseListResponse)
def get_leases(
    params: LeaseRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_list(db, params, get_allowed_shop_ids(db, current_user))


@router.get("/{lease_id}", response_model=LeaseOut)
def get_lease(
    lease_id: int,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.lease_out(get_allowed_lease(db, lease_id, current_user))


@router.post("", response_model=LeaseOut)
def create_lease(
    payload: LeaseCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    ensure_allowed(get_allowed_shop_ids(db, current_user), payload.shop_id, "Shop")
    try:
        return crud.lease_out(crud.create(db, payload))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{lease_id}", response_model=LeaseOut)
def update_lease(
    lease_id: int,
    payload: LeaseUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    lease = get_allowed_lease(db, lease_id, current_user)
    try:
        return crud.lease_out(crud.update(db, lease, payload))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{lease_id}/ledger", response_model=LeaseLedgerOut)
def get_lease_ledger(
    lease_id: int,
    as_of: Optional[date] = Query(None),
    currency: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    lease = get_allowed_lease(db, lease_id, current_user)
    try:
        code, rate = resolve_display(db, currency)
        ledger = crud.get_ledger(db, lease, as_of)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    out = LeaseLedgerOut(**ledger.model_dump(), currency=code,
                         exchange_rate=format(rate, "f"))
    return convert_model(out, rate)


@router.get("/{lease_id}/payment-form-data", response_model=PaymentFormOut)
def get_payment_form_data(
    lease_id: int,
    currency: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    lease = get_allowed_lease(db, lease_id, current_user)
    try:
        code, rate = resolve_display(db, currency)
        form = crud.payment_form_data(db, lease)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    form.currency = code
    form.exchange_rate = format(rate, "f")
    return convert_model(form, rate)


@router.get("/{lease_id}/settlement", response_model=SettlementPreviewOut)
def get_settlement_preview(
    lease_id: int,
    tenant_adjustment: Decimal = Query(Decimal("0"), ge=0),
    owner_adjustment: Decimal = Query(Decimal("0"), ge=0),
    use_security_deposit: bool = Query(False),
    as_of: Optional[date] = Query(None),
    currency: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    lease = get_allowed_lease(db, lease_id, current_user)
    request = SettlementRequest(
        tenant_adjustment=tenant_adjustment,
        owner_adjustment=owner_adjustment,
        use_security_deposit=use_security_deposit,
    )
    try:
        code, rate = resolve_display(db, currency)
        preview = crud.settlement_preview(db, lease, request, as_of)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    preview.currency = code
    preview.exchange_rate = format(rate, "f")
    return convert_model(preview, rate)


@router.post("/{lease_id}/terminate", response_model=TerminateResponse)
def terminate_lease(
    lease_id: int,
    payload: TerminateRequest,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    lease = get_allowed_lease(db, lease_id, current_user)
    try:
        return crud.terminate(db, lease, payload, current_user.user_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{lease_id}/rent-adjustments", response_model=List[RentAdjustmentOut])
def get_rent_adjustments(
    lease_id: int,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    lease = get_allowed_lease(db, lease_id, current_user)
    return crud.get_rent_adjustments(db, lease.id)


@router.post("/{lease_id}/rent-adjustments", response_model=RentAdjustmentOut)
def create_rent_adjustment(
    lease_id: int,
    payload: RentAdjustmentCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    lease = get_allowed_lease(db, lease_id, current_user)
    try:
        return crud.create_rent_adjustment(db, lease, payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{lease_id}", response_model=None)
def delete_lease(
    lease_id: int,
    payload: DeletionRequest,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    lease = get_allowed_lease(db, lease_id, current_user)
    try:
        return crud.delete(db, lease, payload.reason, current_user.user_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
