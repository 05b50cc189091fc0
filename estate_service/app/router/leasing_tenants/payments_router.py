from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_estate_db as get_db
from shared.core.schemas import DeletionRequest, UserToken
from shared.helpers.json_response_helper import not_found
from shared.helpers.property_helper import ensure_allowed, get_allowed_lease_ids
from ...crud.leasing_tenants import payments_crud as crud
from ...schemas.leasing_tenants.payments_schemas import (
    PaymentCreate, PaymentListResponse, PaymentOut, PaymentRequest, PaymentUpdate
)

router = APIRouter(
    prefix="/api/payments",
    tags=["payments"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("", response_model=PaymentListResponse)
def get_payments(
    params: PaymentRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_list(db, params, get_allowed_lease_ids(db, current_user))


@router.post("", response_model=PaymentOut)
def create_payment(
    payload: PaymentCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    ensure_allowed(get_allowed_lease_ids(db, current_user), payload.lease_id, "Lease")
    try:
        return crud.payment_out(crud.create(db, payload))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{payment_id}", response_model=PaymentOut)
def update_payment(
    payment_id: int,
    payload: PaymentUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    payment = crud.get_by_id(db, payment_id)
    if not payment:
        return not_found("Payment")
    ensure_allowed(get_allowed_lease_ids(db, current_user), payment.lease_id, "Payment")
    try:
        return crud.payment_out(crud.update(db, payment, payload))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{payment_id}", response_model=None)
def delete_payment(
    payment_id: int,
    payload: DeletionRequest,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    payment = crud.get_by_id(db, payment_id)
    if not payment:
        return not_found("Payment")
    ensure_allowed(get_allowed_lease_ids(db, current_user), payment.lease_id, "Payment")
    return crud.delete(db, payment, payload.reason, current_user.user_id)
