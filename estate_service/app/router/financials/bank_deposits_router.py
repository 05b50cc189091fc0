from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from shared.core.auth import allow_super_admin, is_owner_user, validate_current_token
from shared.core.database import get_estate_db as get_db
from shared.core.schemas import DeletionRequest, UserToken
from shared.helpers.json_response_helper import not_found
from ...crud.financials import bank_deposits_crud as crud
from ...schemas.financials.bank_deposits_schemas import (
    BankDepositCreate, BankDepositListResponse, BankDepositOut, BankDepositRequest
)

router = APIRouter(
    prefix="/api/bank-deposits",
    tags=["bank deposits"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("", response_model=BankDepositListResponse)
def get_bank_deposits(
    params: BankDepositRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    owner_id = (current_user.owner_id or 0) if is_owner_user(current_user) else None
    return crud.get_list(db, params, owner_id)


@router.post("", response_model=BankDepositOut, dependencies=[Depends(allow_super_admin)])
def create_bank_deposit(payload: BankDepositCreate, db: Session = Depends(get_db)):
    try:
        return crud.deposit_out(crud.create(db, payload))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{deposit_id}", response_model=None, dependencies=[Depends(allow_super_admin)])
def delete_bank_deposit(
    deposit_id: int,
    payload: DeletionRequest,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    deposit = crud.get_by_id(db, deposit_id)
    if not deposit:
        return not_found("Bank deposit")
    return crud.delete(db, deposit, payload.reason, current_user.user_id)
