from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from shared.core.auth import allow_super_admin, is_owner_user, validate_current_token
from shared.core.database import get_estate_db as get_db
from shared.core.schemas import DeletionRequest, UserToken
from shared.helpers.json_response_helper import not_found
from ...crud.financials import expenses_crud as crud
from ...schemas.financials.expenses_schemas import (
    ExpenseCreate, ExpenseListResponse, ExpenseOut, ExpenseRequest
)

router = APIRouter(
    prefix="/api/expenses",
    tags=["expenses"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("", response_model=ExpenseListResponse)
def get_expenses(
    params: ExpenseRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    owner_id = (current_user.owner_id or 0) if is_owner_user(current_user) else None
    return crud.get_list(db, params, owner_id)


@router.post("", response_model=ExpenseOut, dependencies=[Depends(allow_super_admin)])
def create_expense(payload: ExpenseCreate, db: Session = Depends(get_db)):
    try:
        return crud.expense_out(crud.create(db, payload))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{expense_id}", response_model=None, dependencies=[Depends(allow_super_admin)])
def delete_expense(
    expense_id: int,
    payload: DeletionRequest,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    expense = crud.get_by_id(db, expense_id)
    if not expense:
        return not_found("Expense")
    return crud.delete(db, expense, payload.reason, current_user.user_id)
