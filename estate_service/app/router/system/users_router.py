from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from shared.core.auth import allow_super_admin
from shared.core.database import get_estate_db as get_db
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import not_found
from ...crud.system import users_crud as crud
from ...schemas.system.users_schemas import UserCreate, UserListResponse, UserOut, UserUpdate

router = APIRouter(
    prefix="/api/users",
    tags=["users"],
    dependencies=[Depends(allow_super_admin)]
)


@router.get("", response_model=UserListResponse)
def get_users(db: Session = Depends(get_db)):
    return crud.get_list(db)


@router.post("", response_model=UserOut)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    try:
        return crud.create(db, payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{user_id}", response_model=UserOut)
def update_user(user_id: int, payload: UserUpdate, db: Session = Depends(get_db)):
    user = crud.get_by_id(db, user_id)
    if not user:
        return not_found("User")
    try:
        return crud.update(db, user, payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{user_id}", response_model=None)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_super_admin)
):
    user = crud.get_by_id(db, user_id)
    if not user:
        return not_found("User")
    try:
        return crud.delete(db, user, current_user.user_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
