from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import authenticate_user, create_access_token, validate_current_token
from shared.core.database import get_estate_db as get_db
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import not_found
from shared.models.users import Users
from ...schemas.system.users_schemas import LoginRequest, TokenResponse, UserOut

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate_user(db, payload.username, payload.password)
    return {
        "access_token": create_access_token(user),
        "token_type": "bearer",
        "user": UserOut.model_validate(user),
    }


@router.get("/me", response_model=UserOut)
def me(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    user = db.query(Users).filter(Users.id == current_user.user_id).first()
    if not user:
        return not_found("User")
    return user
