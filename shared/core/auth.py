from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from shared.models.users import Users
from shared.utils.app_status_code import AppStatusCode
from shared.utils.enums import UserRole, UserStatus
from shared.core.config import settings
from shared.helpers.json_response_helper import error_response
from shared.core.schemas import UserToken
from shared.core.database import get_estate_db as get_db

security = HTTPBearer()


def create_access_token(user: Users, expires_minutes: Optional[int] = None) -> str:
    expires = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or settings.JWT_EXPIRE_MINUTES)
    payload = {
        "user_id": user.id,
        "username": user.username,
        "role": user.role,
        "owner_id": user.owner_id,
        "exp": expires,
    }
    return jwt.encode(payload, settings.JWT_SECRET,
                      algorithm=settings.JWT_ALGORITHM)


def authenticate_user(db: Session, username: str, password: str) -> Users:
    user = db.query(Users).filter(Users.username == username).first()

    if not user or not user.verify_password(password):
        return error_response(
            message="Invalid username or password",
            status_code=AppStatusCode.AUTHENTICATION_CREDENTIALS_INVALID,
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    if user.status != UserStatus.ACTIVE.value:
        return error_response(
            message="User is not active. Access denied",
            status_code=AppStatusCode.AUTHENTICATION_USER_INACTIVE,
            http_status=status.HTTP_403_FORBIDDEN
        )

    return user


def verify_token(token: str) -> UserToken:
    """Verify and decode a JWT token."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET,
                             algorithms=[settings.JWT_ALGORITHM])
        return UserToken(**payload)
    except (JWTError, ValueError):
        return error_response(
            message="Invalid or expired token",
            status_code=AppStatusCode.AUTHENTICATION_TOKEN_EXPIRED,
            http_status=status.HTTP_401_UNAUTHORIZED
        )


def validate_current_token(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> UserToken:
    user_data = verify_token(credentials.credentials)

    user = db.query(Users).filter(Users.id == user_data.user_id).first()

    if not user:
        return error_response(
            message="User not found",
            status_code=AppStatusCode.AUTHENTICATION_USER_INVALID,
            http_status=404
        )

    if user.status != UserStatus.ACTIVE.value:
        return error_response(
            message="User is not active. Access denied",
            status_code=AppStatusCode.AUTHENTICATION_USER_INACTIVE,
            http_status=403
        )

    # role and owner may have changed since the token was issued
    user_data.role = user.role
    user_data.owner_id = user.owner_id
    user_data.status = user.status
    return user_data


def allow_super_admin(current_user: UserToken = Depends(validate_current_token)) -> UserToken:
    if current_user.role != UserRole.SUPER_ADMIN.value:
        return error_response(
            message="Access forbidden: super admins only",
            status_code=AppStatusCode.UNAUTHORIZED_ACTION,
            http_status=403
        )

    return current_user


def is_owner_user(user: UserToken) -> bool:
    return user.role == UserRole.OWNER.value
