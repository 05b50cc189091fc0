import logging
from typing import Optional
from sqlalchemy.orm import Session

from shared.core.config import settings
from shared.models.users import Users
from shared.utils.enums import UserRole, UserStatus
from ...models.space_sites.owners import Owner
from ...schemas.system.users_schemas import UserCreate, UserListResponse, UserOut, UserUpdate

logger = logging.getLogger(__name__)


def get_list(db: Session) -> UserListResponse:
    rows = db.query(Users).order_by(Users.username.asc()).all()
    return {"users": [UserOut.model_validate(u) for u in rows], "total": len(rows)}


def get_by_id(db: Session, user_id: int) -> Optional[Users]:
    return db.query(Users).filter(Users.id == user_id).first()


def _check_owner_link(db: Session, role: str, owner_id: Optional[int]):
    if role == UserRole.OWNER.value:
        if not owner_id:
            raise ValueError("Owner accounts must be linked to an owner")
        if not db.query(Owner).filter(Owner.id == owner_id).first():
            raise ValueError("Owner not found")
    elif owner_id:
        raise ValueError("Only owner accounts can be linked to an owner")


def create(db: Session, payload: UserCreate) -> Users:
    if db.query(Users).filter(Users.username == payload.username).first():
        raise ValueError("Username already exists")
    _check_owner_link(db, payload.role, payload.owner_id)

    data = payload.model_dump(exclude={"password"})
    data["status"] = data.get("status") or UserStatus.ACTIVE.value
    user = Users(**data)
    user.set_password(payload.password)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update(db: Session, user: Users, payload: UserUpdate) -> Users:
    data = payload.model_dump(exclude_unset=True, exclude_none=True)
    password = data.pop("password", None)

    role = data.get("role", user.role)
    owner_id = data.get("owner_id", user.owner_id)
    if role == UserRole.SUPER_ADMIN.value and "owner_id" not in data:
        owner_id = None
        data["owner_id"] = None
    _check_owner_link(db, role, owner_id)

    for key, value in data.items():
        setattr(user, key, value)
    if password:
        user.set_password(password)
    db.commit()
    db.refresh(user)
    return user


def delete(db: Session, user: Users, current_user_id: int):
    if user.id == current_user_id:
        raise ValueError("You cannot delete your own account")
    db.delete(user)
    db.commit()
    return {"message": "User deleted successfully"}


def seed_super_admin(db: Session) -> Optional[Users]:
    username = settings.SUPER_ADMIN_USERNAME
    password = settings.SUPER_ADMIN_PASSWORD
    if not username or not password:
        return None

    if db.query(Users).filter(Users.username == username).first():
        return None

    user = Users(
        username=username,
        role=UserRole.SUPER_ADMIN.value,
        status=UserStatus.ACTIVE.value,
    )
    user.set_password(password)
    db.add(user)
    db.commit()
    logger.info("Seeded super admin '%s'", username)
    return user
