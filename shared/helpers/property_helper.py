from typing import Optional, Set
from sqlalchemy import or_
from sqlalchemy.orm import Session

from estate_service.app.models.leasing_tenants.leases import Lease
from estate_service.app.models.space_sites.shops import Shop
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import error_response
from shared.utils.app_status_code import AppStatusCode
from shared.utils.enums import UserRole


def get_allowed_shop_ids(db: Session, user: UserToken) -> Optional[Set[int]]:
    """
    Shops the user may see. ``None`` means unrestricted (super admin).
    Owners see the shops they own plus every common shop.
    """
    if user.role == UserRole.SUPER_ADMIN.value:
        return None

    if not user.owner_id:
        return set()

    rows = (
        db.query(Shop.id)
        .filter(
            or_(
                Shop.owner_id == user.owner_id,
                Shop.ownership_type == "common",
            )
        )
        .all()
    )
    return {r.id for r in rows}


def get_allowed_lease_ids(db: Session, user: UserToken) -> Optional[Set[int]]:
    shop_ids = get_allowed_shop_ids(db, user)
    if shop_ids is None:
        return None
    if not shop_ids:
        return set()

    rows = db.query(Lease.id).filter(Lease.shop_id.in_(shop_ids)).all()
    return {r.id for r in rows}


def get_allowed_tenant_ids(db: Session, user: UserToken) -> Optional[Set[int]]:
    shop_ids = get_allowed_shop_ids(db, user)
    if shop_ids is None:
        return None
    if not shop_ids:
        return set()

    rows = (
        db.query(Lease.tenant_id)
        .filter(Lease.shop_id.in_(shop_ids))
        .distinct()
        .all()
    )
    return {r.tenant_id for r in rows}


def ensure_allowed(allowed: Optional[Set[int]], record_id: int, entity: str = "Record"):
    if allowed is not None and record_id not in allowed:
        return error_response(
            message=f"Access denied: {entity} is outside your portfolio",
            status_code=AppStatusCode.AUTHENTICATION_UNAUTHORIZED_ACCESS,
            http_status=403
        )
