import re
from datetime import datetime, timezone
from typing import Optional, Set
from sqlalchemy import func
from sqlalchemy.orm import Session

from shared.core.schemas import Lookup
from ...enum.leasing_tenants_enum import LeaseStatus
from ...enum.space_sites_enum import (
    FLOOR_ORDER, SHOP_PREFIX_ORDER, OwnershipType, ShopFloor, ShopStatus
)
from ...enum.system_enum import DeletionRecordType
from ...models.leasing_tenants.leases import Lease
from ...models.space_sites.owners import Owner
from ...models.space_sites.shops import Shop
from ...schemas.space_sites.shops_schemas import (
    ShopCreate, ShopListResponse, ShopOut, ShopRequest, ShopUpdate
)
from ..system.deletion_logs_crud import log_deletion

SHOP_NUMBER_PATTERN = re.compile(r"^([A-Za-z]*)[-\s]*(\d*)")


def shop_sort_key(floor: str, shop_number: str):
    """Ground to subedari, then E/M/W wing, then the numeric part."""
    match = SHOP_NUMBER_PATTERN.match(shop_number.strip())
    prefix = match.group(1).upper()[:1] if match else ""
    digits = match.group(2) if match else ""
    return (
        FLOOR_ORDER.get(floor, len(FLOOR_ORDER)),
        SHOP_PREFIX_ORDER.get(prefix, len(SHOP_PREFIX_ORDER)),
        int(digits) if digits else 0,
        shop_number,
    )


def shop_out(shop: Shop) -> ShopOut:
    out = ShopOut.model_validate(shop)
    out.owner_name = shop.owner.name if shop.owner else None
    return out


def build_filters(params: ShopRequest, allowed_shop_ids: Optional[Set[int]]):
    filters = [Shop.is_deleted == False]

    if allowed_shop_ids is not None:
        filters.append(Shop.id.in_(allowed_shop_ids))

    if params.floor and params.floor.lower() != "all":
        filters.append(Shop.floor == params.floor)

    if params.status and params.status.lower() != "all":
        filters.append(Shop.status == params.status)

    if params.ownership_type and params.ownership_type.lower() != "all":
        filters.append(Shop.ownership_type == params.ownership_type)

    if params.owner_id:
        filters.append(Shop.owner_id == params.owner_id)

    if params.search:
        filters.append(Shop.shop_number.ilike(f"%{params.search}%"))

    return filters


# ----------------------------------------------------
# ✅ Get list in floor / wing / number order
# ----------------------------------------------------
def get_list(db: Session, params: ShopRequest,
             allowed_shop_ids: Optional[Set[int]] = None) -> ShopListResponse:
    rows = db.query(Shop).filter(*build_filters(params, allowed_shop_ids)).all()
    rows.sort(key=lambda s: shop_sort_key(s.floor, s.shop_number))

    total = len(rows)
    end = params.skip + params.limit if params.limit else None
    return {"shops": [shop_out(s) for s in rows[params.skip:end]], "total": total}


def get_by_id(db: Session, shop_id: int) -> Optional[Shop]:
    return (
        db.query(Shop)
        .filter(Shop.id == shop_id, Shop.is_deleted == False)
        .first()
    )


def _validate(db: Session, data: dict, shop_id: Optional[int] = None):
    number = data.get("shop_number")
    if number is not None:
        duplicate = db.query(Shop).filter(
            func.lower(Shop.shop_number) == number.lower())
        if shop_id:
            duplicate = duplicate.filter(Shop.id != shop_id)
        if duplicate.first():
            raise ValueError(f"Shop number {number} already exists")

    if data.get("floor") == ShopFloor.subedari.value:
        if not data.get("subedari_category"):
            raise ValueError("Subedari shops need a subedari category")
    elif data.get("subedari_category"):
        raise ValueError(
            "Subedari category is only allowed on the subedari floor")

    if data.get("ownership_type") == OwnershipType.sole.value:
        owner_id = data.get("owner_id")
        if not owner_id:
            raise ValueError("Sole ownership requires an owner")
        if not db.query(Owner).filter(Owner.id == owner_id).first():
            raise ValueError("Owner not found")
    elif data.get("owner_id"):
        raise ValueError("Common shops cannot have an owner")


def create(db: Session, payload: ShopCreate) -> Shop:
    data = payload.model_dump(exclude_none=True)
    data["shop_number"] = data["shop_number"].strip()
    _validate(db, data)

    shop = Shop(**data, status=ShopStatus.vacant.value, is_deleted=False)
    db.add(shop)
    db.commit()
    db.refresh(shop)
    return shop


def update(db: Session, shop: Shop, payload: ShopUpdate) -> Shop:
    changes = payload.model_dump(exclude_unset=True)
    if "shop_number" in changes and changes["shop_number"]:
        changes["shop_number"] = changes["shop_number"].strip()

    open_lease = db.query(Lease).filter(
        Lease.shop_id == shop.id,
        Lease.status != LeaseStatus.terminated.value
    ).first()
    if "status" in changes and changes["status"] != shop.status and open_lease:
        raise ValueError("Shop status follows its lease while one is active")

    merged = {
        "shop_number": changes.get("shop_number") if "shop_number" in changes else None,
        "floor": changes.get("floor", shop.floor),
        "subedari_category": changes.get("subedari_category", shop.subedari_category),
        "ownership_type": changes.get("ownership_type", shop.ownership_type),
        "owner_id": changes.get("owner_id", shop.owner_id),
    }
    # switching to common drops the owner
    if "ownership_type" in changes and merged["ownership_type"] == OwnershipType.common.value \
            and "owner_id" not in changes:
        merged["owner_id"] = None
        changes["owner_id"] = None
    if merged["floor"] != ShopFloor.subedari.value and "subedari_category" not in changes:
        merged["subedari_category"] = None
        changes["subedari_category"] = None
    _validate(db, merged, shop.id)

    for key, value in changes.items():
        if key == "shop_number" and not value:
            continue
        if key == "status" and value is None:
            continue
        setattr(shop, key, value)
    db.commit()
    db.refresh(shop)
    return shop


# ----------------------------------------------------
# ✅ Soft delete with reason
# ----------------------------------------------------
def delete(db: Session, shop: Shop, reason: str, user_id: Optional[int] = None):
    if shop.status == ShopStatus.occupied.value:
        raise ValueError("Occupied shops cannot be deleted")

    try:
        shop.is_deleted = True
        shop.deleted_at = datetime.now(timezone.utc)
        shop.deletion_reason = reason
        log_deletion(db, DeletionRecordType.shop.value, shop, reason, user_id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    return {"message": "Shop deleted successfully"}


def shop_lookup(db: Session, allowed_shop_ids: Optional[Set[int]] = None, vacant_only: bool = False):
    q = db.query(Shop).filter(Shop.is_deleted == False)
    if allowed_shop_ids is not None:
        q = q.filter(Shop.id.in_(allowed_shop_ids))
    if vacant_only:
        q = q.filter(Shop.status == ShopStatus.vacant.value)
    rows = sorted(q.all(), key=lambda s: shop_sort_key(s.floor, s.shop_number))
    return [Lookup(id=s.id, name=s.shop_number) for s in rows]
