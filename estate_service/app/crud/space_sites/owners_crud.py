from datetime import date
from typing import Optional
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from shared.core.schemas import Lookup
from shared.models.users import Users
from ...enum.leasing_tenants_enum import LeaseStatus
from ...ledger.dues_aggregator import floor_label
from ...ledger.money import ZERO, quantize
from ...models.financials.bank_deposits import BankDeposit
from ...models.financials.expenses import Expense
from ...models.leasing_tenants.leases import Lease
from ...models.leasing_tenants.payments import Payment
from ...models.space_sites.owners import Owner
from ...models.space_sites.shops import Shop
from ...schemas.space_sites.owners_schemas import (
    OwnerCreate, OwnerDetailsOut, OwnerListResponse, OwnerOut, OwnerRequest,
    OwnerTenantRow, OwnerUpdate
)
from ..leasing_tenants.lease_ledger_crud import lease_summaries


def owner_out(db: Session, owner: Owner) -> OwnerOut:
    out = OwnerOut.model_validate(owner)
    out.shop_count = db.query(func.count(Shop.id)).filter(
        Shop.owner_id == owner.id, Shop.is_deleted == False).scalar() or 0
    return out


def get_list(db: Session, params: OwnerRequest) -> OwnerListResponse:
    q = db.query(Owner)
    if params.search:
        like = f"%{params.search}%"
        q = q.filter(or_(Owner.name.ilike(like), Owner.phone.ilike(like)))

    total = q.count()
    rows = q.order_by(Owner.name.asc()).offset(
        params.skip).limit(params.limit).all()
    return {"owners": [owner_out(db, o) for o in rows], "total": total}


def get_by_id(db: Session, owner_id: int) -> Optional[Owner]:
    return db.query(Owner).filter(Owner.id == owner_id).first()


def owner_count(db: Session) -> int:
    return db.query(func.count(Owner.id)).scalar() or 0


def create(db: Session, payload: OwnerCreate) -> Owner:
    owner = Owner(**payload.model_dump())
    db.add(owner)
    db.commit()
    db.refresh(owner)
    return owner


def update(db: Session, owner: Owner, payload: OwnerUpdate) -> Owner:
    for key, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(owner, key, value)
    db.commit()
    db.refresh(owner)
    return owner


def delete(db: Session, owner: Owner):
    if db.query(Shop).filter(Shop.owner_id == owner.id).first():
        raise ValueError("Owner still has shops, reassign them first")
    if db.query(Users).filter(Users.owner_id == owner.id).first():
        raise ValueError("Owner is linked to a user account")
    if db.query(BankDeposit).filter(BankDeposit.owner_id == owner.id).first() \
            or db.query(Expense).filter(Expense.owner_id == owner.id).first():
        raise ValueError("Owner has financial records and cannot be deleted")

    db.delete(owner)
    db.commit()
    return {"message": "Owner deleted successfully"}


def owner_lookup(db: Session):
    rows = db.query(Owner).order_by(Owner.name.asc()).all()
    return [Lookup(id=o.id, name=o.name) for o in rows]


# ----------------------------------------------------
# ✅ Owner dashboard: tenants on the owner's sole shops
# ----------------------------------------------------
def get_details(db: Session, owner: Owner, as_of: Optional[date] = None) -> OwnerDetailsOut:
    shops = {
        s.id: s for s in db.query(Shop).filter(
            Shop.owner_id == owner.id, Shop.is_deleted == False).all()
    }
    leases = []
    if shops:
        leases = (
            db.query(Lease)
            .filter(
                Lease.shop_id.in_(shops.keys()),
                Lease.status != LeaseStatus.terminated.value
            )
            .order_by(Lease.id)
            .all()
        )
    summaries = lease_summaries(db, leases, as_of)

    rows = []
    total_deposit = ZERO
    total_dues = ZERO
    for lease in leases:
        shop = shops[lease.shop_id]
        summary = summaries[lease.id]
        deposit = quantize(lease.security_deposit) - \
            quantize(lease.security_deposit_used)
        due = max(ZERO, summary.total_outstanding)
        total_deposit += deposit
        total_dues += due

        last_payment = (
            db.query(func.max(Payment.payment_date))
            .filter(Payment.lease_id == lease.id, Payment.is_deleted == False)
            .scalar()
        )
        rows.append(OwnerTenantRow(
            lease_id=lease.id,
            tenant_id=lease.tenant_id,
            tenant_name=lease.tenant.name,
            phone=lease.tenant.phone,
            shop_id=shop.id,
            shop_number=shop.shop_number,
            floor=shop.floor,
            floor_label=floor_label(shop.floor),
            monthly_rent=quantize(lease.monthly_rent),
            security_deposit=deposit,
            current_due=due,
            last_payment_date=str(last_payment) if last_payment else None,
        ))

    return OwnerDetailsOut(
        owner=owner_out(db, owner),
        shop_count=len(shops),
        tenants=rows,
        total_security_deposit=total_deposit,
        total_outstanding_dues=total_dues,
    )
