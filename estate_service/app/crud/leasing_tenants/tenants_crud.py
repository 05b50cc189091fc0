from datetime import date, datetime, timezone
from typing import Optional, Set
from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...enum.leasing_tenants_enum import LeaseStatus
from ...enum.system_enum import DeletionRecordType
from ...ledger.dues_aggregator import tenant_current_due
from ...ledger.lease_status import derive_lease_status
from ...models.leasing_tenants.leases import Lease
from ...models.leasing_tenants.tenants import Tenant
from ...schemas.leasing_tenants.tenants_schemas import (
    TenantCreate, TenantDetailOut, TenantLeaseSummary, TenantListResponse,
    TenantOut, TenantRequest, TenantUpdate
)
from ..system.deletion_logs_crud import log_deletion
from .lease_ledger_crud import lease_summaries, tenant_dues
from shared.core.config import settings


def build_filters(params: TenantRequest, allowed_tenant_ids: Optional[Set[int]]):
    filters = [Tenant.is_deleted == False]

    if allowed_tenant_ids is not None:
        filters.append(Tenant.id.in_(allowed_tenant_ids))

    # ✅ Search by name, phone or business
    if params.search:
        like = f"%{params.search}%"
        filters.append(
            or_(
                Tenant.name.ilike(like),
                Tenant.phone.ilike(like),
                Tenant.business_name.ilike(like),
            )
        )

    return filters


# ----------------------------------------------------
# ✅ Get list with current dues
# ----------------------------------------------------
def get_list(db: Session, params: TenantRequest,
             allowed_tenant_ids: Optional[Set[int]] = None,
             allowed_lease_ids: Optional[Set[int]] = None,
             as_of: Optional[date] = None) -> TenantListResponse:
    rows = (
        db.query(Tenant)
        .filter(*build_filters(params, allowed_tenant_ids))
        .order_by(Tenant.name.asc(), Tenant.id.asc())
        .all()
    )
    dues = tenant_dues(db, rows, as_of, allowed_lease_ids)

    tenants = []
    for t in rows:
        out = TenantOut.model_validate(t)
        out.current_due = dues.get(t.id)
        out.active_lease_count = sum(
            1 for l in t.leases
            if l.status != LeaseStatus.terminated.value
            and (allowed_lease_ids is None or l.id in allowed_lease_ids)
        )
        tenants.append(out)

    if params.has_dues is not None:
        tenants = [t for t in tenants if (t.current_due > 0) == params.has_dues]

    total = len(tenants)
    end = params.skip + params.limit if params.limit else None
    return {"tenants": tenants[params.skip:end], "total": total}


def get_by_id(db: Session, tenant_id: int) -> Optional[Tenant]:
    return (
        db.query(Tenant)
        .filter(Tenant.id == tenant_id, Tenant.is_deleted == False)
        .first()
    )


# ----------------------------------------------------
# ✅ Tenant with every lease and its ledger summary
# ----------------------------------------------------
def get_detail(db: Session, tenant: Tenant,
               allowed_lease_ids: Optional[Set[int]] = None,
               as_of: Optional[date] = None) -> TenantDetailOut:
    leases = [
        l for l in sorted(tenant.leases, key=lambda l: l.id)
        if allowed_lease_ids is None or l.id in allowed_lease_ids
    ]
    summaries = lease_summaries(db, leases, as_of)

    current_due = tenant_current_due(
        tenant.opening_due_balance if allowed_lease_ids is None else 0,
        [s.total_outstanding for s in summaries.values()],
    )

    out = TenantOut.model_validate(tenant)
    out.current_due = current_due
    out.active_lease_count = sum(
        1 for l in leases if l.status != LeaseStatus.terminated.value)

    return TenantDetailOut(
        tenant=out,
        leases=[
            TenantLeaseSummary(
                lease_id=l.id,
                shop_id=l.shop_id,
                shop_number=l.shop.shop_number if l.shop else None,
                status=derive_lease_status(
                    l.status, l.end_date, as_of, settings.EXPIRING_SOON_DAYS),
                monthly_rent=l.monthly_rent,
                summary=summaries[l.id],
            )
            for l in leases
        ],
        current_due=current_due,
    )


def create(db: Session, payload: TenantCreate) -> Tenant:
    tenant = Tenant(**payload.model_dump())
    db.add(tenant)
    db.commit()
    db.refresh(tenant)
    return tenant


def update(db: Session, tenant: Tenant, payload: TenantUpdate) -> Tenant:
    for key, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(tenant, key, value)
    db.commit()
    db.refresh(tenant)
    return tenant


# ----------------------------------------------------
# ✅ Soft delete with reason
# ----------------------------------------------------
def delete(db: Session, tenant: Tenant, reason: str, user_id: Optional[int] = None):
    open_leases = (
        db.query(Lease)
        .filter(
            Lease.tenant_id == tenant.id,
            Lease.status != LeaseStatus.terminated.value
        )
        .count()
    )
    if open_leases:
        raise ValueError(
            "Tenant has active leases, terminate them before deleting")

    try:
        tenant.is_deleted = True
        tenant.deleted_at = datetime.now(timezone.utc)
        tenant.deletion_reason = reason
        log_deletion(db, DeletionRecordType.tenant.value,
                     tenant, reason, user_id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    return {"message": "Tenant deleted successfully"}
