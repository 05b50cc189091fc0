from datetime import date
from typing import Optional, Set
from sqlalchemy.orm import Session

from shared.core.config import settings
from ...ledger.currency import convert_model
from ...ledger.dues_aggregator import (
    TenantDue, collected_between, expiring_leases, floor_occupancy,
    monthly_collection_trend, occupancy_stats, top_debtors, total_dues
)
from ...ledger.months import first_day, last_day
from ...ledger.records import LeaseRecord, PaymentRecord, ShopRecord
from ...models.leasing_tenants.leases import Lease
from ...models.leasing_tenants.tenants import Tenant
from ...schemas.overview.dashboard_schema import DashboardStats, ExpiringLeaseOut
from ..financials.reports_crud import scoped_adjustments, scoped_leases, scoped_payments, scoped_shops
from ..leasing_tenants import payments_crud
from ..leasing_tenants.lease_ledger_crud import tenant_dues
from ..system.settings_crud import resolve_display


def get_stats(db: Session, allowed_shop_ids: Optional[Set[int]] = None,
              as_of: Optional[date] = None, currency: Optional[str] = None) -> DashboardStats:
    code, rate = resolve_display(db, currency)
    as_of = as_of or date.today()

    shops = scoped_shops(db, allowed_shop_ids)
    leases = scoped_leases(db, allowed_shop_ids)
    lease_ids = {l.id for l in leases}
    payments = scoped_payments(db, list(lease_ids)) if leases else []
    adjustments = scoped_adjustments(db, list(lease_ids)) if leases else []

    lease_records = [LeaseRecord.model_validate(l) for l in leases]
    payment_records = [PaymentRecord.model_validate(p) for p in payments]
    shop_records = [ShopRecord.model_validate(s) for s in shops]

    # ------------------- Dues -------------------
    q = db.query(Tenant).filter(Tenant.is_deleted == False)
    if allowed_shop_ids is not None:
        q = q.filter(Tenant.id.in_({l.tenant_id for l in leases}))
    tenants = q.all()
    dues = tenant_dues(db, tenants, as_of,
                       None if allowed_shop_ids is None else lease_ids)
    tenant_rows = [
        TenantDue(
            tenant_id=t.id,
            tenant_name=t.name,
            phone=t.phone,
            current_due=dues[t.id],
            lease_count=sum(1 for l in leases if l.tenant_id == t.id),
        )
        for t in tenants
    ]

    # ------------------- Expiring leases -------------------
    by_id = {l.id: l for l in leases}
    expiring = []
    for item in expiring_leases(lease_records, as_of, settings.EXPIRING_SOON_DAYS):
        lease: Lease = by_id[item.lease_id]
        expiring.append(ExpiringLeaseOut(
            **item.model_dump(),
            tenant_name=lease.tenant.name if lease.tenant else None,
            shop_number=lease.shop.shop_number if lease.shop else None,
        ))

    stats = DashboardStats(
        as_of=as_of,
        total_dues=total_dues(tenant_rows),
        monthly_collection=collected_between(
            payment_records,
            first_day(as_of.year, as_of.month),
            last_day(as_of.year, as_of.month)),
        occupancy=occupancy_stats(shop_records),
        expiring_leases=expiring,
        top_debtors=top_debtors(tenant_rows, settings.TOP_DEBTORS_LIMIT),
        recent_payments=payments_crud.recent(
            db, None if allowed_shop_ids is None else lease_ids),
        monthly_trend=monthly_collection_trend(
            payment_records, lease_records, as_of, settings.TREND_MONTHS, adjustments),
        floor_occupancy=floor_occupancy(shop_records),
        currency=code,
        exchange_rate=format(rate, "f"),
    )
    return convert_model(stats, rate)
