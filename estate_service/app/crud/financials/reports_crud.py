from collections import defaultdict
from datetime import date
from typing import Optional, Set
from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from shared.core.config import settings
from ...enum.leasing_tenants_enum import LeaseStatus
from ...enum.space_sites_enum import OwnershipType
from ...ledger.collection_report import collection_report
from ...ledger.currency import convert_model
from ...ledger.dues_aggregator import floor_label, floor_occupancy, occupancy_stats
from ...ledger.money import ZERO
from ...ledger.owner_reports import (
    OutstandingEntry, RentPaymentRow, monthly_deposit_summary, owner_financial_transactions,
    owner_share, payments_in_period, rent_payment_report, report_period, top_outstandings
)
from ...ledger.owner_statement import build_owner_statement
from ...ledger.records import (
    AdjustmentRecord, DepositRecord, ExpenseRecord, InvoiceRecord, LeaseRecord, PaymentRecord, ShopRecord
)
from ...ledger.rent_schedule import current_rent
from ...ledger.tenant_statement import build_tenant_statement
from ...models.financials.bank_deposits import BankDeposit
from ...models.financials.expenses import Expense
from ...models.leasing_tenants.leases import Lease
from ...models.leasing_tenants.payments import Payment
from ...models.leasing_tenants.rent_adjustments import RentAdjustment
from ...models.leasing_tenants.rent_invoices import RentInvoice
from ...models.leasing_tenants.tenants import Tenant
from ...models.space_sites.owners import Owner
from ...models.space_sites.shops import Shop
from ...schemas.financials.reports_schemas import (
    CollectionReportOut, FloorAvailability, MonthlyDepositSummaryOut, OwnerFinancialTransactionsOut,
    OwnerRentPaymentsOut, OwnerStatementOut, ReportPeriodParams, ShopAvailabilityOut,
    TenantStatementOut, TopOutstandingsOut
)
from ..leasing_tenants.lease_ledger_crud import lease_summaries
from ..leasing_tenants.rent_invoices_crud import sync_open_leases
from ..space_sites.shops_crud import shop_sort_key
from ..system.settings_crud import resolve_display


def scoped_shops(db: Session, allowed_shop_ids: Optional[Set[int]]):
    q = db.query(Shop).filter(Shop.is_deleted == False)
    if allowed_shop_ids is not None:
        q = q.filter(Shop.id.in_(allowed_shop_ids))
    return q.all()


def scoped_leases(db: Session, allowed_shop_ids: Optional[Set[int]]):
    q = db.query(Lease)
    if allowed_shop_ids is not None:
        q = q.filter(Lease.shop_id.in_(allowed_shop_ids))
    return q.all()


def scoped_payments(db: Session, lease_ids):
    return (
        db.query(Payment)
        .filter(Payment.lease_id.in_(lease_ids), Payment.is_deleted == False)
        .all()
    )


def scoped_adjustments(db: Session, lease_ids):
    rows = db.query(RentAdjustment).filter(RentAdjustment.lease_id.in_(lease_ids)).all()
    return [AdjustmentRecord.model_validate(a) for a in rows]


# ----------------------------------------------------
# ✅ Owner statement
# ----------------------------------------------------
def owner_statement(db: Session, owner: Owner, start_date: date, end_date: date,
                    currency: Optional[str] = None) -> OwnerStatementOut:
    code, rate = resolve_display(db, currency)

    shops = db.query(Shop).all()
    leases = db.query(Lease).all()
    payments = db.query(Payment).filter(Payment.is_deleted == False).all()
    expenses = db.query(Expense).all()
    deposits = db.query(BankDeposit).filter(
        BankDeposit.owner_id == owner.id, BankDeposit.is_deleted == False).all()

    statement = build_owner_statement(
        owner_id=owner.id,
        owner_count=db.query(Owner).count() or 1,
        shops=[ShopRecord.model_validate(s) for s in shops],
        leases=[LeaseRecord.model_validate(l) for l in leases],
        payments=[PaymentRecord.model_validate(p) for p in payments],
        expenses=[ExpenseRecord.model_validate(e) for e in expenses],
        deposits=[DepositRecord.model_validate(d) for d in deposits],
        start_date=start_date,
        end_date=end_date,
    )
    out = OwnerStatementOut(
        **statement.model_dump(),
        owner_name=owner.name,
        currency=code,
        exchange_rate=format(rate, "f"),
    )
    return convert_model(out, rate)


# ----------------------------------------------------
# ✅ Tenant ledger with running balance
# ----------------------------------------------------
def tenant_ledger(db: Session, tenant: Tenant, allowed_lease_ids: Optional[Set[int]] = None,
                  as_of: Optional[date] = None, currency: Optional[str] = None) -> TenantStatementOut:
    code, rate = resolve_display(db, currency)

    leases = [
        l for l in db.query(Lease).filter(Lease.tenant_id == tenant.id).all()
        if allowed_lease_ids is None or l.id in allowed_lease_ids
    ]
    lease_ids = [l.id for l in leases]
    sync_open_leases(db, leases, as_of)
    invoices = db.query(RentInvoice).filter(
        RentInvoice.lease_id.in_(lease_ids)).all() if lease_ids else []
    payments = scoped_payments(db, lease_ids) if lease_ids else []

    statement = build_tenant_statement(
        tenant_id=tenant.id,
        tenant_opening_due=tenant.opening_due_balance if allowed_lease_ids is None else 0,
        leases=[LeaseRecord.model_validate(l) for l in leases],
        invoices=[InvoiceRecord.model_validate(i) for i in invoices],
        payments=[PaymentRecord.model_validate(p) for p in payments],
        as_of=as_of,
    )
    out = TenantStatementOut(
        **statement.model_dump(),
        tenant_name=tenant.name,
        currency=code,
        exchange_rate=format(rate, "f"),
    )
    return convert_model(out, rate)


# ----------------------------------------------------
# ✅ Expected vs collected, last N months
# ----------------------------------------------------
def collection(db: Session, allowed_shop_ids: Optional[Set[int]] = None,
               as_of: Optional[date] = None, currency: Optional[str] = None) -> CollectionReportOut:
    code, rate = resolve_display(db, currency)
    as_of = as_of or date.today()

    leases = scoped_leases(db, allowed_shop_ids)
    payments = scoped_payments(db, [l.id for l in leases]) if leases else []
    adjustments = scoped_adjustments(db, [l.id for l in leases]) if leases else []

    report = collection_report(
        [LeaseRecord.model_validate(l) for l in leases],
        [PaymentRecord.model_validate(p) for p in payments],
        as_of,
        settings.TREND_MONTHS,
        adjustments,
    )
    out = CollectionReportOut(
        **report.model_dump(),
        currency=code,
        exchange_rate=format(rate, "f"),
    )
    return convert_model(out, rate)


# ----------------------------------------------------
# ✅ Shop availability by floor
# ----------------------------------------------------
def shop_availability(db: Session, allowed_shop_ids: Optional[Set[int]] = None) -> ShopAvailabilityOut:
    shops = scoped_shops(db, allowed_shop_ids)
    records = [ShopRecord.model_validate(s) for s in shops]
    stats = occupancy_stats(records)

    floors = []
    for f in floor_occupancy(records):
        vacant = sorted(
            (s for s in shops if s.floor == f.floor and s.status == "vacant"),
            key=lambda s: shop_sort_key(s.floor, s.shop_number),
        )
        floors.append(FloorAvailability(
            **f.model_dump(),
            vacant_shops=[s.shop_number for s in vacant],
        ))

    return ShopAvailabilityOut(
        total_shops=stats.total_shops,
        occupied_shops=stats.occupied_shops,
        vacant_shops=stats.vacant_shops,
        occupancy_rate=stats.occupancy_rate,
        floors=floors,
    )


# ----------------------------------------------------
# ✅ Monthly deposit summary per owner
# ----------------------------------------------------
def monthly_deposits(db: Session, owner_id: Optional[int] = None, year: Optional[int] = None,
                     currency: Optional[str] = None) -> MonthlyDepositSummaryOut:
    code, rate = resolve_display(db, currency)

    q = db.query(Owner)
    if owner_id is not None:
        q = q.filter(Owner.id == owner_id)
    owners = {o.id: o.name for o in q.all()}

    shops = db.query(Shop).filter(Shop.owner_id.in_(owners.keys())).all() if owners else []
    leases = db.query(Lease).filter(
        Lease.shop_id.in_([s.id for s in shops])).all() if shops else []
    payments = scoped_payments(db, [l.id for l in leases]) if leases else []

    summary = monthly_deposit_summary(
        owners,
        [ShopRecord.model_validate(s) for s in shops],
        [LeaseRecord.model_validate(l) for l in leases],
        [PaymentRecord.model_validate(p) for p in payments],
        year,
    )
    out = MonthlyDepositSummaryOut(
        **summary.model_dump(),
        currency=code,
        exchange_rate=format(rate, "f"),
    )
    return convert_model(out, rate)


# ----------------------------------------------------
# ✅ Owner reports over own and common shops
# ----------------------------------------------------
def owner_leases(db: Session, owner: Owner):
    """Open leases on the owner's sole shops and on every common shop."""
    shops = {
        s.id: s for s in db.query(Shop).filter(
            Shop.is_deleted == False,
            or_(
                and_(Shop.ownership_type == OwnershipType.sole.value, Shop.owner_id == owner.id),
                Shop.ownership_type == OwnershipType.common.value,
            )
        ).all()
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
    return shops, leases


def shop_location(shop: Shop) -> str:
    return f"{floor_label(shop.floor)} - {shop.shop_number}"


def top_outstanding_tenants(db: Session, owner: Owner, limit: int = 5, as_of: Optional[date] = None,
                            currency: Optional[str] = None) -> TopOutstandingsOut:
    code, rate = resolve_display(db, currency)
    shops, leases = owner_leases(db, owner)
    summaries = lease_summaries(db, leases, as_of)
    count = db.query(Owner).count() or 1

    entries = []
    for lease in leases:
        shop = shops[lease.shop_id]
        is_common = shop.ownership_type == OwnershipType.common.value
        full = summaries[lease.id].total_outstanding
        entries.append(OutstandingEntry(
            lease_id=lease.id,
            tenant_id=lease.tenant_id,
            tenant_name=lease.tenant.name,
            phone=lease.tenant.phone,
            business_name=lease.tenant.business_name,
            shop_id=shop.id,
            shop_number=shop.shop_number,
            floor=shop.floor,
            shop_location=shop_location(shop),
            outstanding=owner_share(full, is_common, count),
            full_outstanding=full,
            is_common=is_common,
        ))

    ranked = top_outstandings(owner.id, entries, limit)
    out = TopOutstandingsOut(
        **ranked.model_dump(),
        owner_name=owner.name,
        currency=code,
        exchange_rate=format(rate, "f"),
    )
    return convert_model(out, rate)


def owner_rent_payments(db: Session, owner: Owner, params: ReportPeriodParams) -> OwnerRentPaymentsOut:
    code, rate = resolve_display(db, params.currency)
    period = report_period(params.month, params.year, params.start_date, params.end_date)
    as_of = params.as_of or date.today()

    shops, leases = owner_leases(db, owner)
    lease_ids = [l.id for l in leases]
    summaries = lease_summaries(db, leases, as_of)
    payments = defaultdict(list)
    for p in (scoped_payments(db, lease_ids) if lease_ids else []):
        payments[p.lease_id].append(PaymentRecord.model_validate(p))
    adjustments = scoped_adjustments(db, lease_ids) if lease_ids else []
    count = db.query(Owner).count() or 1

    rows = []
    for lease in leases:
        shop = shops[lease.shop_id]
        is_common = shop.ownership_type == OwnershipType.common.value
        in_period = payments_in_period(payments[lease.id], period)
        recent = in_period[-1] if in_period else None
        rent = current_rent(LeaseRecord.model_validate(lease), adjustments, as_of)
        outstanding = max(ZERO, summaries[lease.id].total_outstanding)
        rows.append(RentPaymentRow(
            lease_id=lease.id,
            tenant_id=lease.tenant_id,
            tenant_name=lease.tenant.name,
            phone=lease.tenant.phone,
            shop_id=shop.id,
            shop_number=shop.shop_number,
            floor=shop.floor,
            shop_location=shop_location(shop),
            monthly_rent=owner_share(rent, is_common, count),
            full_monthly_rent=rent,
            recent_payment_amount=owner_share(recent.amount, is_common, count) if recent else ZERO,
            recent_payment_date=recent.payment_date if recent else None,
            payment_dates=[p.payment_date for p in in_period],
            current_outstanding=owner_share(outstanding, is_common, count),
            full_current_outstanding=outstanding,
            is_common=is_common,
        ))
    rows.sort(key=lambda r: shop_sort_key(r.floor, r.shop_number))

    report = rent_payment_report(owner.id, period, rows)
    out = OwnerRentPaymentsOut(
        **report.model_dump(),
        owner_name=owner.name,
        currency=code,
        exchange_rate=format(rate, "f"),
    )
    return convert_model(out, rate)


def owner_transactions(db: Session, owner: Owner,
                       params: ReportPeriodParams) -> OwnerFinancialTransactionsOut:
    code, rate = resolve_display(db, params.currency)
    period = report_period(params.month, params.year, params.start_date, params.end_date)

    deposits = db.query(BankDeposit).filter(
        BankDeposit.owner_id == owner.id, BankDeposit.is_deleted == False).all()
    expenses = db.query(Expense).all()

    result = owner_financial_transactions(
        owner.id,
        db.query(Owner).count() or 1,
        [DepositRecord.model_validate(d) for d in deposits],
        [ExpenseRecord.model_validate(e) for e in expenses],
        period,
    )
    out = OwnerFinancialTransactionsOut(
        **result.model_dump(),
        owner_name=owner.name,
        currency=code,
        exchange_rate=format(rate, "f"),
    )
    return convert_model(out, rate)
