import logging
from datetime import date
from typing import Iterable, List, Optional
from sqlalchemy.orm import Session

from ...enum.leasing_tenants_enum import LeaseStatus
from ...ledger.invoice_allocation import allocate_invoice_payments
from ...ledger.ledger_calculator import ledger_end_date
from ...ledger.months import first_day, month_key, month_range
from ...ledger.records import AdjustmentRecord, InvoiceRecord, LeaseRecord, PaymentRecord
from ...ledger.rent_schedule import rent_for_month
from ...models.leasing_tenants.leases import Lease
from ...models.leasing_tenants.payments import Payment
from ...models.leasing_tenants.rent_adjustments import RentAdjustment
from ...models.leasing_tenants.rent_invoices import RentInvoice

logger = logging.getLogger(__name__)


def billing_cutoff(as_of: Optional[date]) -> date:
    # never bill ahead of the calendar
    today = date.today()
    if as_of is None or as_of > today:
        return today
    return as_of


def rent_schedule(db: Session, lease_id: int) -> List[AdjustmentRecord]:
    rows = db.query(RentAdjustment).filter(RentAdjustment.lease_id == lease_id).all()
    return [AdjustmentRecord.model_validate(a) for a in rows]


# ----------------------------------------------------
# ✅ Lazy invoice generation, one invoice per lease month
# ----------------------------------------------------
def sync_lease_invoices(db: Session, lease: Lease, as_of: Optional[date] = None) -> int:
    """
    Create the missing invoices for every month from the lease start
    through the billing cutoff, each billed at the rent in force for its
    month. Existing invoices keep their amount. Does not commit.
    """
    record = LeaseRecord.model_validate(lease)
    cutoff = ledger_end_date(record, billing_cutoff(as_of))
    adjustments = rent_schedule(db, lease.id)

    existing = {
        (inv.year, inv.month)
        for inv in db.query(RentInvoice).filter(RentInvoice.lease_id == lease.id).all()
    }

    created = 0
    for year, month in month_range(lease.start_date, cutoff):
        if (year, month) in existing:
            continue
        db.add(RentInvoice(
            lease_id=lease.id,
            tenant_id=lease.tenant_id,
            amount=rent_for_month(record, adjustments, year, month),
            due_date=first_day(year, month),
            month=month,
            year=year,
            paid_amount=0,
            is_paid=False,
        ))
        created += 1

    if created:
        db.flush()
        logger.info("Generated %s invoice(s) for lease %s", created, lease.id)
    return created


def regenerate_lease_invoices(db: Session, lease: Lease, rent_changed: bool,
                              as_of: Optional[date] = None) -> int:
    """Bring invoices in line after the lease dates or rent were edited."""
    record = LeaseRecord.model_validate(lease)
    cutoff = ledger_end_date(record, billing_cutoff(as_of))
    valid = set(month_range(lease.start_date, cutoff))
    adjustments = rent_schedule(db, lease.id) if rent_changed else []

    removed = 0
    for inv in db.query(RentInvoice).filter(RentInvoice.lease_id == lease.id).all():
        if (inv.year, inv.month) not in valid:
            db.delete(inv)
            removed += 1
        elif rent_changed:
            # an edit corrects the lease terms, unlike a rent adjustment
            inv.amount = rent_for_month(record, adjustments, inv.year, inv.month)

    if removed:
        db.flush()
        logger.info("Removed %s invoice(s) outside lease %s term",
                    removed, lease.id)

    created = sync_lease_invoices(db, lease, as_of)
    recompute_invoice_status(db, lease.id, as_of)
    return created


def sync_open_leases(db: Session, leases: Iterable[Lease], as_of: Optional[date] = None) -> int:
    """
    Bill the missing months of every open lease before a read and refresh
    their paid status. Flushes only, the caller decides whether to commit.
    """
    created = 0
    for lease in leases:
        if lease.status == LeaseStatus.terminated.value:
            continue
        count = sync_lease_invoices(db, lease, as_of)
        if count:
            recompute_invoice_status(db, lease.id, as_of)
            created += count
    return created


def get_lease_invoices(db: Session, lease_id: int) -> List[RentInvoice]:
    lease = db.query(Lease).filter(Lease.id == lease_id).first()
    if lease:
        sync_open_leases(db, [lease])
    return (
        db.query(RentInvoice)
        .filter(RentInvoice.lease_id == lease_id)
        .order_by(RentInvoice.year, RentInvoice.month)
        .all()
    )


# ----------------------------------------------------
# ✅ FIFO paid status
# ----------------------------------------------------
def recompute_invoice_status(db: Session, lease_id: int, as_of: Optional[date] = None):
    """Refresh paid_amount / is_paid on the lease's invoices. Does not commit."""
    invoices = (
        db.query(RentInvoice)
        .filter(RentInvoice.lease_id == lease_id)
        .all()
    )
    payments = (
        db.query(Payment)
        .filter(Payment.lease_id == lease_id, Payment.is_deleted == False)
        .all()
    )

    allocations = allocate_invoice_payments(
        [InvoiceRecord.model_validate(i) for i in invoices],
        [PaymentRecord.model_validate(p) for p in payments],
        billing_cutoff(as_of),
    )
    by_id = {inv.id: inv for inv in invoices}
    for alloc in allocations:
        inv = by_id[alloc.invoice_id]
        inv.paid_amount = alloc.paid_amount
        inv.is_paid = alloc.is_paid
    db.flush()


def recalculate_all(db: Session) -> int:
    leases = (
        db.query(Lease)
        .filter(Lease.status != LeaseStatus.terminated.value)
        .all()
    )
    for lease in leases:
        recompute_invoice_status(db, lease.id)
    db.commit()
    return len(leases)


# ----------------------------------------------------
# ✅ Batch generation for the current month
# ----------------------------------------------------
def generate_monthly_invoices(db: Session, as_of: Optional[date] = None) -> dict:
    cutoff = billing_cutoff(as_of)
    leases = (
        db.query(Lease)
        .filter(
            Lease.status != LeaseStatus.terminated.value,
            Lease.start_date <= cutoff,
        )
        .order_by(Lease.id)
        .all()
    )

    generated = 0
    lease_ids: List[int] = []
    try:
        for lease in leases:
            created = sync_lease_invoices(db, lease, cutoff)
            if created:
                recompute_invoice_status(db, lease.id, cutoff)
                generated += created
                lease_ids.append(lease.id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Monthly invoice run for %s created %s invoice(s)",
                month_key(cutoff.year, cutoff.month), generated)
    return {
        "month_key": month_key(cutoff.year, cutoff.month),
        "generated": generated,
        "lease_ids": lease_ids,
    }
