import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Set
from sqlalchemy.orm import Session

from ...ledger.dues_aggregator import tenant_current_due
from ...ledger.ledger_calculator import LeaseLedger, LedgerSummary, compute_lease_ledger
from ...ledger.records import (
    AdjustmentRecord, ExpenseRecord, InvoiceRecord, LeaseRecord, PaymentRecord
)
from ...models.financials.expenses import Expense
from ...models.leasing_tenants.leases import Lease
from ...models.leasing_tenants.payments import Payment
from ...models.leasing_tenants.rent_adjustments import RentAdjustment
from ...models.leasing_tenants.rent_invoices import RentInvoice
from ...models.leasing_tenants.tenants import Tenant
from .rent_invoices_crud import sync_open_leases

logger = logging.getLogger(__name__)


def _group(rows, record_cls) -> Dict[int, list]:
    grouped = defaultdict(list)
    for r in rows:
        grouped[r.lease_id].append(record_cls.model_validate(r))
    return grouped


def tenant_expenses(db: Session, tenant_id: int) -> List[ExpenseRecord]:
    rows = db.query(Expense).filter(Expense.tenant_id == tenant_id).all()
    return [ExpenseRecord.model_validate(e) for e in rows]


def build_ledger(db: Session, lease: Lease, as_of: Optional[date] = None) -> LeaseLedger:
    """Ledger for one lease from its stored records."""
    invoices = db.query(RentInvoice).filter(
        RentInvoice.lease_id == lease.id).all()
    payments = db.query(Payment).filter(Payment.lease_id == lease.id).all()
    adjustments = db.query(RentAdjustment).filter(
        RentAdjustment.lease_id == lease.id).all()

    ledger = compute_lease_ledger(
        LeaseRecord.model_validate(lease),
        [InvoiceRecord.model_validate(i) for i in invoices],
        [PaymentRecord.model_validate(p) for p in payments],
        [AdjustmentRecord.model_validate(a) for a in adjustments],
        as_of=as_of,
        expenses=tenant_expenses(db, lease.tenant_id),
    )

    if ledger.summary.missing_invoice_months:
        logger.warning(
            "Lease %s has no invoice for %s, using scheduled rent",
            lease.id, ", ".join(ledger.summary.missing_invoice_months))
    return ledger


def lease_summaries(db: Session, leases: Iterable[Lease],
                    as_of: Optional[date] = None) -> Dict[int, LedgerSummary]:
    """
    Ledger summaries for many leases with one query per table. Missing
    invoices of open leases are billed first, flushed but not committed.
    """
    leases = list(leases)
    if not leases:
        return {}
    lease_ids = [l.id for l in leases]
    sync_open_leases(db, leases, as_of)

    invoices = _group(
        db.query(RentInvoice).filter(RentInvoice.lease_id.in_(lease_ids)).all(),
        InvoiceRecord)
    payments = _group(
        db.query(Payment).filter(Payment.lease_id.in_(lease_ids)).all(),
        PaymentRecord)
    adjustments = _group(
        db.query(RentAdjustment).filter(RentAdjustment.lease_id.in_(lease_ids)).all(),
        AdjustmentRecord)

    return {
        l.id: compute_lease_ledger(
            LeaseRecord.model_validate(l),
            invoices.get(l.id, []),
            payments.get(l.id, []),
            adjustments.get(l.id, []),
            as_of=as_of,
        ).summary
        for l in leases
    }


def tenant_dues(db: Session, tenants: Iterable[Tenant], as_of: Optional[date] = None,
                allowed_lease_ids: Optional[Set[int]] = None) -> Dict[int, Decimal]:
    """
    Current due per tenant. When restricted to a set of leases the
    tenant-level opening balance is left out, it belongs to no shop.
    """
    tenants = list(tenants)
    if not tenants:
        return {}

    q = db.query(Lease).filter(Lease.tenant_id.in_([t.id for t in tenants]))
    leases = [
        l for l in q.all()
        if allowed_lease_ids is None or l.id in allowed_lease_ids
    ]
    summaries = lease_summaries(db, leases, as_of)

    by_tenant = defaultdict(list)
    for l in leases:
        by_tenant[l.tenant_id].append(summaries[l.id].total_outstanding)

    return {
        t.id: tenant_current_due(
            t.opening_due_balance if allowed_lease_ids is None else 0,
            by_tenant.get(t.id, []))
        for t in tenants
    }
