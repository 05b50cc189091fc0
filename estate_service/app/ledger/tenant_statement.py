from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence
from pydantic import BaseModel

from ..enum.financials_enum import LedgerEntryType
from .exceptions import LedgerInputError
from .money import ZERO, money_sum, quantize
from .months import is_elapsed, month_label
from .records import InvoiceRecord, LeaseRecord, PaymentRecord, active_payments

ENTRY_ORDER = {
    LedgerEntryType.opening.value: 0,
    LedgerEntryType.invoice.value: 1,
    LedgerEntryType.payment.value: 2,
}


class StatementEntry(BaseModel):
    entry_date: date
    entry_type: str
    description: str
    lease_id: Optional[int] = None
    reference_id: Optional[int] = None
    debit: Decimal
    credit: Decimal
    balance: Decimal


class TenantStatement(BaseModel):
    tenant_id: int
    as_of: date
    entries: List[StatementEntry]
    total_debit: Decimal
    total_credit: Decimal
    closing_balance: Decimal


def build_tenant_statement(
    tenant_id: int,
    tenant_opening_due: Decimal,
    leases: Sequence[LeaseRecord],
    invoices: Sequence[InvoiceRecord],
    payments: Sequence[PaymentRecord],
    as_of: Optional[date] = None,
) -> TenantStatement:
    as_of = as_of or date.today()

    lease_ids = set()
    for lease in leases:
        if lease.tenant_id != tenant_id:
            raise LedgerInputError(
                f"Lease {lease.id} does not belong to tenant {tenant_id}")
        lease_ids.add(lease.id)
    for r in list(invoices) + list(payments):
        if r.lease_id not in lease_ids:
            raise LedgerInputError(
                f"Record for lease {r.lease_id} does not belong to tenant {tenant_id}")

    raw = []
    earliest = min((l.start_date for l in leases), default=as_of)
    if quantize(tenant_opening_due) != ZERO:
        raw.append((earliest, LedgerEntryType.opening.value, 0, "Opening balance",
                    None, None, quantize(tenant_opening_due), ZERO))

    for lease in leases:
        if quantize(lease.opening_due_balance) != ZERO:
            raw.append((lease.start_date, LedgerEntryType.opening.value, lease.id,
                        f"Opening balance for lease #{lease.id}",
                        lease.id, None, quantize(lease.opening_due_balance), ZERO))

    for inv in invoices:
        if not is_elapsed(inv.year, inv.month, as_of):
            continue
        raw.append((inv.due_date or date(inv.year, inv.month, 1),
                    LedgerEntryType.invoice.value, inv.id or 0,
                    f"Rent for {month_label(inv.year, inv.month)}",
                    inv.lease_id, inv.id, quantize(inv.amount), ZERO))

    for p in active_payments(payments):
        if p.payment_date > as_of:
            continue
        months = ", ".join(p.rent_months) if p.rent_months else "dues"
        raw.append((p.payment_date, LedgerEntryType.payment.value, p.id or 0,
                    f"Payment received ({months})",
                    p.lease_id, p.id, ZERO, quantize(p.amount)))

    raw.sort(key=lambda r: (r[0], ENTRY_ORDER[r[1]], r[2]))

    entries = []
    balance = ZERO
    for entry_date, entry_type, _, description, lease_id, ref_id, debit, credit in raw:
        balance = balance + debit - credit
        entries.append(StatementEntry(
            entry_date=entry_date,
            entry_type=entry_type,
            description=description,
            lease_id=lease_id,
            reference_id=ref_id,
            debit=debit,
            credit=credit,
            balance=balance,
        ))

    total_debit = money_sum(e.debit for e in entries)
    total_credit = money_sum(e.credit for e in entries)
    return TenantStatement(
        tenant_id=tenant_id,
        as_of=as_of,
        entries=entries,
        total_debit=total_debit,
        total_credit=total_credit,
        closing_balance=total_debit - total_credit,
    )
