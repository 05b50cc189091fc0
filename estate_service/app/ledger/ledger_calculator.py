from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Sequence
from pydantic import BaseModel

from ..enum.leasing_tenants_enum import LeaseStatus
from .exceptions import LedgerInputError
from .money import ZERO, money_sum, quantize
from .months import is_elapsed, month_key, month_range
from .records import (
    AdjustmentRecord, ExpenseRecord, InvoiceRecord, LeaseRecord, PaymentRecord, active_payments
)
from .rent_schedule import rent_for_month


class MonthlyLedgerRow(BaseModel):
    month_key: str
    year: int
    month: int
    rent_amount: Decimal
    paid_amount: Decimal
    outstanding: Decimal
    has_invoice: bool
    payment_ids: List[int] = []


class LedgerSummary(BaseModel):
    opening_due_balance: Decimal
    total_invoiced: Decimal
    total_paid: Decimal
    total_outstanding: Decimal
    tenant_expenses: Decimal
    grand_total_outstanding: Decimal
    security_deposit: Decimal
    security_deposit_used: Decimal
    balance_after_deposit: Decimal
    invoice_count: int
    payment_count: int
    missing_invoice_months: List[str] = []


class LeaseLedger(BaseModel):
    lease_id: int
    as_of: date
    monthly_breakdown: List[MonthlyLedgerRow]
    summary: LedgerSummary


def ledger_end_date(lease: LeaseRecord, as_of: date) -> date:
    if lease.status == LeaseStatus.terminated.value and lease.end_date < as_of:
        return lease.end_date
    return as_of


def _check_owned(lease: LeaseRecord, records: Sequence, kind: str):
    for r in records:
        if r.lease_id != lease.id:
            raise LedgerInputError(
                f"{kind} {r.id} belongs to lease {r.lease_id}, not lease {lease.id}")


def compute_lease_ledger(
    lease: LeaseRecord,
    invoices: Sequence[InvoiceRecord],
    payments: Sequence[PaymentRecord],
    adjustments: Sequence[AdjustmentRecord] = (),
    as_of: Optional[date] = None,
    expenses: Sequence[ExpenseRecord] = (),
) -> LeaseLedger:
    """
    Month-by-month breakdown and authoritative totals for one lease.

    Rows cover every month from the lease start through the as-of month
    (or the end month once terminated) whether or not an invoice row
    exists; a month without an invoice falls back to the rent in force for
    that month and is reported in ``missing_invoice_months``. Only payments
    dated on or before the as-of date count. Per-row paid amounts follow the
    payment's ``rent_months`` labels and are display only, the totals come
    from the raw invoice and payment sums.
    """
    as_of = as_of or date.today()

    _check_owned(lease, invoices, "Invoice")
    _check_owned(lease, payments, "Payment")
    _check_owned(lease, adjustments, "Rent adjustment")
    for e in expenses:
        if e.tenant_id != lease.tenant_id:
            raise LedgerInputError(
                f"Expense {e.id} is not charged to tenant {lease.tenant_id}")

    elapsed: Dict[str, InvoiceRecord] = {}
    for inv in invoices:
        if not is_elapsed(inv.year, inv.month, as_of):
            continue
        key = month_key(inv.year, inv.month)
        if key in elapsed:
            raise LedgerInputError(
                f"Lease {lease.id} has more than one invoice for {key}")
        elapsed[key] = inv

    paid = sorted((p for p in active_payments(payments) if p.payment_date <= as_of),
                  key=lambda p: (p.payment_date, p.id or 0))

    rows: List[MonthlyLedgerRow] = []
    missing: List[str] = []
    # no invoices at all means billing never started for this lease
    if elapsed:
        for year, month in month_range(lease.start_date, ledger_end_date(lease, as_of)):
            key = month_key(year, month)
            invoice = elapsed.get(key)
            if invoice is None:
                missing.append(key)
                rent_amount = rent_for_month(lease, adjustments, year, month)
            else:
                rent_amount = quantize(invoice.amount)

            labelled = [p for p in paid if key in p.rent_months]
            paid_amount = money_sum(p.amount for p in labelled)
            rows.append(MonthlyLedgerRow(
                month_key=key,
                year=year,
                month=month,
                rent_amount=rent_amount,
                paid_amount=paid_amount,
                outstanding=max(ZERO, rent_amount - paid_amount),
                has_invoice=invoice is not None,
                payment_ids=sorted(p.id for p in labelled if p.id is not None),
            ))

    opening = quantize(lease.opening_due_balance)
    total_invoiced = money_sum(inv.amount for inv in elapsed.values())
    total_paid = money_sum(p.amount for p in paid)
    total_outstanding = opening + total_invoiced - total_paid
    tenant_expenses = money_sum(e.amount for e in expenses)
    deposit_used = quantize(lease.security_deposit_used)

    return LeaseLedger(
        lease_id=lease.id,
        as_of=as_of,
        monthly_breakdown=rows,
        summary=LedgerSummary(
            opening_due_balance=opening,
            total_invoiced=total_invoiced,
            total_paid=total_paid,
            total_outstanding=total_outstanding,
            tenant_expenses=tenant_expenses,
            grand_total_outstanding=total_outstanding + tenant_expenses,
            security_deposit=quantize(lease.security_deposit),
            security_deposit_used=deposit_used,
            balance_after_deposit=total_outstanding - deposit_used,
            invoice_count=len(elapsed),
            payment_count=len(paid),
            missing_invoice_months=missing,
        ),
    )
