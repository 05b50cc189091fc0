from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence
from pydantic import BaseModel

from ..enum.leasing_tenants_enum import LeaseStatus
from .money import ZERO, money_sum, quantize
from .months import first_day, is_elapsed, month_key, month_label, month_range, shift_month
from .records import AdjustmentRecord, InvoiceRecord, LeaseRecord, PaymentRecord, active_payments
from .rent_schedule import rent_for_month


class PaymentFormMonth(BaseModel):
    year: int
    month: int
    month_key: str
    label: str
    rent: Decimal
    is_paid: bool
    paid_amount: Decimal
    remaining_balance: Decimal
    payment_dates: List[date] = []
    is_past: bool
    is_current: bool
    is_future: bool


class PaymentFormData(BaseModel):
    lease_id: int
    tenant_id: int
    current_rent: Decimal
    opening_balance: Decimal
    opening_balance_remaining: Decimal
    outstanding_balance: Decimal
    total_paid: Decimal
    months: List[PaymentFormMonth]


def build_payment_form(
    lease: LeaseRecord,
    invoices: Sequence[InvoiceRecord],
    payments: Sequence[PaymentRecord],
    adjustments: Sequence[AdjustmentRecord] = (),
    today: Optional[date] = None,
    tenant_opening_due: Any = ZERO,
    tenant_paid_total: Any = ZERO,
    future_months: int = 12,
) -> PaymentFormData:
    """
    Month grid for the record-payment form.

    Runs from the lease start through ``future_months`` past the current
    month so rent can be paid ahead. A terminated lease stops at its end
    month. Paid status comes from the invoices' FIFO fields, payment dates
    from the payments' ``rent_months`` labels.
    """
    today = today or date.today()

    by_month: Dict[tuple, InvoiceRecord] = {(i.year, i.month): i for i in invoices}
    paid = [p for p in active_payments(payments) if p.payment_date <= today]

    dates_by_month: Dict[str, List[date]] = {}
    for p in sorted(paid, key=lambda p: (p.payment_date, p.id or 0)):
        for key in p.rent_months:
            dates = dates_by_month.setdefault(key, [])
            if p.payment_date not in dates:
                dates.append(p.payment_date)

    last = first_day(*shift_month(today.year, today.month, future_months))
    if lease.status == LeaseStatus.terminated.value and lease.end_date < last:
        last = lease.end_date

    current = (today.year, today.month)
    months = []
    for year, month in month_range(lease.start_date, last):
        invoice = by_month.get((year, month))
        # billed months show what was invoiced
        rent = quantize(invoice.amount) if invoice else rent_for_month(lease, adjustments, year, month)
        paid_amount = quantize(invoice.paid_amount) if invoice and invoice.paid_amount else ZERO
        key = month_key(year, month)
        months.append(PaymentFormMonth(
            year=year,
            month=month,
            month_key=key,
            label=month_label(year, month),
            rent=rent,
            is_paid=bool(invoice and invoice.is_paid),
            paid_amount=paid_amount,
            remaining_balance=max(ZERO, rent - paid_amount),
            payment_dates=dates_by_month.get(key, []),
            is_past=(year, month) < current,
            is_current=(year, month) == current,
            is_future=(year, month) > current,
        ))

    total_paid = money_sum(p.amount for p in paid)
    invoiced = money_sum(i.amount for i in invoices if is_elapsed(i.year, i.month, today))
    opening = quantize(tenant_opening_due)

    return PaymentFormData(
        lease_id=lease.id,
        tenant_id=lease.tenant_id,
        current_rent=rent_for_month(lease, adjustments, today.year, today.month),
        opening_balance=opening,
        opening_balance_remaining=max(ZERO, opening - quantize(tenant_paid_total)),
        outstanding_balance=max(
            ZERO, quantize(lease.opening_due_balance) + invoiced - total_paid),
        total_paid=total_paid,
        months=months,
    )
