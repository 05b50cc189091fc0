from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence
from pydantic import BaseModel

from .money import ZERO, money_sum, quantize
from .months import is_elapsed
from .records import InvoiceRecord, PaymentRecord, active_payments


class InvoiceAllocation(BaseModel):
    invoice_id: Optional[int] = None
    year: int
    month: int
    amount: Decimal
    paid_amount: Decimal
    is_paid: bool


def allocate_invoice_payments(
    invoices: Sequence[InvoiceRecord],
    payments: Sequence[PaymentRecord],
    as_of: Optional[date] = None,
) -> List[InvoiceAllocation]:
    """
    Pour a lease's total paid amount into its elapsed invoices, oldest
    first. Only drives the stored paid flags, never the ledger totals.
    """
    as_of = as_of or date.today()
    remaining = money_sum(p.amount for p in active_payments(payments))

    result = []
    for inv in sorted(invoices, key=lambda i: (i.year, i.month, i.id or 0)):
        amount = quantize(inv.amount)
        paid = ZERO
        if is_elapsed(inv.year, inv.month, as_of) and remaining > ZERO:
            paid = min(amount, remaining)
            remaining -= paid
        result.append(InvoiceAllocation(
            invoice_id=inv.id,
            year=inv.year,
            month=inv.month,
            amount=amount,
            paid_amount=paid,
            is_paid=paid >= amount,
        ))
    return result
