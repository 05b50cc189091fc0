from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence

from .money import quantize
from .months import first_day
from .records import AdjustmentRecord, LeaseRecord


def lease_adjustments(lease: LeaseRecord, adjustments: Sequence[AdjustmentRecord]) -> List[AdjustmentRecord]:
    """The lease's adjustments in the order they take effect."""
    return sorted(
        (a for a in adjustments if a.lease_id == lease.id),
        key=lambda a: (a.effective_date, a.id or 0),
    )


def rent_for_month(lease: LeaseRecord, adjustments: Sequence[AdjustmentRecord],
                   year: int, month: int) -> Decimal:
    """
    Rent in force for a calendar month.

    Starts from the rent agreed before the earliest adjustment and applies
    every adjustment effective on or before the first day of the month, so
    an adjustment dated mid-month is billed from the following month.
    Without adjustments the lease rent applies throughout.
    """
    history = lease_adjustments(lease, adjustments)
    if not history:
        return quantize(lease.monthly_rent)

    target = first_day(year, month)
    rent = history[0].previous_rent
    for adj in history:
        if adj.effective_date > target:
            break
        rent = adj.new_rent
    return quantize(rent)


def current_rent(lease: LeaseRecord, adjustments: Sequence[AdjustmentRecord],
                 today: Optional[date] = None) -> Decimal:
    today = today or date.today()
    return rent_for_month(lease, adjustments, today.year, today.month)
