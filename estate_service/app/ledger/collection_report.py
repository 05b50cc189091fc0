from datetime import date
from decimal import Decimal
from typing import List, Sequence
from pydantic import BaseModel

from .dues_aggregator import collected_between, expected_rent_for_month
from .money import ZERO
from .months import first_day, last_day, last_n_months, month_key, month_label
from .records import AdjustmentRecord, LeaseRecord, PaymentRecord


class CollectionRow(BaseModel):
    month_key: str
    label: str
    expected: Decimal
    collected: Decimal
    pending: Decimal


class CollectionReport(BaseModel):
    as_of: date
    rows: List[CollectionRow]
    total_expected: Decimal
    total_collected: Decimal
    total_pending: Decimal


def collection_report(
    leases: Sequence[LeaseRecord],
    payments: Sequence[PaymentRecord],
    as_of: date,
    months: int = 6,
    adjustments: Sequence[AdjustmentRecord] = (),
) -> CollectionReport:
    rows = []
    for year, month in last_n_months(as_of, months):
        expected = expected_rent_for_month(leases, year, month, adjustments)
        collected = collected_between(
            payments, first_day(year, month), last_day(year, month))
        rows.append(CollectionRow(
            month_key=month_key(year, month),
            label=month_label(year, month),
            expected=expected,
            collected=collected,
            pending=max(ZERO, expected - collected),
        ))

    return CollectionReport(
        as_of=as_of,
        rows=rows,
        total_expected=sum((r.expected for r in rows), ZERO),
        total_collected=sum((r.collected for r in rows), ZERO),
        total_pending=sum((r.pending for r in rows), ZERO),
    )
