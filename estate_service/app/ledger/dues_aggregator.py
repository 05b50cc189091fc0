from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Iterable, List, Optional, Sequence
from pydantic import BaseModel

from ..enum.leasing_tenants_enum import LeaseStatus
from ..enum.space_sites_enum import FLOOR_ORDER, ShopStatus
from .lease_status import derive_lease_status
from .money import ZERO, money_sum, quantize
from .months import first_day, last_day, last_n_months, month_key, month_label
from .records import AdjustmentRecord, LeaseRecord, PaymentRecord, ShopRecord, active_payments
from .rent_schedule import rent_for_month

FLOOR_LABELS = {
    "ground": "Ground Floor",
    "first": "1st Floor",
    "second": "2nd Floor",
    "subedari": "Subedari",
}


class TenantDue(BaseModel):
    tenant_id: int
    tenant_name: str
    phone: Optional[str] = None
    current_due: Decimal
    lease_count: int = 0


class OccupancyStats(BaseModel):
    total_shops: int
    occupied_shops: int
    vacant_shops: int
    occupancy_rate: float


class FloorOccupancy(BaseModel):
    floor: str
    label: str
    total: int
    occupied: int
    vacant: int


class MonthlyTrendPoint(BaseModel):
    month_key: str
    label: str
    collected: Decimal
    expected: Decimal


class ExpiringLease(BaseModel):
    lease_id: int
    tenant_id: int
    shop_id: int
    end_date: date
    days_remaining: int


def floor_label(floor: str) -> str:
    return FLOOR_LABELS.get(floor, floor)


def tenant_current_due(opening_due_balance: Any, lease_outstandings: Iterable[Any]) -> Decimal:
    """Tenant-level opening debt plus every lease balance, floored at zero."""
    total = quantize(opening_due_balance) + money_sum(lease_outstandings)
    return max(ZERO, total)


def total_dues(dues: Iterable[TenantDue]) -> Decimal:
    return money_sum(d.current_due for d in dues)


def top_debtors(dues: Sequence[TenantDue], limit: int = 5) -> List[TenantDue]:
    owing = [d for d in dues if d.current_due > ZERO]
    owing.sort(key=lambda d: (-d.current_due, d.tenant_id))
    return owing[:limit]


def occupancy_stats(shops: Sequence[ShopRecord]) -> OccupancyStats:
    total = len(shops)
    occupied = sum(1 for s in shops if s.status == ShopStatus.occupied.value)
    rate = round(occupied / total * 100, 2) if total else 0.0
    return OccupancyStats(
        total_shops=total,
        occupied_shops=occupied,
        vacant_shops=total - occupied,
        occupancy_rate=rate,
    )


def floor_occupancy(shops: Sequence[ShopRecord]) -> List[FloorOccupancy]:
    result = []
    for floor in sorted(FLOOR_ORDER, key=FLOOR_ORDER.get):
        on_floor = [s for s in shops if s.floor == floor]
        occupied = sum(
            1 for s in on_floor if s.status == ShopStatus.occupied.value)
        result.append(FloorOccupancy(
            floor=floor,
            label=floor_label(floor),
            total=len(on_floor),
            occupied=occupied,
            vacant=len(on_floor) - occupied,
        ))
    return result


def collected_between(payments: Sequence[PaymentRecord], start: date, end: date) -> Decimal:
    return money_sum(
        p.amount for p in active_payments(payments)
        if start <= p.payment_date <= end
    )


def expected_rent_for_month(leases: Sequence[LeaseRecord], year: int, month: int,
                            adjustments: Sequence[AdjustmentRecord] = ()) -> Decimal:
    """Rent in force for the month on every non-terminated lease running during it."""
    start, end = first_day(year, month), last_day(year, month)
    return money_sum(
        rent_for_month(l, adjustments, year, month) for l in leases
        if l.status != LeaseStatus.terminated.value
        and l.start_date <= end and l.end_date >= start
    )


def monthly_collection_trend(
    payments: Sequence[PaymentRecord],
    leases: Sequence[LeaseRecord],
    as_of: date,
    months: int = 6,
    adjustments: Sequence[AdjustmentRecord] = (),
) -> List[MonthlyTrendPoint]:
    points = []
    for year, month in last_n_months(as_of, months):
        points.append(MonthlyTrendPoint(
            month_key=month_key(year, month),
            label=month_label(year, month),
            collected=collected_between(
                payments, first_day(year, month), last_day(year, month)),
            expected=expected_rent_for_month(leases, year, month, adjustments),
        ))
    return points


def expiring_leases(
    leases: Sequence[LeaseRecord],
    as_of: date,
    days: int = 30,
    limit: int = 5,
) -> List[ExpiringLease]:
    horizon = as_of + timedelta(days=days)
    upcoming = [
        l for l in leases
        if derive_lease_status(l.status, l.end_date, as_of, days) == LeaseStatus.expiring_soon.value
        and l.end_date <= horizon
    ]
    upcoming.sort(key=lambda l: (l.end_date, l.id))
    return [
        ExpiringLease(
            lease_id=l.id,
            tenant_id=l.tenant_id,
            shop_id=l.shop_id,
            end_date=l.end_date,
            days_remaining=(l.end_date - as_of).days,
        )
        for l in upcoming[:limit]
    ]
