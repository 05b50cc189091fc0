from datetime import date, timedelta
from typing import Optional

from ..enum.leasing_tenants_enum import LeaseStatus

EXPIRING_SOON_DAYS = 30


def derive_lease_status(
    stored_status: Optional[str],
    end_date: date,
    today: Optional[date] = None,
    expiring_days: int = EXPIRING_SOON_DAYS,
) -> str:
    # terminated is the only status that is ever user-set
    if stored_status == LeaseStatus.terminated.value:
        return LeaseStatus.terminated.value

    today = today or date.today()
    if end_date < today:
        return LeaseStatus.expired.value
    if end_date <= today + timedelta(days=expiring_days):
        return LeaseStatus.expiring_soon.value
    return LeaseStatus.active.value


def is_open_status(status: str) -> bool:
    return status != LeaseStatus.terminated.value
