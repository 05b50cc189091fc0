from datetime import date

import pytest

from estate_service.app.ledger.lease_status import derive_lease_status, is_open_status

TODAY = date(2024, 6, 15)


@pytest.mark.parametrize("stored,end_date,expected", [
    ("active", date(2025, 1, 1), "active"),
    ("active", date(2024, 7, 15), "expiring_soon"),
    ("active", date(2024, 6, 15), "expiring_soon"),
    ("active", date(2024, 6, 14), "expired"),
    ("terminated", date(2025, 1, 1), "terminated"),
    ("terminated", date(2020, 1, 1), "terminated"),
    (None, date(2025, 1, 1), "active"),
])
def test_status_is_derived_from_end_date(stored, end_date, expected):
    assert derive_lease_status(stored, end_date, TODAY) == expected


def test_lookahead_window_is_configurable():
    end = date(2024, 8, 1)
    assert derive_lease_status("active", end, TODAY, expiring_days=30) == "active"
    assert derive_lease_status("active", end, TODAY, expiring_days=60) == "expiring_soon"


def test_only_terminated_is_closed():
    assert is_open_status("expired")
    assert not is_open_status("terminated")
