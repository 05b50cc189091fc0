import re
from calendar import monthrange
from datetime import date
from typing import List, Tuple

from dateutil.relativedelta import relativedelta

from .exceptions import LedgerInputError

MONTH_KEY_PATTERN = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")

MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

YearMonth = Tuple[int, int]


def month_key(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def parse_month_key(key: str) -> YearMonth:
    if not isinstance(key, str):
        raise LedgerInputError(f"Invalid month key: {key!r}")
    match = MONTH_KEY_PATTERN.match(key)
    if not match:
        raise LedgerInputError(
            f"Invalid month key: {key!r}, expected YYYY-MM")
    return int(match.group(1)), int(match.group(2))


def month_label(year: int, month: int) -> str:
    return f"{MONTH_NAMES[month - 1]} {year}"


def first_day(year: int, month: int) -> date:
    return date(year, month, 1)


def last_day(year: int, month: int) -> date:
    return date(year, month, monthrange(year, month)[1])


def shift_month(year: int, month: int, delta: int) -> YearMonth:
    d = date(year, month, 1) + relativedelta(months=delta)
    return d.year, d.month


def month_range(start: date, end: date) -> List[YearMonth]:
    """Calendar months from start through end, both inclusive."""
    months = []
    current = (start.year, start.month)
    stop = (end.year, end.month)
    while current <= stop:
        months.append(current)
        current = shift_month(current[0], current[1], 1)
    return months


def last_n_months(as_of: date, n: int) -> List[YearMonth]:
    """The n months ending with as_of's month, oldest first."""
    return [shift_month(as_of.year, as_of.month, -i) for i in range(n - 1, -1, -1)]


def is_elapsed(year: int, month: int, as_of: date) -> bool:
    return (year, month) <= (as_of.year, as_of.month)
