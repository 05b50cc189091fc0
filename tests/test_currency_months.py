from datetime import date
from decimal import Decimal

import pytest

from estate_service.app.ledger.currency import convert_model, to_display
from estate_service.app.ledger.exceptions import LedgerInputError
from estate_service.app.ledger.money import money_str, quantize
from estate_service.app.ledger.months import (
    last_n_months, month_label, month_range, parse_month_key, shift_month
)
from estate_service.app.ledger.settlement_calculator import compute_settlement


def test_display_conversion_rounds_half_up():
    assert to_display("100.005", "1") == Decimal("100.01")
    assert to_display("1234.50", "0.0085") == Decimal("10.49")


def test_display_conversion_needs_positive_rate():
    with pytest.raises(LedgerInputError):
        to_display("10", "0")


def test_convert_model_leaves_source_untouched():
    result = compute_settlement(current_due="1000", security_deposit="500")
    shown = convert_model(result, "0.5")
    assert shown.current_due == Decimal("500.00")
    assert shown.security_deposit == Decimal("250.00")
    assert shown.use_security_deposit is False
    assert result.current_due == Decimal("1000.00")
    assert convert_model(result, "1") is result


def test_money_helpers():
    assert quantize(0.1) == Decimal("0.10")
    assert money_str("5") == "5.00"
    with pytest.raises(LedgerInputError):
        quantize("abc")


def test_month_helpers():
    assert parse_month_key("2024-02") == (2024, 2)
    assert shift_month(2024, 12, 1) == (2025, 1)
    assert shift_month(2024, 1, -1) == (2023, 12)
    assert month_range(date(2023, 11, 30), date(2024, 2, 1)) == [
        (2023, 11), (2023, 12), (2024, 1), (2024, 2)]
    assert month_range(date(2024, 3, 1), date(2024, 2, 1)) == []
    assert last_n_months(date(2024, 2, 10), 3) == [(2023, 12), (2024, 1), (2024, 2)]
    assert month_label(2024, 9) == "Sep 2024"


@pytest.mark.parametrize("key", ["2024-1", "24-01", "2024-00", "2024/01", ""])
def test_invalid_month_keys(key):
    with pytest.raises(LedgerInputError):
        parse_month_key(key)
