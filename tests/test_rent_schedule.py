from datetime import date
from decimal import Decimal

from estate_service.app.ledger.collection_report import collection_report
from estate_service.app.ledger.dues_aggregator import expected_rent_for_month
from estate_service.app.ledger.ledger_calculator import compute_lease_ledger
from estate_service.app.ledger.records import (
    AdjustmentRecord, InvoiceRecord, LeaseRecord, PaymentRecord
)
from estate_service.app.ledger.rent_schedule import current_rent, rent_for_month
from estate_service.app.ledger.tenant_statement import build_tenant_statement


def make_lease(**overrides):
    # monthly_rent holds the latest agreed rent, as after an adjustment
    data = dict(id=1, tenant_id=10, shop_id=100, start_date=date(2024, 1, 1),
                end_date=date(2026, 12, 31), monthly_rent=Decimal("7000"))
    data.update(overrides)
    return LeaseRecord(**data)


def adjustment(id, previous, new, effective, lease_id=1):
    return AdjustmentRecord(id=id, lease_id=lease_id, previous_rent=Decimal(previous),
                            new_rent=Decimal(new),
                            adjustment_amount=Decimal(new) - Decimal(previous),
                            effective_date=effective)


HISTORY = [
    adjustment(1, "5000", "6000", date(2024, 6, 1)),
    adjustment(2, "6000", "7000", date(2025, 1, 15)),
]


def test_rent_without_adjustments_is_the_lease_rent():
    lease = make_lease(monthly_rent=Decimal("5000"))
    assert rent_for_month(lease, [], 2024, 3) == Decimal("5000.00")


def test_rent_follows_adjustment_history():
    lease = make_lease()
    assert rent_for_month(lease, HISTORY, 2024, 5) == Decimal("5000.00")
    assert rent_for_month(lease, HISTORY, 2024, 6) == Decimal("6000.00")
    assert rent_for_month(lease, HISTORY, 2024, 12) == Decimal("6000.00")


def test_mid_month_adjustment_starts_next_month():
    lease = make_lease()
    assert rent_for_month(lease, HISTORY, 2025, 1) == Decimal("6000.00")
    assert rent_for_month(lease, HISTORY, 2025, 2) == Decimal("7000.00")


def test_future_adjustment_is_not_billed_early():
    lease = make_lease()
    future = [adjustment(1, "5000", "7000", date(2031, 1, 1))]
    assert rent_for_month(lease, future, 2024, 1) == Decimal("5000.00")
    assert current_rent(lease, future, date(2030, 12, 31)) == Decimal("5000.00")
    assert current_rent(lease, future, date(2031, 1, 1)) == Decimal("7000.00")


def test_other_leases_adjustments_are_ignored():
    lease = make_lease(monthly_rent=Decimal("5000"))
    other = [adjustment(9, "100", "200", date(2024, 1, 1), lease_id=2)]
    assert rent_for_month(lease, other, 2024, 6) == Decimal("5000.00")


def test_ledger_fills_missing_month_with_scheduled_rent():
    lease = make_lease()
    invoices = [InvoiceRecord(id=m, lease_id=1, amount=Decimal("5000"), month=m, year=2024)
                for m in range(1, 6)]
    ledger = compute_lease_ledger(lease, invoices, [], HISTORY, as_of=date(2024, 7, 31))

    jun, jul = ledger.monthly_breakdown[-2:]
    assert ledger.summary.missing_invoice_months == ["2024-06", "2024-07"]
    assert jun.rent_amount == Decimal("6000.00")
    assert jul.rent_amount == Decimal("6000.00")


def test_expected_rent_uses_rent_in_force():
    lease = make_lease(monthly_rent=Decimal("6000"))
    history = HISTORY[:1]
    assert expected_rent_for_month([lease], 2024, 5, history) == Decimal("5000.00")
    assert expected_rent_for_month([lease], 2024, 6, history) == Decimal("6000.00")

    report = collection_report([lease], [], date(2024, 6, 30), months=2, adjustments=history)
    assert [r.expected for r in report.rows] == [Decimal("5000.00"), Decimal("6000.00")]


def test_payments_after_as_of_are_left_out():
    lease = make_lease(monthly_rent=Decimal("5000"))
    invoices = [InvoiceRecord(id=m, lease_id=1, amount=Decimal("5000"), month=m, year=2024)
                for m in (1, 2)]
    payments = [
        PaymentRecord(id=1, lease_id=1, amount=Decimal("4000"), payment_date=date(2024, 1, 10)),
        PaymentRecord(id=2, lease_id=1, amount=Decimal("3000"), payment_date=date(2024, 3, 5),
                      rent_months=["2024-02"]),
    ]
    as_of = date(2024, 2, 29)

    ledger = compute_lease_ledger(lease, invoices, payments, as_of=as_of)
    assert ledger.summary.total_paid == Decimal("4000.00")
    assert ledger.summary.payment_count == 1
    assert ledger.monthly_breakdown[1].paid_amount == Decimal("0.00")

    statement = build_tenant_statement(10, Decimal("0"), [lease], invoices, payments, as_of)
    assert statement.closing_balance == ledger.summary.total_outstanding == Decimal("6000.00")
