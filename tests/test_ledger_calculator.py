from datetime import date
from decimal import Decimal

import pytest

from estate_service.app.ledger.exceptions import LedgerInputError
from estate_service.app.ledger.ledger_calculator import compute_lease_ledger
from estate_service.app.ledger.records import (
    ExpenseRecord, InvoiceRecord, LeaseRecord, PaymentRecord
)


def make_lease(**overrides):
    data = dict(id=1, tenant_id=10, shop_id=100, start_date=date(2024, 1, 1),
                end_date=date(2026, 12, 31), monthly_rent=Decimal("5000"))
    data.update(overrides)
    return LeaseRecord(**data)


def monthly_invoices(lease_id, months, amount="5000", year=2024):
    return [
        InvoiceRecord(id=m, lease_id=lease_id, amount=Decimal(amount), month=m, year=year)
        for m in months
    ]


def test_four_unpaid_months():
    lease = make_lease()
    ledger = compute_lease_ledger(
        lease, monthly_invoices(1, range(1, 5)), [], as_of=date(2024, 4, 1))

    assert [r.month_key for r in ledger.monthly_breakdown] == [
        "2024-01", "2024-02", "2024-03", "2024-04"]
    assert all(r.outstanding == Decimal("5000.00") for r in ledger.monthly_breakdown)
    assert ledger.summary.total_outstanding == Decimal("20000.00")
    assert ledger.summary.total_invoiced == Decimal("20000.00")
    assert ledger.summary.total_paid == Decimal("0.00")


def test_payment_labelled_for_two_months():
    lease = make_lease()
    payment = PaymentRecord(id=7, lease_id=1, amount=Decimal("10000"),
                            payment_date=date(2024, 2, 5),
                            rent_months=["2024-01", "2024-02"])
    ledger = compute_lease_ledger(
        lease, monthly_invoices(1, range(1, 5)), [payment], as_of=date(2024, 4, 1))

    assert ledger.summary.total_paid == Decimal("10000.00")
    assert ledger.summary.total_outstanding == Decimal("10000.00")

    jan, feb, mar, _ = ledger.monthly_breakdown
    # the label is advisory, each named month shows the whole payment
    assert jan.paid_amount == Decimal("10000.00")
    assert feb.paid_amount == Decimal("10000.00")
    assert jan.outstanding == Decimal("0.00")
    assert jan.payment_ids == [7]
    assert mar.paid_amount == Decimal("0.00")
    assert mar.outstanding == Decimal("5000.00")


def test_unlabelled_payment_counts_in_total_only():
    lease = make_lease()
    payment = PaymentRecord(id=1, lease_id=1, amount=Decimal("3000"),
                            payment_date=date(2024, 3, 1))
    ledger = compute_lease_ledger(
        lease, monthly_invoices(1, range(1, 4)), [payment], as_of=date(2024, 3, 31))

    assert ledger.summary.total_paid == Decimal("3000.00")
    assert all(r.paid_amount == Decimal("0.00") for r in ledger.monthly_breakdown)


def test_no_invoices_gives_empty_breakdown_and_opening_only():
    lease = make_lease(opening_due_balance=Decimal("2500"))
    ledger = compute_lease_ledger(lease, [], [], as_of=date(2024, 6, 1))

    assert ledger.monthly_breakdown == []
    assert ledger.summary.total_invoiced == Decimal("0.00")
    assert ledger.summary.total_paid == Decimal("0.00")
    assert ledger.summary.total_outstanding == Decimal("2500.00")


def test_missing_invoice_month_uses_current_rent_and_is_flagged():
    lease = make_lease(monthly_rent=Decimal("6000"))
    invoices = monthly_invoices(1, [1, 3])
    ledger = compute_lease_ledger(lease, invoices, [], as_of=date(2024, 3, 15))

    feb = ledger.monthly_breakdown[1]
    assert feb.month_key == "2024-02"
    assert not feb.has_invoice
    assert feb.rent_amount == Decimal("6000.00")
    assert ledger.summary.missing_invoice_months == ["2024-02"]
    # the total only counts invoices that exist
    assert ledger.summary.total_invoiced == Decimal("10000.00")


def test_invoice_amount_wins_over_current_rent():
    lease = make_lease(monthly_rent=Decimal("7000"))
    ledger = compute_lease_ledger(
        lease, monthly_invoices(1, [1, 2]), [], as_of=date(2024, 2, 1))
    assert [r.rent_amount for r in ledger.monthly_breakdown] == [
        Decimal("5000.00"), Decimal("5000.00")]


def test_future_invoices_are_ignored():
    lease = make_lease()
    ledger = compute_lease_ledger(
        lease, monthly_invoices(1, range(1, 7)), [], as_of=date(2024, 2, 10))
    assert len(ledger.monthly_breakdown) == 2
    assert ledger.summary.invoice_count == 2
    assert ledger.summary.total_invoiced == Decimal("10000.00")


def test_terminated_lease_stops_at_end_month():
    lease = make_lease(status="terminated", end_date=date(2024, 3, 20))
    ledger = compute_lease_ledger(
        lease, monthly_invoices(1, range(1, 4)), [], as_of=date(2024, 8, 1))
    assert [r.month_key for r in ledger.monthly_breakdown] == [
        "2024-01", "2024-02", "2024-03"]


def test_deleted_payments_are_excluded():
    lease = make_lease()
    payments = [
        PaymentRecord(id=1, lease_id=1, amount=Decimal("5000"),
                      payment_date=date(2024, 1, 5), rent_months=["2024-01"]),
        PaymentRecord(id=2, lease_id=1, amount=Decimal("5000"),
                      payment_date=date(2024, 1, 6), rent_months=["2024-01"],
                      is_deleted=True),
    ]
    ledger = compute_lease_ledger(
        lease, monthly_invoices(1, [1]), payments, as_of=date(2024, 1, 31))
    assert ledger.summary.total_paid == Decimal("5000.00")
    assert ledger.summary.payment_count == 1


def test_overpayment_gives_negative_outstanding():
    lease = make_lease()
    payment = PaymentRecord(id=1, lease_id=1, amount=Decimal("8000"),
                            payment_date=date(2024, 1, 5))
    ledger = compute_lease_ledger(
        lease, monthly_invoices(1, [1]), [payment], as_of=date(2024, 1, 31))
    assert ledger.summary.total_outstanding == Decimal("-3000.00")


def test_tenant_expenses_add_to_grand_total():
    lease = make_lease()
    expense = ExpenseRecord(id=1, expense_type="repair", amount=Decimal("750.50"),
                            expense_date=date(2024, 1, 20), allocation="common",
                            tenant_id=10)
    ledger = compute_lease_ledger(
        lease, monthly_invoices(1, [1]), [], as_of=date(2024, 1, 31),
        expenses=[expense])
    assert ledger.summary.tenant_expenses == Decimal("750.50")
    assert ledger.summary.grand_total_outstanding == Decimal("5750.50")


def test_deposit_used_reduces_balance_after_deposit_only():
    lease = make_lease(security_deposit=Decimal("15000"),
                       security_deposit_used=Decimal("4000"))
    ledger = compute_lease_ledger(
        lease, monthly_invoices(1, [1, 2]), [], as_of=date(2024, 2, 1))
    assert ledger.summary.total_outstanding == Decimal("10000.00")
    assert ledger.summary.balance_after_deposit == Decimal("6000.00")


def test_same_inputs_give_identical_output():
    lease = make_lease(opening_due_balance=Decimal("1200"))
    invoices = monthly_invoices(1, range(1, 6))
    payments = [
        PaymentRecord(id=2, lease_id=1, amount=Decimal("4500"),
                      payment_date=date(2024, 2, 1), rent_months=["2024-01"]),
        PaymentRecord(id=3, lease_id=1, amount=Decimal("9000"),
                      payment_date=date(2024, 4, 1), rent_months=["2024-02", "2024-03"]),
    ]
    first = compute_lease_ledger(lease, invoices, payments, as_of=date(2024, 5, 31))
    second = compute_lease_ledger(lease, invoices, payments, as_of=date(2024, 5, 31))
    assert first.model_dump_json() == second.model_dump_json()


@pytest.mark.parametrize("opening,paid,months", [
    ("0", "0", 1),
    ("1500.25", "2200.10", 3),
    ("0", "99999.99", 12),
    ("300", "0", 7),
])
def test_outstanding_equals_opening_plus_invoiced_minus_paid(opening, paid, months):
    lease = make_lease(opening_due_balance=Decimal(opening))
    invoices = monthly_invoices(1, range(1, months + 1), amount="4321.15")
    payments = [PaymentRecord(id=1, lease_id=1, amount=Decimal(paid),
                              payment_date=date(2024, 1, 10))]
    s = compute_lease_ledger(lease, invoices, payments, as_of=date(2024, 12, 31)).summary
    assert s.total_outstanding == s.opening_due_balance + s.total_invoiced - s.total_paid


@pytest.mark.parametrize("present", [[1, 2, 3, 4, 5, 6], [1, 6], [2, 5], [1]])
def test_breakdown_covers_every_month_once(present):
    lease = make_lease()
    ledger = compute_lease_ledger(
        lease, monthly_invoices(1, present), [], as_of=date(2024, 6, 30))
    keys = [r.month_key for r in ledger.monthly_breakdown]
    assert keys == [f"2024-{m:02d}" for m in range(1, 7)]


def test_records_of_another_lease_are_rejected():
    lease = make_lease()
    stray = InvoiceRecord(id=9, lease_id=2, amount=Decimal("5000"), month=1, year=2024)
    with pytest.raises(LedgerInputError):
        compute_lease_ledger(lease, [stray], [], as_of=date(2024, 1, 31))


def test_duplicate_invoice_month_is_rejected():
    lease = make_lease()
    invoices = monthly_invoices(1, [1]) + [
        InvoiceRecord(id=99, lease_id=1, amount=Decimal("5000"), month=1, year=2024)]
    with pytest.raises(LedgerInputError):
        compute_lease_ledger(lease, invoices, [], as_of=date(2024, 1, 31))


def test_bad_rent_month_label_is_rejected():
    with pytest.raises(ValueError):
        PaymentRecord(id=1, lease_id=1, amount=Decimal("1"),
                      payment_date=date(2024, 1, 1), rent_months=["2024-13"])
