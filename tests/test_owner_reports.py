from datetime import date
from decimal import Decimal

import pytest

from estate_service.app.ledger.exceptions import LedgerInputError
from estate_service.app.ledger.owner_reports import (
    OutstandingEntry, ReportPeriod, monthly_deposit_summary, owner_financial_transactions,
    owner_share, payments_in_period, report_period, top_outstandings
)
from estate_service.app.ledger.payment_form import build_payment_form
from estate_service.app.ledger.records import (
    AdjustmentRecord, DepositRecord, ExpenseRecord, InvoiceRecord, LeaseRecord,
    PaymentRecord, ShopRecord
)

SHOPS = [
    ShopRecord(id=1, shop_number="E-1", floor="ground", status="occupied",
               ownership_type="sole", owner_id=1),
    ShopRecord(id=2, shop_number="E-2", floor="ground", status="occupied",
               ownership_type="sole", owner_id=2),
    ShopRecord(id=3, shop_number="M-1", floor="ground", status="occupied",
               ownership_type="common"),
]


def make_lease(id, shop_id, start=date(2024, 1, 1), deposit="0", **extra):
    return LeaseRecord(id=id, tenant_id=id, shop_id=shop_id, start_date=start,
                       end_date=date(2026, 12, 31), monthly_rent=Decimal("5000"),
                       security_deposit=Decimal(deposit), **extra)


def pay(id, lease_id, amount, on, rent_months=(), deleted=False):
    return PaymentRecord(id=id, lease_id=lease_id, amount=Decimal(amount), payment_date=on,
                         rent_months=list(rent_months), is_deleted=deleted)


def test_report_period_month_and_range():
    march = report_period(month=3, year=2024)
    assert (march.start_date, march.end_date) == (date(2024, 3, 1), date(2024, 3, 31))
    assert march.contains(date(2024, 3, 31))
    assert not march.contains(date(2024, 4, 1))

    open_ended = report_period(start_date=date(2024, 2, 1))
    assert open_ended.contains(date(2030, 1, 1))
    assert not open_ended.contains(date(2024, 1, 31))
    assert ReportPeriod().contains(date(1999, 1, 1))


@pytest.mark.parametrize("kwargs", [
    {"month": 3},
    {"year": 2024},
    {"month": 13, "year": 2024},
    {"start_date": date(2024, 2, 1), "end_date": date(2024, 1, 1)},
])
def test_report_period_rejects_bad_input(kwargs):
    with pytest.raises(LedgerInputError):
        report_period(**kwargs)


def test_owner_share_splits_common_amounts():
    assert owner_share("1000", True, 3) == Decimal("333.33")
    assert owner_share("1000", False, 3) == Decimal("1000.00")
    with pytest.raises(LedgerInputError):
        owner_share("1000", True, 0)


def test_monthly_deposit_summary_groups_by_owner_and_month():
    leases = [make_lease(1, 1, deposit="15000"),
              make_lease(2, 2, start=date(2024, 2, 10), deposit="9000"),
              make_lease(3, 3, deposit="20000")]
    payments = [
        pay(1, 1, "5000", date(2024, 1, 5)),
        pay(2, 1, "5000", date(2024, 1, 25)),
        pay(3, 1, "5000", date(2024, 2, 5)),
        pay(4, 1, "9999", date(2024, 2, 6), deleted=True),
        pay(5, 2, "5000", date(2024, 2, 15)),
        # common shop income is not an owner deposit
        pay(6, 3, "5000", date(2024, 1, 5)),
        pay(7, 1, "5000", date(2025, 1, 5)),
    ]
    summary = monthly_deposit_summary({1: "Rahim Uddin", 2: "Salma Begum"},
                                      SHOPS, leases, payments, year=2024)

    rows = [(r.owner_name, r.year, r.month, r.rent_payments, r.security_deposits)
            for r in summary.rows]
    assert rows == [
        ("Rahim Uddin", 2024, 2, Decimal("5000.00"), Decimal("0.00")),
        ("Rahim Uddin", 2024, 1, Decimal("10000.00"), Decimal("15000.00")),
        ("Salma Begum", 2024, 2, Decimal("5000.00"), Decimal("9000.00")),
    ]
    assert summary.rows[1].total_deposit == Decimal("25000.00")
    assert summary.rows[1].month_name == "Jan"
    assert summary.available_years == [2025, 2024]
    assert summary.total_deposit == Decimal("44000.00")


def test_monthly_deposit_summary_for_one_owner():
    leases = [make_lease(1, 1, deposit="15000"), make_lease(2, 2, deposit="9000")]
    summary = monthly_deposit_summary({2: "Salma Begum"}, SHOPS, leases, [])
    assert [r.owner_id for r in summary.rows] == [2]


def test_financial_transactions_for_owner():
    deposits = [
        DepositRecord(id=1, owner_id=1, amount=Decimal("7000"), deposit_date=date(2024, 1, 25),
                      bank_name="Sonali Bank", deposit_slip_ref="SL-9"),
        DepositRecord(id=2, owner_id=2, amount=Decimal("500"), deposit_date=date(2024, 1, 26),
                      bank_name="Other Bank"),
        DepositRecord(id=3, owner_id=1, amount=Decimal("100"), deposit_date=date(2024, 1, 27),
                      bank_name="Sonali Bank", is_deleted=True),
    ]
    expenses = [
        ExpenseRecord(id=1, expense_type="maintenance", description="Lift repair",
                      amount=Decimal("600"), expense_date=date(2024, 1, 20), allocation="common"),
        ExpenseRecord(id=2, expense_type="guard", description="Night guard",
                      amount=Decimal("1000"), expense_date=date(2024, 1, 10), allocation="owner",
                      owner_id=1),
        ExpenseRecord(id=3, expense_type="cleaner", amount=Decimal("400"),
                      expense_date=date(2024, 1, 11), allocation="owner", owner_id=2),
        ExpenseRecord(id=4, expense_type="electricity", amount=Decimal("900"),
                      expense_date=date(2024, 2, 1), allocation="common"),
    ]
    result = owner_financial_transactions(1, 2, deposits, expenses,
                                          report_period(month=1, year=2024))

    assert [(t.transaction_type, t.reference_id) for t in result.transactions] == [
        ("deposit", 1), ("expense", 1), ("expense", 2)]
    deposit, lift, guard = result.transactions
    assert deposit.description == "Sonali Bank - Ref: SL-9"
    assert lift.amount == Decimal("300.00")
    assert lift.is_common is True
    assert guard.category == "Guard"
    assert result.total_deposits == Decimal("7000.00")
    assert result.total_expenses == Decimal("1300.00")
    assert result.net_balance == Decimal("5700.00")


def entry(lease_id, outstanding):
    return OutstandingEntry(
        lease_id=lease_id, tenant_id=lease_id, tenant_name=f"Tenant {lease_id}", shop_id=lease_id,
        shop_number=f"E-{lease_id}", floor="ground", shop_location=f"Ground Floor - E-{lease_id}",
        outstanding=Decimal(outstanding), full_outstanding=Decimal(outstanding))


def test_top_outstandings_ranks_and_totals_all_debtors():
    entries = [entry(1, "5000"), entry(2, "0"), entry(3, "12000"), entry(4, "-300"),
               entry(5, "700")]
    result = top_outstandings(1, entries, limit=2)

    assert [e.lease_id for e in result.entries] == [3, 1]
    assert result.total_outstanding == Decimal("17700.00")
    assert result.debtor_count == 3


def test_payments_in_period_oldest_first():
    payments = [pay(2, 1, "10", date(2024, 3, 20)), pay(1, 1, "20", date(2024, 3, 2)),
                pay(3, 1, "30", date(2024, 4, 1)), pay(4, 1, "40", date(2024, 3, 5), deleted=True)]
    found = payments_in_period(payments, report_period(month=3, year=2024))
    assert [p.id for p in found] == [1, 2]


def test_payment_form_grid():
    lease = make_lease(1, 1, opening_due_balance=Decimal("500")).model_copy(
        update={"monthly_rent": Decimal("6000")})
    history = [AdjustmentRecord(id=1, lease_id=1, previous_rent=Decimal("5000"),
                                new_rent=Decimal("6000"), adjustment_amount=Decimal("1000"),
                                effective_date=date(2024, 5, 1))]
    invoices = [
        InvoiceRecord(id=1, lease_id=1, amount=Decimal("5000"), month=1, year=2024,
                      paid_amount=Decimal("5000"), is_paid=True),
        InvoiceRecord(id=2, lease_id=1, amount=Decimal("5000"), month=2, year=2024,
                      paid_amount=Decimal("2000"), is_paid=False),
        InvoiceRecord(id=3, lease_id=1, amount=Decimal("5000"), month=3, year=2024,
                      paid_amount=Decimal("0"), is_paid=False),
    ]
    payments = [pay(1, 1, "7000", date(2024, 2, 3), ["2024-01", "2024-02"])]

    form = build_payment_form(lease, invoices, payments, history, today=date(2024, 3, 10),
                              tenant_opening_due=Decimal("1500"),
                              tenant_paid_total=Decimal("7000"))

    assert form.months[0].month_key == "2024-01"
    assert form.months[-1].month_key == "2025-03"
    assert len(form.months) == 15
    jan, feb, mar, apr, may = form.months[:5]
    assert jan.is_paid and jan.remaining_balance == Decimal("0.00")
    assert jan.payment_dates == [date(2024, 2, 3)]
    assert feb.remaining_balance == Decimal("3000.00")
    assert mar.is_current and not mar.is_past
    assert apr.is_future and apr.rent == Decimal("5000.00")
    assert may.rent == Decimal("6000.00")
    assert form.current_rent == Decimal("5000.00")
    assert form.total_paid == Decimal("7000.00")
    # 500 lease opening + 15000 billed - 7000 paid
    assert form.outstanding_balance == Decimal("8500.00")
    assert form.opening_balance_remaining == Decimal("0.00")


def test_payment_form_stops_at_terminated_end():
    lease = make_lease(1, 1, status="terminated").model_copy(
        update={"end_date": date(2024, 2, 15)})
    form = build_payment_form(lease, [], [], today=date(2024, 6, 1))
    assert [m.month_key for m in form.months] == ["2024-01", "2024-02"]
