from decimal import Decimal

import pytest

from estate_service.app.ledger.exceptions import LedgerInputError
from estate_service.app.ledger.ledger_calculator import LedgerSummary
from estate_service.app.ledger.settlement_calculator import (
    compute_settlement, global_ledger_balance, settlement_for_ledger
)


def test_deposit_covers_due_plus_damages():
    result = compute_settlement(
        current_due="8000", security_deposit="15000",
        tenant_adjustment="2000", owner_adjustment="0",
        use_security_deposit=True)

    assert result.amount_before_deposit == Decimal("10000.00")
    assert result.deposit_applied == Decimal("10000.00")
    assert result.final_settled_amount == Decimal("0.00")
    assert result.remaining_security_deposit == Decimal("5000.00")
    assert result.tenant_credit == Decimal("0.00")


def test_overpaid_tenant_gets_credit():
    result = compute_settlement(current_due="-3000", security_deposit="10000")

    assert result.final_settled_amount == Decimal("-3000.00")
    assert result.tenant_credit == Decimal("3000.00")
    assert result.deposit_applied == Decimal("0.00")
    assert result.remaining_security_deposit == Decimal("10000.00")


def test_deposit_not_applied_to_credit():
    result = compute_settlement(current_due="-500", security_deposit="2000",
                                use_security_deposit=True)
    assert result.deposit_applied == Decimal("0.00")
    assert result.tenant_credit == Decimal("500.00")


def test_deposit_smaller_than_due():
    result = compute_settlement(current_due="12000", security_deposit="5000",
                                use_security_deposit=True)
    assert result.deposit_applied == Decimal("5000.00")
    assert result.final_settled_amount == Decimal("7000.00")
    assert result.remaining_security_deposit == Decimal("0.00")


def test_owner_adjustment_reduces_amount():
    result = compute_settlement(current_due="4000", security_deposit="0",
                                owner_adjustment="1500")
    assert result.final_settled_amount == Decimal("2500.00")


def test_only_unused_deposit_is_available():
    result = compute_settlement(current_due="9000", security_deposit="10000",
                                security_deposit_used="6000",
                                use_security_deposit=True)
    assert result.available_security_deposit == Decimal("4000.00")
    assert result.deposit_applied == Decimal("4000.00")
    assert result.final_settled_amount == Decimal("5000.00")


@pytest.mark.parametrize("due,deposit,tenant_adj,owner_adj", [
    ("0", "0", "0", "0"),
    ("100", "50", "0", "0"),
    ("50", "100", "0", "0"),
    ("1000", "5000", "200", "1500"),
    ("0.01", "0.02", "0", "0.05"),
    ("25000", "25000", "0", "0"),
])
def test_applied_deposit_is_clamped(due, deposit, tenant_adj, owner_adj):
    result = compute_settlement(due, deposit, tenant_adjustment=tenant_adj,
                                owner_adjustment=owner_adj, use_security_deposit=True)
    assert result.deposit_applied <= Decimal(deposit)
    assert result.deposit_applied <= max(result.amount_before_deposit, Decimal("0"))
    assert result.deposit_applied >= Decimal("0")


def test_used_above_deposit_is_rejected():
    with pytest.raises(LedgerInputError):
        compute_settlement(current_due="0", security_deposit="100",
                           security_deposit_used="200")


def test_negative_deposit_is_rejected():
    with pytest.raises(LedgerInputError):
        compute_settlement(current_due="0", security_deposit="-1")


def _summary(outstanding, deposit="0", used="0"):
    return LedgerSummary(
        opening_due_balance=Decimal("0"), total_invoiced=Decimal(outstanding),
        total_paid=Decimal("0"), total_outstanding=Decimal(outstanding),
        tenant_expenses=Decimal("0"), grand_total_outstanding=Decimal(outstanding),
        security_deposit=Decimal(deposit), security_deposit_used=Decimal(used),
        balance_after_deposit=Decimal(outstanding) - Decimal(used),
        invoice_count=0, payment_count=0)


def test_settlement_from_ledger_summary():
    result = settlement_for_ledger(_summary("6000", deposit="4000"),
                                   use_security_deposit=True)
    assert result.current_due == Decimal("6000.00")
    assert result.final_settled_amount == Decimal("2000.00")


def test_global_ledger_balance_nets_other_leases():
    assert global_ledger_balance([_summary("3000"), _summary("-1000")]) == Decimal("2000.00")
    assert global_ledger_balance([]) == Decimal("0.00")
