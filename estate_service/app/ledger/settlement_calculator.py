from decimal import Decimal
from typing import Any, Optional
from pydantic import BaseModel

from .exceptions import LedgerInputError
from .money import ZERO, quantize


class SettlementResult(BaseModel):
    current_due: Decimal
    tenant_adjustment: Decimal
    owner_adjustment: Decimal
    amount_before_deposit: Decimal
    use_security_deposit: bool
    security_deposit: Decimal
    security_deposit_used: Decimal
    available_security_deposit: Decimal
    deposit_applied: Decimal
    final_settled_amount: Decimal
    tenant_credit: Decimal
    remaining_security_deposit: Decimal
    global_ledger_balance: Optional[Decimal] = None


def compute_settlement(
    current_due: Any,
    security_deposit: Any,
    security_deposit_used: Any = 0,
    tenant_adjustment: Any = 0,
    owner_adjustment: Any = 0,
    use_security_deposit: bool = False,
) -> SettlementResult:
    """
    Preview of the one-time termination settlement.

    Only the part of the deposit not already consumed can be applied, and
    never more than a positive amount due. A negative final amount is
    money owed back to the tenant.
    """
    deposit = quantize(security_deposit)
    used = quantize(security_deposit_used)
    if deposit < ZERO or used < ZERO:
        raise LedgerInputError("Security deposit amounts cannot be negative")
    if used > deposit:
        raise LedgerInputError(
            "Security deposit used cannot exceed the security deposit")

    due = quantize(current_due)
    tenant_adj = quantize(tenant_adjustment)
    owner_adj = quantize(owner_adjustment)

    amount = due + tenant_adj - owner_adj
    available = deposit - used

    applied = ZERO
    if use_security_deposit:
        applied = min(available, max(amount, ZERO))

    final = amount - applied

    return SettlementResult(
        current_due=due,
        tenant_adjustment=tenant_adj,
        owner_adjustment=owner_adj,
        amount_before_deposit=amount,
        use_security_deposit=use_security_deposit,
        security_deposit=deposit,
        security_deposit_used=used,
        available_security_deposit=available,
        deposit_applied=applied,
        final_settled_amount=final,
        tenant_credit=max(ZERO, -final),
        remaining_security_deposit=available - applied,
    )


def settlement_for_ledger(
    summary,
    tenant_adjustment: Any = 0,
    owner_adjustment: Any = 0,
    use_security_deposit: bool = False,
) -> SettlementResult:
    """Settlement preview driven by a ``LedgerSummary``."""
    return compute_settlement(
        current_due=summary.total_outstanding,
        security_deposit=summary.security_deposit,
        security_deposit_used=summary.security_deposit_used,
        tenant_adjustment=tenant_adjustment,
        owner_adjustment=owner_adjustment,
        use_security_deposit=use_security_deposit,
    )


def global_ledger_balance(other_summaries) -> Decimal:
    """Net balance across a tenant's other leases, negative means credit."""
    total = ZERO
    for s in other_summaries:
        total += quantize(s.total_outstanding)
    return total
