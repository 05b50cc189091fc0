from datetime import date
from decimal import Decimal
from typing import Dict, List, Sequence
from pydantic import BaseModel

from ..enum.financials_enum import ExpenseAllocation
from ..enum.space_sites_enum import OwnershipType
from .exceptions import LedgerInputError
from .money import ZERO, money_sum, quantize
from .records import (
    DepositRecord, ExpenseRecord, LeaseRecord, PaymentRecord, ShopRecord, active_payments
)


class OwnerShopCollection(BaseModel):
    shop_id: int
    shop_number: str
    collected: Decimal


class OwnerStatement(BaseModel):
    owner_id: int
    start_date: date
    end_date: date
    owner_count: int
    rent_collected: Decimal
    common_collected_total: Decimal
    common_share: Decimal
    own_expenses: Decimal
    common_expenses_total: Decimal
    common_expense_share: Decimal
    total_expenses: Decimal
    net_payout: Decimal
    bank_deposits: Decimal
    undeposited_balance: Decimal
    shops: List[OwnerShopCollection] = []


def build_owner_statement(
    owner_id: int,
    owner_count: int,
    shops: Sequence[ShopRecord],
    leases: Sequence[LeaseRecord],
    payments: Sequence[PaymentRecord],
    expenses: Sequence[ExpenseRecord],
    deposits: Sequence[DepositRecord],
    start_date: date,
    end_date: date,
) -> OwnerStatement:
    """
    Income and payout for one owner over a date range.

    Rent from the owner's sole shops is theirs in full. Payments on common
    shops and common expenses are split equally across all owners.
    """
    if owner_count < 1:
        raise LedgerInputError("Owner count must be at least 1")
    if end_date < start_date:
        raise LedgerInputError("End date cannot be before start date")

    def in_range(d: date) -> bool:
        return start_date <= d <= end_date

    sole_shops = {
        s.id: s for s in shops
        if s.ownership_type == OwnershipType.sole.value and s.owner_id == owner_id
    }
    common_shop_ids = {
        s.id for s in shops if s.ownership_type == OwnershipType.common.value
    }
    lease_shop: Dict[int, int] = {l.id: l.shop_id for l in leases}

    per_shop: Dict[int, Decimal] = {shop_id: ZERO for shop_id in sole_shops}
    common_collected = ZERO
    for p in active_payments(payments):
        if not in_range(p.payment_date):
            continue
        shop_id = lease_shop.get(p.lease_id)
        if shop_id in sole_shops:
            per_shop[shop_id] += quantize(p.amount)
        elif shop_id in common_shop_ids:
            common_collected += quantize(p.amount)

    rent_collected = money_sum(per_shop.values())
    common_share = quantize(common_collected / owner_count)

    dated = [e for e in expenses if in_range(e.expense_date)]
    own_expenses = money_sum(
        e.amount for e in dated
        if e.allocation == ExpenseAllocation.owner.value and e.owner_id == owner_id
    )
    common_expenses = money_sum(
        e.amount for e in dated if e.allocation == ExpenseAllocation.common.value
    )
    common_expense_share = quantize(common_expenses / owner_count)
    total_expenses = own_expenses + common_expense_share

    net_payout = rent_collected + common_share - total_expenses
    deposited = money_sum(
        d.amount for d in deposits
        if d.owner_id == owner_id and not d.is_deleted and in_range(d.deposit_date)
    )

    return OwnerStatement(
        owner_id=owner_id,
        start_date=start_date,
        end_date=end_date,
        owner_count=owner_count,
        rent_collected=rent_collected,
        common_collected_total=quantize(common_collected),
        common_share=common_share,
        own_expenses=own_expenses,
        common_expenses_total=common_expenses,
        common_expense_share=common_expense_share,
        total_expenses=total_expenses,
        net_payout=net_payout,
        bank_deposits=deposited,
        undeposited_balance=net_payout - deposited,
        shops=[
            OwnerShopCollection(shop_id=shop_id, shop_number=shop.shop_number,
                                collected=quantize(per_shop[shop_id]))
            for shop_id, shop in sorted(sole_shops.items())
        ],
    )
