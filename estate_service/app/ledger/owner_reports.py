from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple
from pydantic import BaseModel

from ..enum.financials_enum import ExpenseAllocation, TransactionType
from ..enum.space_sites_enum import OwnershipType
from .exceptions import LedgerInputError
from .money import ZERO, money_sum, quantize, to_decimal
from .months import MONTH_NAMES, first_day, last_day
from .records import (
    DepositRecord, ExpenseRecord, LeaseRecord, PaymentRecord, ShopRecord, active_payments
)


class ReportPeriod(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def contains(self, d: date) -> bool:
        if self.start_date and d < self.start_date:
            return False
        if self.end_date and d > self.end_date:
            return False
        return True


def report_period(month: Optional[int] = None, year: Optional[int] = None,
                  start_date: Optional[date] = None, end_date: Optional[date] = None) -> ReportPeriod:
    """A calendar month when month and year are given, otherwise the (open) date range."""
    if (month is None) != (year is None):
        raise LedgerInputError("Month and year must be given together")
    if month is not None:
        if not 1 <= month <= 12:
            raise LedgerInputError("month must be between 1 and 12")
        return ReportPeriod(start_date=first_day(year, month), end_date=last_day(year, month))
    if start_date and end_date and end_date < start_date:
        raise LedgerInputError("End date cannot be before start date")
    return ReportPeriod(start_date=start_date, end_date=end_date)


def owner_share(amount: Any, is_common: bool, owner_count: int) -> Decimal:
    if owner_count < 1:
        raise LedgerInputError("Owner count must be at least 1")
    if is_common:
        return quantize(to_decimal(amount) / owner_count)
    return quantize(amount)


# ----------------------------------------------------
# ✅ Monthly deposit summary
# ----------------------------------------------------
class DepositSummaryRow(BaseModel):
    owner_id: int
    owner_name: str
    year: int
    month: int
    month_name: str
    rent_payments: Decimal
    security_deposits: Decimal
    total_deposit: Decimal


class DepositSummary(BaseModel):
    year: Optional[int] = None
    rows: List[DepositSummaryRow]
    available_years: List[int]
    total_rent_payments: Decimal
    total_security_deposits: Decimal
    total_deposit: Decimal


def monthly_deposit_summary(
    owners: Dict[int, str],
    shops: Sequence[ShopRecord],
    leases: Sequence[LeaseRecord],
    payments: Sequence[PaymentRecord],
    year: Optional[int] = None,
) -> DepositSummary:
    """
    Rent received and security deposits taken per owner and calendar month.

    Only the owners' sole shops count. A payment is booked in the month it
    was received, a lease's security deposit in the month the lease starts.
    """
    shop_owner = {
        s.id: s.owner_id for s in shops
        if s.ownership_type == OwnershipType.sole.value and s.owner_id in owners
    }
    lease_owner = {l.id: shop_owner[l.shop_id] for l in leases if l.shop_id in shop_owner}

    buckets: Dict[Tuple[int, int, int], List[Decimal]] = defaultdict(lambda: [ZERO, ZERO])
    years = set()
    for p in active_payments(payments):
        owner_id = lease_owner.get(p.lease_id)
        if owner_id is None:
            continue
        years.add(p.payment_date.year)
        if year and p.payment_date.year != year:
            continue
        buckets[(owner_id, p.payment_date.year, p.payment_date.month)][0] += quantize(p.amount)

    for l in leases:
        owner_id = lease_owner.get(l.id)
        if owner_id is None:
            continue
        years.add(l.start_date.year)
        if year and l.start_date.year != year:
            continue
        buckets[(owner_id, l.start_date.year, l.start_date.month)][1] += quantize(l.security_deposit)

    rows = [
        DepositSummaryRow(
            owner_id=owner_id,
            owner_name=owners[owner_id],
            year=y,
            month=m,
            month_name=MONTH_NAMES[m - 1],
            rent_payments=rent,
            security_deposits=security,
            total_deposit=rent + security,
        )
        for (owner_id, y, m), (rent, security) in buckets.items()
    ]
    rows.sort(key=lambda r: (r.owner_name.lower(), r.owner_id, -r.year, -r.month))

    return DepositSummary(
        year=year,
        rows=rows,
        available_years=sorted(years, reverse=True),
        total_rent_payments=money_sum(r.rent_payments for r in rows),
        total_security_deposits=money_sum(r.security_deposits for r in rows),
        total_deposit=money_sum(r.total_deposit for r in rows),
    )


# ----------------------------------------------------
# ✅ Owner financial transactions
# ----------------------------------------------------
class FinancialTransaction(BaseModel):
    reference_id: int
    transaction_date: date
    transaction_type: str
    category: str
    description: Optional[str] = None
    amount: Decimal
    is_common: bool = False


class FinancialTransactions(BaseModel):
    owner_id: int
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    transactions: List[FinancialTransaction]
    total_deposits: Decimal
    total_expenses: Decimal
    net_balance: Decimal


def owner_financial_transactions(
    owner_id: int,
    owner_count: int,
    deposits: Sequence[DepositRecord],
    expenses: Sequence[ExpenseRecord],
    period: ReportPeriod,
) -> FinancialTransactions:
    """Bank deposits and expenses of one owner, newest first. Common expenses count at the owner's share."""
    transactions = []
    for d in deposits:
        if d.owner_id != owner_id or d.is_deleted or not period.contains(d.deposit_date):
            continue
        description = d.bank_name
        if d.deposit_slip_ref:
            description = f"{d.bank_name} - Ref: {d.deposit_slip_ref}"
        transactions.append(FinancialTransaction(
            reference_id=d.id or 0,
            transaction_date=d.deposit_date,
            transaction_type=TransactionType.deposit.value,
            category="Bank Deposit",
            description=description,
            amount=quantize(d.amount),
        ))

    for e in expenses:
        is_common = e.allocation == ExpenseAllocation.common.value
        own = e.allocation == ExpenseAllocation.owner.value and e.owner_id == owner_id
        if not (is_common or own) or not period.contains(e.expense_date):
            continue
        transactions.append(FinancialTransaction(
            reference_id=e.id or 0,
            transaction_date=e.expense_date,
            transaction_type=TransactionType.expense.value,
            category=e.expense_type.capitalize(),
            description=e.description,
            amount=owner_share(e.amount, is_common, owner_count),
            is_common=is_common,
        ))

    transactions.sort(key=lambda t: (t.transaction_date, t.transaction_type, t.reference_id),
                      reverse=True)

    total_deposits = money_sum(
        t.amount for t in transactions if t.transaction_type == TransactionType.deposit.value)
    total_expenses = money_sum(
        t.amount for t in transactions if t.transaction_type == TransactionType.expense.value)
    return FinancialTransactions(
        owner_id=owner_id,
        start_date=period.start_date,
        end_date=period.end_date,
        transactions=transactions,
        total_deposits=total_deposits,
        total_expenses=total_expenses,
        net_balance=total_deposits - total_expenses,
    )


# ----------------------------------------------------
# ✅ Rent payments and outstandings per owner lease
# ----------------------------------------------------
class RentPaymentRow(BaseModel):
    lease_id: int
    tenant_id: int
    tenant_name: str
    phone: Optional[str] = None
    shop_id: int
    shop_number: str
    floor: str
    shop_location: str
    monthly_rent: Decimal
    full_monthly_rent: Decimal
    recent_payment_amount: Decimal
    recent_payment_date: Optional[date] = None
    payment_dates: List[date] = []
    current_outstanding: Decimal
    full_current_outstanding: Decimal
    is_common: bool = False


class RentPaymentReport(BaseModel):
    owner_id: int
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    rows: List[RentPaymentRow]
    total_monthly_rent: Decimal
    total_recent_payments: Decimal
    total_outstanding: Decimal


def payments_in_period(payments: Sequence[PaymentRecord], period: ReportPeriod) -> List[PaymentRecord]:
    """Active payments inside the period, oldest first."""
    return sorted(
        (p for p in active_payments(payments) if period.contains(p.payment_date)),
        key=lambda p: (p.payment_date, p.id or 0),
    )


def rent_payment_report(owner_id: int, period: ReportPeriod,
                        rows: Sequence[RentPaymentRow]) -> RentPaymentReport:
    return RentPaymentReport(
        owner_id=owner_id,
        start_date=period.start_date,
        end_date=period.end_date,
        rows=list(rows),
        total_monthly_rent=money_sum(r.monthly_rent for r in rows),
        total_recent_payments=money_sum(r.recent_payment_amount for r in rows),
        total_outstanding=money_sum(r.current_outstanding for r in rows),
    )


class OutstandingEntry(BaseModel):
    lease_id: int
    tenant_id: int
    tenant_name: str
    phone: Optional[str] = None
    business_name: Optional[str] = None
    shop_id: int
    shop_number: str
    floor: str
    shop_location: str
    outstanding: Decimal
    full_outstanding: Decimal
    is_common: bool = False


class TopOutstandings(BaseModel):
    owner_id: int
    entries: List[OutstandingEntry]
    total_outstanding: Decimal
    debtor_count: int


def top_outstandings(owner_id: int, entries: Sequence[OutstandingEntry],
                     limit: int = 5) -> TopOutstandings:
    """Largest owner-share balances first. The total covers every lease that owes, not just the top ones."""
    owing = [e for e in entries if e.outstanding > ZERO]
    owing.sort(key=lambda e: (-e.outstanding, e.lease_id))
    return TopOutstandings(
        owner_id=owner_id,
        entries=owing[:limit],
        total_outstanding=money_sum(e.outstanding for e in owing),
        debtor_count=len(owing),
    )
