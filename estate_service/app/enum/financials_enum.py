from enum import Enum


class ExpenseType(str, Enum):
    guard = "guard"
    cleaner = "cleaner"
    electricity = "electricity"
    maintenance = "maintenance"
    other = "other"


class ExpenseAllocation(str, Enum):
    owner = "owner"
    common = "common"


class LedgerEntryType(str, Enum):
    opening = "opening"
    invoice = "invoice"
    payment = "payment"


class TransactionType(str, Enum):
    deposit = "deposit"
    expense = "expense"
