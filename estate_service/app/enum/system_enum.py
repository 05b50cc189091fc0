from enum import Enum


class DeletionRecordType(str, Enum):
    payment = "payment"
    bank_deposit = "bank_deposit"
    tenant = "tenant"
    shop = "shop"
    lease = "lease"
    expense = "expense"


class SettingKey(str, Enum):
    exchange_rate = "exchange_rate"
    display_currency = "display_currency"
