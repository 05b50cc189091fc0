from datetime import date
from typing import List, Optional
from pydantic import BaseModel

from ...ledger.collection_report import CollectionReport
from ...ledger.owner_reports import (
    DepositSummary, FinancialTransactions, RentPaymentReport, TopOutstandings
)
from ...ledger.owner_statement import OwnerStatement
from ...ledger.tenant_statement import TenantStatement
from ..common_schemas import DisplayCurrency


class OwnerStatementRequest(BaseModel):
    owner_id: int
    start_date: date
    end_date: date
    currency: Optional[str] = None


class OwnerStatementOut(OwnerStatement, DisplayCurrency):
    owner_name: str


class TenantStatementOut(TenantStatement, DisplayCurrency):
    tenant_name: str


class CollectionReportOut(CollectionReport, DisplayCurrency):
    pass


class FloorAvailability(BaseModel):
    floor: str
    label: str
    total: int
    occupied: int
    vacant: int
    vacant_shops: List[str] = []


class ShopAvailabilityOut(BaseModel):
    total_shops: int
    occupied_shops: int
    vacant_shops: int
    occupancy_rate: float
    floors: List[FloorAvailability]


class ReportPeriodParams(BaseModel):
    # month + year pick a calendar month, otherwise start/end bound the range
    month: Optional[int] = None
    year: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    as_of: Optional[date] = None
    currency: Optional[str] = None


class MonthlyDepositSummaryOut(DepositSummary, DisplayCurrency):
    pass


class OwnerRentPaymentsOut(RentPaymentReport, DisplayCurrency):
    owner_name: str


class OwnerFinancialTransactionsOut(FinancialTransactions, DisplayCurrency):
    owner_name: str


class TopOutstandingsOut(TopOutstandings, DisplayCurrency):
    owner_name: str
