from datetime import date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel

from ...ledger.dues_aggregator import (
    ExpiringLease, FloorOccupancy, MonthlyTrendPoint, OccupancyStats, TenantDue
)
from ..common_schemas import DisplayCurrency
from ..leasing_tenants.payments_schemas import PaymentOut


class ExpiringLeaseOut(ExpiringLease):
    tenant_name: Optional[str] = None
    shop_number: Optional[str] = None


class DashboardStats(DisplayCurrency):
    as_of: date
    total_dues: Decimal
    monthly_collection: Decimal
    occupancy: OccupancyStats
    expiring_leases: List[ExpiringLeaseOut]
    top_debtors: List[TenantDue]
    recent_payments: List[PaymentOut]
    monthly_trend: List[MonthlyTrendPoint]
    floor_occupancy: List[FloorOccupancy]
