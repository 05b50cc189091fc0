from enum import Enum


class LeaseStatus(str, Enum):
    active = "active"
    expiring_soon = "expiring_soon"
    expired = "expired"
    terminated = "terminated"
