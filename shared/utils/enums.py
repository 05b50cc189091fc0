from enum import Enum


class UserRole(str, Enum):
    SUPER_ADMIN = "super_admin"
    OWNER = "owner"


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
