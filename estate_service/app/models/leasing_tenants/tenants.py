from sqlalchemy import Boolean, Column, Integer, String, Text, Numeric, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shared.core.database import Base


class Tenant(Base):
    __tablename__ = "tenants"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    phone = Column(String(32), nullable=False)
    email = Column(String(200), nullable=True)
    business_name = Column(String(200), nullable=True)
    nid_passport = Column(String(64), nullable=True)
    permanent_address = Column(Text, nullable=True)
    photo_url = Column(String(500), nullable=True)

    # debt carried over from before the system, not tied to a lease
    opening_due_balance = Column(Numeric(12, 2), nullable=False, default=0)

    created_at = Column(DateTime(timezone=True),
                        server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    is_deleted = Column(Boolean, default=False, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    deletion_reason = Column(Text, nullable=True)

    # relationships
    leases = relationship("Lease", back_populates="tenant")
    payments = relationship("Payment", back_populates="tenant")
