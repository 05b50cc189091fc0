from sqlalchemy import Boolean, Column, Integer, Numeric, ForeignKey, DateTime, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shared.core.database import Base


class LeaseSettlement(Base):
    __tablename__ = "lease_settlements"

    id = Column(Integer, primary_key=True, autoincrement=True)
    lease_id = Column(Integer, ForeignKey("leases.id"), nullable=False)

    current_due = Column(Numeric(12, 2), default=0)
    tenant_adjustment = Column(Numeric(12, 2), default=0)
    owner_adjustment = Column(Numeric(12, 2), default=0)
    deposit_applied = Column(Numeric(12, 2), default=0)
    final_amount = Column(Numeric(12, 2))
    tenant_credit = Column(Numeric(12, 2), default=0)
    used_security_deposit = Column(Boolean, default=False)
    notes = Column(Text, nullable=True)

    settled_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    settled_at = Column(DateTime(timezone=True), server_default=func.now())

    lease = relationship("Lease", back_populates="settlements")
