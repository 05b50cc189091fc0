from sqlalchemy import Column, Integer, String, Text, Date, Numeric, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shared.core.database import Base


class Lease(Base):
    __tablename__ = "leases"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False)
    shop_id = Column(Integer, ForeignKey("shops.id"), nullable=False)

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    security_deposit = Column(Numeric(12, 2), nullable=False, default=0)
    security_deposit_used = Column(Numeric(12, 2), nullable=False, default=0)
    monthly_rent = Column(Numeric(12, 2), nullable=False)
    opening_due_balance = Column(Numeric(12, 2), nullable=False, default=0)

    # only "active" or "terminated" is stored, the rest is derived on read
    status = Column(String(16), nullable=False, default="active")
    notes = Column(Text, nullable=True)
    termination_notes = Column(Text, nullable=True)
    terminated_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True),
                        server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # relationships
    tenant = relationship("Tenant", back_populates="leases")
    shop = relationship("Shop", back_populates="leases")
    invoices = relationship(
        "RentInvoice", back_populates="lease", cascade="all, delete-orphan")
    payments = relationship(
        "Payment", back_populates="lease", cascade="all, delete-orphan")
    rent_adjustments = relationship(
        "RentAdjustment", back_populates="lease", cascade="all, delete-orphan")
    settlements = relationship(
        "LeaseSettlement", back_populates="lease", cascade="all, delete-orphan")
