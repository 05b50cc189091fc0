from sqlalchemy import Boolean, Column, Integer, Date, Numeric, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shared.core.database import Base


class RentInvoice(Base):
    __tablename__ = "rent_invoices"
    __table_args__ = (
        UniqueConstraint("lease_id", "year", "month",
                         name="uq_rent_invoice_lease_month"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    lease_id = Column(Integer, ForeignKey("leases.id"), nullable=False)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False)

    amount = Column(Numeric(12, 2), nullable=False)
    due_date = Column(Date, nullable=False)
    month = Column(Integer, nullable=False)  # 1-12
    year = Column(Integer, nullable=False)

    # maintained by the FIFO pass, never by hand
    paid_amount = Column(Numeric(12, 2), nullable=False, default=0)
    is_paid = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True),
                        server_default=func.now(), nullable=False)

    lease = relationship("Lease", back_populates="invoices")
