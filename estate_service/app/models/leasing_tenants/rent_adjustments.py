from sqlalchemy import Column, Integer, Text, Date, Numeric, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shared.core.database import Base


class RentAdjustment(Base):
    __tablename__ = "rent_adjustments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    lease_id = Column(Integer, ForeignKey("leases.id"), nullable=False)

    previous_rent = Column(Numeric(12, 2), nullable=False)
    new_rent = Column(Numeric(12, 2), nullable=False)
    # positive for increase, negative for decrease
    adjustment_amount = Column(Numeric(12, 2), nullable=False)
    effective_date = Column(Date, nullable=False)
    agreement_terms = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True),
                        server_default=func.now(), nullable=False)

    lease = relationship("Lease", back_populates="rent_adjustments")
