from sqlalchemy import Boolean, Column, Integer, String, Text, Date, Numeric, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shared.core.database import Base


class BankDeposit(Base):
    __tablename__ = "bank_deposits"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, ForeignKey("owners.id"), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    deposit_date = Column(Date, nullable=False)
    bank_name = Column(String(200), nullable=False)
    deposit_slip_ref = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True),
                        server_default=func.now(), nullable=False)
    is_deleted = Column(Boolean, default=False, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    deletion_reason = Column(Text, nullable=True)

    owner = relationship("Owner", back_populates="bank_deposits")
