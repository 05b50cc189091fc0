from sqlalchemy import Column, Integer, String, Text, Date, Numeric, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shared.core.database import Base


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    expense_type = Column(String(16), nullable=False)
    description = Column(Text, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    expense_date = Column(Date, nullable=False)
    allocation = Column(String(16), nullable=False)  # owner | common
    # null if common expense
    owner_id = Column(Integer, ForeignKey("owners.id"), nullable=True)
    # set when the expense is recharged to a tenant
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=True)
    receipt_ref = Column(String(100), nullable=True)

    created_at = Column(DateTime(timezone=True),
                        server_default=func.now(), nullable=False)

    owner = relationship("Owner", back_populates="expenses")
