from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shared.core.database import Base


class Owner(Base):
    __tablename__ = "owners"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    phone = Column(String(32), nullable=True)
    email = Column(String(200), nullable=True)
    address = Column(Text, nullable=True)

    bank_name = Column(String(200), nullable=True)
    bank_account_number = Column(String(64), nullable=True)
    bank_branch = Column(String(200), nullable=True)

    created_at = Column(DateTime(timezone=True),
                        server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # relationships
    shops = relationship("Shop", back_populates="owner")
    users = relationship("Users", back_populates="owner")
    bank_deposits = relationship("BankDeposit", back_populates="owner")
    expenses = relationship("Expense", back_populates="owner")
