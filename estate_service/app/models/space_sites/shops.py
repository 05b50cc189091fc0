from sqlalchemy import Boolean, Column, Integer, String, Text, Numeric, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shared.core.database import Base


class Shop(Base):
    __tablename__ = "shops"

    id = Column(Integer, primary_key=True, autoincrement=True)
    shop_number = Column(String(32), unique=True, nullable=False)
    floor = Column(String(16), nullable=False)  # ground | first | second | subedari
    subedari_category = Column(String(16), nullable=True)  # only for subedari
    square_feet = Column(Numeric(10, 2), nullable=True)
    status = Column(String(16), nullable=False, default="vacant")
    ownership_type = Column(String(16), nullable=False, default="sole")
    # null for common ownership
    owner_id = Column(Integer, ForeignKey("owners.id"), nullable=True)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True),
                        server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    is_deleted = Column(Boolean, default=False, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    deletion_reason = Column(Text, nullable=True)

    # relationships
    owner = relationship("Owner", back_populates="shops")
    leases = relationship("Lease", back_populates="shop")
