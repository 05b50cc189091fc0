from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, JSON
from sqlalchemy.sql import func
from shared.core.database import Base


class DeletionLog(Base):
    __tablename__ = "deletion_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    record_type = Column(String(32), nullable=False)
    record_id = Column(Integer, nullable=False)
    record_details = Column(JSON, nullable=False)  # snapshot of the deleted row
    reason = Column(Text, nullable=False)
    deleted_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    deleted_at = Column(DateTime(timezone=True),
                        server_default=func.now(), nullable=False)
