import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional
from sqlalchemy.orm import Session

from ...models.system.deletion_logs import DeletionLog
from ...schemas.system.deletion_logs_schemas import DeletionLogListResponse, DeletionLogOut, DeletionLogRequest

logger = logging.getLogger(__name__)


def snapshot(obj) -> Dict[str, Any]:
    """Column values of a row in a JSON-safe form."""
    data = {}
    for column in obj.__table__.columns:
        value = getattr(obj, column.key)
        if isinstance(value, Decimal):
            value = str(value)
        elif isinstance(value, (date, datetime)):
            value = value.isoformat()
        data[column.key] = value
    return data


def log_deletion(db: Session, record_type: str, obj, reason: str,
                 deleted_by: Optional[int] = None) -> DeletionLog:
    # caller owns the transaction
    entry = DeletionLog(
        record_type=record_type,
        record_id=obj.id,
        record_details=snapshot(obj),
        reason=reason,
        deleted_by=deleted_by,
    )
    db.add(entry)
    logger.info("Deleted %s %s by user %s: %s",
                record_type, obj.id, deleted_by, reason)
    return entry


def get_list(db: Session, params: DeletionLogRequest) -> DeletionLogListResponse:
    q = db.query(DeletionLog)

    if params.record_type and params.record_type.lower() != "all":
        q = q.filter(DeletionLog.record_type == params.record_type)

    total = q.count()
    q = q.order_by(DeletionLog.deleted_at.desc(), DeletionLog.id.desc())
    rows = q.offset(params.skip).limit(params.limit).all()

    return {
        "logs": [DeletionLogOut.model_validate(r) for r in rows],
        "total": total,
    }
