import logging
from datetime import datetime, timezone
from typing import Optional, Set
from sqlalchemy.orm import Session

from ...enum.system_enum import DeletionRecordType
from ...models.leasing_tenants.leases import Lease
from ...models.leasing_tenants.payments import Payment
from ...models.leasing_tenants.tenants import Tenant
from ...schemas.leasing_tenants.payments_schemas import (
    PaymentCreate, PaymentListResponse, PaymentOut, PaymentRequest, PaymentUpdate
)
from ..system.deletion_logs_crud import log_deletion
from .rent_invoices_crud import recompute_invoice_status, sync_lease_invoices

logger = logging.getLogger(__name__)


def payment_out(payment: Payment) -> PaymentOut:
    out = PaymentOut.model_validate(payment)
    out.tenant_name = payment.tenant.name if payment.tenant else None
    if payment.lease and payment.lease.shop:
        out.shop_number = payment.lease.shop.shop_number
    return out


def build_filters(params: PaymentRequest, allowed_lease_ids: Optional[Set[int]]):
    filters = [Payment.is_deleted == False]

    if allowed_lease_ids is not None:
        filters.append(Payment.lease_id.in_(allowed_lease_ids))

    if params.tenant_id:
        filters.append(Payment.tenant_id == params.tenant_id)

    if params.lease_id:
        filters.append(Payment.lease_id == params.lease_id)

    if params.start_date:
        filters.append(Payment.payment_date >= params.start_date)

    if params.end_date:
        filters.append(Payment.payment_date <= params.end_date)

    if params.search:
        filters.append(Payment.receipt_number.ilike(f"%{params.search}%"))

    return filters


def get_list(db: Session, params: PaymentRequest,
             allowed_lease_ids: Optional[Set[int]] = None) -> PaymentListResponse:
    q = (
        db.query(Payment)
        .filter(*build_filters(params, allowed_lease_ids))
        .order_by(Payment.payment_date.desc(), Payment.id.desc())
    )

    total = q.count()
    rows = q.offset(params.skip).limit(params.limit).all()
    return {"payments": [payment_out(p) for p in rows], "total": total}


def get_by_id(db: Session, payment_id: int) -> Optional[Payment]:
    return (
        db.query(Payment)
        .filter(Payment.id == payment_id, Payment.is_deleted == False)
        .first()
    )


def recent(db: Session, allowed_lease_ids: Optional[Set[int]] = None, limit: int = 5):
    params = PaymentRequest(limit=limit)
    return get_list(db, params, allowed_lease_ids)["payments"]


# ----------------------------------------------------
# ✅ Record a payment and refresh invoice status in one transaction
# ----------------------------------------------------
def create(db: Session, payload: PaymentCreate) -> Payment:
    lease = db.query(Lease).filter(Lease.id == payload.lease_id).first()
    if not lease:
        raise ValueError("Lease not found")
    if lease.tenant_id != payload.tenant_id:
        raise ValueError("Lease does not belong to this tenant")

    tenant = db.query(Tenant).filter(
        Tenant.id == payload.tenant_id, Tenant.is_deleted == False).first()
    if not tenant:
        raise ValueError("Tenant not found")

    try:
        payment = Payment(
            tenant_id=payload.tenant_id,
            lease_id=payload.lease_id,
            amount=payload.amount,
            payment_date=payload.payment_date,
            rent_months=payload.rent_months,
            receipt_number=payload.receipt_number,
            notes=payload.notes,
            is_deleted=False,
        )
        db.add(payment)
        db.flush()

        sync_lease_invoices(db, lease)
        recompute_invoice_status(db, lease.id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(payment)
    logger.info("Payment %s of %s recorded for lease %s",
                payment.id, payment.amount, lease.id)
    return payment


# ----------------------------------------------------
# ✅ Edit a payment, FIFO status recomputed in the same transaction
# ----------------------------------------------------
def update(db: Session, payment: Payment, payload: PaymentUpdate) -> Payment:
    data = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not data:
        return payment

    try:
        for key, value in data.items():
            setattr(payment, key, value)
        db.flush()

        recompute_invoice_status(db, payment.lease_id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(payment)
    logger.info("Payment %s updated (%s)", payment.id, ", ".join(sorted(data)))
    return payment


# ----------------------------------------------------
# ✅ Soft delete with reason
# ----------------------------------------------------
def delete(db: Session, payment: Payment, reason: str, user_id: Optional[int] = None):
    try:
        payment.is_deleted = True
        payment.deleted_at = datetime.now(timezone.utc)
        payment.deletion_reason = reason
        log_deletion(db, DeletionRecordType.payment.value,
                     payment, reason, user_id)
        db.flush()

        recompute_invoice_status(db, payment.lease_id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    return {"message": "Payment deleted successfully"}
