import logging
from datetime import date, datetime, timezone
from typing import List, Optional, Set
from sqlalchemy import or_
from sqlalchemy.orm import Session

from shared.core.config import settings
from ...enum.leasing_tenants_enum import LeaseStatus
from ...enum.space_sites_enum import ShopStatus
from ...enum.system_enum import DeletionRecordType
from ...ledger.lease_status import derive_lease_status
from ...ledger.money import money_sum, quantize
from ...ledger.payment_form import build_payment_form
from ...ledger.records import AdjustmentRecord, InvoiceRecord, LeaseRecord, PaymentRecord
from ...ledger.rent_schedule import current_rent
from ...ledger.settlement_calculator import global_ledger_balance, settlement_for_ledger
from ...models.leasing_tenants.lease_settlements import LeaseSettlement
from ...models.leasing_tenants.leases import Lease
from ...models.leasing_tenants.payments import Payment
from ...models.leasing_tenants.rent_adjustments import RentAdjustment
from ...models.leasing_tenants.rent_invoices import RentInvoice
from ...models.leasing_tenants.tenants import Tenant
from ...models.space_sites.shops import Shop
from ...schemas.common_schemas import SettlementRequest
from ...schemas.leasing_tenants.leases_schemas import (
    LeaseCreate, LeaseListResponse, LeaseOut, LeaseRequest, LeaseUpdate, PaymentFormOut,
    RentAdjustmentCreate, RentAdjustmentOut, SettlementPreviewOut, TerminateRequest
)
from ..system.deletion_logs_crud import log_deletion
from .lease_ledger_crud import build_ledger, lease_summaries
from .rent_invoices_crud import (
    recompute_invoice_status, regenerate_lease_invoices, sync_lease_invoices, sync_open_leases
)

logger = logging.getLogger(__name__)


def lease_out(lease: Lease, today: Optional[date] = None) -> LeaseOut:
    out = LeaseOut.model_validate(lease)
    out.status = derive_lease_status(
        lease.status, lease.end_date, today, settings.EXPIRING_SOON_DAYS)
    out.tenant_name = lease.tenant.name if lease.tenant else None
    out.shop_number = lease.shop.shop_number if lease.shop else None
    out.current_rent = current_rent(
        LeaseRecord.model_validate(lease),
        [AdjustmentRecord.model_validate(a) for a in lease.rent_adjustments],
        today)
    return out


# ----------------------------------------------------
# ✅ Build filters
# ----------------------------------------------------
def build_filters(params: LeaseRequest, allowed_shop_ids: Optional[Set[int]]):
    filters = []

    if allowed_shop_ids is not None:
        filters.append(Lease.shop_id.in_(allowed_shop_ids))

    if params.tenant_id:
        filters.append(Lease.tenant_id == params.tenant_id)

    if params.shop_id:
        filters.append(Lease.shop_id == params.shop_id)

    # ✅ Search by tenant name, phone or shop number
    if params.search:
        like = f"%{params.search}%"
        filters.append(
            or_(
                Tenant.name.ilike(like),
                Tenant.phone.ilike(like),
                Shop.shop_number.ilike(like),
            )
        )

    return filters


# ----------------------------------------------------
# ✅ Get list, status derived on read
# ----------------------------------------------------
def get_list(db: Session, params: LeaseRequest,
             allowed_shop_ids: Optional[Set[int]] = None) -> LeaseListResponse:
    rows = (
        db.query(Lease)
        .join(Tenant, Tenant.id == Lease.tenant_id)
        .join(Shop, Shop.id == Lease.shop_id)
        .filter(*build_filters(params, allowed_shop_ids))
        .order_by(Lease.start_date.desc(), Lease.id.desc())
        .all()
    )

    leases = [lease_out(r) for r in rows]
    if params.status and params.status.lower() != "all":
        leases = [l for l in leases if l.status == params.status]

    total = len(leases)
    end = params.skip + params.limit if params.limit else None
    return {"leases": leases[params.skip:end], "total": total}


# ----------------------------------------------------
# ✅ Get lease by ID
# ----------------------------------------------------
def get_by_id(db: Session, lease_id: int) -> Optional[Lease]:
    return db.query(Lease).filter(Lease.id == lease_id).first()


# ----------------------------------------------------
# ✅ Create new lease, shop becomes occupied
# ----------------------------------------------------
def create(db: Session, payload: LeaseCreate) -> Lease:
    if payload.end_date < payload.start_date:
        raise ValueError("End date cannot be before start date")

    tenant = db.query(Tenant).filter(
        Tenant.id == payload.tenant_id, Tenant.is_deleted == False).first()
    if not tenant:
        raise ValueError("Tenant not found")

    shop = db.query(Shop).filter(
        Shop.id == payload.shop_id, Shop.is_deleted == False).first()
    if not shop:
        raise ValueError("Shop not found")

    open_lease = db.query(Lease).filter(
        Lease.shop_id == shop.id,
        Lease.status != LeaseStatus.terminated.value
    ).first()
    if shop.status != ShopStatus.vacant.value or open_lease:
        raise ValueError(f"Shop {shop.shop_number} is already occupied")

    try:
        lease = Lease(
            tenant_id=tenant.id,
            shop_id=shop.id,
            start_date=payload.start_date,
            end_date=payload.end_date,
            security_deposit=payload.security_deposit,
            security_deposit_used=0,
            monthly_rent=payload.monthly_rent,
            opening_due_balance=payload.opening_due_balance,
            status=LeaseStatus.active.value,
            notes=payload.notes,
        )
        db.add(lease)
        shop.status = ShopStatus.occupied.value
        db.flush()

        sync_lease_invoices(db, lease)
        recompute_invoice_status(db, lease.id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(lease)
    logger.info("Lease %s created for tenant %s on shop %s",
                lease.id, tenant.id, shop.shop_number)
    return lease


# ----------------------------------------------------
# ✅ Update lease terms
# ----------------------------------------------------
def update(db: Session, lease: Lease, payload: LeaseUpdate) -> Lease:
    if lease.status == LeaseStatus.terminated.value:
        raise ValueError("Terminated leases cannot be edited")

    data = payload.model_dump(exclude_unset=True, exclude_none=True)
    if data.get("tenant_id", lease.tenant_id) != lease.tenant_id:
        raise ValueError("Tenant of an existing lease cannot be changed")
    if data.get("shop_id", lease.shop_id) != lease.shop_id:
        raise ValueError("Shop of an existing lease cannot be changed")

    start = data.get("start_date", lease.start_date)
    end = data.get("end_date", lease.end_date)
    if end < start:
        raise ValueError("End date cannot be before start date")

    if "security_deposit" in data and quantize(data["security_deposit"]) < quantize(lease.security_deposit_used):
        raise ValueError(
            "Security deposit cannot be less than the amount already used")

    dates_changed = start != lease.start_date or end != lease.end_date
    rent_changed = (
        "monthly_rent" in data
        and quantize(data["monthly_rent"]) != quantize(lease.monthly_rent)
    )
    if rent_changed and lease.rent_adjustments:
        raise ValueError(
            "Lease rent has an adjustment history, record a rent adjustment instead")

    try:
        for key, value in data.items():
            if key in ("tenant_id", "shop_id"):
                continue
            setattr(lease, key, value)
        db.flush()

        if dates_changed or rent_changed:
            regenerate_lease_invoices(db, lease, rent_changed)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(lease)
    return lease


# ----------------------------------------------------
# ✅ Ledger and settlement
# ----------------------------------------------------
def get_ledger(db: Session, lease: Lease, as_of: Optional[date] = None):
    # lazy billing up to the requested month, flushed with this session only
    sync_open_leases(db, [lease], as_of)
    return build_ledger(db, lease, as_of)


def _other_leases(db: Session, lease: Lease) -> List[Lease]:
    return (
        db.query(Lease)
        .filter(Lease.tenant_id == lease.tenant_id, Lease.id != lease.id)
        .all()
    )


def settlement_preview(db: Session, lease: Lease, request: SettlementRequest,
                       as_of: Optional[date] = None) -> SettlementPreviewOut:
    as_of = as_of or date.today()
    ledger = get_ledger(db, lease, as_of)
    settlement = settlement_for_ledger(
        ledger.summary,
        tenant_adjustment=request.tenant_adjustment,
        owner_adjustment=request.owner_adjustment,
        use_security_deposit=request.use_security_deposit,
    )

    others = lease_summaries(db, _other_leases(db, lease), as_of)
    settlement.global_ledger_balance = global_ledger_balance(others.values())

    return SettlementPreviewOut(
        **settlement.model_dump(),
        lease_id=lease.id,
        as_of=as_of,
    )


# ----------------------------------------------------
# ✅ Record-payment form: month grid with paid status
# ----------------------------------------------------
def payment_form_data(db: Session, lease: Lease, today: Optional[date] = None) -> PaymentFormOut:
    today = today or date.today()
    sync_open_leases(db, [lease], today)
    tenant = lease.tenant

    # the tenant-level opening balance is shown on the earliest open lease only
    open_leases = sorted(
        (l for l in tenant.leases if l.status != LeaseStatus.terminated.value),
        key=lambda l: (l.start_date, l.id),
    )
    is_first = not open_leases or open_leases[0].id == lease.id
    tenant_paid = 0
    if is_first:
        tenant_paid = money_sum(
            p.amount for p in db.query(Payment).filter(
                Payment.tenant_id == tenant.id, Payment.is_deleted == False).all()
            if p.payment_date <= today
        )

    invoices = db.query(RentInvoice).filter(RentInvoice.lease_id == lease.id).all()
    payments = db.query(Payment).filter(Payment.lease_id == lease.id).all()
    form = build_payment_form(
        LeaseRecord.model_validate(lease),
        [InvoiceRecord.model_validate(i) for i in invoices],
        [PaymentRecord.model_validate(p) for p in payments],
        [AdjustmentRecord.model_validate(a) for a in lease.rent_adjustments],
        today=today,
        tenant_opening_due=tenant.opening_due_balance if is_first else 0,
        tenant_paid_total=tenant_paid,
    )
    return PaymentFormOut(**form.model_dump(), tenant_name=tenant.name)


# ----------------------------------------------------
# ✅ Terminate: lease closed, shop vacant
# ----------------------------------------------------
def terminate(db: Session, lease: Lease, payload: TerminateRequest,
              user_id: Optional[int] = None):
    if lease.status == LeaseStatus.terminated.value:
        raise ValueError("Lease is already terminated")

    termination_date = payload.termination_date or date.today()
    if termination_date < lease.start_date:
        raise ValueError("Termination date cannot be before lease start")
    if termination_date > date.today():
        raise ValueError("Termination date cannot be in the future")

    try:
        sync_lease_invoices(db, lease, termination_date)

        lease.status = LeaseStatus.terminated.value
        lease.termination_notes = payload.termination_notes
        lease.terminated_at = datetime.now(timezone.utc)
        # billing stops with the termination month
        lease.end_date = termination_date
        for inv in db.query(RentInvoice).filter(RentInvoice.lease_id == lease.id).all():
            if (inv.year, inv.month) > (termination_date.year, termination_date.month):
                db.delete(inv)

        if lease.shop:
            lease.shop.status = ShopStatus.vacant.value
        db.flush()

        # payments received up to today settle the closed term
        ledger = build_ledger(db, lease)
        settlement = settlement_for_ledger(
            ledger.summary,
            tenant_adjustment=payload.tenant_adjustment,
            owner_adjustment=payload.owner_adjustment,
            use_security_deposit=payload.use_security_deposit,
        )

        if payload.commit_settlement:
            lease.security_deposit_used = quantize(
                lease.security_deposit_used) + settlement.deposit_applied
            db.add(LeaseSettlement(
                lease_id=lease.id,
                current_due=settlement.current_due,
                tenant_adjustment=settlement.tenant_adjustment,
                owner_adjustment=settlement.owner_adjustment,
                deposit_applied=settlement.deposit_applied,
                final_amount=settlement.final_settled_amount,
                tenant_credit=settlement.tenant_credit,
                used_security_deposit=settlement.use_security_deposit,
                notes=payload.termination_notes,
                settled_by=user_id,
            ))

        db.flush()
        recompute_invoice_status(db, lease.id, termination_date)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(lease)
    logger.info("Lease %s terminated (settlement committed: %s, final amount %s)",
                lease.id, payload.commit_settlement, settlement.final_settled_amount)
    return {
        "lease": lease_out(lease),
        "settlement": settlement,
        "settlement_committed": payload.commit_settlement,
    }


# ----------------------------------------------------
# ✅ Rent adjustments
# ----------------------------------------------------
def get_rent_adjustments(db: Session, lease_id: int) -> List[RentAdjustmentOut]:
    rows = (
        db.query(RentAdjustment)
        .filter(RentAdjustment.lease_id == lease_id)
        .order_by(RentAdjustment.effective_date.desc(), RentAdjustment.id.desc())
        .all()
    )
    return [RentAdjustmentOut.model_validate(r) for r in rows]


def create_rent_adjustment(db: Session, lease: Lease, payload: RentAdjustmentCreate) -> RentAdjustment:
    if lease.status == LeaseStatus.terminated.value:
        raise ValueError("Rent cannot be adjusted on a terminated lease")
    if payload.effective_date < lease.start_date:
        raise ValueError("Effective date cannot be before lease start")
    latest = max((a.effective_date for a in lease.rent_adjustments), default=None)
    if latest and payload.effective_date < latest:
        raise ValueError(
            f"Effective date cannot be before the latest adjustment on {latest.isoformat()}")

    previous = quantize(lease.monthly_rent)
    new_rent = quantize(payload.new_rent)
    if new_rent == previous:
        raise ValueError("New rent is the same as the current rent")

    try:
        adjustment = RentAdjustment(
            lease_id=lease.id,
            previous_rent=previous,
            new_rent=new_rent,
            adjustment_amount=new_rent - previous,
            effective_date=payload.effective_date,
            agreement_terms=payload.agreement_terms,
            notes=payload.notes,
        )
        db.add(adjustment)
        # latest agreed rent, months are billed from the adjustment history
        lease.monthly_rent = new_rent
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(adjustment)
    return adjustment


# ----------------------------------------------------
# ✅ Hard delete with reason
# ----------------------------------------------------
def delete(db: Session, lease: Lease, reason: str, user_id: Optional[int] = None):
    active = db.query(Payment).filter(
        Payment.lease_id == lease.id, Payment.is_deleted == False).count()
    if active:
        raise ValueError(
            "Lease has recorded payments, delete the payments first")

    try:
        log_deletion(db, DeletionRecordType.lease.value,
                     lease, reason, user_id)
        if lease.status != LeaseStatus.terminated.value and lease.shop:
            lease.shop.status = ShopStatus.vacant.value
        db.delete(lease)
        db.commit()
    except Exception:
        db.rollback()
        raise

    return {"message": "Lease deleted successfully"}
