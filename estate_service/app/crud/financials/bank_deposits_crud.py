from datetime import datetime, timezone
from typing import Optional
from sqlalchemy.orm import Session

from ...enum.system_enum import DeletionRecordType
from ...ledger.money import money_sum
from ...models.financials.bank_deposits import BankDeposit
from ...models.space_sites.owners import Owner
from ...schemas.financials.bank_deposits_schemas import (
    BankDepositCreate, BankDepositListResponse, BankDepositOut, BankDepositRequest
)
from ..system.deletion_logs_crud import log_deletion


def deposit_out(deposit: BankDeposit) -> BankDepositOut:
    out = BankDepositOut.model_validate(deposit)
    out.owner_name = deposit.owner.name if deposit.owner else None
    return out


def build_filters(params: BankDepositRequest, owner_id: Optional[int]):
    filters = [BankDeposit.is_deleted == False]

    if owner_id is not None:
        filters.append(BankDeposit.owner_id == owner_id)

    if params.owner_id:
        filters.append(BankDeposit.owner_id == params.owner_id)

    if params.start_date:
        filters.append(BankDeposit.deposit_date >= params.start_date)

    if params.end_date:
        filters.append(BankDeposit.deposit_date <= params.end_date)

    if params.search:
        filters.append(BankDeposit.bank_name.ilike(f"%{params.search}%"))

    return filters


def get_list(db: Session, params: BankDepositRequest,
             owner_id: Optional[int] = None) -> BankDepositListResponse:
    q = (
        db.query(BankDeposit)
        .filter(*build_filters(params, owner_id))
        .order_by(BankDeposit.deposit_date.desc(), BankDeposit.id.desc())
    )
    all_rows = q.all()
    rows = q.offset(params.skip).limit(params.limit).all()
    return {
        "deposits": [deposit_out(d) for d in rows],
        "total": len(all_rows),
        "total_amount": money_sum(d.amount for d in all_rows),
    }


def get_by_id(db: Session, deposit_id: int) -> Optional[BankDeposit]:
    return (
        db.query(BankDeposit)
        .filter(BankDeposit.id == deposit_id, BankDeposit.is_deleted == False)
        .first()
    )


def create(db: Session, payload: BankDepositCreate) -> BankDeposit:
    if not db.query(Owner).filter(Owner.id == payload.owner_id).first():
        raise ValueError("Owner not found")

    deposit = BankDeposit(**payload.model_dump(), is_deleted=False)
    db.add(deposit)
    db.commit()
    db.refresh(deposit)
    return deposit


def delete(db: Session, deposit: BankDeposit, reason: str, user_id: Optional[int] = None):
    try:
        deposit.is_deleted = True
        deposit.deleted_at = datetime.now(timezone.utc)
        deposit.deletion_reason = reason
        log_deletion(db, DeletionRecordType.bank_deposit.value,
                     deposit, reason, user_id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    return {"message": "Bank deposit deleted successfully"}
