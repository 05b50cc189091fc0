from typing import Optional
from sqlalchemy.orm import Session

from ...enum.financials_enum import ExpenseAllocation
from ...enum.system_enum import DeletionRecordType
from ...ledger.money import money_sum
from ...models.financials.expenses import Expense
from ...models.leasing_tenants.tenants import Tenant
from ...models.space_sites.owners import Owner
from ...schemas.financials.expenses_schemas import (
    ExpenseCreate, ExpenseListResponse, ExpenseOut, ExpenseRequest
)
from ..system.deletion_logs_crud import log_deletion


def expense_out(expense: Expense) -> ExpenseOut:
    out = ExpenseOut.model_validate(expense)
    out.owner_name = expense.owner.name if expense.owner else None
    return out


def build_filters(params: ExpenseRequest, owner_id: Optional[int]):
    filters = []

    # owners see their own expenses plus the common ones
    if owner_id is not None:
        filters.append(
            (Expense.allocation == ExpenseAllocation.common.value) | (Expense.owner_id == owner_id))

    if params.allocation and params.allocation.lower() != "all":
        filters.append(Expense.allocation == params.allocation)

    if params.expense_type and params.expense_type.lower() != "all":
        filters.append(Expense.expense_type == params.expense_type)

    if params.owner_id:
        filters.append(Expense.owner_id == params.owner_id)

    if params.start_date:
        filters.append(Expense.expense_date >= params.start_date)

    if params.end_date:
        filters.append(Expense.expense_date <= params.end_date)

    if params.search:
        filters.append(Expense.description.ilike(f"%{params.search}%"))

    return filters


def get_list(db: Session, params: ExpenseRequest, owner_id: Optional[int] = None) -> ExpenseListResponse:
    q = (
        db.query(Expense)
        .filter(*build_filters(params, owner_id))
        .order_by(Expense.expense_date.desc(), Expense.id.desc())
    )
    all_rows = q.all()
    rows = q.offset(params.skip).limit(params.limit).all()
    return {
        "expenses": [expense_out(e) for e in rows],
        "total": len(all_rows),
        "total_amount": money_sum(e.amount for e in all_rows),
    }


def get_by_id(db: Session, expense_id: int) -> Optional[Expense]:
    return db.query(Expense).filter(Expense.id == expense_id).first()


def create(db: Session, payload: ExpenseCreate) -> Expense:
    if payload.allocation == ExpenseAllocation.owner.value:
        if not payload.owner_id:
            raise ValueError("Owner expenses need an owner")
        if not db.query(Owner).filter(Owner.id == payload.owner_id).first():
            raise ValueError("Owner not found")
    elif payload.owner_id:
        raise ValueError("Common expenses cannot have an owner")

    if payload.tenant_id and not db.query(Tenant).filter(
            Tenant.id == payload.tenant_id, Tenant.is_deleted == False).first():
        raise ValueError("Tenant not found")

    expense = Expense(**payload.model_dump())
    db.add(expense)
    db.commit()
    db.refresh(expense)
    return expense


def delete(db: Session, expense: Expense, reason: str, user_id: Optional[int] = None):
    try:
        log_deletion(db, DeletionRecordType.expense.value,
                     expense, reason, user_id)
        db.delete(expense)
        db.commit()
    except Exception:
        db.rollback()
        raise

    return {"message": "Expense deleted successfully"}
