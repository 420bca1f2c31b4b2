"""Farm expenses; writes need manage_expenses."""

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from farmapp.api.v1.auth import get_current_user, require_permission
from farmapp.api.v1.farms import require_active_farm
from farmapp.core.database import get_db
from farmapp.models import Expense
from farmapp.schemas.auth import CurrentUser
from farmapp.schemas.expenses import ExpenseCreate, ExpenseRead, ExpenseUpdate
from farmapp.schemas.users import MessageResponse

router = APIRouter()
can_manage_expenses = require_permission("manage_expenses")


def _get_expense_or_404(db: Session, expense_id: int) -> Expense:
    expense = db.get(Expense, expense_id)
    if expense is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Expense not found")
    return expense


@router.get("", response_model=list[ExpenseRead])
def list_expenses(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    farm_id: int | None = None,
    expense_type: Annotated[str | None, Query(alias="type")] = None,
) -> list[ExpenseRead]:
    """List expenses by date, newest first; filter by farm and/or type."""
    query = db.query(Expense)
    if farm_id is not None:
        query = query.filter(Expense.farm_id == farm_id)
    if expense_type is not None:
        query = query.filter(Expense.type == expense_type)
    expenses = query.order_by(Expense.date.desc(), Expense.id.desc()).all()
    return [ExpenseRead.model_validate(e) for e in expenses]


@router.get("/{expense_id}", response_model=ExpenseRead)
def get_expense(
    expense_id: int,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ExpenseRead:
    return ExpenseRead.model_validate(_get_expense_or_404(db, expense_id))


@router.post("", response_model=ExpenseRead, status_code=status.HTTP_201_CREATED)
def create_expense(
    body: ExpenseCreate,
    user: Annotated[CurrentUser, Depends(can_manage_expenses)],
    db: Annotated[Session, Depends(get_db)],
) -> ExpenseRead:
    require_active_farm(db, body.farm_id)
    data = body.model_dump()
    data["date"] = data["date"] or datetime.now(UTC)
    expense = Expense(**data, created_by=user.id, updated_by=user.id)
    db.add(expense)
    db.commit()
    db.refresh(expense)
    return ExpenseRead.model_validate(expense)


@router.put("/{expense_id}", response_model=ExpenseRead)
def update_expense(
    expense_id: int,
    body: ExpenseUpdate,
    user: Annotated[CurrentUser, Depends(can_manage_expenses)],
    db: Annotated[Session, Depends(get_db)],
) -> ExpenseRead:
    expense = _get_expense_or_404(db, expense_id)
    for key, value in body.model_dump(exclude_unset=True).items():
        setattr(expense, key, value)
    expense.updated_by = user.id
    db.commit()
    db.refresh(expense)
    return ExpenseRead.model_validate(expense)


@router.delete("/{expense_id}", response_model=MessageResponse)
def delete_expense(
    expense_id: int,
    _user: Annotated[CurrentUser, Depends(can_manage_expenses)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    expense = _get_expense_or_404(db, expense_id)
    db.delete(expense)
    db.commit()
    return MessageResponse(message="Expense deleted successfully")
