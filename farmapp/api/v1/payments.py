"""Payments against sales: any active user may read; writes need manage_sales."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from farmapp.api.v1.auth import get_current_user, require_permission
from farmapp.core.database import get_db
from farmapp.models import Payment, Sale
from farmapp.schemas.auth import CurrentUser
from farmapp.schemas.payments import PaymentCreate, PaymentRead, PaymentUpdate
from farmapp.schemas.users import MessageResponse
from farmapp.services.payments import find_payment_by_utr, record_payment

router = APIRouter()
can_manage_sales = require_permission("manage_sales")


def _get_payment_or_404(db: Session, payment_id: int) -> Payment:
    payment = db.get(Payment, payment_id)
    if payment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment not found")
    return payment


def reject_duplicate_utr(db: Session, utr: str | None, exclude_id: int | None = None) -> None:
    """409 when another payment already carries this UPI reference."""
    if utr is not None and find_payment_by_utr(db, utr, exclude_id=exclude_id) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A payment with this UTR is already recorded",
        )


@router.get("", response_model=list[PaymentRead])
def list_payments(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    farm_id: int | None = None,
    sale_id: int | None = None,
    client_id: int | None = None,
    method: str | None = None,
) -> list[PaymentRead]:
    """List payments, newest first."""
    query = db.query(Payment)
    if farm_id is not None:
        query = query.filter(Payment.farm_id == farm_id)
    if sale_id is not None:
        query = query.filter(Payment.sale_id == sale_id)
    if client_id is not None:
        query = query.filter(Payment.client_id == client_id)
    if method is not None:
        query = query.filter(Payment.method == method)
    payments = query.order_by(Payment.date.desc(), Payment.id.desc()).all()
    return [PaymentRead.model_validate(p) for p in payments]


@router.get("/{payment_id}", response_model=PaymentRead)
def get_payment(
    payment_id: int,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> PaymentRead:
    return PaymentRead.model_validate(_get_payment_or_404(db, payment_id))


@router.post("", response_model=PaymentRead, status_code=status.HTTP_201_CREATED)
def create_payment(
    body: PaymentCreate,
    user: Annotated[CurrentUser, Depends(can_manage_sales)],
    db: Annotated[Session, Depends(get_db)],
) -> PaymentRead:
    sale = db.get(Sale, body.sale_id)
    if sale is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Sale not found")
    reject_duplicate_utr(db, body.utr)
    payment = record_payment(
        db,
        sale,
        amount=body.amount,
        method=body.method,
        user_id=user.id,
        utr=body.utr,
        paid_at=body.date,
    )
    db.commit()
    db.refresh(payment)
    return PaymentRead.model_validate(payment)


@router.put("/{payment_id}", response_model=PaymentRead)
def update_payment(
    payment_id: int,
    body: PaymentUpdate,
    user: Annotated[CurrentUser, Depends(can_manage_sales)],
    db: Annotated[Session, Depends(get_db)],
) -> PaymentRead:
    """Change amount, method, UTR or date; the UTR can be cleared with null."""
    payment = _get_payment_or_404(db, payment_id)
    changes = body.model_dump(exclude_unset=True)
    reject_duplicate_utr(db, changes.get("utr"), exclude_id=payment.id)
    if "amount" in changes:
        changes["amount"] = round(changes["amount"], 2)
    for key, value in changes.items():
        setattr(payment, key, value)
    payment.updated_by = user.id
    db.commit()
    db.refresh(payment)
    return PaymentRead.model_validate(payment)


@router.delete("/{payment_id}", response_model=MessageResponse)
def delete_payment(
    payment_id: int,
    _user: Annotated[CurrentUser, Depends(can_manage_sales)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    payment = _get_payment_or_404(db, payment_id)
    db.delete(payment)
    db.commit()
    return MessageResponse(message="Payment deleted successfully")
