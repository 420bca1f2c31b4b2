"""Recording payments against sales and working out what clients still owe."""

import logging
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from farmapp.models import Payment, Sale

logger = logging.getLogger(__name__)


def record_payment(
    db: Session,
    sale: Sale,
    amount: float,
    method: str,
    user_id: int | None,
    utr: str | None = None,
    paid_at: datetime | None = None,
) -> Payment:
    """
    Add a payment for sale to the session (the caller commits). Client, client
    name, sale date and farm are copied from the sale.
    """
    payment = Payment(
        sale=sale,
        client_id=sale.client_id,
        client_name=sale.client_name,
        sale_date=sale.date,
        farm_id=sale.farm_id,
        amount=round(amount, 2),
        method=method,
        utr=utr,
        date=paid_at or datetime.now(UTC),
        created_by=user_id,
        updated_by=user_id,
    )
    db.add(payment)
    logger.info(
        "Payment recorded",
        extra={"sale_id": sale.id, "method": method, "has_utr": utr is not None},
    )
    return payment


def find_payment_by_utr(db: Session, utr: str, exclude_id: int | None = None) -> Payment | None:
    query = db.query(Payment).filter(Payment.utr == utr)
    if exclude_id is not None:
        query = query.filter(Payment.id != exclude_id)
    return query.first()


def outstanding_total(
    sale_totals: Iterable[tuple[int, float]],
    paid_by_sale: Mapping[int, float],
) -> float:
    """Sum of each sale's unpaid remainder; overpaid sales count as zero, not negative."""
    due = 0.0
    for sale_id, total in sale_totals:
        remainder = total - paid_by_sale.get(sale_id, 0.0)
        if remainder > 0:
            due += remainder
    return round(due, 2)


def load_outstanding_total(db: Session, farm_id: int | None = None) -> float:
    sales_q = db.query(Sale.id, Sale.total_amount)
    paid_q = db.query(Payment.sale_id, func.sum(Payment.amount)).group_by(Payment.sale_id)
    if farm_id is not None:
        sales_q = sales_q.filter(Sale.farm_id == farm_id)
        paid_q = paid_q.filter(Payment.farm_id == farm_id)
    paid = {sale_id: float(total or 0.0) for sale_id, total in paid_q.all()}
    return outstanding_total(sales_q.all(), paid)
