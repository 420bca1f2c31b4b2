"""Assistant tools (UPI receipt reader, profit calculator), gated by AI_FEATURES_ENABLED."""

import logging
from datetime import UTC, date, datetime, time
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from farmapp.api.v1.auth import ai_operator, ai_profit_viewer
from farmapp.api.v1.payments import reject_duplicate_utr
from farmapp.core.database import get_db
from farmapp.models import Sale
from farmapp.schemas.auth import CurrentUser
from farmapp.schemas.dashboard import FinancialSummary
from farmapp.schemas.upi import UpiExtraction, UpiTextRequest
from farmapp.services.dashboard import load_financial_summary
from farmapp.services.payments import record_payment
from farmapp.services.upi_parser import extract_payment_info, match_client

logger = logging.getLogger(__name__)
router = APIRouter()


def _record_upi_payment(db: Session, sale: Sale, extraction: UpiExtraction, user_id: int) -> None:
    if extraction.amount is None or extraction.amount <= 0:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="No payment amount found in the receipt text",
        )
    reject_duplicate_utr(db, extraction.utr)
    paid_at = datetime.combine(extraction.date, time.min, tzinfo=UTC) if extraction.date else None
    payment = record_payment(
        db, sale, extraction.amount, "upi", user_id, utr=extraction.utr, paid_at=paid_at
    )
    db.commit()
    extraction.payment_id = payment.id


@router.post("/upi-reader", response_model=UpiExtraction)
def read_upi_text(
    body: UpiTextRequest,
    user: Annotated[CurrentUser, Depends(ai_operator)],
    db: Annotated[Session, Depends(get_db)],
) -> UpiExtraction:
    """
    Extract amount, UTR, date, payer and UPI id from receipt text (OCR or SMS)
    and link the payer to an existing client when the name matches. With
    sale_id, the amount is also recorded as a UPI payment on that sale.
    """
    sale = None
    if body.sale_id is not None:
        sale = db.get(Sale, body.sale_id)
        if sale is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Sale not found")
    extraction = extract_payment_info(body.text)
    client = match_client(db, extraction.payer_name)
    if client is not None:
        extraction.matched_client_id = client.id
    if sale is not None:
        _record_upi_payment(db, sale, extraction, user.id)
    logger.info(
        "UPI text processed",
        extra={
            "has_amount": extraction.amount is not None,
            "has_utr": extraction.utr is not None,
            "matched_client": extraction.matched_client_id is not None,
            "payment_recorded": extraction.payment_id is not None,
        },
    )
    return extraction


@router.get("/profit", response_model=FinancialSummary)
def get_profit(
    _user: Annotated[CurrentUser, Depends(ai_profit_viewer)],
    db: Annotated[Session, Depends(get_db)],
    start: date | None = None,
    end: date | None = None,
    farm_id: int | None = None,
) -> FinancialSummary:
    """Profit calculator: revenue, expenses, profit and margin (requires view_all_data)."""
    if start is not None and end is not None and start > end:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="start must not be after end",
        )
    return load_financial_summary(db, start=start, end=end, farm_id=farm_id)
