"""Schemas for UPI receipt text extraction."""

import datetime

from pydantic import BaseModel, Field


class UpiTextRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=20_000, description="OCR or SMS text of the receipt")
    sale_id: int | None = Field(
        default=None,
        description="When set, the extracted amount is recorded as a UPI payment against this sale",
    )


class UpiExtraction(BaseModel):
    """Fields found in the receipt text; any of them may be missing."""

    amount: float | None = None
    utr: str | None = Field(default=None, description="UPI transaction reference")
    date: datetime.date | None = None
    payer_name: str | None = None
    sender_upi_id: str | None = None
    matched_client_id: int | None = None
    payment_id: int | None = Field(default=None, description="Id of the payment recorded from this receipt")
