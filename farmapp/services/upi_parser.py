"""Extract payment fields (amount, UTR, date, payer, UPI id) from OCR'd or SMS UPI receipt text."""

import logging
import re
from datetime import date

from sqlalchemy.orm import Session

from farmapp.models import Client
from farmapp.schemas.upi import UpiExtraction

logger = logging.getLogger(__name__)

_CURRENCY_AMOUNT_RE = re.compile(
    r"(?:₹|\brs\.?|\binr)\s*([\d,]+(?:\.\d{1,2})?)"
    r"|\b([\d,]+(?:\.\d{1,2})?)\s*(?:rs\b\.?|inr\b|rupees\b)",
    re.IGNORECASE,
)
_DECIMAL_AMOUNT_RE = re.compile(r"\b(\d[\d,]*\.\d{2})\b")
_LABELLED_REF_RE = re.compile(
    r"(?:\butr|\bupi\s*ref(?:erence)?|\bref(?:erence)?|\btxn|\btransaction)"
    r"\s*(?:id|no\.?|number)?\s*[:#.\-]?\s*([A-Z0-9]{10,20})\b",
    re.IGNORECASE,
)
_BARE_REF_RE = re.compile(r"\b([A-Z0-9]{10,20})\b", re.IGNORECASE)
_NUMERIC_DATE_RE = re.compile(r"\b(\d{1,2})[/\-](\d{1,2})[/\-](\d{2,4})\b")
_TEXT_DATE_RE = re.compile(
    r"\b(\d{1,2})\s+(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*,?\s+(\d{4})\b",
    re.IGNORECASE,
)
_PAYER_RE = re.compile(
    r"\b(?:received from|paid by|sender|from)\b\s*[:\-]?\s*([A-Za-z][A-Za-z .]{2,49})",
    re.IGNORECASE,
)
_UPI_ID_RE = re.compile(r"\b([A-Za-z0-9._\-]{2,}@[A-Za-z][A-Za-z0-9.\-]+)\b")

# Words that follow "from" in bank texts but are not a payer ("from account", "from your a/c").
_NOT_A_PAYER = frozenset({"a", "ac", "acct", "account", "bank", "my", "the", "upi", "your"})

_MONTHS = ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec")


def _to_amount(raw: str) -> float | None:
    try:
        value = float(raw.replace(",", ""))
    except ValueError:
        return None
    return value if value > 0 else None


def extract_amount(text: str) -> float | None:
    """
    Currency-marked figures win (₹, Rs, INR, rupees); otherwise the first
    figure with two decimals. Lines mentioning a balance are skipped.
    """
    lines = [line for line in text.splitlines() if "balance" not in line.lower()]
    for line in lines:
        for match in _CURRENCY_AMOUNT_RE.finditer(line):
            amount = _to_amount(match.group(1) or match.group(2))
            if amount is not None:
                return amount
    for line in lines:
        match = _DECIMAL_AMOUNT_RE.search(line)
        if match:
            amount = _to_amount(match.group(1))
            if amount is not None:
                return amount
    return None


def extract_utr(text: str) -> str | None:
    """Prefer a labelled reference (UTR, Ref No, Txn Id); else a 10-20 char token containing a digit."""
    for match in _LABELLED_REF_RE.finditer(text):
        candidate = match.group(1)
        if any(ch.isdigit() for ch in candidate):
            return candidate.upper()
    for match in _BARE_REF_RE.finditer(text):
        candidate = match.group(1)
        start, end = match.span(1)
        # part of a UPI id or a decimal amount
        if "@" in text[max(start - 1, 0) : end + 1] or text[end : end + 1] in (".", ","):
            continue
        if any(ch.isdigit() for ch in candidate):
            return candidate.upper()
    return None


def extract_date(text: str) -> date | None:
    """Day-first numeric dates (dd/mm/yyyy, dd-mm-yy) or '12 Mar 2024'. Invalid dates are skipped."""
    for match in _NUMERIC_DATE_RE.finditer(text):
        day, month, year = (int(g) for g in match.groups())
        if year < 100:
            year += 2000
        try:
            return date(year, month, day)
        except ValueError:
            continue
    for match in _TEXT_DATE_RE.finditer(text):
        month = _MONTHS.index(match.group(2).lower()[:3]) + 1
        try:
            return date(int(match.group(3)), month, int(match.group(1)))
        except ValueError:
            continue
    return None


def extract_payer_name(text: str) -> str | None:
    for line in text.splitlines():
        for match in _PAYER_RE.finditer(line):
            name = match.group(1).strip(" .")
            if len(name) < 3 or name.split()[0].lower() in _NOT_A_PAYER:
                continue
            return name
    return None


def extract_upi_id(text: str) -> str | None:
    match = _UPI_ID_RE.search(text)
    return match.group(1) if match else None


def extract_payment_info(text: str) -> UpiExtraction:
    """Run every extractor over the receipt text; fields that are not found stay None."""
    return UpiExtraction(
        amount=extract_amount(text),
        utr=extract_utr(text),
        date=extract_date(text),
        payer_name=extract_payer_name(text),
        sender_upi_id=extract_upi_id(text),
    )


def match_client(db: Session, payer_name: str | None) -> Client | None:
    """First client (lowest id) whose name contains payer_name, case-insensitively."""
    if not payer_name:
        return None
    escaped = payer_name.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    client = (
        db.query(Client)
        .filter(Client.name.ilike(f"%{escaped}%", escape="\\"))
        .order_by(Client.id)
        .first()
    )
    if client is not None:
        logger.info("UPI payer matched client: client_id=%s", client.id)
    return client
