"""Dashboard statistics and financial summaries."""

from datetime import UTC, date, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from farmapp.api.v1.auth import get_current_user, owner_or_auditor
from farmapp.core.config import Settings, get_settings
from farmapp.core.database import get_db
from farmapp.schemas.auth import CurrentUser
from farmapp.schemas.dashboard import DashboardStats, FinancialSummary
from farmapp.services.dashboard import load_dashboard_stats, load_financial_summary

router = APIRouter()


@router.get("", response_model=DashboardStats)
def get_dashboard(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    farm_id: int | None = None,
) -> DashboardStats:
    """Today's sales, expenses and profit (UTC day) plus the daily profit trend."""
    today = datetime.now(UTC).date()
    return load_dashboard_stats(db, today, settings.DASHBOARD_TREND_DAYS, farm_id=farm_id)


@router.get("/financials", response_model=FinancialSummary)
def get_financials(
    _user: Annotated[CurrentUser, Depends(owner_or_auditor)],
    db: Annotated[Session, Depends(get_db)],
    start: date | None = None,
    end: date | None = None,
    farm_id: int | None = None,
) -> FinancialSummary:
    """Revenue, expenses by type and profit over an optional inclusive date range (owner or auditor)."""
    if start is not None and end is not None and start > end:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="start must not be after end",
        )
    return load_financial_summary(db, start=start, end=end, farm_id=farm_id)
