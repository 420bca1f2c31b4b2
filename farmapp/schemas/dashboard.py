"""Response schemas for the dashboard and financial summaries."""

import datetime

from pydantic import BaseModel, Field


class DailyProfit(BaseModel):
    date: datetime.date
    sales: float
    expenses: float
    profit: float


class DashboardStats(BaseModel):
    """Today's figures and payments, outstanding dues, and the daily profit trend (oldest first)."""

    todays_sales_total: float
    todays_sales_count: int
    todays_expense_total: float
    todays_profit: float
    todays_cash_total: float = 0.0
    todays_upi_total: float = 0.0
    total_due: float = Field(default=0.0, description="Unpaid remainder summed over all sales")
    profit_trend: list[DailyProfit] = Field(default_factory=list)


class FinancialSummary(BaseModel):
    """Totals over a date range; start/end are None when unbounded."""

    start: datetime.date | None = None
    end: datetime.date | None = None
    revenue: float
    expenses: float
    profit: float
    margin_percent: float | None = Field(
        default=None,
        description="profit / revenue * 100, or None when revenue is zero",
    )
    expenses_by_type: dict[str, float] = Field(default_factory=dict)
