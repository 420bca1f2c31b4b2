"""Dashboard figures: today's sales/expenses/profit, profit trend and range summaries."""

from collections import defaultdict
from collections.abc import Iterable
from datetime import UTC, date, datetime, time, timedelta
from typing import Protocol

from sqlalchemy.orm import Session

from farmapp.models import Expense, Payment, Sale
from farmapp.schemas.dashboard import DailyProfit, DashboardStats, FinancialSummary
from farmapp.services.payments import load_outstanding_total


class _SaleLike(Protocol):
    date: datetime
    total_amount: float


class _ExpenseLike(Protocol):
    date: datetime
    amount: float
    type: str


class _PaymentLike(Protocol):
    date: datetime
    amount: float
    method: str


def _day_of(value: datetime) -> date:
    """Calendar day in UTC; naive datetimes are taken as UTC already."""
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    return value.date()


def _day_start(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=UTC)


def build_dashboard_stats(
    sales: Iterable[_SaleLike],
    expenses: Iterable[_ExpenseLike],
    today: date,
    trend_days: int,
    payments: Iterable[_PaymentLike] = (),
    total_due: float = 0.0,
) -> DashboardStats:
    """
    Aggregate sales and expenses into today's totals and a daily profit trend,
    and split today's payments into cash and UPI.

    The trend covers trend_days days ending today, oldest first; days without
    records appear with zeros. Records outside the window are ignored.
    total_due is passed through (see services.payments.load_outstanding_total).
    """
    first_day = today - timedelta(days=trend_days - 1)
    sales_by_day: dict[date, float] = defaultdict(float)
    expenses_by_day: dict[date, float] = defaultdict(float)
    todays_sales_count = 0

    for sale in sales:
        day = _day_of(sale.date)
        if first_day <= day <= today:
            sales_by_day[day] += sale.total_amount
            if day == today:
                todays_sales_count += 1
    for expense in expenses:
        day = _day_of(expense.date)
        if first_day <= day <= today:
            expenses_by_day[day] += expense.amount

    trend = []
    for offset in range(trend_days):
        day = first_day + timedelta(days=offset)
        day_sales = round(sales_by_day.get(day, 0.0), 2)
        day_expenses = round(expenses_by_day.get(day, 0.0), 2)
        trend.append(
            DailyProfit(
                date=day,
                sales=day_sales,
                expenses=day_expenses,
                profit=round(day_sales - day_expenses, 2),
            )
        )

    received_today: dict[str, float] = defaultdict(float)
    for payment in payments:
        if _day_of(payment.date) == today:
            received_today[payment.method] += payment.amount

    todays_sales = round(sales_by_day.get(today, 0.0), 2)
    todays_expenses = round(expenses_by_day.get(today, 0.0), 2)
    return DashboardStats(
        todays_sales_total=todays_sales,
        todays_sales_count=todays_sales_count,
        todays_expense_total=todays_expenses,
        todays_profit=round(todays_sales - todays_expenses, 2),
        todays_cash_total=round(received_today.get("cash", 0.0), 2),
        todays_upi_total=round(received_today.get("upi", 0.0), 2),
        total_due=round(total_due, 2),
        profit_trend=trend,
    )


def summarize_financials(
    sales: Iterable[_SaleLike],
    expenses: Iterable[_ExpenseLike],
    start: date | None = None,
    end: date | None = None,
) -> FinancialSummary:
    """Revenue, expenses, profit and margin over [start, end] (inclusive, either bound optional)."""

    def in_range(value: datetime) -> bool:
        day = _day_of(value)
        if start is not None and day < start:
            return False
        if end is not None and day > end:
            return False
        return True

    revenue = sum(s.total_amount for s in sales if in_range(s.date))
    by_type: dict[str, float] = defaultdict(float)
    for expense in expenses:
        if in_range(expense.date):
            by_type[expense.type] += expense.amount
    total_expenses = sum(by_type.values())
    profit = revenue - total_expenses
    margin = round(profit / revenue * 100, 2) if revenue else None
    return FinancialSummary(
        start=start,
        end=end,
        revenue=round(revenue, 2),
        expenses=round(total_expenses, 2),
        profit=round(profit, 2),
        margin_percent=margin,
        expenses_by_type={k: round(v, 2) for k, v in sorted(by_type.items())},
    )


def load_dashboard_stats(
    db: Session,
    today: date,
    trend_days: int,
    farm_id: int | None = None,
) -> DashboardStats:
    """Query the trend window, today's payments and outstanding dues, and aggregate them."""
    window_start = _day_start(today - timedelta(days=trend_days - 1))
    window_end = _day_start(today + timedelta(days=1))
    sales_q = db.query(Sale).filter(Sale.date >= window_start, Sale.date < window_end)
    expenses_q = db.query(Expense).filter(
        Expense.date >= window_start, Expense.date < window_end
    )
    payments_q = db.query(Payment).filter(
        Payment.date >= _day_start(today), Payment.date < window_end
    )
    if farm_id is not None:
        sales_q = sales_q.filter(Sale.farm_id == farm_id)
        expenses_q = expenses_q.filter(Expense.farm_id == farm_id)
        payments_q = payments_q.filter(Payment.farm_id == farm_id)
    return build_dashboard_stats(
        sales_q.all(),
        expenses_q.all(),
        today,
        trend_days,
        payments=payments_q.all(),
        total_due=load_outstanding_total(db, farm_id=farm_id),
    )


def load_financial_summary(
    db: Session,
    start: date | None = None,
    end: date | None = None,
    farm_id: int | None = None,
) -> FinancialSummary:
    """Query sales and expenses in range from the database and summarize them."""
    sales_q = db.query(Sale)
    expenses_q = db.query(Expense)
    if start is not None:
        sales_q = sales_q.filter(Sale.date >= _day_start(start))
        expenses_q = expenses_q.filter(Expense.date >= _day_start(start))
    if end is not None:
        sales_q = sales_q.filter(Sale.date < _day_start(end + timedelta(days=1)))
        expenses_q = expenses_q.filter(Expense.date < _day_start(end + timedelta(days=1)))
    if farm_id is not None:
        sales_q = sales_q.filter(Sale.farm_id == farm_id)
        expenses_q = expenses_q.filter(Expense.farm_id == farm_id)
    return summarize_financials(sales_q.all(), expenses_q.all(), start, end)
