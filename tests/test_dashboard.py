"""Tests for dashboard aggregation (pure functions over sale/expense rows)."""

import unittest
from datetime import UTC, date, datetime, timedelta, timezone
from types import SimpleNamespace

from farmapp.services.dashboard import build_dashboard_stats, summarize_financials

IST = timezone(timedelta(hours=5, minutes=30))


def _sale(when: datetime, amount: float) -> SimpleNamespace:
    return SimpleNamespace(date=when, total_amount=amount)


def _payment(when: datetime, amount: float, method: str) -> SimpleNamespace:
    return SimpleNamespace(date=when, amount=amount, method=method)


def _expense(when: datetime, amount: float, kind: str = "feed") -> SimpleNamespace:
    return SimpleNamespace(date=when, amount=amount, type=kind)


class TestBuildDashboardStats(unittest.TestCase):
    def setUp(self) -> None:
        self.today = date(2025, 3, 10)
        self.sales = [
            _sale(datetime(2025, 3, 10, 10, 0, tzinfo=UTC), 300.0),
            # 03:00 IST on the 10th is still the 9th in UTC
            _sale(datetime(2025, 3, 10, 3, 0, tzinfo=IST), 200.0),
            _sale(datetime(2025, 3, 1, 12, 0, tzinfo=UTC), 999.0),
        ]
        self.expenses = [
            _expense(datetime(2025, 3, 10, 8, 0, tzinfo=UTC), 50.0),
            _expense(datetime(2025, 3, 8, 8, 0), 20.0, "labor"),
        ]

    def test_todays_figures(self) -> None:
        stats = build_dashboard_stats(self.sales, self.expenses, self.today, trend_days=3)
        self.assertEqual(stats.todays_sales_total, 300.0)
        self.assertEqual(stats.todays_sales_count, 1)
        self.assertEqual(stats.todays_expense_total, 50.0)
        self.assertEqual(stats.todays_profit, 250.0)

    def test_trend_is_oldest_first_and_zero_filled(self) -> None:
        stats = build_dashboard_stats(self.sales, self.expenses, self.today, trend_days=3)
        self.assertEqual([p.date for p in stats.profit_trend], [date(2025, 3, 8), date(2025, 3, 9), date(2025, 3, 10)])
        self.assertEqual([p.profit for p in stats.profit_trend], [-20.0, 200.0, 250.0])
        self.assertEqual(stats.profit_trend[0].sales, 0.0)

    def test_no_records(self) -> None:
        stats = build_dashboard_stats([], [], self.today, trend_days=7)
        self.assertEqual(stats.todays_profit, 0.0)
        self.assertEqual(len(stats.profit_trend), 7)

    def test_todays_payments_split_by_method(self) -> None:
        payments = [
            _payment(datetime(2025, 3, 10, 9, 0, tzinfo=UTC), 120.0, "cash"),
            _payment(datetime(2025, 3, 10, 11, 0, tzinfo=UTC), 80.5, "upi"),
            _payment(datetime(2025, 3, 9, 11, 0, tzinfo=UTC), 999.0, "upi"),
        ]
        stats = build_dashboard_stats(
            self.sales, self.expenses, self.today, trend_days=3, payments=payments, total_due=410.0
        )
        self.assertEqual(stats.todays_cash_total, 120.0)
        self.assertEqual(stats.todays_upi_total, 80.5)
        self.assertEqual(stats.total_due, 410.0)


class TestSummarizeFinancials(unittest.TestCase):
    def test_inclusive_range_and_breakdown(self) -> None:
        sales = [
            _sale(datetime(2025, 3, 1, 0, 0, tzinfo=UTC), 100.0),
            _sale(datetime(2025, 3, 31, 23, 0, tzinfo=UTC), 100.0),
            _sale(datetime(2025, 4, 1, 0, 0, tzinfo=UTC), 500.0),
        ]
        expenses = [
            _expense(datetime(2025, 3, 5, tzinfo=UTC), 30.0, "feed"),
            _expense(datetime(2025, 3, 6, tzinfo=UTC), 20.0, "labor"),
            _expense(datetime(2025, 3, 7, tzinfo=UTC), 10.0, "feed"),
        ]
        summary = summarize_financials(sales, expenses, date(2025, 3, 1), date(2025, 3, 31))
        self.assertEqual(summary.revenue, 200.0)
        self.assertEqual(summary.expenses, 60.0)
        self.assertEqual(summary.profit, 140.0)
        self.assertEqual(summary.margin_percent, 70.0)
        self.assertEqual(summary.expenses_by_type, {"feed": 40.0, "labor": 20.0})

    def test_margin_undefined_without_revenue(self) -> None:
        summary = summarize_financials([], [_expense(datetime(2025, 3, 5, tzinfo=UTC), 30.0)])
        self.assertEqual(summary.profit, -30.0)
        self.assertIsNone(summary.margin_percent)
        self.assertIsNone(summary.start)


if __name__ == "__main__":
    unittest.main()
