"""Tests for sale pricing."""

import unittest
from types import SimpleNamespace

from farmapp.services.sales import apply_pricing, price_sale


class TestPriceSale(unittest.TestCase):
    def test_eggs_and_total(self) -> None:
        self.assertEqual(price_sale(3, 150.0, 30), (90, 450.0))

    def test_total_rounded_to_paise(self) -> None:
        self.assertEqual(price_sale(3, 33.333, 30), (90, 100.0))

    def test_zero_trays(self) -> None:
        self.assertEqual(price_sale(0, 150.0, 30), (0, 0.0))

    def test_negative_trays_rejected(self) -> None:
        with self.assertRaises(ValueError):
            price_sale(-1, 150.0, 30)


class TestApplyPricing(unittest.TestCase):
    def test_copies_client_and_prices(self) -> None:
        sale = SimpleNamespace(trays=2, client=None, client_name=None, eggs=None, total_amount=None)
        client = SimpleNamespace(id=4, name="Kumar Traders", rate_per_tray=175.0)
        apply_pricing(sale, client, eggs_per_tray=30)
        self.assertIs(sale.client, client)
        self.assertEqual(sale.client_name, "Kumar Traders")
        self.assertEqual(sale.eggs, 60)
        self.assertEqual(sale.total_amount, 350.0)


if __name__ == "__main__":
    unittest.main()
