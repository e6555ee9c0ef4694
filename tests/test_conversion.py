import unittest
from decimal import Decimal

from expense_manager.services.rates.cache_service import RateCache
from expense_manager.services.rates.conversion import CurrencyConverter

from tests.support import FailingRateSource, fixed_rate_source


class CurrencyConverterTests(unittest.TestCase):
    def setUp(self) -> None:
        self.converter = CurrencyConverter(RateCache(fixed_rate_source()))

    def test_same_currency_is_untouched(self) -> None:
        self.assertEqual(
            self.converter.convert(Decimal("10.005"), "eur", "EUR"), Decimal("10.005")
        )

    def test_to_usd_keeps_six_places(self) -> None:
        self.assertEqual(self.converter.convert(100, "EUR", "USD"), Decimal("117.647059"))

    def test_from_usd(self) -> None:
        self.assertEqual(self.converter.convert(100, "USD", "EUR"), Decimal("85.00"))

    def test_cross_rate_goes_through_usd(self) -> None:
        self.assertEqual(self.converter.convert(100, "EUR", "GBP"), Decimal("85.88"))
        self.assertEqual(self.converter.convert(100, "EUR", "JPY"), Decimal("17647.06"))

    def test_unknown_code_leaves_leg_unconverted(self) -> None:
        self.assertEqual(self.converter.convert(100, "XYZ", "EUR"), Decimal("85.00"))
        self.assertEqual(self.converter.convert(100, "EUR", "XYZ"), Decimal("117.647059"))

    def test_round_trip_is_lossy(self) -> None:
        there = self.converter.convert(1, "JPY", "EUR")
        back = self.converter.convert(there, "EUR", "JPY")
        self.assertEqual(there, Decimal("0.01"))
        self.assertEqual(back, Decimal("1.76"))

    def test_fallback_table_converts_one_to_one(self) -> None:
        converter = CurrencyConverter(RateCache(FailingRateSource()))
        self.assertEqual(converter.convert(100, "EUR", "GBP"), Decimal("100.00"))


if __name__ == "__main__":
    unittest.main()
