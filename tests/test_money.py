import unittest
from decimal import Decimal

from expense_manager.services.money import (
    normalize_currency,
    round2,
    round6,
    round_int,
    sum_amounts,
)


class MoneyHelperTests(unittest.TestCase):
    def test_round2_is_half_up_not_bankers(self) -> None:
        self.assertEqual(round2(Decimal("0.125")), Decimal("0.13"))
        self.assertEqual(round2(Decimal("2.345")), Decimal("2.35"))
        self.assertEqual(round2("1.004"), Decimal("1.00"))

    def test_round6_keeps_pivot_precision(self) -> None:
        self.assertEqual(round6(Decimal("100") / Decimal("0.85")), Decimal("117.647059"))
        self.assertEqual(round6(Decimal("0.0000005")), Decimal("0.000001"))

    def test_round_int_half_up(self) -> None:
        self.assertEqual(round_int(Decimal("12.5")), 13)
        self.assertEqual(round_int(Decimal("33.333")), 33)

    def test_floats_go_through_str(self) -> None:
        self.assertEqual(round2(0.1 + 0.2), Decimal("0.30"))

    def test_sum_amounts_of_nothing_is_zero(self) -> None:
        self.assertEqual(sum_amounts([]), Decimal("0"))

    def test_normalize_currency(self) -> None:
        self.assertEqual(normalize_currency(" eur "), "EUR")
        with self.assertRaises(ValueError):
            normalize_currency("EURO")
        with self.assertRaises(ValueError):
            normalize_currency("12$")


if __name__ == "__main__":
    unittest.main()
