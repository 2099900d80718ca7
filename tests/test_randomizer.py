import unittest
from decimal import Decimal

from relay_topup.utils.randomizer import (
    rand_decimal_with_dec,
    rand_int,
    random_choice,
    round_to_appropriate_decimal_place,
    shuffle_list,
)


def decimals_of(value: Decimal) -> int:
    return -value.as_tuple().exponent


class RandomizerTests(unittest.TestCase):
    def test_topup_amounts_stay_in_range_with_configured_precision(self) -> None:
        low, high = Decimal("0.005"), Decimal("0.01")
        for _ in range(10_000):
            value = rand_decimal_with_dec(0.005, 0.01, 4, 7)
            self.assertGreaterEqual(value, low)
            self.assertLessEqual(value, high)
            self.assertTrue(4 <= decimals_of(value) <= 7, value)

    def test_precision_uses_whole_configured_span(self) -> None:
        seen = {decimals_of(rand_decimal_with_dec(1, 2, 0, 3)) for _ in range(2_000)}
        self.assertEqual(seen, {0, 1, 2, 3})

    def test_rounding_follows_value_magnitude(self) -> None:
        value = Decimal("0.0087654321")
        for _ in range(500):
            rounded = round_to_appropriate_decimal_place(value, 2, 5)
            # three leading zeros after the point plus 2..5 digits
            self.assertTrue(5 <= decimals_of(rounded) <= 8, rounded)
            self.assertLessEqual(abs(rounded - value), Decimal("0.000005"))

    def test_rounding_large_values_keeps_no_negative_precision(self) -> None:
        rounded = round_to_appropriate_decimal_place(Decimal("1234.5678"), 0, 0)
        self.assertEqual(rounded, Decimal("1235"))

    def test_rounding_rejects_non_positive(self) -> None:
        with self.assertRaises(ValueError):
            round_to_appropriate_decimal_place(0, 2, 5)

    def test_rand_int_inclusive(self) -> None:
        seen = {rand_int(60, 62) for _ in range(500)}
        self.assertEqual(seen, {60, 61, 62})

    def test_choice_and_shuffle_keep_items(self) -> None:
        items = ["optimism", "arbitrum", "zksync", "base"]
        self.assertIn(random_choice(items), items)

        shuffled = shuffle_list(items)
        self.assertEqual(sorted(shuffled), sorted(items))
        self.assertEqual(items, ["optimism", "arbitrum", "zksync", "base"])


if __name__ == "__main__":
    unittest.main()
