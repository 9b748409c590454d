"""
Tests for lenient number coercion, text rendering and timestamp parsing.
"""
import unittest
from datetime import date, datetime, timezone
from decimal import Decimal

from utils import EPOCH, coerce_non_negative_int, parse_timestamp, to_date_string, to_iso_string, to_text
from utils.coerce import MAX_COERCED_INT


class TestCoerce(unittest.TestCase):
    def test_leading_integer(self):
        cases = [("12.9", 12), ("12k", 12), ("  +7", 7), ("-5", 0), ("abc", 0), ("", 0)]
        for value, expected in cases:
            with self.subTest(value=value):
                self.assertEqual(coerce_non_negative_int(value), expected)

    def test_non_string_values(self):
        cases = [(None, 0), (True, 0), (42, 42), (-1, 0), (9.99, 9), (float("nan"), 0),
                 (float("-inf"), 0), (Decimal("15.5"), 15), ([1], 0)]
        for value, expected in cases:
            with self.subTest(value=value):
                self.assertEqual(coerce_non_negative_int(value), expected)

    def test_oversized_values_clamped(self):
        cases = [("9" * 400, MAX_COERCED_INT), ("9" * 5000, MAX_COERCED_INT), ("-" + "9" * 5000, 0),
                 ("0" * 30 + "42", 42), (10**400, MAX_COERCED_INT), (1e308, MAX_COERCED_INT),
                 (Decimal("1e400"), MAX_COERCED_INT), (str(MAX_COERCED_INT), MAX_COERCED_INT)]
        for value, expected in cases:
            with self.subTest(value=str(value)[:20]):
                self.assertEqual(coerce_non_negative_int(value), expected)

    def test_to_text(self):
        cases = [(None, ""), ("abc", "abc"), (10000.0, "10000"), (1.35, "1.35"), (250, "250"),
                 (Decimal("1.50"), "1.5"), (float("nan"), ""), (False, "false"), (date(2024, 1, 2), "2024-01-02")]
        for value, expected in cases:
            with self.subTest(value=value):
                self.assertEqual(to_text(value), expected)


class TestDates(unittest.TestCase):
    def test_parse_variants(self):
        expected = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
        for value in ("2024-06-01T12:00:00.000Z", "2024-06-01T14:00:00+02:00", datetime(2024, 6, 1, 12), 1717243200000):
            with self.subTest(value=value):
                self.assertEqual(parse_timestamp(value), expected)

    def test_unparseable(self):
        for value in (None, "", "not a date", True, float("inf"), {}):
            with self.subTest(value=value):
                self.assertIsNone(parse_timestamp(value))

    def test_date_string(self):
        self.assertEqual(to_date_string("2024-03-15T17:30:00.000Z"), "2024-03-15")
        self.assertEqual(to_date_string(date(2024, 3, 15)), "2024-03-15")
        self.assertEqual(to_date_string("next week"), "next week")
        self.assertEqual(to_date_string(None), "")

    def test_iso_string(self):
        self.assertEqual(to_iso_string(EPOCH), "1970-01-01T00:00:00.000Z")
        self.assertEqual(to_iso_string("2024-03-01T09:00:00Z"), "2024-03-01T09:00:00.000Z")
        self.assertEqual(to_iso_string(None), "")


if __name__ == "__main__":
    unittest.main()
