"""
Test suite for the unitpad unit type system.

Tests cover:
- Unit lookup (case-sensitive symbols, aliases, rate shorthands, compounds)
- Rate validity
- Conversion between units, bits/bytes and rates
- Result formatting and parsing
- Unit-aware arithmetic

Author: xwest
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from unitpad.units import (
    RateUnit, UnitError, UnitFamily, UnitRegistry, UnitType, UnitValue,
    add, divide, format_number, is_compatible_for_addition, multiply,
    parse_result_string, parse_unit, power, subtract
)
from unitpad.units.registry import BYTE, HOUR, MINUTE, SECOND, USD, EUR


def value(amount, unit_name=None):
    return UnitValue(amount, parse_unit(unit_name) if unit_name else None)


class TestUnitLookup(unittest.TestCase):
    """Test cases for unit name resolution."""

    def test_symbol_case_decides_bits_or_bytes(self):
        self.assertEqual(parse_unit("MB").family, UnitFamily.DATA)
        self.assertEqual(parse_unit("Mb").family, UnitFamily.BIT)
        self.assertEqual(parse_unit("B"), BYTE)

    def test_lowercase_data_symbols_mean_bytes(self):
        self.assertEqual(parse_unit("mb"), parse_unit("MB"))
        self.assertEqual(parse_unit("gib"), parse_unit("GiB"))

    def test_binary_units_are_flagged(self):
        self.assertTrue(parse_unit("GiB").binary)
        self.assertFalse(parse_unit("GB").binary)

    def test_spelled_out_aliases(self):
        self.assertEqual(parse_unit("seconds"), SECOND)
        self.assertEqual(parse_unit("Minutes"), MINUTE)
        self.assertEqual(parse_unit("hr"), HOUR)
        self.assertEqual(parse_unit("dollars"), USD)

    def test_rate_shorthands(self):
        qps = parse_unit("QPS")
        self.assertIsInstance(qps, RateUnit)
        self.assertEqual(qps.numerator.family, UnitFamily.REQUEST)
        self.assertEqual(qps.denominator, SECOND)

        mbps = parse_unit("Mbps")
        self.assertEqual(mbps.numerator, parse_unit("Mb"))
        self.assertEqual(mbps.unit_type, UnitType.BIT_RATE)

    def test_compound_units(self):
        rate = parse_unit("GiB/s")
        self.assertIsInstance(rate, RateUnit)
        self.assertEqual(rate.display_name, "GiB/s")
        self.assertEqual(parse_unit("$/GiB").unit_type, UnitType.RATE)

    def test_invalid_compounds_and_unknown_words(self):
        self.assertIsNone(parse_unit("GiB/GiB"))
        self.assertIsNone(parse_unit("s/GiB"))
        self.assertIsNone(parse_unit("foo"))
        self.assertIsNone(parse_unit(""))

    def test_every_unit_round_trips_through_base(self):
        registry = UnitRegistry()
        units = (list(registry.exact.values()) + list(registry.aliases.values())
                 + list(registry.rate_shorthands.values()))
        for unit in units:
            with self.subTest(unit=unit.display_name):
                self.assertAlmostEqual(unit.from_base_value(unit.to_base_value(1.0)), 1.0, places=9)


class TestRateUnit(unittest.TestCase):

    def test_invalid_rate_raises(self):
        with self.assertRaises(UnitError) as context:
            RateUnit(SECOND, SECOND)
        self.assertEqual(context.exception.code, "U001")

        with self.assertRaises(UnitError):
            RateUnit(BYTE, BYTE)

    def test_currency_per_data_is_valid(self):
        rate = RateUnit(USD, parse_unit("GiB"))
        self.assertFalse(rate.is_time_rate)
        self.assertEqual(str(rate.display_name), "$/GiB")

    def test_networking_shorthand_display(self):
        for text, expected in [("Mbps", "Mbps"), ("Mb/s", "Mbps"), ("bit/s", "bps"),
                               ("Gibps", "Gibps"), ("qps", "QPS"), ("query/min", "QPM"),
                               ("Mb/min", "Mb/min"), ("req/s", "req/s")]:
            with self.subTest(text=text):
                self.assertEqual(parse_unit(text).display_name, expected)

    def test_shorthand_results_parse_back(self):
        result = parse_result_string("1,500 Mbps")
        self.assertEqual(result.unit, parse_unit("Mb/s"))
        self.assertEqual(result.format(), "1,500 Mbps")


class TestConversion(unittest.TestCase):
    """Test cases for UnitValue conversion."""

    def test_binary_conversion(self):
        result = value(1, "GiB").to_unit(parse_unit("MiB"))
        self.assertEqual(result.value, 1024)

    def test_si_to_binary(self):
        result = value(1, "GB").to_unit(parse_unit("GiB"))
        self.assertAlmostEqual(result.value, 0.9313225746, places=9)

    def test_bits_to_bytes(self):
        result = value(100, "Mbps").to_unit(parse_unit("MB/s"))
        self.assertAlmostEqual(result.value, 12.5)

    def test_rate_denominator_rescaling(self):
        result = value(1, "TB/week").to_unit(parse_unit("GB/day"))
        self.assertAlmostEqual(result.value, 1000 / 7)

    def test_incompatible_conversion(self):
        self.assertIsNone(value(1, "GiB").to_unit(SECOND))
        self.assertIsNone(value(5, "$/h").to_unit(parse_unit("€/h")))
        with self.assertRaises(UnitError) as context:
            value(1, "GiB").convert_to(SECOND)
        self.assertEqual(context.exception.code, "U007")

    def test_number_to_percent(self):
        result = value(0.25).to_unit(parse_unit("%"))
        self.assertAlmostEqual(result.value, 25)


class TestFormatting(unittest.TestCase):

    def test_integers_get_thousands_separators(self):
        self.assertEqual(format_number(1536.0), "1,536")
        self.assertEqual(format_number(999998000001.0), "999,998,000,001")

    def test_fractions_are_trimmed(self):
        self.assertEqual(format_number(1 / 3), "0.333")
        self.assertEqual(format_number(15.75), "15.75")
        self.assertEqual(format_number(-2.5), "-2.5")
        self.assertEqual(format_number(1234568.89), "1,234,568.89")

    def test_tiny_values_print_as_zero(self):
        self.assertEqual(format_number(1e-20), "0")
        self.assertEqual(format_number(-0.0001), "0")
        self.assertEqual(format_number(-0.0), "0")

    def test_format_with_unit(self):
        self.assertEqual(value(1536, "MiB").format(), "1,536 MiB")
        self.assertEqual(str(value(100, "$/h")), "100 $/h")


class TestResultParsing(unittest.TestCase):

    def test_parse_with_unit(self):
        result = parse_result_string("1,536 MiB")
        self.assertEqual(result.value, 1536)
        self.assertEqual(result.unit, parse_unit("MiB"))

    def test_parse_plain_number(self):
        self.assertTrue(parse_result_string("0.333").is_dimensionless)

    def test_parse_rate(self):
        result = parse_result_string("100 $/h")
        self.assertEqual(result.unit, RateUnit(USD, HOUR))

    def test_unparseable(self):
        self.assertIsNone(parse_result_string("1 2 3"))
        self.assertIsNone(parse_result_string("abc"))
        self.assertIsNone(parse_result_string("5 bogus"))
        self.assertIsNone(parse_result_string(""))


class TestAlgebra(unittest.TestCase):
    """Test cases for unit-aware arithmetic."""

    def test_addition_keeps_finer_unit(self):
        result = add(value(1, "GiB"), value(512, "MiB"))
        self.assertEqual(result.format(), "1,536 MiB")

    def test_subtraction(self):
        result = subtract(value(1, "year"), value(1, "month"))
        self.assertEqual(result.format(), "11 month")

    def test_incompatible_addition(self):
        with self.assertRaises(UnitError) as context:
            add(value(5, "GiB"), value(10, "seconds"))
        self.assertEqual(context.exception.code, "U002")

        with self.assertRaises(UnitError):
            add(UnitValue(100, USD), UnitValue(50, EUR))

    def test_addition_compatibility_rules(self):
        self.assertTrue(is_compatible_for_addition(parse_unit("GiB/s"), parse_unit("GiB/min")))
        self.assertFalse(is_compatible_for_addition(parse_unit("GiB/s"), parse_unit("MB/s")))
        self.assertTrue(is_compatible_for_addition(parse_unit("QPS"), parse_unit("req/s")))
        self.assertFalse(is_compatible_for_addition(parse_unit("QPS"), parse_unit("GiB")))

    def test_rate_times_time(self):
        result = multiply(value(50, "GiB/s"), value(2, "s"))
        self.assertEqual(result.format(), "100 GiB")

        result = multiply(value(1, "hour"), value(25, "QPS"))
        self.assertEqual(result.format(), "90,000 query")

    def test_data_divided_by_time_is_rate(self):
        result = divide(value(100, "GiB"), value(10, "s"))
        self.assertEqual(result.format(), "10 GiB/s")

    def test_requests_divided_by_time_is_per_second(self):
        result = divide(value(6000, "req"), value(10, "minutes"))
        self.assertEqual(result.format(), "10 req/s")

    def test_data_divided_by_rate_is_duration(self):
        result = divide(value(1, "GB"), value(10, "Mbps"))
        self.assertEqual(result.format(), "800 s")

    def test_ratio_of_compatible_values(self):
        self.assertAlmostEqual(divide(value(1, "GiB"), value(1, "GB")).value, 1.073741824)
        self.assertEqual(divide(value(8, "bit"), value(1, "B")).value, 1)

    def test_division_by_zero(self):
        with self.assertRaises(UnitError) as context:
            divide(value(5), value(0))
        self.assertEqual(context.exception.code, "U005")

    def test_power(self):
        self.assertEqual(power(value(2), value(10)).value, 1024)
        with self.assertRaises(UnitError) as context:
            power(value(2, "GiB"), value(2))
        self.assertEqual(context.exception.code, "U006")

    def test_power_overflow(self):
        with self.assertRaises(UnitError) as context:
            power(value(10), value(1000))
        self.assertEqual(context.exception.code, "U008")


if __name__ == '__main__':
    unittest.main()
