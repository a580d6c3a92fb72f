"""
unitpad Unit Type System

The closed set of units unitpad understands (time, bits, bytes, requests,
currency, percent, and "X per Y" rates), conversion through per-family
base values, and the arithmetic rules for combining unit-bearing values.

Author: xwest
"""

from .types import Unit, RateUnit, UnitFamily, UnitType, AnyUnit
from .registry import UnitRegistry, parse_unit
from .value import UnitValue, format_number, parse_result_string
from .algebra import add, subtract, multiply, divide, power, is_compatible_for_addition
from .errors import UnitError

__all__ = [
    "Unit",
    "RateUnit",
    "UnitFamily",
    "UnitType",
    "AnyUnit",
    "UnitRegistry",
    "parse_unit",
    "UnitValue",
    "format_number",
    "parse_result_string",
    "add",
    "subtract",
    "multiply",
    "divide",
    "power",
    "is_compatible_for_addition",
    "UnitError",
]
