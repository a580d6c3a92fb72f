"""
UnitValue: a number with an optional unit.

This is the result type of every evaluation and the format results are
stored in between lines: "1,536 MiB", "0.333", "100 $/h".

Author: xwest
"""

from typing import Optional
from dataclasses import dataclass

from ..constants import DECIMAL_PLACES, FLOAT_EPSILON, MAX_INTEGER_FOR_FORMATTING
from .errors import UnitError, create_conversion_error
from .registry import parse_unit
from .types import AnyUnit, UnitFamily, UnitType

BITS_PER_BYTE = 8.0

_BIT_BYTE_PAIRS = {
    frozenset({UnitType.BIT, UnitType.DATA}),
    frozenset({UnitType.BIT_RATE, UnitType.DATA_RATE}),
}


@dataclass(frozen=True)
class UnitValue:
    """A value with an optional unit; unit None means dimensionless."""
    value: float
    unit: Optional[AnyUnit] = None

    @property
    def is_dimensionless(self) -> bool:
        return self.unit is None

    def to_unit(self, target: AnyUnit) -> Optional['UnitValue']:
        """Convert to target, or None if the units are not convertible."""
        try:
            return self.convert_to(target)
        except UnitError:
            return None

    def convert_to(self, target: AnyUnit) -> 'UnitValue':
        """
        Convert to target, raising UnitError when impossible.

        Rates with the same numerator only rescale the denominator, same
        types go through base values, and bits/bytes are bridged by a
        factor of exactly 8.
        """
        current = self.unit

        if current is None:
            if target.unit_type == UnitType.PERCENTAGE:
                return UnitValue(target.from_base_value(self.value), target)
            raise create_conversion_error(None, target)

        if current.is_rate and target.is_rate:
            if current.numerator == target.numerator:
                if current.denominator.family != target.denominator.family:
                    raise create_conversion_error(current, target)
                converted = (self.value * target.denominator.to_base_value(1.0)
                             / current.denominator.to_base_value(1.0))
                return UnitValue(converted, target)
            if (current.numerator.family == UnitFamily.CURRENCY
                    and target.numerator.family == UnitFamily.CURRENCY):
                raise create_conversion_error(current, target)

        if current.unit_type == target.unit_type and _same_shape(current, target):
            base_value = current.to_base_value(self.value)
            return UnitValue(target.from_base_value(base_value), target)

        if frozenset({current.unit_type, target.unit_type}) in _BIT_BYTE_PAIRS:
            return self._convert_bits_bytes(target)

        raise create_conversion_error(current, target)

    def _convert_bits_bytes(self, target: AnyUnit) -> 'UnitValue':
        base_value = self.unit.to_base_value(self.value)
        if self.unit.unit_type in (UnitType.BIT, UnitType.BIT_RATE):
            base_value /= BITS_PER_BYTE
        else:
            base_value *= BITS_PER_BYTE
        return UnitValue(target.from_base_value(base_value), target)

    def format(self) -> str:
        formatted = format_number(self.value)
        if self.unit is None:
            return formatted
        return f"{formatted} {self.unit.display_name}"

    def __str__(self) -> str:
        return self.format()


def _same_shape(current: AnyUnit, target: AnyUnit) -> bool:
    """Currencies must match exactly; rates must share a denominator family."""
    if current.unit_type == UnitType.CURRENCY:
        return current == target
    if current.is_rate and target.is_rate:
        if current.numerator.family == UnitFamily.CURRENCY and current.numerator != target.numerator:
            return False
        return current.denominator.family == target.denominator.family
    return True


def format_number(value: float) -> str:
    """
    Format a result number.

    Integral values print with thousands separators and no decimals;
    everything else is rounded to three places with trailing zeros trimmed.
    """
    if float(value).is_integer() and abs(value) < MAX_INTEGER_FOR_FORMATTING:
        return f"{int(value):,}"

    if abs(value) < FLOAT_EPSILON:
        return "0"

    rounded = f"{abs(value):,.{DECIMAL_PLACES}f}"
    whole, _, fraction = rounded.partition(".")
    fraction = fraction.rstrip("0")
    number = f"{whole}.{fraction}" if fraction else whole

    if value < 0 and number != "0":
        number = f"-{number}"
    return number


def parse_result_string(text: str) -> Optional[UnitValue]:
    """Parse a formatted result ("1,536 MiB") back into a UnitValue."""
    parts = text.split()
    if not parts or len(parts) > 2:
        return None

    try:
        value = float(parts[0].replace(",", ""))
    except ValueError:
        return None

    if len(parts) == 1:
        return UnitValue(value)

    unit = parse_unit(parts[1])
    if unit is None:
        return None
    return UnitValue(value, unit)
