"""
Unit-aware arithmetic on UnitValue.

Every operation either returns a new UnitValue or raises UnitError; the
evaluator turns the error into "no result" for the line.

Author: xwest
"""

import math
from typing import Optional, Tuple

from ..constants import FLOAT_EPSILON
from .errors import (
    UnitError, create_division_by_zero_error, create_incompatible_addition_error,
    create_unit_power_error, create_unsupported_operation_error
)
from .registry import SECOND
from .types import AnyUnit, RateUnit, Unit, UnitFamily, UnitType
from .value import BITS_PER_BYTE, UnitValue


def _family(unit: Optional[AnyUnit]) -> Optional[UnitFamily]:
    if isinstance(unit, Unit):
        return unit.family
    return None


def _is_time_rate(unit: Optional[AnyUnit]) -> bool:
    return isinstance(unit, RateUnit) and unit.is_time_rate


def _is_currency_per_data(unit: Optional[AnyUnit]) -> bool:
    return (isinstance(unit, RateUnit)
            and unit.numerator.family == UnitFamily.CURRENCY
            and unit.denominator.family == UnitFamily.DATA)


def is_compatible_for_addition(a: AnyUnit, b: AnyUnit) -> bool:
    """
    Check whether values in units a and b can be added or subtracted.

    Named units need the same type (and the same currency). Rates need the
    same numerator family, the same denominator family and, for data, the
    same base system: GiB/s + GiB/min is fine, GiB/s + MB/s is not.
    """
    if a.is_rate != b.is_rate:
        return False

    if not a.is_rate:
        if a.unit_type != b.unit_type:
            return False
        if a.unit_type == UnitType.CURRENCY:
            return a == b
        return True

    num_a, num_b = a.numerator, b.numerator
    if num_a.family != num_b.family:
        return False
    if a.denominator.family != b.denominator.family:
        return False

    if num_a.family == UnitFamily.CURRENCY:
        return num_a == num_b
    if a.denominator.family != UnitFamily.TIME:
        return False
    if num_a.family == UnitFamily.DATA:
        return num_a.binary == num_b.binary
    return True


def _add_or_subtract(a: UnitValue, b: UnitValue, operator: str) -> UnitValue:
    sign = 1.0 if operator == "+" else -1.0

    if a.unit is None and b.unit is None:
        return UnitValue(a.value + sign * b.value)

    if a.unit is None or b.unit is None or not is_compatible_for_addition(a.unit, b.unit):
        raise create_incompatible_addition_error(a.unit, b.unit, operator)

    # The finer unit wins; on a tie the right operand's unit is kept
    if a.unit.to_base_value(1.0) < b.unit.to_base_value(1.0):
        result_unit = a.unit
    else:
        result_unit = b.unit

    base_value = a.unit.to_base_value(a.value) + sign * b.unit.to_base_value(b.value)
    return UnitValue(result_unit.from_base_value(base_value), result_unit)


def add(a: UnitValue, b: UnitValue) -> UnitValue:
    return _add_or_subtract(a, b, "+")


def subtract(a: UnitValue, b: UnitValue) -> UnitValue:
    return _add_or_subtract(a, b, "-")


def _ordered_pairs(a: UnitValue, b: UnitValue) -> Tuple[Tuple[UnitValue, UnitValue], ...]:
    return ((a, b), (b, a))


def multiply(a: UnitValue, b: UnitValue) -> UnitValue:
    """
    Multiply two values.

    Rules, first match wins:
    - time x (X per time) -> X, with the time expressed in the rate's denominator
    - data x (currency per data) -> currency
    - data x time -> data, plain product
    - anything x number -> same unit
    """
    if a.unit is None and b.unit is None:
        return UnitValue(a.value * b.value)
    if a.unit is None:
        return UnitValue(a.value * b.value, b.unit)
    if b.unit is None:
        return UnitValue(a.value * b.value, a.unit)

    for duration, rate in _ordered_pairs(a, b):
        if _family(duration.unit) == UnitFamily.TIME and _is_time_rate(rate.unit):
            periods = duration.unit.to_base_value(duration.value) / rate.unit.denominator.to_base_value(1.0)
            return UnitValue(rate.value * periods, rate.unit.numerator)

    for amount, rate in _ordered_pairs(a, b):
        if _family(amount.unit) == UnitFamily.DATA and _is_currency_per_data(rate.unit):
            quantity = amount.unit.to_base_value(amount.value) / rate.unit.denominator.to_base_value(1.0)
            return UnitValue(rate.value * quantity, rate.unit.numerator)

    for data, duration in _ordered_pairs(a, b):
        if _family(data.unit) == UnitFamily.DATA and _family(duration.unit) == UnitFamily.TIME:
            return UnitValue(a.value * b.value, data.unit)

    raise create_unsupported_operation_error(a.unit, b.unit, "*")


def _divide_by_rate(a: UnitValue, b: UnitValue) -> Optional[UnitValue]:
    """Amount / rate gives the time needed to move that amount."""
    amount_family = _family(a.unit)
    rate = b.unit
    if amount_family not in (UnitFamily.DATA, UnitFamily.BIT) or not _is_time_rate(rate):
        return None

    rate_family = rate.numerator.family
    if rate_family == amount_family:
        periods = a.unit.to_base_value(a.value) / rate.numerator.to_base_value(b.value)
        return UnitValue(periods, rate.denominator)

    if rate_family not in (UnitFamily.DATA, UnitFamily.BIT):
        return None

    # Mixed bits and bytes: normalise both sides to bits per second
    amount_bits = a.unit.to_base_value(a.value)
    if amount_family == UnitFamily.DATA:
        amount_bits *= BITS_PER_BYTE
    bits_per_second = rate.to_base_value(b.value)
    if rate_family == UnitFamily.DATA:
        bits_per_second *= BITS_PER_BYTE
    return UnitValue(amount_bits / bits_per_second, SECOND)


def _ratio(a: UnitValue, b: UnitValue) -> Optional[UnitValue]:
    """Divide two compatible quantities into a plain number."""
    ua, ub = a.unit, b.unit
    numerator = ua.to_base_value(a.value)
    denominator = ub.to_base_value(b.value)

    if ua.unit_type == ub.unit_type:
        if ua.unit_type in (UnitType.CURRENCY, UnitType.RATE) and not is_compatible_for_addition(ua, ub):
            return None
        return UnitValue(numerator / denominator)

    types = {ua.unit_type, ub.unit_type}
    if types == {UnitType.BIT, UnitType.DATA}:
        if ua.unit_type == UnitType.DATA:
            numerator *= BITS_PER_BYTE
        else:
            denominator *= BITS_PER_BYTE
        return UnitValue(numerator / denominator)
    return None


def divide(a: UnitValue, b: UnitValue) -> UnitValue:
    """
    Divide two values.

    Quantity / time builds a rate, amount / rate gives a duration, and two
    compatible quantities give a plain ratio. Division by (near) zero fails.
    """
    if abs(b.value) < FLOAT_EPSILON:
        raise create_division_by_zero_error()

    if b.unit is None:
        return UnitValue(a.value / b.value, a.unit)
    if a.unit is None:
        raise create_unsupported_operation_error(a.unit, b.unit, "/")

    family_a, family_b = _family(a.unit), _family(b.unit)

    if family_b == UnitFamily.TIME and family_a is not None:
        if family_a in (UnitFamily.DATA, UnitFamily.BIT, UnitFamily.CURRENCY):
            return UnitValue(a.value / b.value, RateUnit(a.unit, b.unit))
        if family_a == UnitFamily.REQUEST:
            return UnitValue(a.value / b.unit.to_base_value(b.value), RateUnit(a.unit, SECOND))

    if family_a == UnitFamily.CURRENCY and family_b == UnitFamily.DATA:
        return UnitValue(a.value / b.value, RateUnit(a.unit, b.unit))

    duration = _divide_by_rate(a, b)
    if duration is not None:
        return duration

    ratio = _ratio(a, b)
    if ratio is not None:
        return ratio

    raise create_unsupported_operation_error(a.unit, b.unit, "/")


def power(a: UnitValue, b: UnitValue) -> UnitValue:
    """Exponentiation; only defined for plain numbers."""
    if a.unit is not None or b.unit is not None:
        raise create_unit_power_error(a.unit, b.unit)

    try:
        return UnitValue(math.pow(a.value, b.value))
    except (OverflowError, ValueError) as e:
        raise UnitError(f"Cannot compute {a.value} ^ {b.value}: {e}", code="U008") from e
