"""
Built-in functions callable from a line: sqrt(x) and sum_above().

Author: xwest
"""

import math
from typing import Callable, Dict, List, Optional

from ..units import UnitError, UnitValue, add, parse_result_string
from .errors import create_invalid_argument_error, create_malformed_expression_error


class FunctionContext:
    """What a function may see besides its argument: the lines above."""

    def __init__(self, previous_results: List[Optional[str]], current_line: int):
        self.previous_results = previous_results
        self.current_line = current_line


def _sqrt(stack: List[UnitValue], context: FunctionContext) -> UnitValue:
    if not stack:
        raise create_malformed_expression_error("sqrt() needs an argument")

    argument = stack.pop()
    if argument.unit is not None:
        raise create_invalid_argument_error("sqrt", f"'{argument}' has a unit")
    if argument.value < 0:
        raise create_invalid_argument_error("sqrt", "negative value")
    return UnitValue(math.sqrt(argument.value))


def lenient_add(total: UnitValue, addend: UnitValue) -> Optional[UnitValue]:
    """
    Add for running totals.

    Unlike the + operator, a dimensionless side adopts the other side's
    unit. Returns None when both sides have incompatible units.
    """
    if total.unit is None or addend.unit is None:
        return UnitValue(total.value + addend.value, total.unit or addend.unit)

    try:
        return add(total, addend)
    except UnitError:
        return None


def _sum_above(stack: List[UnitValue], context: FunctionContext) -> UnitValue:
    """Sum every result above the current line; incompatible ones are skipped."""
    total = UnitValue(0.0)
    summed = False

    for result in context.previous_results[:context.current_line]:
        if result is None:
            continue
        value = parse_result_string(result)
        if value is None:
            continue
        new_total = lenient_add(total, value)
        if new_total is not None:
            total = new_total
            summed = True

    return total if summed else UnitValue(0.0)


FUNCTIONS: Dict[str, Callable[[List[UnitValue], FunctionContext], UnitValue]] = {
    "sqrt": _sqrt,
    "sum_above": _sum_above,
}


def apply_function(name: str, stack: List[UnitValue], context: FunctionContext):
    """Apply a function to the value stack, pushing its result."""
    function = FUNCTIONS.get(name)
    if function is None:
        raise create_malformed_expression_error(f"Unknown function '{name}'")
    stack.append(function(stack, context))
