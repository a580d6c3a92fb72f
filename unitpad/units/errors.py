"""
Errors raised by the unit algebra.

Unit operations raise UnitError; the evaluator catches it at its boundary
and turns the line into "no result".

Author: xwest
"""

from typing import Any, List, Optional

from ..diagnostics import Diagnostic


class UnitError(Exception):
    """Raised when two units cannot be combined or converted."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.diagnostic = Diagnostic(
            message=message,
            location=None,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    def __str__(self) -> str:
        return str(self.diagnostic)


ERROR_CODES = {
    "U001": "Invalid rate unit",
    "U002": "Incompatible units for addition",
    "U003": "Unsupported unit multiplication",
    "U004": "Unsupported unit division",
    "U005": "Division by zero",
    "U006": "Power of a unit-bearing value",
    "U007": "Impossible unit conversion",
    "U008": "Arithmetic overflow or domain error",
}


def create_invalid_rate_error(numerator: Any, denominator: Any) -> UnitError:
    """Create an error for a numerator/denominator pair that is not a rate."""
    return UnitError(
        message=f"'{numerator}/{denominator}' is not a valid rate",
        code="U001",
        help_text="Rates need a time denominator, or a currency over a data unit."
    )


def create_incompatible_addition_error(left: Any, right: Any, operator: str = "+") -> UnitError:
    """Create an error for adding or subtracting incompatible units."""
    return UnitError(
        message=f"Cannot apply '{operator}' to {left or 'a number'} and {right or 'a number'}",
        code="U002",
        help_text="Both sides must share a unit family (and base system for data rates)."
    )


def create_unsupported_operation_error(left: Any, right: Any, operator: str) -> UnitError:
    """Create an error for a multiplication or division with no unit rule."""
    code = "U003" if operator == "*" else "U004"
    return UnitError(
        message=f"No unit rule for {left or 'a number'} {operator} {right or 'a number'}",
        code=code
    )


def create_division_by_zero_error() -> UnitError:
    return UnitError(message="Division by zero", code="U005")


def create_unit_power_error(base: Any, exponent: Any) -> UnitError:
    """Create an error for exponentiation involving units."""
    return UnitError(
        message=f"Cannot raise {base or 'a number'} to {exponent or 'a number'}",
        code="U006",
        help_text="Only plain numbers can be raised to a power."
    )


def create_conversion_error(source: Any, target: Any) -> UnitError:
    """Create an error for an impossible 'to'/'in' conversion."""
    return UnitError(
        message=f"Cannot convert {source or 'a number'} to {target}",
        code="U007"
    )
