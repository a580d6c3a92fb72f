"""
Unit types for unitpad.

A unit is either a named Unit (seconds, GiB, $, ...) belonging to exactly
one family, or a RateUnit composing two named units as "numerator per
denominator". Every unit converts to and from the canonical base of its
family:

- time: seconds
- bit: bits
- data: bytes
- request: requests (queries count the same)
- percent: decimal fraction
- currency: the amount itself, per currency

Author: xwest
"""

from typing import Optional, Union
from dataclasses import dataclass
from enum import Enum, auto

from .errors import create_invalid_rate_error


class UnitFamily(Enum):
    """Groups of units sharing one canonical base."""
    TIME = "time"
    BIT = "bit"
    DATA = "data"
    REQUEST = "request"
    CURRENCY = "currency"
    PERCENT = "percent"


class UnitType(Enum):
    """Classification used for compatibility and conversion checks."""
    TIME = auto()
    BIT = auto()
    DATA = auto()
    REQUEST = auto()
    CURRENCY = auto()
    PERCENTAGE = auto()
    BIT_RATE = auto()
    DATA_RATE = auto()
    REQUEST_RATE = auto()
    RATE = auto()              # Generic "X per Y", e.g. $/month or $/GiB


_FAMILY_TYPES = {
    UnitFamily.TIME: UnitType.TIME,
    UnitFamily.BIT: UnitType.BIT,
    UnitFamily.DATA: UnitType.DATA,
    UnitFamily.REQUEST: UnitType.REQUEST,
    UnitFamily.CURRENCY: UnitType.CURRENCY,
    UnitFamily.PERCENT: UnitType.PERCENTAGE,
}

_RATE_TYPES = {
    UnitFamily.BIT: UnitType.BIT_RATE,
    UnitFamily.DATA: UnitType.DATA_RATE,
    UnitFamily.REQUEST: UnitType.REQUEST_RATE,
    UnitFamily.CURRENCY: UnitType.RATE,
}

# Query rates print as QPS/QPM/QPH, keyed by the time symbol
_QUERY_RATE_SYMBOLS = {"s": "QPS", "min": "QPM", "h": "QPH"}


@dataclass(frozen=True)
class Unit:
    """
    A named unit.

    scale_factor is the number of base units in one of this unit, unless
    divide is set, in which case one base unit holds scale_factor of this
    unit (ns, us, ms, %). Keeping the small units as divisors avoids
    accumulating error from factors like 1e-9.
    """
    name: str
    symbol: str
    family: UnitFamily
    scale_factor: float = 1.0
    divide: bool = False
    binary: bool = False       # Ki/Mi/Gi/... prefixes (powers of 1024)

    @property
    def is_rate(self) -> bool:
        return False

    @property
    def unit_type(self) -> UnitType:
        return _FAMILY_TYPES[self.family]

    @property
    def display_name(self) -> str:
        return self.symbol

    def to_base_value(self, value: float) -> float:
        if self.divide:
            return value / self.scale_factor
        return value * self.scale_factor

    def from_base_value(self, base_value: float) -> float:
        if self.divide:
            return base_value * self.scale_factor
        return base_value / self.scale_factor

    def __str__(self) -> str:
        return self.symbol


def is_valid_rate(numerator: Unit, denominator: Unit) -> bool:
    """Check whether numerator/denominator forms a supported rate."""
    if not isinstance(numerator, Unit) or not isinstance(denominator, Unit):
        return False
    if numerator.family not in _RATE_TYPES:
        return False
    if denominator.family == UnitFamily.TIME:
        return True
    return numerator.family == UnitFamily.CURRENCY and denominator.family == UnitFamily.DATA


@dataclass(frozen=True)
class RateUnit:
    """
    Composition of two named units, e.g. GiB/s, query/min, $/month, $/GiB.

    Construction fails with UnitError for pairs that are not rates.
    """
    numerator: Unit
    denominator: Unit

    def __post_init__(self):
        if not is_valid_rate(self.numerator, self.denominator):
            raise create_invalid_rate_error(self.numerator, self.denominator)

    @property
    def is_rate(self) -> bool:
        return True

    @property
    def is_time_rate(self) -> bool:
        return self.denominator.family == UnitFamily.TIME

    @property
    def unit_type(self) -> UnitType:
        return _RATE_TYPES[self.numerator.family]

    @property
    def shorthand(self) -> Optional[str]:
        """Networking name of the rate (Mbps, Gibps, QPS), if it has one."""
        numerator, denominator = self.numerator, self.denominator
        if numerator.family == UnitFamily.BIT and denominator.symbol == "s":
            return "bps" if numerator.symbol == "bit" else f"{numerator.symbol}ps"
        if numerator.name == "query" and denominator.family == UnitFamily.TIME:
            return _QUERY_RATE_SYMBOLS.get(denominator.symbol)
        return None

    @property
    def display_name(self) -> str:
        shorthand = self.shorthand
        if shorthand is not None:
            return shorthand
        return f"{self.numerator.display_name}/{self.denominator.display_name}"

    def to_base_value(self, value: float) -> float:
        return self.numerator.to_base_value(value) / self.denominator.to_base_value(1.0)

    def from_base_value(self, base_value: float) -> float:
        return self.numerator.from_base_value(base_value * self.denominator.to_base_value(1.0))

    def __str__(self) -> str:
        return self.display_name


AnyUnit = Union[Unit, RateUnit]
