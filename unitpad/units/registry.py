"""
The closed unit table and unit-name parsing.

Lookup order for a unit word:
1. exact, case-sensitive symbols (Mb is megabit, MB is megabyte)
2. rate shorthands such as Mbps, QPS and rpm (case-insensitive)
3. lower-cased aliases and spelled-out names
4. "A/B" composition, accepted only when it forms a valid rate

Author: xwest
"""

import logging
from typing import Dict, List, Optional, Tuple

from .types import AnyUnit, RateUnit, Unit, UnitFamily, is_valid_rate

logger = logging.getLogger(__name__)


# Time (base: seconds)
NANOSECOND = Unit("nanosecond", "ns", UnitFamily.TIME, 1_000_000_000.0, divide=True)
MICROSECOND = Unit("microsecond", "us", UnitFamily.TIME, 1_000_000.0, divide=True)
MILLISECOND = Unit("millisecond", "ms", UnitFamily.TIME, 1_000.0, divide=True)
SECOND = Unit("second", "s", UnitFamily.TIME)
MINUTE = Unit("minute", "min", UnitFamily.TIME, 60.0)
HOUR = Unit("hour", "h", UnitFamily.TIME, 3_600.0)
DAY = Unit("day", "day", UnitFamily.TIME, 86_400.0)
WEEK = Unit("week", "week", UnitFamily.TIME, 604_800.0)
MONTH = Unit("month", "month", UnitFamily.TIME, 2_629_746.0)       # 30.436875 days
QUARTER = Unit("quarter", "quarter", UnitFamily.TIME, 7_889_238.0)  # 3 months
YEAR = Unit("year", "year", UnitFamily.TIME, 31_557_600.0)         # 365.25 days

BIT = Unit("bit", "bit", UnitFamily.BIT)
BYTE = Unit("byte", "B", UnitFamily.DATA)

REQUEST = Unit("request", "req", UnitFamily.REQUEST)
QUERY = Unit("query", "query", UnitFamily.REQUEST)

PERCENT = Unit("percent", "%", UnitFamily.PERCENT, 100.0, divide=True)

USD = Unit("USD", "$", UnitFamily.CURRENCY)
EUR = Unit("EUR", "€", UnitFamily.CURRENCY)
GBP = Unit("GBP", "£", UnitFamily.CURRENCY)
JPY = Unit("JPY", "¥", UnitFamily.CURRENCY)
CNY = Unit("CNY", "¥", UnitFamily.CURRENCY)
CAD = Unit("CAD", "C$", UnitFamily.CURRENCY)
AUD = Unit("AUD", "A$", UnitFamily.CURRENCY)
CHF = Unit("CHF", "CHF", UnitFamily.CURRENCY)
INR = Unit("INR", "₹", UnitFamily.CURRENCY)
KRW = Unit("KRW", "₩", UnitFamily.CURRENCY)

# (symbol prefix, SI name prefix, binary name prefix)
_PREFIXES = [
    ("K", "kilo", "kibi"),
    ("M", "mega", "mebi"),
    ("G", "giga", "gibi"),
    ("T", "tera", "tebi"),
    ("P", "peta", "pebi"),
    ("E", "exa", "exbi"),
]


def _prefixed_units(family: UnitFamily, symbol_suffix: str, name_suffix: str) -> Dict[str, Unit]:
    """Build the SI and binary prefixed units of the bit or data family."""
    units = {}
    for power, (prefix, si_name, binary_name) in enumerate(_PREFIXES, start=1):
        si_symbol = f"{prefix}{symbol_suffix}"
        binary_symbol = f"{prefix}i{symbol_suffix}"
        units[si_symbol] = Unit(f"{si_name}{name_suffix}", si_symbol, family, float(1000 ** power))
        units[binary_symbol] = Unit(
            f"{binary_name}{name_suffix}", binary_symbol, family, float(1024 ** power), binary=True
        )
    return units


BIT_UNITS = _prefixed_units(UnitFamily.BIT, "b", "bit")
DATA_UNITS = _prefixed_units(UnitFamily.DATA, "B", "byte")


class UnitRegistry:
    """Registry of every unit word unitpad understands."""

    def __init__(self):
        self.exact: Dict[str, AnyUnit] = {}
        self.aliases: Dict[str, AnyUnit] = {}
        self.rate_shorthands: Dict[str, RateUnit] = {}

        self._init_time_units()
        self._init_storage_units()
        self._init_request_units()
        self._init_currency_units()
        self._init_percent_units()
        self._init_rate_shorthands()

    def _register(self, unit: AnyUnit, *aliases: str):
        for alias in aliases:
            self.aliases[alias.lower()] = unit

    def _init_time_units(self):
        self._register(NANOSECOND, "ns", "nanosec", "nanosecond", "nanoseconds")
        self._register(MICROSECOND, "us", "µs", "μs", "microsec", "microsecond", "microseconds")
        self._register(MILLISECOND, "ms", "millisec", "millisecond", "milliseconds")
        self._register(SECOND, "s", "sec", "secs", "second", "seconds")
        self._register(MINUTE, "min", "mins", "minute", "minutes")
        self._register(HOUR, "h", "hr", "hrs", "hour", "hours")
        self._register(DAY, "day", "days")
        self._register(WEEK, "week", "weeks", "wk", "wks")
        self._register(MONTH, "month", "months", "mo", "mos")
        self._register(QUARTER, "quarter", "quarters")
        self._register(YEAR, "year", "years", "yr", "yrs")

    def _init_storage_units(self):
        """Bits and bytes; symbol case decides bit versus byte."""
        self.exact["B"] = BYTE
        self._register(BYTE, "b", "byte", "bytes")
        self._register(BIT, "bit", "bits")

        for symbol, unit in BIT_UNITS.items():
            self.exact[symbol] = unit
            self._register(unit, unit.name, f"{unit.name}s")

        for symbol, unit in DATA_UNITS.items():
            self.exact[symbol] = unit
            # Lower-case "kb", "mib", ... mean bytes
            self._register(unit, symbol, unit.name, f"{unit.name}s")

    def _init_request_units(self):
        self._register(REQUEST, "req", "reqs", "request", "requests")
        self._register(QUERY, "query", "queries")

    def _init_currency_units(self):
        symbols = {"$": USD, "€": EUR, "£": GBP, "¥": JPY, "₹": INR, "₩": KRW,
                   "C$": CAD, "A$": AUD, "CHF": CHF}
        self.exact.update(symbols)

        self._register(USD, "usd", "dollar", "dollars")
        self._register(EUR, "eur", "euro", "euros")
        self._register(GBP, "gbp", "pound", "pounds", "sterling")
        self._register(JPY, "jpy", "yen")
        self._register(CNY, "cny", "yuan", "rmb")
        self._register(CAD, "cad", "canadian")
        self._register(AUD, "aud", "australian")
        self._register(CHF, "chf", "franc", "francs")
        self._register(INR, "inr", "rupee", "rupees")
        self._register(KRW, "krw", "won")

    def _init_percent_units(self):
        self.exact["%"] = PERCENT
        self._register(PERCENT, "percent", "percentage")

    def _init_rate_shorthands(self):
        """Networking and traffic shorthands: bps family, QPS, RPM, ..."""
        shorthands: List[Tuple[str, Unit, Unit]] = [
            ("bps", BIT, SECOND),
            ("qps", QUERY, SECOND),
            ("qpm", QUERY, MINUTE),
            ("qph", QUERY, HOUR),
            ("rps", REQUEST, SECOND),
            ("rpm", REQUEST, MINUTE),
            ("rph", REQUEST, HOUR),
        ]
        for prefix, _, _ in _PREFIXES:
            shorthands.append((f"{prefix}bps", BIT_UNITS[f"{prefix}b"], SECOND))
            shorthands.append((f"{prefix}ibps", BIT_UNITS[f"{prefix}ib"], SECOND))

        for name, numerator, denominator in shorthands:
            self.rate_shorthands[name.lower()] = RateUnit(numerator, denominator)

    def get_unit(self, name: str) -> Optional[AnyUnit]:
        """Look up a single unit word (no "/" composition)."""
        if name in self.exact:
            return self.exact[name]

        lowered = name.lower()
        if lowered in self.rate_shorthands:
            return self.rate_shorthands[lowered]
        return self.aliases.get(lowered)

    def parse_compound_unit(self, unit_expr: str) -> Optional[RateUnit]:
        """Parse "A/B" into a RateUnit if the pair forms a valid rate."""
        numerator_text, _, denominator_text = unit_expr.partition("/")
        numerator = self.get_unit(numerator_text.strip())
        denominator = self.get_unit(denominator_text.strip())

        if numerator is None or denominator is None:
            return None
        if not is_valid_rate(numerator, denominator):
            logger.debug("Rejected compound unit %r", unit_expr)
            return None
        return RateUnit(numerator, denominator)

    def parse_unit(self, text: str) -> Optional[AnyUnit]:
        text = text.strip()
        if not text:
            return None

        unit = self.get_unit(text)
        if unit is not None:
            return unit

        if "/" in text:
            return self.parse_compound_unit(text)
        return None

    def known_names(self) -> List[str]:
        """Every unit word, used for spelling suggestions."""
        return sorted(set(self.exact) | set(self.aliases) | set(self.rate_shorthands))


_default_registry = UnitRegistry()


def get_registry() -> UnitRegistry:
    return _default_registry


def parse_unit(text: str) -> Optional[AnyUnit]:
    """
    Resolve a unit word or "A/B" compound to a unit.

    Returns None for unknown words and for compounds that are not valid
    rates (e.g. "GiB/MB").
    """
    return _default_registry.parse_unit(text)
