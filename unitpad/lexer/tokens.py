"""
Token definitions for the unitpad line language.

Author: xwest
"""

from enum import Enum, auto
from typing import Any
from dataclasses import dataclass


class TokenType(Enum):
    """All token types of a unitpad line."""

    # Values
    NUMBER = auto()              # 42, 1,000, 2.5, 5k
    NUMBER_WITH_UNIT = auto()    # 5 GiB, $100, 100 QPS, 20%
    LINE_REFERENCE = auto()      # line1 (stored zero-based)
    VARIABLE = auto()            # any other identifier
    FUNCTION = auto()            # sqrt, sum_above (only when followed by "(")

    # Operators
    PLUS = auto()                # +
    MINUS = auto()               # -
    MULTIPLY = auto()            # *
    DIVIDE = auto()              # /
    POWER = auto()               # ^
    ASSIGN = auto()              # =

    # Delimiters
    LEFT_PAREN = auto()          # (
    RIGHT_PAREN = auto()         # )

    # Keywords
    TO = auto()                  # to
    IN = auto()                  # in
    OF = auto()                  # of


@dataclass(frozen=True)
class SourceLocation:
    """Character span of a token within its line."""
    start: int
    end: int

    def __str__(self) -> str:
        return f"column {self.start + 1}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.start}, {self.end})"


@dataclass(frozen=True)
class Token:
    """
    A lexical token.

    value holds the parsed payload: a float for NUMBER, a (float, unit)
    pair for NUMBER_WITH_UNIT, a zero-based index for LINE_REFERENCE and
    the name for VARIABLE and FUNCTION.
    """
    type: TokenType
    lexeme: str
    value: Any
    location: SourceLocation

    def __str__(self) -> str:
        if self.value is not None and self.value != self.lexeme:
            return f"{self.type.name}({self.lexeme!r} -> {self.value!r})"
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return (f"Token({self.type.name}, {self.lexeme!r}, "
                f"{self.value!r}, {self.location!r})")

    @property
    def is_value(self) -> bool:
        """Tokens that produce a value on their own (functions included)."""
        return self.type in VALUE_TOKENS

    @property
    def is_operator(self) -> bool:
        return self.type in ARITHMETIC_OPERATORS

    @property
    def is_conversion(self) -> bool:
        return self.type in (TokenType.TO, TokenType.IN)

    @property
    def is_mathematical(self) -> bool:
        """Tokens that can only appear in a formula, never in prose."""
        return self.type in MATHEMATICAL_TOKENS


KEYWORDS = {
    "to": TokenType.TO,
    "in": TokenType.IN,
    "of": TokenType.OF,
}

OPERATORS = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.MULTIPLY,
    "/": TokenType.DIVIDE,
    "^": TokenType.POWER,
    "=": TokenType.ASSIGN,
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
}

ARITHMETIC_OPERATORS = frozenset({
    TokenType.PLUS, TokenType.MINUS, TokenType.MULTIPLY,
    TokenType.DIVIDE, TokenType.POWER,
})

VALUE_TOKENS = frozenset({
    TokenType.NUMBER, TokenType.NUMBER_WITH_UNIT, TokenType.LINE_REFERENCE,
    TokenType.VARIABLE, TokenType.FUNCTION,
})

MATHEMATICAL_TOKENS = ARITHMETIC_OPERATORS | frozenset({
    TokenType.NUMBER, TokenType.NUMBER_WITH_UNIT, TokenType.LINE_REFERENCE,
    TokenType.LEFT_PAREN, TokenType.RIGHT_PAREN, TokenType.TO, TokenType.IN,
    TokenType.FUNCTION,
})
