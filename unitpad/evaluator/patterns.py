"""
Shapes a token window must have before the evaluator tries it.

Author: xwest
"""

from typing import Dict, List

from ..lexer.tokens import Token, TokenType, ARITHMETIC_OPERATORS
from ..units import UnitFamily

_OPERAND_TYPES = frozenset({
    TokenType.NUMBER, TokenType.NUMBER_WITH_UNIT,
    TokenType.LINE_REFERENCE, TokenType.VARIABLE,
})


def is_operand(token: Token) -> bool:
    """Values that can stand on their own (functions excluded)."""
    return token.type in _OPERAND_TYPES


def is_percentage(token: Token) -> bool:
    if token.type != TokenType.NUMBER_WITH_UNIT:
        return False
    unit = token.value[1]
    return not unit.is_rate and unit.family == UnitFamily.PERCENT


def has_math_operators(tokens: List[Token]) -> bool:
    return any(token.type in ARITHMETIC_OPERATORS for token in tokens)


def has_conversion(tokens: List[Token]) -> bool:
    return any(token.is_conversion for token in tokens)


def is_valid_mathematical_sequence(tokens: List[Token]) -> bool:
    """
    Check whether a window looks like something worth evaluating.

    Accepted shapes: a single value; "value to|in unit"; "N% of value";
    "func ( value )"; "value op value"; and any longer window holding a
    value plus a function or an arithmetic operator.
    """
    if not tokens or not any(token.is_value for token in tokens):
        return False

    if len(tokens) == 1:
        return is_operand(tokens[0])

    if len(tokens) == 3:
        first, middle, last = tokens
        if (is_operand(first) and middle.is_conversion
                and last.type in (TokenType.NUMBER_WITH_UNIT, TokenType.VARIABLE)):
            return True
        if is_percentage(first) and middle.type == TokenType.OF and is_operand(last):
            return True
        if is_operand(first) and middle.is_operator and is_operand(last):
            return True

    if (len(tokens) == 4 and tokens[0].type == TokenType.FUNCTION
            and tokens[1].type == TokenType.LEFT_PAREN and is_operand(tokens[2])
            and tokens[3].type == TokenType.RIGHT_PAREN):
        return True

    if any(token.type == TokenType.FUNCTION for token in tokens):
        return True

    return has_math_operators(tokens)


def all_variables_defined(tokens: List[Token], variables: Dict[str, str]) -> bool:
    return all(token.value in variables for token in tokens if token.type == TokenType.VARIABLE)
