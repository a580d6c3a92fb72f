"""
unitpad Evaluator

Turns a line's tokens into a result. Lines are usually prose around a
formula, so the evaluator searches for the longest token window that
looks like an expression and evaluates it with a unit-aware
shunting-yard pass:

    tokens -> window search -> shunting-yard -> optional "to"/"in" conversion

Two flavours share the same engine. The context flavour (no variable
table) treats unknown words as prose. The variable flavour, used by the
document model, resolves variables and refuses lines where an undefined
variable sits right next to math.

Author: xwest
"""

import logging
from enum import IntEnum
from typing import Callable, Dict, List, Optional, Tuple, Union

from ..lexer import Token, TokenType, tokenize
from ..lexer.tokens import ARITHMETIC_OPERATORS
from ..units import (
    UnitError, UnitValue, add, divide, multiply, parse_result_string, power, subtract
)
from .errors import (
    EvaluationError, create_empty_reference_error, create_forward_reference_error,
    create_malformed_expression_error, create_no_expression_error,
    create_undefined_variable_error
)
from .functions import FunctionContext, apply_function
from .patterns import (
    all_variables_defined, has_conversion, has_math_operators,
    is_percentage, is_valid_mathematical_sequence
)

logger = logging.getLogger(__name__)

EvaluationResult = Tuple[str, Optional[Tuple[str, str]]]

# Marks a MINUS token that negates instead of subtracting
_UNARY = "unary"


class Precedence(IntEnum):
    """Operator precedence levels for the shunting-yard pass."""
    NONE = 0            # parentheses and functions waiting on the stack
    TERM = 1            # +, -
    FACTOR = 2          # *, /
    UNARY = 3           # leading -
    EXPONENT = 4        # ^ (right-associative)


class Evaluator:
    """
    Evaluates token sequences for one line.

    Pass variables=None for the context flavour. previous_results holds the
    formatted results of the document's lines; only entries above
    current_line can be referenced.
    """

    def __init__(
        self,
        variables: Optional[Dict[str, str]] = None,
        previous_results: Optional[List[Optional[str]]] = None,
        current_line: int = 0
    ):
        self.variables = variables
        self.previous_results = previous_results if previous_results is not None else []
        self.current_line = current_line
        self.errors: List[Union[EvaluationError, UnitError]] = []

        self._init_operator_tables()

    def _init_operator_tables(self):
        """Initialize binary operator precedence and implementation tables."""
        self.binary_operators: Dict[TokenType, Tuple[Precedence, Callable[[UnitValue, UnitValue], UnitValue]]] = {
            TokenType.PLUS: (Precedence.TERM, add),
            TokenType.MINUS: (Precedence.TERM, subtract),
            TokenType.MULTIPLY: (Precedence.FACTOR, multiply),
            TokenType.DIVIDE: (Precedence.FACTOR, divide),
            TokenType.POWER: (Precedence.EXPONENT, power),
        }
        self.right_associative = {TokenType.POWER}

    @property
    def uses_variables(self) -> bool:
        return self.variables is not None

    def evaluate(self, tokens: List[Token]) -> Optional[EvaluationResult]:
        """
        Evaluate a line.

        Returns (formatted_result, assignment) where assignment is
        (name, formatted_value) for "name = expr" lines, or None when the
        line has no result.
        """
        self.errors = []
        if not tokens:
            return None

        assignment = self._evaluate_assignment(tokens)
        if assignment is not None:
            return assignment[1], assignment

        value = self.evaluate_value(tokens)
        if value is None:
            return None
        return value.format(), None

    def _evaluate_assignment(self, tokens: List[Token]) -> Optional[Tuple[str, str]]:
        if (len(tokens) < 3 or tokens[0].type != TokenType.VARIABLE
                or tokens[1].type != TokenType.ASSIGN):
            return None

        value = self._try_evaluate(tokens[2:])
        if value is None:
            return None
        return tokens[0].value, value.format()

    def evaluate_value(self, tokens: List[Token]) -> Optional[UnitValue]:
        """Find the longest evaluable window of tokens and evaluate it."""
        if not tokens:
            return None

        if self.uses_variables:
            undefined = self._undefined_variable_in_math_context(tokens)
            if undefined is not None:
                self._record(create_undefined_variable_error(undefined, list(self.variables)))
                return None

        count = len(tokens)
        for start in range(count):
            for end in range(count, start, -1):
                window = tokens[start:end]
                if not is_valid_mathematical_sequence(window):
                    continue
                if self.uses_variables and not all_variables_defined(window, self.variables):
                    continue

                result = self._try_evaluate(window)
                if result is not None:
                    return result

                # "5 / 0" must not quietly degrade to "5"
                if start == 0 and end == count and self._is_final_failure(tokens):
                    return None

        self._record(create_no_expression_error())
        return None

    def _is_final_failure(self, tokens: List[Token]) -> bool:
        """Whether a failed whole-line expression may fall back to shorter windows."""
        has_math = has_math_operators(tokens)
        has_target = has_conversion(tokens)

        if has_math != has_target:
            return True
        if self.uses_variables:
            return False
        return has_math and len(tokens) >= 2 and tokens[-2].is_conversion

    def _undefined_variable_in_math_context(self, tokens: List[Token]) -> Optional[Token]:
        for index, token in enumerate(tokens):
            if token.type != TokenType.VARIABLE or token.value in self.variables:
                continue
            neighbours = tokens[max(index - 1, 0):index] + tokens[index + 1:index + 2]
            if any(neighbour.is_mathematical for neighbour in neighbours):
                return token
        return None

    def _try_evaluate(self, tokens: List[Token]) -> Optional[UnitValue]:
        try:
            return self._evaluate_tokens(tokens)
        except (EvaluationError, UnitError) as e:
            self._record(e)
            return None

    def _record(self, error: Union[EvaluationError, UnitError]):
        self.errors.append(error)
        logger.debug("Evaluation failed: %s", error.diagnostic.message)

    def _evaluate_tokens(self, tokens: List[Token]) -> UnitValue:
        """Evaluate one window; raises EvaluationError or UnitError."""
        if len(tokens) == 3:
            first, middle, last = tokens
            if (first.type == TokenType.NUMBER_WITH_UNIT and middle.type == TokenType.TO
                    and last.type == TokenType.NUMBER_WITH_UNIT):
                return self._resolve_operand(first).convert_to(last.value[1])

            if is_percentage(first) and middle.type == TokenType.OF:
                fraction = first.value[1].to_base_value(first.value[0])
                base = self._resolve_operand(last)
                return UnitValue(fraction * base.value, base.unit)

        expression, target = self._split_conversion(tokens)
        result = self._shunting_yard(expression)
        if target is not None:
            result = result.convert_to(target)
        return result

    @staticmethod
    def _split_conversion(tokens: List[Token]):
        """Split "expr to unit" into the expression and the target unit."""
        for index, token in enumerate(tokens[:-1]):
            if token.is_conversion:
                for later in tokens[index + 1:]:
                    if later.type == TokenType.NUMBER_WITH_UNIT:
                        return tokens[:index], later.value[1]
                break
        return tokens, None

    def _shunting_yard(self, tokens: List[Token]) -> UnitValue:
        values: List[UnitValue] = []
        operators: List[Token] = []
        previous: Optional[Token] = None
        context = FunctionContext(self.previous_results, self.current_line)

        for token in tokens:
            kind = token.type

            if kind == TokenType.VARIABLE and not self.uses_variables:
                continue    # prose

            if kind in (TokenType.NUMBER, TokenType.NUMBER_WITH_UNIT,
                        TokenType.LINE_REFERENCE, TokenType.VARIABLE):
                values.append(self._resolve_operand(token))
            elif kind in self.binary_operators:
                if kind == TokenType.MINUS and self._is_prefix_position(previous):
                    operators.append(Token(kind, token.lexeme, _UNARY, token.location))
                else:
                    while operators and self._should_pop(operators[-1], kind):
                        self._apply_operator(operators.pop(), values)
                    operators.append(token)
            elif kind in (TokenType.LEFT_PAREN, TokenType.FUNCTION):
                operators.append(token)
            elif kind == TokenType.RIGHT_PAREN:
                while operators and operators[-1].type != TokenType.LEFT_PAREN:
                    self._apply_operator(operators.pop(), values)
                if not operators:
                    raise create_malformed_expression_error("Unmatched ')'", token)
                operators.pop()
                if operators and operators[-1].type == TokenType.FUNCTION:
                    apply_function(operators.pop().value, values, context)
            else:
                continue    # keywords and '=' carry no value here

            previous = token

        while operators:
            self._apply_operator(operators.pop(), values)

        if len(values) != 1:
            raise create_malformed_expression_error(
                f"Expression reduced to {len(values)} values instead of one"
            )
        return values[0]

    @staticmethod
    def _is_prefix_position(previous: Optional[Token]) -> bool:
        return (previous is None or previous.type in ARITHMETIC_OPERATORS
                or previous.type in (TokenType.LEFT_PAREN, TokenType.FUNCTION))

    def _precedence(self, operator: Token) -> Precedence:
        if operator.value == _UNARY:
            return Precedence.UNARY
        if operator.type in self.binary_operators:
            return self.binary_operators[operator.type][0]
        return Precedence.NONE

    def _should_pop(self, top: Token, incoming: TokenType) -> bool:
        top_precedence = self._precedence(top)
        incoming_precedence = self.binary_operators[incoming][0]
        if incoming in self.right_associative:
            return top_precedence > incoming_precedence
        return top_precedence >= incoming_precedence

    def _apply_operator(self, operator: Token, values: List[UnitValue]):
        if operator.type in (TokenType.LEFT_PAREN, TokenType.FUNCTION):
            raise create_malformed_expression_error("Unclosed '('", operator)

        if operator.value == _UNARY:
            if not values:
                raise create_malformed_expression_error("Nothing to negate", operator)
            operand = values.pop()
            values.append(UnitValue(-operand.value, operand.unit))
            return

        if len(values) < 2:
            raise create_malformed_expression_error(
                f"Operator '{operator.lexeme}' is missing an operand", operator
            )
        right = values.pop()
        left = values.pop()
        values.append(self.binary_operators[operator.type][1](left, right))

    def _resolve_operand(self, token: Token) -> UnitValue:
        if token.type == TokenType.NUMBER:
            return UnitValue(token.value)
        if token.type == TokenType.NUMBER_WITH_UNIT:
            value, unit = token.value
            return UnitValue(value, unit)
        if token.type == TokenType.LINE_REFERENCE:
            return self.resolve_line_reference(token)
        if token.type == TokenType.VARIABLE:
            return self._resolve_variable(token)
        raise create_malformed_expression_error(f"'{token.lexeme}' is not a value", token)

    def _resolve_variable(self, token: Token) -> UnitValue:
        if not self.uses_variables or token.value not in self.variables:
            raise create_undefined_variable_error(token, list(self.variables or {}))

        value = parse_result_string(self.variables[token.value])
        if value is None:
            raise create_malformed_expression_error(
                f"Variable '{token.value}' holds an unreadable value", token
            )
        return value

    def resolve_line_reference(self, token: Token) -> UnitValue:
        """Resolve lineN against the results of the lines above."""
        index = token.value
        if index >= self.current_line:
            raise create_forward_reference_error(token, self.current_line)

        if index >= len(self.previous_results) or self.previous_results[index] is None:
            raise create_empty_reference_error(token)

        value = parse_result_string(self.previous_results[index])
        if value is None:
            raise create_empty_reference_error(token)
        return value


def evaluate(
    tokens: List[Token],
    variables: Optional[Dict[str, str]],
    previous_results: List[Optional[str]],
    current_line: int
) -> Optional[EvaluationResult]:
    """Evaluate tokens; see Evaluator.evaluate."""
    return Evaluator(variables, previous_results, current_line).evaluate(tokens)


def evaluate_expression(
    text: str,
    previous_results: Optional[List[Optional[str]]] = None,
    current_line: int = 0
) -> Optional[str]:
    """
    Evaluate a line without a variable table.

    Unknown words are treated as surrounding prose, so
    "Download time: 1 GB / 10 Mbps" evaluates to "800 s".
    """
    tokens = tokenize(text)
    if tokens is None:
        return None

    result = Evaluator(None, previous_results, current_line).evaluate(tokens)
    return result[0] if result is not None else None


def evaluate_with_variables(
    text: str,
    variables: Dict[str, str],
    previous_results: List[Optional[str]],
    current_line: int
) -> Tuple[Optional[str], Optional[Tuple[str, str]]]:
    """
    Evaluate a document line.

    Returns (result, assignment); both are None when the line has no
    result, and assignment is set for "name = expr" lines.
    """
    tokens = tokenize(text)
    if tokens is None:
        return None, None

    result = Evaluator(variables, previous_results, current_line).evaluate(tokens)
    if result is None:
        return None, None
    return result
