"""
Error handling for the unitpad evaluator.

EvaluationError never escapes the public evaluate functions: a failing
line simply has no result. The errors are kept on the Evaluator so a
front end can explain why.

Author: xwest
"""

from typing import List, Optional

from ..diagnostics import Diagnostic, ErrorRecovery
from ..lexer.tokens import Token, SourceLocation


class EvaluationError(Exception):
    """Raised when a token window cannot be evaluated."""

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        token: Optional[Token] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.diagnostic = Diagnostic(
            message=message,
            location=location if location is not None else getattr(token, "location", None),
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )
        self.token = token

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    def __str__(self) -> str:
        return str(self.diagnostic)


ERROR_CODES = {
    "E001": "Reference to the current or a later line",
    "E002": "Referenced line has no result",
    "E003": "Undefined variable",
    "E004": "Malformed expression",
    "E005": "Invalid function argument",
    "E006": "No expression found",
}


def create_forward_reference_error(token: Token, current_line: int) -> EvaluationError:
    """Create an error for a line reference that does not point upwards."""
    return EvaluationError(
        message=f"'{token.lexeme}' does not refer to an earlier line",
        token=token,
        code="E001",
        help_text=f"Line {current_line + 1} can only use line1 to line{current_line}."
        if current_line > 0 else "The first line cannot reference other lines."
    )


def create_empty_reference_error(token: Token) -> EvaluationError:
    return EvaluationError(
        message=f"'{token.lexeme}' has no result to use",
        token=token,
        code="E002"
    )


def create_undefined_variable_error(token: Token, defined: List[str]) -> EvaluationError:
    """Create an error for a variable used before assignment."""
    suggestions = ErrorRecovery.suggest_corrections(token.value, defined, max_distance=2)
    return EvaluationError(
        message=f"Undefined variable '{token.value}'",
        token=token,
        code="E003",
        help_text=f"Assign it first, e.g. '{token.value} = 42'.",
        suggestions=suggestions or None
    )


def create_malformed_expression_error(message: str, token: Optional[Token] = None) -> EvaluationError:
    return EvaluationError(message=message, token=token, code="E004")


def create_invalid_argument_error(function: str, reason: str) -> EvaluationError:
    return EvaluationError(
        message=f"Invalid argument to {function}(): {reason}",
        code="E005"
    )


def create_no_expression_error() -> EvaluationError:
    return EvaluationError(message="No expression could be evaluated", code="E006")
