"""
Error handling for the unitpad lexer.

Structural problems (unbalanced parentheses, doubled operators, empty
input) are errors and make tokenize() return None. Stray characters and
likely unit typos are only warnings; the line still tokenizes.

Author: xwest
"""

from typing import List, Optional

from ..diagnostics import Diagnostic
from .tokens import SourceLocation


class LexerError(Exception):
    """
    Exception raised when a line is structurally malformed.

    Contains detailed diagnostic information for error reporting.
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation],
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
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


class LexerWarning:
    """
    Represents a lexer warning that doesn't stop tokenization.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="warning",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    def __str__(self) -> str:
        return str(self.diagnostic)


ERROR_CODES = {
    "L001": "Unbalanced parentheses",
    "L002": "Invalid operator sequence",
    "L003": "Empty input",
    "L004": "Unrecognized character",
    "L005": "Unknown unit",
}


def create_unbalanced_paren_error(location: Optional[SourceLocation], unclosed: bool) -> LexerError:
    """Create an error for a missing '(' or ')'."""
    if unclosed:
        message = "Unclosed '('"
        help_text = "Add a matching ')'."
    else:
        message = "Unmatched ')'"
        help_text = "Remove the ')' or add a matching '(' before it."

    return LexerError(message=message, location=location, code="L001", help_text=help_text)


def create_operator_sequence_error(first: str, second: str, location: SourceLocation) -> LexerError:
    """Create an error for two adjacent binary operators."""
    return LexerError(
        message=f"Operator '{second}' cannot follow '{first}'",
        location=location,
        code="L002",
        help_text="Only '-' (negation) may directly follow another operator."
    )


def create_empty_input_error() -> LexerError:
    return LexerError(message="Nothing to evaluate", location=None, code="L003")


def create_unrecognized_character_warning(char: str, location: SourceLocation) -> LexerWarning:
    """Create a warning for a character that was skipped."""
    if char.isprintable():
        help_text = f"The character '{char}' is ignored."
    else:
        help_text = f"Non-printable character (Unicode: U+{ord(char):04X}) is ignored."

    return LexerWarning(
        message=f"Skipped character: '{char}'",
        location=location,
        code="L004",
        help_text=help_text
    )


def create_unknown_unit_warning(word: str, location: SourceLocation, suggestions: List[str]) -> LexerWarning:
    """Create a warning for a word after a number that looks like a misspelled unit."""
    return LexerWarning(
        message=f"'{word}' is not a known unit",
        location=location,
        code="L005",
        help_text=f"Did you mean one of these units: {', '.join(suggestions)}?",
        suggestions=suggestions
    )
