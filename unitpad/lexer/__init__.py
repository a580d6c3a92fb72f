"""
unitpad Lexer Package

Tokenizes a single notepad line into values (numbers, numbers with units,
line references, variables), operators, keywords and function names.

Key Features:
- Thousands separators and a "k" suffix (1,000 and 5k)
- Units glued to or spaced from numbers (5GiB, 5 GiB, 10 GiB/s)
- Currency-prefixed amounts and rates ($100, €5/hr)
- Prose tolerance: unknown words become variables, punctuation is skipped

Author: xwest
"""

from .tokens import Token, TokenType, SourceLocation
from .lexer import Lexer, tokenize, tokenize_with_diagnostics
from .errors import LexerError, LexerWarning

__all__ = [
    "Lexer",
    "tokenize",
    "tokenize_with_diagnostics",
    "Token",
    "TokenType",
    "SourceLocation",
    "LexerError",
    "LexerWarning",
]
