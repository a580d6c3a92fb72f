"""
unitpad

A notepad calculator: every line of a document is evaluated as a
unit-aware expression, so "Download time: 1 GB / 10 Mbps" shows "800 s"
beside it. Lines can reference earlier results (line1), assign variables
(x = 42) and convert units (to / in).

Architecture:
    unitpad/
    ├── units/           # Units, rates, conversion and unit algebra
    ├── lexer/           # Tokenization of a single line
    ├── evaluator/       # Expression search and evaluation
    └── document/        # Editable document, renumbering, highlighting, files

Author: xwest
License: MIT
"""

__version__ = "0.1.0"
__author__ = "xwest"
__license__ = "MIT"

from .lexer import Lexer, tokenize
from .evaluator import evaluate_expression, evaluate_with_variables
from .units import UnitValue, parse_unit, parse_result_string
from .document import Document

__all__ = [
    "Lexer",
    "tokenize",
    "evaluate_expression",
    "evaluate_with_variables",
    "UnitValue",
    "parse_unit",
    "parse_result_string",
    "Document",

    "__version__",
    "__author__",
    "__license__",
]
