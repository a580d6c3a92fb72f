"""
unitpad Evaluator Package

Finds the formula inside a line of tokens and evaluates it with units,
line references, variables, conversions, percentages and functions.

Author: xwest
"""

from .evaluator import (
    Evaluator, Precedence, evaluate, evaluate_expression, evaluate_with_variables
)
from .errors import EvaluationError
from .functions import FUNCTIONS

__all__ = [
    "Evaluator",
    "Precedence",
    "evaluate",
    "evaluate_expression",
    "evaluate_with_variables",
    "EvaluationError",
    "FUNCTIONS",
]
