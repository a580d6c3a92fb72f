"""
UI-agnostic syntax highlighting for unitpad lines.

Front ends turn the spans into colours; concatenating the span texts
always gives back the original line.

Author: xwest
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from ..constants import CURRENCY_SYMBOLS, KNOWN_FUNCTIONS
from ..units import parse_unit


class HighlightType(Enum):
    NUMBER = "Number"
    UNIT = "Unit"
    LINE_REFERENCE = "LineReference"
    KEYWORD = "Keyword"
    OPERATOR = "Operator"
    VARIABLE = "Variable"
    FUNCTION = "Function"
    NORMAL = "Normal"


@dataclass(frozen=True)
class HighlightedSpan:
    text: str
    kind: HighlightType


class Highlighter:
    """Splits a line into highlighted spans; one instance can be reused."""

    KEYWORDS = frozenset({"to", "in", "of"})
    OPERATORS = frozenset("+-*/()=^")

    def __init__(self):
        self.word_pattern = re.compile(r'[^\W\d]\w*')
        self.number_pattern = re.compile(r'[\d.,]+')
        self.line_ref_pattern = re.compile(r'line\d+', re.IGNORECASE)

    def highlight(self, text: str, variables: Optional[Dict[str, str]] = None) -> List[HighlightedSpan]:
        variables = variables or {}
        spans: List[HighlightedSpan] = []
        pos = 0

        while pos < len(text):
            char = text[pos]

            match = self.word_pattern.match(text, pos)
            if match:
                word = match.group(0)
                spans.append(HighlightedSpan(word, self._classify_word(word, variables)))
                pos = match.end()
                continue

            if char.isdigit() or char == '.':
                match = self.number_pattern.match(text, pos)
                number = match.group(0)
                if any(c.isdigit() for c in number):
                    spans.append(HighlightedSpan(number, HighlightType.NUMBER))
                    pos = match.end()
                else:
                    spans.append(HighlightedSpan(char, HighlightType.NORMAL))
                    pos += 1
                continue

            if char == '%' or char in CURRENCY_SYMBOLS:
                kind = HighlightType.UNIT
            elif char in self.OPERATORS:
                kind = HighlightType.OPERATOR
            else:
                kind = HighlightType.NORMAL
            spans.append(HighlightedSpan(char, kind))
            pos += 1

        return spans

    def _classify_word(self, word: str, variables: Dict[str, str]) -> HighlightType:
        lowered = word.lower()
        if self.line_ref_pattern.fullmatch(word):
            return HighlightType.LINE_REFERENCE
        if lowered in self.KEYWORDS:
            return HighlightType.KEYWORD
        if lowered in KNOWN_FUNCTIONS:
            return HighlightType.FUNCTION
        if parse_unit(word) is not None:
            return HighlightType.UNIT
        if word in variables:
            return HighlightType.VARIABLE
        return HighlightType.NORMAL


_highlighter = Highlighter()


def highlight_expression(text: str, variables: Optional[Dict[str, str]] = None) -> List[HighlightedSpan]:
    """Highlight one line; only variables present in the table are marked as such."""
    return _highlighter.highlight(text, variables)
