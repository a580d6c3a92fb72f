"""
unitpad Lexer - turns one line of text into tokens

The lexer is deliberately tolerant. Lines are mostly prose with a formula
somewhere inside ("Download time: 1 GB / 10 Mbps"), so unknown words
become VARIABLE tokens and stray punctuation is skipped. Working out
which part of the line is the actual formula is the evaluator's job.

Only structural problems are errors: unbalanced parentheses, a binary
operator directly after another one, or nothing to tokenize.

Author: xwest
"""

import logging
import re
from typing import List, Optional, Tuple, Union

from ..constants import CURRENCY_SYMBOLS, KNOWN_FUNCTIONS, SKIPPED_PUNCTUATION
from ..diagnostics import ErrorRecovery
from ..units import AnyUnit, parse_unit
from ..units.registry import get_registry
from .tokens import (
    Token, TokenType, SourceLocation, KEYWORDS, OPERATORS, ARITHMETIC_OPERATORS
)
from .errors import (
    LexerError, LexerWarning, create_empty_input_error, create_operator_sequence_error,
    create_unbalanced_paren_error, create_unknown_unit_warning,
    create_unrecognized_character_warning
)

logger = logging.getLogger(__name__)

# Shorter words collide with too many units ("x" vs "s") to be worth a hint
_MIN_SUGGESTION_LENGTH = 3


class Lexer:
    """
    Lexical analyzer for a single unitpad line.

    Recognition order at each position: line references, keywords,
    currency amounts, numbers (with an attached unit when one follows),
    operators, function names, standalone units, and finally variables.
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.tokens: List[Token] = []
        self.errors: List[LexerError] = []
        self.warnings: List[LexerWarning] = []

        self._compile_patterns()

    def _compile_patterns(self):
        """Compile regex patterns used by the lexer."""

        # 1,234.56 - thousands separators, at most one decimal point
        self.number_pattern = re.compile(r'\d+(?:,\d+)*(?:\.\d+)?')

        # Unicode letters or underscore, then word characters
        self.identifier_pattern = re.compile(r'[^\W\d]\w*')

        self.line_ref_pattern = re.compile(r'line(\d+)(?!\w)', re.IGNORECASE)

        symbols = re.escape(CURRENCY_SYMBOLS)
        self.currency_symbol_pattern = re.compile(f'[{symbols}]')

        # $5/hr, $1,000, €50k
        self.currency_amount_pattern = re.compile(
            f'([{symbols}])[ \\t]*(\\d+(?:,\\d+)*(?:\\.\\d+)?)'
        )

        # GiB/s, $/month, query / min
        self.compound_unit_pattern = re.compile(
            f'([{symbols}]|[^\\W\\d]\\w*)[ \\t]*/[ \\t]*([^\\W\\d]\\w*)'
        )

        self.whitespace_pattern = re.compile(r'\s*')

    def tokenize(self) -> List[Token]:
        """
        Tokenize the whole line.

        Errors are collected in self.errors rather than raised; use the
        module-level tokenize() to get None for malformed lines.
        """
        self.pos = 0
        self.tokens = []
        self.errors.clear()
        self.warnings.clear()

        while True:
            self._skip_whitespace()
            if self.pos >= len(self.source):
                break

            token = self._next_token()
            if token is not None:
                self.tokens.append(token)

        try:
            self._validate_structure()
        except LexerError as e:
            self.errors.append(e)

        return self.tokens

    def _next_token(self) -> Optional[Token]:
        char = self.source[self.pos]

        token = self._try_line_reference()
        if token:
            return token

        token = self._try_keyword()
        if token:
            return token

        if char in CURRENCY_SYMBOLS:
            token = self._try_currency_amount()
            if token:
                return token

        if char.isdigit():
            return self._tokenize_number()

        if char in OPERATORS:
            start = self.pos
            self.pos += 1
            return Token(OPERATORS[char], char, None, SourceLocation(start, self.pos))

        if self.identifier_pattern.match(self.source, self.pos):
            return self._tokenize_word()

        if self._is_unit_symbol(char):
            return self._tokenize_standalone_symbol()

        location = SourceLocation(self.pos, self.pos + 1)
        if char not in SKIPPED_PUNCTUATION:
            self.warnings.append(create_unrecognized_character_warning(char, location))
            logger.debug("Skipping unrecognized character %r at %s", char, location)
        self.pos += 1
        return None

    def _try_line_reference(self) -> Optional[Token]:
        match = self.line_ref_pattern.match(self.source, self.pos)
        if not match:
            return None

        # "line1" is the first line; "line0" has nothing before it so clamp
        index = max(int(match.group(1)) - 1, 0)
        self.pos = match.end()
        return Token(TokenType.LINE_REFERENCE, match.group(0), index,
                     SourceLocation(match.start(), match.end()))

    def _try_keyword(self) -> Optional[Token]:
        match = self.identifier_pattern.match(self.source, self.pos)
        if not match or match.group(0) not in KEYWORDS:
            return None

        self.pos = match.end()
        return Token(KEYWORDS[match.group(0)], match.group(0), None,
                     SourceLocation(match.start(), match.end()))

    def _try_currency_amount(self) -> Optional[Token]:
        """Currency-prefixed amounts: $100, €1,000, £50k, $5/hr."""
        match = self.currency_amount_pattern.match(self.source, self.pos)
        if not match:
            return None

        symbol = match.group(1)
        self.pos = match.end()
        value = self._parse_number(match.group(2))
        value = self._apply_thousands_suffix(value)
        unit = parse_unit(symbol)

        # Rate form "$5/hr": the "/unit" must follow the number directly
        rate_match = self.identifier_pattern.match(self.source, self.pos + 1)
        if self._peek() == '/' and rate_match:
            rate_unit = parse_unit(f"{symbol}/{rate_match.group(0)}")
            if rate_unit is not None:
                unit = rate_unit
                self.pos = rate_match.end()

        lexeme = self.source[match.start():self.pos]
        return Token(TokenType.NUMBER_WITH_UNIT, lexeme, (value, unit),
                     SourceLocation(match.start(), self.pos))

    def _tokenize_number(self) -> Token:
        match = self.number_pattern.match(self.source, self.pos)
        start = self.pos
        self.pos = match.end()
        value = self._apply_thousands_suffix(self._parse_number(match.group(0)))

        unit = self._try_attached_unit()
        lexeme = self.source[start:self.pos]
        location = SourceLocation(start, self.pos)

        if unit is None:
            return Token(TokenType.NUMBER, lexeme, value, location)
        return Token(TokenType.NUMBER_WITH_UNIT, lexeme, (value, unit), location)

    def _try_attached_unit(self) -> Optional[AnyUnit]:
        """
        Consume the unit following a number, if there is one.

        Tried in order: compound "A/B" (including "$/year"), a single unit
        word, "%", and a bare currency symbol. On failure the position is
        left just after the number.
        """
        after_number = self.pos
        self._skip_whitespace(newlines=False)

        compound = self.compound_unit_pattern.match(self.source, self.pos)
        if compound and compound.group(1) not in KEYWORDS:
            unit = parse_unit(f"{compound.group(1)}/{compound.group(2)}")
            if unit is not None:
                self.pos = compound.end()
                return unit

        word = self.identifier_pattern.match(self.source, self.pos)
        if word:
            text = word.group(0)
            unit = None if text in KEYWORDS else parse_unit(text)
            if unit is not None:
                self.pos = word.end()
                return unit
            self._suggest_unit(text, SourceLocation(word.start(), word.end()))
        elif self._is_unit_symbol(self._peek(0)):
            unit = parse_unit(self._peek(0))
            self.pos += 1
            return unit

        self.pos = after_number
        return None

    def _tokenize_word(self) -> Token:
        """Function names, standalone units and variables."""
        match = self.identifier_pattern.match(self.source, self.pos)
        word = match.group(0)
        start = match.start()

        if word.lower() in KNOWN_FUNCTIONS and self._next_non_space_char(match.end()) == '(':
            self.pos = match.end()
            return Token(TokenType.FUNCTION, word, word.lower(), SourceLocation(start, self.pos))

        unit = self._match_compound_unit()
        if unit is None:
            unit = parse_unit(word)
            if unit is not None:
                self.pos = match.end()
        if unit is not None:
            return Token(TokenType.NUMBER_WITH_UNIT, self.source[start:self.pos], (1.0, unit),
                         SourceLocation(start, self.pos))

        self.pos = match.end()
        return Token(TokenType.VARIABLE, word, word, SourceLocation(start, self.pos))

    def _tokenize_standalone_symbol(self) -> Token:
        """A lone "%" or currency symbol, or a "$/month" style target."""
        start = self.pos
        unit = self._match_compound_unit()
        if unit is None:
            unit = parse_unit(self.source[self.pos])
            self.pos += 1
        return Token(TokenType.NUMBER_WITH_UNIT, self.source[start:self.pos], (1.0, unit),
                     SourceLocation(start, self.pos))

    def _match_compound_unit(self) -> Optional[AnyUnit]:
        match = self.compound_unit_pattern.match(self.source, self.pos)
        if not match or match.group(1) in KEYWORDS:
            return None

        unit = parse_unit(f"{match.group(1)}/{match.group(2)}")
        if unit is not None:
            self.pos = match.end()
        return unit

    def _suggest_unit(self, word: str, location: SourceLocation):
        if len(word) < _MIN_SUGGESTION_LENGTH:
            return
        suggestions = ErrorRecovery.suggest_corrections(word, get_registry().known_names())
        if suggestions:
            self.warnings.append(create_unknown_unit_warning(word, location, suggestions))

    def _apply_thousands_suffix(self, value: float) -> float:
        """A trailing k/K multiplies by 1000, unless it starts a word (5kg)."""
        if self._peek(0) in ('k', 'K') and not self._is_identifier_continue(self._peek(1)):
            self.pos += 1
            return value * 1000.0
        return value

    @staticmethod
    def _parse_number(text: str) -> float:
        return float(text.replace(',', ''))

    def _validate_structure(self):
        """Reject empty lines, unbalanced parentheses and doubled operators."""
        if not self.tokens:
            raise create_empty_input_error()

        depth = 0
        for token in self.tokens:
            if token.type == TokenType.LEFT_PAREN:
                depth += 1
            elif token.type == TokenType.RIGHT_PAREN:
                depth -= 1
                if depth < 0:
                    raise create_unbalanced_paren_error(token.location, unclosed=False)
        if depth != 0:
            raise create_unbalanced_paren_error(None, unclosed=True)

        for previous, current in zip(self.tokens, self.tokens[1:]):
            if (previous.type in ARITHMETIC_OPERATORS and current.type in ARITHMETIC_OPERATORS
                    and current.type != TokenType.MINUS):
                raise create_operator_sequence_error(previous.lexeme, current.lexeme, current.location)

    def _skip_whitespace(self, newlines: bool = True):
        if newlines:
            self.pos = self.whitespace_pattern.match(self.source, self.pos).end()
            return
        while self.pos < len(self.source) and self.source[self.pos] in ' \t':
            self.pos += 1

    def _next_non_space_char(self, pos: int) -> str:
        while pos < len(self.source) and self.source[pos].isspace():
            pos += 1
        return self.source[pos] if pos < len(self.source) else ''

    @staticmethod
    def _is_unit_symbol(char: str) -> bool:
        # '' is a substring of every string, so end of input needs its own check
        return bool(char) and (char == '%' or char in CURRENCY_SYMBOLS)

    def _is_identifier_continue(self, char: str) -> bool:
        return bool(char) and (char.isalnum() or char == '_')

    def _peek(self, offset: int = 0) -> str:
        pos = self.pos + offset
        if pos < len(self.source):
            return self.source[pos]
        return ''

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    def get_diagnostics(self) -> List[Union[LexerError, LexerWarning]]:
        """Get all diagnostics (errors and warnings)."""
        return self.errors + self.warnings


def tokenize(text: str) -> Optional[List[Token]]:
    """
    Tokenize one line of text.

    Returns None for empty or structurally malformed lines; any other text
    yields a token list, possibly made only of VARIABLE tokens.
    """
    tokens, _ = tokenize_with_diagnostics(text)
    return tokens


def tokenize_with_diagnostics(text: str) -> Tuple[Optional[List[Token]], Lexer]:
    """Like tokenize(), but also hands back the lexer for its diagnostics."""
    lexer = Lexer(text)
    tokens = lexer.tokenize()

    if lexer.has_errors():
        logger.debug("Rejected line %r: %s", text, lexer.errors[0].diagnostic.message)
        return None, lexer
    return tokens, lexer
