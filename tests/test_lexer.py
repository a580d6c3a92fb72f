"""
Test suite for the unitpad lexer.

Tests cover:
- Numbers, thousands separators and the k suffix
- Attached, standalone, compound and currency units
- Line references, keywords, functions and variables
- Structural errors and warnings

Author: xwest
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from unitpad.lexer import Lexer, TokenType, tokenize, tokenize_with_diagnostics
from unitpad.units import RateUnit, parse_unit
from unitpad.units.registry import HOUR, USD


class TestLexer(unittest.TestCase):
    """Test cases for the lexer."""

    def _types(self, text):
        tokens = tokenize(text)
        self.assertIsNotNone(tokens, f"'{text}' failed to tokenize")
        return [token.type for token in tokens]

    def test_arithmetic(self):
        self.assertEqual(self._types("2 + 3 * 4"), [
            TokenType.NUMBER, TokenType.PLUS, TokenType.NUMBER,
            TokenType.MULTIPLY, TokenType.NUMBER,
        ])
        self.assertEqual(len(tokenize("2^3^2")), 5)

    def test_numbers(self):
        self.assertEqual(tokenize("1,234.56")[0].value, 1234.56)
        self.assertEqual(tokenize("5k")[0].value, 5000)
        self.assertEqual(tokenize("2.5K")[0].value, 2500)
        self.assertEqual([token.value for token in tokenize("1.2.3")], [1.2, 3.0])

    def test_number_at_end_of_line(self):
        for text in ("5", "x = 5", "line2 * 2", "2 + 3 * 4"):
            with self.subTest(text=text):
                token = tokenize(text)[-1]
                self.assertEqual(token.type, TokenType.NUMBER)
                self.assertEqual(token.lexeme, text[-1])

    def test_k_suffix_does_not_swallow_words(self):
        tokens = tokenize("5kg")
        self.assertEqual(tokens[0].type, TokenType.NUMBER)
        self.assertEqual(tokens[0].value, 5)
        self.assertEqual(tokens[1].type, TokenType.VARIABLE)

    def test_attached_units(self):
        for text in ("5 GiB", "5GiB"):
            with self.subTest(text=text):
                token = tokenize(text)[0]
                self.assertEqual(token.type, TokenType.NUMBER_WITH_UNIT)
                self.assertEqual(token.value, (5.0, parse_unit("GiB")))

    def test_compound_and_shorthand_units(self):
        token = tokenize("50 GiB/s")[0]
        self.assertEqual(token.value[1], parse_unit("GiB/s"))

        token = tokenize("100 QPS")[0]
        self.assertIsInstance(token.value[1], RateUnit)

    def test_percent(self):
        token = tokenize("20%")[0]
        self.assertEqual(token.type, TokenType.NUMBER_WITH_UNIT)
        self.assertEqual(token.value, (20.0, parse_unit("%")))

    def test_currency_amounts(self):
        token = tokenize("$1,000")[0]
        self.assertEqual(token.value, (1000.0, USD))

        token = tokenize("$5/hr")[0]
        self.assertEqual(token.lexeme, "$5/hr")
        self.assertEqual(token.value, (5.0, RateUnit(USD, HOUR)))

    def test_standalone_units(self):
        self.assertEqual(self._types("1 GiB to MiB"), [
            TokenType.NUMBER_WITH_UNIT, TokenType.TO, TokenType.NUMBER_WITH_UNIT,
        ])
        token = tokenize("$12000/quarter to $/month")[2]
        self.assertEqual(token.value[1], parse_unit("$/month"))

    def test_line_references(self):
        tokens = tokenize("line1 + line2")
        self.assertEqual(tokens[0].type, TokenType.LINE_REFERENCE)
        self.assertEqual(tokens[0].value, 0)
        self.assertEqual(tokens[2].value, 1)
        self.assertEqual(tokenize("line0")[0].value, 0)

    def test_keywords(self):
        self.assertEqual(self._types("20% of 500 MB"), [
            TokenType.NUMBER_WITH_UNIT, TokenType.OF, TokenType.NUMBER_WITH_UNIT,
        ])
        self.assertEqual(self._types("5 GiB in MiB")[1], TokenType.IN)

    def test_functions_need_parentheses(self):
        self.assertEqual(self._types("sqrt(16)"), [
            TokenType.FUNCTION, TokenType.LEFT_PAREN, TokenType.NUMBER, TokenType.RIGHT_PAREN,
        ])
        self.assertEqual(self._types("sqrt 16")[0], TokenType.VARIABLE)
        self.assertEqual(tokenize("sum_above()")[0].value, "sum_above")

    def test_assignment(self):
        self.assertEqual(self._types("x = 42"), [
            TokenType.VARIABLE, TokenType.ASSIGN, TokenType.NUMBER,
        ])

    def test_prose_becomes_variables(self):
        tokens = tokenize("The server has 16 GiB of RAM")
        self.assertIn(TokenType.NUMBER_WITH_UNIT, [token.type for token in tokens])
        self.assertEqual(tokens[0].value, "The")

    def test_token_locations(self):
        tokens = tokenize("10 GiB + line1")
        self.assertEqual((tokens[0].location.start, tokens[0].location.end), (0, 6))
        self.assertEqual((tokens[2].location.start, tokens[2].location.end), (9, 14))


class TestLexerDiagnostics(unittest.TestCase):
    """Test cases for lexer errors and warnings."""

    def test_unbalanced_parentheses(self):
        for text in ("(1 + 2", "1 + 2)"):
            with self.subTest(text=text):
                tokens, lexer = tokenize_with_diagnostics(text)
                self.assertIsNone(tokens)
                self.assertEqual(lexer.errors[0].code, "L001")

    def test_empty_input(self):
        tokens, lexer = tokenize_with_diagnostics("   ")
        self.assertIsNone(tokens)
        self.assertEqual(lexer.errors[0].code, "L003")

    def test_operator_sequence(self):
        tokens, lexer = tokenize_with_diagnostics("1 + * 2")
        self.assertIsNone(tokens)
        self.assertEqual(lexer.errors[0].code, "L002")

    def test_negative_operand_is_allowed(self):
        self.assertIsNotNone(tokenize("2 * -3"))

    def test_unrecognized_character_warning(self):
        lexer = Lexer("5 § 3")
        tokens = lexer.tokenize()
        self.assertFalse(lexer.has_errors())
        self.assertTrue(lexer.has_warnings())
        self.assertEqual(lexer.warnings[0].diagnostic.code, "L004")
        self.assertEqual(len(tokens), 2)

    def test_punctuation_is_skipped_silently(self):
        lexer = Lexer("Total: 5, roughly.")
        lexer.tokenize()
        self.assertFalse(lexer.has_warnings())

    def test_unit_typo_suggestion(self):
        lexer = Lexer("5 secondz")
        tokens = lexer.tokenize()
        self.assertEqual(tokens[0].type, TokenType.NUMBER)
        warning = lexer.warnings[0].diagnostic
        self.assertEqual(warning.code, "L005")
        self.assertIn("seconds", warning.suggestions)

    def test_diagnostics_render(self):
        _, lexer = tokenize_with_diagnostics("(1 + 2")
        rendered = str(lexer.get_diagnostics()[0])
        self.assertIn("L001", rendered)


if __name__ == '__main__':
    unittest.main()
