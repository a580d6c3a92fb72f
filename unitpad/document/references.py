"""
Line reference renumbering.

When a line is inserted or removed, every "lineN" in the document that
points past the edit must move with its target. The rewrite is purely
textual: the lexer locates LINE_REFERENCE tokens and only those spans are
replaced, so prose and unbalanced lines are rewritten too.

A reference to a removed line becomes INVALID_REFERENCE. That word lexes
as an ordinary undefined variable, so the line stops producing a result
instead of quietly reading whichever line moved into the slot.

Author: xwest
"""

from typing import Callable, List, Optional

from ..lexer import Lexer, Token, TokenType

INVALID_REFERENCE = "INVALID_REF"


def _reference_index(token: Token) -> int:
    """Zero-based index as written; "line0" yields -1 and is never moved."""
    return int(token.lexeme[4:]) - 1


def rewrite_line_references(text: str, replace: Callable[[int], Optional[str]]) -> str:
    """
    Rewrite each line reference in text.

    replace receives the zero-based index and returns the replacement
    text, or None to leave the reference as written.
    """
    tokens = [token for token in Lexer(text).tokenize()
              if token.type == TokenType.LINE_REFERENCE]
    if not tokens:
        return text

    pieces = []
    cursor = 0
    for token in tokens:
        replacement = replace(_reference_index(token))
        if replacement is None:
            continue
        pieces.append(text[cursor:token.location.start])
        pieces.append(replacement)
        cursor = token.location.end

    pieces.append(text[cursor:])
    return "".join(pieces)


def _line_name(index: int) -> str:
    return f"line{index + 1}"


def update_references_for_insertion(text: str, insertion_index: int) -> str:
    """References at or after the inserted line move down by one."""
    return rewrite_line_references(
        text, lambda index: _line_name(index + 1) if index >= insertion_index else None
    )


def update_references_for_deletion(text: str, deleted_index: int) -> str:
    """References after the deleted line move up by one; references to it are invalidated."""
    def replace(index: int) -> Optional[str]:
        if index == deleted_index:
            return INVALID_REFERENCE
        if index > deleted_index:
            return _line_name(index - 1)
        return None

    return rewrite_line_references(text, replace)


def renumber_for_insertion(lines: List[str], insertion_index: int,
                           skip_index: Optional[int] = None) -> List[str]:
    """Apply update_references_for_insertion to every line but skip_index."""
    return [
        text if index == skip_index else update_references_for_insertion(text, insertion_index)
        for index, text in enumerate(lines)
    ]


def renumber_for_deletion(lines: List[str], deleted_index: int) -> List[str]:
    return [update_references_for_deletion(text, deleted_index) for text in lines]
