"""
Variable dependency index for the document model.

Records which lines read which variables so that a changed assignment
only re-evaluates the lines that can observe it.

Author: xwest
"""

from typing import Dict, List, Set

from ..lexer import Lexer, Token, TokenType


def variables_read(tokens: List[Token]) -> Set[str]:
    """Names of the variables a line reads; an assignment target is not a read."""
    if len(tokens) >= 2 and tokens[0].type == TokenType.VARIABLE and tokens[1].type == TokenType.ASSIGN:
        tokens = tokens[2:]
    return {token.value for token in tokens if token.type == TokenType.VARIABLE}


class DependencyIndex:
    """Maps variable name to the set of line indices that read it."""

    def __init__(self):
        self.readers: Dict[str, Set[int]] = {}
        self.line_reads: Dict[int, Set[str]] = {}

    def rebuild(self, lines: List[str]):
        self.readers.clear()
        self.line_reads.clear()
        for index, text in enumerate(lines):
            self.update_line(index, text)

    def update_line(self, index: int, text: str):
        """Re-scan one line after its text changed."""
        for name in self.line_reads.pop(index, set()):
            readers = self.readers.get(name)
            if readers is not None:
                readers.discard(index)
                if not readers:
                    del self.readers[name]

        names = variables_read(Lexer(text).tokenize())
        if names:
            self.line_reads[index] = names
        for name in names:
            self.readers.setdefault(name, set()).add(index)

    def readers_after(self, name: str, line_index: int) -> List[int]:
        """Lines below line_index that read name, in document order."""
        return sorted(index for index in self.readers.get(name, ()) if index > line_index)

    def __contains__(self, name: str) -> bool:
        return name in self.readers
