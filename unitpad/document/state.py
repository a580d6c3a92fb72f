"""
unitpad Document Model

The editable document behind every front end: a list of line texts, one
cached result per line, the variable table and a cursor. Each mutation
recomputes what it invalidates before returning:

    character edit -> that line -> lines reading a changed variable
    line split/merge -> renumber lineN references -> every line

Lines only observe earlier lines. Variables follow the same rule: a line
sees the assignments made above it, and the public variable table holds
the latest value of each name.

Author: xwest
"""

import logging
from typing import Dict, List, Optional, Tuple

from ..evaluator import evaluate_with_variables
from .dependencies import DependencyIndex
from .file_ops import (
    FileOperations, LocalFileOperations, PathLike, deserialize_lines, serialize_lines
)
from .highlighting import HighlightedSpan, highlight_expression
from .references import renumber_for_deletion, renumber_for_insertion

logger = logging.getLogger(__name__)

Assignment = Tuple[str, str]


class Document:
    """UI-agnostic notepad state shared by terminal and web front ends."""

    def __init__(self):
        self.text_lines: List[str] = [""]
        self.results: List[Optional[str]] = [None]
        self.variables: Dict[str, str] = {}
        self.cursor_line = 0
        self.cursor_col = 0

        self.dependencies = DependencyIndex()
        self._assignments: List[Optional[Assignment]] = [None]

    @classmethod
    def from_lines(cls, lines: List[str]) -> "Document":
        document = cls()
        document.text_lines = list(lines) or [""]
        document.recalculate_all()
        return document

    # Editing

    def insert_char(self, char: str):
        """Insert a character at the cursor; a newline splits the line."""
        if char == "\n":
            self.new_line()
            return

        line = self.text_lines[self.cursor_line]
        col = min(self.cursor_col, len(line))
        self.text_lines[self.cursor_line] = line[:col] + char + line[col:]
        self.cursor_col = col + 1
        self._line_edited(self.cursor_line)

    def delete_char(self):
        """Backspace: delete before the cursor, or merge into the previous line at column 0."""
        line = self.text_lines[self.cursor_line]
        col = min(self.cursor_col, len(line))

        if col > 0:
            self.text_lines[self.cursor_line] = line[:col - 1] + line[col:]
            self.cursor_col = col - 1
            self._line_edited(self.cursor_line)
            return

        if self.cursor_line == 0:
            return

        removed = self.cursor_line
        self.text_lines.pop(removed)
        self.results.pop(removed)
        self._assignments.pop(removed)

        self.cursor_line = removed - 1
        self.cursor_col = len(self.text_lines[self.cursor_line])
        self.text_lines[self.cursor_line] += line

        self.text_lines = renumber_for_deletion(self.text_lines, removed)
        self.recalculate_all()

    def new_line(self):
        """Split the current line at the cursor."""
        line = self.text_lines[self.cursor_line]
        col = min(self.cursor_col, len(line))

        self.text_lines[self.cursor_line] = line[:col]
        self.cursor_line += 1
        self.cursor_col = 0
        self.text_lines.insert(self.cursor_line, line[col:])
        self.results.insert(self.cursor_line, None)
        self._assignments.insert(self.cursor_line, None)

        self.text_lines = renumber_for_insertion(
            self.text_lines, self.cursor_line, skip_index=self.cursor_line
        )
        self.recalculate_all()

    def move_cursor_to(self, line: int, col: int):
        self.cursor_line = max(0, min(line, len(self.text_lines) - 1))
        self.cursor_col = max(0, min(col, len(self.text_lines[self.cursor_line])))

    def current_line(self) -> str:
        return self.text_lines[self.cursor_line]

    def current_result(self) -> Optional[str]:
        return self.results[self.cursor_line]

    # Evaluation

    def update_result(self, line_index: int):
        """
        Re-evaluate one line and every later line that reads a variable it changed.

        Later lines are visited in document order, so each is evaluated at
        most once even when changes chain through several variables.
        """
        if not 0 <= line_index < len(self.text_lines):
            raise IndexError(f"line index {line_index} out of range")

        pending = {line_index}
        while pending:
            index = min(pending)
            pending.discard(index)

            previous = self._assignments[index]
            self._evaluate_line(index)
            current = self._assignments[index]
            if current == previous:
                continue

            changed = {assignment[0] for assignment in (previous, current) if assignment is not None}
            for name in changed:
                pending.update(self.dependencies.readers_after(name, index))

        self._refresh_variables()

    def recalculate_all(self):
        """Rebuild every result and variable from scratch, top to bottom."""
        count = len(self.text_lines)
        self.results = [None] * count
        self._assignments = [None] * count
        self.variables = {}
        self.dependencies.rebuild(self.text_lines)

        # Assignments made above the current line
        visible: Dict[str, str] = {}
        for index in range(count):
            assignment = self._evaluate_line(index, dict(visible))
            if assignment is not None:
                visible[assignment[0]] = assignment[1]

        self.variables = visible
        logger.info("Recalculated %d lines", count)

    def _line_edited(self, line_index: int):
        self.dependencies.update_line(line_index, self.text_lines[line_index])
        self.update_result(line_index)

    def _evaluate_line(self, index: int,
                       visible: Optional[Dict[str, str]] = None) -> Optional[Tuple[str, str]]:
        if visible is None:
            visible = self._variables_before(index)
        result, assignment = evaluate_with_variables(
            self.text_lines[index], visible, self.results, index
        )
        self.results[index] = result
        self._assignments[index] = assignment
        return assignment

    def _variables_before(self, index: int) -> Dict[str, str]:
        visible: Dict[str, str] = {}
        for assignment in self._assignments[:index]:
            if assignment is not None:
                visible[assignment[0]] = assignment[1]
        return visible

    def _refresh_variables(self):
        self.variables = self._variables_before(len(self._assignments))

    # Content

    def set_content(self, content: str):
        """Replace the whole document; the cursor returns to the top."""
        self.text_lines = deserialize_lines(content)
        self.cursor_line = 0
        self.cursor_col = 0
        self.recalculate_all()

    def get_content(self) -> str:
        return serialize_lines(self.text_lines)

    def highlight_line(self, line_index: int) -> List[HighlightedSpan]:
        return highlight_expression(self.text_lines[line_index], self.variables)

    def save(self, path: PathLike, backend: Optional[FileOperations] = None):
        backend = backend or LocalFileOperations()
        backend.save_content(path, self.get_content())
        logger.info("Saved document with %d lines to %s", len(self.text_lines), path)

    @classmethod
    def load(cls, path: PathLike, backend: Optional[FileOperations] = None) -> "Document":
        backend = backend or LocalFileOperations()
        document = cls()
        document.set_content(backend.load_content(path))
        logger.info("Loaded document with %d lines from %s", len(document.text_lines), path)
        return document

    def __len__(self) -> int:
        return len(self.text_lines)
