"""
unitpad Document Package

The editable multi-line document: incremental recalculation, variable
dependencies, line reference renumbering, highlighting and persistence.

Author: xwest
"""

from .state import Document
from .dependencies import DependencyIndex
from .highlighting import HighlightType, HighlightedSpan, Highlighter, highlight_expression
from .file_ops import (
    FileOperations, FileOperationError, LocalFileOperations, serialize_lines, deserialize_lines
)
from .references import (
    INVALID_REFERENCE, renumber_for_insertion, renumber_for_deletion,
    update_references_for_insertion, update_references_for_deletion
)

__all__ = [
    "Document",
    "DependencyIndex",
    "HighlightType",
    "HighlightedSpan",
    "Highlighter",
    "highlight_expression",
    "FileOperations",
    "FileOperationError",
    "LocalFileOperations",
    "serialize_lines",
    "deserialize_lines",
    "INVALID_REFERENCE",
    "renumber_for_insertion",
    "renumber_for_deletion",
    "update_references_for_insertion",
    "update_references_for_deletion",
]
