"""
Diagnostics shared by every unitpad layer.

Each layer (units, lexer, evaluator) raises its own exception type, but
they all carry the same Diagnostic payload so a front end can show a
uniform "why is there no result on this line" message.

Author: xwest
"""

from typing import Any, Iterable, List, Optional
from dataclasses import dataclass


@dataclass
class Diagnostic:
    """A single error, warning or hint produced while processing a line."""
    message: str
    location: Optional[Any]
    severity: str  # "error", "warning", "info", "hint"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        severity_prefix = self.severity.upper()
        result = f"{severity_prefix}"
        if self.code:
            result += f"[{self.code}]"
        result += f": {self.message}\n"
        if self.location is not None:
            result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class ErrorRecovery:
    """Spelling suggestions for unknown words."""

    @staticmethod
    def suggest_corrections(word: str, candidates: Iterable[str], max_distance: int = 1) -> List[str]:
        """Return up to three candidates within max_distance edits of word."""
        scored = []
        for candidate in candidates:
            if abs(len(candidate) - len(word)) > max_distance:
                continue
            distance = ErrorRecovery._edit_distance(word, candidate)
            if 0 < distance <= max_distance:
                scored.append((distance, candidate))

        scored.sort()
        return [candidate for _, candidate in scored[:3]]

    @staticmethod
    def _edit_distance(s1: str, s2: str) -> int:
        """Calculate Levenshtein distance between two strings."""
        if len(s1) < len(s2):
            return ErrorRecovery._edit_distance(s2, s1)

        if len(s2) == 0:
            return len(s1)

        previous_row = list(range(len(s2) + 1))
        for i, c1 in enumerate(s1):
            current_row = [i + 1]
            for j, c2 in enumerate(s2):
                insertions = previous_row[j + 1] + 1
                deletions = current_row[j] + 1
                substitutions = previous_row[j] + (c1 != c2)
                current_row.append(min(insertions, deletions, substitutions))
            previous_row = current_row

        return previous_row[-1]
