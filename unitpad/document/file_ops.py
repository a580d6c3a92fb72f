"""
Persistence for unitpad documents.

A document is stored as its lines joined with "\\n", nothing else; results
are always recomputed on load. Storage goes through a FileOperations
backend so front ends without a filesystem can supply their own.

Author: xwest
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class FileOperationError(Exception):
    """Raised when a backend cannot read or write a document."""

    def __init__(self, message: str, path: PathLike):
        super().__init__(f"{message}: {path}")
        self.path = Path(path)


def serialize_lines(lines: List[str]) -> str:
    return "\n".join(lines)


def deserialize_lines(content: str) -> List[str]:
    """
    Split stored content back into lines.

    Empty content is a single empty line, and a trailing newline keeps its
    trailing empty line, so serialize_lines(deserialize_lines(s)) == s.
    """
    return content.split("\n")


class FileOperations(ABC):
    """Storage backend for document text."""

    @abstractmethod
    def save_content(self, path: PathLike, content: str):
        """Write content to path, replacing anything already there."""

    @abstractmethod
    def load_content(self, path: PathLike) -> str:
        """Read the content previously saved at path."""


class LocalFileOperations(FileOperations):
    """Backend for the local filesystem; files are UTF-8 with untranslated newlines."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def save_content(self, path: PathLike, content: str):
        path = Path(path)
        try:
            with path.open("w", encoding=self.encoding, newline="") as f:
                f.write(content)
        except OSError as e:
            raise FileOperationError(f"Could not save document ({e.strerror})", path) from e
        logger.info("Saved %d characters to %s", len(content), path)

    def load_content(self, path: PathLike) -> str:
        path = Path(path)
        try:
            with path.open("r", encoding=self.encoding, newline="") as f:
                content = f.read()
        except OSError as e:
            raise FileOperationError(f"Could not load document ({e.strerror})", path) from e
        except UnicodeDecodeError as e:
            raise FileOperationError(f"Document is not valid {self.encoding}", path) from e
        logger.info("Loaded %d characters from %s", len(content), path)
        return content
