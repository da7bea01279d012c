"""Error taxonomy shared by the load, classify and render stages."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class GodoxError(Exception):
    """Base class for errors that abort a documentation run."""


class SourceIOError(GodoxError):
    """Raised when a source directory or file cannot be opened."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class ParseError(GodoxError):
    """Raised when a source file is not syntactically valid Go."""

    def __init__(
        self,
        path: Path | str,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        self.path = str(path)
        self.message = message
        self.line = line
        self.column = column
        location = self.path
        if line is not None:
            location = f"{location}:{line}"
            if column is not None:
                location = f"{location}:{column}"
        super().__init__(f"{location}: {message}")


class UnsupportedExprError(GodoxError):
    """Raised when a type expression has a shape the renderer does not know.

    ``kind`` is the syntax node type (for example ``channel_type``) and
    ``text`` the expression as written. ``path`` and ``line`` are filled in
    once the error crosses a file boundary, so the final diagnostic points at
    the offending source location.
    """

    def __init__(
        self,
        kind: str,
        text: str,
        path: Optional[str] = None,
        line: Optional[int] = None,
    ) -> None:
        self.kind = kind
        self.text = text
        self.path = path
        self.line = line
        super().__init__(self._format())

    def _format(self) -> str:
        message = f"unsupported expression {self.kind}: {self.text}"
        if self.path is None:
            return message
        location = self.path if self.line is None else f"{self.path}:{self.line}"
        return f"{location}: {message}"

    def at(self, path: str) -> "UnsupportedExprError":
        """Return a copy of this error that names the file it came from."""
        if self.path is not None:
            return self
        return UnsupportedExprError(self.kind, self.text, path=path, line=self.line)


__all__ = ["GodoxError", "ParseError", "SourceIOError", "UnsupportedExprError"]
