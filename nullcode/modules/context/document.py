"""Document snapshots consumed by the context window manager.

The host editor owns the live document; the core only ever sees an
immutable snapshot of it. TextDocument is the in-package implementation,
used by the CLI and the tests.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Protocol, Tuple


EXTENSION_LANGUAGES: Dict[str, str] = {
    ".py": "python",
    ".pyi": "python",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".go": "go",
    ".rs": "rust",
    ".c": "c",
    ".h": "c",
    ".cc": "cpp",
    ".cpp": "cpp",
    ".cxx": "cpp",
    ".hpp": "cpp",
    ".java": "java",
    ".kt": "kotlin",
    ".kts": "kotlin",
    ".scala": "scala",
    ".cs": "csharp",
    ".rb": "ruby",
    ".php": "php",
    ".swift": "swift",
    ".lua": "lua",
    ".sh": "shellscript",
    ".bash": "shellscript",
    ".yaml": "yaml",
    ".yml": "yaml",
}


def language_for_path(path: str) -> str:
    """Best-effort language id from a file extension ("" when unknown)."""
    return EXTENSION_LANGUAGES.get(Path(path).suffix.lower(), "")


def split_lines(text: str) -> List[str]:
    """Split on any newline convention; a trailing newline does not add a line."""
    lines = (text or "").replace("\r\n", "\n").replace("\r", "\n").split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


class DocumentSnapshot(Protocol):
    """What the core reads from a host document."""

    @property
    def text(self) -> str: ...

    @property
    def line_count(self) -> int: ...

    def line_at(self, line: int) -> str: ...

    def get_text(self, start_line: int, start_col: int, end_line: int, end_col: int) -> str: ...


class TextDocument:
    """Immutable document built from a string. All accessors clip to bounds."""

    def __init__(self, text: str, language_id: str = "", uri: Optional[str] = None):
        self._text = (text or "").replace("\r\n", "\n").replace("\r", "\n")
        self._lines = split_lines(self._text)
        self.language_id = language_id
        self.uri = uri

        starts: List[int] = []
        offset = 0
        for line in self._lines:
            starts.append(offset)
            offset += len(line) + 1
        self._line_starts = starts

    @classmethod
    def from_path(cls, path: str, language_id: Optional[str] = None) -> "TextDocument":
        file_path = Path(path)
        content = file_path.read_text(encoding="utf-8", errors="replace")
        return cls(content, language_id=language_id or language_for_path(path), uri=str(file_path))

    @property
    def text(self) -> str:
        return self._text

    @property
    def lines(self) -> Tuple[str, ...]:
        return tuple(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def line_at(self, line: int) -> str:
        if 0 <= line < len(self._lines):
            return self._lines[line]
        return ""

    def offset_at(self, line: int, column: int) -> int:
        if line < 0 or not self._lines:
            return 0
        if line >= len(self._lines):
            return len(self._text)
        column = min(max(0, column), len(self._lines[line]))
        return self._line_starts[line] + column

    def get_text(self, start_line: int, start_col: int, end_line: int, end_col: int) -> str:
        start = self.offset_at(start_line, start_col)
        end = self.offset_at(end_line, end_col)
        if end <= start:
            return ""
        return self._text[start:end]

    def __repr__(self) -> str:
        return f"TextDocument(uri={self.uri!r}, language_id={self.language_id!r}, lines={self.line_count})"
