"""
Context Window Manager for completion prompts.

Keeps, for the document/editor it is bound to:
- a sliding window of the most recent N lines of the document
- a neighborhood snapshot of K lines either side of the cursor
- an append-only log of accepted suggestions

and composes them into a UserContextBundle on demand. The host never
subscribes this object to anything: it calls the on_* methods when it
sees the matching editor events.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger

from ..schemas import CursorPosition
from .document import DocumentSnapshot, split_lines


DEFAULT_WINDOW_SIZE = 250
DEFAULT_SNAPSHOT_RADIUS = 25


@dataclass(frozen=True)
class NeighborhoodSnapshot:
    """Lines [start_line, end_line) of the document around the cursor."""
    start_line: int = 0
    end_line: int = 0
    text: str = ""

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line

    @property
    def is_empty(self) -> bool:
        return self.end_line <= self.start_line


@dataclass(frozen=True)
class UserContextBundle:
    """Read-only view handed to the prompt builder. Never persisted."""
    recent_lines: Tuple[str, ...] = ()
    accepted_suggestions: Tuple[str, ...] = ()
    surrounding_context: NeighborhoodSnapshot = field(default_factory=NeighborhoodSnapshot)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recent_lines": list(self.recent_lines),
            "accepted_suggestions": list(self.accepted_suggestions),
            "surrounding_context": {
                "start_line": self.surrounding_context.start_line,
                "end_line": self.surrounding_context.end_line,
                "text": self.surrounding_context.text,
            },
        }


def clip_span(cursor_line: int, radius: int, total_lines: int) -> Tuple[int, int]:
    """[max(0, c - K), min(T, c + K)), never inverted."""
    total = max(0, total_lines)
    start = min(max(0, cursor_line - radius), total)
    end = max(start, min(total, cursor_line + radius))
    return start, end


class ContextWindowManager:
    """
    Owns the window, snapshot and accepted log of one document/editor.

    Usage:
        manager = ContextWindowManager(window_size=250, snapshot_radius=25)
        manager.on_active_editor_changed(document, CursorPosition(line=10, column=4))
        bundle = manager.get_context()
    """

    def __init__(
        self,
        window_size: int = DEFAULT_WINDOW_SIZE,
        snapshot_radius: int = DEFAULT_SNAPSHOT_RADIUS,
        max_accepted_suggestions: Optional[int] = None,
    ):
        self.window_size = max(0, int(window_size))
        self.snapshot_radius = max(0, int(snapshot_radius))
        # Caps what the bundle exposes; the log itself is never truncated.
        self.max_accepted_suggestions = max_accepted_suggestions

        self._window: Tuple[str, ...] = ()
        self._snapshot = NeighborhoodSnapshot()
        self._accepted: List[str] = []

        self._document: Optional[DocumentSnapshot] = None
        self._cursor = CursorPosition()

    @classmethod
    def from_settings(cls, settings: Any) -> "ContextWindowManager":
        """Build from a ContextSettings model (see modules.config)."""
        return cls(
            window_size=settings.window_size,
            snapshot_radius=settings.snapshot_radius,
            max_accepted_suggestions=settings.max_accepted_suggestions,
        )

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def window(self) -> Tuple[str, ...]:
        return self._window

    @property
    def snapshot(self) -> NeighborhoodSnapshot:
        return self._snapshot

    @property
    def accepted_suggestions(self) -> Tuple[str, ...]:
        return tuple(self._accepted)

    @property
    def active_document(self) -> Optional[DocumentSnapshot]:
        return self._document

    @property
    def cursor(self) -> CursorPosition:
        return self._cursor

    # -------------------------------------------------------------------------
    # Core operations
    # -------------------------------------------------------------------------

    def recompute_window(self, document_text: str) -> Tuple[str, ...]:
        """Replace the window with the last window_size lines of document_text."""
        lines = split_lines(document_text)
        start = max(0, len(lines) - self.window_size)
        self._window = tuple(lines[start:])
        logger.debug(f"Sliding window recomputed: {len(self._window)}/{len(lines)} lines")
        return self._window

    def recompute_snapshot(self, document_text: str, cursor_line: int, total_lines: int) -> NeighborhoodSnapshot:
        """Snapshot of the lines within snapshot_radius of cursor_line, clipped."""
        lines = split_lines(document_text)
        start, end = clip_span(cursor_line, self.snapshot_radius, min(total_lines, len(lines)))
        self._snapshot = NeighborhoodSnapshot(
            start_line=start,
            end_line=end,
            text="\n".join(lines[start:end]),
        )
        return self._snapshot

    def track_accepted(self, suggestion_text: str) -> None:
        self._accepted.append(suggestion_text)

    def get_context(self) -> UserContextBundle:
        """Recompute against the active document and compose the bundle."""
        accepted: List[str] = list(self._accepted)
        cap = self.max_accepted_suggestions
        if cap is not None:
            accepted = accepted[-cap:] if cap > 0 else []

        if self._document is None:
            return UserContextBundle(accepted_suggestions=tuple(accepted))

        text = self._document.text
        self.recompute_window(text)
        self.recompute_snapshot(text, self._cursor.line, self._document.line_count)

        return UserContextBundle(
            recent_lines=self._window,
            accepted_suggestions=tuple(accepted),
            surrounding_context=self._snapshot,
        )

    # -------------------------------------------------------------------------
    # Host events
    # -------------------------------------------------------------------------

    def on_active_editor_changed(
        self,
        document: Optional[DocumentSnapshot],
        cursor: Optional[CursorPosition] = None,
    ) -> None:
        self._document = document
        self._cursor = cursor or CursorPosition()
        if document is None:
            logger.debug("No active editor; context bundle will be empty")
            return
        self.recompute_window(document.text)

    def on_document_changed(self, document: DocumentSnapshot) -> None:
        self._document = document
        self.recompute_window(document.text)

    def on_cursor_moved(self, cursor: CursorPosition) -> None:
        self._cursor = cursor

    def on_suggestion_accepted(self, suggestion_text: str) -> None:
        self.track_accepted(suggestion_text)
