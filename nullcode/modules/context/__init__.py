"""
Context Package for completion prompts.

Components:
- TextDocument / DocumentSnapshot: Immutable view of the host document
- ContextWindowManager: Sliding window, neighborhood snapshot, accepted log
- UserContextBundle: Composed read-only view for the prompt builder
"""

from .document import (
    DocumentSnapshot,
    EXTENSION_LANGUAGES,
    TextDocument,
    language_for_path,
    split_lines,
)

from .window_manager import (
    ContextWindowManager,
    DEFAULT_SNAPSHOT_RADIUS,
    DEFAULT_WINDOW_SIZE,
    NeighborhoodSnapshot,
    UserContextBundle,
    clip_span,
)

__all__ = [
    # Documents
    "DocumentSnapshot",
    "EXTENSION_LANGUAGES",
    "TextDocument",
    "language_for_path",
    "split_lines",
    # Window management
    "ContextWindowManager",
    "DEFAULT_SNAPSHOT_RADIUS",
    "DEFAULT_WINDOW_SIZE",
    "NeighborhoodSnapshot",
    "UserContextBundle",
    "clip_span",
]
