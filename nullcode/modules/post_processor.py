"""
Completion Post-Processor.

Orchestrates one completion request end to end:

    ContextWindowManager -> prompt -> model -> DuplicationResolver -> RuleEngine

The insertion anchor is always the original cursor: only *what* is inserted
changes, never *where*. A request whose CancellationToken fires before the
formatting stage completes is discarded (None) and leaves no trace in the
context manager.
"""

from __future__ import annotations

from typing import Optional

from loguru import logger

from .completion_client import CompletionClient
from .config import Settings
from .context.document import DocumentSnapshot
from .context.window_manager import ContextWindowManager, UserContextBundle
from .formatting.duplication_resolver import DuplicationResolver
from .formatting.rule_engine import RuleEngine
from .prompt_builder import build_completion_messages
from .schemas import CompletionResult, CursorPosition, IndentSettings


class CancellationToken:
    """Cooperative cancellation flag for one request."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


def line_prefix_at(document: DocumentSnapshot, cursor: CursorPosition) -> str:
    """Text of the cursor's line from column 0 to the cursor (clipped)."""
    line = document.line_at(cursor.line)
    return line[: max(0, cursor.column)]


def _cancelled(token: Optional[CancellationToken]) -> bool:
    return token is not None and token.is_cancelled


class CompletionPostProcessor:
    """
    Glue between the context manager, the model client and the formatters.

    Usage:
        processor = CompletionPostProcessor(ContextWindowManager())
        result = processor.process(document, cursor, raw_text, "python", IndentSettings())
    """

    def __init__(
        self,
        context_manager: ContextWindowManager,
        rule_engine: Optional[RuleEngine] = None,
        resolver: Optional[DuplicationResolver] = None,
        default_indent: Optional[IndentSettings] = None,
    ):
        self.context_manager = context_manager
        self.rule_engine = rule_engine or RuleEngine()
        self.resolver = resolver or DuplicationResolver()
        self.default_indent = default_indent or IndentSettings()

    @classmethod
    def from_settings(cls, settings: Settings) -> "CompletionPostProcessor":
        return cls(
            context_manager=ContextWindowManager.from_settings(settings.context),
            rule_engine=RuleEngine(long_line_threshold=settings.formatting.long_line_threshold),
            default_indent=settings.formatting.indent,
        )

    def build_context(self) -> UserContextBundle:
        return self.context_manager.get_context()

    def accept(self, suggestion_text: str) -> None:
        """Host reported that the user accepted a suggestion."""
        self.context_manager.track_accepted(suggestion_text)

    def process(
        self,
        document: DocumentSnapshot,
        cursor: CursorPosition,
        completion_text: str,
        language_id: Optional[str] = None,
        indent_settings: Optional[IndentSettings] = None,
        token: Optional[CancellationToken] = None,
    ) -> Optional[CompletionResult]:
        """De-duplicate and place a raw completion. None when cancelled."""
        if _cancelled(token):
            logger.debug("Completion request cancelled before post-processing; discarded")
            return None

        if not completion_text:
            return CompletionResult.empty(cursor)

        prefix = line_prefix_at(document, cursor)
        resolution = self.resolver.resolve_with_strategy(prefix, completion_text, language_id)

        if _cancelled(token):
            logger.debug("Completion request cancelled after de-duplication; discarded")
            return None

        if not resolution.text.strip():
            return CompletionResult(text="", insertion_anchor=cursor, strategy=resolution.strategy)

        decision = self.rule_engine.decide(prefix, language_id, indent_settings or self.default_indent)
        text = decision.apply(resolution.text)

        if _cancelled(token):
            logger.debug("Completion request cancelled after formatting; discarded")
            return None

        return CompletionResult(
            text=text,
            insertion_anchor=cursor,
            rule_name=decision.rule_name,
            strategy=resolution.strategy,
        )

    async def complete(
        self,
        document: DocumentSnapshot,
        cursor: CursorPosition,
        client: CompletionClient,
        language_id: Optional[str] = None,
        indent_settings: Optional[IndentSettings] = None,
        token: Optional[CancellationToken] = None,
    ) -> Optional[CompletionResult]:
        """Full round trip: context, prompt, model call, post-processing."""
        prefix = line_prefix_at(document, cursor)
        if not prefix.strip():
            return CompletionResult.empty(cursor)

        bundle = self.build_context()
        messages = build_completion_messages(prefix, language_id, bundle)

        candidate = await client.fetch_completion(messages)
        if _cancelled(token):
            logger.debug("Completion request cancelled during model call; discarded")
            return None

        return self.process(document, cursor, candidate, language_id, indent_settings, token)
