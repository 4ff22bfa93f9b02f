"""
Duplication Resolver for model completions.

Models frequently restate part of what the user already typed (for example
the signature they were asked to complete). This strips that echo using
three strategies, tried strictly in order; the first one whose output
would not be stripped again is final:

1. construct_signature  - same declaration, same identifier
2. partial_identifier   - completion continues the identifier being typed
3. keyword_boundary     - completion repeats the trailing reserved word

Usage:
    resolver = DuplicationResolver()
    resolver.resolve("calc", "calculate_sum(a, b):", "python")  # "ulate_sum(a, b):"
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Pattern, Sequence, Tuple

from loguru import logger

from .rule_table import normalize_language_id
from .signature_table import DECLARATION_PATTERNS, RESERVED_KEYWORDS


STRATEGY_CONSTRUCT_SIGNATURE = "construct_signature"
STRATEGY_PARTIAL_IDENTIFIER = "partial_identifier"
STRATEGY_KEYWORD_BOUNDARY = "keyword_boundary"

_TRAILING_IDENTIFIER_RE = re.compile(r"\w+$")
# Characters that keep an identifier going, or open a bracket right after it
_CONTINUATION_RE = re.compile(r"[\w$(\[{<]")


@dataclass(frozen=True)
class Resolution:
    """Outcome of one resolve call."""
    text: str
    strategy: Optional[str] = None  # None when nothing was stripped

    @property
    def stripped(self) -> bool:
        return self.strategy is not None


class DuplicationResolver:
    """
    Strips the part of a completion that duplicates the line prefix.

    Pattern and keyword tables are injectable; the defaults come from
    signature_table.
    """

    def __init__(
        self,
        declaration_patterns: Optional[Dict[str, Sequence[Pattern[str]]]] = None,
        reserved_keywords: Optional[Iterable[str]] = None,
    ):
        self.declaration_patterns: Dict[str, Tuple[Pattern[str], ...]] = {
            lang: tuple(patterns)
            for lang, patterns in (declaration_patterns or DECLARATION_PATTERNS).items()
        }
        self.reserved_keywords: Tuple[str, ...] = tuple(
            reserved_keywords if reserved_keywords is not None else RESERVED_KEYWORDS
        )

        self._keyword_patterns = [
            (
                keyword,
                re.compile(r"(?:^|\W)" + re.escape(keyword) + r"$"),
                re.compile(r"^" + re.escape(keyword) + r"\b"),
            )
            for keyword in self.reserved_keywords
        ]

    def resolve(self, line_prefix: str, completion_text: str, language_id: Optional[str] = None) -> str:
        return self.resolve_with_strategy(line_prefix, completion_text, language_id).text

    def resolve_with_strategy(
        self,
        line_prefix: str,
        completion_text: str,
        language_id: Optional[str] = None,
    ) -> Resolution:
        """Like resolve(), but also reports which strategy fired."""
        trimmed = (line_prefix or "").strip()
        if not trimmed or not completion_text:
            return Resolution(text=completion_text)

        for name, strategy in self._strategies():
            result = strategy(trimmed, completion_text, language_id)
            if result is None:
                continue
            # A strip whose output would be stripped again is not a stable cut
            if self._first_strip(trimmed, result, language_id) is not None:
                logger.debug(f"Duplication strategy {name} rejected: output is not stable")
                continue
            logger.debug(f"Duplication stripped by {name}: {len(completion_text) - len(result)} chars")
            return Resolution(text=result, strategy=name)

        return Resolution(text=completion_text)

    def _strategies(self):
        return (
            (STRATEGY_CONSTRUCT_SIGNATURE, self._strip_construct_signature),
            (STRATEGY_PARTIAL_IDENTIFIER, self._strip_partial_identifier),
            (STRATEGY_KEYWORD_BOUNDARY, self._strip_keyword),
        )

    def _first_strip(self, trimmed_prefix: str, completion_text: str, language_id: Optional[str]) -> Optional[str]:
        """Output of the first strategy that would strip completion_text, or None."""
        if not completion_text:
            return None
        for _name, strategy in self._strategies():
            result = strategy(trimmed_prefix, completion_text, language_id)
            if result is not None:
                return result
        return None

    # -------------------------------------------------------------------------
    # Strategy 1: construct signature
    # -------------------------------------------------------------------------

    def _candidate_patterns(self, trimmed_prefix: str, language_id: Optional[str]) -> Tuple[Pattern[str], ...]:
        """Patterns of the given language if one matches the prefix, else every language's."""
        own = self.declaration_patterns.get(normalize_language_id(language_id), ())
        if any(p.match(trimmed_prefix) for p in own):
            return own

        everything = []
        for patterns in self.declaration_patterns.values():
            everything.extend(patterns)
        return tuple(everything)

    def _strip_construct_signature(
        self,
        trimmed_prefix: str,
        completion_text: str,
        language_id: Optional[str],
    ) -> Optional[str]:
        completion = completion_text.lstrip()

        for pattern in self._candidate_patterns(trimmed_prefix, language_id):
            prefix_match = pattern.match(trimmed_prefix)
            if prefix_match is None:
                continue
            completion_match = pattern.match(completion)
            if completion_match is None:
                continue
            if completion_match.group("name") != prefix_match.group("name"):
                continue

            if completion.startswith(trimmed_prefix):
                cut = len(trimmed_prefix)
            else:
                cut = completion_match.end()
            return completion[cut:].lstrip()

        return None

    # -------------------------------------------------------------------------
    # Strategy 2: partial identifier
    # -------------------------------------------------------------------------

    def _strip_partial_identifier(
        self,
        trimmed_prefix: str,
        completion_text: str,
        language_id: Optional[str],
    ) -> Optional[str]:
        match = _TRAILING_IDENTIFIER_RE.search(trimmed_prefix)
        if match is None:
            return None

        identifier = match.group(0)
        if not completion_text.startswith(identifier):
            return None

        following = completion_text[len(identifier):len(identifier) + 1]
        if not following or not _CONTINUATION_RE.match(following):
            return None

        return completion_text[len(identifier):]

    # -------------------------------------------------------------------------
    # Strategy 3: keyword boundary
    # -------------------------------------------------------------------------

    def _strip_keyword(
        self,
        trimmed_prefix: str,
        completion_text: str,
        language_id: Optional[str],
    ) -> Optional[str]:
        completion = completion_text.lstrip()

        for keyword, prefix_re, completion_re in self._keyword_patterns:
            if not prefix_re.search(trimmed_prefix):
                continue
            if not completion_re.match(completion):
                continue
            return completion[len(keyword):].lstrip()

        return None
