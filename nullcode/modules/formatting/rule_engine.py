"""
Rule Engine for Completion Formatting.

Decides whether a completion is inserted inline or on a new line, and
with which indentation, by scanning the RuleTable against the line prefix.

Usage:
    engine = RuleEngine()
    decision = engine.decide("  if (x > 0) ", "javascript", IndentSettings())
    text = decision.apply("return true;")
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from ..schemas import IndentSettings
from .rule_table import DEFAULT_RULE_TABLE, Rule, RuleTable, build_rule_table


_LEADING_WS_RE = re.compile(r"^[ \t]*")


def leading_whitespace(line: str) -> str:
    match = _LEADING_WS_RE.match(line or "")
    return match.group(0) if match else ""


@dataclass(frozen=True)
class FormattingDecision:
    """How a completion is merged at the cursor."""
    insert_on_new_line: bool = False
    indentation: str = ""
    rule_name: Optional[str] = None  # None when no rule matched

    def apply(self, completion_text: str) -> str:
        if not self.insert_on_new_line:
            return completion_text
        return f"\n{self.indentation}{completion_text.lstrip()}"


INLINE = FormattingDecision()


class RuleEngine:
    """
    First-match-wins evaluation of an immutable RuleTable.

    Language-specific rules are always consulted before general rules.
    """

    def __init__(self, rule_table: Optional[RuleTable] = None, long_line_threshold: Optional[int] = None):
        if rule_table is None:
            rule_table = DEFAULT_RULE_TABLE if long_line_threshold is None else build_rule_table(long_line_threshold)
        self.rule_table = rule_table

    def match(self, line_prefix: str, language_id: Optional[str] = None) -> Optional[Rule]:
        """Return the first matching rule, or None."""
        if not line_prefix or not line_prefix.strip():
            return None
        for rule in self.rule_table.ordered_rules(language_id):
            if rule.matches(line_prefix):
                return rule
        return None

    def decide(
        self,
        line_prefix: str,
        language_id: Optional[str] = None,
        indent_settings: Optional[IndentSettings] = None,
    ) -> FormattingDecision:
        rule = self.match(line_prefix, language_id)
        if rule is None:
            return INLINE

        logger.debug(f"Formatting rule matched: {rule.name} (language={language_id or '-'})")

        if not rule.should_break:
            return FormattingDecision(insert_on_new_line=False, indentation="", rule_name=rule.name)

        indentation = leading_whitespace(line_prefix)
        if rule.indent_next_line:
            settings = indent_settings or IndentSettings()
            indentation += settings.indent_unit

        return FormattingDecision(insert_on_new_line=True, indentation=indentation, rule_name=rule.name)
