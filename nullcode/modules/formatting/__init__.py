"""
Completion Formatting Package.

Turns a raw model completion into the text inserted at the cursor.

Components:
- RuleTable: Ordered, immutable line-prefix rules (general + per-language)
- RuleEngine: First-match-wins placement decision (inline / new line / indent)
- DuplicationResolver: Strips text the completion echoes from the prefix
"""

from .rule_table import (
    DEFAULT_LONG_LINE_THRESHOLD,
    DEFAULT_RULE_TABLE,
    GENERAL_RULES,
    LANGUAGE_RULES,
    Rule,
    RuleTable,
    build_rule_table,
    long_line_rule,
    normalize_language_id,
)

from .rule_engine import (
    FormattingDecision,
    RuleEngine,
    leading_whitespace,
)

from .duplication_resolver import (
    DuplicationResolver,
    Resolution,
    STRATEGY_CONSTRUCT_SIGNATURE,
    STRATEGY_KEYWORD_BOUNDARY,
    STRATEGY_PARTIAL_IDENTIFIER,
)

__all__ = [
    # Rule Table
    "DEFAULT_LONG_LINE_THRESHOLD",
    "DEFAULT_RULE_TABLE",
    "GENERAL_RULES",
    "LANGUAGE_RULES",
    "Rule",
    "RuleTable",
    "build_rule_table",
    "long_line_rule",
    "normalize_language_id",
    # Rule Engine
    "FormattingDecision",
    "RuleEngine",
    "leading_whitespace",
    # Duplication Resolution
    "DuplicationResolver",
    "Resolution",
    "STRATEGY_CONSTRUCT_SIGNATURE",
    "STRATEGY_KEYWORD_BOUNDARY",
    "STRATEGY_PARTIAL_IDENTIFIER",
]
