"""
Tests for the completion formatting rule table and rule engine.

Covers:
- Import / control-flow placement with editor indentation
- First-match-wins ordering and language rules before general rules
- Inline-forcing language rules
- Long-line threshold
- Blank prefixes and unknown languages
"""

import re

import pytest

from nullcode.modules.formatting.rule_engine import INLINE, FormattingDecision, RuleEngine, leading_whitespace
from nullcode.modules.formatting.rule_table import (
    GENERAL_RULES,
    Rule,
    RuleTable,
    build_rule_table,
    long_line_rule,
    normalize_language_id,
)
from nullcode.modules.schemas import IndentSettings


@pytest.fixture
def engine():
    return RuleEngine()


class TestPlacement:
    """Where a completion lands relative to the cursor."""

    def test_import_breaks_without_extra_indent(self, engine):
        decision = engine.decide("import ", "javascript", IndentSettings())

        assert decision.insert_on_new_line is True
        assert decision.indentation == ""
        assert decision.rule_name == "import"
        assert decision.apply("import React from 'react';") == "\nimport React from 'react';"

    def test_control_flow_keeps_line_indent_and_adds_one_unit(self, engine):
        decision = engine.decide("  if (x > 0) ", "javascript", IndentSettings(insert_spaces=True, tab_size=4))

        assert decision.rule_name == "control_flow"
        assert decision.indentation == "      "
        assert decision.apply("if (x > 0) { return true; }") == "\n      if (x > 0) { return true; }"

    def test_tab_indentation(self, engine):
        decision = engine.decide("\tfor (let i = 0; i < n; i++) {", "javascript", IndentSettings(insert_spaces=False))

        assert decision.insert_on_new_line is True
        assert decision.indentation == "\t\t"

    def test_python_block_header(self, engine):
        decision = engine.decide("    def add(a, b):", "python", IndentSettings(tab_size=4))

        assert decision.rule_name == "python_block_header"
        assert decision.indentation == " " * 8

    def test_trailing_operator_breaks_at_same_indent(self, engine):
        decision = engine.decide("    total = price +", None, IndentSettings())

        assert decision.rule_name == "trailing_operator"
        assert decision.indentation == "    "

    def test_postfix_increment_is_not_an_operator(self, engine):
        assert engine.decide("i++", None) == INLINE

    def test_decorator_breaks(self, engine):
        decision = engine.decide("@app.route('/')", "python")

        assert decision.rule_name == "decorator"
        assert decision.insert_on_new_line is True
        assert decision.indentation == ""

    def test_open_bracket_indents(self, engine):
        decision = engine.decide("x = [", None, IndentSettings(tab_size=2))

        assert decision.rule_name == "open_bracket"
        assert decision.indentation == "  "

    def test_function_call_stays_inline(self, engine):
        decision = engine.decide("foo(bar)", "python")

        assert decision == INLINE
        assert decision.rule_name is None
        assert decision.apply("  # trailing") == "  # trailing"

    @pytest.mark.parametrize("prefix", ["", "   ", "\t"])
    def test_blank_prefix_is_inline(self, engine, prefix):
        decision = engine.decide(prefix, "python", IndentSettings())

        assert decision.insert_on_new_line is False
        assert decision.indentation == ""

    def test_apply_strips_leading_whitespace_on_break(self):
        decision = FormattingDecision(insert_on_new_line=True, indentation="  ", rule_name="x")
        assert decision.apply("   body") == "\n  body"


class TestOrdering:
    """First match wins; language rules are consulted first."""

    def test_language_rule_overrides_general(self, engine):
        general = engine.decide("const f = (a) =>", None)
        js = engine.decide("const f = (a) =>", "javascript")

        assert general.rule_name == "arrow_function"
        assert general.insert_on_new_line is True
        assert js.rule_name == "js_arrow_expression"
        assert js.insert_on_new_line is False

    def test_language_aliases_share_rules(self, engine):
        assert engine.decide("const f = (a) =>", "typescriptreact").rule_name == "js_arrow_expression"
        assert normalize_language_id("TypeScriptReact") == "typescript"

    def test_python_lambda_forces_inline(self, engine):
        decision = engine.decide("key = lambda item:", "python")

        assert decision.rule_name == "python_lambda"
        assert decision.insert_on_new_line is False

    @pytest.mark.parametrize("prefix", ["match(pattern, s)", "select(rows)", "when(ready)", "with_retry(fn)"])
    def test_calls_named_like_keywords_stay_inline(self, engine, prefix):
        assert engine.decide(prefix, None) == INLINE

    @pytest.mark.parametrize(
        "prefix,language",
        [("when (state) {", "kotlin"), ("match value {", "rust"), ("select {", "go")],
    )
    def test_keyword_headers_still_break(self, engine, prefix, language):
        decision = engine.decide(prefix, language, IndentSettings())

        assert decision.rule_name == "control_flow"
        assert decision.insert_on_new_line is True

    def test_else_if_matches_control_flow_before_block_opener(self, engine):
        assert engine.decide("} else if (ready) {", None).rule_name == "control_flow"

    def test_first_declared_rule_wins(self):
        table = RuleTable([
            Rule("first", re.compile(r"foo"), should_break=True),
            Rule("second", re.compile(r"foo"), should_break=True, indent_next_line=True),
        ])
        engine = RuleEngine(rule_table=table)

        assert engine.match("foo").name == "first"
        assert engine.decide("foo").indentation == ""

    def test_custom_language_rule_precedes_general(self):
        table = RuleTable(
            [Rule("always_break", re.compile(r"."), should_break=True)],
            [Rule("py_inline", re.compile(r"."), should_break=False, languages=frozenset({"python"}))],
        )
        engine = RuleEngine(rule_table=table)

        assert engine.decide("x", "python").rule_name == "py_inline"
        assert engine.decide("x", "go").rule_name == "always_break"

    def test_language_rule_without_languages_is_rejected(self):
        with pytest.raises(ValueError):
            RuleTable([], [Rule("orphan", re.compile("x"), should_break=True)])

    def test_decision_is_deterministic(self, engine):
        first = engine.decide("  if (x > 0) ", "javascript", IndentSettings())
        second = engine.decide("  if (x > 0) ", "javascript", IndentSettings())
        assert first == second


class TestLongLine:
    def test_long_prefix_breaks(self, engine):
        decision = engine.decide("x" * 130, None)

        assert decision.rule_name == "long_line"
        assert decision.insert_on_new_line is True
        assert decision.indentation == ""

    def test_threshold_is_configurable(self):
        assert RuleEngine(long_line_threshold=200).decide("x" * 130, None) == INLINE

    def test_long_line_rule_is_last(self):
        table = build_rule_table(80)
        assert table.general_rules[-1].name == "long_line"
        assert table.general_rules[:-1] == GENERAL_RULES

    def test_exact_threshold_does_not_match(self):
        rule = long_line_rule(10)
        assert not rule.matches("x" * 10)
        assert rule.matches("x" * 11)


def test_leading_whitespace():
    assert leading_whitespace("  \tfoo") == "  \t"
    assert leading_whitespace("foo") == ""
    assert leading_whitespace("") == ""
