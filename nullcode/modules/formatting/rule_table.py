"""
Rule Table for Completion Formatting.

Ordered, immutable line-prefix rules deciding whether a completion is
inserted inline or on a new line (optionally one indent level deeper).

Evaluation order is part of the contract:
- language-specific rules for the active language, in declaration order
- then the general rules, in declaration order
- first match wins

Adding a language means adding rows to LANGUAGE_RULES, not code.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Pattern, Sequence, Tuple


DEFAULT_LONG_LINE_THRESHOLD = 120


@dataclass(frozen=True)
class Rule:
    """A single formatting rule matched against the line prefix."""
    name: str
    pattern: Pattern[str]
    should_break: bool
    indent_next_line: bool = False
    languages: Optional[FrozenSet[str]] = None  # None = general rule

    def matches(self, line_prefix: str) -> bool:
        return self.pattern.search(line_prefix) is not None


def _rule(
    name: str,
    pattern: str,
    should_break: bool = True,
    indent_next_line: bool = False,
    languages: Optional[Iterable[str]] = None,
) -> Rule:
    return Rule(
        name=name,
        pattern=re.compile(pattern),
        should_break=should_break,
        indent_next_line=indent_next_line,
        languages=frozenset(languages) if languages is not None else None,
    )


# Language ids as reported by editors, folded onto the ids used in the tables.
LANGUAGE_ALIASES: Dict[str, str] = {
    "javascriptreact": "javascript",
    "js": "javascript",
    "jsx": "javascript",
    "mjs": "javascript",
    "typescriptreact": "typescript",
    "ts": "typescript",
    "tsx": "typescript",
    "py": "python",
    "python3": "python",
    "golang": "go",
    "rs": "rust",
    "c++": "cpp",
    "cc": "cpp",
    "objective-c": "c",
    "objective-cpp": "cpp",
    "cs": "csharp",
    "c#": "csharp",
    "kt": "kotlin",
    "kts": "kotlin",
    "rb": "ruby",
    "sh": "shellscript",
    "bash": "shellscript",
    "zsh": "shellscript",
    "yml": "yaml",
}


def normalize_language_id(language_id: Optional[str]) -> str:
    """Lower-case and de-alias a language id. Unknown ids pass through."""
    lang = (language_id or "").strip().lower()
    return LANGUAGE_ALIASES.get(lang, lang)


# =============================================================================
# GENERAL RULES
# =============================================================================

_MODIFIERS = r"(?:export|default|public|private|protected|internal|static|final|abstract|virtual|override|async|synchronized|sealed|extern|unsafe|inline|pub|suspend|open)"

GENERAL_RULES: Tuple[Rule, ...] = (
    # Import / include / using statements go on their own line
    _rule(
        "import",
        r"^\s*(?:import\b|#\s*include\b|using\s+[\w.]+|from\s+[\w.]+\s+import\b)",
    ),
    # Package / namespace declarations (brace form falls through to block_opener)
    _rule(
        "package",
        r"^\s*(?:package|namespace|module)\s+[\w.\\:]+\s*;?\s*$",
    ),
    # Function signatures: keyword forms with an optional return annotation
    _rule(
        "function_signature",
        r"^\s*(?:" + _MODIFIERS + r"\s+)*(?:function\*?|def|fn|func|fun|sub)\b.*\)"
        r"\s*(?:(?:->|:)\s*[^;{}=]+?\s*)?[{:]?\s*$",
        indent_next_line=True,
    ),
    # Arrow functions assigned to a binding, with a block body
    _rule(
        "arrow_function",
        r"^\s*(?:export\s+)?(?:const|let|var)\s+[\w$]+\s*(?::[^=]+)?=\s*(?:async\s+)?"
        r"(?:\([^)]*\)|[\w$]+)\s*(?::\s*[^=]+)?=>\s*\{?\s*$",
        indent_next_line=True,
    ),
    # Typed method signatures (Java, C#, C++): at least one modifier
    _rule(
        "method_signature",
        r"^\s*(?:" + _MODIFIERS + r"\s+)+[\w<>\[\],.?]+\s+[\w$]+\s*\([^;]*\)"
        r"\s*(?:throws\s+[\w.,\s]+?)?\s*\{?\s*$",
        indent_next_line=True,
    ),
    # Class-like declarations
    _rule(
        "class_declaration",
        r"^\s*(?:(?:export|default|public|private|protected|internal|abstract|final|sealed|static|partial|data|pub|open)\s+)*"
        r"(?:class|interface|struct|enum|trait|impl|record|protocol|extension|union)\s+[\w$<][^;]*$",
        indent_next_line=True,
    ),
    # Control-flow headers with a condition. match/select/when/with double as
    # ordinary function names, so a closing ")" alone is not enough for them.
    _rule(
        "control_flow",
        r"^\s*(?:\}\s*)?(?:"
        r"(?:else\s+if|if|elif|for|foreach|while|switch|catch|except|unless|until|guard)\b.*(?:\)|:|\{|\bthen|\bdo)"
        r"|(?:match|select|when|with)\b.*(?::|\{|\bthen|\bdo)"
        r")\s*$",
        indent_next_line=True,
    ),
    # Control-flow headers without a condition
    _rule(
        "control_flow_bare",
        r"^\s*(?:\}\s*)?(?:else|try|finally|do|loop|begin|defer)\s*[:{]\s*$",
        indent_next_line=True,
    ),
    # Untyped method definitions (JS classes, object literals)
    _rule(
        "method_definition",
        r"^\s*(?:(?:async|static|get|set)\s+)*[\w$]+\s*\([^;]*\)\s*\{\s*$",
        indent_next_line=True,
    ),
    # Anything else that opens a block
    _rule(
        "block_opener",
        r"\{\s*$",
        indent_next_line=True,
    ),
    # Decorators, annotations and attributes
    _rule(
        "decorator",
        r"^\s*(?:@[\w.]+(?:\(.*\))?|#\[.*\]|\[[A-Z][\w.]*(?:\(.*\))?\])\s*$",
    ),
    # Trailing binary / assignment operators (not postfix ++ / --, not -> or =>)
    _rule(
        "trailing_operator",
        r"(?:(?<!\+)\+|(?<!-)-|[*/%=&|^]|[<>!]=|<<|>>>?|\?\?|\band|\bor)\s*$",
    ),
    # Opening array literal
    _rule(
        "open_bracket",
        r"(?:^\s*|[=:,(]\s*|\breturn\s+)\[\s*$",
        indent_next_line=True,
    ),
    # Leading-dot chain link left open: .then(
    _rule(
        "method_chain_open",
        r"^\s*\.[\w$]+\s*\(\s*$",
        indent_next_line=True,
    ),
    # Complete leading-dot chain link: the next link continues below
    _rule(
        "method_chain",
        r"^\s*\.[\w$]+\s*\(.*\)\s*$",
    ),
)


def long_line_rule(threshold: int = DEFAULT_LONG_LINE_THRESHOLD) -> Rule:
    """Break after prefixes longer than threshold characters."""
    return _rule("long_line", r"^.{%d,}" % (max(0, int(threshold)) + 1))


# =============================================================================
# LANGUAGE RULES
# =============================================================================

_JS_TS = ("javascript", "typescript")
_C_FAMILY = ("c", "cpp")
_JVM_DOTNET = ("java", "kotlin", "scala", "csharp")

LANGUAGE_RULES: Tuple[Rule, ...] = (
    # Python
    _rule("python_lambda", r"\blambda\b[^:]*:\s*$", should_break=False, languages=("python",)),
    _rule(
        "python_block_header",
        r"^\s*(?:async\s+)?(?:def|class|if|elif|else|for|while|with|try|except|finally|match|case)\b.*:\s*$",
        indent_next_line=True,
        languages=("python",),
    ),
    _rule("python_line_continuation", r"\\\s*$", indent_next_line=True, languages=("python",)),
    # JavaScript / TypeScript
    _rule(
        "js_require",
        r"^\s*(?:const|let|var)\s+[\w${}\s,]+=\s*require\s*\(",
        languages=_JS_TS,
    ),
    _rule("js_arrow_block", r"=>\s*\{\s*$", indent_next_line=True, languages=_JS_TS),
    _rule("js_arrow_expression", r"=>\s*$", should_break=False, languages=_JS_TS),
    _rule(
        "ts_type_alias",
        r"^\s*(?:export\s+)?(?:declare\s+)?type\s+[\w$]+(?:<[^>]*>)?\s*=\s*$",
        indent_next_line=True,
        languages=("typescript",),
    ),
    # Go
    _rule("go_grouped_decl", r"^\s*(?:import|var|const|type)\s*\(\s*$", indent_next_line=True, languages=("go",)),
    # Rust
    _rule("rust_use", r"^\s*(?:pub(?:\([^)]*\))?\s+)?(?:use|mod|extern\s+crate)\b", languages=("rust",)),
    _rule("rust_closure", r"\|[^|]*\|\s*$", should_break=False, languages=("rust",)),
    # C / C++
    _rule("c_include", r"^\s*#\s*(?:include|import)\b", languages=_C_FAMILY),
    _rule(
        "c_preprocessor",
        r"^\s*#\s*(?:define|if|ifdef|ifndef|else|elif|endif|pragma|undef)\b",
        languages=_C_FAMILY,
    ),
    _rule("cpp_template", r"^\s*template\s*<.*>\s*$", languages=("cpp",)),
    # JVM / .NET
    _rule("jvm_annotation", r"^\s*@\w+(?:\(.*\))?\s*$", languages=_JVM_DOTNET),
    _rule("kotlin_lambda_params", r"\{\s*[\w\s,:<>]*->\s*$", indent_next_line=True, languages=("kotlin",)),
    # Ruby
    _rule(
        "ruby_require",
        r"^\s*(?:require|require_relative|include|extend|load)\b",
        languages=("ruby",),
    ),
    _rule(
        "ruby_block_header",
        r"^\s*(?:def|class|module|if|unless|while|until|case|begin|for)\b.*$",
        indent_next_line=True,
        languages=("ruby",),
    ),
    _rule("ruby_do_block", r"\bdo(?:\s*\|[^|]*\|)?\s*$", indent_next_line=True, languages=("ruby",)),
    # PHP
    _rule("php_open_tag", r"^\s*<\?php\b", languages=("php",)),
    _rule("php_use", r"^\s*(?:namespace|use|require_once|include_once)\b", languages=("php",)),
    # Shell / Lua
    _rule("shell_block", r"\b(?:then|do)\s*$", indent_next_line=True, languages=("shellscript", "lua")),
    _rule(
        "lua_function",
        r"^\s*(?:local\s+)?function\b.*\)\s*$",
        indent_next_line=True,
        languages=("lua",),
    ),
    # YAML
    _rule("yaml_mapping", r"^\s*(?:-\s+)?[\w.\-\"']+\s*:\s*$", indent_next_line=True, languages=("yaml",)),
)


class RuleTable:
    """
    Immutable ordered rule configuration.

    Usage:
        table = RuleTable(GENERAL_RULES, LANGUAGE_RULES)
        for rule in table.ordered_rules("python"):
            ...
    """

    def __init__(self, general_rules: Sequence[Rule], language_rules: Sequence[Rule] = ()):
        self._general: Tuple[Rule, ...] = tuple(general_rules)

        by_language: Dict[str, List[Rule]] = {}
        for rule in language_rules:
            if not rule.languages:
                raise ValueError(f"Language rule {rule.name!r} declares no languages")
            for lang in rule.languages:
                by_language.setdefault(lang, []).append(rule)
        self._by_language: Dict[str, Tuple[Rule, ...]] = {k: tuple(v) for k, v in by_language.items()}

    @property
    def general_rules(self) -> Tuple[Rule, ...]:
        return self._general

    @property
    def languages(self) -> FrozenSet[str]:
        return frozenset(self._by_language)

    def rules_for(self, language_id: Optional[str]) -> Tuple[Rule, ...]:
        """Language overrides only, in declaration order."""
        return self._by_language.get(normalize_language_id(language_id), ())

    def ordered_rules(self, language_id: Optional[str]) -> Tuple[Rule, ...]:
        """Overrides first, then the general list."""
        return self.rules_for(language_id) + self._general


def build_rule_table(long_line_threshold: int = DEFAULT_LONG_LINE_THRESHOLD) -> RuleTable:
    return RuleTable(GENERAL_RULES + (long_line_rule(long_line_threshold),), LANGUAGE_RULES)


DEFAULT_RULE_TABLE = build_rule_table()
