"""
Declaration patterns and reserved keywords used for de-duplication.

Data only. Each declaration pattern is anchored at the start of a trimmed
line and captures the declared identifier in a ``name`` group.

Module-level statement keywords (import, from, package, using, include,
require, use, module, namespace) are deliberately absent from
RESERVED_KEYWORDS: an echoed statement of that kind is placed on its own
line by the import/package formatting rules instead of being trimmed.
"""

from __future__ import annotations

import re
from typing import Dict, Pattern, Tuple


_VISIBILITY = r"(?:(?:public|private|protected|internal|static|final|abstract|virtual|override|async|synchronized|sealed|extern|unsafe|inline|open|suspend|data|partial)\s+)"

_DECLARATION_SOURCES: Dict[str, Tuple[str, ...]] = {
    "python": (
        r"^(?:async\s+)?def\s+(?P<name>[A-Za-z_]\w*)",
        r"^class\s+(?P<name>[A-Za-z_]\w*)",
    ),
    "javascript": (
        r"^(?:export\s+)?(?:default\s+)?(?:async\s+)?function\*?\s+(?P<name>[\w$]+)",
        r"^(?:export\s+)?(?:default\s+)?class\s+(?P<name>[\w$]+)",
        r"^(?:export\s+)?(?:const|let|var)\s+(?P<name>[\w$]+)",
    ),
    "typescript": (
        r"^(?:export\s+)?(?:default\s+)?(?:async\s+)?function\*?\s+(?P<name>[\w$]+)",
        r"^(?:export\s+)?(?:default\s+)?(?:abstract\s+)?class\s+(?P<name>[\w$]+)",
        r"^(?:export\s+)?(?:declare\s+)?(?:interface|type|enum|namespace)\s+(?P<name>[\w$]+)",
        r"^(?:export\s+)?(?:const|let|var)\s+(?P<name>[\w$]+)",
    ),
    "java": (
        r"^" + _VISIBILITY + r"*(?:class|interface|enum|record)\s+(?P<name>\w+)",
        r"^" + _VISIBILITY + r"+[\w<>\[\],.?]+\s+(?P<name>\w+)\s*\(",
    ),
    "csharp": (
        r"^" + _VISIBILITY + r"*(?:class|interface|struct|enum|record)\s+(?P<name>\w+)",
        r"^" + _VISIBILITY + r"+[\w<>\[\],.?]+\s+(?P<name>\w+)\s*\(",
    ),
    "kotlin": (
        r"^" + _VISIBILITY + r"*fun\s+(?:<[^>]*>\s*)?(?:[\w.]+\.)?(?P<name>\w+)",
        r"^" + _VISIBILITY + r"*(?:class|interface|object|enum\s+class)\s+(?P<name>\w+)",
    ),
    "scala": (
        r"^(?:override\s+)?def\s+(?P<name>\w+)",
        r"^(?:case\s+)?(?:class|object|trait)\s+(?P<name>\w+)",
    ),
    "go": (
        r"^func\s+(?:\([^)]*\)\s*)?(?P<name>\w+)",
        r"^type\s+(?P<name>\w+)",
    ),
    "rust": (
        r"^(?:pub(?:\([^)]*\))?\s+)?(?:const\s+)?(?:async\s+)?(?:unsafe\s+)?fn\s+(?P<name>\w+)",
        r"^(?:pub(?:\([^)]*\))?\s+)?(?:struct|enum|trait|union|mod)\s+(?P<name>\w+)",
        r"^(?:unsafe\s+)?impl(?:<[^>]*>)?\s+(?P<name>\w+)",
    ),
    "c": (
        r"^(?:typedef\s+)?(?:struct|enum|union)\s+(?P<name>\w+)",
        r"^(?:(?:static|inline|extern|const|unsigned|signed)\s+)*[\w*]+\s+\**(?P<name>\w+)\s*\(",
    ),
    "cpp": (
        r"^(?:template\s*<[^>]*>\s*)?(?:class|struct|enum(?:\s+class)?|union|namespace)\s+(?P<name>\w+)",
        r"^(?:(?:static|inline|extern|virtual|constexpr|const|unsigned|signed)\s+)*[\w:<>*&]+\s+[*&]*(?P<name>[\w:~]+)\s*\(",
    ),
    "ruby": (
        r"^def\s+(?:self\.)?(?P<name>[\w?!]+)",
        r"^(?:class|module)\s+(?P<name>[\w:]+)",
    ),
    "php": (
        r"^(?:(?:public|private|protected|static|final|abstract)\s+)*function\s+&?(?P<name>\w+)",
        r"^(?:(?:final|abstract)\s+)?(?:class|interface|trait|enum)\s+(?P<name>\w+)",
    ),
    "swift": (
        r"^(?:(?:public|private|internal|fileprivate|open|static|override|final)\s+)*func\s+(?P<name>\w+)",
        r"^(?:(?:public|private|internal|fileprivate|open|final)\s+)*(?:class|struct|enum|protocol|extension|actor)\s+(?P<name>\w+)",
    ),
    "lua": (
        r"^(?:local\s+)?function\s+(?P<name>[\w.:]+)",
    ),
    "shellscript": (
        r"^function\s+(?P<name>[\w-]+)",
    ),
}

DECLARATION_PATTERNS: Dict[str, Tuple[Pattern[str], ...]] = {
    lang: tuple(re.compile(p) for p in sources)
    for lang, sources in _DECLARATION_SOURCES.items()
}


RESERVED_KEYWORDS: Tuple[str, ...] = (
    # Declarations
    "def", "class", "function", "func", "fn", "fun", "struct", "enum",
    "interface", "trait", "impl", "type", "const", "let", "var", "val",
    "async", "await", "lambda", "extends", "implements", "template",
    "typename", "where",
    # Control flow
    "if", "else", "elif", "for", "foreach", "while", "do", "switch", "case",
    "return", "yield", "break", "continue", "try", "catch", "except",
    "finally", "throw", "throws", "raise", "with", "match", "when", "loop",
    "in", "of", "new", "delete", "typeof", "instanceof", "not", "and", "or",
    "is", "go", "defer", "select", "unless", "until", "then", "end",
    "begin", "goto", "pass", "assert", "global", "nonlocal", "sizeof",
    # Visibility / modifiers
    "public", "private", "protected", "internal", "export", "default",
    "static", "abstract", "final", "override", "virtual", "readonly",
    "sealed", "pub", "mut", "unsafe", "extern", "volatile", "synchronized",
    # Common framework keywords
    "self", "this", "super", "useState", "useEffect", "useMemo",
    "useCallback", "describe", "it", "expect", "console", "print",
)
