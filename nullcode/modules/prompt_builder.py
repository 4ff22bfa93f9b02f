"""Prompt assembly for completion requests.

Cache-friendly layout: the stable instructions go in the system message and
everything request-specific (context bundle, typed line) in the user message.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from .context.window_manager import UserContextBundle


COMPLETION_FORMAT_INSTRUCTIONS = (
    'Output STRICT JSON: {"codeSnippet": "<the code to insert>", "language": "<language id>"}\n'
    "Do not include extra keys, markdown fences or explanations."
)

_STABLE_PREFIX = (
    "You are a helpful code assistant. Your task is to complete code snippets.\n"
    "Only complete the code from where the user's input ends. "
    "Do not repeat or duplicate the user's input.\n"
    + COMPLETION_FORMAT_INSTRUCTIONS
)

MAX_ACCEPTED_IN_PROMPT = 5
MAX_RECENT_LINES_IN_PROMPT = 60


def build_messages_with_stable_prefix(*, stable_prefix: str, variable_suffix: str) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": (stable_prefix or "").strip()},
        {"role": "user", "content": variable_suffix or ""},
    ]


def render_context(bundle: UserContextBundle) -> str:
    """Plain-text rendering of a context bundle for the user message."""
    parts: List[str] = []

    snapshot = bundle.surrounding_context
    if not snapshot.is_empty:
        parts.append(f"SURROUNDING_CONTEXT (lines {snapshot.start_line + 1}-{snapshot.end_line}):")
        parts.append(snapshot.text)
        parts.append("")
    elif bundle.recent_lines:
        recent = bundle.recent_lines[-MAX_RECENT_LINES_IN_PROMPT:]
        parts.append(f"RECENT_LINES (last {len(recent)}):")
        parts.append("\n".join(recent))
        parts.append("")

    if bundle.accepted_suggestions:
        parts.append("RECENTLY_ACCEPTED_SUGGESTIONS:")
        for suggestion in bundle.accepted_suggestions[-MAX_ACCEPTED_IN_PROMPT:]:
            parts.append(f"- {suggestion}")
        parts.append("")

    return "\n".join(parts)


def build_completion_messages(
    line_prefix: str,
    language_id: Optional[str],
    bundle: Optional[UserContextBundle] = None,
) -> List[Dict[str, str]]:
    """Messages asking the model to continue line_prefix."""
    variable = [f"LANGUAGE: {language_id or 'plaintext'}", ""]
    if bundle is not None:
        rendered = render_context(bundle)
        if rendered:
            variable.append(rendered)

    variable.append("CURRENT_LINE (complete after the last character):")
    variable.append(line_prefix)

    return build_messages_with_stable_prefix(
        stable_prefix=_STABLE_PREFIX,
        variable_suffix="\n".join(variable),
    )
