"""
nullcode - Core Data Structures (Pydantic Schemas)

Defines the models exchanged with the host editor:
- CursorPosition: Line/column of the cursor (0-indexed)
- IndentSettings: Editor indentation preferences
- CompletionResult: Final insertable text plus its anchor
- CompletionPayload: Structured answer expected from the model
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# EDITOR STATE
# =============================================================================


class CursorPosition(BaseModel):
    """Cursor location. Values outside the document are clipped, never rejected."""

    line: int = 0
    column: int = 0


class IndentSettings(BaseModel):
    """Indentation preferences sourced from editor configuration."""

    insert_spaces: bool = Field(default=True, description="Indent with spaces instead of a tab")
    tab_size: int = Field(default=4, ge=1, le=16, description="Spaces per indent unit")

    @property
    def indent_unit(self) -> str:
        if self.insert_spaces:
            return " " * self.tab_size
        return "\t"


# =============================================================================
# OUTPUT
# =============================================================================


class CompletionResult(BaseModel):
    """Text to splice into the document at insertion_anchor."""

    text: str = ""
    insertion_anchor: CursorPosition = Field(default_factory=CursorPosition)
    rule_name: Optional[str] = Field(default=None, description="Formatting rule that fired, if any")
    strategy: Optional[str] = Field(default=None, description="De-duplication strategy that fired, if any")

    @property
    def is_empty(self) -> bool:
        return not self.text

    @classmethod
    def empty(cls, anchor: CursorPosition) -> "CompletionResult":
        return cls(text="", insertion_anchor=anchor)


# =============================================================================
# MODEL RESPONSE
# =============================================================================


class CompletionPayload(BaseModel):
    """Structured output the model is asked to produce."""

    code_snippet: str = Field(..., alias="codeSnippet")
    language: str = ""

    model_config = {"populate_by_name": True}

    @field_validator("code_snippet")
    @classmethod
    def _strip_snippet(cls, v: str) -> str:
        return (v or "").strip()
