# nullcode Modules
# Completion post-processing and context assembly

# Pydantic schemas
from .schemas import (
    CompletionPayload,
    CompletionResult,
    CursorPosition,
    IndentSettings,
)

# Configuration
from .config import (
    ConfigError,
    ContextSettings,
    FormattingSettings,
    ProviderSettings,
    Settings,
    load_config,
    load_settings,
)

# Formatting
from .formatting import (
    DuplicationResolver,
    FormattingDecision,
    Rule,
    RuleEngine,
    RuleTable,
)

# Context
from .context import (
    ContextWindowManager,
    NeighborhoodSnapshot,
    TextDocument,
    UserContextBundle,
)

# Model client and orchestration
from .completion_client import CompletionClient
from .prompt_builder import build_completion_messages
from .post_processor import CancellationToken, CompletionPostProcessor

__all__ = [
    # Schemas
    "CompletionPayload",
    "CompletionResult",
    "CursorPosition",
    "IndentSettings",
    # Config
    "ConfigError",
    "ContextSettings",
    "FormattingSettings",
    "ProviderSettings",
    "Settings",
    "load_config",
    "load_settings",
    # Formatting
    "DuplicationResolver",
    "FormattingDecision",
    "Rule",
    "RuleEngine",
    "RuleTable",
    # Context
    "ContextWindowManager",
    "NeighborhoodSnapshot",
    "TextDocument",
    "UserContextBundle",
    # Orchestration
    "CompletionClient",
    "build_completion_messages",
    "CancellationToken",
    "CompletionPostProcessor",
]
