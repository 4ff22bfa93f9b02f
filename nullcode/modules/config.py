"""
nullcode - Configuration

Loads config.yaml into validated pydantic settings. Provider credentials
and selection fall back to the environment (a local .env is honoured):

    API_KEY / PROVIDER / MODEL_NAME
    OPENAI_API_KEY / ANTHROPIC_API_KEY   (per-provider key fallback)

A missing config file is not an error: defaults are used.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv
from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator

from .schemas import IndentSettings


SUPPORTED_PROVIDERS = ("openai", "anthropic")

PROVIDER_KEY_ENV = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}


class ConfigError(ValueError):
    pass


# =============================================================================
# SETTINGS MODELS
# =============================================================================


class ContextSettings(BaseModel):
    window_size: int = Field(default=250, ge=0, description="Lines kept in the sliding window")
    snapshot_radius: int = Field(default=25, ge=0, description="Lines either side of the cursor")
    max_accepted_suggestions: Optional[int] = Field(
        default=None, ge=0, description="Most recent accepted suggestions exposed to prompts (None = all)"
    )


class FormattingSettings(BaseModel):
    long_line_threshold: int = Field(default=120, ge=1, description="Prefix length that forces a line break")
    indent: IndentSettings = Field(default_factory=IndentSettings)


class ProviderSettings(BaseModel):
    name: str = Field(default="", description="openai | anthropic")
    model: str = Field(default="")
    api_key: Optional[str] = Field(default=None, repr=False)
    temperature: float = Field(default=0.5, ge=0.0, le=2.0)
    timeout_seconds: float = Field(default=20.0, gt=0)

    @field_validator("name")
    @classmethod
    def _normalize_name(cls, v: str) -> str:
        return (v or "").strip().lower()

    @property
    def litellm_model(self) -> str:
        """LiteLLM-style "<provider>/<model>" string."""
        model = (self.model or "").strip()
        if not self.name or model.startswith(f"{self.name}/"):
            return model
        return f"{self.name}/{model}"


class Settings(BaseModel):
    context: ContextSettings = Field(default_factory=ContextSettings)
    formatting: FormattingSettings = Field(default_factory=FormattingSettings)
    provider: ProviderSettings = Field(default_factory=ProviderSettings)


# =============================================================================
# LOADING
# =============================================================================


def load_config(config_path: str = "config.yaml") -> Dict[str, Any]:
    """Load the raw configuration mapping from a YAML file."""
    config_file = Path(config_path)

    if not config_file.exists():
        logger.warning(f"Config file not found: {config_path}. Using defaults.")
        return {}

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigError(f"Top level of {config_path} must be a mapping")

    logger.info(f"Loaded configuration from: {config_path}")
    return config


def _apply_env(raw: Dict[str, Any], env: Mapping[str, str]) -> Dict[str, Any]:
    provider = dict(raw.get("provider") or {})

    if not provider.get("name") and env.get("PROVIDER"):
        provider["name"] = env["PROVIDER"]
    if not provider.get("model") and env.get("MODEL_NAME"):
        provider["model"] = env["MODEL_NAME"]
    if not provider.get("api_key"):
        key_env = PROVIDER_KEY_ENV.get(str(provider.get("name") or "").strip().lower())
        api_key = env.get("API_KEY") or (env.get(key_env) if key_env else None)
        if api_key:
            provider["api_key"] = api_key

    merged = dict(raw)
    merged["provider"] = provider
    return merged


def load_settings(
    config_path: str = "config.yaml",
    env: Optional[Mapping[str, str]] = None,
    load_env_file: bool = True,
) -> Settings:
    """Load config.yaml + environment into validated Settings."""
    if env is None:
        if load_env_file:
            load_dotenv()
        env = os.environ

    raw = _apply_env(load_config(config_path), env)

    try:
        settings = Settings.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e

    if settings.provider.name and settings.provider.name not in SUPPORTED_PROVIDERS:
        logger.warning(f"Unsupported provider configured: {settings.provider.name}")

    return settings
