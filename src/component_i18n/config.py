"""
Configuration management for component-i18n.

Handles loading configuration from YAML files and environment variables.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file if present (before Settings initialization)
load_dotenv()


class LLMProvider(str, Enum):
    """Available LLM providers."""

    OPENAI = "openai"
    OPENROUTER = "openrouter"


class PathsConfig(BaseModel):
    """Configuration for file paths."""

    database_path: Path = Field(default=Path("./data/localizations.duckdb"))

    @field_validator("database_path")
    @classmethod
    def expand_path(cls, v: Path) -> Path:
        """Expand user home directory and make path absolute."""
        if str(v) == ":memory:":
            return Path(v)
        return Path(v).expanduser().resolve()


class TranslationConfig(BaseModel):
    """Configuration for key translation."""

    provider: LLMProvider = Field(default=LLMProvider.OPENAI)
    model: str = Field(default="default")
    # Empty means the provider's own endpoint
    base_url: str = Field(default="")
    api_key: str = Field(default="")
    temperature: float = Field(default=0.0, ge=0.0, le=2.0)
    max_tokens: int = Field(default=4096, ge=256, le=32000)
    timeout_seconds: float = Field(default=30.0, ge=1.0, le=300.0)


class PipelineConfig(BaseModel):
    """Configuration for the localization pipeline."""

    # Create nav_home/nav_about/... when a navigation component is processed
    ensure_navigation_keys: bool = Field(default=True)
    seed_defaults: bool = Field(default=True)


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(default="INFO")

    @field_validator("level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        """Upper-case and validate the level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            raise ValueError(f"Invalid log level: {v}")
        return level


class ProjectConfig(BaseModel):
    """Project metadata configuration."""

    name: str = Field(default="component-i18n")
    description: str = Field(default="")


class Settings(BaseSettings):
    """Main settings class that combines all configurations."""

    model_config = SettingsConfigDict(
        env_prefix="",
        env_nested_delimiter="__",
        extra="ignore",
    )

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    translation: TranslationConfig = Field(default_factory=TranslationConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def __init__(self, **data: Any) -> None:
        """Initialize with environment variable fallbacks for API keys."""
        super().__init__(**data)
        if not self.translation.api_key:
            env_var = (
                "OPENROUTER_API_KEY"
                if self.translation.provider == LLMProvider.OPENROUTER
                else "OPENAI_API_KEY"
            )
            self.translation.api_key = os.getenv(env_var, "")

    @classmethod
    def from_yaml(cls, path: Path | str) -> Settings:
        """Load settings from a YAML file, with environment variable overrides."""
        path = Path(path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}

        yaml_config = _substitute_env_vars(yaml_config)

        return cls(**yaml_config)


def _substitute_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Recursively substitute ${ENV_VAR} patterns in config values."""
    result = {}
    for key, value in config.items():
        if isinstance(value, dict):
            result[key] = _substitute_env_vars(value)
        elif isinstance(value, str) and value.startswith("${") and value.endswith("}"):
            env_var = value[2:-1]
            result[key] = os.getenv(env_var, "")
        elif isinstance(value, list):
            result[key] = [
                _substitute_env_vars(item) if isinstance(item, dict) else item for item in value
            ]
        else:
            result[key] = value
    return result


DEFAULT_CONFIG_PATHS = (
    Path("config.yaml"),
    Path("config.yml"),
    Path(".component-i18n.yaml"),
)


def load_config(path: Path | str | None = None) -> Settings:
    """
    Load configuration from YAML file or return defaults.

    Args:
        path: Path to YAML config file. If None, looks for config.yaml in current directory.

    Returns:
        Settings instance with merged YAML and environment configurations.
    """
    if path is None:
        for p in DEFAULT_CONFIG_PATHS:
            if p.exists():
                path = p
                break

    if path is not None:
        return Settings.from_yaml(path)

    return Settings()


DEFAULT_CONFIG = """# component-i18n configuration
project:
  name: "my-components"

paths:
  database_path: "./data/localizations.duckdb"

translation:
  # "openai" or "openrouter" (any OpenAI-compatible endpoint via base_url)
  provider: "openai"
  # Model alias (default, fast, quality) or a full model name
  model: "default"
  api_key: "${OPENAI_API_KEY}"
  # Deterministic output keeps re-runs stable
  temperature: 0
  max_tokens: 4096
  # Translation requests taking longer than this fall back to key text
  timeout_seconds: 30

pipeline:
  # Make sure nav_home, nav_about, ... exist for navigation components
  ensure_navigation_keys: true
  # Insert the demo catalog (save_document, click_me, ...) on init
  seed_defaults: true

logging:
  level: INFO
"""


def create_default_config(path: Path | str = "config.yaml") -> None:
    """Create a default configuration file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(DEFAULT_CONFIG)
