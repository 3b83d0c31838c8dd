"""Pydantic models for scribe configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field


class GeneralConfig(BaseModel):
    """Model selection and turn-loop settings."""

    model: str = "claude-3-5-sonnet-latest"
    max_tokens: int = Field(default=1024, gt=0)
    system_prompt: str = ""
    # None leaves tool chaining unbounded.
    max_tool_rounds: int | None = Field(default=None, gt=0)


class ProviderConfig(BaseModel):
    """Configuration for the Anthropic provider."""

    api_key: str | None = None
    api_key_env: str | None = "ANTHROPIC_API_KEY"
    base_url: str | None = None
    timeout: float | None = None


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "WARNING"
    file: str = ""


class ToolsConfig(BaseModel):
    """File-system tool configuration."""

    root: str = "."
    ignore_dirs: list[str] = Field(default_factory=lambda: [".git", ".hg", ".svn"])


class ScribeConfig(BaseModel):
    """Top-level configuration for scribe."""

    general: GeneralConfig = Field(default_factory=GeneralConfig)
    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
