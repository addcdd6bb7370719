"""Configuration management using Pydantic Settings."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MODEL = "gemini-2.5-flash-lite"


class GeminiConfig(BaseModel):
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    upload_url: str = "https://generativelanguage.googleapis.com/upload/v1beta"
    default_model: str = DEFAULT_MODEL
    timeout: float | None = None  # None leaves timing to the remote service


class ServerConfig(BaseModel):
    name: str = "gemini-file-search-rag"
    host: str = "127.0.0.1"
    port: int = 8765
    log_level: str = "WARNING"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="GEMINIRAG_",
        env_nested_delimiter="__",
    )

    gemini: GeminiConfig = GeminiConfig()
    server: ServerConfig = ServerConfig()

    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("gemini_api_key", "GEMINI_API_KEY", "GEMINIRAG_GEMINI_API_KEY"),
    )

    @property
    def has_credentials(self) -> bool:
        return bool(self.gemini_api_key)

    @classmethod
    def load(cls, config_path: Path | None = None) -> Settings:
        """Load settings from YAML file, then overlay env vars."""
        data: dict = {}
        if config_path and config_path.exists():
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        return cls(**data)


def get_project_root() -> Path:
    """Walk up from CWD to find pyproject.toml, or fall back to CWD."""
    current = Path.cwd()
    for parent in [current, *current.parents]:
        if (parent / "pyproject.toml").exists():
            return parent
    return current


def load_settings() -> Settings:
    """Load settings from the project root's config/settings.yaml."""
    root = get_project_root()
    return Settings.load(root / "config" / "settings.yaml")
