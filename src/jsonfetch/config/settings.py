# src/jsonfetch/config/settings.py
"""
Library settings (Pydantic).

Settings are loaded from `src/jsonfetch/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `JSONFETCH_CONFIG_PATH`
- environment variables (`JSONFETCH_LOG_LEVEL`, `JSONFETCH_HTTP_TIMEOUT_SECONDS`,
  `JSONFETCH_USER_AGENT`)

Design rule:
- Defaults (timeout, User-Agent, baseline headers) live in YAML, not in the request code.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from jsonfetch.core.env import load_dotenv_if_present


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `jsonfetch.config`."""
    text = resources.files("jsonfetch.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "jsonfetch"
    log_level: str = "INFO"


class HttpSettings(BaseModel):
    timeout_seconds: float = Field(default=15, gt=0)
    user_agent: str = "jsonfetch/0.1.0"
    default_headers: dict[str, str] = Field(default_factory=dict)

    @field_validator("default_headers", mode="before")
    @classmethod
    def _stringify_header_values(cls, value: Any) -> Any:
        # YAML happily parses `X-Version: 2` as an int; headers are always strings.
        if isinstance(value, dict):
            return {str(k): str(v) for k, v in value.items()}
        return value


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload."""
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("JSONFETCH_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    timeout = os.getenv("JSONFETCH_HTTP_TIMEOUT_SECONDS")
    if timeout:
        data.setdefault("http", {})["timeout_seconds"] = timeout

    user_agent = os.getenv("JSONFETCH_USER_AGENT")
    if user_agent:
        data.setdefault("http", {})["user_agent"] = user_agent

    return data


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load and validate settings without caching (tests and embedding apps)."""
    load_dotenv_if_present()
    config_path = config_path or os.getenv("JSONFETCH_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    return load_settings()


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
