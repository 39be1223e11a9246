from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from betleague.config.db_url import build_database_url

_LAST_YAML_PATH: Optional[str] = None

_SENSITIVE_KEYS = ("password", "token", "secret", "api_key", "apikey", "salt", "auth", "bearer")


class DatabaseSettings(BaseModel):
    url: str | None = None
    host: str = "127.0.0.1"
    port: int = 5432
    user: str | None = None
    password: str | None = None
    name: str | None = None
    echo: bool = False
    isolation_level: str = "SERIALIZABLE"
    pool_size: int = Field(default=5, ge=1, le=100)

    @model_validator(mode="after")
    def _compose_url(self) -> "DatabaseSettings":
        # Discrete fields only apply when no explicit url was given.
        if not self.url and self.user and self.name:
            self.url = build_database_url(
                user=self.user,
                password=self.password,
                host=self.host,
                port=self.port,
                name=self.name,
            )
        return self


class EvaluationSettings(BaseModel):
    """Retry policy for evaluations that lose a serialization race."""

    max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Total attempts per evaluation request, first try included.",
    )
    initial_backoff_ms: int = Field(default=50, ge=0, le=10_000)
    max_backoff_ms: int = Field(default=1000, ge=0, le=60_000)


class CacheSettings(BaseModel):
    ttl_seconds: int = Field(default=900, ge=0)


class LoggingSettings(BaseModel):
    level: str = "INFO"
    json_logs: bool = False
    log_dir: str | None = None
    events_retention_size: int = Field(default=10 * 1024 * 1024, ge=1024)

    @model_validator(mode="before")
    @classmethod
    def _alias_json(cls, data: Any) -> Any:
        if isinstance(data, dict) and "json" in data and "json_logs" not in data:
            data = dict(data)
            data["json_logs"] = data.pop("json")
        return data


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="BETLEAGUE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    evaluation: EvaluationSettings = Field(default_factory=EvaluationSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


def _load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"config file {path} must contain a mapping at the top level")
    return data


def _env_overrides() -> Dict[str, Any]:
    # Environment wins over YAML; read it through a settings instance with no init kwargs.
    env_only = Settings()
    return env_only.model_dump(exclude_defaults=True)


def load_settings(yaml_path: str | os.PathLike[str] | None = None) -> Settings:
    """Load settings from an optional YAML file with environment overrides on top.

    Falls back to ``BETLEAGUE_CONFIG`` when no path is passed.
    """
    global _LAST_YAML_PATH
    path_value = yaml_path or os.getenv("BETLEAGUE_CONFIG")
    if not path_value:
        return Settings()

    path = Path(path_value).expanduser().resolve()
    if not path.exists():
        raise FileNotFoundError(f"config file not found: {path}")
    _LAST_YAML_PATH = str(path)
    merged = _merge(_load_yaml(path), _env_overrides())
    return Settings.model_validate(merged)


def last_yaml_path() -> Optional[str]:
    return _LAST_YAML_PATH


def sanitize_dict(data: Any) -> Any:
    """Return a copy of ``data`` with secret-looking values masked."""
    if isinstance(data, dict):
        out: Dict[str, Any] = {}
        for key, value in data.items():
            lowered = str(key).lower()
            if any(s in lowered for s in _SENSITIVE_KEYS) and value:
                out[key] = "***"
            elif lowered == "url" and isinstance(value, str) and "@" in value:
                scheme, _, rest = value.partition("://")
                out[key] = f"{scheme}://***@{rest.split('@', 1)[1]}"
            else:
                out[key] = sanitize_dict(value)
        return out
    if isinstance(data, list):
        return [sanitize_dict(v) for v in data]
    return data


__all__ = [
    "DatabaseSettings",
    "EvaluationSettings",
    "CacheSettings",
    "LoggingSettings",
    "Settings",
    "load_settings",
    "last_yaml_path",
    "sanitize_dict",
]
