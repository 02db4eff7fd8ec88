"""Configuration loading with environment variable substitution."""

import json
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from couchcache.exceptions import ConfigError
from couchcache.observability import LogLevel

ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)\}")


def substitute_env_vars(value: Any) -> Any:
    """Recursively substitute ${VAR_NAME} patterns with environment variables."""
    if isinstance(value, str):
        def replace(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ConfigError(f"Environment variable {var_name} is not set")
            return env_value

        return ENV_VAR_PATTERN.sub(replace, value)
    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]
    return value


class BackendConfig(BaseModel):
    """Cache server connection settings."""

    backend: str = "redis"  # redis | memory
    host: str = "localhost"
    port: int = Field(default=6379, ge=1, le=65535)
    bucket: str = "couchcache"  # Key namespace
    database: int = Field(default=0, ge=0)
    username: str | None = None  # ACL user, None for the default user
    password: str | None = None
    timeout_seconds: float | None = Field(default=None, gt=0)

    @property
    def address(self) -> str:
        """Host and port of the server."""
        return f"{self.host}:{self.port}"

    def session_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for a session backend's connect()."""
        return {
            "host": self.host,
            "port": self.port,
            "bucket": self.bucket,
            "database": self.database,
            "username": self.username,
            "password": self.password,
            "timeout_seconds": self.timeout_seconds,
        }


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: LogLevel = LogLevel.INFO
    format: str = "json"  # json | text


class Config(BaseModel):
    """Main configuration for couchcache."""

    backend: BackendConfig = Field(default_factory=BackendConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: str | Path) -> "Config":
        """Load configuration from a YAML or JSON file."""
        path = Path(path)
        try:
            with path.open() as f:
                if path.suffix in (".yaml", ".yml"):
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Load configuration from a dictionary."""
        data = substitute_env_vars(data)
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(str(e)) from e

    def with_backend_overrides(self, **overrides: Any) -> "Config":
        """Return a copy with backend settings replaced and re-validated.

        Values are taken literally; no environment substitution is applied.

        Raises:
            ConfigError: If an override is invalid
        """
        backend = {**self.backend.model_dump(), **overrides}
        try:
            return self.model_validate({**self.model_dump(), "backend": backend})
        except ValidationError as e:
            raise ConfigError(str(e)) from e
