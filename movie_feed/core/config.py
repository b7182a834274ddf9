"""
Configuration for the movie feed service.

Settings are sourced from environment variables prefixed with ``MOVIE_FEED``.
Both the dotted form (``MOVIE_FEED.API.LISTEN_PORT``) and the underscore form
(``MOVIE_FEED_API__LISTEN_PORT``) are understood.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field, IPvAnyAddress, SecretStr, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from movie_feed.core.client_ip import ClientIpSource

ENV_PREFIX = "MOVIE_FEED"
DEFAULT_TMDB_API_URL = "https://api.themoviedb.org/"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class ConfigError(RuntimeError):
    """Raised when the runtime configuration is missing or invalid."""


class ApiSettings(BaseModel):
    """Settings for the HTTP listener."""

    listen_address: IPvAnyAddress = Field(
        default="127.0.0.1",
        description="Address the HTTP server binds to.",
    )
    listen_port: int = Field(
        default=8080,
        ge=0,
        le=65535,
        description="Port the HTTP server binds to.",
    )
    client_ip_source: ClientIpSource = Field(
        default=ClientIpSource.CONNECT_INFO,
        description="Where the client IP is read from when logging requests.",
    )


class Settings(BaseSettings):
    """Runtime configuration for the movie feed service."""

    model_config = SettingsConfigDict(
        env_prefix=f"{ENV_PREFIX}_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    tmdb_token: Optional[SecretStr] = Field(
        default=None,
        description="TMDB API read access token.",
    )
    tmdb_token_file: Optional[Path] = Field(
        default=None,
        description="File holding the TMDB API read access token.",
    )
    tmdb_api_url: str = Field(
        default=DEFAULT_TMDB_API_URL,
        description="Base URL of the TMDB API.",
    )
    api: ApiSettings = Field(default_factory=ApiSettings)
    client_ip_source: Optional[ClientIpSource] = Field(
        default=None,
        description="Shorthand for api.client_ip_source.",
    )
    log_level: str = Field(default="INFO", description="Logging level name.")
    cache_ttl: int = Field(
        default=3600,
        ge=0,
        description="Seconds successful TMDB responses are cached for.",
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Seconds before an inbound request is answered with 408.",
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @model_validator(mode="after")
    def _resolve(self) -> "Settings":
        if self.client_ip_source is not None:
            self.api.client_ip_source = self.client_ip_source

        if self.tmdb_token is None and self.tmdb_token_file is None:
            raise ValueError(
                f"one of {ENV_PREFIX}.TMDB_TOKEN or {ENV_PREFIX}.TMDB_TOKEN_FILE must be set"
            )
        if self.tmdb_token is not None and self.tmdb_token_file is not None:
            raise ValueError(
                f"only one of {ENV_PREFIX}.TMDB_TOKEN and {ENV_PREFIX}.TMDB_TOKEN_FILE may be set"
            )

        if self.tmdb_token_file is not None:
            try:
                content = self.tmdb_token_file.read_text(encoding="utf-8").strip()
            except OSError as exc:
                raise ValueError(f"unable to read token file {self.tmdb_token_file}: {exc}") from exc
            if not content:
                raise ValueError(f"token file {self.tmdb_token_file} is empty")
            self.tmdb_token = SecretStr(content)
        elif not self.tmdb_token.get_secret_value().strip():
            raise ValueError(f"{ENV_PREFIX}.TMDB_TOKEN must not be empty")
        return self

    @property
    def token(self) -> str:
        if self.tmdb_token is None:
            raise ConfigError("no TMDB token configured")
        return self.tmdb_token.get_secret_value().strip()


def _dotted_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    """Collect ``MOVIE_FEED.X.Y`` style variables into nested keyword arguments."""

    overrides: dict[str, Any] = {}
    prefix_length = len(ENV_PREFIX) + 1
    for key, value in environ.items():
        upper = key.upper()
        if "." not in upper or not upper.startswith(ENV_PREFIX):
            continue
        if upper[len(ENV_PREFIX)] not in "._":
            continue

        parts = [
            part.lower()
            for segment in upper[prefix_length:].split(".")
            for part in segment.split("__")
            if part
        ]
        if not parts:
            continue

        target = overrides
        for part in parts[:-1]:
            nested = target.setdefault(part, {})
            if not isinstance(nested, dict):
                break
            target = nested
        else:
            target[parts[-1]] = value
    return overrides


def _known_fields(overrides: dict[str, Any], model: type[BaseModel]) -> dict[str, Any]:
    """Drop keys the settings model does not declare, like the underscore form does."""

    known: dict[str, Any] = {}
    for name, value in overrides.items():
        field = model.model_fields.get(name)
        if field is None:
            continue
        nested = field.annotation
        if isinstance(value, dict) and isinstance(nested, type) and issubclass(nested, BaseModel):
            value = _known_fields(value, nested)
        known[name] = value
    return known


def _describe(exc: ValidationError) -> str:
    # input values are left out so secrets never reach the logs
    lines = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        message = error["msg"].removeprefix("Value error, ")
        lines.append(f"{location}: {message}" if location else message)
    return "; ".join(lines)


def load_settings() -> Settings:
    """Load settings from the process environment.

    Underscore style variables are read by pydantic-settings itself; dotted
    names are folded in on top because most shells cannot export them but
    container runtimes can.
    """

    try:
        return Settings(**_known_fields(_dotted_overrides(os.environ), Settings))
    except ValidationError as exc:
        raise ConfigError(_describe(exc)) from exc


__all__ = ["ApiSettings", "ConfigError", "Settings", "load_settings"]
