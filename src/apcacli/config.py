"""Environment-driven client configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Self

from dotenv import load_dotenv

from apcacli.errors import ConfigError

DEFAULT_BASE_URL = "https://paper-api.alpaca.markets"
DEFAULT_TIMEOUT_SECONDS = 30


def parse_positive_int(value: str | None, *, field_name: str, default: int) -> int:
    """Parse an optional positive integer from an env string."""
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value.strip())
    except ValueError as exc:
        raise ConfigError(f"{field_name} must be an integer, got {value!r}") from exc
    if parsed <= 0:
        raise ConfigError(f"{field_name} must be positive")
    return parsed


@dataclass(frozen=True)
class Settings:
    """Immutable settings, built once at startup and passed explicitly."""

    api_key: str
    secret_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout: int = DEFAULT_TIMEOUT_SECONDS
    verbosity: int = 0

    @classmethod
    def from_env(cls) -> Self:
        """Create settings from ``APCA_API_*`` environment variables."""
        load_dotenv()
        raw = cls(
            api_key=str(os.getenv("APCA_API_KEY_ID", "")).strip(),
            secret_key=str(os.getenv("APCA_API_SECRET_KEY", "")).strip(),
            base_url=str(os.getenv("APCA_API_BASE_URL") or DEFAULT_BASE_URL).strip(),
            timeout=parse_positive_int(
                os.getenv("APCA_API_TIMEOUT"),
                field_name="APCA_API_TIMEOUT",
                default=DEFAULT_TIMEOUT_SECONDS,
            ),
        )
        return raw.validate()

    def with_overrides(self, **kwargs: object) -> Self:
        """Return a new settings object with updated values."""
        return replace(self, **kwargs).validate()

    def validate(self) -> Self:
        if not self.api_key:
            raise ConfigError("APCA_API_KEY_ID environment variable is not set")
        if not self.secret_key:
            raise ConfigError("APCA_API_SECRET_KEY environment variable is not set")
        if not self.base_url.startswith(("http://", "https://")):
            raise ConfigError(f"APCA_API_BASE_URL must be an http(s) URL, got {self.base_url!r}")
        if self.timeout <= 0:
            raise ConfigError("timeout must be positive")
        if self.verbosity < 0:
            raise ConfigError("verbosity must not be negative")
        return self
