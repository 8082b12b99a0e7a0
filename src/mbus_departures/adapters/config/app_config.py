"""12-factor configuration adapter using environment variables and TOML config."""

import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mbus_departures.adapters.otp_api.constants import (
    DEFAULT_CLIENT_IDENTIFIER,
    LEGACY_SOURCE_URL_PATTERNS,
    OTP_BASE_URL,
)
from mbus_departures.domain.models import MAX_SCHEDULES


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server configuration
    host: str = Field(default="0.0.0.0", description="Host to bind the server to")
    port: int = Field(default=8000, description="Port to bind the server to")
    log_level: str = Field(default="INFO", description="Root logging level")

    # Upstream configuration
    upstream_provider: str = Field(
        default="otp", description="Upstream source adapter (API generation) to use"
    )
    upstream_base_url: str = Field(
        default=OTP_BASE_URL, description="Base URL of the upstream transit data source"
    )
    upstream_timeout_seconds: float = Field(
        default=8.0, description="Timeout for a single upstream request in seconds"
    )
    client_identifier: str = Field(
        default=DEFAULT_CLIENT_IDENTIFIER,
        description="User-Agent sent with every upstream request",
    )
    legacy_source_url_patterns: list[str] = Field(
        default_factory=lambda: list(LEGACY_SOURCE_URL_PATTERNS),
        description="Substrings of decommissioned source URLs; cached entries linking to them are dropped",
    )

    # Resolution configuration
    cache_ttl_seconds: float = Field(
        default=60.0, description="Maximum age of a cached resolution in seconds"
    )
    max_departures: int = Field(
        default=MAX_SCHEDULES, description="Number of departures shown per stop/route and group"
    )
    use_sample_timetables: bool = Field(
        default=True,
        description="Serve the static sample timetables when live data is unavailable",
    )

    # TOML config file path with [[groups]] of pinned journeys
    config_file: str | None = Field(
        default=None,
        description="Path to TOML configuration file with pinned journey groups",
    )

    @field_validator("upstream_provider")
    @classmethod
    def validate_upstream_provider(cls, v: str) -> str:
        """Normalize the provider name."""
        v = v.strip().lower()
        if not v:
            raise ValueError("upstream_provider must not be empty")
        return v

    @field_validator("upstream_timeout_seconds")
    @classmethod
    def validate_upstream_timeout(cls, v: float) -> float:
        """Keep the upstream timeout within 5-10 seconds."""
        if not 5 <= v <= 10:
            raise ValueError("upstream_timeout_seconds must be between 5 and 10")
        return v

    @field_validator("cache_ttl_seconds")
    @classmethod
    def validate_cache_ttl(cls, v: float) -> float:
        """Require a positive TTL."""
        if v <= 0:
            raise ValueError("cache_ttl_seconds must be positive")
        return v

    @field_validator("max_departures")
    @classmethod
    def validate_max_departures(cls, v: int) -> int:
        """Keep the display window between 1 and 3."""
        if not 1 <= v <= MAX_SCHEDULES:
            raise ValueError(f"max_departures must be between 1 and {MAX_SCHEDULES}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard logging level name."""
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("log_level must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return v

    @model_validator(mode="after")
    def apply_upstream_table(self) -> "AppConfig":
        """Apply the optional [upstream] table of the TOML file when the config is built."""
        if not self.config_file:
            return self

        config_path = Path(self.config_file)
        if not config_path.exists():
            raise ValueError(f"Configuration file not found: {config_path}")

        upstream = self._read_toml(config_path).get("upstream", {})
        if not isinstance(upstream, dict):
            raise ValueError("TOML config 'upstream' must be a table")
        if "base_url" in upstream:
            self.upstream_base_url = str(upstream["base_url"])
        if "timeout_seconds" in upstream:
            timeout = float(upstream["timeout_seconds"])
            if not 5 <= timeout <= 10:
                raise ValueError("upstream.timeout_seconds must be between 5 and 10")
            self.upstream_timeout_seconds = timeout
        return self

    @staticmethod
    def _read_toml(config_path: Path) -> dict[str, Any]:
        with open(config_path, "rb") as f:
            return tomllib.load(f)

    def get_groups_config(self) -> list[dict[str, Any]]:
        """Parse and return the [[groups]] tables of the TOML file."""
        if not self.config_file:
            raise ValueError("config_file must be set to load journey groups")

        config_path = Path(self.config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        groups = self._read_toml(config_path).get("groups", [])
        if not isinstance(groups, list):
            raise ValueError("TOML config 'groups' must be a list")
        return [g for g in groups if isinstance(g, dict)]
