"""Pydantic configuration models with validation."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from dopeflix.domain.entities.media import Preferences

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]
PopularPage = Literal["movie", "tv-show"]
LatestPage = Literal["Movies", "TV Shows"]

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/131.0.0.0 Safari/537.36"
)


class SourceConfig(BaseModel):
    """Mirror selection for the streaming site."""

    domain: str = Field(
        default="dopebox.to",
        description="Active mirror domain (must be listed in 'domains').",
    )
    domains: list[str] = Field(
        default=["dopebox.to", "dopebox.se", "sflix.to", "sflix.se"],
        description="Known mirror domains.",
    )

    @model_validator(mode="after")
    def _check_domain_known(self) -> "SourceConfig":
        if self.domain not in self.domains:
            raise ValueError(
                f"source.domain {self.domain!r} is not one of {self.domains}"
            )
        return self

    @property
    def base_url(self) -> str:
        return f"https://{self.domain}"


class PreferencesConfig(BaseModel):
    """User preferences for ranking and catalog listings.

    Values are substring-matched against variant and subtitle labels,
    so any string is accepted.
    """

    quality: str = Field(
        default="1080p",
        description="Preferred quality; matching variants are ranked first.",
    )
    sub_language: str = Field(
        default="English",
        description="Preferred subtitle language; matching tracks are ranked first.",
    )
    popular_page: PopularPage = Field(
        default="movie",
        description="Listing used for the popular catalog.",
    )
    latest_page: LatestPage = Field(
        default="Movies",
        description="Home page section used for the latest catalog.",
    )

    def to_preferences(
        self,
        *,
        quality: str | None = None,
        sub_language: str | None = None,
    ) -> Preferences:
        """Build the per-request value object, with optional overrides."""
        return Preferences(
            quality=quality or self.quality,
            sub_language=sub_language or self.sub_language,
        )


class ResolverConfig(BaseModel):
    """Bounds for the per-episode server fan-out."""

    max_concurrent_servers: int = Field(
        default=10,
        description="Max servers of one episode resolved in parallel.",
    )
    resolve_timeout_seconds: float = Field(
        default=30.0,
        description="Deadline for resolving all servers of one episode.",
    )

    @field_validator("max_concurrent_servers")
    @classmethod
    def _validate_concurrency(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_concurrent_servers must be >= 1")
        return v

    @field_validator("resolve_timeout_seconds")
    @classmethod
    def _validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("resolve_timeout_seconds must be > 0")
        return v


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (source/http/logging/preferences/resolver).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="dopeflix", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    source: SourceConfig = Field(default_factory=SourceConfig)

    # HTTP (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=30.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="HTTP timeout in seconds.",
    )
    http_follow_redirects: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "http_follow_redirects",
            AliasPath("http", "follow_redirects"),
        ),
        description="Whether HTTP client follows redirects.",
    )
    http_user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for outgoing HTTP requests.",
    )
    http_retry_max_attempts: int = Field(
        default=3,
        validation_alias=AliasChoices(
            "http_retry_max_attempts",
            AliasPath("http", "retry_max_attempts"),
        ),
        description="Retries on 429/503 answers.",
    )
    http_retry_backoff_base: float = Field(
        default=1.0,
        validation_alias=AliasChoices(
            "http_retry_backoff_base",
            AliasPath("http", "retry_backoff_base"),
        ),
        description="Base delay for exponential backoff (seconds).",
    )
    http_retry_max_backoff: float = Field(
        default=30.0,
        validation_alias=AliasChoices(
            "http_retry_max_backoff",
            AliasPath("http", "retry_max_backoff"),
        ),
        description="Upper bound for a single backoff delay (seconds).",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    preferences: PreferencesConfig = Field(default_factory=PreferencesConfig)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @field_validator("http_retry_max_attempts")
    @classmethod
    def _validate_retry_attempts(cls, v: int) -> int:
        if v < 0:
            raise ValueError("http_retry_max_attempts must be >= 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    @property
    def base_url(self) -> str:
        return self.source.base_url

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "source": self.source.model_dump(),
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "follow_redirects": self.http_follow_redirects,
                "user_agent": self.http_user_agent,
                "retry_max_attempts": self.http_retry_max_attempts,
                "retry_backoff_base": self.http_retry_backoff_base,
                "retry_max_backoff": self.http_retry_max_backoff,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "preferences": self.preferences.model_dump(),
            "resolver": self.resolver.model_dump(),
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Intended usage:
    - load.py creates EnvOverrides() to read DOPEFLIX_* variables,
      converts to dict of set values, merges into YAML/defaults,
      then validates AppConfig.

    Supported env var examples (flat, explicit):
    - DOPEFLIX_SOURCE_DOMAIN
    - DOPEFLIX_HTTP_TIMEOUT_SECONDS
    - DOPEFLIX_PREFERRED_QUALITY
    - DOPEFLIX_LOG_LEVEL
    """

    model_config = SettingsConfigDict(
        env_prefix="DOPEFLIX_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    source_domain: Optional[str] = None

    http_timeout_seconds: Optional[float] = None
    http_follow_redirects: Optional[bool] = None
    http_user_agent: Optional[str] = None
    http_retry_max_attempts: Optional[int] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    preferred_quality: Optional[str] = None
    preferred_sub_language: Optional[str] = None
    preferred_popular_page: Optional[PopularPage] = None
    preferred_latest_page: Optional[LatestPage] = None

    resolver_max_concurrent_servers: Optional[int] = None
    resolver_timeout_seconds: Optional[float] = None

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
