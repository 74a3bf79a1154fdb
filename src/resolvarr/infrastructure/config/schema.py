"""Pydantic configuration models with validation."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from resolvarr.infrastructure.extractors._common import DEFAULT_USER_AGENT
from resolvarr.infrastructure.extractors.megaup import DEFAULT_KEYS_URL

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]

MIN_TIMEOUT_SECONDS = 10.0
MAX_TIMEOUT_SECONDS = 20.0


def _split_ids(value: Any) -> Any:
    """Accept ``"a,b"`` as well as ``["a", "b"]`` for id lists."""
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


class ExtractorsConfig(BaseModel):
    """Catalog tuning (YAML section: extractors.*)."""

    disabled: list[str] = Field(
        default_factory=list,
        description="Descriptor ids left out of the catalog.",
    )
    megaup_keys_url: str = Field(
        default=DEFAULT_KEYS_URL,
        description="Location of the remote MegaUp key table.",
    )
    multi_match_composite: bool = Field(
        default=True,
        description="Let composite descriptors fire alongside the first match.",
    )

    @field_validator("disabled", mode="before")
    @classmethod
    def _validate_disabled(cls, v: Any) -> Any:
        return _split_ids(v)


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/logging/extractors).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="resolvarr", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=15.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="Per-request timeout of extractor HTTP calls (seconds).",
    )
    http_follow_redirects: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "http_follow_redirects",
            AliasPath("http", "follow_redirects"),
        ),
        description="Whether the shared HTTP client follows redirects.",
    )
    http_user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="Default User-Agent for extractor requests.",
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

    # Extractor catalog (YAML section: extractors.*)
    extractors: ExtractorsConfig = Field(default_factory=ExtractorsConfig)

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if not MIN_TIMEOUT_SECONDS <= v <= MAX_TIMEOUT_SECONDS:
            raise ValueError(
                f"http_timeout_seconds must be between {MIN_TIMEOUT_SECONDS:g} "
                f"and {MAX_TIMEOUT_SECONDS:g}"
            )
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "follow_redirects": self.http_follow_redirects,
                "user_agent": self.http_user_agent,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "extractors": self.extractors.model_dump(),
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Intended usage:
    - load.py creates EnvOverrides() to read RESOLVARR_* variables,
      converts to dict of set values, merges into YAML/defaults,
      then validates AppConfig.

    Supported env var examples (flat, explicit):
    - RESOLVARR_HTTP_TIMEOUT_SECONDS
    - RESOLVARR_LOG_LEVEL
    - RESOLVARR_EXTRACTORS_DISABLED=voe,megaup
    """

    model_config = SettingsConfigDict(
        env_prefix="RESOLVARR_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_follow_redirects: Optional[bool] = None
    http_user_agent: Optional[str] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    extractors_disabled: Annotated[Optional[list[str]], NoDecode] = None
    extractors_megaup_keys_url: Optional[str] = None
    extractors_multi_match_composite: Optional[bool] = None

    @field_validator("extractors_disabled", mode="before")
    @classmethod
    def _validate_disabled(cls, v: Any) -> Any:
        return _split_ids(v)

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
