"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class PaginationStrategy(str, Enum):
    """How the talent-bank directory pages its results."""

    SERVER = "server"
    IN_MEMORY = "in-memory"


class JobCatalogSource(str, Enum):
    """Where job requisitions are read from."""

    DATABASE = "database"
    HTTP = "http"


class MatchingConfig(BaseModel):
    """Matching engine settings."""

    max_results: int = Field(
        0, ge=0, description="Maximum matches returned per query (0 = unlimited)"
    )


class DirectoryConfig(BaseModel):
    """Talent-bank directory settings."""

    default_per_page: int = Field(50, ge=1, description="Page size when none is requested")
    max_per_page: int = Field(200, ge=1, description="Upper bound for requested page sizes")
    pagination: PaginationStrategy = Field(
        PaginationStrategy.SERVER, description="Pagination strategy (server or in-memory)"
    )

    @model_validator(mode="after")
    def check_page_sizes(self):
        if self.default_per_page > self.max_per_page:
            raise ValueError(
                f"default_per_page ({self.default_per_page}) cannot exceed "
                f"max_per_page ({self.max_per_page})"
            )
        return self

    model_config = {"use_enum_values": True, "validate_default": True}


class NotificationConfig(BaseModel):
    """Suggestion notification settings."""

    email_by_default: bool = Field(
        False, description="Send an email with every suggestion unless told otherwise"
    )
    in_app_title: str = Field(
        "New job suggestion",
        min_length=1,
        max_length=255,
        description="Title of the in-app notification created for a suggestion",
    )

    @field_validator("in_app_title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("in_app_title cannot be empty")
        return stripped


class EmailConfig(BaseModel):
    """Email delivery settings."""

    use_tls: bool = Field(True, description="Use STARTTLS (ignored on port 465, always TLS)")


class JobCatalogConfig(BaseModel):
    """Job catalog settings."""

    source: JobCatalogSource = Field(
        JobCatalogSource.DATABASE, description="Job catalog implementation (database or http)"
    )
    base_url: Optional[str] = Field(
        None, description="Base URL of the job REST API (required for source=http)"
    )
    request_timeout: int = Field(
        30, ge=5, le=300, description="Request timeout for job API calls (seconds)"
    )
    user_agent: str = Field(
        "TalentBankEngine/1.0",
        min_length=1,
        description="User-Agent string for HTTP requests",
    )

    @field_validator("base_url")
    @classmethod
    def normalize_base_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        stripped = v.strip().rstrip("/")
        if not stripped:
            return None
        if not stripped.startswith(("http://", "https://")):
            raise ValueError(f"base_url must start with http:// or https://, got: {v}")
        return stripped

    @field_validator("user_agent")
    @classmethod
    def strip_user_agent(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("user_agent cannot be empty")
        return stripped

    @model_validator(mode="after")
    def require_base_url_for_http(self):
        if self.source == JobCatalogSource.HTTP.value and not self.base_url:
            raise ValueError("job_catalog.base_url is required when source is 'http'")
        return self

    model_config = {"use_enum_values": True, "validate_default": True}


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True, "validate_default": True}


class AppConfig(BaseModel):
    """Root configuration object for the talent bank engine.

    Every section is optional; an empty file yields the defaults.
    """

    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    directory: DirectoryConfig = Field(default_factory=DirectoryConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    email: EmailConfig = Field(default_factory=EmailConfig)
    job_catalog: JobCatalogConfig = Field(default_factory=JobCatalogConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
