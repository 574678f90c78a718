"""Environment variable loading and validation."""

import os
from typing import Optional

from email_validator import EmailNotValidError, validate_email

from talentbank.persistence.database import DEFAULT_DATABASE_URL

from .exceptions import ConfigurationError

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        smtp_host: Optional[str] = None,
        smtp_port: Optional[int] = None,
        smtp_user: Optional[str] = None,
        smtp_pass: Optional[str] = None,
        smtp_sender_name: Optional[str] = None,
        smtp_sender_email: Optional[str] = None,
        log_level: Optional[str] = None,
        database_url: Optional[str] = None,
        api_token: Optional[str] = None,
        actor: Optional[str] = None,
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_pass = smtp_pass
        self.smtp_sender_name = smtp_sender_name or "Talent Bank"
        self.smtp_sender_email = smtp_sender_email
        self.log_level = log_level
        self.database_url = database_url or DEFAULT_DATABASE_URL
        self.api_token = api_token
        self.actor = actor

    @property
    def smtp_configured(self) -> bool:
        """True when host and port are both set."""
        return bool(self.smtp_host and self.smtp_port)


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    SMTP settings are optional as a whole (email is then never sent), but a
    partial setup is rejected.

    Optional environment variables:
    - DATABASE_URL: database URL (default: sqlite:///./data/talent_bank.db)
    - SMTP_HOST / SMTP_PORT: SMTP server (both or neither)
    - SMTP_USER / SMTP_PASS: SMTP authentication (both or neither)
    - SMTP_SENDER_NAME: display name for the sender
    - SMTP_SENDER_EMAIL: sender address (defaults to SMTP_USER)
    - LOG_LEVEL: override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - TALENTBANK_API_TOKEN: bearer token for the request context
    - TALENTBANK_ACTOR: recruiter identity for the request context

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If any variable is invalid
    """
    errors = []

    smtp_host = os.getenv("SMTP_HOST") or None
    smtp_port_str = os.getenv("SMTP_PORT") or None
    smtp_user = os.getenv("SMTP_USER") or None
    smtp_pass = os.getenv("SMTP_PASS") or None
    smtp_sender_name = os.getenv("SMTP_SENDER_NAME") or None
    smtp_sender_email = os.getenv("SMTP_SENDER_EMAIL") or None
    log_level = os.getenv("LOG_LEVEL") or None
    database_url = os.getenv("DATABASE_URL") or None
    api_token = os.getenv("TALENTBANK_API_TOKEN") or None
    actor = os.getenv("TALENTBANK_ACTOR") or None

    smtp_vars = [smtp_host, smtp_port_str, smtp_user, smtp_pass, smtp_sender_email]
    if any(smtp_vars):
        if not smtp_host:
            errors.append("SMTP settings are present but SMTP_HOST is not set")
        if not smtp_port_str:
            errors.append("SMTP settings are present but SMTP_PORT is not set")

    smtp_port = None
    if smtp_port_str:
        try:
            smtp_port = int(smtp_port_str)
            if smtp_port < 1 or smtp_port > 65535:
                errors.append(f"Invalid SMTP_PORT: {smtp_port}. Must be between 1 and 65535.")
        except ValueError:
            errors.append(f"Invalid SMTP_PORT: '{smtp_port_str}'. Must be a valid integer.")

    if smtp_user and not smtp_pass:
        errors.append("SMTP_USER is set but SMTP_PASS is not. Both must be set for authentication.")
    elif smtp_pass and not smtp_user:
        errors.append("SMTP_PASS is set but SMTP_USER is not. Both must be set for authentication.")

    if smtp_sender_email:
        try:
            smtp_sender_email = validate_email(
                smtp_sender_email, check_deliverability=False
            ).normalized
        except EmailNotValidError as e:
            errors.append(f"Invalid SMTP_SENDER_EMAIL: '{smtp_sender_email}' - {e}")

    if log_level and log_level.upper() not in VALID_LOG_LEVELS:
        errors.append(
            f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and fill in your settings",
                "Set both SMTP_HOST and SMTP_PORT, or neither to disable email",
                "Verify SMTP_PORT is a number between 1 and 65535",
            ],
        )

    return EnvironmentConfig(
        smtp_host=smtp_host,
        smtp_port=smtp_port,
        smtp_user=smtp_user,
        smtp_pass=smtp_pass,
        smtp_sender_name=smtp_sender_name,
        smtp_sender_email=smtp_sender_email,
        log_level=log_level.upper() if log_level else None,
        database_url=database_url,
        api_token=api_token,
        actor=actor,
    )
