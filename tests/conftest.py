"""Shared pytest fixtures."""

import pytest

from talentbank.logging.context import clear_log_context
from talentbank.persistence import close_database, init_database

SMTP_ENV_VARS = (
    "SMTP_HOST",
    "SMTP_PORT",
    "SMTP_USER",
    "SMTP_PASS",
    "SMTP_SENDER_NAME",
    "SMTP_SENDER_EMAIL",
    "LOG_LEVEL",
    "DATABASE_URL",
    "TALENTBANK_API_TOKEN",
    "TALENTBANK_ACTOR",
)


@pytest.fixture
def database():
    """Fresh in-memory database for one test."""
    init_database("sqlite:///:memory:")
    yield
    close_database()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every variable read by load_environment_config."""
    for name in SMTP_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture(autouse=True)
def reset_log_context():
    clear_log_context()
    yield
    clear_log_context()
