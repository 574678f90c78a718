"""Persistence layer (SQLAlchemy, SQLite by default).

Public API:
    # Database initialization and session management
    - init_database(database_url: str) -> None
    - get_session() -> ContextManager[Session]
    - close_database() -> None
    - get_engine() -> Engine

    # Repository classes
    - CandidateRepository, JobRepository, TalentBankRepository,
      SuggestionRepository, NotificationRepository

    # Exceptions
    - PersistenceError, DatabaseConnectionError, RecordNotFoundError,
      DataIntegrityError

Example usage:
    >>> from talentbank.persistence import init_database, get_session, SuggestionRepository
    >>> init_database("sqlite:///./data/talent_bank.db")
    >>> with get_session() as session:
    ...     suggestions = SuggestionRepository(session).list_for_candidate(42)
"""

from .database import (
    DEFAULT_DATABASE_URL,
    close_database,
    get_engine,
    get_session,
    init_database,
)
from .exceptions import (
    DatabaseConnectionError,
    DataIntegrityError,
    PersistenceError,
    RecordNotFoundError,
)
from .repositories import (
    CandidateRepository,
    JobRepository,
    NotificationRepository,
    SuggestionRepository,
    TalentBankRepository,
)

__all__ = [
    # Database functions
    "DEFAULT_DATABASE_URL",
    "init_database",
    "get_session",
    "close_database",
    "get_engine",
    # Repositories
    "CandidateRepository",
    "JobRepository",
    "TalentBankRepository",
    "SuggestionRepository",
    "NotificationRepository",
    # Exceptions
    "PersistenceError",
    "DatabaseConnectionError",
    "RecordNotFoundError",
    "DataIntegrityError",
]
