"""Persistence layer exceptions.

All persistence exceptions inherit from PersistenceError so callers can catch
every storage failure with a single except clause.
"""


class PersistenceError(Exception):
    """Base exception for all persistence layer errors."""

    pass


class DatabaseConnectionError(PersistenceError):
    """Raised when database connection or initialization fails.

    Examples:
    - Invalid database URL format
    - Database file not accessible
    - Operation attempted before init_database()
    """

    pass


class RecordNotFoundError(PersistenceError):
    """Raised when an update or delete targets a row that does not exist.

    Plain lookups return None instead of raising this.
    """

    pass


class DataIntegrityError(PersistenceError):
    """Raised when a database constraint is violated.

    Examples:
    - Second suggestion for the same (candidate_id, job_id) pair
    - Second talent-bank entry for the same candidate
    - Foreign key violation (candidate removed while referenced)
    """

    pass
