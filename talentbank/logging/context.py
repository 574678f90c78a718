"""Scoped metadata for structured logging.

Fields pushed here (candidate_id, job_id, suggestion_id, actor, ...) are
merged into every log record emitted inside the scope by ``ContextualFilter``.
Backed by ``contextvars`` so nested scopes and threads stay isolated.
"""

from contextvars import ContextVar, Token
from typing import Any, Dict, Optional


LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("talentbank_log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the active logging context."""
    return LogContextVar.get().copy()


def push_log_context(**fields) -> Token:
    """Merge ``fields`` into the active context.

    ``None`` values are dropped so optional identifiers do not show up as
    ``key=null`` in every line.

    Returns:
        Token for ``pop_log_context``
    """
    current = LogContextVar.get()
    merged = {**current, **{k: v for k, v in fields.items() if v is not None}}
    return LogContextVar.set(merged)


def pop_log_context(token: Token) -> None:
    """Restore the context captured by ``push_log_context``."""
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Drop every context field. Used by tests."""
    LogContextVar.set({})


class log_context:
    """Context manager pushing fields for the duration of a block.

    Example:
        >>> with log_context(candidate_id=12, job_id=7, actor="ana"):
        ...     logger.info("Creating suggestion")
    """

    def __init__(self, **fields):
        self.fields = fields
        self.token: Optional[Token] = None

    def __enter__(self):
        self.token = push_log_context(**self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token is not None:
            pop_log_context(self.token)
            self.token = None
        return False
