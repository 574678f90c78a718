"""Suggestion store, lifecycle state machine and history."""

from .lifecycle import ALLOWED_TRANSITIONS, is_stale_event, resolve_transition
from .models import SuggestionHistory, SuggestionRecord
from .service import InFlightRegistry, SuggestionService

__all__ = [
    "SuggestionService",
    "InFlightRegistry",
    "SuggestionHistory",
    "SuggestionRecord",
    "ALLOWED_TRANSITIONS",
    "resolve_transition",
    "is_stale_event",
]
