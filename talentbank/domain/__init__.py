"""Domain models and errors for the talent bank engine."""

from .context import RequestContext
from .exceptions import (
    AuthenticationRequiredError,
    DeliveryError,
    DuplicateMembershipError,
    DuplicateSuggestionError,
    InvalidTransitionError,
    NotFoundError,
    SuggestionInFlightError,
    TalentBankError,
    TransportError,
)
from .models import (
    Candidate,
    InAppNotification,
    JobRequisition,
    JobStatus,
    NotificationType,
    Priority,
    Suggestion,
    SuggestionState,
    TalentBankEntry,
)
from .skills import clean_skill_names, normalize_skill

__all__ = [
    "RequestContext",
    # Models
    "Candidate",
    "JobRequisition",
    "JobStatus",
    "TalentBankEntry",
    "Priority",
    "Suggestion",
    "SuggestionState",
    "InAppNotification",
    "NotificationType",
    # Skills
    "normalize_skill",
    "clean_skill_names",
    # Errors
    "TalentBankError",
    "NotFoundError",
    "DuplicateSuggestionError",
    "SuggestionInFlightError",
    "DuplicateMembershipError",
    "InvalidTransitionError",
    "AuthenticationRequiredError",
    "DeliveryError",
    "TransportError",
]
