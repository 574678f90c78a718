"""Turns engine errors into user-facing messages."""

from talentbank.adapters.exceptions import (
    ApiHTTPError,
    ApiResponseError,
    ApiTimeoutError,
    CatalogConfigurationError,
)
from talentbank.domain.exceptions import (
    AuthenticationRequiredError,
    DuplicateMembershipError,
    DuplicateSuggestionError,
    InvalidTransitionError,
    NotFoundError,
    SuggestionInFlightError,
    TalentBankError,
    TransportError,
)

# Business-rule violations: reported to the user as warnings, not failures
BUSINESS_ERRORS = (
    NotFoundError,
    DuplicateSuggestionError,
    DuplicateMembershipError,
    InvalidTransitionError,
    AuthenticationRequiredError,
)


def is_business_error(error: BaseException) -> bool:
    return isinstance(error, BUSINESS_ERRORS)


def describe_error(error: BaseException) -> str:
    """Short message suitable for showing to a recruiter."""
    if isinstance(error, SuggestionInFlightError):
        return "This suggestion is already being sent. Please wait a moment."
    if isinstance(error, DuplicateSuggestionError):
        return "This job has already been suggested to this candidate."
    if isinstance(error, DuplicateMembershipError):
        return "This candidate is already in the talent bank."
    if isinstance(error, NotFoundError):
        return f"{error.entity} {error.identifier} was not found."
    if isinstance(error, InvalidTransitionError):
        return (
            f"A suggestion in state '{error.current}' cannot be moved to '{error.target}'."
        )
    if isinstance(error, AuthenticationRequiredError):
        return "You must be signed in to do this."
    if isinstance(error, ApiTimeoutError):
        return "The job service did not answer in time. Please try again."
    if isinstance(error, ApiHTTPError):
        if error.status_code in (401, 403):
            return "The job service rejected your credentials."
        return "The job service could not be reached. Please try again."
    if isinstance(error, ApiResponseError):
        return "The job service returned an unexpected response."
    if isinstance(error, CatalogConfigurationError):
        return f"The job catalog is misconfigured: {error}"
    if isinstance(error, TransportError):
        return "A network error occurred. Please try again."
    if isinstance(error, TalentBankError):
        return str(error)
    return "An unexpected error occurred."
