"""Business and transport errors raised by the engine.

Business-rule violations (NotFoundError, DuplicateSuggestionError,
DuplicateMembershipError, InvalidTransitionError) are turned into
user-facing messages at the boundary. DeliveryError never leaves the
notification dispatcher. TransportError propagates unmodified.
"""

from typing import Optional


class TalentBankError(Exception):
    """Base exception for every error raised by the engine."""

    pass


class NotFoundError(TalentBankError):
    """Referenced candidate, job, talent-bank entry or suggestion does not exist."""

    def __init__(self, entity: str, identifier) -> None:
        super().__init__(f"{entity} {identifier} not found")
        self.entity = entity
        self.identifier = identifier


class DuplicateSuggestionError(TalentBankError):
    """A suggestion already exists for the (candidate, job) pair."""

    def __init__(self, candidate_id: int, job_id: int, message: Optional[str] = None) -> None:
        super().__init__(
            message
            or f"Job {job_id} has already been suggested to candidate {candidate_id}"
        )
        self.candidate_id = candidate_id
        self.job_id = job_id


class SuggestionInFlightError(DuplicateSuggestionError):
    """A create-suggestion call for the same pair is still running."""

    def __init__(self, candidate_id: int, job_id: int) -> None:
        super().__init__(
            candidate_id,
            job_id,
            message=(
                f"A suggestion of job {job_id} to candidate {candidate_id} "
                "is already being created"
            ),
        )


class DuplicateMembershipError(TalentBankError):
    """The candidate already has a talent-bank entry."""

    def __init__(self, candidate_id: int) -> None:
        super().__init__(f"Candidate {candidate_id} is already in the talent bank")
        self.candidate_id = candidate_id


class InvalidTransitionError(TalentBankError):
    """A suggestion state change that the lifecycle does not allow."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"Cannot move suggestion from '{current}' to '{target}'")
        self.current = current
        self.target = target


class AuthenticationRequiredError(TalentBankError):
    """The request context carries no credential."""

    pass


class DeliveryError(TalentBankError):
    """In-app notification or email could not be delivered.

    Attributes:
        channel: "in_app" or "email"
    """

    def __init__(self, channel: str, message: str) -> None:
        super().__init__(message)
        self.channel = channel


class TransportError(TalentBankError):
    """Network or timeout failure talking to an external service.

    The operation is treated as not having happened; callers may retry.
    """

    pass
