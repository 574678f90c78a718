"""Suggestion store and lifecycle operations.

Creating a suggestion runs in this order:
1. Load the candidate and the job (NotFoundError when unknown)
2. Reject an existing suggestion for the pair (DuplicateSuggestionError)
3. Insert the ``pending`` suggestion and commit it on its own
4. Dispatch the in-app notification and optional email
5. Store the two delivery flags in place

A delivery failure never rolls back step 3. The unique constraint on
(candidate_id, job_id) backs up step 2 when two processes race.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Dict, List, Optional, Set, Tuple

from talentbank.adapters.base import JobCatalog
from talentbank.domain.context import RequestContext
from talentbank.domain.exceptions import (
    DuplicateSuggestionError,
    NotFoundError,
    SuggestionInFlightError,
)
from talentbank.domain.models import Candidate, JobRequisition, Suggestion, SuggestionState
from talentbank.logging import get_logger
from talentbank.logging.context import log_context
from talentbank.notifications.dispatcher import NotificationDispatcher
from talentbank.persistence import (
    CandidateRepository,
    DataIntegrityError,
    RecordNotFoundError,
    SuggestionRepository,
    get_session,
)

from .lifecycle import is_stale_event, resolve_transition
from .models import SuggestionHistory, SuggestionRecord

logger = get_logger(__name__, component="suggestions")


class InFlightRegistry:
    """Process-local set of (candidate_id, job_id) pairs being created."""

    def __init__(self):
        self._lock = threading.Lock()
        self._pairs: Set[Tuple[int, int]] = set()

    @contextmanager
    def claim(self, candidate_id: int, job_id: int):
        """Hold the pair for the duration of the block.

        Raises:
            SuggestionInFlightError: If the pair is already held
        """
        pair = (candidate_id, job_id)
        with self._lock:
            if pair in self._pairs:
                raise SuggestionInFlightError(candidate_id, job_id)
            self._pairs.add(pair)
        try:
            yield
        finally:
            with self._lock:
                self._pairs.discard(pair)

    def __contains__(self, pair) -> bool:
        with self._lock:
            return tuple(pair) in self._pairs


class SuggestionService:
    """Creates suggestions and tracks them through their lifecycle."""

    def __init__(
        self,
        catalog: JobCatalog,
        dispatcher: NotificationDispatcher,
        session_factory: Callable = get_session,
        in_flight: Optional[InFlightRegistry] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        self.catalog = catalog
        self.dispatcher = dispatcher
        self.session_factory = session_factory
        self.in_flight = in_flight or InFlightRegistry()
        self.logger = logger_instance or logger

    def _load_candidate(self, candidate_id: int) -> Candidate:
        with self.session_factory() as session:
            candidate = CandidateRepository(session).get(candidate_id)
        if candidate is None:
            raise NotFoundError("Candidate", candidate_id)
        return candidate

    def _load_job(self, ctx: RequestContext, job_id: int) -> JobRequisition:
        job = self.catalog.get_job(ctx, job_id)
        if job is None or not job.is_active:
            raise NotFoundError("Job", job_id)
        return job

    def create_suggestion(
        self,
        ctx: RequestContext,
        candidate_id: int,
        job_id: int,
        note: Optional[str] = None,
        notify_by_email: bool = False,
    ) -> Suggestion:
        """Suggest a job to a candidate and notify the candidate.

        Args:
            ctx: Request context (must be authenticated)
            candidate_id: Candidate receiving the suggestion
            job_id: Active job being suggested
            note: Optional recruiter note stored on the suggestion
            notify_by_email: Also send an email

        Returns:
            The persisted suggestion with its delivery flags

        Raises:
            AuthenticationRequiredError: If ctx carries no token
            NotFoundError: If the candidate or active job does not exist
            DuplicateSuggestionError: If the pair was already suggested
            SuggestionInFlightError: If a create for the pair is still running
            TransportError: If the job catalog cannot be reached
        """
        ctx.require_authenticated()

        with log_context(candidate_id=candidate_id, job_id=job_id, actor=ctx.actor):
            with self.in_flight.claim(candidate_id, job_id):
                candidate = self._load_candidate(candidate_id)
                job = self._load_job(ctx, job_id)

                suggestion = self._insert(ctx, candidate_id, job_id, note)

                with log_context(suggestion_id=suggestion.id):
                    outcome = self.dispatcher.dispatch(
                        suggestion, candidate, job, send_email=notify_by_email
                    )

                    with self.session_factory() as session:
                        suggestion = SuggestionRepository(session).update_delivery(
                            suggestion.id, outcome.notification_sent, outcome.email_sent
                        )

                    self.logger.info(
                        f"Suggested job {job_id} to candidate {candidate_id}",
                        extra={
                            "event": "suggestion.created",
                            "notification_sent": suggestion.notification_sent,
                            "email_sent": suggestion.email_sent,
                        },
                    )

        return suggestion

    def _insert(
        self, ctx: RequestContext, candidate_id: int, job_id: int, note: Optional[str]
    ) -> Suggestion:
        try:
            with self.session_factory() as session:
                repo = SuggestionRepository(session)
                existing = repo.get_by_pair(candidate_id, job_id)
                if existing is not None:
                    self.logger.info(
                        f"Job {job_id} already suggested to candidate {candidate_id}",
                        extra={
                            "event": "suggestion.duplicate",
                            "suggestion_id": existing.id,
                            "state": existing.state.value,
                        },
                    )
                    raise DuplicateSuggestionError(candidate_id, job_id)

                return repo.create(
                    candidate_id=candidate_id,
                    job_id=job_id,
                    suggested_by=ctx.actor,
                    notes=note,
                )
        except DataIntegrityError as e:
            # Lost the insert race against another writer
            self.logger.info(
                f"Concurrent suggestion of job {job_id} to candidate {candidate_id}",
                extra={"event": "suggestion.duplicate", "reason": "unique_constraint"},
            )
            raise DuplicateSuggestionError(candidate_id, job_id) from e

    def list_suggestions_for_candidate(
        self, ctx: RequestContext, candidate_id: int
    ) -> List[Suggestion]:
        """All suggestions of a candidate in every state, most recent first."""
        ctx.require_authenticated()
        with self.session_factory() as session:
            return SuggestionRepository(session).list_for_candidate(candidate_id)

    def get_suggestion_status(
        self, ctx: RequestContext, candidate_id: int, job_id: int
    ) -> Optional[Suggestion]:
        """The suggestion of ``job_id`` to ``candidate_id``, or None."""
        ctx.require_authenticated()
        with self.session_factory() as session:
            return SuggestionRepository(session).get_by_pair(candidate_id, job_id)

    def suggestion_states(
        self, ctx: RequestContext, candidate_id: int
    ) -> Dict[int, SuggestionState]:
        """Map job_id -> state of every suggestion made to a candidate."""
        ctx.require_authenticated()
        with self.session_factory() as session:
            return SuggestionRepository(session).states_for_candidate(candidate_id)

    def record_transition(
        self, ctx: RequestContext, suggestion_id: int, target_state: SuggestionState
    ) -> Suggestion:
        """Apply a candidate-side event (viewed, applied, discarded).

        Repeating the current state is a no-op, and a late ``viewed`` for a
        terminal suggestion is ignored.

        Raises:
            NotFoundError: If the suggestion does not exist
            InvalidTransitionError: If the move is not allowed
        """
        ctx.require_authenticated()
        target_state = SuggestionState(target_state)

        with log_context(suggestion_id=suggestion_id, actor=ctx.actor):
            with self.session_factory() as session:
                repo = SuggestionRepository(session)
                suggestion = repo.get(suggestion_id)
                if suggestion is None:
                    raise NotFoundError("Suggestion", suggestion_id)

                new_state = resolve_transition(suggestion.state, target_state)
                if new_state == suggestion.state:
                    stale = is_stale_event(suggestion.state, target_state)
                    self.logger.info(
                        f"Suggestion {suggestion_id} stays '{suggestion.state.value}'"
                        + (" (stale event)" if stale else ""),
                        extra={
                            "event": "suggestion.transition.stale" if stale else "suggestion.transition.noop",
                            "state": suggestion.state.value,
                            "requested_state": target_state.value,
                        },
                    )
                    return suggestion

                updated = repo.update_state(suggestion_id, new_state)

            self.logger.info(
                f"Suggestion {suggestion_id} moved from '{suggestion.state.value}' "
                f"to '{new_state.value}'",
                extra={
                    "event": "suggestion.transitioned",
                    "from_state": suggestion.state.value,
                    "to_state": new_state.value,
                },
            )
            return updated

    def remove_suggestion(self, ctx: RequestContext, suggestion_id: int) -> None:
        """Administrative removal.

        Raises:
            NotFoundError: If the suggestion does not exist
        """
        ctx.require_authenticated()
        try:
            with self.session_factory() as session:
                SuggestionRepository(session).delete(suggestion_id)
        except RecordNotFoundError as e:
            raise NotFoundError("Suggestion", suggestion_id) from e

        self.logger.info(
            f"Removed suggestion {suggestion_id}",
            extra={"event": "suggestion.removed", "suggestion_id": suggestion_id, "actor": ctx.actor},
        )

    def get_suggestion_history(
        self, ctx: RequestContext, candidate_id: int
    ) -> SuggestionHistory:
        """Suggestions of a candidate joined with their jobs, plus counters."""
        suggestions = self.list_suggestions_for_candidate(ctx, candidate_id)

        jobs: Dict[int, Optional[JobRequisition]] = {}
        records = []
        for suggestion in suggestions:
            if suggestion.job_id not in jobs:
                jobs[suggestion.job_id] = self.catalog.get_job(ctx, suggestion.job_id)
            records.append(SuggestionRecord(suggestion=suggestion, job=jobs[suggestion.job_id]))

        return SuggestionHistory(candidate_id=candidate_id, records=records)
