"""Data access layer (repositories) for persistence operations.

Repositories encapsulate database operations and return domain models rather
than ORM models. They flush but never commit; the unit of work belongs to
``get_session``.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, contains_eager

from talentbank.domain.models import (
    Candidate,
    InAppNotification,
    JobRequisition,
    JobStatus,
    Priority,
    Suggestion,
    SuggestionState,
    TalentBankEntry,
)
from talentbank.domain.skills import clean_skill_names
from talentbank.utils.timestamps import format_timestamp, utc_now

from .exceptions import DataIntegrityError, PersistenceError, RecordNotFoundError
from .schema import (
    CandidateModel,
    JobModel,
    NotificationModel,
    SuggestionModel,
    TalentBankEntryModel,
)

logger = logging.getLogger(__name__)


def _like_pattern(term: str) -> str:
    """Substring LIKE pattern for ``term`` with wildcards escaped."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class CandidateRepository:
    """Repository for candidate profiles."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get(self, candidate_id: int) -> Optional[Candidate]:
        """Retrieve candidate by id.

        Returns:
            Candidate domain model if found, None otherwise

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            model = self.session.get(CandidateModel, candidate_id)
            return model.to_domain() if model is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving candidate {candidate_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve candidate: {e}") from e

    def list_all(self) -> List[Candidate]:
        """All candidates ordered by id."""
        try:
            models = self.session.execute(
                select(CandidateModel).order_by(CandidateModel.id)
            ).scalars().all()
            return [model.to_domain() for model in models]
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving candidates: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve candidates: {e}") from e

    def upsert(self, candidate: Candidate) -> Candidate:
        """Insert a candidate profile or overwrite the stored one.

        Raises:
            DataIntegrityError: If a constraint is violated
            PersistenceError: If database error occurs
        """
        try:
            existing = self.session.get(CandidateModel, candidate.id)

            if existing:
                existing.apply(candidate)
                self.session.flush()
                return existing.to_domain()

            model = CandidateModel.from_domain(candidate)
            self.session.add(model)
            self.session.flush()
            return model.to_domain()

        except IntegrityError as e:
            logger.error(f"Integrity error upserting candidate {candidate.id}: {e}", exc_info=True)
            raise DataIntegrityError(
                f"Failed to upsert candidate due to constraint violation: {e}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error upserting candidate {candidate.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to upsert candidate: {e}") from e

    def update_notes(self, candidate_id: int, notes: Optional[str]) -> Candidate:
        """Replace the recruiter notes of a candidate.

        Raises:
            RecordNotFoundError: If the candidate doesn't exist
            PersistenceError: If database error occurs
        """
        try:
            model = self.session.get(CandidateModel, candidate_id)
            if model is None:
                raise RecordNotFoundError(f"Candidate {candidate_id} not found")

            model.notes = notes.strip() if notes and notes.strip() else None
            self.session.flush()
            return model.to_domain()

        except RecordNotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error updating notes for candidate {candidate_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update candidate notes: {e}") from e


class JobRepository:
    """Repository for the database-backed job catalog."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, job_id: int) -> Optional[JobRequisition]:
        """Retrieve job by id, or None.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            model = self.session.get(JobModel, job_id)
            return model.to_domain() if model is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving job {job_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve job: {e}") from e

    def list_active(self) -> List[JobRequisition]:
        """Jobs with status ``active``, ordered by id."""
        try:
            models = self.session.execute(
                select(JobModel)
                .where(JobModel.status == JobStatus.ACTIVE.value)
                .order_by(JobModel.id)
            ).scalars().all()
            return [model.to_domain() for model in models]
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving active jobs: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve active jobs: {e}") from e

    def upsert(self, job: JobRequisition) -> JobRequisition:
        """Insert a job or overwrite the stored one.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            existing = self.session.get(JobModel, job.id)

            if existing:
                existing.title = job.title
                existing.company = job.company
                existing.location = job.location
                existing.employment_type = job.employment_type
                existing.status = job.status.value
                existing.required_skills = list(job.required_skills)
                self.session.flush()
                return existing.to_domain()

            model = JobModel.from_domain(job)
            self.session.add(model)
            self.session.flush()
            return model.to_domain()

        except IntegrityError as e:
            logger.error(f"Integrity error upserting job {job.id}: {e}", exc_info=True)
            raise DataIntegrityError(f"Failed to upsert job due to constraint violation: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error upserting job {job.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to upsert job: {e}") from e


class TalentBankRepository:
    """Repository for talent-bank membership."""

    UPDATABLE_FIELDS = ("priority", "available", "evaluation_score", "highlighted_skills")

    def __init__(self, session: Session):
        self.session = session

    def _entries(self):
        return (
            select(TalentBankEntryModel)
            .join(TalentBankEntryModel.candidate)
            .options(contains_eager(TalentBankEntryModel.candidate))
        )

    @staticmethod
    def _apply_filters(stmt, search: Optional[str], priority: Optional[Priority],
                       available: Optional[bool]):
        if search:
            pattern = _like_pattern(search.strip().lower())
            stmt = stmt.where(
                or_(
                    CandidateModel.search_index.like(pattern, escape="\\"),
                    TalentBankEntryModel.skills_index.like(pattern, escape="\\"),
                )
            )
        if priority is not None:
            stmt = stmt.where(TalentBankEntryModel.priority == Priority(priority).value)
        if available is not None:
            stmt = stmt.where(TalentBankEntryModel.available == available)
        return stmt

    def get(self, entry_id: int) -> Optional[TalentBankEntry]:
        """Retrieve entry by id, or None.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            model = self.session.execute(
                self._entries().where(TalentBankEntryModel.id == entry_id)
            ).scalar_one_or_none()
            return model.to_domain() if model is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving talent bank entry {entry_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve talent bank entry: {e}") from e

    def get_by_candidate(self, candidate_id: int) -> Optional[TalentBankEntry]:
        """Retrieve the entry of a candidate, or None."""
        try:
            model = self.session.execute(
                self._entries().where(TalentBankEntryModel.candidate_id == candidate_id)
            ).scalar_one_or_none()
            return model.to_domain() if model is not None else None
        except SQLAlchemyError as e:
            logger.error(
                f"Error retrieving talent bank entry for candidate {candidate_id}: {e}",
                exc_info=True,
            )
            raise PersistenceError(f"Failed to retrieve talent bank entry: {e}") from e

    def count(
        self,
        search: Optional[str] = None,
        priority: Optional[Priority] = None,
        available: Optional[bool] = None,
    ) -> int:
        """Number of entries matching the filters.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = (
                select(func.count(TalentBankEntryModel.id))
                .select_from(TalentBankEntryModel)
                .join(TalentBankEntryModel.candidate)
            )
            stmt = self._apply_filters(stmt, search, priority, available)
            return int(self.session.execute(stmt).scalar_one())
        except SQLAlchemyError as e:
            logger.error(f"Error counting talent bank entries: {e}", exc_info=True)
            raise PersistenceError(f"Failed to count talent bank entries: {e}") from e

    def list_page(
        self,
        offset: int,
        limit: int,
        search: Optional[str] = None,
        priority: Optional[Priority] = None,
        available: Optional[bool] = None,
    ) -> List[TalentBankEntry]:
        """One page of entries, newest first (added_at desc, id desc).

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = self._apply_filters(self._entries(), search, priority, available)
            stmt = (
                stmt.order_by(
                    TalentBankEntryModel.added_at.desc(), TalentBankEntryModel.id.desc()
                )
                .offset(offset)
                .limit(limit)
            )
            models = self.session.execute(stmt).scalars().all()
            return [model.to_domain() for model in models]
        except SQLAlchemyError as e:
            logger.error(f"Error listing talent bank entries: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list talent bank entries: {e}") from e

    def list_all(self) -> List[TalentBankEntry]:
        """Every entry, unfiltered, newest first."""
        try:
            stmt = self._entries().order_by(
                TalentBankEntryModel.added_at.desc(), TalentBankEntryModel.id.desc()
            )
            models = self.session.execute(stmt).scalars().all()
            return [model.to_domain() for model in models]
        except SQLAlchemyError as e:
            logger.error(f"Error listing talent bank entries: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list talent bank entries: {e}") from e

    def add(
        self,
        candidate_id: int,
        priority: Priority = Priority.MEDIUM,
        highlighted_skills: Optional[List[str]] = None,
        notes: Optional[str] = None,
        added_at: Optional[datetime] = None,
    ) -> TalentBankEntry:
        """Create the entry of a candidate and flag the candidate profile.

        Notes, when given, replace the candidate's recruiter notes.

        Raises:
            RecordNotFoundError: If the candidate doesn't exist
            DataIntegrityError: If the candidate already has an entry
            PersistenceError: If database error occurs
        """
        try:
            candidate = self.session.get(CandidateModel, candidate_id)
            if candidate is None:
                raise RecordNotFoundError(f"Candidate {candidate_id} not found")

            timestamp = format_timestamp(added_at or utc_now())
            model = TalentBankEntryModel(
                candidate=candidate,
                priority=Priority(priority).value,
                available=True,
                highlighted_skills=clean_skill_names(highlighted_skills or []),
                added_at=timestamp,
            )
            model.refresh_search_index()
            self.session.add(model)

            candidate.added_to_talent_bank = timestamp
            if notes is not None:
                candidate.notes = notes.strip() or None

            self.session.flush()
            return model.to_domain()

        except RecordNotFoundError:
            raise
        except IntegrityError as e:
            logger.warning(
                f"Integrity error adding candidate {candidate_id} to talent bank: {e}",
                extra={"event": "talent_bank.integrity_error", "candidate_id": candidate_id},
            )
            raise DataIntegrityError(
                f"Failed to add talent bank entry due to constraint violation: {e}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error adding candidate {candidate_id} to talent bank: {e}", exc_info=True)
            raise PersistenceError(f"Failed to add talent bank entry: {e}") from e

    def update(self, entry_id: int, **fields) -> TalentBankEntry:
        """Update entry fields; ``None`` values leave a field unchanged.

        Args:
            entry_id: Entry to update
            **fields: Any of priority, available, evaluation_score, highlighted_skills

        Raises:
            ValueError: If an unknown field is passed
            RecordNotFoundError: If the entry doesn't exist
            PersistenceError: If database error occurs
        """
        unknown = set(fields) - set(self.UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown talent bank fields: {', '.join(sorted(unknown))}")

        try:
            model = self.session.get(TalentBankEntryModel, entry_id)
            if model is None:
                raise RecordNotFoundError(f"Talent bank entry {entry_id} not found")

            if fields.get("priority") is not None:
                model.priority = Priority(fields["priority"]).value
            if fields.get("available") is not None:
                model.available = bool(fields["available"])
            if fields.get("evaluation_score") is not None:
                model.evaluation_score = float(fields["evaluation_score"])
            if fields.get("highlighted_skills") is not None:
                model.highlighted_skills = clean_skill_names(fields["highlighted_skills"])
                model.refresh_search_index()

            self.session.flush()
            return model.to_domain()

        except RecordNotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error updating talent bank entry {entry_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update talent bank entry: {e}") from e

    def delete(self, entry_id: int) -> None:
        """Remove an entry and clear the candidate's talent-bank flag.

        Raises:
            RecordNotFoundError: If the entry doesn't exist
            PersistenceError: If database error occurs
        """
        try:
            model = self.session.get(TalentBankEntryModel, entry_id)
            if model is None:
                raise RecordNotFoundError(f"Talent bank entry {entry_id} not found")

            candidate = self.session.get(CandidateModel, model.candidate_id)
            if candidate is not None:
                candidate.added_to_talent_bank = None

            self.session.delete(model)
            self.session.flush()

        except RecordNotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error deleting talent bank entry {entry_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to delete talent bank entry: {e}") from e


class SuggestionRepository:
    """Repository for suggestions. One row per (candidate_id, job_id) pair."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, suggestion_id: int) -> Optional[Suggestion]:
        """Retrieve suggestion by id, or None."""
        try:
            model = self.session.get(SuggestionModel, suggestion_id)
            return model.to_domain() if model is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving suggestion {suggestion_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve suggestion: {e}") from e

    def get_by_pair(self, candidate_id: int, job_id: int) -> Optional[Suggestion]:
        """Retrieve the suggestion of ``job_id`` to ``candidate_id``, or None."""
        try:
            model = self.session.execute(
                select(SuggestionModel).where(
                    SuggestionModel.candidate_id == candidate_id,
                    SuggestionModel.job_id == job_id,
                )
            ).scalar_one_or_none()
            return model.to_domain() if model is not None else None
        except SQLAlchemyError as e:
            logger.error(
                f"Error retrieving suggestion for candidate {candidate_id}, job {job_id}: {e}",
                exc_info=True,
            )
            raise PersistenceError(f"Failed to retrieve suggestion: {e}") from e

    def list_for_candidate(self, candidate_id: int) -> List[Suggestion]:
        """All suggestions of a candidate, most recent first (ties: id desc)."""
        try:
            models = self.session.execute(
                select(SuggestionModel)
                .where(SuggestionModel.candidate_id == candidate_id)
                .order_by(SuggestionModel.created_at.desc(), SuggestionModel.id.desc())
            ).scalars().all()
            return [model.to_domain() for model in models]
        except SQLAlchemyError as e:
            logger.error(
                f"Error listing suggestions for candidate {candidate_id}: {e}", exc_info=True
            )
            raise PersistenceError(f"Failed to list suggestions: {e}") from e

    def states_for_candidate(self, candidate_id: int) -> Dict[int, SuggestionState]:
        """Map job_id -> state for every suggestion of a candidate."""
        try:
            rows = self.session.execute(
                select(SuggestionModel.job_id, SuggestionModel.state).where(
                    SuggestionModel.candidate_id == candidate_id
                )
            ).all()
            return {job_id: SuggestionState(state) for job_id, state in rows}
        except SQLAlchemyError as e:
            logger.error(
                f"Error reading suggestion states for candidate {candidate_id}: {e}",
                exc_info=True,
            )
            raise PersistenceError(f"Failed to read suggestion states: {e}") from e

    def create(
        self,
        candidate_id: int,
        job_id: int,
        suggested_by: Optional[str] = None,
        notes: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> Suggestion:
        """Insert a ``pending`` suggestion.

        Raises:
            DataIntegrityError: If the pair already has a suggestion
            PersistenceError: If database error occurs
        """
        try:
            model = SuggestionModel(
                candidate_id=candidate_id,
                job_id=job_id,
                state=SuggestionState.PENDING.value,
                created_at=format_timestamp(created_at or utc_now()),
                suggested_by=suggested_by,
                notes=notes.strip() if notes and notes.strip() else None,
                notification_sent=False,
                email_sent=False,
            )
            self.session.add(model)
            self.session.flush()
            return model.to_domain()

        except IntegrityError as e:
            logger.warning(
                f"Integrity error creating suggestion for candidate {candidate_id}, job {job_id}: {e}",
                extra={
                    "event": "suggestion.integrity_error",
                    "candidate_id": candidate_id,
                    "job_id": job_id,
                },
            )
            raise DataIntegrityError(
                f"Failed to create suggestion due to constraint violation: {e}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating suggestion: {e}", exc_info=True)
            raise PersistenceError(f"Failed to create suggestion: {e}") from e

    def _require(self, suggestion_id: int) -> SuggestionModel:
        model = self.session.get(SuggestionModel, suggestion_id)
        if model is None:
            raise RecordNotFoundError(f"Suggestion {suggestion_id} not found")
        return model

    def update_state(self, suggestion_id: int, state: SuggestionState) -> Suggestion:
        """Set the lifecycle state (no transition checks here).

        Raises:
            RecordNotFoundError: If the suggestion doesn't exist
            PersistenceError: If database error occurs
        """
        try:
            model = self._require(suggestion_id)
            model.state = SuggestionState(state).value
            self.session.flush()
            return model.to_domain()
        except RecordNotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error updating suggestion {suggestion_id} state: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update suggestion state: {e}") from e

    def update_delivery(
        self, suggestion_id: int, notification_sent: bool, email_sent: bool
    ) -> Suggestion:
        """Store the delivery flags in place.

        Raises:
            RecordNotFoundError: If the suggestion doesn't exist
            PersistenceError: If database error occurs
        """
        try:
            model = self._require(suggestion_id)
            model.notification_sent = bool(notification_sent)
            model.email_sent = bool(email_sent)
            self.session.flush()
            return model.to_domain()
        except RecordNotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error(
                f"Error updating suggestion {suggestion_id} delivery flags: {e}", exc_info=True
            )
            raise PersistenceError(f"Failed to update suggestion delivery flags: {e}") from e

    def delete(self, suggestion_id: int) -> None:
        """Remove a suggestion.

        Raises:
            RecordNotFoundError: If the suggestion doesn't exist
            PersistenceError: If database error occurs
        """
        try:
            result = self.session.execute(
                delete(SuggestionModel).where(SuggestionModel.id == suggestion_id)
            )
            self.session.flush()
            if result.rowcount == 0:
                raise RecordNotFoundError(f"Suggestion {suggestion_id} not found")
        except RecordNotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error deleting suggestion {suggestion_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to delete suggestion: {e}") from e


class NotificationRepository:
    """Repository for in-app notifications."""

    def __init__(self, session: Session):
        self.session = session

    def add(self, notification: InAppNotification) -> InAppNotification:
        """Insert a notification and return it with its id.

        Raises:
            DataIntegrityError: If the candidate doesn't exist
            PersistenceError: If database error occurs
        """
        try:
            model = NotificationModel.from_domain(notification)
            self.session.add(model)
            self.session.flush()
            return model.to_domain()
        except IntegrityError as e:
            logger.error(
                f"Integrity error adding notification for candidate {notification.candidate_id}: {e}",
                exc_info=True,
            )
            raise DataIntegrityError(
                f"Failed to add notification due to constraint violation: {e}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error adding notification: {e}", exc_info=True)
            raise PersistenceError(f"Failed to add notification: {e}") from e

    def list_for_candidate(
        self, candidate_id: int, unread_only: bool = False
    ) -> List[InAppNotification]:
        """Notifications of a candidate, newest first."""
        try:
            stmt = select(NotificationModel).where(NotificationModel.candidate_id == candidate_id)
            if unread_only:
                stmt = stmt.where(NotificationModel.read.is_(False))
            stmt = stmt.order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
            models = self.session.execute(stmt).scalars().all()
            return [model.to_domain() for model in models]
        except SQLAlchemyError as e:
            logger.error(
                f"Error listing notifications for candidate {candidate_id}: {e}", exc_info=True
            )
            raise PersistenceError(f"Failed to list notifications: {e}") from e
