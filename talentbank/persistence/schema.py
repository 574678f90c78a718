"""Database schema definition and ORM models.

ORM models convert to and from domain models with ``to_domain`` /
``from_domain``. Timestamps are stored as ISO 8601 strings in UTC, which
sort correctly as plain text.
"""

import logging
from typing import Iterable

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    inspect,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship

from talentbank.domain.models import (
    Candidate,
    InAppNotification,
    JobRequisition,
    Suggestion,
    TalentBankEntry,
)
from talentbank.utils.timestamps import format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)

Base = declarative_base()


def build_search_index(parts: Iterable[str]) -> str:
    """Lowercased, newline-separated text used for substring search.

    The separator keeps a search term from matching across two fields.
    """
    return "\n".join(part for part in parts if part).lower()


class CandidateModel(Base):
    """ORM model for candidates table.

    Candidate profiles are owned by candidate CRUD; the engine only reads
    them, except for the talent-bank notes and flag.
    """

    __tablename__ = "candidates"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    skills = Column(JSON, nullable=False, default=list)
    notes = Column(Text, nullable=True)
    added_to_talent_bank = Column(String(50), nullable=True)

    # name, email and skills, lowercased
    search_index = Column(Text, nullable=False, default="")

    __table_args__ = (Index("idx_candidates_email", "email"),)

    def to_domain(self) -> Candidate:
        return Candidate(
            id=self.id,
            name=self.name,
            email=self.email,
            phone=self.phone,
            skills=list(self.skills or []),
            notes=self.notes,
            added_to_talent_bank=parse_timestamp(self.added_to_talent_bank),
        )

    @classmethod
    def from_domain(cls, candidate: Candidate) -> "CandidateModel":
        model = cls(id=candidate.id)
        model.apply(candidate)
        return model

    def apply(self, candidate: Candidate) -> None:
        """Copy every profile field of ``candidate`` onto this row."""
        self.name = candidate.name
        self.email = candidate.email
        self.phone = candidate.phone
        self.skills = list(candidate.skills)
        self.notes = candidate.notes
        self.added_to_talent_bank = format_timestamp(candidate.added_to_talent_bank)
        self.refresh_search_index()

    def refresh_search_index(self) -> None:
        self.search_index = build_search_index(
            [self.name, self.email, *(self.skills or [])]
        )


class JobModel(Base):
    """ORM model for jobs table (database-backed job catalog)."""

    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True)
    title = Column(Text, nullable=False)
    company = Column(String(255), nullable=True)
    location = Column(String(255), nullable=True)
    employment_type = Column(String(50), nullable=True)
    status = Column(String(20), nullable=False, default="active")
    required_skills = Column(JSON, nullable=False, default=list)

    __table_args__ = (Index("idx_jobs_status", "status"),)

    def to_domain(self) -> JobRequisition:
        return JobRequisition(
            id=self.id,
            title=self.title,
            company=self.company,
            location=self.location,
            employment_type=self.employment_type,
            status=self.status,
            required_skills=list(self.required_skills or []),
        )

    @classmethod
    def from_domain(cls, job: JobRequisition) -> "JobModel":
        return cls(
            id=job.id,
            title=job.title,
            company=job.company,
            location=job.location,
            employment_type=job.employment_type,
            status=job.status.value,
            required_skills=list(job.required_skills),
        )


class TalentBankEntryModel(Base):
    """ORM model for talent_bank_entries table.

    One row per member; ``candidate_id`` is unique.
    """

    __tablename__ = "talent_bank_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    candidate_id = Column(
        Integer, ForeignKey("candidates.id"), nullable=False, unique=True
    )
    priority = Column(String(10), nullable=False, default="medium")
    available = Column(Boolean, nullable=False, default=True)
    highlighted_skills = Column(JSON, nullable=False, default=list)
    evaluation_score = Column(Float, nullable=True)
    added_at = Column(String(50), nullable=False)

    # highlighted skills, lowercased
    skills_index = Column(Text, nullable=False, default="")

    candidate = relationship(CandidateModel, lazy="joined")

    __table_args__ = (
        Index("idx_talent_bank_added_at", "added_at"),
        Index("idx_talent_bank_priority", "priority"),
    )

    def to_domain(self) -> TalentBankEntry:
        return TalentBankEntry(
            id=self.id,
            candidate=self.candidate.to_domain(),
            priority=self.priority,
            available=bool(self.available),
            highlighted_skills=list(self.highlighted_skills or []),
            evaluation_score=self.evaluation_score,
            added_at=parse_timestamp(self.added_at),
        )

    def refresh_search_index(self) -> None:
        self.skills_index = build_search_index(self.highlighted_skills or [])


class SuggestionModel(Base):
    """ORM model for suggestions table.

    ``(candidate_id, job_id)`` is unique. ``job_id`` has no foreign key
    because jobs may live behind the HTTP catalog.
    """

    __tablename__ = "suggestions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    candidate_id = Column(Integer, ForeignKey("candidates.id"), nullable=False)
    job_id = Column(Integer, nullable=False)
    state = Column(String(20), nullable=False, default="pending")
    created_at = Column(String(50), nullable=False)
    suggested_by = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    notification_sent = Column(Boolean, nullable=False, default=False)
    email_sent = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint("candidate_id", "job_id", name="uq_suggestions_candidate_job"),
        Index("idx_suggestions_candidate", "candidate_id", "created_at"),
    )

    def to_domain(self) -> Suggestion:
        return Suggestion(
            id=self.id,
            candidate_id=self.candidate_id,
            job_id=self.job_id,
            state=self.state,
            created_at=parse_timestamp(self.created_at),
            suggested_by=self.suggested_by,
            notes=self.notes,
            notification_sent=bool(self.notification_sent),
            email_sent=bool(self.email_sent),
        )


class NotificationModel(Base):
    """ORM model for notifications table (in-app notifications)."""

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    candidate_id = Column(Integer, ForeignKey("candidates.id"), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(20), nullable=False, default="system")
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(String(50), nullable=False)

    __table_args__ = (Index("idx_notifications_candidate", "candidate_id", "created_at"),)

    def to_domain(self) -> InAppNotification:
        return InAppNotification(
            id=self.id,
            candidate_id=self.candidate_id,
            title=self.title,
            message=self.message,
            type=self.type,
            read=bool(self.read),
            created_at=parse_timestamp(self.created_at),
        )

    @classmethod
    def from_domain(cls, notification: InAppNotification) -> "NotificationModel":
        return cls(
            id=notification.id,
            candidate_id=notification.candidate_id,
            title=notification.title,
            message=notification.message,
            type=notification.type.value,
            read=notification.read,
            created_at=format_timestamp(notification.created_at),
        )


def create_schema(engine: Engine) -> None:
    """Create all tables and indexes if they don't exist (idempotent)."""
    logger.info("Creating database schema if not exists")

    try:
        Base.metadata.create_all(engine, checkfirst=True)
        tables = inspect(engine).get_table_names()
        logger.info(f"Database schema ready. Tables: {', '.join(tables)}")
    except Exception as e:
        logger.error(f"Failed to create database schema: {e}", exc_info=True)
        raise
