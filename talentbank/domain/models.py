"""Core domain models for the talent bank.

This module defines the data structures used throughout the engine:
- Candidate: talent-bank candidate with a normalized skill set
- JobRequisition: job posting owned by job CRUD (read-only here)
- TalentBankEntry: talent-bank membership row wrapping a Candidate
- Suggestion: recorded recommendation of a job to a candidate
- InAppNotification: notification record addressed to a candidate
"""

from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from pydantic import BaseModel, Field, PrivateAttr, field_validator

from talentbank.utils.timestamps import ensure_utc

from .skills import clean_skill_names, normalize_skill


class JobStatus(str, Enum):
    """Lifecycle status of a job requisition."""

    ACTIVE = "active"
    CLOSED = "closed"
    DRAFT = "draft"


class SuggestionState(str, Enum):
    """Suggestion lifecycle states. APPLIED and DISCARDED are terminal."""

    PENDING = "pending"
    VIEWED = "viewed"
    APPLIED = "applied"
    DISCARDED = "discarded"

    @property
    def is_terminal(self) -> bool:
        return self in (SuggestionState.APPLIED, SuggestionState.DISCARDED)


class Priority(str, Enum):
    """Recruiter-assigned priority of a talent-bank member."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class NotificationType(str, Enum):
    """Category of an in-app notification."""

    SYSTEM = "system"
    APPLICATION = "application"
    REMINDER = "reminder"
    ALERT = "alert"
    MANUAL = "manual"


def _optional_text(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    stripped = v.strip()
    return stripped if stripped else None


def _required_text(v: str) -> str:
    if not v or not v.strip():
        raise ValueError("Field cannot be empty or whitespace-only")
    return v.strip()


class Candidate(BaseModel):
    """Talent-bank candidate.

    Skill names are cleaned on construction (stripped, blanks dropped,
    case-insensitive duplicates collapsed) and their normalized keys are
    computed once, so matching never re-normalizes per comparison. The
    model is frozen so the keys cannot drift from ``skills``.
    """

    id: int = Field(..., description="Candidate identifier")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Contact email address")
    phone: Optional[str] = Field(None, description="Contact phone number")
    skills: List[str] = Field(default_factory=list, description="Skill names, in profile order")
    notes: Optional[str] = Field(None, description="Recruiter notes")
    added_to_talent_bank: Optional[datetime] = Field(
        None, description="When the candidate was flagged for the talent bank (UTC)"
    )

    _skill_keys: FrozenSet[str] = PrivateAttr(default=frozenset())

    @field_validator("name", "email")
    @classmethod
    def strip_required(cls, v: str) -> str:
        """Strip whitespace from required string fields."""
        return _required_text(v)

    @field_validator("phone", "notes")
    @classmethod
    def strip_optional(cls, v: Optional[str]) -> Optional[str]:
        """Strip optional text; blank becomes None."""
        return _optional_text(v)

    @field_validator("skills")
    @classmethod
    def clean_skills(cls, v: List[str]) -> List[str]:
        return clean_skill_names(v)

    @field_validator("added_to_talent_bank")
    @classmethod
    def normalize_timestamp(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    def model_post_init(self, __context) -> None:
        self._skill_keys = frozenset(normalize_skill(skill) for skill in self.skills)

    @property
    def skill_keys(self) -> FrozenSet[str]:
        """Normalized (trimmed, lowercased) skill names."""
        return self._skill_keys

    model_config = {"frozen": True, "json_schema_extra": {"example": {
        "id": 42,
        "name": "Ana Torres",
        "email": "ana.torres@example.com",
        "phone": "+51 999 888 777",
        "skills": ["React", "Node", "SQL"],
        "notes": "Strong frontend profile",
        "added_to_talent_bank": "2025-11-03T10:00:00Z",
    }}}


class JobRequisition(BaseModel):
    """Job posting eligible to receive suggestions. Owned by job CRUD."""

    id: int = Field(..., description="Job identifier")
    title: str = Field(..., description="Job title")
    company: Optional[str] = Field(None, description="Hiring company")
    location: Optional[str] = Field(None, description="Job location")
    employment_type: Optional[str] = Field(None, description="Full-time, part-time, ...")
    status: JobStatus = Field(JobStatus.ACTIVE, description="Requisition lifecycle status")
    required_skills: List[str] = Field(
        default_factory=list, description="Required skill names, in posting order"
    )

    _skill_keys: FrozenSet[str] = PrivateAttr(default=frozenset())
    _skill_names: Dict[str, str] = PrivateAttr(default_factory=dict)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return _required_text(v)

    @field_validator("company", "location", "employment_type")
    @classmethod
    def strip_optional(cls, v: Optional[str]) -> Optional[str]:
        return _optional_text(v)

    @field_validator("status", mode="before")
    @classmethod
    def lowercase_status(cls, v):
        """Accept status values in any case."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("required_skills")
    @classmethod
    def clean_skills(cls, v: List[str]) -> List[str]:
        return clean_skill_names(v)

    def model_post_init(self, __context) -> None:
        self._skill_names = {normalize_skill(skill): skill for skill in self.required_skills}
        self._skill_keys = frozenset(self._skill_names)

    @property
    def skill_keys(self) -> FrozenSet[str]:
        """Normalized required-skill names."""
        return self._skill_keys

    @property
    def is_active(self) -> bool:
        return self.status == JobStatus.ACTIVE

    def skill_names_for(self, keys) -> List[str]:
        """Display names of the given skill keys, in required-skill order."""
        wanted = set(keys)
        return [name for key, name in self._skill_names.items() if key in wanted]

    model_config = {"frozen": True}


class TalentBankEntry(BaseModel):
    """Talent-bank membership of one candidate."""

    id: int = Field(..., description="Entry identifier")
    candidate: Candidate = Field(..., description="Member candidate")
    priority: Priority = Field(Priority.MEDIUM, description="Recruiter priority")
    available: bool = Field(True, description="Whether the candidate is open to offers")
    highlighted_skills: List[str] = Field(
        default_factory=list, description="Skills the recruiter highlighted for this member"
    )
    evaluation_score: Optional[float] = Field(
        None, ge=0, le=100, description="Latest evaluation score (0-100)"
    )
    added_at: datetime = Field(..., description="When the entry was created (UTC)")

    @field_validator("highlighted_skills")
    @classmethod
    def clean_skills(cls, v: List[str]) -> List[str]:
        return clean_skill_names(v)

    @field_validator("added_at")
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    def as_match_candidate(self) -> Candidate:
        """Candidate as seen by the matching engine.

        Falls back to the highlighted skills when the candidate profile lists
        none of its own.
        """
        if self.candidate.skills or not self.highlighted_skills:
            return self.candidate
        data = self.candidate.model_dump()
        data["skills"] = list(self.highlighted_skills)
        return Candidate(**data)


class Suggestion(BaseModel):
    """Recorded recommendation of a job to a candidate.

    Frozen: state and delivery flags change only through the suggestion
    repository, which returns a fresh instance.
    """

    id: int = Field(..., description="Surrogate identifier")
    candidate_id: int = Field(..., description="Candidate the job was suggested to")
    job_id: int = Field(..., description="Suggested job")
    state: SuggestionState = Field(SuggestionState.PENDING, description="Lifecycle state")
    created_at: datetime = Field(..., description="Creation time (UTC)")
    suggested_by: Optional[str] = Field(None, description="Recruiter identity")
    notes: Optional[str] = Field(None, description="Note attached at creation")
    notification_sent: bool = Field(False, description="In-app notification delivered")
    email_sent: bool = Field(False, description="Email delivered")

    @field_validator("created_at")
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @field_validator("notes", "suggested_by")
    @classmethod
    def strip_optional(cls, v: Optional[str]) -> Optional[str]:
        return _optional_text(v)

    model_config = {"frozen": True, "json_schema_extra": {"example": {
        "id": 7,
        "candidate_id": 42,
        "job_id": 3,
        "state": "pending",
        "created_at": "2025-11-04T09:30:00Z",
        "suggested_by": "recruiter@example.com",
        "notes": "Great fit for the frontend team",
        "notification_sent": True,
        "email_sent": False,
    }}}


class InAppNotification(BaseModel):
    """Notification record shown to a candidate inside the candidate portal."""

    id: Optional[int] = Field(None, description="Identifier (None until persisted)")
    candidate_id: int = Field(..., description="Recipient candidate")
    title: str = Field(..., description="Short headline")
    message: str = Field(..., description="Body text")
    type: NotificationType = Field(NotificationType.SYSTEM, description="Notification category")
    read: bool = Field(False, description="Whether the candidate has read it")
    created_at: datetime = Field(..., description="Creation time (UTC)")

    @field_validator("title", "message")
    @classmethod
    def strip_required(cls, v: str) -> str:
        return _required_text(v)

    @field_validator("created_at")
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        return ensure_utc(v)
