"""Builders for domain objects and database rows used across tests."""

from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from talentbank.domain.context import RequestContext
from talentbank.domain.models import Candidate, JobRequisition, Priority, TalentBankEntry
from talentbank.persistence import (
    CandidateRepository,
    JobRepository,
    TalentBankRepository,
    get_session,
)

AUTH_CTX = RequestContext(actor="recruiter@example.com", token="test-token")
ANON_CTX = RequestContext(actor="anonymous", token=None)

BASE_TIME = datetime(2025, 11, 1, 9, 0, tzinfo=timezone.utc)


def make_candidate(candidate_id: int, skills: Iterable[str] = (), **overrides) -> Candidate:
    data = {
        "id": candidate_id,
        "name": f"Candidate {candidate_id}",
        "email": f"candidate{candidate_id}@example.com",
        "skills": list(skills),
    }
    data.update(overrides)
    return Candidate(**data)


def make_job(job_id: int, skills: Iterable[str] = (), **overrides) -> JobRequisition:
    data = {
        "id": job_id,
        "title": f"Job {job_id}",
        "company": "Acme",
        "location": "Lima",
        "employment_type": "Full-time",
        "status": "active",
        "required_skills": list(skills),
    }
    data.update(overrides)
    return JobRequisition(**data)


def seed_candidates(candidates: Iterable[Candidate]) -> None:
    with get_session() as session:
        repo = CandidateRepository(session)
        for candidate in candidates:
            repo.upsert(candidate)


def seed_jobs(jobs: Iterable[JobRequisition]) -> None:
    with get_session() as session:
        repo = JobRepository(session)
        for job in jobs:
            repo.upsert(job)


def seed_talent_bank(
    candidates: Iterable[Candidate],
    priority: Priority = Priority.MEDIUM,
    start: Optional[datetime] = None,
) -> List[TalentBankEntry]:
    """Store candidates and add each to the talent bank, one minute apart.

    The first candidate is the oldest member.
    """
    candidates = list(candidates)
    seed_candidates(candidates)

    start = start or BASE_TIME
    entries = []
    with get_session() as session:
        repo = TalentBankRepository(session)
        for offset, candidate in enumerate(candidates):
            entries.append(
                repo.add(
                    candidate.id,
                    priority=priority,
                    added_at=start + timedelta(minutes=offset),
                )
            )
    return entries
