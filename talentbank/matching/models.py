"""Data models for the matching engine.

Match results are derived on every query and never persisted.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from talentbank.domain.models import Candidate, JobRequisition, SuggestionState


@dataclass
class MatchResult:
    """Skill overlap of one candidate with one job.

    Attributes:
        candidate: Candidate that was scored
        job_id: Job the candidate was scored against
        matched_skill_count: Size of the case-insensitive skill intersection
        total_required_skills: Number of distinct required skills of the job
        match_percentage: matched_skill_count / total_required_skills * 100, in [0, 100]
        matched_skills: Matched skill names, in the job's order and spelling
    """

    candidate: Candidate
    job_id: int
    matched_skill_count: int
    total_required_skills: int
    match_percentage: float
    matched_skills: List[str] = field(default_factory=list)

    @property
    def candidate_id(self) -> int:
        return self.candidate.id

    @property
    def is_full_match(self) -> bool:
        return self.total_required_skills > 0 and (
            self.matched_skill_count == self.total_required_skills
        )


@dataclass
class JobMatch:
    """A job ranked for a selected candidate.

    ``suggestion_state`` is the state of an existing suggestion of this job
    to the candidate, or None when the job has not been suggested yet. The
    recruiter-facing flow uses it to disable re-suggestion.
    """

    job: JobRequisition
    match_result: MatchResult
    suggestion_state: Optional[SuggestionState] = None

    @property
    def already_suggested(self) -> bool:
        return self.suggestion_state is not None
