"""Skill-overlap matching engine.

Scores talent-bank candidates against a job's required skills:
1. Intersect normalized candidate skills with normalized required skills
2. Compute the match percentage over the distinct required skills
3. Drop zero-overlap pairs
4. Sort by percentage desc, matched count desc, id asc

The engine is stateless and read-only; results are recomputed on every call
so profile edits are reflected immediately.
"""

import logging
from typing import Iterable, List, Optional

from talentbank.domain.models import Candidate, JobRequisition

from .models import JobMatch, MatchResult

logger = logging.getLogger(__name__)


class SkillMatcher:
    """Scores candidates and jobs by skill overlap."""

    def __init__(self, max_results: int = 0, logger_instance: logging.Logger = None):
        """Initialize SkillMatcher.

        Args:
            max_results: Maximum results returned per query (0 = unlimited)
            logger_instance: Optional logger instance (defaults to module logger)
        """
        if max_results < 0:
            raise ValueError(f"max_results must be >= 0, got: {max_results}")
        self.max_results = max_results
        self.logger = logger_instance or logger

    def score(self, candidate: Candidate, job: JobRequisition) -> Optional[MatchResult]:
        """Score one candidate against one job.

        Returns:
            MatchResult, or None when the job has no required skills or the
            candidate shares none of them
        """
        total_required = len(job.skill_keys)
        if total_required == 0:
            return None

        matched_keys = candidate.skill_keys & job.skill_keys
        if not matched_keys:
            return None

        percentage = len(matched_keys) / total_required * 100
        percentage = min(100.0, max(0.0, percentage))

        return MatchResult(
            candidate=candidate,
            job_id=job.id,
            matched_skill_count=len(matched_keys),
            total_required_skills=total_required,
            match_percentage=percentage,
            matched_skills=job.skill_names_for(matched_keys),
        )

    def compute_matches(
        self, job: JobRequisition, candidates: Iterable[Candidate]
    ) -> List[MatchResult]:
        """Score every candidate against ``job``.

        A job without required skills, or an empty pool, yields an empty list.

        Args:
            job: Job requisition to match against
            candidates: Candidate pool (talent-bank members)

        Returns:
            MatchResults ordered by match_percentage desc, matched_skill_count
            desc, candidate id asc
        """
        if not job.skill_keys:
            self.logger.debug(
                f"Job {job.id} has no required skills, nothing to match",
                extra={"event": "matching.skipped", "job_id": job.id},
            )
            return []

        pool_size = 0
        results: List[MatchResult] = []
        for candidate in candidates:
            pool_size += 1
            result = self.score(candidate, job)
            if result is not None:
                results.append(result)

        results.sort(
            key=lambda r: (-r.match_percentage, -r.matched_skill_count, r.candidate_id)
        )
        results = self._truncate(results)

        self.logger.info(
            f"Computed {len(results)} matches for job {job.id}",
            extra={
                "event": "matching.computed",
                "job_id": job.id,
                "pool_size": pool_size,
                "match_count": len(results),
                "full_match_count": sum(1 for r in results if r.is_full_match),
                "required_skills": len(job.skill_keys),
            },
        )
        return results

    def rank_jobs(
        self, candidate: Candidate, jobs: Iterable[JobRequisition]
    ) -> List[JobMatch]:
        """Score one candidate against many jobs.

        Jobs without required skills or without overlap are left out.

        Returns:
            JobMatches ordered by match_percentage desc, matched_skill_count
            desc, job id asc (suggestion_state left unset)
        """
        ranked: List[JobMatch] = []
        for job in jobs:
            result = self.score(candidate, job)
            if result is not None:
                ranked.append(JobMatch(job=job, match_result=result))

        ranked.sort(
            key=lambda m: (
                -m.match_result.match_percentage,
                -m.match_result.matched_skill_count,
                m.job.id,
            )
        )
        ranked = self._truncate(ranked)

        self.logger.info(
            f"Ranked {len(ranked)} jobs for candidate {candidate.id}",
            extra={
                "event": "matching.jobs_ranked",
                "candidate_id": candidate.id,
                "match_count": len(ranked),
            },
        )
        return ranked

    def _truncate(self, items: list) -> list:
        if self.max_results and len(items) > self.max_results:
            return items[: self.max_results]
        return items
