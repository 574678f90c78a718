"""Serialization helpers for match results."""

from typing import Dict

from .models import JobMatch, MatchResult


def match_result_to_dict(result: MatchResult) -> Dict:
    """Flatten a MatchResult for JSON output.

    The percentage is rounded to two decimals for display only; comparisons
    always use the unrounded value.
    """
    candidate = result.candidate
    return {
        "candidate_id": candidate.id,
        "name": candidate.name,
        "email": candidate.email,
        "job_id": result.job_id,
        "matched_skill_count": result.matched_skill_count,
        "total_required_skills": result.total_required_skills,
        "match_percentage": round(result.match_percentage, 2),
        "matched_skills": list(result.matched_skills),
        "full_match": result.is_full_match,
    }


def job_match_to_dict(job_match: JobMatch) -> Dict:
    """Flatten a JobMatch, including the "already suggested" projection."""
    job = job_match.job
    result = job_match.match_result
    return {
        "job_id": job.id,
        "title": job.title,
        "company": job.company,
        "location": job.location,
        "matched_skill_count": result.matched_skill_count,
        "total_required_skills": result.total_required_skills,
        "match_percentage": round(result.match_percentage, 2),
        "matched_skills": list(result.matched_skills),
        "already_suggested": job_match.already_suggested,
        "suggestion_state": (
            job_match.suggestion_state.value if job_match.suggestion_state else None
        ),
    }
