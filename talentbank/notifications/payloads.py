"""Payload resolution for suggestion notifications."""

from typing import Dict

from talentbank.domain.models import Candidate, JobRequisition, Suggestion


def build_suggestion_context(
    suggestion: Suggestion, candidate: Candidate, job: JobRequisition
) -> Dict:
    """Build the template context for a suggestion.

    Every key is always present (None when unknown) so templates rendered
    with StrictUndefined only fail on genuine template mistakes.

    Returns:
        Dictionary with keys:
        - suggestion_id, suggested_at (ISO 8601), suggested_by, notes
        - candidate_name, candidate_email
        - job_id, job_title, company, location, employment_type
        - required_skills, matched_skills: lists of skill names
    """
    matched = job.skill_names_for(candidate.skill_keys & job.skill_keys)

    return {
        "suggestion_id": suggestion.id,
        "suggested_at": suggestion.created_at.isoformat(),
        "suggested_by": suggestion.suggested_by,
        "notes": suggestion.notes,
        "candidate_name": candidate.name,
        "candidate_email": candidate.email,
        "job_id": job.id,
        "job_title": job.title,
        "company": job.company,
        "location": job.location,
        "employment_type": job.employment_type,
        "required_skills": list(job.required_skills),
        "matched_skills": matched,
    }


def build_in_app_message(context: Dict) -> str:
    """One-line message for the in-app notification."""
    message = f"You have been suggested for the position '{context['job_title']}'"
    if context["company"]:
        message += f" at {context['company']}"
    if context["location"]:
        message += f" ({context['location']})"
    return message + "."
