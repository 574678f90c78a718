"""JSON-ready views of engine results."""

from typing import Dict, Optional

from talentbank.domain.models import JobRequisition, Suggestion, TalentBankEntry
from talentbank.directory.pagination import TalentBankPage
from talentbank.suggestions.models import SuggestionHistory


def job_to_dict(job: Optional[JobRequisition]) -> Optional[Dict]:
    if job is None:
        return None
    return job.model_dump(mode="json")


def suggestion_to_dict(suggestion: Optional[Suggestion]) -> Optional[Dict]:
    if suggestion is None:
        return None
    return suggestion.model_dump(mode="json")


def entry_to_dict(entry: TalentBankEntry) -> Dict:
    return entry.model_dump(mode="json")


def page_to_dict(page: TalentBankPage) -> Dict:
    return {
        "data": [entry_to_dict(entry) for entry in page.entries],
        "total": page.total,
        "per_page": page.per_page,
        "current_page": page.page,
        "last_page": page.last_page,
        "has_next": page.has_next,
    }


def history_to_dict(history: SuggestionHistory) -> Dict:
    return {
        "candidate_id": history.candidate_id,
        "suggestions": [
            {**suggestion_to_dict(record.suggestion), "job": job_to_dict(record.job)}
            for record in history.records
        ],
        "stats": {
            "total": history.total,
            "pending": history.pending,
            "applied": history.applied,
            "discarded": history.discarded,
        },
    }
