"""Read models of the suggestion store."""

from dataclasses import dataclass, field
from typing import List, Optional

from talentbank.domain.models import JobRequisition, Suggestion, SuggestionState


@dataclass
class SuggestionRecord:
    """A suggestion joined with its job, for the history view.

    ``job`` is None when the job no longer exists in the catalog.
    """

    suggestion: Suggestion
    job: Optional[JobRequisition] = None


@dataclass
class SuggestionHistory:
    """A candidate's suggestions, most recent first, with counters.

    ``pending`` counts suggestions not yet acted on (pending + viewed).
    """

    candidate_id: int
    records: List[SuggestionRecord] = field(default_factory=list)

    @property
    def suggestions(self) -> List[Suggestion]:
        return [record.suggestion for record in self.records]

    @property
    def total(self) -> int:
        return len(self.records)

    @property
    def pending(self) -> int:
        return self._count(SuggestionState.PENDING, SuggestionState.VIEWED)

    @property
    def applied(self) -> int:
        return self._count(SuggestionState.APPLIED)

    @property
    def discarded(self) -> int:
        return self._count(SuggestionState.DISCARDED)

    def _count(self, *states: SuggestionState) -> int:
        return sum(1 for record in self.records if record.suggestion.state in states)
