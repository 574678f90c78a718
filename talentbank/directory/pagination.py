"""Paginated, searchable views over talent-bank members.

Two strategies, always chosen explicitly by the caller:

- ServerPagination: LIMIT/OFFSET query with an authoritative COUNT
- InMemoryPagination: filters and slices an already-fetched list

Both return the same TalentBankPage for the same data.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Callable, Iterable, List, Optional, Sequence

from talentbank.domain.models import Candidate, Priority, TalentBankEntry
from talentbank.persistence import TalentBankRepository, get_session

DEFAULT_PER_PAGE = 50


@dataclass(frozen=True)
class DirectoryQuery:
    """Filters and page selection for a directory listing.

    Attributes:
        search: Case-insensitive substring over name, email and skill names
        page: 1-based page number
        per_page: Page size
        priority: Only entries with this priority
        available: Only entries with this availability
    """

    search: Optional[str] = None
    page: int = 1
    per_page: int = DEFAULT_PER_PAGE
    priority: Optional[Priority] = None
    available: Optional[bool] = None

    def __post_init__(self):
        if self.page < 1:
            raise ValueError(f"page must be >= 1, got: {self.page}")
        if self.per_page < 1:
            raise ValueError(f"per_page must be >= 1, got: {self.per_page}")
        search = self.search.strip() if self.search else None
        object.__setattr__(self, "search", search or None)
        if self.priority is not None:
            object.__setattr__(self, "priority", Priority(self.priority))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page

    def with_search(self, search: Optional[str]) -> "DirectoryQuery":
        """Copy with a new search term; the page goes back to 1."""
        return replace(self, search=search, page=1)

    def with_page(self, page: int) -> "DirectoryQuery":
        return replace(self, page=page)


@dataclass
class TalentBankPage:
    """One page of talent-bank entries.

    Entries are ordered by added_at desc, then entry id desc. A page beyond
    ``last_page`` is empty.
    """

    entries: List[TalentBankEntry] = field(default_factory=list)
    total: int = 0
    page: int = 1
    per_page: int = DEFAULT_PER_PAGE

    @property
    def last_page(self) -> int:
        return last_page_for(self.total, self.per_page)

    @property
    def candidates(self) -> List[Candidate]:
        return [entry.candidate for entry in self.entries]

    @property
    def has_next(self) -> bool:
        return self.page < self.last_page


def last_page_for(total: int, per_page: int) -> int:
    """``max(1, ceil(total / per_page))``."""
    return max(1, math.ceil(total / per_page))


def entry_matches(entry: TalentBankEntry, query: DirectoryQuery) -> bool:
    """Whether an entry passes the query filters (page selection aside)."""
    if query.priority is not None and entry.priority != query.priority:
        return False
    if query.available is not None and entry.available != query.available:
        return False
    if query.search:
        term = query.search.lower()
        candidate = entry.candidate
        haystack = [candidate.name, candidate.email, *candidate.skills, *entry.highlighted_skills]
        if not any(term in text.lower() for text in haystack):
            return False
    return True


def sort_entries(entries: Iterable[TalentBankEntry]) -> List[TalentBankEntry]:
    """Newest first: added_at desc, then id desc."""
    return sorted(entries, key=lambda e: (e.added_at, e.id), reverse=True)


class PaginationStrategy(ABC):
    """Turns a DirectoryQuery into a TalentBankPage."""

    name = ""

    @abstractmethod
    def paginate(self, query: DirectoryQuery) -> TalentBankPage:
        """Return the page selected by ``query``."""


class ServerPagination(PaginationStrategy):
    """Filters, counts and pages in the database."""

    name = "server"

    def __init__(self, session_factory: Callable = get_session):
        self.session_factory = session_factory

    def paginate(self, query: DirectoryQuery) -> TalentBankPage:
        filters = {
            "search": query.search,
            "priority": query.priority,
            "available": query.available,
        }
        with self.session_factory() as session:
            repo = TalentBankRepository(session)
            total = repo.count(**filters)
            entries = []
            if query.offset < total:
                entries = repo.list_page(query.offset, query.per_page, **filters)

        return TalentBankPage(
            entries=entries, total=total, page=query.page, per_page=query.per_page
        )


class InMemoryPagination(PaginationStrategy):
    """Filters and slices a list fetched up front.

    Args:
        fetch_all: Callable returning every talent-bank entry; defaults to
            reading the whole table
    """

    name = "in-memory"

    def __init__(
        self,
        fetch_all: Optional[Callable[[], Sequence[TalentBankEntry]]] = None,
        session_factory: Callable = get_session,
    ):
        self.session_factory = session_factory
        self.fetch_all = fetch_all or self._fetch_from_database

    def _fetch_from_database(self) -> List[TalentBankEntry]:
        with self.session_factory() as session:
            return TalentBankRepository(session).list_all()

    def paginate(self, query: DirectoryQuery) -> TalentBankPage:
        matching = sort_entries(e for e in self.fetch_all() if entry_matches(e, query))
        start = query.offset
        return TalentBankPage(
            entries=matching[start:start + query.per_page],
            total=len(matching),
            page=query.page,
            per_page=query.per_page,
        )
