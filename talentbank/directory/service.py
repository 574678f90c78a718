"""Talent-bank directory: membership operations and paginated listing."""

import logging
from typing import Callable, Iterator, List, Optional

from talentbank.domain.context import RequestContext
from talentbank.domain.exceptions import DuplicateMembershipError, NotFoundError
from talentbank.domain.models import Candidate, Priority, TalentBankEntry
from talentbank.logging import get_logger
from talentbank.logging.context import log_context
from talentbank.persistence import (
    CandidateRepository,
    DataIntegrityError,
    RecordNotFoundError,
    TalentBankRepository,
    get_session,
)

from .pagination import (
    DEFAULT_PER_PAGE,
    DirectoryQuery,
    PaginationStrategy,
    ServerPagination,
    TalentBankPage,
)

logger = get_logger(__name__, component="directory")


class TalentBankDirectory:
    """Membership operations and listings over the talent bank."""

    def __init__(
        self,
        strategy: Optional[PaginationStrategy] = None,
        default_per_page: int = DEFAULT_PER_PAGE,
        max_per_page: int = 200,
        session_factory: Callable = get_session,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize directory.

        Args:
            strategy: Pagination strategy used when a call names none
                (default: ServerPagination)
            default_per_page: Page size when the caller gives none
            max_per_page: Requested page sizes are capped to this value
            session_factory: Unit-of-work factory
            logger_instance: Logger instance (uses module logger if None)
        """
        self.session_factory = session_factory
        self.strategy = strategy or ServerPagination(session_factory=session_factory)
        self.default_per_page = default_per_page
        self.max_per_page = max_per_page
        self.logger = logger_instance or logger

    def list_talent_bank(
        self,
        ctx: RequestContext,
        query: Optional[DirectoryQuery] = None,
        strategy: Optional[PaginationStrategy] = None,
    ) -> TalentBankPage:
        """One page of talent-bank members.

        Args:
            ctx: Request context (must be authenticated)
            query: Filters and page; defaults to the first page
            strategy: Pagination strategy for this call (overrides the default)
        """
        ctx.require_authenticated()
        query = query or DirectoryQuery(per_page=self.default_per_page)
        if query.per_page > self.max_per_page:
            query = DirectoryQuery(
                search=query.search,
                page=query.page,
                per_page=self.max_per_page,
                priority=query.priority,
                available=query.available,
            )

        strategy = strategy or self.strategy
        page = strategy.paginate(query)

        self.logger.info(
            f"Listed talent bank page {page.page}/{page.last_page}",
            extra={
                "event": "directory.listed",
                "strategy": strategy.name,
                "search": query.search,
                "page": page.page,
                "per_page": page.per_page,
                "total": page.total,
                "returned": len(page.entries),
            },
        )
        return page

    def browse(
        self,
        ctx: RequestContext,
        query: Optional[DirectoryQuery] = None,
        strategy: Optional[PaginationStrategy] = None,
    ) -> "DirectoryBrowser":
        """Cursor over the listing that keeps its filters between pages."""
        return DirectoryBrowser(
            self, ctx, query or DirectoryQuery(per_page=self.default_per_page), strategy
        )

    def candidates_for_matching(self, ctx: RequestContext) -> List[Candidate]:
        """Every member as seen by the matching engine."""
        ctx.require_authenticated()
        with self.session_factory() as session:
            entries = TalentBankRepository(session).list_all()
        return [entry.as_match_candidate() for entry in entries]

    def get_entry_for_candidate(self, ctx: RequestContext, candidate_id: int) -> Optional[TalentBankEntry]:
        ctx.require_authenticated()
        with self.session_factory() as session:
            return TalentBankRepository(session).get_by_candidate(candidate_id)

    def check_candidate_exists(self, ctx: RequestContext, candidate_id: int) -> bool:
        """Whether the candidate is a talent-bank member."""
        return self.get_entry_for_candidate(ctx, candidate_id) is not None

    def add_candidate(
        self,
        ctx: RequestContext,
        candidate_id: int,
        notes: Optional[str] = None,
        highlighted_skills: Optional[List[str]] = None,
        priority: Priority = Priority.MEDIUM,
    ) -> TalentBankEntry:
        """Add a candidate to the talent bank.

        Raises:
            NotFoundError: If the candidate does not exist
            DuplicateMembershipError: If the candidate is already a member
        """
        ctx.require_authenticated()

        with log_context(candidate_id=candidate_id, actor=ctx.actor):
            try:
                with self.session_factory() as session:
                    if CandidateRepository(session).get(candidate_id) is None:
                        raise NotFoundError("Candidate", candidate_id)

                    repo = TalentBankRepository(session)
                    if repo.get_by_candidate(candidate_id) is not None:
                        raise DuplicateMembershipError(candidate_id)

                    entry = repo.add(
                        candidate_id,
                        priority=priority,
                        highlighted_skills=highlighted_skills,
                        notes=notes,
                    )
            except DataIntegrityError as e:
                raise DuplicateMembershipError(candidate_id) from e

            self.logger.info(
                f"Added candidate {candidate_id} to the talent bank",
                extra={
                    "event": "directory.member_added",
                    "entry_id": entry.id,
                    "priority": entry.priority.value,
                },
            )
            return entry

    def update_notes(
        self,
        ctx: RequestContext,
        notes: Optional[str],
        candidate_id: Optional[int] = None,
        entry_id: Optional[int] = None,
    ) -> TalentBankEntry:
        """Replace the recruiter notes of a member, addressed by candidate or entry id.

        Raises:
            ValueError: Unless exactly one of candidate_id / entry_id is given
            NotFoundError: If the member does not exist
        """
        ctx.require_authenticated()
        if (candidate_id is None) == (entry_id is None):
            raise ValueError("Pass exactly one of candidate_id or entry_id")

        with self.session_factory() as session:
            repo = TalentBankRepository(session)
            if entry_id is not None:
                entry = repo.get(entry_id)
                missing = ("Talent bank entry", entry_id)
            else:
                entry = repo.get_by_candidate(candidate_id)
                missing = ("Talent bank entry for candidate", candidate_id)
            if entry is None:
                raise NotFoundError(*missing)

            CandidateRepository(session).update_notes(entry.candidate.id, notes)
            updated = repo.get(entry.id)

        self.logger.info(
            f"Updated notes of talent bank entry {updated.id}",
            extra={"event": "directory.notes_updated", "entry_id": updated.id, "actor": ctx.actor},
        )
        return updated

    def update_entry(
        self,
        ctx: RequestContext,
        entry_id: int,
        priority: Optional[Priority] = None,
        available: Optional[bool] = None,
        evaluation_score: Optional[float] = None,
        highlighted_skills: Optional[List[str]] = None,
    ) -> TalentBankEntry:
        """Update member attributes; None leaves a field unchanged.

        Raises:
            ValueError: If evaluation_score is outside 0-100
            NotFoundError: If the entry does not exist
        """
        ctx.require_authenticated()
        if evaluation_score is not None and not 0 <= evaluation_score <= 100:
            raise ValueError(f"evaluation_score must be between 0 and 100, got: {evaluation_score}")

        try:
            with self.session_factory() as session:
                entry = TalentBankRepository(session).update(
                    entry_id,
                    priority=priority,
                    available=available,
                    evaluation_score=evaluation_score,
                    highlighted_skills=highlighted_skills,
                )
        except RecordNotFoundError as e:
            raise NotFoundError("Talent bank entry", entry_id) from e

        self.logger.info(
            f"Updated talent bank entry {entry_id}",
            extra={"event": "directory.member_updated", "entry_id": entry_id, "actor": ctx.actor},
        )
        return entry

    def remove_candidate(self, ctx: RequestContext, entry_id: int) -> None:
        """Remove a member. Suggestions made to the candidate are kept.

        Raises:
            NotFoundError: If the entry does not exist
        """
        ctx.require_authenticated()
        try:
            with self.session_factory() as session:
                TalentBankRepository(session).delete(entry_id)
        except RecordNotFoundError as e:
            raise NotFoundError("Talent bank entry", entry_id) from e

        self.logger.info(
            f"Removed talent bank entry {entry_id}",
            extra={"event": "directory.member_removed", "entry_id": entry_id, "actor": ctx.actor},
        )


class DirectoryBrowser:
    """Navigation state of one directory listing.

    Applying a search always goes back to page 1; moving between pages keeps
    the search and filters. ``search`` and ``go_to`` only change the query,
    ``current`` and ``pages`` read from the directory.
    """

    def __init__(
        self,
        directory: TalentBankDirectory,
        ctx: RequestContext,
        query: DirectoryQuery,
        strategy: Optional[PaginationStrategy] = None,
    ):
        self.directory = directory
        self.ctx = ctx
        self.query = query
        self.strategy = strategy

    def search(self, term: Optional[str]) -> "DirectoryBrowser":
        self.query = self.query.with_search(term)
        return self

    def go_to(self, page: int) -> "DirectoryBrowser":
        self.query = self.query.with_page(page)
        return self

    def current(self) -> TalentBankPage:
        return self.directory.list_talent_bank(self.ctx, self.query, strategy=self.strategy)

    def pages(self) -> Iterator[TalentBankPage]:
        """Current page and every page after it."""
        page = self.current()
        yield page
        while page.has_next:
            page = self.go_to(page.page + 1).current()
            yield page
