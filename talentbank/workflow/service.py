"""Workflow facade: every logical talent-bank operation in one place.

Each method takes an explicit RequestContext and opens its own unit(s) of
work; nothing is shared between calls except configuration.
"""

import logging
from typing import Callable, List, Optional

from talentbank.adapters.base import JobCatalog
from talentbank.adapters.factory import get_job_catalog
from talentbank.config.environment import EnvironmentConfig
from talentbank.config.models import AppConfig, PaginationStrategy as PaginationSetting
from talentbank.directory.pagination import (
    DirectoryQuery,
    InMemoryPagination,
    PaginationStrategy,
    ServerPagination,
    TalentBankPage,
)
from talentbank.directory.service import DirectoryBrowser, TalentBankDirectory
from talentbank.domain.context import RequestContext
from talentbank.domain.exceptions import NotFoundError
from talentbank.domain.models import (
    Candidate,
    JobRequisition,
    Priority,
    Suggestion,
    SuggestionState,
    TalentBankEntry,
)
from talentbank.logging import get_logger
from talentbank.matching.engine import SkillMatcher
from talentbank.matching.models import JobMatch, MatchResult
from talentbank.notifications.dispatcher import (
    EmailNotifier,
    InAppNotifier,
    NotificationDispatcher,
)
from talentbank.persistence import CandidateRepository, get_session
from talentbank.suggestions.models import SuggestionHistory
from talentbank.suggestions.service import SuggestionService

logger = get_logger(__name__, component="workflow")


class TalentBankWorkflow:
    """Entry point used by the CLI (and any other outer surface)."""

    def __init__(
        self,
        catalog: JobCatalog,
        matcher: SkillMatcher,
        suggestions: SuggestionService,
        directory: TalentBankDirectory,
        email_by_default: bool = False,
        session_factory: Callable = get_session,
        logger_instance: Optional[logging.Logger] = None,
    ):
        self.catalog = catalog
        self.matcher = matcher
        self.suggestions = suggestions
        self.directory = directory
        self.email_by_default = email_by_default
        self.session_factory = session_factory
        self.logger = logger_instance or logger

    @classmethod
    def from_config(
        cls,
        app_config: AppConfig,
        env_config: EnvironmentConfig,
        catalog: Optional[JobCatalog] = None,
        session_factory: Callable = get_session,
    ) -> "TalentBankWorkflow":
        """Wire every component from configuration.

        The email channel is only enabled when SMTP is configured.
        """
        catalog = catalog or get_job_catalog(app_config.job_catalog)

        email_notifier = None
        if env_config.smtp_configured:
            email_notifier = EmailNotifier(env_config, app_config.email)

        dispatcher = NotificationDispatcher(
            in_app_notifier=InAppNotifier(
                title=app_config.notifications.in_app_title, session_factory=session_factory
            ),
            email_notifier=email_notifier,
        )

        directory_config = app_config.directory
        if directory_config.pagination == PaginationSetting.IN_MEMORY.value:
            strategy: PaginationStrategy = InMemoryPagination(session_factory=session_factory)
        else:
            strategy = ServerPagination(session_factory=session_factory)

        logger.debug(
            "Workflow wired",
            extra={
                "event": "workflow.configured",
                "catalog": type(catalog).__name__,
                "pagination": strategy.name,
                "email_enabled": email_notifier is not None,
            },
        )

        return cls(
            catalog=catalog,
            matcher=SkillMatcher(max_results=app_config.matching.max_results),
            suggestions=SuggestionService(
                catalog=catalog, dispatcher=dispatcher, session_factory=session_factory
            ),
            directory=TalentBankDirectory(
                strategy=strategy,
                default_per_page=directory_config.default_per_page,
                max_per_page=directory_config.max_per_page,
                session_factory=session_factory,
            ),
            email_by_default=app_config.notifications.email_by_default,
            session_factory=session_factory,
        )

    # Jobs and matching

    def get_active_jobs(self, ctx: RequestContext) -> List[JobRequisition]:
        ctx.require_authenticated()
        return self.catalog.list_active_jobs(ctx)

    def compute_matches(self, ctx: RequestContext, job_id: int) -> List[MatchResult]:
        """Score every talent-bank member against one job.

        Raises:
            NotFoundError: If the job does not exist
        """
        ctx.require_authenticated()
        job = self.catalog.get_job(ctx, job_id)
        if job is None:
            raise NotFoundError("Job", job_id)

        candidates = self.directory.candidates_for_matching(ctx)
        return self.matcher.compute_matches(job, candidates)

    def rank_jobs_for_candidate(self, ctx: RequestContext, candidate_id: int) -> List[JobMatch]:
        """Rank active jobs for one candidate, flagging jobs already suggested.

        Raises:
            NotFoundError: If the candidate does not exist
        """
        candidate = self._match_candidate(ctx, candidate_id)
        jobs = self.catalog.list_active_jobs(ctx)
        ranked = self.matcher.rank_jobs(candidate, jobs)

        states = self.suggestions.suggestion_states(ctx, candidate_id)
        for job_match in ranked:
            job_match.suggestion_state = states.get(job_match.job.id)
        return ranked

    def _match_candidate(self, ctx: RequestContext, candidate_id: int) -> Candidate:
        entry = self.directory.get_entry_for_candidate(ctx, candidate_id)
        if entry is not None:
            return entry.as_match_candidate()

        with self.session_factory() as session:
            candidate = CandidateRepository(session).get(candidate_id)
        if candidate is None:
            raise NotFoundError("Candidate", candidate_id)
        return candidate

    # Suggestions

    def create_suggestion(
        self,
        ctx: RequestContext,
        candidate_id: int,
        job_id: int,
        note: Optional[str] = None,
        send_email: Optional[bool] = None,
    ) -> Suggestion:
        """Create a suggestion; ``send_email`` None means the configured default."""
        if send_email is None:
            send_email = self.email_by_default
        return self.suggestions.create_suggestion(
            ctx, candidate_id, job_id, note=note, notify_by_email=send_email
        )

    def list_suggestions_for_candidate(
        self, ctx: RequestContext, candidate_id: int
    ) -> List[Suggestion]:
        return self.suggestions.list_suggestions_for_candidate(ctx, candidate_id)

    def get_suggestion_history(self, ctx: RequestContext, candidate_id: int) -> SuggestionHistory:
        return self.suggestions.get_suggestion_history(ctx, candidate_id)

    def get_suggestion_status(
        self, ctx: RequestContext, candidate_id: int, job_id: int
    ) -> Optional[Suggestion]:
        return self.suggestions.get_suggestion_status(ctx, candidate_id, job_id)

    def record_suggestion_transition(
        self, ctx: RequestContext, suggestion_id: int, state: SuggestionState
    ) -> Suggestion:
        return self.suggestions.record_transition(ctx, suggestion_id, state)

    def remove_suggestion(self, ctx: RequestContext, suggestion_id: int) -> None:
        self.suggestions.remove_suggestion(ctx, suggestion_id)

    # Talent bank

    def list_talent_bank(
        self,
        ctx: RequestContext,
        search: Optional[str] = None,
        page: int = 1,
        per_page: Optional[int] = None,
        priority: Optional[Priority] = None,
        available: Optional[bool] = None,
        strategy: Optional[PaginationStrategy] = None,
    ) -> TalentBankPage:
        """One directory page: the search is applied first, then ``page`` is selected."""
        browser = self.browse_talent_bank(
            ctx, per_page=per_page, priority=priority, available=available, strategy=strategy
        )
        return browser.search(search).go_to(page).current()

    def browse_talent_bank(
        self,
        ctx: RequestContext,
        per_page: Optional[int] = None,
        priority: Optional[Priority] = None,
        available: Optional[bool] = None,
        strategy: Optional[PaginationStrategy] = None,
    ) -> DirectoryBrowser:
        """Directory cursor starting on page 1 with no search."""
        query = DirectoryQuery(
            per_page=per_page or self.directory.default_per_page,
            priority=priority,
            available=available,
        )
        return self.directory.browse(ctx, query, strategy=strategy)

    def add_to_talent_bank(
        self,
        ctx: RequestContext,
        candidate_id: int,
        notes: Optional[str] = None,
        highlighted_skills: Optional[List[str]] = None,
        priority: Priority = Priority.MEDIUM,
    ) -> TalentBankEntry:
        return self.directory.add_candidate(
            ctx, candidate_id, notes=notes, highlighted_skills=highlighted_skills, priority=priority
        )

    def check_talent_bank_membership(self, ctx: RequestContext, candidate_id: int) -> bool:
        return self.directory.check_candidate_exists(ctx, candidate_id)

    def update_talent_bank_notes(
        self,
        ctx: RequestContext,
        notes: Optional[str],
        candidate_id: Optional[int] = None,
        entry_id: Optional[int] = None,
    ) -> TalentBankEntry:
        return self.directory.update_notes(
            ctx, notes, candidate_id=candidate_id, entry_id=entry_id
        )

    def update_talent_bank_entry(self, ctx: RequestContext, entry_id: int, **fields) -> TalentBankEntry:
        return self.directory.update_entry(ctx, entry_id, **fields)

    def remove_from_talent_bank(self, ctx: RequestContext, entry_id: int) -> None:
        self.directory.remove_candidate(ctx, entry_id)
