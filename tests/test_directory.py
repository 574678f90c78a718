"""Tests for the talent-bank directory: pagination strategies and membership."""

import logging
from datetime import datetime, timedelta, timezone

import pytest

from talentbank.directory.pagination import (
    DirectoryQuery,
    InMemoryPagination,
    ServerPagination,
    TalentBankPage,
    entry_matches,
    last_page_for,
    sort_entries,
)
from talentbank.directory.service import TalentBankDirectory
from talentbank.domain.exceptions import (
    AuthenticationRequiredError,
    DuplicateMembershipError,
    NotFoundError,
)
from talentbank.domain.models import Candidate, Priority, TalentBankEntry

from helpers import AUTH_CTX, ANON_CTX, make_candidate, seed_candidates, seed_talent_bank

STRATEGIES = [ServerPagination, InMemoryPagination]


@pytest.fixture
def directory(database):
    return TalentBankDirectory()


@pytest.fixture
def bank_of_120(database):
    return seed_talent_bank([make_candidate(i, ["Python"]) for i in range(1, 121)])


class TestDirectoryQuery:
    def test_defaults(self):
        query = DirectoryQuery()
        assert query.page == 1
        assert query.per_page == 50
        assert query.offset == 0

    @pytest.mark.parametrize("kwargs", [{"page": 0}, {"per_page": 0}, {"page": -2}])
    def test_rejects_non_positive_values(self, kwargs):
        with pytest.raises(ValueError):
            DirectoryQuery(**kwargs)

    def test_blank_search_becomes_none(self):
        assert DirectoryQuery(search="   ").search is None
        assert DirectoryQuery(search="  ana ").search == "ana"

    def test_priority_coerced(self):
        assert DirectoryQuery(priority="high").priority == Priority.HIGH

    def test_with_search_resets_page(self):
        query = DirectoryQuery(page=3, per_page=20).with_search("react")
        assert query.page == 1
        assert query.search == "react"
        assert query.per_page == 20

    def test_with_page(self):
        assert DirectoryQuery().with_page(4).offset == 150


class TestPageMath:
    @pytest.mark.parametrize(
        "total,per_page,expected",
        [(0, 50, 1), (1, 50, 1), (50, 50, 1), (51, 50, 2), (120, 50, 3)],
    )
    def test_last_page_for(self, total, per_page, expected):
        assert last_page_for(total, per_page) == expected

    def test_page_properties(self):
        page = TalentBankPage(entries=[], total=120, page=2, per_page=50)
        assert page.last_page == 3
        assert page.has_next


def _entry(entry_id, name, skills=(), highlighted=(), minutes=0, **kwargs):
    return TalentBankEntry(
        id=entry_id,
        candidate=Candidate(id=entry_id, name=name, email=f"{name.lower()}@example.com", skills=list(skills)),
        highlighted_skills=list(highlighted),
        added_at=datetime(2025, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=minutes),
        **kwargs,
    )


class TestInMemoryHelpers:
    def test_entry_matches_search_fields(self):
        entry = _entry(1, "Ana", skills=["React"], highlighted=["Figma"])

        assert entry_matches(entry, DirectoryQuery(search="ANA"))
        assert entry_matches(entry, DirectoryQuery(search="example.com"))
        assert entry_matches(entry, DirectoryQuery(search="reac"))
        assert entry_matches(entry, DirectoryQuery(search="figma"))
        assert not entry_matches(entry, DirectoryQuery(search="java"))

    def test_entry_matches_filters(self):
        entry = _entry(1, "Ana", priority=Priority.HIGH, available=False)

        assert entry_matches(entry, DirectoryQuery(priority=Priority.HIGH, available=False))
        assert not entry_matches(entry, DirectoryQuery(priority=Priority.LOW))
        assert not entry_matches(entry, DirectoryQuery(available=True))

    def test_sort_entries(self):
        entries = [_entry(1, "A", minutes=5), _entry(2, "B", minutes=10), _entry(3, "C", minutes=5)]
        assert [e.id for e in sort_entries(entries)] == [2, 3, 1]

    def test_in_memory_with_injected_source(self):
        entries = [_entry(i, f"C{i}", minutes=i) for i in range(1, 8)]
        strategy = InMemoryPagination(fetch_all=lambda: entries)

        page = strategy.paginate(DirectoryQuery(page=2, per_page=3))

        assert [e.id for e in page.entries] == [4, 3, 2]
        assert page.total == 7
        assert page.last_page == 3


@pytest.mark.parametrize("strategy_cls", STRATEGIES)
class TestPaginationStrategies:
    """Both strategies must agree on the same data."""

    def test_second_page_of_120(self, bank_of_120, strategy_cls):
        page = strategy_cls().paginate(DirectoryQuery(page=2, per_page=50))

        assert len(page.entries) == 50
        assert page.total == 120
        assert page.last_page == 3
        # Newest first: candidate 120 is on page 1, page 2 starts at 70
        assert page.entries[0].candidate.id == 70
        assert page.entries[-1].candidate.id == 21

    def test_last_page_is_partial(self, bank_of_120, strategy_cls):
        page = strategy_cls().paginate(DirectoryQuery(page=3, per_page=50))

        assert len(page.entries) == 20
        assert not page.has_next

    def test_page_beyond_last_is_empty(self, bank_of_120, strategy_cls):
        page = strategy_cls().paginate(DirectoryQuery(page=9, per_page=50))

        assert page.entries == []
        assert page.total == 120
        assert page.page == 9

    def test_empty_bank(self, database, strategy_cls):
        page = strategy_cls().paginate(DirectoryQuery())

        assert page.entries == []
        assert page.total == 0
        assert page.last_page == 1

    def test_search_restricts_total(self, database, strategy_cls):
        seed_talent_bank([
            make_candidate(1, ["React", "Node"], name="Ana"),
            make_candidate(2, ["Java"], name="Bruno"),
            make_candidate(3, ["react native"], name="Carla"),
        ])

        page = strategy_cls().paginate(DirectoryQuery(search="REACT"))

        assert page.total == 2
        assert [e.candidate.id for e in page.entries] == [3, 1]


def test_strategies_return_identical_pages(bank_of_120):
    query = DirectoryQuery(search="1", page=2, per_page=7)

    server = ServerPagination().paginate(query)
    in_memory = InMemoryPagination().paginate(query)

    assert server.total == in_memory.total
    assert [e.id for e in server.entries] == [e.id for e in in_memory.entries]


class TestListTalentBank:
    def test_requires_authentication(self, directory):
        with pytest.raises(AuthenticationRequiredError):
            directory.list_talent_bank(ANON_CTX)

    def test_default_query_is_first_page(self, bank_of_120):
        page = TalentBankDirectory(default_per_page=25).list_talent_bank(AUTH_CTX)

        assert page.page == 1
        assert page.per_page == 25
        assert len(page.entries) == 25

    def test_per_page_capped(self, bank_of_120):
        directory = TalentBankDirectory(max_per_page=30)

        page = directory.list_talent_bank(AUTH_CTX, DirectoryQuery(per_page=100))

        assert page.per_page == 30
        assert len(page.entries) == 30
        assert page.last_page == 4

    def test_call_strategy_overrides_default(self, bank_of_120):
        calls = []

        class RecordingStrategy(InMemoryPagination):
            def paginate(self, query):
                calls.append(query)
                return super().paginate(query)

        directory = TalentBankDirectory(strategy=ServerPagination())
        directory.list_talent_bank(AUTH_CTX, DirectoryQuery(page=2), strategy=RecordingStrategy())

        assert len(calls) == 1 and calls[0].page == 2

    def test_logs_listing(self, bank_of_120, caplog):
        with caplog.at_level(logging.INFO, logger="talentbank.directory.service"):
            TalentBankDirectory().list_talent_bank(AUTH_CTX, DirectoryQuery(page=2))

        record = next(r for r in caplog.records if getattr(r, "event", None) == "directory.listed")
        assert record.strategy == "server"
        assert record.total == 120
        assert record.returned == 50


class TestDirectoryBrowser:
    """Navigation state kept across page requests."""

    def test_search_returns_to_first_page(self, bank_of_120, directory):
        browser = directory.browse(AUTH_CTX, DirectoryQuery(per_page=10))
        assert browser.go_to(5).current().page == 5

        page = browser.search("candidate 1").current()

        # Candidate 1, 10-19 and 100-120
        assert page.page == 1
        assert page.total == 32
        assert page.last_page == 4
        assert browser.query.per_page == 10

    def test_paging_keeps_search(self, bank_of_120, directory):
        browser = directory.browse(AUTH_CTX, DirectoryQuery(per_page=10)).search("candidate 1")

        page = browser.go_to(2).current()

        assert page.page == 2
        assert page.total == 32
        assert all(e.candidate.name.startswith("Candidate 1") for e in page.entries)

    @pytest.mark.parametrize("strategy_cls", STRATEGIES)
    def test_pages_walks_to_last_page(self, bank_of_120, directory, strategy_cls):
        pages = list(directory.browse(AUTH_CTX, DirectoryQuery(per_page=50), strategy=strategy_cls()).pages())

        assert [p.page for p in pages] == [1, 2, 3]
        ids = [e.candidate.id for p in pages for e in p.entries]
        assert ids == list(range(120, 0, -1))

    def test_pages_starts_at_current_page(self, bank_of_120, directory):
        pages = list(directory.browse(AUTH_CTX, DirectoryQuery(per_page=50)).go_to(3).pages())

        assert [p.page for p in pages] == [3]
        assert len(pages[0].entries) == 20

    def test_default_query_uses_directory_page_size(self, database):
        browser = TalentBankDirectory(default_per_page=7).browse(AUTH_CTX)
        assert browser.query == DirectoryQuery(per_page=7)


class TestMembership:
    def test_add_candidate(self, directory):
        seed_candidates([make_candidate(5, ["React"])])

        entry = directory.add_candidate(
            AUTH_CTX, 5, notes="Top frontend", highlighted_skills=["React"], priority=Priority.HIGH
        )

        assert entry.candidate.id == 5
        assert entry.candidate.notes == "Top frontend"
        assert entry.priority == Priority.HIGH
        assert directory.check_candidate_exists(AUTH_CTX, 5)

    def test_add_unknown_candidate(self, directory):
        with pytest.raises(NotFoundError) as exc_info:
            directory.add_candidate(AUTH_CTX, 404)
        assert exc_info.value.entity == "Candidate"

    def test_add_twice(self, directory):
        seed_candidates([make_candidate(5)])
        directory.add_candidate(AUTH_CTX, 5)

        with pytest.raises(DuplicateMembershipError):
            directory.add_candidate(AUTH_CTX, 5)

    def test_check_non_member(self, directory):
        seed_candidates([make_candidate(5)])
        assert not directory.check_candidate_exists(AUTH_CTX, 5)

    def test_update_notes_by_candidate_and_entry(self, directory):
        entry = seed_talent_bank([make_candidate(5)])[0]

        by_candidate = directory.update_notes(AUTH_CTX, "first", candidate_id=5)
        by_entry = directory.update_notes(AUTH_CTX, "second", entry_id=entry.id)

        assert by_candidate.candidate.notes == "first"
        assert by_entry.candidate.notes == "second"

    def test_update_notes_requires_exactly_one_id(self, directory):
        with pytest.raises(ValueError):
            directory.update_notes(AUTH_CTX, "x")
        with pytest.raises(ValueError):
            directory.update_notes(AUTH_CTX, "x", candidate_id=1, entry_id=1)

    def test_update_notes_non_member(self, directory):
        seed_candidates([make_candidate(5)])
        with pytest.raises(NotFoundError):
            directory.update_notes(AUTH_CTX, "x", candidate_id=5)

    def test_update_entry(self, directory):
        entry = seed_talent_bank([make_candidate(5)])[0]

        updated = directory.update_entry(
            AUTH_CTX, entry.id, available=False, evaluation_score=72, highlighted_skills=["Go"]
        )

        assert updated.available is False
        assert updated.evaluation_score == 72
        assert updated.highlighted_skills == ["Go"]
        assert updated.priority == Priority.MEDIUM

    def test_update_entry_score_out_of_range(self, directory):
        entry = seed_talent_bank([make_candidate(5)])[0]
        with pytest.raises(ValueError, match="evaluation_score"):
            directory.update_entry(AUTH_CTX, entry.id, evaluation_score=120)

    def test_update_missing_entry(self, directory):
        with pytest.raises(NotFoundError):
            directory.update_entry(AUTH_CTX, 99, available=True)

    def test_remove_candidate(self, directory):
        entry = seed_talent_bank([make_candidate(5)])[0]

        directory.remove_candidate(AUTH_CTX, entry.id)

        assert not directory.check_candidate_exists(AUTH_CTX, 5)
        with pytest.raises(NotFoundError):
            directory.remove_candidate(AUTH_CTX, entry.id)

    def test_candidates_for_matching_uses_highlighted_fallback(self, directory):
        seed_candidates([make_candidate(5, [])])
        directory.add_candidate(AUTH_CTX, 5, highlighted_skills=["Go"])

        candidates = directory.candidates_for_matching(AUTH_CTX)

        assert [c.skills for c in candidates] == [["Go"]]
