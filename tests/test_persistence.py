"""Unit tests for the persistence layer."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import text

from talentbank.domain.models import (
    InAppNotification,
    JobStatus,
    NotificationType,
    Priority,
    SuggestionState,
)
from talentbank.persistence import (
    CandidateRepository,
    DatabaseConnectionError,
    DataIntegrityError,
    JobRepository,
    NotificationRepository,
    RecordNotFoundError,
    SuggestionRepository,
    TalentBankRepository,
    close_database,
    get_engine,
    get_session,
    init_database,
)
from talentbank.persistence.database import _redact_url
from talentbank.persistence.schema import build_search_index

from helpers import make_candidate, make_job, seed_candidates, seed_talent_bank

T0 = datetime(2025, 11, 1, 9, 0, tzinfo=timezone.utc)


class TestDatabaseInitialization:
    """Tests for database initialization."""

    def test_init_database_creates_file_and_parents(self, tmp_path):
        db_file = tmp_path / "nested" / "talent_bank.db"

        init_database(f"sqlite:///{db_file}")
        try:
            assert db_file.exists()
            with get_session() as session:
                assert session is not None
        finally:
            close_database()

    def test_init_database_creates_tables(self, database):
        with get_engine().connect() as conn:
            tables = {
                row[0]
                for row in conn.execute(text("SELECT name FROM sqlite_master WHERE type='table'"))
            }

        assert {"candidates", "jobs", "talent_bank_entries", "suggestions", "notifications"} <= tables

    def test_foreign_keys_enabled(self, database):
        with get_engine().connect() as conn:
            assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1

    def test_schema_creation_is_idempotent(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'db.sqlite'}"
        init_database(url)
        close_database()
        init_database(url)
        close_database()

    @pytest.mark.parametrize("url", ["", None])
    def test_invalid_url_raises(self, url):
        with pytest.raises(DatabaseConnectionError):
            init_database(url)

    def test_session_before_init_raises(self):
        close_database()
        with pytest.raises(DatabaseConnectionError, match="not initialized"):
            with get_session():
                pass

    def test_session_rolls_back_on_error(self, database):
        with pytest.raises(RuntimeError):
            with get_session() as session:
                CandidateRepository(session).upsert(make_candidate(1))
                raise RuntimeError("boom")

        with get_session() as session:
            assert CandidateRepository(session).get(1) is None

    def test_redact_url_hides_password(self):
        assert _redact_url("postgresql://user:secret@db:5432/tb") == "postgresql://user:***@db:5432/tb"
        assert _redact_url("sqlite:///./data/tb.db") == "sqlite:///./data/tb.db"


def test_build_search_index():
    assert build_search_index(["Ana", None, "React"]) == "ana\nreact"


class TestCandidateRepository:
    def test_upsert_inserts_then_overwrites(self, database):
        with get_session() as session:
            repo = CandidateRepository(session)
            repo.upsert(make_candidate(1, ["React"], name="Ana"))
            updated = repo.upsert(make_candidate(1, ["Vue"], name="Ana Torres"))

        assert updated.name == "Ana Torres"
        assert updated.skills == ["Vue"]

        with get_session() as session:
            assert len(CandidateRepository(session).list_all()) == 1

    def test_update_notes(self, database):
        seed_candidates([make_candidate(1)])

        with get_session() as session:
            candidate = CandidateRepository(session).update_notes(1, "  Strong profile ")

        assert candidate.notes == "Strong profile"

    def test_update_notes_missing_candidate(self, database):
        with pytest.raises(RecordNotFoundError):
            with get_session() as session:
                CandidateRepository(session).update_notes(99, "x")


class TestJobRepository:
    def test_list_active_filters_and_orders(self, database):
        with get_session() as session:
            repo = JobRepository(session)
            repo.upsert(make_job(3, ["A"]))
            repo.upsert(make_job(1, ["B"]))
            repo.upsert(make_job(2, ["C"], status="closed"))

        with get_session() as session:
            jobs = JobRepository(session).list_active()

        assert [job.id for job in jobs] == [1, 3]

    def test_upsert_updates_status(self, database):
        with get_session() as session:
            repo = JobRepository(session)
            repo.upsert(make_job(1, ["A"]))
            job = repo.upsert(make_job(1, ["A"], status="closed"))

        assert job.status == JobStatus.CLOSED

    def test_get_missing_job(self, database):
        with get_session() as session:
            assert JobRepository(session).get(404) is None


class TestTalentBankRepository:
    def test_add_flags_candidate(self, database):
        seed_candidates([make_candidate(1, ["React"])])

        with get_session() as session:
            entry = TalentBankRepository(session).add(
                1, priority=Priority.HIGH, highlighted_skills=["Go", "go"], notes="Great", added_at=T0
            )

        assert entry.priority == Priority.HIGH
        assert entry.available is True
        assert entry.highlighted_skills == ["Go"]
        assert entry.candidate.notes == "Great"
        assert entry.added_at == T0

        with get_session() as session:
            assert CandidateRepository(session).get(1).added_to_talent_bank == T0

    def test_add_missing_candidate(self, database):
        with pytest.raises(RecordNotFoundError):
            with get_session() as session:
                TalentBankRepository(session).add(99)

    def test_add_twice_violates_unique_candidate(self, database):
        seed_talent_bank([make_candidate(1)])

        with pytest.raises(DataIntegrityError):
            with get_session() as session:
                TalentBankRepository(session).add(1)

    def test_list_page_orders_newest_first(self, database):
        seed_talent_bank([make_candidate(i) for i in range(1, 6)])

        with get_session() as session:
            entries = TalentBankRepository(session).list_page(offset=0, limit=3)

        assert [e.candidate.id for e in entries] == [5, 4, 3]

    def test_same_added_at_breaks_ties_by_id_desc(self, database):
        seed_candidates([make_candidate(1), make_candidate(2)])
        with get_session() as session:
            repo = TalentBankRepository(session)
            first = repo.add(1, added_at=T0)
            second = repo.add(2, added_at=T0)

        with get_session() as session:
            entries = TalentBankRepository(session).list_all()

        assert [e.id for e in entries] == [second.id, first.id]

    def test_count_and_search(self, database):
        seed_talent_bank([
            make_candidate(1, ["React"], name="Ana Torres"),
            make_candidate(2, ["Java"], name="Luis Gómez", email="luis@corp.io"),
            make_candidate(3, ["Python"], name="Marta"),
        ])

        with get_session() as session:
            repo = TalentBankRepository(session)
            assert repo.count() == 3
            assert repo.count(search="ANA") == 1
            assert repo.count(search="corp.io") == 1
            assert repo.count(search="pyth") == 1
            assert repo.count(search="nobody") == 0

    def test_search_treats_wildcards_literally(self, database):
        seed_talent_bank([make_candidate(1, name="Ana"), make_candidate(2, name="100% Luis")])

        with get_session() as session:
            repo = TalentBankRepository(session)
            assert repo.count(search="%") == 1
            assert repo.count(search="_") == 0

    def test_search_includes_highlighted_skills(self, database):
        seed_candidates([make_candidate(1, [])])
        with get_session() as session:
            TalentBankRepository(session).add(1, highlighted_skills=["Kubernetes"])

        with get_session() as session:
            assert TalentBankRepository(session).count(search="kube") == 1

    def test_filters(self, database):
        entries = seed_talent_bank([make_candidate(i) for i in range(1, 5)])
        with get_session() as session:
            repo = TalentBankRepository(session)
            repo.update(entries[0].id, priority=Priority.HIGH)
            repo.update(entries[1].id, available=False)

        with get_session() as session:
            repo = TalentBankRepository(session)
            assert repo.count(priority=Priority.HIGH) == 1
            assert repo.count(available=False) == 1
            assert repo.count(priority="medium", available=True) == 2

    def test_update_ignores_none_and_rejects_unknown(self, database):
        entry = seed_talent_bank([make_candidate(1)])[0]

        with get_session() as session:
            repo = TalentBankRepository(session)
            updated = repo.update(entry.id, priority=None, evaluation_score=88.5)
            assert updated.priority == Priority.MEDIUM
            assert updated.evaluation_score == 88.5

            with pytest.raises(ValueError, match="Unknown"):
                repo.update(entry.id, notes="x")

    def test_update_missing_entry(self, database):
        with pytest.raises(RecordNotFoundError):
            with get_session() as session:
                TalentBankRepository(session).update(99, available=False)

    def test_delete_clears_flag(self, database):
        entry = seed_talent_bank([make_candidate(1)])[0]

        with get_session() as session:
            TalentBankRepository(session).delete(entry.id)

        with get_session() as session:
            assert TalentBankRepository(session).get(entry.id) is None
            assert CandidateRepository(session).get(1).added_to_talent_bank is None

    def test_delete_missing_entry(self, database):
        with pytest.raises(RecordNotFoundError):
            with get_session() as session:
                TalentBankRepository(session).delete(99)


class TestSuggestionRepository:
    @pytest.fixture
    def candidates(self, database):
        seed_candidates([make_candidate(1), make_candidate(2)])

    def test_create_defaults(self, candidates):
        with get_session() as session:
            suggestion = SuggestionRepository(session).create(1, 10, suggested_by="ana", notes=" fit ")

        assert suggestion.id is not None
        assert suggestion.state == SuggestionState.PENDING
        assert suggestion.notes == "fit"
        assert not suggestion.notification_sent
        assert not suggestion.email_sent

    def test_pair_is_unique(self, candidates):
        with get_session() as session:
            SuggestionRepository(session).create(1, 10)

        with pytest.raises(DataIntegrityError):
            with get_session() as session:
                SuggestionRepository(session).create(1, 10)

    def test_same_job_for_other_candidate_allowed(self, candidates):
        with get_session() as session:
            repo = SuggestionRepository(session)
            repo.create(1, 10)
            repo.create(2, 10)

    def test_list_for_candidate_most_recent_first(self, candidates):
        with get_session() as session:
            repo = SuggestionRepository(session)
            repo.create(1, 10, created_at=T0)
            repo.create(1, 11, created_at=T0 + timedelta(hours=1))
            repo.create(1, 12, created_at=T0)
            repo.create(2, 10, created_at=T0)

        with get_session() as session:
            suggestions = SuggestionRepository(session).list_for_candidate(1)

        assert [s.job_id for s in suggestions] == [11, 12, 10]

    def test_states_for_candidate(self, candidates):
        with get_session() as session:
            repo = SuggestionRepository(session)
            first = repo.create(1, 10)
            repo.create(1, 11)
            repo.update_state(first.id, SuggestionState.APPLIED)

        with get_session() as session:
            states = SuggestionRepository(session).states_for_candidate(1)

        assert states == {10: SuggestionState.APPLIED, 11: SuggestionState.PENDING}

    def test_update_delivery(self, candidates):
        with get_session() as session:
            repo = SuggestionRepository(session)
            created = repo.create(1, 10)
            updated = repo.update_delivery(created.id, notification_sent=True, email_sent=False)

        assert updated.notification_sent and not updated.email_sent
        assert updated.created_at == created.created_at

    def test_delete_and_missing(self, candidates):
        with get_session() as session:
            created = SuggestionRepository(session).create(1, 10)

        with get_session() as session:
            SuggestionRepository(session).delete(created.id)

        with pytest.raises(RecordNotFoundError):
            with get_session() as session:
                SuggestionRepository(session).delete(created.id)


class TestNotificationRepository:
    def _notification(self, created_at):
        return InAppNotification(
            candidate_id=1,
            title="New job suggestion",
            message="You have been suggested",
            type=NotificationType.APPLICATION,
            created_at=created_at,
        )

    def test_add_and_list(self, database):
        seed_candidates([make_candidate(1)])

        with get_session() as session:
            repo = NotificationRepository(session)
            first = repo.add(self._notification(T0))
            second = repo.add(self._notification(T0 + timedelta(minutes=5)))

        with get_session() as session:
            notifications = NotificationRepository(session).list_for_candidate(1, unread_only=True)

        assert [n.id for n in notifications] == [second.id, first.id]
        assert notifications[0].type == NotificationType.APPLICATION

    def test_unknown_candidate_violates_foreign_key(self, database):
        with pytest.raises(DataIntegrityError):
            with get_session() as session:
                NotificationRepository(session).add(self._notification(T0))
