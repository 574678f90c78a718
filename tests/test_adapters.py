"""Unit tests for the job catalog adapters."""

from unittest.mock import MagicMock

import pytest
import requests

from talentbank.adapters import (
    ApiHTTPError,
    ApiResponseError,
    ApiTimeoutError,
    CatalogConfigurationError,
    DatabaseJobCatalog,
    HttpJobCatalog,
    get_job_catalog,
)
from talentbank.adapters.http import parse_job
from talentbank.config.models import JobCatalogConfig
from talentbank.domain.exceptions import AuthenticationRequiredError, TransportError
from talentbank.domain.models import JobStatus

from helpers import ANON_CTX, AUTH_CTX, make_job, seed_jobs

BASE_URL = "https://admin.example.com/api"


# ============================================================================
# Fixtures
# ============================================================================


def make_response(status_code=200, json_data=None, json_error=None, reason="OK"):
    response = MagicMock()
    response.status_code = status_code
    response.reason = reason
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture
def session():
    mock_session = MagicMock(spec=requests.Session)
    mock_session.headers = {}
    return mock_session


@pytest.fixture
def catalog(session):
    return HttpJobCatalog(base_url=BASE_URL + "/", timeout=10, session=session)


# ============================================================================
# Payload parsing
# ============================================================================


class TestParseJob:
    def test_english_fields(self):
        job = parse_job({
            "id": 3,
            "title": "Frontend Developer",
            "company": "Acme",
            "location": "Lima",
            "employment_type": "Full-time",
            "status": "active",
            "required_skills": ["React", "Node"],
        })

        assert job.id == 3
        assert job.required_skills == ["React", "Node"]
        assert job.is_active

    def test_spanish_fields_and_skill_objects(self):
        job = parse_job({
            "id": 4,
            "titulo": "Analista de Datos",
            "empresa": "Datos SAC",
            "ubicacion": "Arequipa",
            "tipo_empleo": "Medio tiempo",
            "estado": "ACTIVE",
            "habilidades": [{"nombre": "SQL"}, {"name": "Python"}, "Excel", {"other": 1}],
        })

        assert job.title == "Analista de Datos"
        assert job.company == "Datos SAC"
        assert job.required_skills == ["SQL", "Python", "Excel"]
        assert job.status == JobStatus.ACTIVE

    @pytest.mark.parametrize(
        "estado, expected",
        [
            ("Activa", JobStatus.ACTIVE),
            ("Cerrada", JobStatus.CLOSED),
            ("Pausada", JobStatus.DRAFT),
            ("Borrador", JobStatus.DRAFT),
            ("En Revisión", JobStatus.DRAFT),
            ("  en  revision ", JobStatus.DRAFT),
            ("filled", JobStatus.CLOSED),
        ],
    )
    def test_spanish_status_values(self, estado, expected):
        job = parse_job({"id": 1, "titulo": "Dev", "estado": estado, "habilidades": [{"nombre": "React"}]})

        assert job.status == expected
        assert job.required_skills == ["React"]

    def test_missing_status_defaults_to_active(self):
        assert parse_job({"id": 1, "title": "Dev"}).is_active

    @pytest.mark.parametrize(
        "payload",
        [["not", "an", "object"], {"id": 1}, {"id": 1, "title": "Dev", "skills": "React"}],
    )
    def test_invalid_payloads(self, payload):
        with pytest.raises(ApiResponseError):
            parse_job(payload)


# ============================================================================
# HTTP catalog
# ============================================================================


class TestHttpJobCatalog:
    def test_list_active_jobs(self, catalog, session):
        session.request.return_value = make_response(json_data=[
            {"id": 1, "title": "A", "status": "active", "skills": ["React"]},
            {"id": 2, "title": "B", "status": "closed", "skills": ["Go"]},
        ])

        jobs = catalog.list_active_jobs(AUTH_CTX)

        assert [job.id for job in jobs] == [1]
        kwargs = session.request.call_args.kwargs
        assert kwargs["url"] == f"{BASE_URL}/jobs"
        assert kwargs["params"] == {"status": "active"}
        assert kwargs["headers"] == {"Authorization": "Bearer test-token"}
        assert kwargs["timeout"] == 10

    def test_list_with_spanish_status_values(self, catalog, session):
        session.request.return_value = make_response(json_data={"data": [
            {"id": 1, "titulo": "Dev", "estado": "Activa", "habilidades": [{"nombre": "React"}]},
            {"id": 2, "titulo": "Ops", "estado": "En Revisión", "habilidades": [{"nombre": "Go"}]},
            {"id": 3, "titulo": "QA", "estado": "Cerrada", "habilidades": []},
        ]})

        jobs = catalog.list_active_jobs(AUTH_CTX)

        assert [job.id for job in jobs] == [1]

    def test_list_unwraps_data_envelope(self, catalog, session):
        session.request.return_value = make_response(json_data={"data": [{"id": 1, "title": "A"}]})

        assert len(catalog.list_active_jobs(AUTH_CTX)) == 1

    def test_list_rejects_unexpected_body(self, catalog, session):
        session.request.return_value = make_response(json_data={"jobs": []})

        with pytest.raises(ApiResponseError):
            catalog.list_active_jobs(AUTH_CTX)

    def test_get_job(self, catalog, session):
        session.request.return_value = make_response(json_data={"data": {"id": 5, "title": "E"}})

        job = catalog.get_job(AUTH_CTX, 5)

        assert job.id == 5
        assert session.request.call_args.kwargs["url"] == f"{BASE_URL}/jobs/5"

    def test_get_job_not_found(self, catalog, session):
        session.request.return_value = make_response(status_code=404, reason="Not Found")

        assert catalog.get_job(AUTH_CTX, 5) is None

    def test_list_404_is_an_error(self, catalog, session):
        session.request.return_value = make_response(status_code=404, reason="Not Found")

        with pytest.raises(ApiHTTPError) as exc_info:
            catalog.list_active_jobs(AUTH_CTX)
        assert exc_info.value.status_code == 404

    @pytest.mark.parametrize("status_code", [401, 500, 503])
    def test_http_errors(self, catalog, session, status_code):
        session.request.return_value = make_response(status_code=status_code, reason="Error")

        with pytest.raises(ApiHTTPError) as exc_info:
            catalog.get_job(AUTH_CTX, 1)

        assert exc_info.value.status_code == status_code
        assert isinstance(exc_info.value, TransportError)

    def test_timeout(self, catalog, session):
        session.request.side_effect = requests.exceptions.Timeout("slow")

        with pytest.raises(ApiTimeoutError):
            catalog.list_active_jobs(AUTH_CTX)

    def test_connection_error(self, catalog, session):
        session.request.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(ApiHTTPError) as exc_info:
            catalog.list_active_jobs(AUTH_CTX)
        assert exc_info.value.status_code == 0

    def test_invalid_json(self, catalog, session):
        session.request.return_value = make_response(json_error=ValueError("bad json"))

        with pytest.raises(ApiResponseError):
            catalog.list_active_jobs(AUTH_CTX)

    def test_requires_token_before_any_request(self, catalog, session):
        with pytest.raises(AuthenticationRequiredError):
            catalog.list_active_jobs(ANON_CTX)

        session.request.assert_not_called()

    def test_session_headers(self, session):
        HttpJobCatalog(base_url=BASE_URL, session=session, user_agent="Custom/2.0")

        assert session.headers["User-Agent"] == "Custom/2.0"
        assert session.headers["Accept"] == "application/json"

    @pytest.mark.parametrize(
        "kwargs",
        [{"base_url": ""}, {"base_url": BASE_URL, "timeout": 1}, {"base_url": BASE_URL, "user_agent": " "}],
    )
    def test_invalid_configuration(self, kwargs):
        with pytest.raises(CatalogConfigurationError):
            HttpJobCatalog(**kwargs)


# ============================================================================
# Database catalog and factory
# ============================================================================


class TestDatabaseJobCatalog:
    def test_reads_jobs_table(self, database):
        seed_jobs([make_job(1, ["A"]), make_job(2, ["B"], status="closed")])
        catalog = DatabaseJobCatalog()

        assert [job.id for job in catalog.list_active_jobs(AUTH_CTX)] == [1]
        assert catalog.get_job(AUTH_CTX, 2).status == JobStatus.CLOSED
        assert catalog.get_job(AUTH_CTX, 3) is None


class TestGetJobCatalog:
    def test_database_is_default(self):
        assert isinstance(get_job_catalog(JobCatalogConfig()), DatabaseJobCatalog)

    def test_http(self):
        catalog = get_job_catalog(JobCatalogConfig(source="http", base_url=BASE_URL, request_timeout=15))

        assert isinstance(catalog, HttpJobCatalog)
        assert catalog.base_url == BASE_URL
        assert catalog.timeout == 15
