"""Unit tests for email template rendering and payload building."""

from datetime import datetime, timezone

import pytest

from talentbank.domain.models import Suggestion
from talentbank.notifications.models import NotificationTemplateError
from talentbank.notifications.payloads import build_in_app_message, build_suggestion_context
from talentbank.notifications.templates import TemplateRenderer

from helpers import make_candidate, make_job


@pytest.fixture
def context():
    suggestion = Suggestion(
        id=7,
        candidate_id=1,
        job_id=10,
        created_at=datetime(2025, 11, 4, 9, 30, tzinfo=timezone.utc),
        suggested_by="recruiter@example.com",
        notes="Your React work <stood out>",
    )
    candidate = make_candidate(1, ["react", "SQL"], name="Ana Torres")
    job = make_job(10, ["React", "Node"], title="Frontend Developer", company="Acme", location="Lima")
    return build_suggestion_context(suggestion, candidate, job)


class TestBuildSuggestionContext:
    def test_keys(self, context):
        assert context["suggestion_id"] == 7
        assert context["suggested_at"] == "2025-11-04T09:30:00+00:00"
        assert context["candidate_name"] == "Ana Torres"
        assert context["job_title"] == "Frontend Developer"
        assert context["required_skills"] == ["React", "Node"]
        assert context["matched_skills"] == ["React"]

    def test_optional_job_fields_present_when_unknown(self):
        suggestion = Suggestion(
            id=1, candidate_id=1, job_id=2, created_at=datetime(2025, 1, 1, tzinfo=timezone.utc)
        )
        job = make_job(2, [], company=None, location=None, employment_type=None)

        context = build_suggestion_context(suggestion, make_candidate(1), job)

        assert context["company"] is None
        assert context["location"] is None
        assert context["notes"] is None
        assert context["matched_skills"] == []


class TestBuildInAppMessage:
    def test_full(self, context):
        assert build_in_app_message(context) == (
            "You have been suggested for the position 'Frontend Developer' at Acme (Lima)."
        )

    def test_without_company_and_location(self, context):
        context.update(company=None, location=None)
        assert build_in_app_message(context) == (
            "You have been suggested for the position 'Frontend Developer'."
        )


class TestTemplateRenderer:
    def test_render_all_parts(self, context):
        rendered = TemplateRenderer().render(context)

        assert rendered["subject"] == "New opportunity for you: Frontend Developer at Acme"
        assert "Hello Ana Torres" in rendered["text_body"]
        assert "Your matching skills: React" in rendered["text_body"]
        assert "Frontend Developer" in rendered["html_body"]

    def test_html_escapes_notes(self, context):
        rendered = TemplateRenderer().render(context)

        assert "&lt;stood out&gt;" in rendered["html_body"]
        assert "<stood out>" not in rendered["html_body"]

    def test_subject_is_single_line(self, context):
        context["job_title"] = "Senior\nEngineer"
        assert "\n" not in TemplateRenderer().render(context)["subject"]

    def test_optional_sections_skipped(self, context):
        context.update(company=None, location=None, employment_type=None, notes=None, matched_skills=[])

        rendered = TemplateRenderer().render(context)

        assert "Company:" not in rendered["text_body"]
        assert "Note from the recruiter" not in rendered["text_body"]
        assert rendered["subject"] == "New opportunity for you: Frontend Developer"

    def test_missing_variable_raises(self, context):
        del context["job_title"]

        with pytest.raises(NotificationTemplateError):
            TemplateRenderer().render(context)

    def test_unknown_template_raises(self, context):
        with pytest.raises(NotificationTemplateError):
            TemplateRenderer(subject_template="missing.j2").render(context)
