"""Job catalog backed by the job REST API.

API Details:
    Endpoints: GET {base_url}/jobs?status=active, GET {base_url}/jobs/{id}
    Authentication: Authorization: Bearer <token> from the RequestContext
    Response: JSON list, or object with a ``data`` list (single job: object,
    optionally wrapped in ``data``)
"""

from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from talentbank.domain.context import RequestContext
from talentbank.domain.models import JobRequisition
from talentbank.logging import get_logger

from .base import BaseApiClient, JobCatalog
from .exceptions import ApiResponseError

logger = get_logger(__name__, component="adapter")

# Accepted field names per JobRequisition field, first match wins
FIELD_ALIASES = {
    "id": ("id",),
    "title": ("title", "titulo"),
    "company": ("company", "empresa"),
    "location": ("location", "ubicacion"),
    "employment_type": ("employment_type", "tipo_empleo"),
    "status": ("status", "estado"),
    "required_skills": ("required_skills", "skills", "habilidades"),
}

# Status values used by the job API, mapped onto JobStatus. Paused and
# in-review postings map to draft.
STATUS_ALIASES = {
    "activa": "active",
    "cerrada": "closed",
    "filled": "closed",
    "pausada": "draft",
    "borrador": "draft",
    "en revisión": "draft",
    "en revision": "draft",
}


def _pick(payload: Dict[str, Any], names) -> Any:
    for name in names:
        if name in payload and payload[name] is not None:
            return payload[name]
    return None


def _status(raw: Any) -> Any:
    if not isinstance(raw, str):
        return raw
    key = " ".join(raw.lower().split())
    return STATUS_ALIASES.get(key, key)


def _skill_names(raw: Any) -> List[str]:
    """Skill names from a list of strings or of ``{"name"|"nombre": ...}`` objects."""
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ApiResponseError(f"Expected skills to be a list, got {type(raw).__name__}")

    names = []
    for item in raw:
        if isinstance(item, str):
            names.append(item)
        elif isinstance(item, dict):
            name = item.get("name") or item.get("nombre")
            if isinstance(name, str):
                names.append(name)
    return names


def parse_job(payload: Any) -> JobRequisition:
    """Transform one job payload into a JobRequisition.

    Raises:
        ApiResponseError: If the payload is not an object or fails validation
    """
    if not isinstance(payload, dict):
        raise ApiResponseError(f"Expected job object, got {type(payload).__name__}")

    data = {field: _pick(payload, names) for field, names in FIELD_ALIASES.items()}
    data["required_skills"] = _skill_names(data["required_skills"])
    data["status"] = _status(data["status"])
    data = {key: value for key, value in data.items() if value is not None}

    try:
        return JobRequisition(**data)
    except ValidationError as e:
        raise ApiResponseError(f"Invalid job payload (id={payload.get('id')}): {e}") from e


def _unwrap_list(body: Any) -> list:
    if isinstance(body, dict):
        body = body.get("data")
    if not isinstance(body, list):
        raise ApiResponseError(
            f"Expected a JSON list or an object with a 'data' list, got {type(body).__name__}"
        )
    return body


class HttpJobCatalog(BaseApiClient, JobCatalog):
    """Job catalog calling the job REST API with the caller's bearer token."""

    def list_active_jobs(self, ctx: RequestContext) -> List[JobRequisition]:
        """Fetch active jobs.

        Jobs that come back with another status are dropped.

        Raises:
            TransportError: On HTTP, timeout or response errors
        """
        body = self._make_request("/jobs", ctx, params={"status": "active"})
        jobs = [parse_job(item) for item in _unwrap_list(body)]
        active = [job for job in jobs if job.is_active]

        logger.info(
            f"Fetched {len(active)} active jobs from {self.base_url}",
            extra={
                "event": "adapter.jobs.fetched",
                "job_count": len(active),
                "dropped": len(jobs) - len(active),
            },
        )
        return active

    def get_job(self, ctx: RequestContext, job_id: int) -> Optional[JobRequisition]:
        """Fetch one job; None on 404.

        Raises:
            TransportError: On HTTP, timeout or response errors
        """
        body = self._make_request(f"/jobs/{job_id}", ctx, allow_not_found=True)
        if body is None:
            return None

        if isinstance(body, dict) and isinstance(body.get("data"), dict):
            body = body["data"]
        return parse_job(body)
