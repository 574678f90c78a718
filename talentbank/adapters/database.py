"""Job catalog backed by the local ``jobs`` table."""

from typing import List, Optional

from talentbank.domain.context import RequestContext
from talentbank.domain.models import JobRequisition
from talentbank.persistence import JobRepository, get_session

from .base import JobCatalog


class DatabaseJobCatalog(JobCatalog):
    """Reads jobs through JobRepository, one unit of work per call."""

    def list_active_jobs(self, ctx: RequestContext) -> List[JobRequisition]:
        with get_session() as session:
            return JobRepository(session).list_active()

    def get_job(self, ctx: RequestContext, job_id: int) -> Optional[JobRequisition]:
        with get_session() as session:
            return JobRepository(session).get(job_id)
