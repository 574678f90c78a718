"""Factory function for instantiating the configured job catalog."""

import logging

from talentbank.config.models import JobCatalogConfig, JobCatalogSource

from .base import JobCatalog
from .database import DatabaseJobCatalog
from .exceptions import CatalogConfigurationError
from .http import HttpJobCatalog

logger = logging.getLogger(__name__)


def get_job_catalog(config: JobCatalogConfig) -> JobCatalog:
    """Instantiate the job catalog named by ``config.source``.

    Raises:
        CatalogConfigurationError: If the source is unknown or its settings are invalid

    Example:
        >>> catalog = get_job_catalog(JobCatalogConfig(source="http", base_url="https://api.example.com"))
        >>> jobs = catalog.list_active_jobs(ctx)
    """
    source = config.source.value if isinstance(config.source, JobCatalogSource) else str(config.source)

    logger.debug("Creating job catalog", extra={"catalog_source": source})

    if source == JobCatalogSource.DATABASE.value:
        return DatabaseJobCatalog()

    if source == JobCatalogSource.HTTP.value:
        try:
            return HttpJobCatalog(
                base_url=config.base_url,
                timeout=config.request_timeout,
                user_agent=config.user_agent,
            )
        except CatalogConfigurationError:
            raise
        except Exception as e:
            raise CatalogConfigurationError(f"Failed to create http job catalog: {e}") from e

    supported = ", ".join(sorted(s.value for s in JobCatalogSource))
    raise CatalogConfigurationError(
        f"Unknown job catalog source: {source}. Supported sources: {supported}"
    )
