"""Job catalog adapters (database table or job REST API)."""

from .base import BaseApiClient, JobCatalog
from .database import DatabaseJobCatalog
from .exceptions import (
    ApiHTTPError,
    ApiResponseError,
    ApiTimeoutError,
    CatalogConfigurationError,
)
from .factory import get_job_catalog
from .http import HttpJobCatalog, parse_job

__all__ = [
    "JobCatalog",
    "BaseApiClient",
    "DatabaseJobCatalog",
    "HttpJobCatalog",
    "get_job_catalog",
    "parse_job",
    "ApiHTTPError",
    "ApiTimeoutError",
    "ApiResponseError",
    "CatalogConfigurationError",
]
