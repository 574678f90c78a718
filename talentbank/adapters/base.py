"""Job catalog interface and the shared HTTP client base."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import requests

from talentbank.domain.context import RequestContext
from talentbank.domain.models import JobRequisition
from talentbank.logging import get_logger

from .exceptions import ApiHTTPError, ApiResponseError, ApiTimeoutError, CatalogConfigurationError

logger = get_logger(__name__, component="adapter")


class JobCatalog(ABC):
    """Read-only access to job requisitions owned by job CRUD."""

    @abstractmethod
    def list_active_jobs(self, ctx: RequestContext) -> List[JobRequisition]:
        """Jobs with status ``active``."""

    @abstractmethod
    def get_job(self, ctx: RequestContext, job_id: int) -> Optional[JobRequisition]:
        """One job by id, or None when it does not exist."""


class BaseApiClient:
    """Shared HTTP request handling for REST collaborators.

    Attributes:
        base_url: API root without trailing slash
        timeout: HTTP request timeout in seconds
        user_agent: User-Agent header for HTTP requests
    """

    def __init__(
        self,
        base_url: str,
        timeout: int = 30,
        user_agent: str = "TalentBankEngine/1.0",
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize client.

        Args:
            base_url: API root (e.g., "https://admin.example.com/api")
            timeout: Request timeout in seconds (range 5-300)
            user_agent: User-Agent header
            session: Optional requests session (for tests)

        Raises:
            CatalogConfigurationError: On an empty base URL, empty user agent or
                out-of-range timeout
        """
        if not base_url or not base_url.strip():
            raise CatalogConfigurationError("base_url cannot be empty")
        if not 5 <= timeout <= 300:
            raise CatalogConfigurationError(
                f"Timeout must be between 5 and 300 seconds, got: {timeout}"
            )
        if not user_agent or not user_agent.strip():
            raise CatalogConfigurationError("user_agent cannot be empty")

        self.base_url = base_url.strip().rstrip("/")
        self.timeout = timeout
        self.user_agent = user_agent.strip()

        self._session = session or requests.Session()
        self._session.headers.update(
            {"User-Agent": self.user_agent, "Accept": "application/json"}
        )

    @staticmethod
    def _auth_headers(ctx: RequestContext) -> Dict[str, str]:
        ctx.require_authenticated()
        return {"Authorization": f"Bearer {ctx.token.strip()}"}

    def _make_request(
        self,
        path: str,
        ctx: RequestContext,
        method: str = "GET",
        params: Optional[Dict[str, Any]] = None,
        allow_not_found: bool = False,
    ) -> Any:
        """Make an authenticated HTTP request and return the decoded JSON.

        Args:
            path: Path relative to base_url (e.g., "/jobs")
            ctx: Request context carrying the bearer token
            method: HTTP method
            params: Query parameters
            allow_not_found: Return None on 404 instead of raising

        Returns:
            Parsed JSON body (dict or list), or None on an allowed 404

        Raises:
            AuthenticationRequiredError: If ctx carries no token
            ApiHTTPError: On 4xx/5xx status or connection failure
            ApiTimeoutError: On request timeout
            ApiResponseError: On an invalid JSON body
        """
        headers = self._auth_headers(ctx)
        url = f"{self.base_url}/{path.lstrip('/')}"

        try:
            logger.debug(
                f"HTTP {method} request to {url}",
                extra={
                    "event": "adapter.request",
                    "method": method,
                    "url": url,
                    "timeout": self.timeout,
                },
            )

            response = self._session.request(
                method=method,
                url=url,
                headers=headers,
                params=params,
                timeout=self.timeout,
            )

            if response.status_code == 404 and allow_not_found:
                logger.debug(
                    f"Resource not found at {url}",
                    extra={"event": "adapter.not_found", "url": url},
                )
                return None

            if response.status_code >= 400:
                is_retryable = response.status_code >= 500
                logger.log(
                    logging.WARNING if is_retryable else logging.ERROR,
                    f"HTTP {response.status_code} error from {url}",
                    extra={
                        "event": "adapter.retryable_error" if is_retryable else "adapter.error",
                        "status_code": response.status_code,
                        "url": url,
                    },
                )
                raise ApiHTTPError(
                    f"HTTP {response.status_code}: {response.reason}",
                    status_code=response.status_code,
                    url=url,
                )

            try:
                data = response.json()
            except ValueError as e:
                logger.error(
                    f"Failed to parse JSON response from {url}",
                    extra={"event": "adapter.error", "error_type": "JSONDecodeError", "url": url},
                )
                raise ApiResponseError(f"Failed to parse JSON response from {url}: {e}") from e

            logger.debug(
                "HTTP request succeeded",
                extra={"event": "adapter.succeeded", "status_code": response.status_code, "url": url},
            )
            return data

        except requests.exceptions.Timeout as e:
            logger.warning(
                f"Request to {url} timed out after {self.timeout} seconds",
                extra={
                    "event": "adapter.retryable_error",
                    "error_type": "Timeout",
                    "url": url,
                    "timeout": self.timeout,
                },
            )
            raise ApiTimeoutError(
                f"Request to {url} timed out after {self.timeout} seconds", url=url
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(
                f"Request to {url} failed: {e}",
                extra={"event": "adapter.error", "error_type": type(e).__name__, "url": url},
            )
            raise ApiHTTPError(f"Request to {url} failed: {e}", status_code=0, url=url) from e

    def close(self) -> None:
        self._session.close()
