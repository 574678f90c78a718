"""Exceptions raised by the job catalog adapters."""

from talentbank.domain.exceptions import TalentBankError, TransportError


class ApiHTTPError(TransportError):
    """HTTP request failed (4xx/5xx status, or no response at all).

    ``status_code`` is 0 when the request never produced a response
    (connection refused, DNS failure, ...).
    """

    def __init__(self, message: str, status_code: int, url: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class ApiTimeoutError(TransportError):
    """HTTP request did not complete within the configured timeout."""

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message)
        self.url = url


class ApiResponseError(TransportError):
    """Response received but could not be parsed or validated."""

    pass


class CatalogConfigurationError(TalentBankError):
    """Invalid job catalog configuration (unknown source, missing base URL)."""

    pass
