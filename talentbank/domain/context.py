"""Explicit caller credential passed into every engine operation."""

from dataclasses import dataclass
from typing import Optional

from .exceptions import AuthenticationRequiredError


@dataclass(frozen=True)
class RequestContext:
    """Who is calling and with which bearer token.

    Attributes:
        actor: Recruiter identity, recorded as ``suggested_by`` on suggestions
        token: Bearer token issued by the authentication collaborator
    """

    actor: str
    token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token and self.token.strip())

    def require_authenticated(self) -> "RequestContext":
        """Return self, or raise when no token is present.

        Raises:
            AuthenticationRequiredError: If the context carries no token
        """
        if not self.is_authenticated:
            raise AuthenticationRequiredError(
                f"Operation requires an authenticated context (actor: {self.actor or 'unknown'})"
            )
        return self
