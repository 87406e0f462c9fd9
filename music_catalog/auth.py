"""Authentication strategies gating catalog write operations.

The strategy is chosen once at startup from configuration and stored on the
application; there is no runtime toggle.
"""
import hmac
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional

from starlette.requests import Request

from .config import Settings
from .exceptions import UnauthorizedError
from .logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Principal:
    """The caller a request was authenticated as."""

    id: str
    name: str


class AuthStrategy(ABC):
    """Decides whether a request is authenticated."""

    name = "base"

    @abstractmethod
    def authenticate(self, request: Request) -> Optional[Principal]:
        """Return the authenticated principal, or None."""


class DemoAuthStrategy(AuthStrategy):
    """Treats every request as the demo user."""

    name = "demo"

    def __init__(self) -> None:
        self.principal = Principal(id="demo-user-123", name="Demo User")

    def authenticate(self, request: Request) -> Optional[Principal]:
        return self.principal


class TokenAuthStrategy(AuthStrategy):
    """Accepts ``Authorization: Bearer <token>`` or ``X-API-Key: <token>``.

    With no tokens configured every request is rejected.
    """

    name = "token"

    def __init__(self, tokens: Iterable[str]):
        self._tokens = [token for token in tokens if token]

    def authenticate(self, request: Request) -> Optional[Principal]:
        presented = request.headers.get("x-api-key")
        authorization = request.headers.get("authorization", "")
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials:
            presented = credentials.strip()

        if not presented:
            return None
        for index, token in enumerate(self._tokens):
            if hmac.compare_digest(presented.encode(), token.encode()):
                return Principal(id=f"token-{index}", name="API client")
        return None


def build_auth_strategy(settings: Settings) -> AuthStrategy:
    """Select the strategy named by ``settings.auth_mode``."""
    if settings.auth_mode == "demo":
        logger.warning("demo_auth_enabled")
        return DemoAuthStrategy()
    if settings.auth_mode == "token":
        if not settings.auth_tokens:
            logger.warning("no_auth_tokens_configured")
        return TokenAuthStrategy(settings.auth_tokens)
    raise ValueError(f"Unknown auth mode: {settings.auth_mode}")


def require_principal(strategy: AuthStrategy, request: Request) -> Principal:
    """Return the request's principal or raise UnauthorizedError."""
    principal = strategy.authenticate(request)
    if principal is None:
        logger.info("authentication_required", path=request.url.path, strategy=strategy.name)
        raise UnauthorizedError()
    return principal
