"""Authentication gate — optimistic bearer-token authentication.

Learn: runs once per request, before routing. It never rejects
anything. A missing header, a non-Bearer scheme or a token that fails
verification all leave the request anonymous; only
AccessPolicyMiddleware, which runs next, turns anonymous callers
away. That keeps public routes (login, user creation) reachable even
when a client sends a stale or garbage token.

The verification failure reason goes to the server log only; the
client never learns which check failed.
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from userdir.auth.dependencies import AuthenticationResult
from userdir.auth.jwt import TokenCodec, TokenError

logger = structlog.get_logger()

BEARER_PREFIX = "Bearer "


class AuthenticationGate(BaseHTTPMiddleware):
    """Install the verified token subject on request.state.authentication."""

    def __init__(self, app, codec: TokenCodec):
        super().__init__(app)
        self.codec = codec

    async def dispatch(self, request: Request, call_next) -> Response:
        subject = self._authenticate(request.headers.get("Authorization"))

        if subject is not None:
            current = getattr(request.state, "authentication", None)
            if current is None or not current.is_authenticated:
                request.state.authentication = AuthenticationResult(subject=subject)
                structlog.contextvars.bind_contextvars(subject=subject)

        return await call_next(request)

    def _authenticate(self, header: str | None) -> str | None:
        if not header or not header.startswith(BEARER_PREFIX):
            return None
        token = header[len(BEARER_PREFIX):]
        try:
            return self.codec.verify(token)
        except TokenError as e:
            logger.info("auth.token_rejected", reason=e.reason, detail=str(e))
            return None
