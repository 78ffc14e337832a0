"""Access policy middleware — deny by default.

Learn: runs right after the AuthenticationGate and before routing, so
it also covers unknown paths and wrong methods. Only the routes in
PUBLIC_ROUTES are open; any other request without an identity gets a
401 envelope (HTTP 200) and never reaches a handler, which also means
the body is never validated for anonymous callers.

Middleware sits outside FastAPI's exception handlers, so the envelope
is rendered here instead of raised.
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from userdir.api.error_handlers import envelope_response
from userdir.auth.dependencies import (
    get_authentication,
    is_public_route,
    require_identity,
)
from userdir.errors import AuthenticationError

logger = structlog.get_logger()


class AccessPolicyMiddleware(BaseHTTPMiddleware):
    """Reject anonymous callers everywhere except the public routes."""

    async def dispatch(self, request: Request, call_next) -> Response:
        if not is_public_route(request.method, request.url.path):
            try:
                require_identity(get_authentication(request))
            except AuthenticationError as e:
                logger.info("auth.access_denied", code=e.code)
                return envelope_response(e.code, e.message)

        return await call_next(request)
