"""FastAPI auth dependencies and the access policy.

Learn: authentication and authorization are two separate stages.
The AuthenticationGate middleware has already run by the time these
execute; it either installed an AuthenticationResult with a subject on
request.state or left the request anonymous. Everything here only
*reads* that result:

1. get_authentication → the result for this request (never raises)
2. is_public_route    → the short list of routes open to anyone
3. require_identity   → the policy for every other route
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request

from userdir.errors import AuthenticationError

# (method, path) pairs reachable without an identity. Everything else,
# including unknown paths, is denied to anonymous callers.
PUBLIC_ROUTES = frozenset({
    ("POST", "/auth/login"),
    ("POST", "/user/v1/user"),
})


@dataclass(frozen=True)
class AuthenticationResult:
    """The caller's identity for one request: a subject or nobody."""

    subject: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.subject)


ANONYMOUS = AuthenticationResult()


def get_authentication(request: Request) -> AuthenticationResult:
    """Identity installed by the gate, or anonymous."""
    return getattr(request.state, "authentication", None) or ANONYMOUS


def is_public_route(method: str, path: str) -> bool:
    return (method.upper(), path) in PUBLIC_ROUTES


def require_identity(
    auth: AuthenticationResult = Depends(get_authentication),
) -> AuthenticationResult:
    """Access policy for non-public routes: any verified subject passes.

    Learn: an invalid token never gets here as an error; the gate
    simply left the request anonymous, and this is where anonymous
    callers are turned away with a 401 envelope.
    """
    if not auth.is_authenticated:
        raise AuthenticationError()
    return auth
