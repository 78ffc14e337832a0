"""Auth API — login.

Learn: POST /auth/login takes an email and, if a user with that email
exists (case-insensitive), returns a bearer token inside the success
envelope's status.message. There is no password check; credential
verification is out of scope for this service.
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from userdir.api.users import get_user_service
from userdir.auth.jwt import TokenCodec
from userdir.errors import AuthenticationError, ValidationError
from userdir.schemas.common import GenericResponse
from userdir.services.user_service import UserService

logger = structlog.get_logger()

router = APIRouter(prefix="/auth")


class LoginRequest(BaseModel):
    email: Optional[str] = None


def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.token_codec


@router.post("/login", response_model=GenericResponse)
def login(
    body: LoginRequest,
    svc: UserService = Depends(get_user_service),
    codec: TokenCodec = Depends(get_token_codec),
):
    """Exchange a registered email for a bearer token."""
    if body.email is None or not body.email.strip():
        raise ValidationError("Email is required")

    if not svc.email_registered(body.email):
        logger.info("auth.login_unknown_email")
        raise AuthenticationError()

    token = codec.issue(body.email)
    logger.info("auth.login_succeeded")
    return GenericResponse.success(token)
