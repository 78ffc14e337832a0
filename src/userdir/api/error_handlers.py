"""Error handlers — the single error-to-envelope mapping for the app.

Invariants:
    - Every error path answers with HTTP 200; the real code is in
      status.code of the envelope
    - Every error envelope carries a fresh traceId
    - Unexpected exceptions are logged with their stack and rendered as
      the generic InternalError; their text never reaches the client

Four layers, most specific first: domain (UserDirectoryError),
validation (RequestValidationError), routing (404 / 405 from
Starlette's HTTPException) and the catch-all (Exception).
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from userdir.errors import InternalError, UserDirectoryError
from userdir.schemas.common import GenericResponse

logger = structlog.get_logger()


def envelope_response(code: int, message: str) -> JSONResponse:
    """Render an envelope with transport status 200."""
    body = GenericResponse.failure(code, message)
    return JSONResponse(status_code=200, content=body.model_dump(by_alias=True))


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    app.add_exception_handler(UserDirectoryError, _domain_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _generic_error_handler)


async def _domain_error_handler(request: Request, exc: UserDirectoryError):
    logger.info("request.rejected", code=exc.code, message=exc.message)
    return envelope_response(exc.code, exc.message)


async def _validation_error_handler(request: Request, exc: RequestValidationError):
    message = first_error_message(exc.errors())
    logger.info("request.invalid", message=message)
    return envelope_response(400, message)


async def _http_error_handler(request: Request, exc: StarletteHTTPException):
    return envelope_response(exc.status_code, str(exc.detail))


async def _generic_error_handler(request: Request, exc: Exception):
    logger.error("request.unhandled_exception", exc_info=exc)
    fallback = InternalError()
    return envelope_response(fallback.code, fallback.message)


def first_error_message(errors) -> str:
    """Message of the first field error, or a generic one."""
    for error in errors:
        msg = error.get("msg")
        if msg:
            return msg
    return "Validation error"
