"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance with its own user store and token codec on app.state, so
tests can build as many isolated apps as they like. Lifespan only
logs startup and shutdown; there are no external connections.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI

from userdir import __version__
from userdir.api import api_router
from userdir.api.error_handlers import register_error_handlers
from userdir.auth.jwt import TokenCodec
from userdir.config import Settings, settings as default_settings
from userdir.db.store import UserStore
from userdir.middleware.access_policy import AccessPolicyMiddleware
from userdir.middleware.authentication import AuthenticationGate
from userdir.middleware.request_id import RequestIdMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    cfg = app.state.settings
    logger.info(
        "userdir.starting",
        version=__version__,
        environment=cfg.environment,
        issuer=cfg.jwt_issuer,
    )
    yield
    logger.info("userdir.shutdown", users=app.state.store.count())


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[UserStore] = None,
) -> FastAPI:
    """Build and return the FastAPI application."""
    cfg = settings or default_settings

    app = FastAPI(
        title="User Directory",
        description="User directory REST service with bearer-token authentication",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = cfg
    app.state.store = store if store is not None else UserStore()
    # Built once; a bad secret fails here, at startup.
    app.state.token_codec = TokenCodec.from_settings(cfg)

    # ── Middleware stack ──────────────────────────────────────
    # Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → AuthenticationGate → AccessPolicy → handler
    app.add_middleware(AccessPolicyMiddleware)
    app.add_middleware(AuthenticationGate, codec=app.state.token_codec)
    app.add_middleware(RequestIdMiddleware)

    register_error_handlers(app)
    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: userdir.main:app)
app = create_app()
