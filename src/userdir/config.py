"""Application configuration via environment variables.

Uses pydantic-settings to load config from env vars with USERDIR_ prefix.
The signing secret, token lifetime and issuer have no defaults: the
process refuses to start without them.

Learn: a failing model_validator turns into a pydantic ValidationError
when Settings() is constructed, so a bad secret is a startup error and
never a per-request one.
"""

from pydantic import model_validator
from pydantic_settings import BaseSettings

# HS256 needs a key at least as long as its digest (256 bits).
MIN_SECRET_BYTES = 32


class Settings(BaseSettings):
    """All app configuration. Set via USERDIR_* env vars."""

    # Auth
    jwt_secret: str
    jwt_expiration_ms: int
    jwt_issuer: str

    # Server
    environment: str = "development"

    # Queries
    default_page_limit: int = 10

    model_config = {"env_prefix": "USERDIR_"}

    @model_validator(mode="after")
    def validate_auth_settings(self):
        """Reject secrets too short for HS256 and empty issuers."""
        if len(self.jwt_secret.encode("utf-8")) < MIN_SECRET_BYTES:
            raise ValueError(
                f"USERDIR_JWT_SECRET must be at least {MIN_SECRET_BYTES} bytes. "
                "Generate one with: "
                'python -c "import secrets; print(secrets.token_urlsafe(32))"'
            )
        if not self.jwt_issuer.strip():
            raise ValueError("USERDIR_JWT_ISSUER must not be blank")
        if self.jwt_expiration_ms <= 0:
            raise ValueError("USERDIR_JWT_EXPIRATION_MS must be positive")
        return self


# Singleton — import this everywhere
settings = Settings()
