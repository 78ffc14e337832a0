"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication.
A token carries sub / iss / iat / exp and is signed with HS256.
Verification checks the signature, the expiry and that the issuer is
ours; any failure raises a TokenError subclass naming the reason.

The reason is for server logs only; callers collapse every TokenError
into "not authenticated" and never tell the client which check failed.
"""

from datetime import datetime, timedelta, timezone

import jwt

from userdir.config import MIN_SECRET_BYTES, Settings
from userdir.errors import ConfigurationError


class TokenError(Exception):
    """Raised when token verification fails."""

    reason = "invalid"


class InvalidSignature(TokenError):
    reason = "invalid_signature"


class MalformedToken(TokenError):
    reason = "malformed"


class ExpiredToken(TokenError):
    reason = "expired"


class IssuerMismatch(TokenError):
    reason = "issuer_mismatch"


class UnsupportedToken(TokenError):
    reason = "unsupported"


class TokenCodec:
    """Issues and verifies identity tokens with a symmetric key.

    The signing key is derived once here and reused for every call;
    instances are immutable after construction and safe to share
    across threads.
    """

    algorithm = "HS256"

    def __init__(self, secret: str, issuer: str, expiration_ms: int):
        if not secret or not secret.strip():
            raise ConfigurationError("JWT secret must be provided")
        key = secret.encode("utf-8")
        if len(key) < MIN_SECRET_BYTES:
            raise ConfigurationError(
                f"JWT secret is {len(key)} bytes; HS256 needs at least {MIN_SECRET_BYTES}"
            )
        if not issuer or not issuer.strip():
            raise ConfigurationError("JWT issuer must be provided")
        if expiration_ms <= 0:
            raise ConfigurationError("JWT expiration must be positive")

        self._key = key
        self.issuer = issuer
        self.validity = timedelta(milliseconds=expiration_ms)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenCodec":
        return cls(
            secret=settings.jwt_secret,
            issuer=settings.jwt_issuer,
            expiration_ms=settings.jwt_expiration_ms,
        )

    def issue(self, subject: str) -> str:
        """Create a signed token for subject."""
        if not subject:
            raise ValueError("subject must be a non-empty string")
        now = datetime.now(timezone.utc)
        payload = {
            "sub": subject,
            "iss": self.issuer,
            "iat": now,
            "exp": now + self.validity,
        }
        return jwt.encode(payload, self._key, algorithm=self.algorithm)

    def verify(self, token: str) -> str:
        """Verify a token and return its subject.

        Raises a TokenError subclass on any failure.
        """
        if not token:
            raise MalformedToken("Token is empty")
        try:
            payload = jwt.decode(
                token,
                self._key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={"require": ["sub", "iss", "iat", "exp"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise ExpiredToken(str(e)) from e
        except jwt.InvalidSignatureError as e:
            raise InvalidSignature(str(e)) from e
        except jwt.InvalidIssuerError as e:
            raise IssuerMismatch(str(e)) from e
        except jwt.InvalidAlgorithmError as e:
            raise UnsupportedToken(str(e)) from e
        except jwt.InvalidTokenError as e:
            raise MalformedToken(str(e)) from e

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise MalformedToken("Token has no subject")
        return subject
