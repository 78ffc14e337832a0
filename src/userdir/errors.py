"""Error hierarchy for the user directory.

Learn: every business failure is a UserDirectoryError carrying the
*envelope* code and message. The HTTP layer never looks at anything
else: one handler turns any of these into a transport-200 response
whose status block holds the real outcome.

InternalError always carries the same fixed message; nothing about the
underlying fault reaches the client.
"""


class UserDirectoryError(Exception):
    """Base for errors rendered into the response envelope."""

    code: int = 500
    default_message: str = "Internal error"

    def __init__(self, message: str | None = None, code: int | None = None):
        self.message = message or self.default_message
        if code is not None:
            self.code = code
        super().__init__(self.message)


class ValidationError(UserDirectoryError):
    """Bad input shape or value."""

    code = 400
    default_message = "Validation error"


class InvalidCriteria(ValidationError):
    """Query specification missing or out of range."""

    default_message = "Criteria is required"


class NotFoundError(UserDirectoryError):
    """Referenced user is absent. Reported as 400, not 404."""

    code = 400
    default_message = "User not found"


class AuthenticationError(UserDirectoryError):
    code = 401
    default_message = "Unauthorized"


class AuthorizationError(UserDirectoryError):
    code = 403
    default_message = "Forbidden"


class InternalError(UserDirectoryError):
    code = 500
    default_message = "Internal error"

    def __init__(self):
        super().__init__()


class ConfigurationError(Exception):
    """Fatal startup misconfiguration. Never rendered to clients."""
