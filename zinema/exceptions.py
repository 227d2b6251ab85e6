"""Application errors.

Each error carries the HTTP status it maps to and a message that is safe to
show to the client. Errors with a 5xx status never expose their message in a
response; the exception handlers in ``main`` log it and reply with the
generic internal-error body instead.
"""

INTERNAL_ERROR_MESSAGE = "Internal server error"

PASSWORD_POLICY_MESSAGE = (
    "Password must contain at least 8 characters, one uppercase letter, "
    "one lowercase letter, one number, and one special character"
)

# Wording the reset-password form expects.
RESET_PASSWORD_POLICY_MESSAGE = (
    "Password must have at least 8 characters long, 1 uppercase, "
    "1 lowercase, 1 number and 1 special character"
)


class ZinemaError(Exception):
    """Base class for all application errors."""

    status_code: int = 500
    default_message: str = INTERNAL_ERROR_MESSAGE

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


# --- 4xx ---


class BadRequest(ZinemaError):
    status_code = 400
    default_message = "Bad request"


class ValidationError(BadRequest):
    """A field failed a schema-level rule (blank name, age under 13, ...)."""

    default_message = "Validation failed"


class WeakPassword(BadRequest):
    default_message = PASSWORD_POLICY_MESSAGE


class PasswordMismatch(BadRequest):
    default_message = "Passwords do not match"


class InvalidOrExpiredToken(BadRequest):
    """Reset token is unknown, already consumed, or past its expiry."""

    default_message = "Invalid or expired reset token"


class InvalidCredentials(ZinemaError):
    status_code = 401
    default_message = "Invalid email or password"


class Unauthenticated(ZinemaError):
    status_code = 401
    default_message = "Token missing"


class InvalidToken(ZinemaError):
    """Bearer token has a bad signature, is expired, or lacks required claims."""

    status_code = 403
    default_message = "Invalid token"


class NotFound(ZinemaError):
    status_code = 404
    default_message = "Not found"


class DuplicateEmail(ZinemaError):
    status_code = 409
    default_message = "Email already exists"


# --- 5xx ---


class InternalError(ZinemaError):
    status_code = 500


class HashingError(InternalError):
    pass


class NotificationError(InternalError):
    pass


class ConfigurationError(InternalError):
    pass
