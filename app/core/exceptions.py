"""
Application exceptions.

Every error a handler can produce is an ``AppError`` carrying the HTTP status
it maps to. The exception handlers in ``app.main`` turn them into
``{"error": message}`` responses.
"""


class ConfigurationError(RuntimeError):
    """Process-level misconfiguration (e.g. missing signing secret)."""


class AppError(Exception):
    """Base class for errors that are reported to the client."""

    status_code = 500
    default_message = "Internal error"

    def __init__(self, message: str = None, status_code: int = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class DuplicateError(AppError):
    status_code = 400
    default_message = "Key already exists"


class AuthError(AppError):
    status_code = 401
    default_message = "Unauthorized"


class InvalidTokenError(AuthError):
    default_message = "Invalid session token"


class InvalidCredentialsError(AuthError):
    default_message = "Invalid password"


class InvalidKeyError(AuthError):
    # Unknown key and wrong key share this message.
    default_message = "Invalid key"


class UserNotFoundError(AuthError):
    default_message = "User not found"


class ForbiddenError(AuthError):
    status_code = 403
    default_message = "Forbidden"


class UserDisabledError(AuthError):
    status_code = 403
    default_message = "User disabled"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ProviderUnavailableError(AppError):
    status_code = 503
    default_message = "No active provider for model"


class UpstreamError(AppError):
    status_code = 502
    default_message = "Upstream error"


class NoImageInResponseError(UpstreamError):
    default_message = "No image found in upstream response"


class InternalError(AppError):
    status_code = 500
    default_message = "Internal error"
