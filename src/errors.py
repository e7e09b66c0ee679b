"""Error types raised by the services and mapped to HTTP statuses by the gateway."""


class ApiError(Exception):
    """Base error carrying the HTTP status it maps to."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ApiError):
    """Missing or malformed required fields."""
    status_code = 400


class ConflictError(ApiError):
    """Unique field already taken (e.g. email)."""
    status_code = 400


class UploadError(ApiError):
    """Upload request carried no file bytes."""
    status_code = 400


class AuthError(ApiError):
    """Missing, invalid or expired token, or bad credentials."""
    status_code = 401


class NotFound(ApiError):
    status_code = 404


class ConfigError(ApiError):
    """Required configuration is missing."""
    status_code = 500


class UpstreamError(ApiError):
    """Third-party call failed."""
    status_code = 500


class InternalError(ApiError):
    status_code = 500
