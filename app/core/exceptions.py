# ============================================================================
# FILE: app/core/exceptions.py
# Domain errors raised by services and rendered by the HTTP edge
# ============================================================================
from typing import Any, Dict, Optional


class AppError(Exception):
    """
    Base class for errors that map onto an HTTP response

    Subclasses set ``status_code`` and ``error_type``; any keyword
    arguments are carried into the response body.
    """
    status_code: int = 500
    error_type: str = "server_error"
    headers: Optional[Dict[str, str]] = None

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self) -> Dict[str, Any]:
        body = {"message": self.message, "type": self.error_type}
        body.update({k: v for k, v in self.extra.items() if v is not None})
        return body


class ValidationError(AppError):
    status_code = 400
    error_type = "validation_error"


class DuplicateError(AppError):
    status_code = 400
    error_type = "duplicate_key"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, field=field)
        self.field = field


class NotFoundError(AppError):
    status_code = 404
    error_type = "not_found"


class MethodNotAllowedError(AppError):
    status_code = 405
    error_type = "method_not_allowed"


class InvalidCredentialsError(AppError):
    status_code = 401
    error_type = "invalid_credentials"

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class InvalidTokenError(AppError):
    status_code = 401
    error_type = "invalid_token"
    headers = {"WWW-Authenticate": "Bearer"}

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class UpstreamError(AppError):
    status_code = 502
    error_type = "upstream_error"

    def __init__(self, message: str, upstream_status: Optional[int] = None):
        super().__init__(message, upstreamStatus=upstream_status)
        self.upstream_status = upstream_status


class UpstreamTimeoutError(UpstreamError):
    status_code = 504
    error_type = "upstream_timeout"


class ServerError(AppError):
    status_code = 500
    error_type = "server_error"
