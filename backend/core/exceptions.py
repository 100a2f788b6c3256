"""
Service-level exceptions.

Every failure a request handler reports to the client is one of these; the
FastAPI exception handler in ``main.py`` renders them as ``{error, message?}``.
"""

from typing import Optional


class ServiceError(Exception):
    """Base exception for enterprise operations"""

    status_code = 500

    def __init__(self, message: str, reason: Optional[str] = None, code: str = None):
        super().__init__(message)
        self.message = message
        self.reason = reason
        self.code = code or "SERVICE_ERROR"

    def to_response(self) -> dict:
        body = {"error": self.message}
        if self.reason:
            body["message"] = self.reason
        return body


class ValidationFailedError(ServiceError):
    """Missing or malformed request fields"""

    status_code = 400

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message, reason, code="VALIDATION_FAILED")


class AuthorizationDeniedError(ServiceError):
    """Role or membership predicate failed"""

    status_code = 403

    def __init__(self, message: str, reason: Optional[str] = None, code: str = "AUTHORIZATION_DENIED"):
        super().__init__(message, reason, code=code)


class SeatLimitReachedError(AuthorizationDeniedError):
    """Organization already has as many members as its plan allows"""

    def __init__(self, max_users: int):
        super().__init__("Organization has reached maximum user limit", code="SEAT_LIMIT_REACHED")
        self.max_users = max_users


class NotFoundError(ServiceError):
    """Referenced record does not exist or is not visible to the caller"""

    status_code = 404

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message, reason, code="NOT_FOUND")


class ConflictError(ServiceError):
    """Uniqueness violation"""

    status_code = 409

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message, reason, code="CONFLICT")


class UpstreamFailureError(ServiceError):
    """Billing gateway or store raised while handling the request"""

    status_code = 500

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message, reason, code="UPSTREAM_FAILURE")
