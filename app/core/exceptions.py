from typing import Optional, Any


class VoiceSiteError(Exception):
    """
    Base exception for VoiceSite application.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class BadRequestError(VoiceSiteError):
    """
    Raised when a request is missing required input.
    """
    def __init__(self, message: str = "Bad request", details: Optional[Any] = None):
        super().__init__(message, code="BAD_REQUEST", status_code=400, details=details)


class ResourceNotFoundError(VoiceSiteError):
    """
    Raised when a requested resource is not found.
    """
    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)


class AuthenticationError(VoiceSiteError):
    """
    Raised when authentication fails.
    """
    def __init__(self, message: str = "Authentication failed", details: Optional[Any] = None):
        super().__init__(message, code="AUTHENTICATION_FAILED", status_code=401, details=details)


class PermissionDeniedError(VoiceSiteError):
    """
    Raised when an authenticated caller touches something it does not own.
    """
    def __init__(self, message: str = "Permission denied", details: Optional[Any] = None):
        super().__init__(message, code="FORBIDDEN", status_code=403, details=details)


class PlanLimitError(VoiceSiteError):
    """
    Raised when the caller's subscription does not allow the operation.
    """
    def __init__(self, message: str = "Plan limit reached", details: Optional[Any] = None):
        super().__init__(message, code="PLAN_LIMIT", status_code=403, details=details)


class ValidationError(VoiceSiteError):
    """
    Raised when input validation fails.
    """
    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=422, details=details)


class ConflictError(VoiceSiteError):
    """
    Raised when the request clashes with existing state.
    """
    def __init__(self, message: str = "Conflict", details: Optional[Any] = None):
        super().__init__(message, code="CONFLICT", status_code=409, details=details)


class PayloadTooLargeError(VoiceSiteError):
    def __init__(self, message: str = "Payload too large", details: Optional[Any] = None):
        super().__init__(message, code="PAYLOAD_TOO_LARGE", status_code=413, details=details)


class RateLimitError(VoiceSiteError):
    """
    Raised when a caller exceeds a rate limit.
    """
    def __init__(self, message: str = "Too many requests", details: Optional[Any] = None):
        super().__init__(message, code="RATE_LIMITED", status_code=429, details=details)


class ExternalServiceError(VoiceSiteError):
    """
    Raised when an external service (e.g., Sarvam, OpenAI, Twilio) fails.
    """
    def __init__(self, message: str = "External service error", details: Optional[Any] = None):
        super().__init__(message, code="EXTERNAL_SERVICE_ERROR", status_code=502, details=details)
