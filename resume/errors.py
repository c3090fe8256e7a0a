# resume/errors.py
"""
Error taxonomy for the tailoring service

Every error carries the HTTP status it maps to and a message that is safe
to show to users. Server-side failures keep their detail in attributes for
logging; `public_message` stays generic.
"""

from typing import Optional


class TailoringError(Exception):
    """Base class for all service errors"""
    status_code = 500
    default_message = "Failed to tailor your resume. Please try again."

    def __init__(self, message: Optional[str] = None):
        self.public_message = message or self.default_message
        super().__init__(self.public_message)


class ValidationError(TailoringError):
    status_code = 400
    default_message = "Invalid request body"


class AuthError(TailoringError):
    status_code = 401
    default_message = "Unauthorized"


class AdminRequired(TailoringError):
    status_code = 403
    default_message = "Admin access required"


class NotFoundError(TailoringError):
    status_code = 404
    default_message = "Not found"


class QuotaExceeded(TailoringError):
    status_code = 402
    default_message = "Upgrade to Pro for unlimited resumes."


class RateLimited(TailoringError):
    status_code = 429
    default_message = "Too many requests, please try again later."

    def __init__(self, message: Optional[str] = None, retry_after: int = 0):
        super().__init__(message)
        self.retry_after = retry_after


class UpstreamFailure(TailoringError):
    """The rewrite service kept failing until retries ran out"""

    def __init__(self, attempts: int, reason: str = ""):
        super().__init__()
        self.attempts = attempts
        self.reason = reason


class InvalidUpstreamResponse(TailoringError):
    """The rewrite service answered with something that is not a valid result"""
    default_message = "The AI response was invalid. Please try again."

    def __init__(self, reason: str, raw_prefix: str = ""):
        super().__init__()
        self.reason = reason
        self.raw_prefix = raw_prefix


class PersistFailure(TailoringError):
    """The result was generated but could not be stored"""
    default_message = "Your resume was generated but could not be saved. Please try again."


class ConfigurationError(TailoringError):
    default_message = "The AI service is not configured."


class GenerationCancelled(TailoringError):
    """The caller went away while the rewrite was still being retried"""
    status_code = 499
    default_message = "Request cancelled"
