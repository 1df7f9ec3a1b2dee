import logging
from typing import Optional

from fastapi import HTTPException

logger = logging.getLogger(__name__)

GENERIC_REFUND_REASON = "An unexpected server error occurred. Please try again."


class ClientInputError(ValueError):
    """Submission rejected before a job exists (no frames, too many frames, bad config JSON)."""

    def __init__(self, error: str, message: str, status_code: int = 400):
        super().__init__(message)
        self.error = error
        self.message = message
        self.status_code = status_code


class AnalysisError(Exception):
    """Base for classified failures of the model round trip. Each subclass carries a machine kind and the refund reason shown to the user."""

    kind = "api_error"
    refund_reason = "The AI service returned an error. Please try again."

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ModelTimeout(AnalysisError):
    kind = "timeout"
    refund_reason = "Analysis timed out. Please try again with a shorter video."


class RateLimited(AnalysisError):
    kind = "rate_limited"
    refund_reason = "The AI service is busy right now. Please retry in a few minutes."


class ServiceUnavailable(AnalysisError):
    kind = "service_unavailable"
    refund_reason = "The AI service is temporarily unavailable. Please try again later."


class BadRequest(AnalysisError):
    kind = "bad_request"
    refund_reason = "The AI service rejected this request. Please try again with different footage."


class ApiError(AnalysisError):
    pass


class MalformedResponse(AnalysisError):
    kind = "malformed_response"
    refund_reason = "The AI returned an invalid response. Please try again."


def refund_for(exc: BaseException) -> tuple[str, bool, str]:
    """Map a background-task exception to (error_kind, should_refund, refund_reason).
    Every server-side failure is refundable; unclassified exceptions get the generic reason."""
    if isinstance(exc, AnalysisError):
        return exc.kind, True, exc.refund_reason
    return "unexpected", True, GENERIC_REFUND_REASON


def as_http_error(e: ClientInputError) -> HTTPException:
    """Turn a submission-time input error into an HTTPException with an {error, message} body."""
    return HTTPException(status_code=e.status_code, detail={"error": e.error, "message": e.message})


def as_http_500(e: Exception) -> HTTPException:
    """Log exception and return a generic 500 HTTPException (no internal details leaked).
    Why available: Centralized error handling so API never leaks stack traces or internal state to clients."""
    logger.error("unhandled_error", exc_info=e)
    return HTTPException(
        status_code=500,
        detail={"error": "Failed to start analysis", "message": "Internal server error"},
    )
