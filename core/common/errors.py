from rest_framework import status
from rest_framework.response import Response


class OnboardingError(Exception):
    """
    Base for every user-facing pipeline failure.
    `code` and `http_status` decide how the view renders it; `message` is what the caller sees.
    """
    code = "ERROR"
    http_status = status.HTTP_400_BAD_REQUEST
    default_message = "Request failed"

    def __init__(self, message=None, *, details=None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(OnboardingError):
    code = "VALIDATION_ERROR"
    default_message = "Invalid request"


class InvalidEmail(ValidationError):
    default_message = "Invalid email address"


class RateLimited(OnboardingError):
    code = "RATE_LIMITED"
    http_status = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "OTP already sent. Please wait a few minutes before requesting another."

    def __init__(self, message=None, *, retry_after_seconds=None, details=None):
        self.retry_after_seconds = retry_after_seconds
        details = dict(details or {})
        if retry_after_seconds is not None:
            details.setdefault("retry_after", retry_after_seconds)
        super().__init__(message, details=details)


class Unauthenticated(OnboardingError):
    code = "UNAUTHENTICATED"
    default_message = "Invalid or expired code"


class UpstreamFetchError(OnboardingError):
    code = "WEBSITE_ANALYSIS_FAILED"
    default_message = "Could not analyze company website. Please ensure the email domain has a valid website."


class NotFound(OnboardingError):
    code = "NOT_FOUND"
    default_message = "Website analysis not found. Please restart the process."


class OtpDeliveryError(OnboardingError):
    code = "OTP_DELIVERY_FAILED"
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Could not send the verification code. Please try again."


class ArtifactGenerationError(OnboardingError):
    code = "ARTIFACT_GENERATION_FAILED"
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Could not generate the knowledge base document."


class PersistenceError(OnboardingError):
    code = "PERSISTENCE_FAILED"
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Could not save the assistant. Please try again."


def error_body(code: str, message: str, details=None) -> dict:
    return {"ok": False, "error": {"code": code, "message": message, "details": details or {}}}


def error_response(exc: OnboardingError) -> Response:
    headers = {}
    if isinstance(exc, RateLimited) and exc.retry_after_seconds:
        headers["Retry-After"] = str(exc.retry_after_seconds)
    return Response(
        error_body(exc.code, exc.message, exc.details),
        status=exc.http_status,
        headers=headers or None,
    )


def validation_error_response(errors) -> Response:
    """Serializer errors -> the same envelope every other failure uses."""
    return Response(
        error_body(ValidationError.code, "Invalid request", errors),
        status=status.HTTP_400_BAD_REQUEST,
    )
