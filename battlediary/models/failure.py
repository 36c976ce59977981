"""
Outcome envelope and export failure taxonomy.

Every HTTP response carries one outcome: success, known_failure (the
service can say what went wrong and what to do next) or unknown_failure
(a fixed apology, with only the exception type as detail).

The export pipeline raises KnownError subclasses. The router decides
how each reaches the user:

    CaptureUnavailableError      preview not mounted        blocking alert
    ShareUnsupportedError        no file-capable share      info, then download
    ShareCancelledOrFailedError  share sheet dismissed      log only
    SaveFailedError              download not written       blocking alert

`finalize_response()` is the single exit for enveloped responses; the
HTTP layer and its exception handlers only emit finalized ones.
"""

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field, PrivateAttr


class FailureKind(str, Enum):
    """What went wrong."""

    INVALID_INPUT = "invalid_input"
    MISSING_REQUIRED = "missing_required"

    CAPTURE_UNAVAILABLE = "capture_unavailable"
    SHARE_UNSUPPORTED = "share_unsupported"
    SHARE_CANCELLED = "share_cancelled"
    SAVE_FAILED = "save_failed"

    UNKNOWN = "unknown"


class OutcomeType(str, Enum):
    SUCCESS = "success"
    KNOWN_FAILURE = "known_failure"
    UNKNOWN_FAILURE = "unknown_failure"


T = TypeVar("T")


class FailureDetail(BaseModel):
    """Explanation attached to every non-success outcome."""

    kind: FailureKind = Field(..., description="Failure classification")
    message: str = Field(..., description="Text the host may show to the player")
    detail: str | None = Field(default=None, description="Technical detail for logs and support")
    suggestion: str | None = Field(default=None, description="What the player can try next")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope returned by the JSON endpoints."""

    outcome: OutcomeType = Field(..., description="Outcome classification")
    data: T | None = Field(default=None, description="Payload, on success only")
    failure: FailureDetail | None = Field(
        default=None,
        description="Explanation, on known or unknown failure only",
    )

    _finalized: bool = PrivateAttr(default=False)

    @classmethod
    def known_failure(
        cls,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ) -> "ApiResponse[Any]":
        return cls(
            outcome=OutcomeType.KNOWN_FAILURE,
            failure=FailureDetail(
                kind=kind,
                message=message,
                detail=detail,
                suggestion=suggestion,
            ),
        )


class KnownError(Exception):
    """
    A failure the service can explain.

    Carries its own HTTP status so the app's exception handler can answer
    without another lookup.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ApiResponse[Any]:
        return ApiResponse.known_failure(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


# =============================================================================
# EXPORT PIPELINE ERRORS
# =============================================================================


class CaptureUnavailableError(KnownError):
    """The preview is not mounted, so there is nothing to rasterize."""

    def __init__(self, detail: str | None = None):
        super().__init__(
            kind=FailureKind.CAPTURE_UNAVAILABLE,
            message="The result image could not be prepared.",
            detail=detail,
            suggestion="Wait for the preview to finish loading, then try again.",
            status_code=503,
        )


class ShareUnsupportedError(KnownError):
    """The platform cannot attach an image file to a native share."""

    def __init__(self, detail: str | None = None):
        super().__init__(
            kind=FailureKind.SHARE_UNSUPPORTED,
            message=(
                "This device does not support sharing images directly. "
                "Save the image and post it manually."
            ),
            detail=detail,
            suggestion="Use the download button instead.",
            status_code=400,
        )


class ShareCancelledOrFailedError(KnownError):
    """
    The share sheet was dismissed or the OS call failed.

    The platform reports both the same way. Never shown to the player,
    and the export session stays open.
    """

    def __init__(self, detail: str | None = None):
        super().__init__(
            kind=FailureKind.SHARE_CANCELLED,
            message="Sharing was cancelled.",
            detail=detail,
            status_code=400,
        )


class SaveFailedError(KnownError):
    """The downloaded image could not be written."""

    def __init__(self, filename: str, detail: str | None = None):
        self.filename = filename
        super().__init__(
            kind=FailureKind.SAVE_FAILED,
            message="Failed to save the image.",
            detail=detail,
            suggestion="Check available storage and try again.",
            status_code=500,
        )


# =============================================================================
# RESPONSE BOUNDARY
# =============================================================================

STANDARD_MESSAGES: dict[OutcomeType, str] = {
    OutcomeType.KNOWN_FAILURE: "The export could not be completed.",
    OutcomeType.UNKNOWN_FAILURE: "Something went wrong while preparing your result image.",
}

STANDARD_SUGGESTIONS: dict[OutcomeType, str] = {
    OutcomeType.KNOWN_FAILURE: "See the failure detail, then try again.",
    OutcomeType.UNKNOWN_FAILURE: "Try again. If it keeps happening, report it with the time.",
}


def finalize_response(response: ApiResponse[Any]) -> ApiResponse[Any]:
    """
    Check an envelope's shape and mark it as finalized.

    Success must carry no failure; every other outcome must carry one.

    Raises:
        ValueError: If the envelope is malformed
    """
    if response.outcome == OutcomeType.SUCCESS:
        if response.failure is not None:
            raise ValueError("Success response must not have failure details")
    elif response.failure is None:
        raise ValueError(f"{response.outcome.value} response must have failure details")

    response._finalized = True
    return response


def is_finalized(response: ApiResponse[Any]) -> bool:
    return response._finalized


def create_unknown_failure(
    exception: Exception,
    include_type: bool = True,
) -> ApiResponse[Any]:
    """
    Finalized unknown_failure for an unclassified exception.

    The exception text never leaves the service; at most its type name
    is reported as detail.
    """
    response: ApiResponse[Any] = ApiResponse(
        outcome=OutcomeType.UNKNOWN_FAILURE,
        failure=FailureDetail(
            kind=FailureKind.UNKNOWN,
            message=STANDARD_MESSAGES[OutcomeType.UNKNOWN_FAILURE],
            detail=type(exception).__name__ if include_type else None,
            suggestion=STANDARD_SUGGESTIONS[OutcomeType.UNKNOWN_FAILURE],
        ),
    )
    return finalize_response(response)


def create_known_failure(error: KnownError) -> ApiResponse[Any]:
    """Finalized known_failure carrying the error's own explanation."""
    return finalize_response(error.to_response())


def create_success(data: T) -> ApiResponse[T]:
    response = ApiResponse[T](outcome=OutcomeType.SUCCESS, data=data)
    return finalize_response(response)
