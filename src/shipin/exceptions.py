"""Error taxonomy shared by provider adapters and the lifecycle controller."""

from __future__ import annotations

__all__ = [
    "ShipinError",
    "RequestValidationError",
    "InvalidSeedError",
    "ImageTooLargeError",
    "InvalidParametersError",
    "TransportError",
    "ProtocolError",
    "BadRequestError",
    "UnauthorizedError",
    "NotFoundError",
    "MethodNotAllowedError",
    "RateLimitExceededError",
    "ServiceUnavailableError",
    "InvalidResponseError",
    "DecodingError",
    "JobFailure",
    "PollTimeoutError",
    "TaskCancelledError",
    "error_for_status",
]


class ShipinError(Exception):
    """Base class for every error surfaced to library callers."""

    default_message = "Unexpected error."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class RequestValidationError(ShipinError):
    """Raised before any network call when the request is malformed."""

    default_message = "Invalid generation request."


class InvalidSeedError(RequestValidationError):
    default_message = "Invalid seed provided. Seed must be between 0 and 999999999."


class ImageTooLargeError(RequestValidationError):
    default_message = (
        "Image size exceeds the maximum limit. Please reduce the image size and try again."
    )


class InvalidParametersError(RequestValidationError):
    default_message = "Invalid parameters for the configured provider."


class TransportError(ShipinError):
    """Underlying send failed (connectivity, timeout)."""

    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(
            f"Request failed with error: {cause}. Check your network connection and try again."
        )


class ProtocolError(ShipinError):
    """Non-2xx HTTP status returned by the provider."""

    default_message = "Invalid response received from the server. Please try again later."

    def __init__(self, message: str | None = None, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class BadRequestError(ProtocolError):
    default_message = "Bad request. Please check the request parameters and try again."


class UnauthorizedError(ProtocolError):
    default_message = "Unauthorized access. Please check your API key and try again."


class NotFoundError(ProtocolError):
    default_message = "Resource not found. Please check the URL and try again."


class MethodNotAllowedError(ProtocolError):
    default_message = "Method not allowed. Please check the HTTP method used and try again."


class RateLimitExceededError(ProtocolError):
    default_message = (
        "Rate limit exceeded. Please wait for a while before making another request."
    )


class ServiceUnavailableError(ProtocolError):
    default_message = "Service unavailable. Please try again later."


class InvalidResponseError(ProtocolError):
    """Generic protocol failure for unmapped status codes."""


class DecodingError(ShipinError):
    """A 2xx body did not match the expected shape."""

    default_message = (
        "Failed to decode the response. This might be due to a server error. "
        "Please try again later."
    )


class JobFailure(ShipinError):
    """Provider reported failure, or success without a usable output."""

    def __init__(self, reason: str, *, code: str | None = None, task_id: str | None = None) -> None:
        self.reason = reason
        self.code = code
        self.task_id = task_id
        message = f"Generation failed: {reason}"
        if code:
            message = f"{message} (code={code})"
        super().__init__(message)


class PollTimeoutError(JobFailure):
    """Optional overall polling deadline elapsed before a terminal state."""

    def __init__(self, task_id: str, *, deadline_seconds: float) -> None:
        super().__init__(
            f"task {task_id} did not finish within {deadline_seconds:g}s",
            code="poll_timeout",
            task_id=task_id,
        )


class TaskCancelledError(ShipinError):
    """Tracked poll ended because cancellation was requested locally."""

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"Task {task_id} was cancelled.")


_STATUS_ERRORS: dict[int, type[ProtocolError]] = {
    400: BadRequestError,
    401: UnauthorizedError,
    404: NotFoundError,
    405: MethodNotAllowedError,
    429: RateLimitExceededError,
    502: ServiceUnavailableError,
    503: ServiceUnavailableError,
    504: ServiceUnavailableError,
}


def error_for_status(status_code: int) -> ProtocolError | None:
    """Map an HTTP status to its protocol error; ``None`` for 2xx."""

    if 200 <= status_code < 300:
        return None
    error_cls = _STATUS_ERRORS.get(status_code, InvalidResponseError)
    if error_cls is InvalidResponseError:
        return InvalidResponseError(
            f"Unexpected status code {status_code} received from the server.",
            status_code=status_code,
        )
    return error_cls(status_code=status_code)
