"""Classification of raw control-plane failures into ApiCallError values.

The functions here are pure constructors: they allocate an ApiCallError
and do nothing else. Which retry parameters apply is decided by the
caller (the remote-call layer) from the operation and the way it failed.
The helpers encode the conventions that layer uses:

- ``get_retryable_error``: transient failure, retried up to a budget
- ``get_non_retryable_error``: fail-fast failure, never retried
- ``get_decode_error``: response body could not be decoded
- ``classify_response_status``: map an HTTP status to one of the above

Example:
    try:
        body = decode(response)
    except ValueError as exc:
        raise get_decode_error(exc, FlinkMethod.GET_JOBS) from exc
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from flinkop.core.constants import DEFAULT_RETRIES, NO_RETRIES

from .codes import ErrorCode, FlinkMethod
from .models import ApiCallError, ApiCallErrorStatus

if TYPE_CHECKING:
    from flinkop.core.config import ClientConfig


def _summary(operation: FlinkMethod, error_code: str, context: tuple[str, ...]) -> str:
    return (
        f"{operation.value} call failed with status {error_code} "
        f"and message [{' '.join(context)}]"
    )


def get_error(
    cause: BaseException | None,
    operation: FlinkMethod,
    error_code: str,
    is_retryable: bool,
    is_fail_fast: bool,
    max_retries: int,
    *context: str,
    last_update_time: datetime | None = None,
) -> ApiCallError:
    """Build an ApiCallError for a failed call.

    Args:
        cause: The underlying exception, if any. Its message is appended
            to the summary and the exception stays reachable via ``cause``.
        operation: The remote operation that failed.
        error_code: Machine-readable code (see ErrorCode for reserved values).
        is_retryable: Whether retrying has any chance of succeeding.
        is_fail_fast: Whether the caller should abandon the reconcile attempt.
        max_retries: Retry budget for this failure (must be >= 0).
        *context: Free-form context strings included in the message.
        last_update_time: When this failure was observed, if already known.

    Returns:
        The classified ApiCallError.

    Raises:
        pydantic.ValidationError: If ``max_retries`` is negative.
    """
    message = _summary(operation, error_code, context)
    if cause is not None:
        message = f"{message}: {cause}"

    status = ApiCallErrorStatus(
        app_error=message,
        method=operation,
        error_code=error_code,
        is_retryable=is_retryable,
        is_fail_fast=is_fail_fast,
        max_retries=max_retries,
        last_error_update_time=last_update_time,
    )
    return ApiCallError(status, cause)


def get_retryable_error(
    cause: BaseException | None,
    operation: FlinkMethod,
    error_code: str,
    *context: str,
    max_retries: int = DEFAULT_RETRIES,
) -> ApiCallError:
    """Transient failure: retryable, not fail-fast."""
    return get_error(cause, operation, error_code, True, False, max_retries, *context)


def get_non_retryable_error(
    cause: BaseException | None,
    operation: FlinkMethod,
    error_code: str,
    *context: str,
) -> ApiCallError:
    """Unrecoverable failure: not retryable, fail-fast, no retry budget."""
    return get_error(cause, operation, error_code, False, True, NO_RETRIES, *context)


def get_decode_error(
    cause: BaseException | None,
    operation: FlinkMethod,
    *context: str,
) -> ApiCallError:
    """The remote response could not be decoded.

    Treated conservatively: not retryable and not fail-fast.
    """
    return get_error(
        cause, operation, ErrorCode.JSON_UNMARSHAL_ERROR, False, False, NO_RETRIES, *context
    )


def classify_response_status(
    operation: FlinkMethod,
    status_code: int,
    cause: BaseException | None = None,
    *context: str,
    max_retries: int = DEFAULT_RETRIES,
) -> ApiCallError:
    """Classify a non-2xx response from the remote API.

    - 5xx and 429: retryable with ``max_retries``
    - other 4xx: non-retryable and fail-fast (the request itself is bad)
    - anything else: non-retryable, surfaced as final

    Raises:
        ValueError: If ``status_code`` is a 2xx success.
    """
    if 200 <= status_code < 300:
        raise ValueError(f"status {status_code} is not a failure")

    error_code = str(status_code)
    if status_code >= 500 or status_code == 429:
        return get_retryable_error(
            cause, operation, error_code, *context, max_retries=max_retries
        )
    if 400 <= status_code < 500:
        return get_non_retryable_error(cause, operation, error_code, *context)
    return get_error(cause, operation, error_code, False, False, NO_RETRIES, *context)


class FailureClassifier:
    """Classifier bound to a configured default retry budget.

    Thread-safe: holds only read-only configuration.
    """

    def __init__(self, default_max_retries: int = DEFAULT_RETRIES) -> None:
        if default_max_retries < 0:
            raise ValueError("default_max_retries must be >= 0")
        self.default_max_retries = default_max_retries

    @classmethod
    def from_config(cls, config: ClientConfig) -> FailureClassifier:
        return cls(default_max_retries=config.default_max_retries)

    def retryable(
        self,
        cause: BaseException | None,
        operation: FlinkMethod,
        error_code: str = ErrorCode.GLOBAL_FAILURE,
        *context: str,
    ) -> ApiCallError:
        return get_retryable_error(
            cause, operation, error_code, *context, max_retries=self.default_max_retries
        )

    def non_retryable(
        self,
        cause: BaseException | None,
        operation: FlinkMethod,
        error_code: str = ErrorCode.GLOBAL_FAILURE,
        *context: str,
    ) -> ApiCallError:
        return get_non_retryable_error(cause, operation, error_code, *context)

    def decode(
        self,
        cause: BaseException | None,
        operation: FlinkMethod,
        *context: str,
    ) -> ApiCallError:
        return get_decode_error(cause, operation, *context)

    def response_status(
        self,
        operation: FlinkMethod,
        status_code: int,
        cause: BaseException | None = None,
        *context: str,
    ) -> ApiCallError:
        return classify_response_status(
            operation, status_code, cause, *context, max_retries=self.default_max_retries
        )

    def classify_exception(self, operation: FlinkMethod, exc: BaseException) -> ApiCallError:
        """Map an exception raised by the transport to an ApiCallError.

        ApiCallError instances pass through unchanged. Connection and timeout
        errors are transient. Decode errors (ValueError, which includes
        json.JSONDecodeError) are non-retryable. Anything else is a
        permanent, non-fail-fast failure.
        """
        if isinstance(exc, ApiCallError):
            return exc
        if isinstance(exc, (ConnectionError, TimeoutError)):
            return self.retryable(exc, operation, ErrorCode.GLOBAL_FAILURE)
        if isinstance(exc, ValueError):
            return get_decode_error(exc, operation)
        return get_error(exc, operation, ErrorCode.GLOBAL_FAILURE, False, False, NO_RETRIES)


__all__ = [
    "FailureClassifier",
    "classify_response_status",
    "get_decode_error",
    "get_error",
    "get_non_retryable_error",
    "get_retryable_error",
]
