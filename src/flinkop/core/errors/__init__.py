"""Failure classification for control-plane calls.

Re-exports all public symbols.
"""

from flinkop.core.errors.codes import ErrorCode, FailureKind, FlinkMethod
from flinkop.core.errors.models import ApiCallError, ApiCallErrorStatus
from flinkop.core.errors.outcome import (
    CallFailed,
    CallOutcome,
    CallSucceeded,
    UnclassifiedFailure,
    capture,
)
from flinkop.core.errors.classifier import (
    FailureClassifier,
    classify_response_status,
    get_decode_error,
    get_error,
    get_non_retryable_error,
    get_retryable_error,
)

__all__ = [
    "ErrorCode",
    "FailureKind",
    "FlinkMethod",
    "ApiCallError",
    "ApiCallErrorStatus",
    "CallFailed",
    "CallOutcome",
    "CallSucceeded",
    "UnclassifiedFailure",
    "capture",
    "FailureClassifier",
    "classify_response_status",
    "get_decode_error",
    "get_error",
    "get_non_retryable_error",
    "get_retryable_error",
]
