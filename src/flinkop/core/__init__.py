"""Core domain models, configuration and logging."""

from flinkop.core.clock import Clock, FakeClock, SystemClock
from flinkop.core.config import ClientConfig, LogConfig, RetryPolicyConfig
from flinkop.core.errors import (
    ApiCallError,
    ErrorCode,
    FailureClassifier,
    FailureKind,
    FlinkMethod,
    get_error,
)

__all__ = [
    "ApiCallError",
    "ClientConfig",
    "Clock",
    "ErrorCode",
    "FailureClassifier",
    "FailureKind",
    "FakeClock",
    "FlinkMethod",
    "LogConfig",
    "RetryPolicyConfig",
    "SystemClock",
    "get_error",
]
