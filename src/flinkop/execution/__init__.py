"""Execution layer: retry policy evaluation for failed control-plane calls."""

from flinkop.execution.retry_policy import (
    RetryDecision,
    RetryPolicy,
    RetryVerdict,
)

__all__ = [
    "RetryDecision",
    "RetryPolicy",
    "RetryVerdict",
]
