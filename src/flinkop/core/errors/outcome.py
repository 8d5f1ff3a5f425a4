"""Tagged result of a remote control-plane call.

The remote-call layer returns one of three variants instead of raising:

- CallSucceeded: the call returned a value
- CallFailed: the call failed and was classified into an ApiCallError
- UnclassifiedFailure: the call raised something that was never classified

The retry policy only needs ``outcome.failure``. It is None for the two
variants that carry no classification, which selects the conservative
defaults.

Example:
    outcome = capture(FlinkMethod.GET_JOBS, client.get_jobs, url)
    if outcome.ok:
        jobs = outcome.value
    elif policy.is_fail_fast(outcome):
        abort_reconcile(outcome.failure)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from .codes import FlinkMethod
from .models import ApiCallError

T = TypeVar("T")


@dataclass(frozen=True)
class CallSucceeded(Generic[T]):
    """The call returned ``value``."""

    value: T
    operation: FlinkMethod | None = None

    @property
    def ok(self) -> bool:
        return True

    @property
    def failure(self) -> ApiCallError | None:
        return None


@dataclass(frozen=True)
class CallFailed:
    """The call failed with a classified error."""

    error: ApiCallError

    @property
    def ok(self) -> bool:
        return False

    @property
    def failure(self) -> ApiCallError | None:
        return self.error

    @property
    def operation(self) -> FlinkMethod | None:
        return self.error.operation


@dataclass(frozen=True)
class UnclassifiedFailure:
    """The call raised an exception that was never classified."""

    exception: BaseException
    operation: FlinkMethod | None = None

    @property
    def ok(self) -> bool:
        return False

    @property
    def failure(self) -> ApiCallError | None:
        return None


CallOutcome = CallSucceeded[Any] | CallFailed | UnclassifiedFailure
"""Union of the three call result variants."""


def capture(
    operation: FlinkMethod,
    fn: Callable[..., T],
    *args: Any,
    **kwargs: Any,
) -> CallSucceeded[T] | CallFailed | UnclassifiedFailure:
    """Run ``fn`` and wrap its result or failure in a CallOutcome variant.

    ApiCallError becomes CallFailed. Any other Exception becomes
    UnclassifiedFailure. BaseExceptions such as KeyboardInterrupt propagate.
    """
    try:
        value = fn(*args, **kwargs)
    except ApiCallError as exc:
        return CallFailed(exc)
    except Exception as exc:
        return UnclassifiedFailure(exc, operation)
    return CallSucceeded(value, operation)


__all__ = [
    "CallFailed",
    "CallOutcome",
    "CallSucceeded",
    "UnclassifiedFailure",
    "capture",
]
