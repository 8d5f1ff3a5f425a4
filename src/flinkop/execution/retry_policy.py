"""Retry policy for classified control-plane failures.

Answers the questions a reconciliation loop asks after a failed call:

- Is the failure retryable at all?
- Is there retry budget left for this attempt count?
- Is it fail-fast (abort the whole reconcile attempt)?
- Has the resource been failing for longer than the error budget?
- How long should the next backoff window be?

Backoff is exponential with jitter. With ``B`` the base backoff in whole
milliseconds and ``J`` drawn uniformly from ``[0, B)``::

    delay = min(2**attempt * (B + J) ms, max_backoff)

The exponent is saturated at MAX_BACKOFF_EXPONENT, so arbitrarily high
attempt counts simply hit the cap.

Example usage:
    from flinkop.execution.retry_policy import RetryPolicy, RetryVerdict

    policy = RetryPolicy.from_config(config.retry)
    decision = policy.decide(status.last_seen_error, SystemClock(), status.retry_count)
    if decision.verdict == RetryVerdict.FAIL_FAST:
        ...

The policy is stateless with respect to calls. Attempt counts and
timestamps belong to the caller. The only shared state is the jitter
generator, which is owned by the instance and guarded by a lock.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from threading import Lock
from typing import TYPE_CHECKING, Any

from flinkop.core.clock import Clock
from flinkop.core.constants import MAX_BACKOFF_EXPONENT
from flinkop.core.errors import ApiCallError, CallFailed
from flinkop.core.logging import get_logger

if TYPE_CHECKING:
    from flinkop.core.config import RetryPolicyConfig
    from flinkop.core.errors import CallOutcome

    FailureInput = ApiCallError | CallOutcome | BaseException | None

# Module-level logger for retry decisions
_logger = get_logger("retry_policy")

_ONE_MILLISECOND = timedelta(milliseconds=1)


def _as_api_error(failure: object) -> ApiCallError | None:
    """Extract the classified error, or None for anything unclassified."""
    if isinstance(failure, ApiCallError):
        return failure
    if isinstance(failure, CallFailed):
        return failure.error
    return None


class RetryVerdict(str, Enum):
    """What the caller should do with a failed call."""

    RETRY = "retry"
    """Inside the backoff window - issue the next attempt."""

    WAIT = "wait"
    """Outside the backoff window - requeue and check again later."""

    GIVE_UP = "give_up"
    """Not retryable, or retry/error budget exhausted - surface as final."""

    FAIL_FAST = "fail_fast"
    """Abort the current reconcile attempt immediately."""


@dataclass(frozen=True)
class RetryDecision:
    """Outcome of RetryPolicy.decide() with its reasoning.

    Attributes:
        verdict: What the caller should do.
        delay: Backoff window computed for this attempt.
        elapsed: Time since the failure was last updated.
        attempt_count: The attempt count the decision was made for.
        reason: Human-readable explanation of the verdict.
    """

    verdict: RetryVerdict
    delay: timedelta
    elapsed: timedelta
    attempt_count: int
    reason: str

    @property
    def should_retry(self) -> bool:
        return self.verdict == RetryVerdict.RETRY

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "verdict": self.verdict.value,
            "delay_ms": int(self.delay / _ONE_MILLISECOND),
            "elapsed_ms": int(self.elapsed / _ONE_MILLISECOND),
            "attempt_count": self.attempt_count,
            "reason": self.reason,
        }


class RetryPolicy:
    """Evaluates retryability and backoff for classified failures.

    None of the failure queries raise. An absent, unclassified or foreign
    failure gets the conservative answer: not retryable, not fail-fast,
    no retries remaining.

    Thread-safe: configuration is read-only after construction and jitter
    draws are serialized on an instance-owned generator.
    """

    def __init__(
        self,
        base_backoff: timedelta,
        max_error_wait: timedelta,
        max_backoff: timedelta,
        *,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the retry policy.

        Args:
            base_backoff: Minimum unit of backoff (at least 1ms).
            max_error_wait: Ceiling on time since last update before the
                error budget is considered spent.
            max_backoff: Ceiling on any single computed delay.
            rng: Jitter source. A fresh, independently seeded generator
                is created when omitted; pass a seeded one for reproducible
                delays.

        Raises:
            ValueError: If the durations are out of range.
        """
        if base_backoff < _ONE_MILLISECOND:
            raise ValueError("base_backoff must be at least 1ms")
        if max_backoff < timedelta(0):
            raise ValueError("max_backoff must not be negative")
        self._base_backoff = base_backoff
        self._max_error_wait = max_error_wait
        self._max_backoff = max_backoff
        self._rng = rng or random.Random()
        self._rng_lock = Lock()

    @classmethod
    def from_config(
        cls,
        config: RetryPolicyConfig,
        rng: random.Random | None = None,
    ) -> RetryPolicy:
        return cls(
            base_backoff=config.base_backoff,
            max_error_wait=config.max_error_wait,
            max_backoff=config.max_backoff,
            rng=rng,
        )

    @property
    def base_backoff(self) -> timedelta:
        return self._base_backoff

    @property
    def max_error_wait(self) -> timedelta:
        return self._max_error_wait

    @property
    def max_backoff(self) -> timedelta:
        return self._max_backoff

    def is_retryable(self, failure: FailureInput) -> bool:
        error = _as_api_error(failure)
        return error is not None and error.is_retryable

    def has_retries_remaining(self, failure: FailureInput, attempt_count: int) -> bool:
        """True while ``attempt_count`` has not passed the failure's max_retries.

        The boundary is inclusive: the attempt equal to max_retries still
        has a retry remaining.
        """
        error = _as_api_error(failure)
        return error is not None and attempt_count <= error.max_retries

    def is_fail_fast(self, failure: FailureInput) -> bool:
        error = _as_api_error(failure)
        return error is not None and error.is_fail_fast

    def within_error_budget(
        self,
        clock: Clock,
        last_update_time: datetime,
    ) -> tuple[timedelta, bool]:
        """Return the elapsed time since ``last_update_time`` and whether it
        is still within ``max_error_wait`` (inclusive)."""
        elapsed = clock.since(last_update_time)
        return elapsed, elapsed <= self._max_error_wait

    def compute_backoff_delay(self, attempt_count: int) -> timedelta:
        """Compute the jittered exponential backoff for ``attempt_count``.

        Args:
            attempt_count: Attempts so far. Negative values are treated as 0.

        Returns:
            A delay in ``[0, max_backoff]``, in whole milliseconds unless capped.
        """
        base_ms = self._base_backoff // _ONE_MILLISECOND
        with self._rng_lock:
            jitter_ms = self._rng.randrange(base_ms)

        exponent = min(max(attempt_count, 0), MAX_BACKOFF_EXPONENT)
        delay_ms = (1 << exponent) * (base_ms + jitter_ms)

        # Compare before building a timedelta; large exponents overflow it
        if delay_ms >= self._max_backoff / _ONE_MILLISECOND:
            return self._max_backoff
        return timedelta(milliseconds=delay_ms)

    def should_retry_now(
        self,
        clock: Clock,
        last_update_time: datetime,
        attempt_count: int,
    ) -> bool:
        """True while the time since ``last_update_time`` is inside the
        backoff window for ``attempt_count``."""
        return clock.since(last_update_time) <= self.compute_backoff_delay(attempt_count)

    def decide(
        self,
        failure: FailureInput,
        clock: Clock,
        attempt_count: int,
        last_update_time: datetime | None = None,
    ) -> RetryDecision:
        """Combine the individual queries into a single verdict.

        Checks run in a fixed order: fail-fast, retryable, retry budget,
        error budget, then the backoff window. The first check that fails
        decides the verdict.

        Args:
            failure: The last failure seen for the resource.
            clock: Time source.
            attempt_count: Attempts made so far for this failure.
            last_update_time: When the failure was last updated. Defaults to
                the failure's own timestamp, then to ``clock.now()``.

        Returns:
            RetryDecision with verdict, delay, elapsed time and reason.
        """
        error = _as_api_error(failure)
        if last_update_time is None and error is not None:
            last_update_time = error.last_update_time
        if last_update_time is None:
            last_update_time = clock.now()

        delay = self.compute_backoff_delay(attempt_count)
        elapsed, within_budget = self.within_error_budget(clock, last_update_time)

        verdict: RetryVerdict
        if error is None:
            verdict = RetryVerdict.GIVE_UP
            reason = f"Unclassified failure ({type(failure).__name__}) - not retrying"
        elif error.is_fail_fast:
            verdict = RetryVerdict.FAIL_FAST
            reason = f"Fail-fast failure: {error.message}"
        elif not error.is_retryable:
            verdict = RetryVerdict.GIVE_UP
            reason = f"Failure is not retryable: {error.message}"
        elif not self.has_retries_remaining(error, attempt_count):
            verdict = RetryVerdict.GIVE_UP
            reason = f"Retry budget exhausted ({attempt_count} > {error.max_retries})"
        elif not within_budget:
            verdict = RetryVerdict.GIVE_UP
            reason = f"Error budget exhausted ({elapsed} > {self._max_error_wait})"
        elif elapsed <= delay:
            verdict = RetryVerdict.RETRY
            reason = f"Inside backoff window of {delay} (attempt {attempt_count})"
        else:
            verdict = RetryVerdict.WAIT
            reason = f"Outside backoff window of {delay} (attempt {attempt_count})"

        decision = RetryDecision(
            verdict=verdict,
            delay=delay,
            elapsed=elapsed,
            attempt_count=attempt_count,
            reason=reason,
        )

        _logger.debug(
            "retry_policy.decision",
            operation=error.operation.value if error and error.operation else None,
            error_code=error.error_code if error else None,
            **decision.to_dict(),
        )

        return decision


__all__ = [
    "RetryDecision",
    "RetryPolicy",
    "RetryVerdict",
]
