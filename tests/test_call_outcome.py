"""Tests for the tagged call result variants."""

import pytest

from flinkop.core.errors import (
    CallFailed,
    CallSucceeded,
    FlinkMethod,
    UnclassifiedFailure,
    capture,
    get_retryable_error,
)


class TestVariants:
    """Tests for the variant accessors."""

    def test_succeeded(self) -> None:
        outcome = CallSucceeded({"jobs": []}, FlinkMethod.GET_JOBS)

        assert outcome.ok is True
        assert outcome.failure is None
        assert outcome.value == {"jobs": []}

    def test_failed_exposes_error(self) -> None:
        error = get_retryable_error(None, FlinkMethod.GET_JOBS, "503")
        outcome = CallFailed(error)

        assert outcome.ok is False
        assert outcome.failure is error
        assert outcome.operation == FlinkMethod.GET_JOBS

    def test_unclassified_has_no_failure(self) -> None:
        outcome = UnclassifiedFailure(RuntimeError("boom"), FlinkMethod.GET_JOBS)

        assert outcome.ok is False
        assert outcome.failure is None


class TestCapture:
    """Tests for running a call into a variant."""

    def test_success(self) -> None:
        outcome = capture(FlinkMethod.GET_JOBS, lambda x: x * 2, 21)

        assert isinstance(outcome, CallSucceeded)
        assert outcome.value == 42
        assert outcome.operation == FlinkMethod.GET_JOBS

    def test_classified_failure(self) -> None:
        error = get_retryable_error(None, FlinkMethod.SUBMIT_JOB, "500")

        def call() -> None:
            raise error

        outcome = capture(FlinkMethod.SUBMIT_JOB, call)

        assert isinstance(outcome, CallFailed)
        assert outcome.error is error

    def test_foreign_failure(self) -> None:
        def call() -> None:
            raise KeyError("missing")

        outcome = capture(FlinkMethod.GET_JOB_CONFIG, call)

        assert isinstance(outcome, UnclassifiedFailure)
        assert isinstance(outcome.exception, KeyError)
        assert outcome.operation == FlinkMethod.GET_JOB_CONFIG

    def test_keyboard_interrupt_propagates(self) -> None:
        def call() -> None:
            raise KeyboardInterrupt

        with pytest.raises(KeyboardInterrupt):
            capture(FlinkMethod.GET_JOBS, call)

    def test_kwargs_forwarded(self) -> None:
        outcome = capture(FlinkMethod.GET_JOBS, dict, a=1)
        assert isinstance(outcome, CallSucceeded)
        assert outcome.value == {"a": 1}
