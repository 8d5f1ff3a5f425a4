"""Tests for ApiCallError and its persisted status record."""

import copy
import pickle
from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from flinkop.core.errors import ApiCallError, ApiCallErrorStatus, FlinkMethod, get_error


@pytest.fixture
def observed_at() -> datetime:
    return datetime(2024, 1, 15, 10, 30, 0, tzinfo=UTC)


@pytest.fixture
def submit_failure(observed_at: datetime) -> ApiCallError:
    return get_error(
        None,
        FlinkMethod.SUBMIT_JOB,
        "FAILED",
        True,
        False,
        20,
        "jar not found",
        last_update_time=observed_at,
    )


class TestApiCallError:
    """Tests for the exception value itself."""

    def test_fields(self, submit_failure: ApiCallError, observed_at: datetime) -> None:
        assert submit_failure.operation == FlinkMethod.SUBMIT_JOB
        assert submit_failure.error_code == "FAILED"
        assert submit_failure.is_retryable is True
        assert submit_failure.is_fail_fast is False
        assert submit_failure.max_retries == 20
        assert submit_failure.last_update_time == observed_at

    def test_is_an_exception_with_message(self, submit_failure: ApiCallError) -> None:
        assert isinstance(submit_failure, Exception)
        assert str(submit_failure) == submit_failure.message
        with pytest.raises(ApiCallError, match="SubmitJob call failed"):
            raise submit_failure

    def test_fields_are_read_only(self, submit_failure: ApiCallError) -> None:
        with pytest.raises(AttributeError):
            submit_failure.max_retries = 3  # type: ignore[misc]
        with pytest.raises(ValidationError):
            submit_failure.status.max_retries = 3  # type: ignore[misc]

    def test_negative_max_retries_rejected(self) -> None:
        with pytest.raises(ValidationError):
            get_error(None, FlinkMethod.GET_JOBS, "FAILED", True, False, -1)

    def test_equality_and_hash_use_field_values(self, observed_at: datetime) -> None:
        a = get_error(None, FlinkMethod.GET_JOBS, "500", True, False, 5,
                      last_update_time=observed_at)
        b = get_error(None, FlinkMethod.GET_JOBS, "500", True, False, 5,
                      last_update_time=observed_at)
        c = get_error(None, FlinkMethod.GET_JOBS, "500", True, False, 6,
                      last_update_time=observed_at)

        assert a == b
        assert hash(a) == hash(b)
        assert a != c
        assert len({a, b, c}) == 2

    def test_naive_timestamp_treated_as_utc(self) -> None:
        error = get_error(None, FlinkMethod.GET_JOBS, "500", True, False, 5,
                          last_update_time=datetime(2024, 1, 1, 8, 0, 0))
        assert error.last_update_time == datetime(2024, 1, 1, 8, 0, 0, tzinfo=UTC)

    def test_with_last_update_time_returns_new_value(
        self, submit_failure: ApiCallError, observed_at: datetime
    ) -> None:
        later = observed_at + timedelta(minutes=1)
        updated = submit_failure.with_last_update_time(later)

        assert updated.last_update_time == later
        assert submit_failure.last_update_time == observed_at
        assert updated.message == submit_failure.message

    def test_repr_mentions_operation_and_code(self, submit_failure: ApiCallError) -> None:
        text = repr(submit_failure)
        assert "SubmitJob" in text
        assert "'FAILED'" in text


class TestCopying:
    """Deep copies must not alias the live value."""

    def test_deepcopy_has_identical_fields(self, submit_failure: ApiCallError) -> None:
        duplicate = copy.deepcopy(submit_failure)

        assert duplicate == submit_failure
        assert duplicate is not submit_failure
        assert duplicate.status is not submit_failure.status

    def test_updating_copy_timestamp_leaves_original(
        self, submit_failure: ApiCallError, observed_at: datetime
    ) -> None:
        duplicate = copy.deepcopy(submit_failure)
        duplicate = duplicate.with_last_update_time(observed_at + timedelta(hours=1))

        assert submit_failure.last_update_time == observed_at
        assert duplicate.last_update_time == observed_at + timedelta(hours=1)

    def test_deepcopy_keeps_cause(self) -> None:
        cause = ConnectionError("reset by peer")
        error = get_error(cause, FlinkMethod.GET_JOBS, "FAILED", True, False, 3)

        assert copy.deepcopy(error).cause is cause

    def test_pickle_round_trip(self, submit_failure: ApiCallError) -> None:
        restored = pickle.loads(pickle.dumps(submit_failure))
        assert restored == submit_failure


class TestStatusRecord:
    """Tests for the field-sparse persisted record."""

    def test_full_record(self, submit_failure: ApiCallError) -> None:
        assert submit_failure.to_status() == {
            "appError": submit_failure.message,
            "method": "SubmitJob",
            "errorCode": "FAILED",
            "isRetryable": True,
            "maxRetries": 20,
            "startedAt": "2024-01-15T10:30:00Z",
        }

    def test_defaults_are_omitted(self) -> None:
        error = get_error(None, FlinkMethod.GET_JOBS, "404", False, False, 0)
        record = error.to_status()

        assert "isRetryable" not in record
        assert "isFailFast" not in record
        assert "maxRetries" not in record
        assert "startedAt" not in record
        assert record["method"] == "GetJobs"

    def test_empty_status_serializes_to_empty_record(self) -> None:
        assert ApiCallErrorStatus().to_record() == {}

    def test_from_status_restores_fields(self, submit_failure: ApiCallError) -> None:
        restored = ApiCallError.from_status(submit_failure.to_status())

        assert restored == submit_failure
        assert restored.cause is None

    def test_from_status_accepts_sparse_record(self) -> None:
        restored = ApiCallError.from_status({"errorCode": "FAILED", "isFailFast": True})

        assert restored.error_code == "FAILED"
        assert restored.is_fail_fast is True
        assert restored.is_retryable is False
        assert restored.max_retries == 0
        assert restored.operation is None
