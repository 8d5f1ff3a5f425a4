"""Data models for classified control-plane failures.

This module provides:
- ApiCallErrorStatus: The persisted, field-sparse record of a failure
- ApiCallError: The exception carried through the client and the retry policy

An ApiCallError is immutable once built. A new one is classified for every
failed attempt. Updating the timestamp returns a new instance.
"""

from __future__ import annotations

import copy
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from flinkop.core.clock import as_utc

from .codes import ErrorCode, FailureKind, FlinkMethod


class ApiCallErrorStatus(BaseModel):
    """Failure record stored in the externally visible resource status.

    Field names follow the status schema. Defaults and empty values are
    dropped on serialization.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    app_error: str = Field(default="", alias="appError")
    method: FlinkMethod | None = Field(default=None, alias="method")
    error_code: str = Field(default="", alias="errorCode")
    is_retryable: bool = Field(default=False, alias="isRetryable")
    is_fail_fast: bool = Field(default=False, alias="isFailFast")
    max_retries: int = Field(default=0, ge=0, alias="maxRetries")
    last_error_update_time: datetime | None = Field(default=None, alias="startedAt")

    @field_validator("last_error_update_time")
    @classmethod
    def _normalize_timestamp(cls, value: datetime | None) -> datetime | None:
        return as_utc(value) if value is not None else None

    def to_record(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict, omitting default fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_defaults=True)


class ApiCallError(Exception):
    """A control-plane call failure with its classification and retry metadata.

    The wrapped cause, when there is one, stays reachable through ``cause``
    and ``__cause__``. Its message is already folded into ``message``.
    """

    def __init__(
        self,
        status: ApiCallErrorStatus,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(status.app_error)
        self._status = status
        self._cause = cause
        self.__cause__ = cause

    @property
    def status(self) -> ApiCallErrorStatus:
        return self._status

    @property
    def cause(self) -> BaseException | None:
        return self._cause

    @property
    def message(self) -> str:
        return self._status.app_error

    @property
    def operation(self) -> FlinkMethod | None:
        return self._status.method

    @property
    def error_code(self) -> str:
        return self._status.error_code

    @property
    def is_retryable(self) -> bool:
        return self._status.is_retryable

    @property
    def is_fail_fast(self) -> bool:
        return self._status.is_fail_fast

    @property
    def max_retries(self) -> int:
        return self._status.max_retries

    @property
    def last_update_time(self) -> datetime | None:
        return self._status.last_error_update_time

    @property
    def kind(self) -> FailureKind:
        """Taxonomy bucket for this failure.

        The decode code wins over the flags, then fail-fast, then retryable.
        """
        if self.error_code == ErrorCode.JSON_UNMARSHAL_ERROR:
            return FailureKind.DECODE
        if self.is_fail_fast:
            return FailureKind.FAIL_FAST
        if self.is_retryable:
            return FailureKind.TRANSIENT
        return FailureKind.PERMANENT

    def with_last_update_time(self, ts: datetime) -> ApiCallError:
        """Return a copy of this error observed at ``ts``."""
        status = self._status.model_copy(update={"last_error_update_time": as_utc(ts)})
        return ApiCallError(status, self._cause)

    def to_status(self) -> dict[str, Any]:
        """Field-sparse record for inclusion in resource status."""
        return self._status.to_record()

    @classmethod
    def from_status(cls, data: dict[str, Any]) -> ApiCallError:
        """Rebuild an error from a persisted status record.

        The original cause is not persisted, so the result has none.
        """
        return cls(ApiCallErrorStatus.model_validate(data))

    def __str__(self) -> str:
        return self._status.app_error

    def __repr__(self) -> str:
        return (
            f"ApiCallError(operation={self.operation!s}, error_code={self.error_code!r}, "
            f"retryable={self.is_retryable}, fail_fast={self.is_fail_fast}, "
            f"max_retries={self.max_retries})"
        )

    def _key(self) -> tuple[Any, ...]:
        return tuple(self._status.model_dump().values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApiCallError):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __reduce__(self) -> tuple[Any, ...]:
        return (self.__class__, (self._status, self._cause))

    def __copy__(self) -> ApiCallError:
        return ApiCallError(self._status, self._cause)

    def __deepcopy__(self, memo: dict[int, Any]) -> ApiCallError:
        # Causes may hold tracebacks and frames; they are shared, not copied.
        return ApiCallError(copy.deepcopy(self._status, memo), self._cause)
