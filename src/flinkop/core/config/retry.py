"""Retry policy configuration model."""

from __future__ import annotations

from datetime import timedelta

from pydantic import BaseModel, Field, model_validator

from flinkop.core.constants import (
    DEFAULT_BASE_BACKOFF,
    DEFAULT_MAX_BACKOFF,
    DEFAULT_MAX_ERROR_WAIT,
)

_ONE_MILLISECOND = timedelta(milliseconds=1)


class RetryPolicyConfig(BaseModel):
    """Backoff and error-budget settings for the retry policy.

    Durations accept seconds (``0.1``) or ISO 8601 strings (``PT5M``).

    Example:
        retry:
          base_backoff: 0.1
          max_backoff: 10
          max_error_wait: PT5M
    """

    base_backoff: timedelta = Field(
        default=DEFAULT_BASE_BACKOFF,
        description="Minimum unit of backoff (at least 1ms)",
    )
    max_error_wait: timedelta = Field(
        default=DEFAULT_MAX_ERROR_WAIT,
        description="How long a failure may persist before the error budget is spent",
    )
    max_backoff: timedelta = Field(
        default=DEFAULT_MAX_BACKOFF,
        description="Ceiling on any single computed backoff delay",
    )

    @model_validator(mode="after")
    def _validate_durations(self) -> RetryPolicyConfig:
        if self.base_backoff < _ONE_MILLISECOND:
            raise ValueError(f"base_backoff ({self.base_backoff}) must be at least 1ms")
        if self.max_backoff < self.base_backoff:
            raise ValueError(
                f"max_backoff ({self.max_backoff}) must not be less than "
                f"base_backoff ({self.base_backoff})"
            )
        if self.max_error_wait <= timedelta(0):
            raise ValueError("max_error_wait must be positive")
        return self
