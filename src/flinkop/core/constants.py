"""Global constants for flinkop.

Centralizes the retry and backoff numbers shared by the classifier,
the retry policy and the configuration defaults.
"""

from datetime import timedelta

# =============================================================================
# Retry Budgets
# =============================================================================

DEFAULT_RETRIES = 20
"""Retry budget attached to retryable failures when the caller gives none."""

NO_RETRIES = 0
"""Retry budget attached to non-retryable failures."""

# =============================================================================
# Backoff Defaults
# =============================================================================

DEFAULT_BASE_BACKOFF = timedelta(milliseconds=100)
"""Minimum unit of backoff."""

DEFAULT_MAX_BACKOFF = timedelta(seconds=10)
"""Ceiling on any single computed backoff delay."""

DEFAULT_MAX_ERROR_WAIT = timedelta(minutes=5)
"""How long a resource may sit in a failed state before the error budget is spent."""

MAX_BACKOFF_EXPONENT = 62
"""Largest power of two applied to the backoff window.

Attempt counts above this are saturated, so the delay is already far past
any sensible ``max_backoff`` and the cap applies.
"""
