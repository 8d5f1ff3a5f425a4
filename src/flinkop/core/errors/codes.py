"""Operations, error codes and failure kinds.

This module provides:
- FlinkMethod: The closed set of remote control-plane operations
- ErrorCode: Reserved machine-readable error code strings
- FailureKind: High-level failure taxonomy used when deciding what to do

Failure Taxonomy
================

    | Kind | Retried | Aborts reconcile | Typical cause |
    |------|---------|------------------|---------------|
    | TRANSIENT | Yes, within budget | No | 5xx, 429, connection reset |
    | FAIL_FAST | No | Yes | Bad request, unrecoverable remote state |
    | PERMANENT | No | No | Unexpected status, surfaced as final |
    | DECODE | No | No | Response body could not be decoded |

Error codes are free-form strings (usually the HTTP status of the failed
call). Only two values are reserved, see ErrorCode.
"""

from __future__ import annotations

from enum import Enum


class FlinkMethod(str, Enum):
    """Remote operations issued against the Flink JobManager API.

    Values equal the names because they are persisted verbatim in
    resource status.
    """

    SUBMIT_JOB = "SubmitJob"
    CANCEL_JOB_WITH_SAVEPOINT = "CancelJobWithSavepoint"
    FORCE_CANCEL_JOB = "ForceCancelJob"
    CHECK_SAVEPOINT_STATUS = "CheckSavepointStatus"
    GET_JOBS = "GetJobs"
    GET_CLUSTER_OVERVIEW = "GetClusterOverview"
    GET_LATEST_CHECKPOINT = "GetLatestCheckpoint"
    GET_JOB_CONFIG = "GetJobConfig"
    GET_TASK_MANAGERS = "GetTaskManagers"
    GET_CHECKPOINT_COUNTS = "GetCheckpointCounts"
    GET_JOB_OVERVIEW = "GetJobOverview"

    def __str__(self) -> str:
        return self.value


class ErrorCode:
    """Reserved error code strings.

    Any other string is a valid error code as well.
    """

    GLOBAL_FAILURE: str = "FAILED"
    """Generic failure sentinel when no better code is known."""

    JSON_UNMARSHAL_ERROR: str = "JSONUNMARSHALERROR"
    """The remote response could not be decoded."""

    RESERVED: frozenset[str] = frozenset({GLOBAL_FAILURE, JSON_UNMARSHAL_ERROR})


class FailureKind(str, Enum):
    """High-level failure categories with different handling."""

    TRANSIENT = "transient"
    """Retriable with backoff while retry and error budgets last."""

    FAIL_FAST = "fail_fast"
    """Abort the current reconcile attempt regardless of budget."""

    PERMANENT = "permanent"
    """Not retriable, but does not abort the whole reconcile cycle."""

    DECODE = "decode"
    """Response could not be interpreted - treated as non-retriable."""
