"""Pytest fixtures for flinkop tests."""

import logging
import random
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Generator

import pytest
import structlog

from flinkop.core.clock import FakeClock
from flinkop.execution.retry_policy import RetryPolicy


@pytest.fixture(autouse=True)
def reset_logging_state() -> Generator[None, None, None]:
    """Reset structlog and root handlers around each test for isolation."""
    structlog.reset_defaults()

    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers[:]
    original_level = root_logger.level
    for handler in original_handlers:
        root_logger.removeHandler(handler)

    yield

    structlog.reset_defaults()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    for handler in original_handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(original_level)


@pytest.fixture
def start_time() -> datetime:
    return datetime(2024, 3, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def fake_clock(start_time: datetime) -> FakeClock:
    """A clock frozen at ``start_time``."""
    return FakeClock(start_time)


@pytest.fixture
def policy() -> RetryPolicy:
    """Policy with 100ms base, 10s cap and a 5 minute error budget."""
    return RetryPolicy(
        base_backoff=timedelta(milliseconds=100),
        max_error_wait=timedelta(minutes=5),
        max_backoff=timedelta(milliseconds=10000),
        rng=random.Random(1234),
    )


@pytest.fixture
def sample_yaml_config(tmp_path: Path) -> Path:
    """Create a sample YAML client config file."""
    config_path = tmp_path / "flinkop.yaml"
    config_path.write_text(
        "default_max_retries: 7\n"
        "retry:\n"
        "  base_backoff: 0.25\n"
        "  max_backoff: 30\n"
        "  max_error_wait: PT10M\n"
        "logging:\n"
        "  level: DEBUG\n"
        "  format: json\n"
    )
    return config_path
