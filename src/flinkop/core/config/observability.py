"""Logging configuration model."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field


class LogConfig(BaseModel):
    """Configuration for structured logging.

    Controls log level, output format, and file rotation settings.
    Passed to ``flinkop.core.logging.configure_logging`` via ``apply()``.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Minimum log level to capture",
    )
    format: Literal["json", "console"] = Field(
        default="console",
        description="Output format: json for structured, console for human-readable",
    )
    file_path: Path | None = Field(
        default=None,
        description="Optional rotating log file",
    )
    max_file_size_mb: int = Field(
        default=50,
        gt=0,
        le=1000,
        description="Maximum log file size before rotation (MB)",
    )
    backup_count: int = Field(
        default=5,
        ge=0,
        le=100,
        description="Number of rotated log files to keep",
    )
    include_timestamps: bool = Field(
        default=True,
        description="Include ISO8601 UTC timestamps in log entries",
    )
    include_context: bool = Field(
        default=True,
        description="Include reconcile context (application, namespace) in log entries",
    )

    def apply(self) -> None:
        """Configure process-wide logging from this config."""
        from flinkop.core.logging import configure_logging

        configure_logging(
            level=self.level,
            format=self.format,
            file_path=self.file_path,
            max_file_size_mb=self.max_file_size_mb,
            backup_count=self.backup_count,
            include_timestamps=self.include_timestamps,
            include_context=self.include_context,
        )
