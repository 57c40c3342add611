"""Configuration models.

This module provides the Pydantic models for ctrlplane settings and the
mapping from settings to per-process configuration.
"""

from enum import StrEnum
from pathlib import Path
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from ctrlplane.process import DEFAULT_START_TIMEOUT, DEFAULT_STOP_TIMEOUT, ProcessConfig


class LogLevel(StrEnum):
    """Log level threshold values.

    Values are ordered from most verbose (debug) to least verbose (error).
    """

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(StrEnum):
    """Log output format values."""

    JSON = "json"
    TEXT = "text"


class LoggingConfig(BaseModel):
    """Logging configuration section.

    Attributes:
        level: Log level threshold.
        format: Log output format.
        file: Path to log file (empty logs to stderr).
        max_bytes: Rotate the log file once it reaches this size. Rotation
            needs both max_bytes and backup_count.
        backup_count: Number of rotated log files to keep.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.TEXT
    file: str = ""
    max_bytes: int | None = Field(default=None, gt=0)
    backup_count: int | None = Field(default=None, ge=0)


class Settings(BaseModel):
    """Top-level ctrlplane settings.

    Attributes:
        etcd_path: Explicit etcd binary path. Resolved by name if None.
        apiserver_path: Explicit kube-apiserver binary path. Resolved by name
            if None.
        start_timeout: Seconds to wait for each process to become ready.
        stop_timeout: Seconds to wait for each process to exit.
        logging: Logging configuration.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    etcd_path: Path | None = None
    apiserver_path: Path | None = None
    start_timeout: float = Field(default=DEFAULT_START_TIMEOUT, gt=0)
    stop_timeout: float = Field(default=DEFAULT_STOP_TIMEOUT, gt=0)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def process_config(self, path: Path | None = None) -> ProcessConfig:
        """Build the configuration for one supervised process.

        Args:
            path: Binary path for the process, if known.

        Returns:
            A ProcessConfig carrying these timeouts and the given path.
        """
        return ProcessConfig(
            path=path,
            start_timeout=self.start_timeout,
            stop_timeout=self.stop_timeout,
        )
