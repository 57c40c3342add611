"""Shared utilities for ctrlplane."""

from ._logging import LogFormatType, create_logger, create_process_logger

__all__ = ["LogFormatType", "create_logger", "create_process_logger"]
