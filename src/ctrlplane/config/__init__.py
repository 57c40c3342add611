"""ctrlplane configuration.

This module provides typed settings for the command-line interface,
loaded from CTRLPLANE_* environment variables.

Example:
    >>> from ctrlplane.config import load_settings
    >>> settings = load_settings({"CTRLPLANE_START_TIMEOUT": "5"})
    >>> settings.start_timeout
    5.0
"""

from ._load import ENV_PREFIX, load_settings, parse_env_vars
from ._models import LogFormat, LoggingConfig, LogLevel, Settings

__all__ = [
    "ENV_PREFIX",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "Settings",
    "load_settings",
    "parse_env_vars",
]
