"""Settings loading from environment variables.

Environment variable naming:
    - Prefix CTRLPLANE_
    - Upper-case field name
    - Double underscores separate nested sections
    - Example: logging.level -> CTRLPLANE_LOGGING__LEVEL

Unknown variables (such as CTRLPLANE_DEBUG, which the logger reads
directly) are ignored.
"""

import os
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from ctrlplane.exceptions import ConfigurationError

from ._models import Settings

ENV_PREFIX = "CTRLPLANE_"


def set_nested_key(
    data: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    path: str,
    value: object,
) -> None:
    """Set a value in a nested dictionary using a dot-separated path.

    Args:
        data: Dictionary to modify in place.
        path: Dot-separated key path, such as "logging.level".
        value: Value to store.
    """
    *parents, leaf = path.split(".")
    current = data
    for key in parents:
        child = current.setdefault(key, {})
        if not isinstance(child, dict):
            child = {}
            current[key] = child
        current = child  # pyright: ignore[reportUnknownVariableType]
    current[leaf] = value


def parse_env_vars(
    env: Mapping[str, str] | None = None,
    prefix: str = ENV_PREFIX,
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Parse prefixed environment variables into a nested dictionary.

    Args:
        env: Environment to read. Uses os.environ if None.
        prefix: Environment variable prefix.

    Returns:
        Dictionary of raw string values keyed by settings path.
    """
    environ = os.environ if env is None else env
    result: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]

    for key, value in environ.items():
        if not key.startswith(prefix):
            continue

        config_key = key[len(prefix) :]
        if not config_key:
            continue

        set_nested_key(result, config_key.replace("__", ".").lower(), value)

    return result


def load_settings(
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, object] | None = None,
) -> Settings:
    """Load settings from the environment, with explicit overrides on top.

    Args:
        env: Environment to read. Uses os.environ if None.
        overrides: Values keyed by dot-separated settings path, such as
            "logging.level", that take precedence over the environment.
            None values are ignored.

    Returns:
        Validated settings.

    Raises:
        ConfigurationError: If any value fails validation.
    """
    values = parse_env_vars(env)
    for path, value in (overrides or {}).items():
        if value is not None:
            set_nested_key(values, path, value)

    try:
        return Settings.model_validate(values)
    except ValidationError as e:
        msg = f"Invalid ctrlplane settings: {e}"
        raise ConfigurationError(msg) from e
