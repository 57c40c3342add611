"""Binary path resolution for supervised processes.

Resolution order for a binary named ``name``:
1. The ``TEST_ASSET_<NAME>`` environment variable
2. ``name`` on PATH
3. ``<assets dir>/<name>``, where the assets dir is ``CTRLPLANE_ASSETS_DIR``
   or ``assets/bin`` relative to the working directory
"""

import os
import re
import shutil
from collections.abc import Mapping
from pathlib import Path

ASSETS_DIR_ENV = "CTRLPLANE_ASSETS_DIR"
DEFAULT_ASSETS_DIR = Path("assets") / "bin"

_PUNCTUATION_PATTERN = re.compile(r"[^A-Z0-9]+")
_LEADING_DIGITS_PATTERN = re.compile(r"^[0-9]+")


def asset_env_var(name: str) -> str:
    """Return the environment variable that overrides the path for ``name``.

    Examples:
        >>> asset_env_var("kube-apiserver")
        'TEST_ASSET_KUBE_APISERVER'
    """
    sanitized = _PUNCTUATION_PATTERN.sub("_", name.upper())
    sanitized = _LEADING_DIGITS_PATTERN.sub("", sanitized)
    return f"TEST_ASSET_{sanitized}"


def default_bin_path_finder(
    name: str,
    env: Mapping[str, str] | None = None,
) -> Path:
    """Resolve the executable path for a binary.

    The returned path is not checked for existence; a missing binary
    surfaces as a launch error.

    Args:
        name: Binary name, such as "etcd".
        env: Environment to read overrides from. Uses os.environ if None.

    Returns:
        Path to the binary.
    """
    environ = os.environ if env is None else env

    override = environ.get(asset_env_var(name))
    if override:
        return Path(override)

    found = shutil.which(name)
    if found is not None:
        return Path(found)

    assets_dir = environ.get(ASSETS_DIR_ENV)
    base = Path(assets_dir) if assets_dir else DEFAULT_ASSETS_DIR
    return base / name
