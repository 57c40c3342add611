"""Temporary data directories for supervised processes."""

import shutil
import tempfile
from pathlib import Path
from typing import final

from ctrlplane.exceptions import DataDirError

DEFAULT_PREFIX = "ctrlplane_"


@final
class TempDirManager:
    """Creates a fresh temporary directory per run and removes it on destroy."""

    __slots__ = ("_parent", "_path", "_prefix")

    def __init__(
        self,
        *,
        prefix: str = DEFAULT_PREFIX,
        parent: Path | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            prefix: Name prefix for created directories.
            parent: Directory to create under. Uses the system temp dir if None.
        """
        self._prefix = prefix
        self._parent = parent
        self._path: Path | None = None

    @property
    def path(self) -> Path | None:
        """Return the current directory, or None if none exists."""
        return self._path

    def create(self) -> Path:
        """Create a new temporary directory.

        Returns:
            Path to the created directory.

        Raises:
            OSError: If the directory cannot be created.
        """
        self._path = Path(tempfile.mkdtemp(prefix=self._prefix, dir=self._parent))
        return self._path

    def destroy(self) -> None:
        """Remove the directory and everything in it.

        Raises:
            DataDirError: If no directory has been created.
            OSError: If removal fails.
        """
        if self._path is None:
            msg = "TempDirManager has no directory to destroy"
            raise DataDirError(msg)

        shutil.rmtree(self._path)
        self._path = None
