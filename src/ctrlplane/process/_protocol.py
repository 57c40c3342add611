"""Protocol definitions for the process supervisor.

This module defines the narrow interfaces the supervisor consumes, so
each collaborator can be swapped for a fake in tests:
- OutputSink: Writable destination for live process output
- Session: Handle to a launched process
- SessionStarter: Callable that launches a process into a Session
- AddressManager: Allocator for the host/port a process listens on
- DataDirManager: Owner of a process's scratch directory
- ControlPlaneProcess: Anything a ControlPlane can start, stop and locate
"""

from collections.abc import Callable, Sequence
from concurrent.futures import Future
from pathlib import Path
from typing import Protocol, Self, TypeAlias, runtime_checkable

from ._buffer import OutputBuffer


@runtime_checkable
class OutputSink(Protocol):
    """Protocol for anything live process output can be written into."""

    def write(self, data: bytes, /) -> int:
        """Write a chunk of output.

        Args:
            data: Raw bytes as read from the process stream.

        Returns:
            The number of bytes accepted.
        """
        ...


@runtime_checkable
class Session(Protocol):
    """Protocol for a launched process.

    A session captures the process output, reports its exit code and can
    be asked to terminate. The ``exited`` future resolves exactly once,
    after the process has fully exited.
    """

    @property
    def pid(self) -> int:
        """Return the OS process ID."""
        ...

    @property
    def buffer(self) -> OutputBuffer:
        """Return the captured standard output."""
        ...

    @property
    def exit_code(self) -> int:
        """Return the exit code, or -1 if the process has not exited yet."""
        ...

    @property
    def exited(self) -> Future[int]:
        """Return the one-shot exit notification, resolving to the exit code."""
        ...

    def terminate(self) -> Self:
        """Ask the process to exit and return the session for ``exited``."""
        ...


SessionStarter: TypeAlias = Callable[[Sequence[str], OutputSink, OutputSink], Session]
"""Launch ``argv`` writing stdout and stderr into the two sinks."""


@runtime_checkable
class AddressManager(Protocol):
    """Protocol for allocating the address a process listens on."""

    def initialize(self) -> tuple[str, int]:
        """Reserve an address.

        Returns:
            The allocated (host, port) pair.
        """
        ...

    @property
    def host(self) -> str:
        """Return the allocated host.

        Raises:
            AddressNotInitializedError: If nothing has been allocated yet.
        """
        ...

    @property
    def port(self) -> int:
        """Return the allocated port.

        Raises:
            AddressNotInitializedError: If nothing has been allocated yet.
        """
        ...


@runtime_checkable
class DataDirManager(Protocol):
    """Protocol for the scratch directory owned by one process run.

    ``destroy`` is called at most once per ``create`` and implementations
    need not be idempotent.
    """

    def create(self) -> Path:
        """Create the directory and return its path."""
        ...

    def destroy(self) -> None:
        """Remove the directory created by ``create``."""
        ...


@runtime_checkable
class ControlPlaneProcess(Protocol):
    """Protocol for a process a ControlPlane can manage."""

    def start(self) -> None:
        """Start the process and everything it depends on."""
        ...

    def stop(self) -> None:
        """Stop the process and release its resources."""
        ...

    def url(self) -> str:
        """Return the URL clients use to reach the process."""
        ...
