"""Base supervisor for a single external server process.

This module provides ProcessSupervisor, which owns one process's
lifecycle: it allocates an address and a data directory, launches the
process, races its readiness marker against the start timeout, and on
stop races its exit against the stop timeout before releasing the data
directory.
"""

import time
from abc import ABC, abstractmethod
from concurrent.futures import wait
from pathlib import Path
from types import TracebackType
from typing import TYPE_CHECKING, ClassVar, Self

import pendulum

from ctrlplane.exceptions import (
    ConfigurationError,
    ProcessAlreadyStartedError,
    ProcessNotStartedError,
    StartTimeoutError,
    StopTimeoutError,
)
from ctrlplane.utils import create_process_logger

from ._buffer import OutputBuffer
from ._models import ProcessConfig, ProcessState, ProcessStatus, ResolvedProcessConfig
from ._protocol import Session

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger


def _get_timestamp() -> str:
    """Get current timestamp in ISO 8601 format."""
    return pendulum.now("UTC").to_iso8601_string()


class ProcessSupervisor(ABC):
    """Manages the lifecycle of one server process.

    Subclasses name the binary and describe how to invoke it and how to
    recognise that it is ready. Collaborators come from a ProcessConfig;
    anything left unset is defaulted on the first start().

    Failures are raised to the caller and never retried. A start that
    times out leaves the process running and inspectable; only stop()
    terminates it.
    """

    binary_name: ClassVar[str]
    scheme: ClassVar[str] = "http"

    __slots__ = (
        "_config",
        "_logger",
        "_resolved",
        "_session",
        "_stderr",
        "_stdout",
        "name",
        "status",
    )

    def __init__(
        self,
        config: ProcessConfig | None = None,
        *,
        name: str | None = None,
        logger: "FilteringBoundLogger | None" = None,
    ) -> None:
        """Initialize the supervisor.

        Args:
            config: Collaborators and timeouts. Every unset field is defaulted.
            name: Name used in logs and errors. Defaults to the binary name.
            logger: Logger for lifecycle events. Created from the environment
                if None.
        """
        self.name: str = name or self.binary_name
        self.status = ProcessStatus()
        self._config = config or ProcessConfig()
        self._resolved: ResolvedProcessConfig | None = None
        self._session: Session | None = None
        self._stdout = OutputBuffer()
        self._stderr = OutputBuffer()
        self._logger = logger or create_process_logger(self.name)

    @abstractmethod
    def build_args(self, host: str, port: int, data_dir: Path) -> list[str]:
        """Return the command line flags for one run.

        Args:
            host: Allocated host.
            port: Allocated port.
            data_dir: Data directory created for this run.
        """

    @abstractmethod
    def readiness_marker(self, host: str, port: int) -> str:
        """Return the stderr substring that signals the process is ready."""

    @property
    def state(self) -> ProcessState:
        """Return the current lifecycle state."""
        return self.status.state

    @property
    def config(self) -> ProcessConfig | ResolvedProcessConfig:
        """Return the resolved configuration, or the configured one before start."""
        return self._resolved or self._config

    @property
    def stdout(self) -> OutputBuffer:
        """Return the standard output captured for the current run."""
        return self._stdout

    @property
    def stderr(self) -> OutputBuffer:
        """Return the standard error captured for the current run."""
        return self._stderr

    @property
    def session(self) -> Session | None:
        """Return the current session, if one was launched."""
        return self._session

    def url(self) -> str:
        """Return the client URL as ``scheme://host:port``.

        Raises:
            ConfigurationError: If no address manager is configured yet.
            AddressNotInitializedError: If the address manager has not
                allocated an address.
        """
        address_manager = self.config.address_manager
        if address_manager is None:
            msg = f"{self.name}'s address manager is not initialized"
            raise ConfigurationError(msg, process_name=self.name)

        port = address_manager.port
        host = address_manager.host
        return f"{self.scheme}://{host}:{port}"

    def _ensure_configured(self) -> ResolvedProcessConfig:
        if self._resolved is None:
            self._resolved = self._config.with_defaults(self.binary_name)
        return self._resolved

    def _raise_if_alive(self) -> None:
        session = self._session
        if session is not None and not session.exited.done():
            msg = f"{self.name} is already running (pid={session.pid})"
            raise ProcessAlreadyStartedError(
                msg, process_name=self.name, pid=session.pid
            )

    def _warn_if_unreleased(self) -> None:
        previous = self.status.state
        if previous in (ProcessState.START_FAILED, ProcessState.STOP_TIMED_OUT):
            # The previous run was never stopped cleanly; its data dir is orphaned.
            self._logger.warning(
                "previous_run_not_released",
                previous_state=previous.value,
                pid=self.status.pid,
            )

    def start(self) -> None:
        """Start the process and wait until it reports readiness.

        Raises:
            ProcessAlreadyStartedError: If a previous session is still alive.
            StartTimeoutError: If the readiness marker does not appear in time.
                The process is left running; call stop() to terminate it.
            OSError: If the address, data directory or process cannot be
                set up. Collaborator errors propagate unchanged.
        """
        self._raise_if_alive()
        config = self._ensure_configured()
        self._warn_if_unreleased()
        self._stdout = OutputBuffer()
        self._stderr = OutputBuffer()

        host, port = config.address_manager.initialize()
        data_dir = config.data_dir_manager.create()
        argv = [str(config.path), *self.build_args(host, port, data_dir)]

        # Armed before launch so a marker printed immediately is not missed.
        ready = self._stderr.detect(self.readiness_marker(host, port))
        deadline = time.monotonic() + config.start_timeout

        self.status.state = ProcessState.STARTING
        self._session = None
        try:
            session = config.session_starter(argv, self._stdout, self._stderr)
        except BaseException:
            _ = ready.cancel()
            self.status.state = ProcessState.START_FAILED
            raise

        self._session = session
        self.status.pid = session.pid
        self.status.started_at = _get_timestamp()
        self.status.stopped_at = None
        self._logger.debug("process_starting", pid=session.pid, argv=argv)

        done, _ = wait([ready], timeout=max(0.0, deadline - time.monotonic()))
        if not done:
            _ = ready.cancel()
            self.status.state = ProcessState.START_FAILED
            msg = f"timeout waiting for {self.name} to start serving"
            raise StartTimeoutError(
                msg, process_name=self.name, timeout=config.start_timeout
            )

        self.status.state = ProcessState.RUNNING
        self._logger.debug(
            "process_ready", pid=session.pid, url=f"{self.scheme}://{host}:{port}"
        )

    def stop(self) -> None:
        """Terminate the process, wait for it to exit and remove its data.

        Does nothing if the process was never launched or is already stopped.

        Raises:
            StopTimeoutError: If the process does not exit in time. The data
                directory is left in place.
            OSError: If the data directory cannot be removed.
        """
        session = self._session
        if session is None or self.status.state == ProcessState.STOPPED:
            return

        config = self._ensure_configured()
        self.status.state = ProcessState.STOPPING
        self._logger.debug("process_stopping", pid=session.pid)

        exited = session.terminate().exited
        done, _ = wait([exited], timeout=config.stop_timeout)
        if not done:
            self.status.state = ProcessState.STOP_TIMED_OUT
            msg = f"timeout waiting for {self.name} to stop"
            raise StopTimeoutError(
                msg, process_name=self.name, timeout=config.stop_timeout
            )

        self.status.state = ProcessState.STOPPED
        self.status.last_exit_code = exited.result()
        self.status.stopped_at = _get_timestamp()
        self.status.pid = None
        self._logger.debug(
            "process_stopped", pid=session.pid, exit_code=self.status.last_exit_code
        )

        config.data_dir_manager.destroy()

    @property
    def exit_code(self) -> int:
        """Return the session's exit code, -1 while it is still running.

        Raises:
            ProcessNotStartedError: If no session was ever launched.
        """
        return self._require_session().exit_code

    @property
    def buffer(self) -> OutputBuffer:
        """Return the session's standard output buffer.

        Raises:
            ProcessNotStartedError: If no session was ever launched.
        """
        return self._require_session().buffer

    def _require_session(self) -> Session:
        if self._session is None:
            msg = f"{self.name} has not been started"
            raise ProcessNotStartedError(msg, process_name=self.name)
        return self._session

    def __enter__(self) -> Self:
        try:
            self.start()
        except BaseException as start_error:
            # A failed start inside a with block still terminates what it launched.
            try:
                self.stop()
            except Exception as stop_error:
                start_error.add_note(
                    f"cleanup after failed start also failed: {stop_error}"
                )
                raise start_error
            raise
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.stop()
