"""Data models for the process supervisor.

This module defines the core data types for process supervision:
- ProcessState: Lifecycle states for a supervised process
- ProcessStatus: Mutable runtime status
- ResolvedProcessConfig: Collaborators and timeouts with every default applied
- ProcessConfig: Collaborators and timeouts, any of which may be unset
"""

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from ._address import DefaultAddressManager
from ._binpath import default_bin_path_finder
from ._datadir import TempDirManager
from ._protocol import AddressManager, DataDirManager, SessionStarter
from ._session import start_session

# Seconds to wait for readiness or exit when no timeout is configured
DEFAULT_START_TIMEOUT = 20.0
DEFAULT_STOP_TIMEOUT = 20.0


class ProcessState(StrEnum):
    """Supervised process lifecycle states.

    - UNCONFIGURED: start() has never been called
    - STARTING: Process launched, waiting for its readiness marker
    - RUNNING: Readiness marker seen
    - START_FAILED: Launch failed or the readiness marker never appeared
    - STOPPING: Termination requested, waiting for exit
    - STOPPED: Process exited and its data directory was released
    - STOP_TIMED_OUT: Process did not exit in time; data directory kept
    """

    UNCONFIGURED = "unconfigured"
    STARTING = "starting"
    RUNNING = "running"
    START_FAILED = "start_failed"
    STOPPING = "stopping"
    STOPPED = "stopped"
    STOP_TIMED_OUT = "stop_timed_out"


@dataclass(slots=True)
class ProcessStatus:
    """Mutable runtime status of a supervised process.

    Attributes:
        state: Current lifecycle state.
        pid: Process ID of the current session, if any.
        started_at: ISO 8601 timestamp of the last launch.
        stopped_at: ISO 8601 timestamp of the last observed exit.
        last_exit_code: Exit code observed by the last successful stop.
    """

    state: ProcessState = ProcessState.UNCONFIGURED
    pid: int | None = None
    started_at: str | None = None
    stopped_at: str | None = None
    last_exit_code: int | None = None


@dataclass(frozen=True, slots=True)
class ResolvedProcessConfig:
    """Configuration with every default applied.

    Produced by ProcessConfig.with_defaults(); see ProcessConfig for the
    meaning of each field.
    """

    path: Path
    address_manager: AddressManager
    session_starter: SessionStarter
    data_dir_manager: DataDirManager
    start_timeout: float
    stop_timeout: float


@dataclass(frozen=True, slots=True)
class ProcessConfig:
    """Configuration for a supervised process.

    Every field is optional; with_defaults() fills in the gaps. A
    supervisor resolves its configuration once, on first start. Zero
    timeouts count as unset.

    Attributes:
        path: Path to the executable. Resolved by binary name if None.
        address_manager: Allocator for the listen address.
        session_starter: Callable that launches the process.
        data_dir_manager: Owner of the process data directory.
        start_timeout: Seconds to wait for the readiness marker.
        stop_timeout: Seconds to wait for the process to exit.
    """

    path: Path | None = None
    address_manager: AddressManager | None = None
    session_starter: SessionStarter | None = None
    data_dir_manager: DataDirManager | None = None
    start_timeout: float | None = None
    stop_timeout: float | None = None

    def with_defaults(self, binary_name: str) -> ResolvedProcessConfig:
        """Return a fully populated copy of this configuration.

        Args:
            binary_name: Name used to resolve the executable when no path is set.

        Returns:
            A configuration with no unset fields.
        """
        return ResolvedProcessConfig(
            path=self.path or default_bin_path_finder(binary_name),
            address_manager=self.address_manager or DefaultAddressManager(),
            session_starter=self.session_starter or start_session,
            data_dir_manager=self.data_dir_manager or TempDirManager(),
            start_timeout=self.start_timeout or DEFAULT_START_TIMEOUT,
            stop_timeout=self.stop_timeout or DEFAULT_STOP_TIMEOUT,
        )
