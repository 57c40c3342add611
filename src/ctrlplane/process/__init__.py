"""Process package for supervising ephemeral server processes.

This package launches external servers for the duration of a test run,
waits for each to report readiness on its output, and tears it down with
bounded waits and data-directory cleanup.

Key Components:
    - ProcessSupervisor: Lifecycle manager for one server process
    - Etcd: Supervisor for a single-member etcd
    - APIServer: Supervisor for a kube-apiserver and its etcd
    - ProcessConfig: Collaborators and timeouts, defaulted on first start
    - ProcessState / ProcessStatus: Lifecycle state tracking
    - OutputBuffer: Captured output with marker detection
    - ProcessSession / start_session: Default subprocess-backed sessions
    - DefaultAddressManager: Free loopback port allocation
    - TempDirManager: Temporary data directories
    - default_bin_path_finder: Binary path resolution

Example:
    >>> from ctrlplane.process import Etcd, ProcessConfig
    >>> etcd = Etcd(ProcessConfig(start_timeout=5.0))
    >>> etcd.start()
    >>> etcd.url()
    'http://127.0.0.1:41234'
    >>> etcd.stop()
"""

from ._address import DefaultAddressManager
from ._apiserver import APIServer
from ._binpath import asset_env_var, default_bin_path_finder
from ._buffer import OutputBuffer
from ._datadir import TempDirManager
from ._etcd import Etcd
from ._models import (
    DEFAULT_START_TIMEOUT,
    DEFAULT_STOP_TIMEOUT,
    ProcessConfig,
    ProcessState,
    ProcessStatus,
    ResolvedProcessConfig,
)
from ._protocol import (
    AddressManager,
    ControlPlaneProcess,
    DataDirManager,
    OutputSink,
    Session,
    SessionStarter,
)
from ._session import NOT_EXITED, ProcessSession, start_session
from ._supervisor import ProcessSupervisor

__all__ = [
    "DEFAULT_START_TIMEOUT",
    "DEFAULT_STOP_TIMEOUT",
    "NOT_EXITED",
    "APIServer",
    "AddressManager",
    "ControlPlaneProcess",
    "DataDirManager",
    "DefaultAddressManager",
    "Etcd",
    "OutputBuffer",
    "OutputSink",
    "ProcessConfig",
    "ProcessSession",
    "ProcessState",
    "ProcessStatus",
    "ProcessSupervisor",
    "ResolvedProcessConfig",
    "Session",
    "SessionStarter",
    "TempDirManager",
    "asset_env_var",
    "default_bin_path_finder",
    "start_session",
]
