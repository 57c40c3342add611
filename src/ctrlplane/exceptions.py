"""ctrlplane exceptions."""


class CtrlPlaneError(Exception):
    """Base exception for ctrlplane errors."""


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationError(CtrlPlaneError):
    """Raised when a required collaborator or setting is missing or invalid.

    Attributes:
        process_name: Name of the process the configuration belongs to, if any.
    """

    def __init__(self, message: str, *, process_name: str | None = None) -> None:
        """Initialize with error message and process context.

        Args:
            message: Human-readable error message.
            process_name: Name of the affected process.
        """
        super().__init__(message)
        self.process_name: str | None = process_name


class ProcessNotStartedError(ConfigurationError):
    """Raised when a process is inspected before it was ever launched."""


# =============================================================================
# Resource Exceptions
# =============================================================================


class AddressNotInitializedError(CtrlPlaneError):
    """Raised when an address is queried before it has been allocated."""


class DataDirError(CtrlPlaneError):
    """Raised when a data directory cannot be managed."""


# =============================================================================
# Lifecycle Exceptions
# =============================================================================


class ProcessAlreadyStartedError(CtrlPlaneError):
    """Raised when start() is called while a previous session is still alive.

    Attributes:
        process_name: Name of the process.
        pid: Process ID of the live session.
    """

    def __init__(
        self,
        message: str,
        *,
        process_name: str | None = None,
        pid: int | None = None,
    ) -> None:
        """Initialize with error message and session context.

        Args:
            message: Human-readable error message.
            process_name: Name of the process.
            pid: Process ID of the live session.
        """
        super().__init__(message)
        self.process_name: str | None = process_name
        self.pid: int | None = pid


class ProcessTimeoutError(CtrlPlaneError, TimeoutError):
    """Base exception for lifecycle waits that ran out of time.

    Attributes:
        process_name: Name of the process that timed out.
        timeout: The timeout that elapsed, in seconds.
    """

    def __init__(
        self,
        message: str,
        *,
        process_name: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize with error message and timeout context.

        Args:
            message: Human-readable error message.
            process_name: Name of the process that timed out.
            timeout: The timeout that elapsed, in seconds.
        """
        super().__init__(message)
        self.process_name: str | None = process_name
        self.timeout: float | None = timeout


class StartTimeoutError(ProcessTimeoutError):
    """Raised when a process does not report readiness within its start timeout.

    The process is left running and its session stays inspectable.
    """


class StopTimeoutError(ProcessTimeoutError):
    """Raised when a process does not exit within its stop timeout.

    The process data directory is left in place.
    """
