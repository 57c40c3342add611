"""Control plane facade over the processes a test run needs.

Right now a control plane is etcd plus an API server. The API server
member is responsible for bringing up everything it depends on, so the
control plane only delegates.
"""

from types import TracebackType
from typing import Self, final

from ctrlplane.process import APIServer, ControlPlaneProcess


@final
class ControlPlane:
    """Starts, stops and locates a test control plane.

    Example:
        >>> with ControlPlane() as plane:
        ...     client = make_client(plane.api_server_url())

    Attributes:
        api_server: The API server member. Its start() and stop() own the
            ordering of every process it depends on.
    """

    __slots__ = ("api_server",)

    def __init__(self, api_server: ControlPlaneProcess | None = None) -> None:
        """Initialize the control plane.

        Args:
            api_server: The API server member. Uses APIServer() if None.
        """
        self.api_server: ControlPlaneProcess = api_server or APIServer()

    def start(self) -> None:
        """Start the control plane. Call stop() to tear it down."""
        self.api_server.start()

    def stop(self) -> None:
        """Stop the control plane and clean up its data."""
        self.api_server.stop()

    def api_server_url(self) -> str:
        """Return the URL clients use to reach the API server."""
        return self.api_server.url()

    def __enter__(self) -> Self:
        try:
            self.start()
        except BaseException as start_error:
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
