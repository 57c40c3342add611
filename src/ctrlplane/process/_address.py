"""Default address allocation for supervised processes."""

import socket
from typing import cast, final

from ctrlplane.exceptions import AddressNotInitializedError

DEFAULT_BIND_HOST = "localhost"


@final
class DefaultAddressManager:
    """Allocates a free loopback port by binding to port 0.

    The socket is closed straight away, so the port is only reserved in the
    sense that the kernel just handed it out. Calling initialize() again
    allocates a fresh pair.
    """

    __slots__ = ("_bind_host", "_host", "_port")

    def __init__(self, bind_host: str = DEFAULT_BIND_HOST) -> None:
        """Initialize the address manager.

        Args:
            bind_host: Host name to resolve and bind when allocating.
        """
        self._bind_host = bind_host
        self._host: str | None = None
        self._port: int | None = None

    def initialize(self) -> tuple[str, int]:
        """Allocate a host/port pair.

        Returns:
            The resolved host and the kernel-assigned port.

        Raises:
            OSError: If the host cannot be resolved or bound.
        """
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.bind((self._bind_host, 0))
            host, port = cast("tuple[str, int]", sock.getsockname())

        self._host = host
        self._port = port
        return host, port

    @property
    def host(self) -> str:
        """Return the allocated host."""
        if self._host is None:
            msg = "DefaultAddressManager is not initialized yet"
            raise AddressNotInitializedError(msg)
        return self._host

    @property
    def port(self) -> int:
        """Return the allocated port."""
        if self._port is None:
            msg = "DefaultAddressManager is not initialized yet"
            raise AddressNotInitializedError(msg)
        return self._port
