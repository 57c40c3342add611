"""Supervisor for an ephemeral etcd server."""

from pathlib import Path
from typing import ClassVar, final

from ._supervisor import ProcessSupervisor

# etcd never needs a fixed peer port for a single-member test cluster
PEER_URL = "http://localhost:0"


@final
class Etcd(ProcessSupervisor):
    """Runs a single-member etcd for one test run.

    Example:
        >>> with Etcd() as etcd:
        ...     client = make_client(etcd.url())
    """

    binary_name: ClassVar[str] = "etcd"

    __slots__ = ()

    def build_args(self, host: str, port: int, data_dir: Path) -> list[str]:
        client_url = f"{self.scheme}://{host}:{port}"
        return [
            "--debug",
            f"--listen-peer-urls={PEER_URL}",
            f"--advertise-client-urls={client_url}",
            f"--listen-client-urls={client_url}",
            f"--data-dir={data_dir}",
        ]

    def readiness_marker(self, host: str, port: int) -> str:  # noqa: ARG002
        return f"serving insecure client requests on {host}"
