"""Supervisor for a kube-apiserver backed by its own etcd."""

from pathlib import Path
from typing import TYPE_CHECKING, ClassVar, final

from ._etcd import Etcd
from ._models import ProcessConfig
from ._supervisor import ProcessSupervisor

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

DEFAULT_ADMISSION_PLUGINS: tuple[str, ...] = (
    "Initializers",
    "NamespaceLifecycle",
    "LimitRanger",
    "ServiceAccount",
    "SecurityContextDeny",
    "DefaultStorageClass",
    "DefaultTolerationSeconds",
    "GenericAdmissionWebhook",
    "ResourceQuota",
)


@final
class APIServer(ProcessSupervisor):
    """Runs a kube-apiserver together with the etcd it stores state in.

    start() brings up etcd before the API server and stop() tears them
    down in the reverse order. The API server's data directory is used as
    its certificate directory.

    Attributes:
        etcd: The etcd supervisor this API server depends on.
    """

    binary_name: ClassVar[str] = "kube-apiserver"

    __slots__ = ("etcd",)

    def __init__(
        self,
        config: ProcessConfig | None = None,
        *,
        etcd: Etcd | None = None,
        name: str | None = None,
        logger: "FilteringBoundLogger | None" = None,
    ) -> None:
        """Initialize the API server supervisor.

        Args:
            config: Collaborators and timeouts for the API server process.
            etcd: Etcd supervisor to depend on. A default one is created if None.
            name: Name used in logs and errors.
            logger: Logger for lifecycle events.
        """
        super().__init__(config, name=name, logger=logger)
        self.etcd: Etcd = etcd or Etcd()

    def build_args(self, host: str, port: int, data_dir: Path) -> list[str]:
        return [
            "--authorization-mode=Node,RBAC",
            "--runtime-config=admissionregistration.k8s.io/v1alpha1",
            "--v=3",
            "--vmodule=",
            f"--admission-control={','.join(DEFAULT_ADMISSION_PLUGINS)}",
            "--admission-control-config-file=",
            "--bind-address=0.0.0.0",
            "--storage-backend=etcd3",
            f"--etcd-servers={self.etcd.url()}",
            f"--cert-dir={data_dir}",
            f"--insecure-port={port}",
            f"--insecure-bind-address={host}",
        ]

    def readiness_marker(self, host: str, port: int) -> str:
        return f"Serving insecurely on {host}:{port}"

    def start(self) -> None:
        """Start etcd, then the API server.

        Raises:
            StartTimeoutError: If either process does not become ready in time.
        """
        self.etcd.start()
        super().start()

    def stop(self) -> None:
        """Stop the API server, then etcd.

        If the API server fails to stop, etcd is left running and the
        error is raised.

        Raises:
            StopTimeoutError: If either process does not exit in time.
        """
        super().stop()
        self.etcd.stop()
