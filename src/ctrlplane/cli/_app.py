"""The command-line interface for ctrlplane."""
# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console
from structlog.typing import FilteringBoundLogger

from ctrlplane.config import LogLevel, Settings, load_settings
from ctrlplane.control_plane import ControlPlane
from ctrlplane.exceptions import ConfigurationError
from ctrlplane.process import APIServer, Etcd
from ctrlplane.utils import create_logger

from . import _runner
from ._shared import ExitCode, exit_with_error

HELP = "Run a local Kubernetes control plane for tests."

StartTimeoutOption = Annotated[
    float | None,
    Parameter(help="Seconds to wait for each process to become ready."),
]
StopTimeoutOption = Annotated[
    float | None,
    Parameter(help="Seconds to wait for each process to exit."),
]
LogLevelOption = Annotated[
    LogLevel | None,
    Parameter(help="Log level threshold."),
]
EtcdPathOption = Annotated[
    Path | None,
    Parameter(help="Path to the etcd binary."),
]


def _load_settings(
    overrides: dict[str, object],
    error_console: Console,
) -> Settings:
    try:
        return load_settings(overrides=overrides)
    except ConfigurationError as e:
        exit_with_error(str(e), ExitCode.CONFIG_ERROR, console=error_console)


def _create_logger(settings: Settings) -> FilteringBoundLogger:
    return create_logger(
        level=settings.logging.level.value,
        log_format=settings.logging.format.value,  # type: ignore[arg-type]
        log_file=settings.logging.file,
        max_bytes=settings.logging.max_bytes,
        backup_count=settings.logging.backup_count,
    )


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    if console is None:
        console = Console()
    if error_console is None:
        error_console = Console(stderr=True)
    app = App(
        name="ctrlplane",
        help=HELP,
        help_on_error=True,
        console=console,
        error_console=error_console,
        exit_on_error=exit_on_error,
    )

    @app.command(name="run")
    def _run(  # pyright: ignore[reportUnusedFunction]
        *,
        etcd_path: EtcdPathOption = None,
        apiserver_path: Annotated[
            Path | None,
            Parameter(help="Path to the kube-apiserver binary."),
        ] = None,
        start_timeout: StartTimeoutOption = None,
        stop_timeout: StopTimeoutOption = None,
        log_level: LogLevelOption = None,
    ) -> None:
        """Start etcd and kube-apiserver, then run until interrupted.

        Args:
            etcd_path: Path to the etcd binary.
            apiserver_path: Path to the kube-apiserver binary.
            start_timeout: Seconds to wait for each process to become ready.
            stop_timeout: Seconds to wait for each process to exit.
            log_level: Log level threshold.
        """
        settings = _load_settings(
            {
                "etcd_path": etcd_path,
                "apiserver_path": apiserver_path,
                "start_timeout": start_timeout,
                "stop_timeout": stop_timeout,
                "logging.level": log_level,
            },
            error_console,
        )
        logger = _create_logger(settings)

        etcd = Etcd(
            settings.process_config(settings.etcd_path),
            logger=logger.bind(process="etcd"),
        )
        api_server = APIServer(
            settings.process_config(settings.apiserver_path),
            etcd=etcd,
            logger=logger.bind(process="kube-apiserver"),
        )
        control_plane = ControlPlane(api_server)

        code = _runner.serve(
            control_plane,
            control_plane.api_server_url,
            supervisors=(etcd, api_server),
            console=console,
            error_console=error_console,
        )
        if code != ExitCode.SUCCESS:
            raise SystemExit(code)

    @app.command(name="etcd")
    def _etcd(  # pyright: ignore[reportUnusedFunction]
        *,
        etcd_path: EtcdPathOption = None,
        start_timeout: StartTimeoutOption = None,
        stop_timeout: StopTimeoutOption = None,
        log_level: LogLevelOption = None,
    ) -> None:
        """Start a standalone etcd, then run until interrupted.

        Args:
            etcd_path: Path to the etcd binary.
            start_timeout: Seconds to wait for etcd to become ready.
            stop_timeout: Seconds to wait for etcd to exit.
            log_level: Log level threshold.
        """
        settings = _load_settings(
            {
                "etcd_path": etcd_path,
                "start_timeout": start_timeout,
                "stop_timeout": stop_timeout,
                "logging.level": log_level,
            },
            error_console,
        )
        logger = _create_logger(settings)

        etcd = Etcd(
            settings.process_config(settings.etcd_path),
            logger=logger.bind(process="etcd"),
        )

        code = _runner.serve(
            etcd,
            etcd.url,
            supervisors=(etcd,),
            console=console,
            error_console=error_console,
        )
        if code != ExitCode.SUCCESS:
            raise SystemExit(code)

    return app


app = create_app()


def main() -> None:
    """Default entrypoint for the `ctrlplane` CLI."""
    app = create_app()
    app()


if __name__ == "__main__":
    main()
