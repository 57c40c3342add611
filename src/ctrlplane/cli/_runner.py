"""Foreground runner for CLI commands.

This module starts a control plane (or a single process), reports where
it can be reached, blocks until the user asks to shut down, and then
stops it, translating lifecycle failures into exit codes.
"""

import signal
import threading
from collections.abc import Callable, Sequence
from typing import Protocol

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ctrlplane.exceptions import CtrlPlaneError, StartTimeoutError, StopTimeoutError
from ctrlplane.process import ProcessState, ProcessSupervisor

from ._shared import ExitCode

# Lines of stderr shown for a process that failed to start
STDERR_TAIL_LINES = 20

SHUTDOWN_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM)


class Servable(Protocol):
    """Anything the runner can start and stop."""

    def start(self) -> None: ...

    def stop(self) -> None: ...


def wait_for_shutdown(
    signals: Sequence[signal.Signals] = SHUTDOWN_SIGNALS,
) -> signal.Signals:
    """Block until one of ``signals`` is received.

    Previous handlers are restored before returning. Must be called from
    the main thread.

    Args:
        signals: Signals that request shutdown.

    Returns:
        The signal that was received.
    """
    received = threading.Event()
    caught: list[signal.Signals] = []

    def handle(signum: int, _frame: object) -> None:
        caught.append(signal.Signals(signum))
        received.set()

    previous = {signum: signal.signal(signum, handle) for signum in signals}
    try:
        _ = received.wait()
    finally:
        for signum, handler in previous.items():
            _ = signal.signal(signum, handler)

    return caught[0]


def stderr_tail(supervisor: ProcessSupervisor, lines: int = STDERR_TAIL_LINES) -> str:
    """Return the last lines a supervised process wrote to stderr."""
    return "\n".join(supervisor.stderr.text().splitlines()[-lines:])


def _report_start_failure(
    error: Exception,
    supervisors: Sequence[ProcessSupervisor],
    error_console: Console,
) -> None:
    error_console.print(f"[red]Error:[/red] {error}")
    for supervisor in supervisors:
        if supervisor.state != ProcessState.START_FAILED:
            continue
        tail = stderr_tail(supervisor)
        if tail:
            error_console.print(
                Panel(Text(tail), title=f"{supervisor.name} stderr", expand=False)
            )


def _stop_quietly(target: Servable, error_console: Console) -> None:
    try:
        target.stop()
    except (CtrlPlaneError, OSError) as e:
        error_console.print(f"[yellow]Warning:[/yellow] cleanup failed: {e}")


def serve(  # noqa: PLR0913
    target: Servable,
    url: Callable[[], str],
    *,
    supervisors: Sequence[ProcessSupervisor] = (),
    console: Console,
    error_console: Console,
    wait: Callable[[], object] | None = None,
) -> ExitCode:
    """Run ``target`` in the foreground until shutdown is requested.

    A target that fails to start is stopped again before returning, so
    nothing launched by the CLI outlives it.

    Args:
        target: The control plane or process to run.
        url: Returns the URL to print once the target is ready.
        supervisors: Processes whose stderr is shown if start fails.
        console: Console for normal output.
        error_console: Console for errors.
        wait: Blocks until shutdown. Uses wait_for_shutdown() if None.

    Returns:
        The exit code for the command.
    """
    try:
        target.start()
    except StartTimeoutError as e:
        _report_start_failure(e, supervisors, error_console)
        _stop_quietly(target, error_console)
        return ExitCode.START_FAILED
    except (CtrlPlaneError, OSError) as e:
        error_console.print(f"[red]Error:[/red] failed to start: {e}")
        _stop_quietly(target, error_console)
        return ExitCode.START_FAILED

    console.print(f"[green]Ready[/green] {url()}")
    console.print("Press Ctrl+C to stop.")

    _ = (wait or wait_for_shutdown)()

    try:
        target.stop()
    except StopTimeoutError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        return ExitCode.STOP_FAILED
    except (CtrlPlaneError, OSError) as e:
        error_console.print(f"[red]Error:[/red] failed to clean up: {e}")
        return ExitCode.STOP_FAILED

    console.print("[yellow]Stopped[/yellow]")
    return ExitCode.SUCCESS
