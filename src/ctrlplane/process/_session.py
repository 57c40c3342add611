"""Process sessions backed by subprocess.Popen.

This module provides the default SessionStarter. Each session runs
its process in a new session/process group and owns three daemon
threads: one pump per output stream and one waiter that reaps the
process and fires the exit notification.
"""

import os
import signal
import subprocess
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import Future
from typing import IO, Self, final

from ._buffer import OutputBuffer
from ._protocol import OutputSink

# Read size for output pumps
CHUNK_SIZE = 4096

# Exit code reported while the process is still running
NOT_EXITED = -1


def _own_buffer(sink: OutputSink) -> OutputBuffer:
    return sink if isinstance(sink, OutputBuffer) else OutputBuffer()


def _sinks(buffer: OutputBuffer, sink: OutputSink) -> tuple[OutputSink, ...]:
    return (buffer,) if sink is buffer else (buffer, sink)


@final
class ProcessSession:
    """A launched process with captured output.

    Output is teed into the session's own buffers and the caller's sinks
    as it arrives. A caller sink that is already an OutputBuffer becomes
    the session's buffer, so each chunk is stored once. Use
    start_session() to create one.
    """

    __slots__ = (
        "_buffer",
        "_err_buffer",
        "_exited",
        "_process",
        "_pumps",
        "_waiter",
    )

    def __init__(
        self,
        process: subprocess.Popen[bytes],
        stdout: OutputSink,
        stderr: OutputSink,
    ) -> None:
        """Attach to a running process and start pumping its output.

        Args:
            process: The launched process, with both output streams piped.
            stdout: Caller sink for standard output.
            stderr: Caller sink for standard error.
        """
        self._process = process
        self._buffer = _own_buffer(stdout)
        self._err_buffer = _own_buffer(stderr)
        self._exited: Future[int] = Future()
        _ = self._exited.set_running_or_notify_cancel()

        self._pumps = [
            self._spawn(
                "stdout", self._pump, process.stdout, _sinks(self._buffer, stdout)
            ),
            self._spawn(
                "stderr",
                self._pump,
                process.stderr,
                _sinks(self._err_buffer, stderr),
            ),
        ]
        self._waiter = self._spawn("waiter", self._wait)

    def _spawn(
        self, name: str, target: Callable[..., None], *args: object
    ) -> threading.Thread:
        thread = threading.Thread(
            target=target,
            args=args,
            name=f"ctrlplane-{self._process.pid}-{name}",
            daemon=True,
        )
        thread.start()
        return thread

    @staticmethod
    def _pump(stream: IO[bytes] | None, sinks: tuple[OutputSink, ...]) -> None:
        if stream is None:
            return
        with stream:
            while chunk := stream.read1(CHUNK_SIZE):  # pyright: ignore[reportAttributeAccessIssue]
                for sink in sinks:
                    _ = sink.write(chunk)

    def _wait(self) -> None:
        for pump in self._pumps:
            pump.join()
        self._exited.set_result(self._process.wait())

    @property
    def pid(self) -> int:
        """Return the OS process ID."""
        return self._process.pid

    @property
    def buffer(self) -> OutputBuffer:
        """Return the captured standard output."""
        return self._buffer

    @property
    def err_buffer(self) -> OutputBuffer:
        """Return the captured standard error."""
        return self._err_buffer

    @property
    def exit_code(self) -> int:
        """Return the exit code, or -1 until the exit notification has fired.

        A process killed by a signal reports the negated signal number.
        """
        if not self._exited.done():
            return NOT_EXITED
        return self._exited.result()

    @property
    def exited(self) -> Future[int]:
        """Return the one-shot exit notification."""
        return self._exited

    def terminate(self) -> Self:
        """Send SIGTERM to the process group and return this session."""
        self._signal(signal.SIGTERM)
        return self

    def kill(self) -> Self:
        """Send SIGKILL to the process group and return this session."""
        self._signal(signal.SIGKILL)
        return self

    def _signal(self, signum: signal.Signals) -> None:
        if self._exited.done():
            return
        try:
            os.killpg(os.getpgid(self._process.pid), signum)
        except ProcessLookupError:
            # Already gone; the waiter thread reports the exit.
            pass
        except OSError:
            self._process.send_signal(signum)


def start_session(
    argv: Sequence[str],
    stdout: OutputSink,
    stderr: OutputSink,
) -> ProcessSession:
    """Launch a process and return its session without waiting for it.

    Args:
        argv: Command line, first element is the executable.
        stdout: Sink receiving standard output as it is produced.
        stderr: Sink receiving standard error as it is produced.

    Returns:
        The running session.

    Raises:
        OSError: If the process cannot be launched.
    """
    process = subprocess.Popen(  # noqa: S603
        list(argv),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        start_new_session=True,
    )
    return ProcessSession(process, stdout, stderr)
