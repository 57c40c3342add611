"""Growable output buffer with marker detection.

This module provides OutputBuffer, the sink a session writes process
output into. Readers can snapshot the contents at any time or ask to be
notified once a marker substring has appeared.
"""

import threading
from concurrent.futures import Future
from typing import final


@final
class OutputBuffer:
    """Thread-safe, append-only byte buffer.

    A single writer (a session output pump) appends chunks while any number
    of readers inspect the accumulated contents. Detection searches the
    whole buffer and never consumes it, so checks are idempotent.
    """

    __slots__ = ("_data", "_lock", "_watchers")

    def __init__(self) -> None:
        self._data = bytearray()
        self._lock = threading.Lock()
        self._watchers: list[tuple[bytes, Future[None]]] = []

    def write(self, data: bytes) -> int:
        """Append a chunk and resolve any watcher whose marker now appears.

        Args:
            data: The bytes to append.

        Returns:
            The number of bytes written.
        """
        with self._lock:
            self._data.extend(data)
            matched = [
                (marker, future)
                for marker, future in self._watchers
                if future.cancelled() or marker in self._data
            ]
            for watcher in matched:
                self._watchers.remove(watcher)

        for _, future in matched:
            # Resolution happens outside the lock; a cancelled future is dropped.
            if future.set_running_or_notify_cancel():
                future.set_result(None)

        return len(data)

    def flush(self) -> None:
        """Accept flush calls from file-like writers."""

    def detect(self, marker: str) -> Future[None]:
        """Return a one-shot future that resolves once ``marker`` appears.

        Content already in the buffer counts, so a marker written before
        this call resolves the future immediately.

        Args:
            marker: Substring to look for, matched against UTF-8 encoded output.

        Returns:
            A future that resolves with None when the marker is seen.
        """
        encoded = marker.encode("utf-8")
        future: Future[None] = Future()

        with self._lock:
            if encoded not in self._data:
                self._watchers.append((encoded, future))
                return future

        _ = future.set_running_or_notify_cancel()
        future.set_result(None)
        return future

    def contents(self) -> bytes:
        """Return a snapshot of everything written so far."""
        with self._lock:
            return bytes(self._data)

    def text(self) -> str:
        """Return the contents decoded as UTF-8, replacing invalid bytes."""
        return self.contents().decode("utf-8", errors="replace")

    def __contains__(self, marker: object) -> bool:
        if isinstance(marker, str):
            marker = marker.encode("utf-8")
        if not isinstance(marker, bytes):
            return False
        with self._lock:
            return marker in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
