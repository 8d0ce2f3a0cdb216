"""Byte counting and throughput reporting for outgoing transfers."""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Callable, Iterator

ProgressCallback = Callable[[float, str], None]

_UNITS = ("B", "KB", "MB", "GB", "TB")
_REPORT_INTERVAL = 0.5


def format_size(size: float) -> str:
    """Render a byte count with two decimals and a binary unit suffix."""
    unit = 0
    while size >= 1024 and unit < len(_UNITS) - 1:
        size /= 1024
        unit += 1
    return f"{size:.2f}{_UNITS[unit]}"


class ProgressWriter:
    """Wraps a binary writer and reports percentage and speed of monitored bytes.

    Only bytes written while :meth:`monitor` is active are counted; at most
    every half second a write triggers a report through the callback.
    """

    def __init__(self, inner, total_size: int, progress: ProgressCallback) -> None:
        self.inner = inner
        self.total_size = total_size
        self.progress = progress
        self.bytes_sent = 0
        self._monitoring = False
        now = time.monotonic()
        self._start = now
        self._last_report = now

    def write(self, data) -> int:
        written = self.inner.write(data)
        count = len(data) if written is None else written
        if self._monitoring:
            self.bytes_sent += count
        if time.monotonic() - self._last_report >= _REPORT_INTERVAL:
            self.send_progress()
            self._last_report = time.monotonic()
        return count

    def flush(self) -> None:
        flush = getattr(self.inner, "flush", None)
        if flush is not None:
            flush()

    @contextmanager
    def monitor(self) -> Iterator["ProgressWriter"]:
        """Count the bytes written inside the block towards progress."""
        self._monitoring = True
        try:
            yield self
        finally:
            self._monitoring = False

    def total_time(self) -> float:
        """Seconds elapsed since the writer was created."""
        return time.monotonic() - self._start

    def send_progress(self) -> None:
        """Report the current percentage and average speed."""
        if self.total_size > 0:
            percentage = self.bytes_sent / self.total_size * 100.0
        else:
            percentage = 0.0
        elapsed = self.total_time()
        speed = self.bytes_sent / elapsed if elapsed > 0 else 0.0
        self.progress(percentage, f"{format_size(speed)}/s")