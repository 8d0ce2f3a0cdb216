"""Batched log storage shared between worker threads and a display."""

from __future__ import annotations

import threading
from typing import Iterator

DEFAULT_MAX_LINES = 500
DEFAULT_FLUSH_THRESHOLD = 1000


class LogBuffer:
    """Collects log messages and publishes them to a bounded list of lines.

    Messages pushed from any thread wait in a pending batch. The batch is
    published when it grows past ``flush_threshold`` or when :meth:`flush`
    is called, which also drops the oldest lines beyond ``max_lines``.
    """

    def __init__(
        self,
        max_lines: int = DEFAULT_MAX_LINES,
        flush_threshold: int = DEFAULT_FLUSH_THRESHOLD,
    ) -> None:
        if max_lines < 0:
            raise ValueError("max_lines must not be negative")
        if flush_threshold < 0:
            raise ValueError("flush_threshold must not be negative")
        self.max_lines = max_lines
        self.flush_threshold = flush_threshold
        self._lines: list[str] = []
        self._pending: list[str] = []
        self._lock = threading.Lock()

    @property
    def pending(self) -> int:
        """Number of messages not yet published."""
        with self._lock:
            return len(self._pending)

    def push(self, message: str) -> None:
        """Queue a message, publishing the batch once it is too large."""
        with self._lock:
            self._pending.append(message)
            if len(self._pending) > self.flush_threshold:
                self._lines.extend(self._pending)
                self._pending.clear()

    def flush(self) -> None:
        """Publish pending messages and keep only the newest ``max_lines``."""
        with self._lock:
            if self._pending:
                self._lines.extend(self._pending)
                self._pending.clear()
            excess = len(self._lines) - self.max_lines
            if excess > 0:
                del self._lines[:excess]

    def clear(self) -> None:
        """Remove all published lines."""
        with self._lock:
            self._lines.clear()

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            snapshot = list(self._lines)
        return iter(snapshot)

    def __len__(self) -> int:
        with self._lock:
            return len(self._lines)