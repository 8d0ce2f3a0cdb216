"""Wire format for sending files and directories over a byte stream.

Each entry is a type byte (0 for a file, 1 for a directory), a big-endian
16-bit path length and the UTF-8 path relative to the sending root. A file
entry is followed by a big-endian 64-bit size and that many bytes of content.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from .progress import ProgressCallback, ProgressWriter

TYPE_FILE = 0
TYPE_DIR = 1

_CHUNK = 64 * 1024
_MAX_PATH_LEN = 0xFFFF

LogCallback = Callable[[str], None]


class ProtocolError(Exception):
    """Raised when an entry cannot be encoded or the stream is malformed."""


def _encode_path(relative: Path) -> bytes:
    name = relative.as_posix() if relative.parts else ""
    try:
        encoded = name.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise ProtocolError(f"{relative!s} is not valid unicode") from exc
    if len(encoded) > _MAX_PATH_LEN:
        raise ProtocolError(f"path too long: {len(encoded)} bytes")
    return len(encoded).to_bytes(2, "big") + encoded


class SendProtocol:
    """Writes entries to a binary stream, reporting progress of file content."""

    def __init__(self, stream, total_size: int, progress: ProgressCallback) -> None:
        self.writer = ProgressWriter(stream, total_size, progress)
        self._buffer = bytearray()

    def send_entry(self, path, root_dir, log: LogCallback) -> None:
        """Send one file or directory, named relative to ``root_dir``."""
        path = Path(path)
        root = Path(root_dir)
        try:
            relative = path.relative_to(root)
        except ValueError as exc:
            raise ProtocolError(f"{path} is not inside {root}") from exc
        is_file = path.is_file()
        self._buffer.append(TYPE_FILE if is_file else TYPE_DIR)
        self._buffer += _encode_path(relative)
        if is_file:
            log(f"Send : {relative.as_posix()}")
            self._send_file(path)

    def flush(self) -> None:
        if self._buffer:
            self.writer.write(bytes(self._buffer))
            self._buffer.clear()
        self.writer.flush()

    def _send_file(self, path: Path) -> None:
        size = path.stat().st_size
        self._buffer += size.to_bytes(8, "big")
        with path.open("rb") as source:
            self.flush()
            with self.writer.monitor():
                for chunk in iter(lambda: source.read(_CHUNK), b""):
                    self.writer.write(chunk)
                self.writer.flush()


class ReceiveProtocol:
    """Reads entries from a binary stream and recreates them on disk."""

    def __init__(self, stream) -> None:
        self.stream = stream

    def receive_all(self, save_path, log: LogCallback) -> None:
        """Receive entries until the stream ends, storing them under ``save_path``."""
        save_path = Path(save_path)
        while (is_file := self._read_type()) is not None:
            relative = self._read_path()
            target = save_path / relative
            if is_file:
                self._receive_file(target)
                log(f"Receive : {relative.as_posix()}")
            else:
                target.mkdir(parents=True, exist_ok=True)

    def _read_type(self) -> bool | None:
        data = self.stream.read(1)
        if not data:
            return None
        return data[0] == TYPE_FILE

    def _read_exact(self, size: int) -> bytes:
        data = bytearray()
        while len(data) < size:
            part = self.stream.read(size - len(data))
            if not part:
                raise ProtocolError(
                    f"stream ended: expected {size} bytes, got {len(data)}"
                )
            data += part
        return bytes(data)

    def _read_path(self) -> Path:
        length = int.from_bytes(self._read_exact(2), "big")
        name = self._read_exact(length).decode("utf-8", errors="replace")
        return Path(name)

    def _receive_file(self, target: Path) -> None:
        remaining = int.from_bytes(self._read_exact(8), "big")
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("wb") as out:
            while remaining:
                chunk = self.stream.read(min(_CHUNK, remaining))
                if not chunk:
                    break
                out.write(chunk)
                remaining -= len(chunk)