"""Send a file or a directory tree to a receiver over TCP."""

from __future__ import annotations

import os
import socket
from pathlib import Path
from typing import Iterator

from .progress import ProgressCallback
from .protocol import LogCallback, SendProtocol

_CONNECT_TIMEOUT = 3.0


def _walk(path: Path, *, is_root: bool = True) -> Iterator[Path]:
    """Yield ``path`` and everything below it, depth first, parents first."""
    yield path
    if not path.is_dir() or (not is_root and path.is_symlink()):
        return
    try:
        with os.scandir(path) as scan:
            names = sorted(entry.name for entry in scan)
    except OSError:
        return
    for name in names:
        yield from _walk(path / name, is_root=False)


def total_size(path) -> int:
    """Sum of the sizes of all files at or below ``path``."""
    total = 0
    for entry in _walk(Path(path)):
        if entry.is_file():
            try:
                total += entry.stat().st_size
            except OSError:
                pass
    return total


def handle_send(address, send_path, log: LogCallback, progress: ProgressCallback) -> None:
    """Connect to ``address`` and send ``send_path`` with everything below it."""
    send_path = Path(send_path)
    if not send_path.exists():
        raise FileNotFoundError(f"No file selected: {send_path}")
    send_path = send_path.resolve()
    root_dir = send_path.parent
    if root_dir == send_path:
        raise ValueError("the send path is a filesystem root")

    size = total_size(send_path)

    host, port = address
    try:
        infos = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)
    except socket.gaierror as exc:
        raise ValueError(f"Invalid IP address : {host}:{port}") from exc
    family, socktype, proto, _, sockaddr = infos[0]

    with socket.socket(family, socktype, proto) as sock:
        sock.settimeout(_CONNECT_TIMEOUT)
        sock.connect(sockaddr)
        sock.settimeout(None)
        log("Connected")
        with sock.makefile("wb") as stream:
            protocol = SendProtocol(stream, size, progress)
            for entry in _walk(send_path):
                protocol.send_entry(entry, root_dir, log)
            protocol.flush()
            protocol.writer.send_progress()
            elapsed = protocol.writer.total_time()

    log(f"Time taken : {elapsed:.2f}s")