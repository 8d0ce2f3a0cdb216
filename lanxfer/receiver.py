"""Accept incoming transfers and store them under a directory."""

from __future__ import annotations

import socket
import threading
from pathlib import Path

from .protocol import LogCallback, ProtocolError, ReceiveProtocol

_POLL_INTERVAL = 0.1


def _format_address(sockname) -> str:
    host, port = sockname[0], sockname[1]
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def _open_listener(address) -> socket.socket:
    host, port = address
    try:
        infos = socket.getaddrinfo(
            host, port, type=socket.SOCK_STREAM, flags=socket.AI_PASSIVE
        )
        family, _, _, _, sockaddr = infos[0]
        return socket.create_server(sockaddr, family=family)
    except OSError as exc:
        raise OSError(f"Failed to start server, try changing the port: {exc}") from exc


def _serve_connection(conn: socket.socket, save_path: Path, log: LogCallback) -> None:
    with conn, conn.makefile("rb") as stream:
        try:
            ReceiveProtocol(stream).receive_all(save_path, log)
        except (OSError, ProtocolError, ValueError) as exc:
            log(f"Receive failed : {exc}")
            return
    log("Receive over")
    log(f"Save path : {save_path}")


def handle_receive(address, save_path, log: LogCallback, running: threading.Event) -> None:
    """Listen on ``address`` and receive transfers while ``running`` is set.

    Each connection is handled on its own thread; its outcome is reported
    through ``log``. Returns once ``running`` is cleared.
    """
    save_path = Path(save_path)
    save_path.mkdir(parents=True, exist_ok=True)
    log(f"Save path : {save_path}")

    with _open_listener(address) as listener:
        log(f"Server started : {_format_address(listener.getsockname())}")
        listener.settimeout(_POLL_INTERVAL)
        while running.is_set():
            try:
                conn, peer = listener.accept()
            except socket.timeout:
                continue
            conn.settimeout(None)
            log(f"New connection : {_format_address(peer)}")
            threading.Thread(
                target=_serve_connection,
                args=(conn, save_path, log),
                daemon=True,
            ).start()