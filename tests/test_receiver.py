import queue
import socket
import threading
import time
from contextlib import contextmanager
from types import SimpleNamespace

import pytest

from lanxfer.protocol import SendProtocol
from lanxfer.receiver import handle_receive


class _Logs:
    def __init__(self):
        self.queue = queue.Queue()
        self.seen = []

    def __call__(self, message):
        self.queue.put(message)

    def wait_for(self, prefix, timeout=5.0):
        deadline = time.monotonic() + timeout
        while True:
            remaining = deadline - time.monotonic()
            try:
                if remaining <= 0:
                    raise queue.Empty
                message = self.queue.get(timeout=remaining)
            except queue.Empty:
                raise AssertionError(f"no log starting with {prefix!r}; saw {self.seen}")
            self.seen.append(message)
            if message.startswith(prefix):
                return message


@contextmanager
def _serving(start, save):
    """Run ``start(logs, running)`` in a thread as a receiving server."""
    logs = _Logs()
    running = threading.Event()
    running.set()
    errors = []

    def run():
        try:
            start(logs, running)
        except Exception as exc:
            errors.append(exc)

    thread = threading.Thread(target=run, daemon=True)
    thread.start()
    try:
        started = logs.wait_for("Server started")
        port = int(started.rsplit(":", 1)[1])
        yield SimpleNamespace(
            logs=logs, running=running, save=save, port=port, thread=thread, errors=errors
        )
    finally:
        running.clear()
        thread.join(5)


def _send_raw(port, payload):
    with socket.create_connection(("127.0.0.1", port)) as sock:
        sock.sendall(payload)


def test_logs_save_path_first_and_creates_directory(tmp_path):
    save = tmp_path / "inbox"
    with _serving(
        lambda logs, running: handle_receive(("127.0.0.1", 0), save, logs, running), save
    ) as server:
        assert server.logs.seen[0] == f"Save path : {save}"
        assert save.is_dir()


def test_receives_raw_wire_entry(tmp_path):
    save = tmp_path / "inbox"
    with _serving(
        lambda logs, running: handle_receive(("127.0.0.1", 0), save, logs, running), save
    ) as server:
        payload = b"\x00\x00\x05a.txt" + (3).to_bytes(8, "big") + b"abc"
        _send_raw(server.port, payload)
        server.logs.wait_for("Receive over")
        assert (save / "a.txt").read_bytes() == b"abc"


def test_receives_directory_entry(tmp_path):
    save = tmp_path / "inbox"
    with _serving(
        lambda logs, running: handle_receive(("127.0.0.1", 0), save, logs, running), save
    ) as server:
        _send_raw(server.port, b"\x01\x00\x05inner")
        server.logs.wait_for("Receive over")
        assert (save / "inner").is_dir()


def test_round_trip_with_send_protocol(tmp_path):
    src = tmp_path / "src"
    (src / "sub").mkdir(parents=True)
    (src / "a.txt").write_bytes(b"first file")
    (src / "sub" / "b.bin").write_bytes(bytes(range(256)) * 10)

    save = tmp_path / "inbox"
    entries = [src, src / "a.txt", src / "sub", src / "sub" / "b.bin"]
    with _serving(
        lambda logs, running: handle_receive(("127.0.0.1", 0), save, logs, running), save
    ) as server:
        with socket.create_connection(("127.0.0.1", server.port)) as sock:
            with sock.makefile("wb") as stream:
                protocol = SendProtocol(stream, 0, lambda pct, speed: None)
                for entry in entries:
                    protocol.send_entry(entry, tmp_path, lambda message: None)
                protocol.flush()

        server.logs.wait_for("Receive over")
        assert (save / "src" / "a.txt").read_bytes() == b"first file"
        assert (save / "src" / "sub" / "b.bin").read_bytes() == bytes(range(256)) * 10


def test_reports_new_connection(tmp_path):
    save = tmp_path / "inbox"
    with _serving(
        lambda logs, running: handle_receive(("127.0.0.1", 0), save, logs, running), save
    ) as server:
        _send_raw(server.port, b"")
        message = server.logs.wait_for("New connection")
        assert "127.0.0.1" in message


def test_truncated_stream_reports_failure(tmp_path):
    save = tmp_path / "inbox"
    with _serving(
        lambda logs, running: handle_receive(("127.0.0.1", 0), save, logs, running), save
    ) as server:
        _send_raw(server.port, b"\x00\x00")
        message = server.logs.wait_for("Receive failed")
        assert message.startswith("Receive failed : ")
        assert list(save.iterdir()) == []


def test_stops_when_running_cleared(tmp_path):
    save = tmp_path / "inbox"
    with _serving(
        lambda logs, running: handle_receive(("127.0.0.1", 0), save, logs, running), save
    ) as server:
        server.running.clear()
        server.thread.join(5)
        assert not server.thread.is_alive()
        assert server.errors == []


def test_returns_immediately_when_not_running(tmp_path):
    messages = []
    save = tmp_path / "nested" / "dir"
    handle_receive(("127.0.0.1", 0), save, messages.append, threading.Event())
    assert save.is_dir()
    assert messages[0] == f"Save path : {save}"
    assert messages[1].startswith("Server started : 127.0.0.1:")


def test_bind_failure_raises(tmp_path):
    blocker = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    blocker.bind(("127.0.0.1", 0))
    blocker.listen()
    port = blocker.getsockname()[1]
    running = threading.Event()
    running.set()
    try:
        with pytest.raises(OSError, match="try changing the port"):
            handle_receive(("127.0.0.1", port), tmp_path, lambda m: None, running)
    finally:
        blocker.close()