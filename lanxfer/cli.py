"""Command line entry point for sending and receiving files over a LAN."""

from __future__ import annotations

import argparse
import sys
import threading
from pathlib import Path

from .form_field import ValidationError
from .receiver import handle_receive
from .sender import handle_send
from .state import DEFAULT_IP, DEFAULT_PORT, parse_ip, parse_port

_LISTEN_HOST = "0.0.0.0"


def _port(text: str) -> int:
    try:
        return parse_port(text)
    except ValidationError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _ip(text: str):
    try:
        return parse_ip(text)
    except ValidationError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with the ``send`` and ``receive`` commands."""
    parser = argparse.ArgumentParser(
        prog="lanxfer",
        description="Send files and directories to another machine over TCP.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    send = commands.add_parser("send", help="send a file or a directory")
    send.add_argument("path", type=Path, help="file or directory to send")
    send.add_argument(
        "--ip", type=_ip, default=DEFAULT_IP, help=f"receiver address (default {DEFAULT_IP})"
    )
    send.add_argument(
        "--port", type=_port, default=DEFAULT_PORT, help=f"receiver port (default {DEFAULT_PORT})"
    )

    receive = commands.add_parser("receive", help="receive transfers until interrupted")
    receive.add_argument(
        "--dir",
        dest="directory",
        type=Path,
        default=None,
        help="directory to save into (default: current directory)",
    )
    receive.add_argument(
        "--host", default=_LISTEN_HOST, help=f"address to listen on (default {_LISTEN_HOST})"
    )
    receive.add_argument(
        "--port", type=_port, default=DEFAULT_PORT, help=f"port to listen on (default {DEFAULT_PORT})"
    )
    return parser


def _log(message: str) -> None:
    print(message, flush=True)


def _progress(percent: float, speed: str) -> None:
    print(f"{percent:.0f}% {speed}", file=sys.stderr, flush=True)


def _run_send(args: argparse.Namespace) -> int:
    try:
        handle_send((str(args.ip), args.port), args.path, _log, _progress)
    except Exception as exc:  # every failure is reported to the user
        _log(f"Send failed : {exc}")
        return 1
    _log("Send over")
    return 0


def _run_receive(args: argparse.Namespace) -> int:
    directory = args.directory if args.directory is not None else Path(".").resolve()
    running = threading.Event()
    running.set()
    try:
        handle_receive((args.host, args.port), directory, _log, running)
    except KeyboardInterrupt:
        running.clear()
    except Exception as exc:  # every failure is reported to the user
        running.clear()
        _log(f"Failed to start server : {exc}")
        return 1
    _log("Stop server")
    return 0


def main(argv=None) -> int:
    """Run the command line interface and return the exit status."""
    args = build_parser().parse_args(argv)
    if args.command == "send":
        return _run_send(args)
    return _run_receive(args)


if __name__ == "__main__":
    sys.exit(main())