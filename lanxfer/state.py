"""Application state for the sending and receiving sides."""

from __future__ import annotations

import ipaddress
import re
import threading
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .form_field import FormField, ValidationError

DEFAULT_PORT = 8000
DEFAULT_IP = ipaddress.IPv4Address("127.0.0.1")
INITIAL_PROGRESS = (0.0, "0.00MB/s")

_PORT_RE = re.compile(r"\+?[0-9]+")


class Language(Enum):
    """User interface language; the value is the locale code."""

    ENGLISH = "en"
    CHINESE = "zh"

    def __str__(self) -> str:
        return "English" if self is Language.ENGLISH else "中文"


def parse_port(text: str) -> int:
    """Parse a TCP port number in the range 0..65535."""
    if _PORT_RE.fullmatch(text) is None or int(text) > 0xFFFF:
        raise ValidationError("Port must be a number between 0 and 65535")
    return int(text)


def parse_ip(text: str) -> ipaddress.IPv4Address | ipaddress.IPv6Address:
    """Parse an IPv4 or IPv6 address."""
    try:
        return ipaddress.ip_address(text)
    except ValueError as exc:
        raise ValidationError("Invalid IP address") from exc


def _port_field() -> FormField[int]:
    return FormField(DEFAULT_PORT, parse_port)


@dataclass
class ReceiverState:
    """Settings and status of the receiving side."""

    port_field: FormField[int] = field(default_factory=_port_field)
    directory: Path = field(default_factory=lambda: Path(".").resolve())
    logs: list[str] = field(default_factory=list)
    running: threading.Event = field(default_factory=threading.Event)


@dataclass
class SenderState:
    """Settings and status of the sending side."""

    ip_field: FormField = field(default_factory=lambda: FormField(DEFAULT_IP, parse_ip))
    port_field: FormField[int] = field(default_factory=_port_field)
    enable_directory: bool = False
    file: Path | None = None
    logs: list[str] = field(default_factory=list)
    running: threading.Event = field(default_factory=threading.Event)
    progress: tuple[float, str] = INITIAL_PROGRESS