#!/usr/bin/env python3
"""Wire format, constants and the session config record.

Everything that travels over the network is framed/decoded via the helpers
here so the send path and the receive loop never disagree on the format.
"""

from __future__ import annotations       # Postponed annotation evaluation (PEP 563)
import ipaddress                         # Address validation
import socket                            # Address family constants
from dataclasses import dataclass        # Immutable config record
from typing import Tuple, Union

from .errors import ConfigError

# --- Network configuration -------------------------------------------------
BUF_SIZE: int = 65535             # Largest UDP payload we read (bytes)
DEFAULT_ADDRESS: str = "127.0.0.1"  # Loopback peer / listen address
POLL_INTERVAL: float = 0.2        # Receive timeout so the loop can see stop()
MIN_PORT: int = 1
MAX_PORT: int = 65535

SEPARATOR: str = ": "             # "<username>: <body>"
ENCODING: str = "utf-8"

# --- Framing helpers -------------------------------------------------------

def compose_message(username: str, body: str) -> str:
    """Return ``"<username>: <body>"`` – the text both peers display."""
    return f"{username}{SEPARATOR}{body}"


def encode_message(text: str) -> bytes:
    return text.encode(ENCODING)


def decode_message(data: bytes) -> str:
    """bytes ⟶ str. Raises :class:`UnicodeDecodeError` on malformed input."""
    return data.decode(ENCODING)             # strict: no replacement chars


def is_own_message(text: str, username: str) -> bool:
    """Prefix heuristic: does *text* look like something *username* sent?"""
    return text.startswith(f"{username}:")

# --- Config ----------------------------------------------------------------

def parse_port(value: Union[str, int], label: str) -> int:
    """Parse form/CLI input into a port number or raise ConfigError."""
    try:
        port = int(str(value).strip())
    except ValueError:
        raise ConfigError(f"Enter a valid {label} port number.") from None
    if not MIN_PORT <= port <= MAX_PORT:
        raise ConfigError(f"{label.capitalize()} port must be between {MIN_PORT} and {MAX_PORT}.")
    return port


def parse_address(value: str, label: str) -> str:
    try:
        return str(ipaddress.ip_address(value.strip()))
    except ValueError:
        raise ConfigError(f"Enter a valid {label} IP address.") from None


def address_family(address: str) -> int:
    """socket.AF_INET or socket.AF_INET6 matching *address*."""
    return socket.AF_INET6 if ipaddress.ip_address(address).version == 6 else socket.AF_INET


@dataclass(frozen=True, slots=True)
class SessionConfig:
    """Settings for one chat session. Restart the session to change them."""

    username: str
    local_port: int
    remote_port: int
    remote_address: str = DEFAULT_ADDRESS
    local_address: str = DEFAULT_ADDRESS

    @classmethod
    def from_input(
        cls,
        username: str,
        local_port: Union[str, int],
        remote_port: Union[str, int],
        remote_address: str = DEFAULT_ADDRESS,
        local_address: str = DEFAULT_ADDRESS,
    ) -> "SessionConfig":
        """Validate raw user input and build a config."""
        name = (username or "").strip()
        if not name:
            raise ConfigError("Enter a username.")
        return cls(
            username=name,
            local_port=parse_port(local_port, "local"),
            remote_port=parse_port(remote_port, "remote"),
            remote_address=parse_address(remote_address, "remote"),
            local_address=parse_address(local_address, "local"),
        )

    def validated(self) -> "SessionConfig":
        """Re-run input validation on a directly constructed config."""
        return self.from_input(
            self.username, self.local_port, self.remote_port,
            self.remote_address, self.local_address,
        )

    @property
    def local_endpoint(self) -> Tuple[str, int]:
        return (self.local_address, self.local_port)

    @property
    def remote_endpoint(self) -> Tuple[str, int]:
        return (self.remote_address, self.remote_port)
