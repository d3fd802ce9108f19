import queue
import socket

import pytest

from peerchat import ChatSession, SessionConfig


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture
def free_port():
    return _free_port


@pytest.fixture
def session():
    s = ChatSession()
    yield s
    s.stop()


@pytest.fixture
def peer_socket():
    """A plain UDP socket standing in for the remote peer."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2.0)
    yield sock
    sock.close()


def next_event(s: ChatSession, kind=None, timeout: float = 2.0):
    """Pop events until one of *kind* shows up (any event when kind is None)."""
    while True:
        event = s.events.get(timeout=timeout)
        if kind is None or event.kind == kind:
            return event


def drain(s: ChatSession):
    items = []
    while True:
        try:
            items.append(s.events.get_nowait())
        except queue.Empty:
            return items


def make_config(username, local_port, remote_port):
    return SessionConfig.from_input(username, local_port, remote_port)
