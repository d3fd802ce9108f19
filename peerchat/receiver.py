#!/usr/bin/env python3
"""Background receive loop: datagram ⟶ text ⟶ self-echo filter ⟶ event."""

from __future__ import annotations

import socket                                      # Low‑level UDP API
import threading                                   # Background listener thread
from typing import Callable, Optional, Tuple

from .errors import ChatError, DecodeError, ReceiveFatalError
from .events import MESSAGE, ChatEvent
from .protocol import BUF_SIZE, decode_message, is_own_message
from .util import LOG

Publish = Callable[[ChatEvent], None]
FatalHook = Callable[["ReceiveLoop", ChatError], None]


class ReceiveLoop:
    """Owns nothing but a reference to the session's bound receive socket.

    The socket must carry a timeout: each expiry re-checks ``running`` so
    :meth:`stop` is observed without closing the socket underneath us.
    """

    def __init__(
        self,
        sock: socket.socket,
        username: str,
        publish: Publish,
        on_fatal: Optional[FatalHook] = None,
    ) -> None:
        self.sock = sock
        self.username = username
        self.publish = publish
        self.on_fatal = on_fatal

        self.running = threading.Event()  # Cooperative shutdown flag
        self.thread: Optional[threading.Thread] = None

    # ---------------------------------------------------------------- control
    def start(self) -> None:
        port = self.sock.getsockname()[1]
        self.running.set()
        self.thread = threading.Thread(target=self._run, name=f"peerchat-recv-{port}", daemon=True)
        self.thread.start()

    def stop(self, timeout: Optional[float] = 2.0) -> None:
        """Ask the loop to finish and wait for the thread (unless called from it)."""
        self.running.clear()
        thread = self.thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    @property
    def is_alive(self) -> bool:
        return self.thread is not None and self.thread.is_alive()

    # ---------------------------------------------------------------- loop
    def _run(self) -> None:
        while self.running.is_set():
            try:
                data, addr = self.sock.recvfrom(BUF_SIZE)   # Blocks ≤ socket timeout
            except socket.timeout:
                continue                                  # Allow shutdown check
            except OSError as exc:                        # Socket closed / unusable
                if self.running.is_set():
                    self._fail(exc)
                break
            self.handle_datagram(data, addr)

    def _fail(self, exc: OSError) -> None:
        self.running.clear()
        error = ReceiveFatalError(f"Error receiving data: {exc}")
        LOG.error("Receive loop stopped: %s", exc)
        self.publish(ChatEvent.failure(error))
        if self.on_fatal is not None:
            self.on_fatal(self, error)

    def handle_datagram(self, data: bytes, addr: Tuple) -> Optional[ChatEvent]:
        """Decode and filter one datagram; returns the published event, if any."""
        try:
            text = decode_message(data)
        except UnicodeDecodeError as exc:
            error = DecodeError(f"Malformed datagram from {addr[0]}:{addr[1]} ({exc.reason})")
            LOG.warning("%s", error)
            event = ChatEvent.failure(error)
            self.publish(event)
            return event

        if is_own_message(text, self.username):           # Our own broadcast
            LOG.debug("Dropped self-echo from %s:%d", addr[0], addr[1])
            return None

        event = ChatEvent(MESSAGE, text)
        self.publish(event)
        return event
