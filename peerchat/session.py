#!/usr/bin/env python3
"""Chat session: socket lifecycle, outbound send and the inbound event queue.

A front end drives a :class:`ChatSession` through three calls and reads
everything else from :attr:`ChatSession.events`::

    session = ChatSession()
    session.start(SessionConfig.from_input("alice", 5000, 5001))
    session.send("hello")
    for event in session.iter_events():
        ...
    session.stop()
"""

from __future__ import annotations

import queue                          # Thread‑safe FIFO between recv‑thread & front end
import socket                         # UDP socket operations
import threading                      # Concurrency primitives
from dataclasses import dataclass
from typing import Iterator, Optional

from .errors import BindError, ChatError, SendError
from .events import LOCAL, SYSTEM, ChatEvent
from .events import STOPPED as STOPPED_EVENT
from .protocol import POLL_INTERVAL, SessionConfig, address_family, compose_message, encode_message
from .receiver import ReceiveLoop
from .util import LOG

# --- Lifecycle states -------------------------------------------------------
CREATED = "created"
RUNNING = "running"
STOPPED = "stopped"


@dataclass
class SocketPair:
    """The two UDP endpoints of one session run."""

    send_sock: socket.socket
    recv_sock: socket.socket

    @classmethod
    def open(cls, config: SessionConfig) -> "SocketPair":
        send_sock = socket.socket(address_family(config.remote_address), socket.SOCK_DGRAM)
        try:
            recv_sock = socket.socket(address_family(config.local_address), socket.SOCK_DGRAM)
        except OSError:
            send_sock.close()
            raise
        return cls(send_sock, recv_sock)

    def bind(self, config: SessionConfig) -> None:
        # No SO_REUSEADDR: a port somebody else listens on must fail here.
        self.recv_sock.bind(config.local_endpoint)
        self.recv_sock.settimeout(POLL_INTERVAL)

    def close(self) -> None:
        """Idempotent – closing a closed socket is a no-op."""
        self.send_sock.close()
        self.recv_sock.close()

    @property
    def closed(self) -> bool:
        return self.send_sock.fileno() == -1 and self.recv_sock.fileno() == -1


class ChatSession:
    """One peer's side of the chat."""

    def __init__(self, events: "Optional[queue.Queue[ChatEvent]]" = None) -> None:
        self.events: "queue.Queue[ChatEvent]" = events if events is not None else queue.Queue()
        self.config: Optional[SessionConfig] = None
        self.state: str = CREATED

        self._sockets: Optional[SocketPair] = None
        self._receiver: Optional[ReceiveLoop] = None
        self._lock = threading.RLock()

    # ================================================================ control ===
    def start(self, config: SessionConfig) -> None:
        """Bind the receive socket and launch the receive loop.

        Raises ConfigError for bad input and BindError when the local port
        cannot be bound; in both cases no sockets stay open.
        """
        config = config.validated()
        self.stop()                                   # Drop any previous run

        with self._lock:
            try:
                sockets = SocketPair.open(config)
            except OSError as exc:
                LOG.error("Cannot create sockets: %s", exc)
                raise BindError(f"Cannot create sockets: {exc}") from exc

            try:
                sockets.bind(config)
            except OSError as exc:
                sockets.close()
                self.state = STOPPED
                LOG.error("Cannot listen on %s:%d – %s", config.local_address, config.local_port, exc)
                raise BindError(
                    f"Cannot listen on {config.local_address}:{config.local_port}: {exc.strerror or exc}"
                ) from exc

            self.config = config
            self._sockets = sockets
            self._receiver = ReceiveLoop(
                sockets.recv_sock, config.username, self._publish, on_fatal=self._on_receive_fatal,
            )
            self.state = RUNNING
            self._receiver.start()

        LOG.info(
            "%s listening on %s:%d, sending to %s:%d",
            config.username, config.local_address, config.local_port,
            config.remote_address, config.remote_port,
        )
        self._publish(ChatEvent(SYSTEM, "Chat started."))

    def stop(self) -> None:
        """Close both sockets and end the receive loop. Safe to call repeatedly."""
        with self._lock:
            receiver, sockets = self._receiver, self._sockets
            self._receiver = self._sockets = None
            was_running = self.state == RUNNING
            if was_running:
                self.state = STOPPED

        if receiver is not None:
            receiver.stop()
        if sockets is not None:
            sockets.close()
        if was_running:
            LOG.info("Chat stopped")
            self._publish(ChatEvent(STOPPED_EVENT, "Chat stopped."))

    # ================================================================ send ===
    def send(self, body: str) -> Optional[str]:
        """Send *body* to the peer; returns the framed text, None for blank input.

        Raises SendError if the session is not running or the socket write
        fails. The session keeps running after a failed send.
        """
        text = (body or "").strip()
        if not text:
            return None

        with self._lock:
            if self.state != RUNNING or self._sockets is None or self.config is None:
                raise SendError("Chat is not running – start it first.")
            config, sock = self.config, self._sockets.send_sock

        message = compose_message(config.username, text)
        try:
            sock.sendto(encode_message(message), config.remote_endpoint)
        except OSError as exc:
            LOG.error("Send failed: %s", exc)
            raise SendError(f"Could not send message: {exc}") from exc

        self._publish(ChatEvent(LOCAL, message))
        return message

    # ================================================================ events ===
    def iter_events(self, timeout: Optional[float] = None) -> Iterator[ChatEvent]:
        """Yield queued events until (and including) the next STOPPED event.

        With *timeout*, also returns once no event arrived for that long.
        """
        while True:
            try:
                event = self.events.get(timeout=timeout)
            except queue.Empty:
                return
            yield event
            if event.kind == STOPPED_EVENT:
                return

    # ================================================================ state ===
    @property
    def is_running(self) -> bool:
        return self.state == RUNNING

    @property
    def receiver(self) -> Optional[ReceiveLoop]:
        return self._receiver

    @property
    def sockets(self) -> Optional[SocketPair]:
        return self._sockets

    # ================================================================ internals
    def _publish(self, event: ChatEvent) -> None:
        self.events.put(event)

    def _on_receive_fatal(self, receiver: ReceiveLoop, error: ChatError) -> None:
        """Runs on the receive thread after it reported a ReceiveFatalError."""
        with self._lock:
            if receiver is not self._receiver:            # Already stopped / restarted
                return
            sockets = self._sockets
            self._receiver = self._sockets = None
            self.state = STOPPED

        if sockets is not None:
            sockets.close()
        self._publish(ChatEvent(STOPPED_EVENT, f"Chat stopped: {error}"))
