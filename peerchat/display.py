#!/usr/bin/env python3
"""Thread-safe list of the lines a front end shows."""

from __future__ import annotations
import threading
from typing import List

from .events import LOCAL, MESSAGE, ChatEvent


class MessageLog:
    """Ordered chat transcript.

    Peer messages are always appended. A locally echoed message is skipped
    when it already is the most recent entry.
    """

    def __init__(self) -> None:
        self._lines: List[str] = []
        self._lock = threading.Lock()

    def apply(self, event: ChatEvent) -> bool:
        """Fold *event* into the transcript; True if a line was added."""
        if event.kind == MESSAGE:
            return self.append(event.text)
        if event.kind == LOCAL:
            return self.append_local(event.text)
        return False

    def append(self, text: str) -> bool:
        with self._lock:
            self._lines.append(text)
        return True

    def append_local(self, text: str) -> bool:
        with self._lock:
            if self._lines and self._lines[-1] == text:
                return False
            self._lines.append(text)
        return True

    def entries(self) -> List[str]:
        with self._lock:
            return list(self._lines)

    def __len__(self) -> int:
        with self._lock:
            return len(self._lines)
