#!/usr/bin/env python3
"""Items on the session's inbound event stream."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from .errors import ChatError

# --- Event kinds -------------------------------------------------------------
MESSAGE = "message"   # Text received from the peer
LOCAL   = "local"     # Our own message, echoed locally after a successful send
ERROR   = "error"     # Decode / receive failure (see ChatEvent.error)
SYSTEM  = "system"    # Lifecycle notice ("Chat started." ...)
STOPPED = "stopped"   # Last event of a run; the receive loop is gone


@dataclass(frozen=True, slots=True)
class ChatEvent:
    kind: str
    text: str = ""
    error: Optional[ChatError] = None

    @property
    def is_error(self) -> bool:
        return self.kind == ERROR

    @classmethod
    def failure(cls, exc: ChatError) -> "ChatEvent":
        return cls(ERROR, str(exc), exc)
