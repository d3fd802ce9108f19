"""peerchat – a minimal peer‑to‑peer UDP text chat.

Importing this package exposes :class:`peerchat.ChatSession` (the socket
core a front end drives) and :class:`peerchat.PeerChatClient` (the terminal
front end, also launched via ``python -m peerchat``).
"""

# ------------------------ re-exports ------------------------
from .display import MessageLog                    # noqa: F401
from .errors import (                              # noqa: F401
    BindError, ChatError, ConfigError, DecodeError, ReceiveFatalError, SendError,
)
from .events import ChatEvent                      # noqa: F401
from .protocol import SessionConfig                # noqa: F401
from .session import ChatSession                   # noqa: F401
from .client import PeerChatClient                 # noqa: F401  ── re-export client class

# ------------------------ public API ------------------------
__all__: list[str] = [
    "ChatSession",     # Socket lifecycle + send + event queue
    "SessionConfig",   # Validated username / ports / addresses
    "ChatEvent",       # Items on the inbound event stream
    "MessageLog",      # Thread-safe display list
    "PeerChatClient",  # Terminal front end
    "ChatError", "ConfigError", "BindError", "SendError", "DecodeError", "ReceiveFatalError",
]
