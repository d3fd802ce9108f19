#!/usr/bin/env python3
"""Exception taxonomy shared by the session, the receive loop and the CLI."""

from __future__ import annotations

__all__ = [
    "ChatError", "ConfigError", "BindError", "SendError",
    "DecodeError", "ReceiveFatalError",
]


class ChatError(Exception):
    """Base class for every error the chat core reports."""


class ConfigError(ChatError):
    """Username / port / address input the user has to correct."""


class BindError(ChatError):
    """Local listening port is in use or otherwise unavailable."""


class SendError(ChatError):
    """A single outbound datagram could not be written."""


class DecodeError(ChatError):
    """An inbound datagram was not valid UTF-8 (loop keeps running)."""


class ReceiveFatalError(ChatError):
    """Receive socket failed; the loop has stopped."""
