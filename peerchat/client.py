#!/usr/bin/env python3
"""Terminal front end for a peer‑to‑peer UDP chat session:

* Sends every typed line to the peer as ``"<name>: <line>"``
* Background display thread drains the session's event queue
* ``/restart [local_port remote_port]`` rebinds, ``/quit`` (or ``qqq``) exits
* ANSI‑coloured output via *colorama*.

Usage (after installing package locally):

    peerchat alice 5000 5001          # Peer A
    peerchat bob 5001 5000            # Peer B, same machine
"""

from __future__ import annotations                # ↩ type hints forward refs OK

import argparse                                    # For CLI parsing
import queue                                       # Empty on display poll timeout
import shlex                                       # Robust command splitting
import sys                                         # Needed for prompt redraw
import threading                                   # Background display thread
from typing import List, Optional

from .display import MessageLog
from .errors import BindError, ChatError, ConfigError, SendError
from .events import ERROR, LOCAL, MESSAGE, STOPPED, SYSTEM, ChatEvent
from .protocol import DEFAULT_ADDRESS, POLL_INTERVAL, SessionConfig
from .session import ChatSession
from .util import LOG

# 3rd‑party: coloured terminal output (pip install colorama)
from colorama import Fore, Style, init
init(autoreset=True)                               # Reset colour after each print

PROMPT = "> "


class PeerChatClient:
    """Wires stdin/stdout to a :class:`ChatSession` – can also be used programmatically."""

    def __init__(
        self,
        username: str,
        local_port: str,
        remote_port: str,
        remote_host: str = DEFAULT_ADDRESS,
        local_host: str = DEFAULT_ADDRESS,
        session: Optional[ChatSession] = None,
    ) -> None:
        # -------- raw user input (validated on start) --------
        self.username = username
        self.local_port = local_port
        self.remote_port = remote_port
        self.remote_host = remote_host
        self.local_host = local_host

        self.session = session or ChatSession()
        self.log = MessageLog()                    # What the user has seen

        # -------- control flags --------
        self.running = threading.Event()           # Cooperative shutdown across threads

    # ================================================================== main ===
    def start(self) -> int:
        """Blocking run‑loop: read stdin while a background thread renders events.

        Returns the process exit code.
        """
        if not self.username:
            self.username = input("Your name: ").strip()

        if not self._start_session():
            return 1

        self.running.set()
        threading.Thread(target=self._display_loop, name="peerchat-display", daemon=True).start()

        try:
            while self.running.is_set():
                try:
                    line = input(PROMPT)               # Blocking stdin read
                except EOFError:                       # Ctrl‑D on *nix
                    break

                if line.strip().lower() in {"/quit", "qqq"}:
                    break

                if line.startswith("/"):
                    self._handle_command(line)
                    continue

                self.submit(line)
        except KeyboardInterrupt:  # Graceful Ctrl‑C
            pass
        finally:
            self.running.clear()
            self.session.stop()
            LOG.info("Disconnected")
        return 0

    def submit(self, line: str) -> Optional[str]:
        """Send one line; failures are shown, never raised."""
        try:
            return self.session.send(line)
        except SendError as exc:
            self._notify_error(exc)
            return None

    # ---------------------------------------------------------------- session
    def _start_session(self) -> bool:
        try:
            config = SessionConfig.from_input(
                self.username, self.local_port, self.remote_port,
                remote_address=self.remote_host, local_address=self.local_host,
            )
            self.session.start(config)
        except (ConfigError, BindError) as exc:
            self._notify_error(exc)
            return False
        return True

    # ---------------------------------------------------------------- display
    def _display_loop(self) -> None:
        """Background thread – the only consumer of the session's event queue."""
        while self.running.is_set():
            try:
                event = self.session.events.get(timeout=POLL_INTERVAL)
            except queue.Empty:
                continue                               # Allow shutdown check
            if self.render(event) is not None:
                # Prompt re‑paint so the user's current input line isn't lost
                sys.stdout.write(PROMPT)
                sys.stdout.flush()

    def render(self, event: ChatEvent) -> Optional[str]:
        """Print *event*; returns the printed line or None if nothing was shown."""
        if event.kind in (MESSAGE, LOCAL):
            if not self.log.apply(event):              # Local echo already shown
                return None
            colour = Fore.YELLOW if event.kind == LOCAL else Fore.GREEN
            line = f"{colour}{event.text}{Style.RESET_ALL}"
        elif event.kind == ERROR:
            line = f"{Fore.RED}[ERROR]{Style.RESET_ALL} {event.text}"
        elif event.kind in (SYSTEM, STOPPED):
            line = f"{Fore.CYAN}[SYSTEM]{Style.RESET_ALL} {event.text}"
        else:
            return None
        print(f"\r{line}")
        return line

    def _notify_error(self, exc: ChatError) -> None:
        print(f"\r{Fore.RED}[ERROR]{Style.RESET_ALL} {exc}")

    # ---------------------------------------------------------------- command parser
    def _handle_command(self, line: str) -> None:
        """Parse & execute user slash‑commands using shlex for proper quoting."""
        try:
            cmd, *args = shlex.split(line)            # Splits honouring quotes
        except ValueError as exc:
            print(f"Parse error: {exc}")
            return

        match cmd.lower():
            # ------------------------- /restart [local remote] ---------------
            case "/restart":
                if len(args) not in (0, 2):
                    print("Usage: /restart [local_port remote_port]")
                    return
                if args:
                    self.local_port, self.remote_port = args
                self.session.stop()
                self._start_session()

            # ------------------------- unknown cmd ----------------------------
            case _:
                print("Unknown command")

# ======================================================================
#  Command‑line entry point
# ======================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser("peerchat", description="Peer-to-peer UDP chat")
    parser.add_argument("username", nargs="?", default="", help="Name shown before your messages")
    parser.add_argument("local_port", help="UDP port to listen on")
    parser.add_argument("remote_port", help="UDP port the peer listens on")
    parser.add_argument("--remote-host", default=DEFAULT_ADDRESS, help="IP address of the peer")
    parser.add_argument("--local-host", default=DEFAULT_ADDRESS, help="IP address to listen on")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Parse CLI args then instantiate & run the chat client."""
    args = build_parser().parse_args(argv)
    client = PeerChatClient(
        args.username, args.local_port, args.remote_port,
        remote_host=args.remote_host, local_host=args.local_host,
    )
    return client.start()


if __name__ == "__main__":
    sys.exit(main())
