"""Terminal front end for ``ResolutionController``: raw key input, full redraws."""
from __future__ import annotations
import os
import sys
from typing import Callable, List, Optional, TextIO

from .actions import FileActions
from .index import DuplicateGroup
from .resolve import ResolutionController

KeyReader = Callable[[], str]

_CLEAR = "\x1b[2J\x1b[H"

_CONTROL_KEYS = {
    "": "ctrl+c",  # EOF
    "\r": "enter",
    "\n": "enter",
    "\x1b": "escape",
    "\x7f": "backspace",
    "\x08": "backspace",
    "\x03": "ctrl+c",
    " ": "space",
}


def decode_key(raw: str) -> str:
    """Map raw terminal input to a key name understood by the controller.

    End of input reads as ``ctrl+c`` so the loop always terminates.
    """
    if raw in _CONTROL_KEYS:
        return _CONTROL_KEYS[raw]
    if raw.startswith("\x1b"):
        # arrow keys and other escape sequences are not bound
        return "unknown"
    return raw


def _read_key_windows() -> str:
    import msvcrt

    ch = msvcrt.getwch()
    if ch in ("\x00", "\xe0"):
        msvcrt.getwch()
        return "unknown"
    return decode_key(ch)


def _read_key_posix() -> str:
    import select
    import termios
    import tty

    fd = sys.stdin.fileno()
    old = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        raw = os.read(fd, 1).decode("utf-8", errors="replace")
        if raw == "\x1b":
            while select.select([fd], [], [], 0.02)[0]:
                raw += os.read(fd, 8).decode("utf-8", errors="replace")
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)
    return decode_key(raw)


def read_key() -> str:
    if sys.platform.startswith("win"):
        return _read_key_windows()
    return _read_key_posix()


def run(
    groups: List[DuplicateGroup],
    actions: FileActions,
    read: Optional[KeyReader] = None,
    out: Optional[TextIO] = None,
    clear_screen: bool = True,
) -> ResolutionController:
    out = out or sys.stdout
    if not groups:
        out.write("No duplicates found\n")
        return ResolutionController(groups, actions)

    read = read or read_key
    controller = ResolutionController(groups, actions)
    while not controller.done:
        if clear_screen:
            out.write(_CLEAR)
        out.write(controller.view())
        out.flush()
        controller.handle_key(read() or "ctrl+c")

    out.write(controller.view())
    out.flush()
    return controller
