from __future__ import annotations

import contextlib
import os
import select
import sys
import termios
import tty
from typing import Iterator, TextIO

from .shutdown import Event, KeyEvent, StopEvent

CTRL_C = "\x03"


@contextlib.contextmanager
def cbreak(stream: TextIO | None = None, *, signals: bool = True) -> Iterator[None]:
    """Deliver key presses one by one without echo while active.

    With ``signals=False`` Ctrl+C arrives as the ``"\\x03"`` key instead of
    raising KeyboardInterrupt.
    """

    stream = stream or sys.stdin
    try:
        fd = stream.fileno()
        saved = termios.tcgetattr(fd)
    except (termios.error, AttributeError, ValueError, OSError):
        saved = None
    if saved is None:
        # Not a terminal: nothing to switch.
        yield
        return
    tty.setcbreak(fd)
    if not signals:
        attrs = termios.tcgetattr(fd)
        attrs[3] &= ~termios.ISIG
        termios.tcsetattr(fd, termios.TCSANOW, attrs)
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)


def read_key(fd: int, timeout: float | None) -> str | None:
    """Read whatever one key press produced, or None on timeout."""

    ready, _, _ = select.select([fd], [], [], timeout)
    if not ready:
        return None
    data = os.read(fd, 32)
    if not data:
        raise EOFError("stdin closed")
    return data.decode("utf-8", errors="replace")


def wait_for_key(stream: TextIO | None = None) -> str:
    """Block until a key is pressed; NUL bytes do not count."""

    stream = stream or sys.stdin
    with cbreak(stream):
        while True:
            key = read_key(stream.fileno(), None)
            if key and key.strip("\x00"):
                return key


class KeyboardEventSource:
    """Poll stdin for key presses. Ctrl+C closes the surface."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream or sys.stdin

    def next_event(self, timeout: float) -> Event | None:
        try:
            key = read_key(self._stream.fileno(), timeout)
        except EOFError:
            return StopEvent()
        if key is None:
            return None
        return KeyEvent(key)

    def quit_test(self, event: Event | None) -> bool:
        return isinstance(event, KeyEvent) and event.key == CTRL_C
