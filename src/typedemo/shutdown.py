from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Protocol


class QuitFlag:
    """Edge-triggered, lock-guarded shutdown request.

    The playback thread raises it; the foreground event source consumes it
    once on its next poll. A lock that cannot be taken right away reads as
    "shut down" when consuming, so contention can never hang the surface.
    """

    def __init__(self) -> None:
        self._value = False
        self._lock = threading.Lock()

    def raise_flag(self) -> None:
        with self._lock:
            self._value = True

    def consume(self) -> bool:
        if not self._lock.acquire(blocking=False):
            return True
        try:
            value = self._value
            self._value = False
            return value
        finally:
            self._lock.release()

    def peek(self) -> bool:
        if not self._lock.acquire(blocking=False):
            return False
        try:
            return self._value
        finally:
            self._lock.release()


@dataclass(frozen=True, slots=True)
class KeyEvent:
    key: str


@dataclass(frozen=True, slots=True)
class StopEvent:
    pass


Event = KeyEvent | StopEvent


class EventSource(Protocol):
    def next_event(self, timeout: float) -> Event | None: ...

    def quit_test(self, event: Event | None) -> bool: ...


class QuittableEventSource:
    """Event source that turns a raised quit flag into a `StopEvent`."""

    def __init__(self, source: EventSource, quit_flag: QuitFlag) -> None:
        self._source = source
        self._quit_flag = quit_flag

    def next_event(self, timeout: float) -> Event | None:
        if self._quit_flag.consume():
            return StopEvent()
        return self._source.next_event(timeout)

    def quit_test(self, event: Event | None) -> bool:
        return self._source.quit_test(event) or self._quit_flag.peek()
