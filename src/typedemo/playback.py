from __future__ import annotations

import logging
import queue
import random
import threading
import time
from typing import Callable, Iterable

from .instruction import Instruction, Pause, UpdateFocus, WaitForAck, WaitForQuit
from .shutdown import QuitFlag

logger = logging.getLogger(__name__)

TYPING_DELAY_RANGE_MS = (35, 85)


class AckChannel:
    """Single-slot "continue" signal from the foreground to the player."""

    def __init__(self) -> None:
        self._slot: queue.Queue[None] = queue.Queue(maxsize=1)

    def send(self) -> bool:
        """Offer one signal; returns False when one is already pending."""

        try:
            self._slot.put_nowait(None)
        except queue.Full:
            return False
        return True

    def wait(self) -> None:
        self._slot.get()

    def drain(self) -> bool:
        """Discard a pending signal, if any, without blocking."""

        try:
            self._slot.get_nowait()
        except queue.Empty:
            return False
        return True

    @property
    def pending(self) -> bool:
        return not self._slot.empty()


class PlaybackEngine(threading.Thread):
    """Background thread that paces instructions out to the editor surface.

    The engine owns the instruction list and is the only producer on the
    surface's inbox. It blocks on sleeps and on acknowledgments, never on
    the surface applying what it was sent, and it ends the session by
    raising the quit flag.
    """

    def __init__(
        self,
        instructions: Iterable[Instruction],
        emit: Callable[[Instruction], None],
        ack: AckChannel,
        quit_flag: QuitFlag,
        *,
        delay_range_ms: tuple[int, int] = TYPING_DELAY_RANGE_MS,
        rng: random.Random | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(name="typedemo-playback", daemon=True)
        low, high = delay_range_ms
        if low < 0 or high < low:
            msg = f"Invalid delay range: {delay_range_ms!r}"
            raise ValueError(msg)
        self._instructions = list(instructions)
        self._emit = emit
        self._ack = ack
        self._quit_flag = quit_flag
        self._delay_range_ms = (low, high)
        self._rng = rng or random.Random()
        self._sleep = sleep

    def run(self) -> None:  # noqa: D401 - standard thread run
        logger.debug("Playback started with %d instructions", len(self._instructions))
        for instruction in self._instructions:
            if isinstance(instruction, Pause):
                self._sleep(instruction.duration_ms / 1000)
                continue

            if isinstance(instruction, WaitForAck):
                self._emit(instruction)
                logger.debug("Waiting for acknowledgment")
                self._ack.wait()
                continue

            if isinstance(instruction, WaitForQuit):
                break

            # A key pressed while typing must not count as the next ack.
            self._ack.drain()
            self._sleep(self.next_delay())
            self._emit(instruction)
            if isinstance(instruction, UpdateFocus):
                self._ack = instruction.ack

        logger.debug("Waiting for the key press that ends playback")
        self._ack.wait()
        self._quit_flag.raise_flag()
        logger.debug("Playback finished")

    def next_delay(self) -> float:
        """Seconds to wait before the next typed instruction."""

        low, high = self._delay_range_ms
        return self._rng.uniform(low, high) / 1000
