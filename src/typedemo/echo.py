from __future__ import annotations

import random
import time
from pathlib import Path
from typing import Callable, Sequence

from rich.console import Console

from .playback import TYPING_DELAY_RANGE_MS

PROMPT_STYLE = "green"
EXECUTABLE_STYLE = "cyan"


def format_prompt(cwd: Path, home: Path | None = None) -> str:
    """Shell-like prompt for `cwd`, abbreviating the home directory."""

    home = home if home is not None else Path.home()
    try:
        relative = cwd.relative_to(home)
    except ValueError:
        return f"{cwd} $ "
    if relative == Path("."):
        return "~/ $ "
    return f"~/{relative} $ "


class CommandEcho:
    """Type a command at a fake prompt, one character at a time."""

    def __init__(
        self,
        console: Console,
        *,
        delay_range_ms: tuple[int, int] = TYPING_DELAY_RANGE_MS,
        rng: random.Random | None = None,
        sleep: Callable[[float], None] = time.sleep,
        home: Path | None = None,
    ) -> None:
        self._console = console
        self._delay_range_ms = delay_range_ms
        self._rng = rng or random.Random()
        self._sleep = sleep
        self._home = home

    def prompt(self, cwd: Path) -> None:
        self._write(format_prompt(cwd, self._home), PROMPT_STYLE)

    def type_command(self, args: Sequence[str]) -> None:
        if not args:
            return
        executable, *rest = args
        self._type(executable, EXECUTABLE_STYLE)
        for arg in rest:
            self._write(" ")
            self.pause()
            self._type(arg)
        self._console.print()

    def echo(self, cwd: Path, args: Sequence[str]) -> None:
        self.prompt(cwd)
        self.type_command(args)

    def pause(self) -> None:
        low, high = self._delay_range_ms
        self._sleep(self._rng.uniform(low, high) / 1000)

    def _type(self, value: str, style: str | None = None) -> None:
        for char in value:
            self._write(char, style)
            self.pause()

    def _write(self, value: str, style: str | None = None) -> None:
        self._console.print(
            value,
            style=style,
            end="",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
