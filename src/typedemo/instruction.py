from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .playback import AckChannel


@dataclass(frozen=True, slots=True)
class Color:
    """24-bit foreground colour."""

    r: int
    g: int
    b: int

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        value = value.lstrip("#")
        if len(value) == 3:
            value = "".join(ch * 2 for ch in value)
        if len(value) != 6:
            msg = f"Invalid hex colour: {value!r}"
            raise ValueError(msg)
        return cls(int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))

    @property
    def hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


WHITE = Color(255, 255, 255)


@dataclass(frozen=True, slots=True)
class MoveCursor:
    x: int
    y: int


@dataclass(frozen=True, slots=True)
class TypeChar:
    char: str
    bold: bool = False


@dataclass(frozen=True, slots=True)
class SetForegroundColor:
    color: Color


@dataclass(frozen=True, slots=True)
class Newline:
    reset_column: int = 0


@dataclass(frozen=True, slots=True)
class SetColumn:
    x: int


@dataclass(frozen=True, slots=True)
class Pause:
    duration_ms: int


@dataclass(frozen=True, slots=True)
class WaitForAck:
    pass


@dataclass(frozen=True, slots=True)
class WaitForQuit:
    pass


@dataclass(frozen=True, slots=True)
class HideCursor:
    pass


@dataclass(frozen=True, slots=True)
class UpdateFocus:
    """Switch the editor to another file and to a fresh ack channel."""

    path: Path
    ack: "AckChannel"


Instruction = (
    MoveCursor
    | TypeChar
    | SetForegroundColor
    | Newline
    | SetColumn
    | Pause
    | WaitForAck
    | WaitForQuit
    | HideCursor
    | UpdateFocus
)
