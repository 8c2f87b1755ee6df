from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

from .file_tree import DEFAULT_BLACKLIST, Folder, path_breadcrumb, read_file_tree
from .instruction import (
    WHITE,
    Color,
    HideCursor,
    Instruction,
    MoveCursor,
    Newline,
    Pause,
    SetColumn,
    SetForegroundColor,
    TypeChar,
    UpdateFocus,
    WaitForAck,
    WaitForQuit,
)

if TYPE_CHECKING:
    from .playback import AckChannel
    from .shutdown import KeyEvent

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Span:
    """One character cell of the simulated buffer."""

    char: str
    bold: bool = False
    foreground: Color = WHITE

    @classmethod
    def empty(cls) -> "Span":
        return cls(" ")


@dataclass(slots=True)
class Line:
    spans: list[Span] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(span.char for span in self.spans)


@dataclass(slots=True)
class CursorPosition:
    x: int = 0
    y: int = 0


@dataclass(slots=True)
class ViewportState:
    scroll_offset: int = 0
    screen_cursor: CursorPosition = field(default_factory=CursorPosition)


@dataclass(slots=True)
class EditorState:
    """Everything the rendering side reads to draw one frame."""

    lines: list[Line] = field(default_factory=lambda: [Line()])
    cursor: CursorPosition = field(default_factory=CursorPosition)
    viewport: ViewportState = field(default_factory=ViewportState)
    viewport_height: int = 24
    foreground: Color = WHITE
    waiting: bool = False
    show_cursor: bool = True
    title: str = ""
    file_name: str = ""
    breadcrumb: list[str] = field(default_factory=list)
    tree: Folder = field(default_factory=Folder)
    current_instruction: str | None = None

    @property
    def visible_lines(self) -> list[Line]:
        start = self.viewport.scroll_offset
        return self.lines[start:start + self.viewport_height]

    @property
    def text_lines(self) -> tuple[str, ...]:
        return tuple(line.text for line in self.lines)


class EditorStateMachine:
    """Apply playback instructions to the simulated editor.

    Only the foreground loop calls into this class; the playback thread
    reaches it exclusively through the message inbox.
    """

    def __init__(
        self,
        ack: "AckChannel",
        focus: Path,
        *,
        root: Path,
        viewport_height: int = 24,
        blacklist: Iterable[str] = DEFAULT_BLACKLIST,
    ) -> None:
        self._ack = ack
        self._root = root
        self._blacklist = tuple(blacklist)
        self.state = EditorState(viewport_height=max(1, viewport_height))
        self._load_focus(focus)

    @property
    def ack(self) -> "AckChannel":
        return self._ack

    def apply(self, instruction: Instruction) -> None:
        state = self.state
        state.current_instruction = repr(instruction)
        cursor = state.cursor

        if isinstance(instruction, MoveCursor):
            cursor.x = instruction.x
            cursor.y = instruction.y
            self._update_cursor()
        elif isinstance(instruction, TypeChar):
            self._extend_buffer()
            line = state.lines[cursor.y]
            line.spans.insert(cursor.x, Span(instruction.char, instruction.bold, state.foreground))
            cursor.x += 1
            self._update_cursor()
        elif isinstance(instruction, SetForegroundColor):
            state.foreground = instruction.color
        elif isinstance(instruction, Newline):
            cursor.x = instruction.reset_column
            cursor.y += 1
            self._update_cursor()
        elif isinstance(instruction, SetColumn):
            cursor.x = instruction.x
            self._update_cursor()
        elif isinstance(instruction, HideCursor):
            state.show_cursor = False
        elif isinstance(instruction, WaitForAck):
            state.waiting = True
        elif isinstance(instruction, UpdateFocus):
            self._ack = instruction.ack
            self._load_focus(instruction.path)
        elif isinstance(instruction, (Pause, WaitForQuit)):
            msg = f"{type(instruction).__name__} is handled by the playback engine"
            raise TypeError(msg)
        else:  # pragma: no cover - defensive guard
            msg = f"Unsupported instruction: {type(instruction)!r}"
            raise TypeError(msg)

    def on_key(self, event: "KeyEvent | None" = None) -> None:
        """Any key press means "continue"."""

        self.state.waiting = False
        self._ack.send()

    def resize(self, viewport_height: int) -> None:
        viewport_height = max(1, viewport_height)
        if viewport_height == self.state.viewport_height:
            return
        self.state.viewport_height = viewport_height
        self._update_cursor()

    def _extend_buffer(self) -> None:
        lines = self.state.lines
        cursor = self.state.cursor
        while cursor.y >= len(lines):
            lines.append(Line())
        spans = lines[cursor.y].spans
        while cursor.x > len(spans):
            spans.append(Span.empty())

    def _update_cursor(self) -> None:
        self._extend_buffer()
        state = self.state
        viewport = state.viewport
        height = state.viewport_height

        screen_y = state.cursor.y - viewport.scroll_offset
        if screen_y < 0:
            viewport.scroll_offset += screen_y
            screen_y = 0
        if screen_y >= height:
            viewport.scroll_offset += screen_y + 1 - height
            screen_y = height - 1

        viewport.screen_cursor.x = state.cursor.x
        viewport.screen_cursor.y = screen_y

    def _load_focus(self, focus: Path) -> None:
        if not focus.is_absolute():
            focus = self._root / focus
        state = self.state
        state.lines = [Line()]
        state.cursor = CursorPosition()
        state.viewport = ViewportState()

        try:
            state.title = str(focus.relative_to(self._root))
        except ValueError:
            state.title = str(focus)
        state.tree = read_file_tree(self._root, focus, self._blacklist)
        breadcrumb = path_breadcrumb(self._root, focus)
        state.file_name = breadcrumb.pop() if breadcrumb else ""
        state.breadcrumb = breadcrumb
        logger.debug("Editor focused on %s", state.title)
