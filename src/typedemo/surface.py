from __future__ import annotations

import contextlib
import logging
import queue
from pathlib import Path
from typing import Sequence

from rich.console import Console, Group, RenderableType
from rich.live import Live
from rich.style import Style
from rich.table import Table
from rich.text import Text

from .config import DemoConfig
from .editor import EditorState, EditorStateMachine, Line
from .instruction import Instruction
from .playback import AckChannel, PlaybackEngine
from .shutdown import EventSource, KeyEvent, QuitFlag, QuittableEventSource, StopEvent
from .terminal import KeyboardEventSource, cbreak

logger = logging.getLogger(__name__)

CHROME_HEIGHT = 2
SIDEBAR_WIDTH = 24


class EditorView:
    """Lay out one frame: title bar, sidebar, buffer and footer."""

    def __init__(self, *, sidebar_width: int = SIDEBAR_WIDTH) -> None:
        self._sidebar_width = sidebar_width

    def render(self, state: EditorState) -> RenderableType:
        header = Text(f" {state.title} ", style="bold reverse")

        body = Table.grid(expand=True)
        body.add_column(width=self._sidebar_width, no_wrap=True)
        body.add_column(ratio=1, no_wrap=True)
        body.add_row(self._render_sidebar(state), self._render_buffer(state))

        footer = Text()
        if state.waiting:
            footer.append(" waiting ", style="black on yellow")
            footer.append(" ")
        footer.append(state.current_instruction or "", style="dim")
        return Group(header, body, footer)

    def _render_sidebar(self, state: EditorState) -> Text:
        text = Text(no_wrap=True, overflow="ellipsis")
        for segment in state.breadcrumb:
            text.append(f"{segment}/\n", style="bold")
        if state.file_name:
            indent = " " * (len(state.breadcrumb) * 2)
            text.append(f"{indent}{state.file_name}\n", style="bold cyan")
        for name in state.tree.folders:
            text.append(f"{name}/\n", style="blue")
        for name in state.tree.files:
            text.append(f"{name}\n")
        text.rstrip()
        return text

    def _render_buffer(self, state: EditorState) -> Text:
        text = Text(no_wrap=True, overflow="crop")
        cursor = state.viewport.screen_cursor
        visible = state.visible_lines
        for row in range(state.viewport_height):
            line = visible[row] if row < len(visible) else Line()
            show = state.show_cursor and row == cursor.y
            text.append_text(self._render_line(line, cursor.x if show else None))
            if row < state.viewport_height - 1:
                text.append("\n")
        return text

    @staticmethod
    def _render_line(line: Line, cursor_x: int | None) -> Text:
        text = Text()
        for column, span in enumerate(line.spans):
            style = Style(color=span.foreground.hex, bold=span.bold, reverse=column == cursor_x)
            text.append(span.char, style=style)
        if cursor_x is not None and cursor_x >= len(line.spans):
            text.append(" ", style="reverse")
        return text


class EditorSurface:
    """Foreground loop of an editor session.

    Applies instructions from the inbox in delivery order, turns key presses
    into acknowledgments and stops when the event source says so.
    """

    def __init__(
        self,
        machine: EditorStateMachine,
        events: QuittableEventSource,
        inbox: "queue.SimpleQueue[Instruction]",
        *,
        console: Console,
        view: EditorView | None = None,
        poll_interval: float = 0.02,
        screen: bool = True,
    ) -> None:
        self._machine = machine
        self._events = events
        self._inbox = inbox
        self._console = console
        self._view = view or EditorView()
        self._poll_interval = poll_interval
        self._screen = screen

    def run(self) -> EditorState:
        state = self._machine.state
        with Live(
            self._view.render(state),
            console=self._console,
            screen=self._screen,
            auto_refresh=False,
            transient=False,
        ) as live:
            while True:
                changed = self._fit_viewport()
                changed = self._drain_inbox() or changed
                event = self._events.next_event(self._poll_interval)
                if isinstance(event, StopEvent) or self._events.quit_test(event):
                    # the engine emits everything before raising the flag
                    if self._drain_inbox():
                        live.update(self._view.render(state), refresh=True)
                    break
                if isinstance(event, KeyEvent):
                    self._machine.on_key(event)
                    changed = True
                if changed:
                    live.update(self._view.render(state), refresh=True)
        return state

    def _drain_inbox(self) -> bool:
        applied = False
        while True:
            try:
                instruction = self._inbox.get_nowait()
            except queue.Empty:
                return applied
            self._machine.apply(instruction)
            applied = True

    def _fit_viewport(self) -> bool:
        height = max(1, self._console.size.height - CHROME_HEIGHT)
        if height == self._machine.state.viewport_height:
            return False
        self._machine.resize(height)
        return True


def run_editor_session(
    focus: Path,
    instructions: Sequence[Instruction],
    *,
    root: Path,
    config: DemoConfig,
    console: Console,
    events: EventSource | None = None,
    screen: bool = True,
) -> EditorState:
    """Play `instructions` for `focus` and return the final editor state."""

    ack = AckChannel()
    quit_flag = QuitFlag()
    inbox: "queue.SimpleQueue[Instruction]" = queue.SimpleQueue()

    machine = EditorStateMachine(
        ack,
        focus,
        root=root,
        viewport_height=console.size.height - CHROME_HEIGHT,
        blacklist=config.tree_blacklist,
    )
    engine = PlaybackEngine(
        instructions,
        inbox.put,
        ack,
        quit_flag,
        delay_range_ms=config.typing_delay_ms,
    )
    surface = EditorSurface(
        machine,
        QuittableEventSource(events or KeyboardEventSource(), quit_flag),
        inbox,
        console=console,
        poll_interval=config.poll_interval,
        screen=screen,
    )

    keyboard = cbreak(signals=False) if events is None else contextlib.nullcontext()
    with keyboard:
        engine.start()
        state = surface.run()
    engine.join(timeout=1.0)
    if engine.is_alive():
        logger.debug("Editor closed before playback finished")
    return state
