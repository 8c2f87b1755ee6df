from __future__ import annotations

import io
import random
from pathlib import Path

import pyte
import pytest
from rich.console import Console

from typedemo import (
    AckChannel,
    Color,
    CommandEcho,
    DemoConfig,
    EditorStateMachine,
    EditorView,
    HideCursor,
    HtmlRenderer,
    ImageExporter,
    InstructionCompiler,
    KeyEvent,
    Pause,
    SetForegroundColor,
    TypeChar,
    WaitForAck,
    WaitForQuit,
    finalize_instructions,
    format_prompt,
    highlight,
    run_editor_session,
)

FAST = DemoConfig(typing_delay_ms=(0, 0), intro_pause_ms=0, poll_interval=0.001)


class KeyMasher:
    """Presses a key on every poll."""

    def __init__(self, key: str = "k") -> None:
        self._key = key
        self.polls = 0

    def next_event(self, timeout: float) -> KeyEvent:
        self.polls += 1
        return KeyEvent(self._key)

    def quit_test(self, event: object) -> bool:
        return event == KeyEvent("\x03")


def _compile(source: str, extension: str) -> list:
    compiled = InstructionCompiler().compile(highlight(source, extension))
    return finalize_instructions(compiled, intro_pause_ms=0)


def test_session_types_whole_file_then_quits(tmp_path: Path, string_console: Console) -> None:
    focus = tmp_path / "hello.py"
    source = "def hello():\n    return 'hi'\n"
    focus.write_text(source, encoding="utf-8")

    state = run_editor_session(
        focus,
        _compile(source, ".py"),
        root=tmp_path,
        config=FAST,
        console=string_console,
        events=KeyMasher(),
        screen=False,
    )

    assert [line.text for line in state.lines] == ["def hello():", "    return 'hi'"]
    assert state.title == "hello.py"
    assert state.viewport_height == 18
    assert state.waiting is False


def test_ctrl_c_closes_session_early(tmp_path: Path, string_console: Console) -> None:
    focus = tmp_path / "notes.txt"
    focus.write_text("", encoding="utf-8")

    state = run_editor_session(
        focus,
        [TypeChar("a"), WaitForAck(), WaitForQuit()],
        root=tmp_path,
        config=FAST,
        console=string_console,
        events=KeyMasher("\x03"),
        screen=False,
    )

    assert "".join(state.text_lines) in {"", "a"}


def test_editor_view_renders_buffer_and_sidebar(tmp_path: Path) -> None:
    (tmp_path / "lib").mkdir()
    (tmp_path / "setup.cfg").write_text("", encoding="utf-8")
    machine = EditorStateMachine(AckChannel(), Path("app.py"), root=tmp_path, viewport_height=4)
    machine.apply(SetForegroundColor(Color(255, 0, 0)))
    for char in "print":
        machine.apply(TypeChar(char))
    machine.apply(WaitForAck())

    console = Console(file=io.StringIO(), width=60, height=10, color_system=None)
    console.print(EditorView(sidebar_width=16).render(machine.state))
    output = console.file.getvalue()

    assert "app.py" in output
    assert "print" in output
    assert "lib/" in output
    assert "setup.cfg" in output
    assert "waiting" in output


def test_prompt_abbreviates_home(tmp_path: Path) -> None:
    assert format_prompt(tmp_path / "proj", home=tmp_path) == "~/proj $ "
    assert format_prompt(tmp_path, home=tmp_path) == "~/ $ "
    assert format_prompt(Path("/opt/x"), home=tmp_path) == "/opt/x $ "


def test_echo_types_command_at_prompt(tmp_path: Path, string_console: Console) -> None:
    delays: list[float] = []
    echo = CommandEcho(
        string_console,
        delay_range_ms=(35, 85),
        rng=random.Random(3),
        sleep=delays.append,
        home=tmp_path,
    )
    echo.echo(tmp_path / "proj", ["ls", "-la", "my dir"])

    screen = pyte.Screen(80, 5)
    stream = pyte.Stream(screen)
    stream.feed(string_console.file.getvalue().replace("\n", "\r\n"))

    assert screen.display[0].rstrip() == "~/proj $ ls -la my dir"
    assert screen.buffer[0][9].fg == "cyan"
    assert screen.buffer[0][0].fg == "green"
    # one delay per character plus one per argument separator
    assert len(delays) == len("ls") + len("-la") + len("my dir") + 2
    assert all(0.035 <= delay <= 0.085 for delay in delays)


def test_html_snapshot_marks_cursor_and_colours(artifact_dir: Path, tmp_path: Path) -> None:
    machine = EditorStateMachine(AckChannel(), Path("a.py"), root=tmp_path, viewport_height=3)
    for instruction in _compile("x = 1\n", ".py")[:-1]:
        if not isinstance(instruction, Pause):
            machine.apply(instruction)

    output = artifact_dir / "frame.html"
    HtmlRenderer().render(machine.state, output, title="Frame")
    text = output.read_text(encoding="utf-8")

    assert "<title>Frame</title>" in text
    assert 'class="cursor"' in text
    assert "color: #" in text
    assert ">x<" in text


def test_png_snapshot_draws_span_colours(artifact_dir: Path, tmp_path: Path) -> None:
    image_module = pytest.importorskip("PIL.Image")
    machine = EditorStateMachine(AckChannel(), Path("a.txt"), root=tmp_path, viewport_height=3)
    machine.apply(SetForegroundColor(Color(255, 0, 0)))
    for char in "HELLO":
        machine.apply(TypeChar(char))
    machine.apply(HideCursor())

    red_frame = artifact_dir / "red.png"
    ImageExporter().render(machine.state, red_frame)

    machine.apply(SetForegroundColor(Color(0, 0, 255)))
    for char in "WORLD":
        machine.apply(TypeChar(char))
    both_frame = artifact_dir / "both.png"
    ImageExporter().render(machine.state, both_frame)

    with image_module.open(red_frame) as image:
        red_pixels = list(image.convert("RGB").getdata())
    with image_module.open(both_frame) as image:
        both_pixels = list(image.convert("RGB").getdata())

    assert any(r > 128 and g < 64 and b < 64 for r, g, b in red_pixels)
    assert not any(b > 128 and r < 64 for r, g, b in red_pixels)
    assert any(b > 128 and r < 64 and g < 64 for r, g, b in both_pixels)


def test_png_snapshot_outlines_cursor(artifact_dir: Path, tmp_path: Path) -> None:
    image_module = pytest.importorskip("PIL.Image")
    machine = EditorStateMachine(AckChannel(), Path("a.txt"), root=tmp_path, viewport_height=3)
    machine.apply(TypeChar("x"))

    output = artifact_dir / "cursor.png"
    ImageExporter(cursor="#00ff00").render(machine.state, output)

    with image_module.open(output) as image:
        assert (0, 255, 0) in set(image.convert("RGB").getdata())
