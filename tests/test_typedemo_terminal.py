from __future__ import annotations

import io
import os
import sys
import termios
from pathlib import Path
from typing import Callable, Iterator, TextIO

import pytest

from typedemo import KeyEvent
from typedemo.cli import main
from typedemo.terminal import CTRL_C, KeyboardEventSource, cbreak


@pytest.fixture()
def pty_pair() -> Iterator[tuple[int, TextIO]]:
    master, slave = os.openpty()
    stream = os.fdopen(slave, "r", encoding="utf-8")
    try:
        yield master, stream
    finally:
        stream.close()
        os.close(master)


def test_ctrl_c_arrives_as_key_when_signals_disabled(pty_pair: tuple[int, TextIO]) -> None:
    master, stream = pty_pair
    source = KeyboardEventSource(stream)

    with cbreak(stream, signals=False):
        os.write(master, CTRL_C.encode())
        event = source.next_event(2.0)

    assert event == KeyEvent(CTRL_C)
    assert source.quit_test(event)


def test_cbreak_restores_terminal_modes(pty_pair: tuple[int, TextIO]) -> None:
    _, stream = pty_pair
    fd = stream.fileno()
    before = termios.tcgetattr(fd)

    with cbreak(stream, signals=False):
        lflag = termios.tcgetattr(fd)[3]
        assert not lflag & termios.ISIG
        assert not lflag & termios.ICANON
        assert not lflag & termios.ECHO

    with cbreak(stream):
        assert termios.tcgetattr(fd)[3] & termios.ISIG

    assert termios.tcgetattr(fd) == before


def test_cbreak_on_plain_stream_is_a_no_op() -> None:
    with pytest.raises(EOFError) as info:
        with cbreak(io.StringIO()):
            raise EOFError("done")

    assert info.value.__context__ is None


def test_cli_reports_closed_stdin(
    script_factory: Callable[[str], Path],
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.delenv("TYPEDEMO_CONFIG", raising=False)
    with open(os.devnull, encoding="utf-8") as devnull:
        monkeypatch.setattr(sys, "stdin", devnull)
        assert main([str(script_factory("#true\n"))]) == 1

    assert "Input closed" in capsys.readouterr().err
