from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from typedemo import ScriptError
from typedemo.script import (
    ChangeDir,
    ChangeDirQuiet,
    RunCommand,
    RunCommandQuiet,
    RunCommandVisibleOutputOnly,
    RunEditor,
    load_script,
    parse_actions,
    tokenize_line,
)


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ('cd "my dir"', ["cd", "my dir"]),
        ("a\\ b c", ["a b", "c"]),
        ('say "hi', ["say", '"hi']),
        ("echo trailing\\", ["echo", "trailing\\"]),
        ('echo "a \\" b"', ["echo", 'a " b']),
        ('echo ""', ["echo", ""]),
        ("  spaced   out  ", ["spaced", "out"]),
        ("", []),
    ],
)
def test_tokenize_line(line: str, expected: list[str]) -> None:
    assert tokenize_line(line) == expected


def test_end_to_end_script_maps_sigils() -> None:
    actions = parse_actions("cd /tmp\n- echo hi\n# echo silent\necho visible")

    assert actions == [
        ChangeDir("/tmp"),
        RunCommandVisibleOutputOnly(("echo", "hi")),
        RunCommandQuiet(("echo", "silent")),
        RunCommand(("echo", "visible")),
    ]


def test_blank_lines_are_skipped_and_count_matches() -> None:
    text = "\n\necho one\n   \n#cd somewhere\n-cd other\n+ out.py in.py\n\n"
    actions = parse_actions(text)

    non_blank = [line for line in text.splitlines() if line.strip()]
    assert len(actions) == len(non_blank)
    assert actions[1] == ChangeDirQuiet("somewhere")
    assert actions[2] == ChangeDirQuiet("other")
    assert actions[3] == RunEditor(dest="out.py", src="in.py")


def test_cd_with_extra_arguments_is_a_command() -> None:
    assert parse_actions("cd a b") == [RunCommand(("cd", "a", "b"))]


def test_editor_line_named_cd_is_still_an_editor_action() -> None:
    assert parse_actions("+cd target") == [RunEditor(dest="cd", src="target")]


@pytest.mark.parametrize("line", ["+ out.txt", "+ out.txt in.txt extra", "+ a b c d"])
def test_editor_line_with_wrong_arity_fails(line: str) -> None:
    with pytest.raises(ScriptError) as excinfo:
        parse_actions(f"echo before\n{line}\necho after")
    assert excinfo.value.line_number == 2


def test_load_script_reads_utf8(script_factory: Callable[[str], Path]) -> None:
    path = script_factory('echo "héllo wörld"\n')
    assert load_script(path) == [RunCommand(("echo", "héllo wörld"))]


def test_action_str_renders_script_line() -> None:
    assert str(RunCommandQuiet(("echo", "a b"))) == '#"echo" "a b"'
    assert str(RunEditor("dst.py", "src.py")) == '+ "dst.py" "src.py"'


def test_command_action_requires_arguments() -> None:
    with pytest.raises(ValueError):
        RunCommand(())
