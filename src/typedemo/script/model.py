from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Sequence


def _quote(token: str) -> str:
    return json.dumps(token, ensure_ascii=False)


def _join(args: Sequence[str]) -> str:
    return " ".join(_quote(arg) for arg in args)


@dataclass(frozen=True, slots=True)
class ChangeDir:
    """Print `cd <path>` at the prompt, then change directory."""

    path: str

    def __str__(self) -> str:
        return f"cd {_quote(self.path)}"


@dataclass(frozen=True, slots=True)
class ChangeDirQuiet:
    path: str

    def __str__(self) -> str:
        return f"#cd {_quote(self.path)}"


@dataclass(frozen=True, slots=True)
class RunCommand:
    """Type the command at the prompt, run it, wait for a key press."""

    args: tuple[str, ...]

    def __post_init__(self) -> None:
        _check_args(self.args)

    def __str__(self) -> str:
        return _join(self.args)


@dataclass(frozen=True, slots=True)
class RunCommandQuiet:
    args: tuple[str, ...]

    def __post_init__(self) -> None:
        _check_args(self.args)

    def __str__(self) -> str:
        return f"#{_join(self.args)}"


@dataclass(frozen=True, slots=True)
class RunCommandVisibleOutputOnly:
    args: tuple[str, ...]

    def __post_init__(self) -> None:
        _check_args(self.args)

    def __str__(self) -> str:
        return f"-{_join(self.args)}"


@dataclass(frozen=True, slots=True)
class RunEditor:
    """Copy `src` over `dest` and replay `dest` in the simulated editor."""

    dest: str
    src: str

    def __str__(self) -> str:
        return f"+ {_quote(self.dest)} {_quote(self.src)}"


Action = (
    ChangeDir
    | ChangeDirQuiet
    | RunCommand
    | RunCommandQuiet
    | RunCommandVisibleOutputOnly
    | RunEditor
)


def _check_args(args: tuple[str, ...]) -> None:
    if not args:
        msg = "Command must not be empty"
        raise ValueError(msg)
