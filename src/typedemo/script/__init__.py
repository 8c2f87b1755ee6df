from __future__ import annotations

from .model import (
    Action,
    ChangeDir,
    ChangeDirQuiet,
    RunCommand,
    RunCommandQuiet,
    RunCommandVisibleOutputOnly,
    RunEditor,
)
from .parser import load_script, parse_actions, tokenize_line

__all__ = [
    "Action",
    "ChangeDir",
    "ChangeDirQuiet",
    "RunCommand",
    "RunCommandQuiet",
    "RunCommandVisibleOutputOnly",
    "RunEditor",
    "load_script",
    "parse_actions",
    "tokenize_line",
]
