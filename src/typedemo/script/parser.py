from __future__ import annotations

import logging
from pathlib import Path

from ..errors import ScriptError
from .model import (
    Action,
    ChangeDir,
    ChangeDirQuiet,
    RunCommand,
    RunCommandQuiet,
    RunCommandVisibleOutputOnly,
    RunEditor,
)

logger = logging.getLogger(__name__)

QUIET_SIGIL = "#"
OUTPUT_ONLY_SIGIL = "-"
EDITOR_SIGIL = "+"
SIGILS = (QUIET_SIGIL, OUTPUT_ONLY_SIGIL, EDITOR_SIGIL)


def load_script(path: Path) -> list[Action]:
    return parse_actions(path.read_text(encoding="utf-8"))


def parse_actions(text: str) -> list[Action]:
    """Turn script text into actions, one per non-blank line.

    The whole script is parsed before anything runs, so a malformed line
    aborts the demo before its first action.
    """

    actions: list[Action] = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        action = _parse_line(line, line_number)
        if action is not None:
            actions.append(action)
    logger.debug("Parsed %d actions", len(actions))
    return actions


def _parse_line(line: str, line_number: int) -> Action | None:
    sigil = line[0] if line[:1] in SIGILS else ""
    tokens = tokenize_line(line[len(sigil):])
    if not tokens:
        return None

    if sigil != EDITOR_SIGIL and len(tokens) == 2 and tokens[0] == "cd":
        if sigil in (QUIET_SIGIL, OUTPUT_ONLY_SIGIL):
            return ChangeDirQuiet(tokens[1])
        return ChangeDir(tokens[1])

    if sigil == QUIET_SIGIL:
        return RunCommandQuiet(tuple(tokens))
    if sigil == OUTPUT_ONLY_SIGIL:
        return RunCommandVisibleOutputOnly(tuple(tokens))
    if sigil == EDITOR_SIGIL:
        if len(tokens) != 2:
            msg = (
                "editor action `+` expects exactly 2 arguments, a destination "
                f"file and a source file, got {len(tokens)}"
            )
            raise ScriptError(msg, line_number=line_number)
        return RunEditor(dest=tokens[0], src=tokens[1])
    return RunCommand(tuple(tokens))


def tokenize_line(line: str) -> list[str]:
    """Split a command line into arguments.

    Spaces separate tokens, `"..."` groups text into one token and a
    backslash takes the next character literally. Malformed input is
    recovered rather than rejected: an unterminated quote keeps its opening
    `"` and a trailing lone backslash is kept as-is.
    """

    tokens: list[str] = []
    current: list[str] = []
    escape = False
    in_quotes = False

    for char in line:
        if escape:
            current.append(char)
            escape = False
        elif char == "\\":
            escape = True
        elif in_quotes:
            if char == '"':
                in_quotes = False
                tokens.append("".join(current))
                current.clear()
            else:
                current.append(char)
        elif char == '"':
            in_quotes = True
        elif char == " ":
            if current:
                tokens.append("".join(current))
                current.clear()
        else:
            current.append(char)

    if in_quotes:
        current.insert(0, '"')
    if escape:
        current.append("\\")
    if current:
        tokens.append("".join(current))
    return tokens
