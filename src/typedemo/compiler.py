from __future__ import annotations

from typing import Sequence

from .highlight import StyledRun
from .instruction import (
    Color,
    Instruction,
    MoveCursor,
    Newline,
    Pause,
    SetColumn,
    SetForegroundColor,
    TypeChar,
    WaitForQuit,
)

INTRO_PAUSE_MS = 1000


class InstructionCompiler:
    """Plan the keystrokes that reproduce highlighted source in the editor.

    Leading whitespace is never typed: the editor auto-indents, so each
    `Newline` resets the column to the indent of the line that follows.
    """

    def __init__(self, *, tab_width: int = 4) -> None:
        if tab_width < 1:
            msg = "tab_width must be positive"
            raise ValueError(msg)
        self._tab_width = tab_width

    def compile(self, lines: Sequence[Sequence[StyledRun]]) -> list[Instruction]:
        prepared = [self._split_indent(line) for line in lines]
        instructions: list[Instruction] = [MoveCursor(0, 0)]
        if prepared and prepared[0][0]:
            instructions.append(SetColumn(prepared[0][0]))

        current: Color | None = None
        for index, (_, runs) in enumerate(prepared):
            for run in runs:
                if run.foreground != current:
                    instructions.append(SetForegroundColor(run.foreground))
                    current = run.foreground
                instructions.extend(TypeChar(char, run.bold) for char in run.text)
            next_indent = prepared[index + 1][0] if index + 1 < len(prepared) else 0
            instructions.append(Newline(reset_column=next_indent))
        return instructions

    def _split_indent(self, line: Sequence[StyledRun]) -> tuple[int, list[StyledRun]]:
        indent = 0
        runs: list[StyledRun] = []
        leading = True
        for run in line:
            text = run.text.replace("\t", " " * self._tab_width)
            if leading:
                stripped = text.lstrip(" ")
                indent += len(text) - len(stripped)
                text = stripped
                leading = not text
            if text:
                runs.append(StyledRun(text, run.foreground, run.bold))
        return indent, runs


def finalize_instructions(
    compiled: Sequence[Instruction],
    *,
    intro_pause_ms: int = INTRO_PAUSE_MS,
) -> list[Instruction]:
    """Wrap one compiled session for playback.

    The trailing instruction is redundant and dropped; the session opens
    with a pause and ends by waiting for the key press that quits it.
    """

    instructions: list[Instruction] = list(compiled[:-1])
    instructions.insert(0, Pause(intro_pause_ms))
    instructions.append(WaitForQuit())
    return instructions
