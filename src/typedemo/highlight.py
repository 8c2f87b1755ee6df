from __future__ import annotations

import logging
from dataclasses import dataclass

from pygments import lex
from pygments.lexers import TextLexer, get_lexer_by_name, get_lexer_for_filename
from pygments.lexer import Lexer
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from .instruction import WHITE, Color

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StyledRun:
    """A stretch of source text sharing one style."""

    text: str
    foreground: Color = WHITE
    bold: bool = False


def highlight(source: str, extension: str, *, style: str = "monokai") -> list[list[StyledRun]]:
    """Split `source` into lines of styled runs.

    The result holds one entry per source line; line terminators are not
    part of any run and a single trailing newline does not open an extra
    line.
    """

    source = source.replace("\r\n", "\n")
    lexer = _lexer_for_extension(extension)
    style_cls = get_style_by_name(style)
    lines: list[list[StyledRun]] = [[]]

    for token_type, value in lex(source, lexer):
        token_style = style_cls.style_for_token(token_type)
        color = Color.from_hex(token_style["color"]) if token_style["color"] else WHITE
        bold = bool(token_style["bold"])
        pieces = value.split("\n")
        for index, piece in enumerate(pieces):
            if index > 0:
                lines.append([])
            if piece:
                _append_run(lines[-1], StyledRun(piece, color, bold))

    if len(lines) > 1 and not lines[-1]:
        lines.pop()
    return lines


def _append_run(line: list[StyledRun], run: StyledRun) -> None:
    if line and line[-1].foreground == run.foreground and line[-1].bold == run.bold:
        line[-1] = StyledRun(line[-1].text + run.text, run.foreground, run.bold)
        return
    line.append(run)


def _lexer_for_extension(extension: str) -> Lexer:
    extension = extension.lstrip(".")
    try:
        return get_lexer_for_filename(f"file.{extension}", stripnl=False, ensurenl=False)
    except ClassNotFound:
        pass
    try:
        return get_lexer_by_name(extension, stripnl=False, ensurenl=False)
    except ClassNotFound:
        logger.debug("No lexer for extension %r, falling back to plain text", extension)
        return TextLexer(stripnl=False, ensurenl=False)
