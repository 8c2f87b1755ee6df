from __future__ import annotations

import html
import math
from pathlib import Path
from typing import TYPE_CHECKING

from .editor import EditorState, Line, Span

if TYPE_CHECKING:
    from PIL import ImageDraw

_BACKGROUND = "#272822"
_CURSOR = "#ffb454"


class HtmlRenderer:
    """Render the visible part of an editor frame to a standalone HTML page."""

    def __init__(self, background: str = _BACKGROUND) -> None:
        self._background = background

    def render(self, state: EditorState, path: Path, *, title: str | None = None) -> None:
        html_text = self.render_to_string(state, title=title)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(html_text, encoding="utf-8")

    def render_to_string(self, state: EditorState, *, title: str | None = None) -> str:
        title = title or state.title or "Editor Frame"
        rows = state.visible_lines
        body = "\n".join(self._render_line(idx, row, state) for idx, row in enumerate(rows))
        return (
            "<!DOCTYPE html>\n"
            "<html lang=\"en\">\n<head>\n<meta charset=\"utf-8\">\n"
            f"<title>{html.escape(title)}</title>\n"
            "<style>\n"
            f"body {{ background: {self._background}; color: #f8f8f2; "
            "font-family: 'Fira Code', 'Consolas', 'Menlo', monospace; }\n"
            "pre { line-height: 1.2; font-size: 14px; margin: 16px; }\n"
            f".cursor {{ outline: 1px solid {_CURSOR}; }}\n"
            "</style>\n</head>\n<body>\n<pre>\n"
            f"{body}\n"
            "</pre>\n</body>\n</html>\n"
        )

    def _render_line(self, row_idx: int, row: Line, state: EditorState) -> str:
        cursor = state.viewport.screen_cursor
        on_cursor_row = state.show_cursor and row_idx == cursor.y
        fragments = [
            self._render_span(span, on_cursor_row and col_idx == cursor.x)
            for col_idx, span in enumerate(row.spans)
        ]
        if on_cursor_row and cursor.x >= len(row.spans):
            fragments.append(self._render_span(Span.empty(), True))
        return "".join(fragments)

    @staticmethod
    def _render_span(span: Span, is_cursor: bool) -> str:
        char = html.escape(span.char) if span.char != " " else "&nbsp;"
        styles = [f"color: {span.foreground.hex};"]
        if span.bold:
            styles.append("font-weight: bold;")
        class_attr = " class=\"cursor\"" if is_cursor else ""
        return f"<span{class_attr} style=\"{''.join(styles)}\">{char}</span>"


class ImageExporter:
    """Export the visible part of an editor frame to PNG using Pillow.

    Characters are laid out on a fixed cell grid and drawn in their span
    colour; bold spans are overstruck one pixel to the right.
    """

    def __init__(
        self,
        *,
        font_path: str | None = None,
        font_size: int = 14,
        padding: int = 12,
        background: str = _BACKGROUND,
        cursor: str = _CURSOR,
    ) -> None:
        try:
            from PIL import ImageFont  # noqa: PLC0415  # lazy import
        except ImportError as exc:  # pragma: no cover - dependency guard
            msg = "Pillow is required for ImageExporter (pip install typedemo[snapshot])"
            raise RuntimeError(msg) from exc

        self._font = (
            ImageFont.truetype(font_path, font_size)
            if font_path is not None
            else ImageFont.load_default()
        )
        self._padding = padding
        self._background = background
        self._cursor = cursor

    def render(self, state: EditorState, path: Path) -> None:
        from PIL import Image, ImageDraw  # noqa: PLC0415  # lazy import

        rows = state.visible_lines
        cursor = state.viewport.screen_cursor
        columns = max((len(row.spans) for row in rows), default=0)
        if state.show_cursor:
            columns = max(columns, cursor.x + 1)
        cell_width, cell_height = self._cell_size()

        width = max(1, columns) * cell_width + self._padding * 2
        height = max(1, len(rows)) * cell_height + self._padding * 2
        image = Image.new("RGB", (width, height), color=self._background)
        draw = ImageDraw.Draw(image)

        for row_idx, row in enumerate(rows):
            top = self._padding + row_idx * cell_height
            for col_idx, span in enumerate(row.spans):
                left = self._padding + col_idx * cell_width
                self._draw_span(draw, span, left, top)

        if state.show_cursor and cursor.y < max(1, len(rows)):
            left = self._padding + cursor.x * cell_width
            top = self._padding + cursor.y * cell_height
            draw.rectangle(
                (left, top, left + cell_width - 1, top + cell_height - 1),
                outline=self._cursor,
            )

        path.parent.mkdir(parents=True, exist_ok=True)
        image.save(path)

    def _cell_size(self) -> tuple[int, int]:
        width = math.ceil(self._font.getlength("M"))
        _, _, _, bottom = self._font.getbbox("Mg")
        return max(1, width), max(1, bottom) + 2

    def _draw_span(self, draw: "ImageDraw.ImageDraw", span: Span, left: int, top: int) -> None:
        if not span.char.strip():
            return
        fill = span.foreground.hex
        draw.text((left, top), span.char, font=self._font, fill=fill)
        if span.bold:
            draw.text((left + 1, top), span.char, font=self._font, fill=fill)
