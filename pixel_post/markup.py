# pixel_post/markup.py
from __future__ import annotations

"""
Markup rendering for run-length encoded images.

Each image row becomes a fixed-height flex container; each run becomes a block
of width `count * pixel_size` filled with its '#rrggbb' colour. The assembled
markup is then compacted with minify-html (whitespace collapsed, comments
dropped, attribute quotes removed where redundant). The compact form is what
gets posted and measured.
"""

from typing import List

import minify_html

from .core_types import RLEImage, rgb_to_hex
from .rle import count_runs

ROOT_STYLE = "display:flex;flex-direction:column;line-height:0"
ROW_STYLE = "display:flex;height:{h}px"
RUN_STYLE = "width:{w}px;height:{h}px;background:{c}"


def render_markup(rle: RLEImage, pixel_size: int) -> str:
    """Readable (uncompacted) markup for an RLE image."""
    if pixel_size < 1:
        raise ValueError(f"pixel_size must be a positive integer, got {pixel_size}")
    width = sum(run.count for run in rle[0]) if rle else 0
    lines: List[str] = [
        f"<!-- {width}x{len(rle)} px, {count_runs(rle)} runs, scale {pixel_size} -->",
        f'<div style="{ROOT_STYLE}">',
    ]
    row_style = ROW_STYLE.format(h=pixel_size)
    for row in rle:
        lines.append(f'  <div style="{row_style}">')
        for run in row:
            style = RUN_STYLE.format(
                w=run.count * pixel_size, h=pixel_size, c=rgb_to_hex(run.rgb)
            )
            lines.append(f'    <div style="{style}"></div>')
        lines.append("  </div>")
    lines.append("</div>")
    return "\n".join(lines) + "\n"


def compact_markup(markup: str) -> str:
    """Minify markup without changing how it renders."""
    return minify_html.minify(markup, keep_comments=False, keep_closing_tags=True)


def render_html(rle: RLEImage, pixel_size: int) -> str:
    """Render then compact; the result is what the size search measures."""
    return compact_markup(render_markup(rle, pixel_size))


def byte_length(text: str) -> int:
    return len(text.encode("utf-8"))


__all__ = ["render_markup", "compact_markup", "render_html", "byte_length"]
