#!/usr/bin/env python3
"""
post_image.py
Turn an image into dithered HTML pixel art that fits a per-post byte budget.

Usage:
  python post_image.py SRC [--out OUT.html] --colors N --pixel-size S --max-size BYTES
                       [--timeout SECONDS] [--start-width W] [--preview OUT.png] --debug

SRC:
  A local image path or an http(s) URL. Any Pillow-readable image.

Colours:
  0     : let the quantizer choose (up to 256)
  1     : black and white only
  2..128: exactly that many colours derived from the image

Output:
  Compact HTML. If --out is omitted, writes <stem>_post.html next to SRC
  (or in the current directory for URLs).

Notes:
  The width is found by an adaptive search that stops on an exact byte match,
  on timeout, or when it runs out of new widths to try. The timeout is checked
  between trials, so one slow trial can overrun it.
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from pixel_post.constants import (
    COLORS_MAX,
    COLORS_MIN,
    DEFAULT_COLORS,
    DEFAULT_MAX_SIZE,
    DEFAULT_PIXEL_SIZE,
    MAX_SIZE_MAX,
    MAX_SIZE_MIN,
    PIXEL_SIZE_MAX,
    PIXEL_SIZE_MIN,
    SEARCH_TIMEOUT_S,
)
from pixel_post.errors import (
    BudgetExhaustedError,
    ImageDecodeError,
    ImageFetchError,
    RequestValidationError,
)
from pixel_post.image_io import fetch_image, is_url, load_image, save_png
from pixel_post.pipeline import fit_image
from pixel_post.request import check_int_range
from pixel_post.transform import transform_image
from pixel_post.utils import (
    colour_usage_report,
    debug_log,
    enable_line_buffered_stdout,
    error,
    format_bytes_compact,
    format_duration,
    key_value_pairs_to_string,
    log,
    print_banner,
    print_config_line,
)

# CLI args & small helpers


def _ranged_int(name: str, lo: int, hi: int):
    """argparse type that enforces [lo, hi] with the same rules as the HTTP body."""

    def parse(text: str) -> int:
        try:
            value = int(text)
        except ValueError:
            raise argparse.ArgumentTypeError(f"{name} must be an integer") from None
        try:
            return check_int_range(name, value, lo, hi)
        except RequestValidationError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from None

    return parse


def parse_cli_args(argv: Optional[list] = None) -> argparse.Namespace:
    """
    Parse CLI arguments.

    Returns:
      argparse.Namespace with:
        src: path or URL
        out: optional Path for the HTML
        colors, pixel_size, max_size: ints in the documented ranges
        timeout: search timeout in seconds
        start_width: optional first width to try
        preview: optional Path for a PNG of the chosen rendering
        debug: bool for per-trial logging
    """
    parser = argparse.ArgumentParser(
        prog="post_image",
        description="Dither an image into HTML pixel art under a byte budget.",
    )
    parser.add_argument("src", help="Input image path or http(s) URL")
    parser.add_argument("--out", type=Path, default=None, help="Output HTML path")
    parser.add_argument(
        "--colors",
        type=_ranged_int("colors", COLORS_MIN, COLORS_MAX),
        default=DEFAULT_COLORS,
        help="Palette size: 0 = auto, 1 = black/white, N = N colours.",
    )
    parser.add_argument(
        "--pixel-size",
        type=_ranged_int("pixel_size", PIXEL_SIZE_MIN, PIXEL_SIZE_MAX),
        default=DEFAULT_PIXEL_SIZE,
        help="Rendered size of one pixel in px.",
    )
    parser.add_argument(
        "--max-size",
        type=_ranged_int("max_size", MAX_SIZE_MIN, MAX_SIZE_MAX),
        default=DEFAULT_MAX_SIZE,
        help="Byte budget for the compact HTML.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=SEARCH_TIMEOUT_S,
        help="Soft search time limit in seconds.",
    )
    parser.add_argument(
        "--start-width",
        type=int,
        default=None,
        help="First width to try. Omit to estimate from the budget.",
    )
    parser.add_argument(
        "--preview", type=Path, default=None, help="Also write a PNG of the result"
    )
    parser.add_argument("--debug", action="store_true", help="Log every trial")
    args = parser.parse_args(argv)
    if args.start_width is not None and args.start_width < 1:
        parser.error("--start-width must be >= 1")
    if args.timeout <= 0:
        parser.error("--timeout must be > 0")
    return args


def _default_out_path(src: str) -> Path:
    if is_url(src):
        stem = Path(urlparse(src).path).stem or "image"
        return Path.cwd() / f"{stem}_post.html"
    p = Path(src)
    return p.with_name(f"{p.stem}_post.html")


# Entry point


def main(argv: Optional[list] = None) -> int:
    """
    CLI entry point.

    Exit status: 0 on success, 1 when nothing fits the budget, 2 on input errors.
    """
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)
    t_start = time.perf_counter()

    print_banner(args.src)
    print_config_line(
        "fit",
        [
            ("Colors", args.colors),
            ("Pixel size", args.pixel_size),
            ("Budget", args.max_size),
            ("Timeout", args.timeout),
        ],
        debug=False,
    )

    try:
        source = fetch_image(args.src) if is_url(args.src) else load_image(Path(args.src))
    except (ImageFetchError, ImageDecodeError) as exc:
        error(str(exc))
        return 2

    if args.debug:
        debug_log(f"Loaded {source.width}x{source.height}")

    try:
        result = fit_image(
            source,
            colors=args.colors,
            pixel_size=args.pixel_size,
            max_size=args.max_size,
            timeout=args.timeout,
            start_width=args.start_width,
            debug=args.debug,
        )
    except BudgetExhaustedError as exc:
        error(str(exc))
        return 1

    out_path = args.out or _default_out_path(args.src)
    out_path.write_text(result.markup, encoding="utf-8")

    log(
        f"Wrote {out_path.name} | size={result.width}x{result.height} | "
        f"bytes={format_bytes_compact(result.size)} of {format_bytes_compact(result.budget)}"
    )
    log(
        key_value_pairs_to_string(
            [
                ("Exact", result.exact),
                ("Trials", result.trials),
                ("Fill", f"{result.size / result.budget:.1%}"),
            ]
        )
    )

    if args.preview is not None:
        # deterministic transform: same width gives the same pixels
        preview = transform_image(source, result.width, args.colors)
        written = save_png(args.preview, preview)
        log(f"Preview {written.name}")
        if args.debug:
            debug_log("Colours used:")
            for hex_code, count in colour_usage_report(preview.rgb)[:16]:
                debug_log(f"  {hex_code}: {count:,}")

    log(f"Total time {format_duration(time.perf_counter() - t_start)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
