"""Tests for markup rendering and compaction."""
import pytest

from pixel_post.core_types import RasterImage, Run
from pixel_post.markup import byte_length, compact_markup, render_html, render_markup
from pixel_post.rle import encode_rle


def test_red_pair_renders_one_8px_block():
    img = RasterImage.from_flat(2, 1, [255, 0, 0, 255, 255, 0, 0, 255])
    rle = encode_rle(img)
    assert rle == [[Run(255, 0, 0, 2)]]

    raw = render_markup(rle, 4)
    assert raw.count("background:") == 1
    assert "width:8px;height:4px;background:#ff0000" in raw
    assert "display:flex;height:4px" in raw

    html = render_html(rle, 4)
    assert "width:8px" in html
    assert "#ff0000" in html


def test_hex_channels_are_zero_padded():
    raw = render_markup([[Run(1, 10, 0, 1)]], 1)
    assert "background:#010a00" in raw


def test_block_width_scales_with_count():
    rle = [[Run(0, 0, 0, 3), Run(255, 255, 255, 1)]]
    raw = render_markup(rle, 5)
    assert "width:15px;height:5px;background:#000000" in raw
    assert "width:5px;height:5px;background:#ffffff" in raw


def test_one_container_per_row():
    rle = [[Run(0, 0, 0, 1)], [Run(0, 0, 0, 1)], [Run(0, 0, 0, 1)]]
    raw = render_markup(rle, 2)
    assert raw.count("display:flex;height:2px") == 3


def test_compaction_drops_comments_and_whitespace():
    rle = [[Run(0, 0, 0, 2), Run(255, 255, 255, 2)], [Run(255, 255, 255, 4)]]
    raw = render_markup(rle, 3)
    html = compact_markup(raw)
    assert "<!--" in raw
    assert "<!--" not in html
    assert html.count("\n") < raw.count("\n")
    assert byte_length(html) < byte_length(raw)
    assert html.count("background:") == 3


def test_byte_length_counts_utf8_bytes():
    assert byte_length("ab") == 2
    assert byte_length("é") == 2


def test_pixel_size_must_be_positive():
    with pytest.raises(ValueError):
        render_markup([[Run(0, 0, 0, 1)]], 0)
