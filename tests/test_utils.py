"""Tests for the formatting helpers used in log lines."""
import pytest

from pixel_post.utils import format_bytes_compact, format_duration


@pytest.mark.parametrize(
    "seconds, text",
    [
        (0.0125, "12.5ms"),
        (1.5, "1.50s"),
        (59.5, "59.50s"),
        (125.2, "2m 5s"),
    ],
)
def test_format_duration(seconds, text):
    assert format_duration(seconds) == text


def test_format_bytes_compact():
    assert format_bytes_compact(812) == "812B"
    assert format_bytes_compact(2048) == "2.0KiB"
