# tests/test_formatting.py
import pytest

from tab_easymotion.utils.formatting import (
    DAY,
    HOUR,
    MINUTE,
    clamp_heat,
    heat_color,
    heat_to_hsl,
    format_relative_time,
    size_class,
    usage_caption,
)

NOW = 1_700_000_000_000


@pytest.mark.parametrize("raw,expected", [
    (0.5, 0.5), (-1, 0.0), (3, 1.0), (float("nan"), 0.0), (None, 0.0), ("0.25", 0.25),
])
def test_clamp_heat(raw, expected):
    assert clamp_heat(raw) == expected


def test_heat_scale_endpoints():
    assert heat_to_hsl(0) == (210, 48, 70)
    assert heat_to_hsl(1) == (25, 80, 50)
    assert heat_color(0).startswith("#") and len(heat_color(0)) == 7
    assert heat_color(0) != heat_color(1)


@pytest.mark.parametrize("age,expected", [
    (1000, "just now"),
    (30 * 1000, "30 seconds ago"),
    (5 * MINUTE, "5 minutes ago"),
    (3 * HOUR, "3 hours ago"),
    (2 * DAY, "2 days ago"),
])
def test_relative_time(age, expected):
    assert format_relative_time(NOW - age, NOW) == expected


def test_relative_time_falls_back_to_date():
    out = format_relative_time(NOW - 30 * DAY, NOW)
    assert out.count("-") == 2


def test_usage_caption():
    assert usage_caption(0, 0, NOW) == "no usage yet"
    assert usage_caption(3, NOW - 2 * MINUTE, NOW) == "activated 3 times · last 2 minutes ago"


@pytest.mark.parametrize("n,expected", [(5, "size-xs"), (30, "size-sm"), (60, "size-md"), (90, "size-lg"), (150, "size-xl")])
def test_size_class(n, expected):
    assert size_class("x" * n) == expected
