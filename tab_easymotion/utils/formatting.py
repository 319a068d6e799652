# formatting.py - display helpers shared by the TUI and the CLI
# heat -> colour, timestamps -> "5 minutes ago", title length -> card size

import colorsys
import math
import time
from datetime import datetime
from typing import Optional

SECOND = 1000
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE
DAY = 24 * HOUR


def clamp_heat(value) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(v):
        return 0.0
    return min(1.0, max(0.0, v))


def heat_to_hsl(heat: float):
    """Cold = pale blue (210°), hot = saturated orange (25°)."""
    heat = clamp_heat(heat)
    hue = round(210 - heat * 185)
    saturation = round(48 + heat * 32)
    lightness = round(70 - heat * 20)
    return hue, saturation, lightness


def heat_color(heat: float) -> str:
    """Hex colour for a heat value (Rich and Textual both accept it)."""
    h, s, l = heat_to_hsl(heat)
    r, g, b = colorsys.hls_to_rgb(h / 360, l / 100, s / 100)
    return "#{:02x}{:02x}{:02x}".format(round(r * 255), round(g * 255), round(b * 255))


def format_absolute_time(timestamp: int) -> str:
    try:
        return datetime.fromtimestamp(timestamp / 1000).strftime("%Y-%m-%d %H:%M")
    except (OverflowError, OSError, ValueError):
        return ""


def format_relative_time(timestamp: int, now: Optional[int] = None) -> str:
    if not timestamp:
        return ""
    now = int(time.time() * 1000) if now is None else now
    diff = now - timestamp

    if diff < 5 * SECOND:
        return "just now"
    if diff < MINUTE:
        return f"{diff // SECOND} seconds ago"
    if diff < HOUR:
        return f"{diff // MINUTE} minutes ago"
    if diff < DAY:
        return f"{diff // HOUR} hours ago"
    if diff < 14 * DAY:
        return f"{diff // DAY} days ago"
    return format_absolute_time(timestamp)


def usage_caption(count: int, last_activated_at: int, now: Optional[int] = None) -> str:
    parts = []
    if count > 0:
        parts.append(f"activated {count} times")
    relative = format_relative_time(last_activated_at, now)
    if relative:
        parts.append(f"last {relative}")
    return " · ".join(parts) if parts else "no usage yet"


def size_class(title: str) -> str:
    n = len(title)
    if n <= 20:
        return "size-xs"
    if n <= 40:
        return "size-sm"
    if n <= 70:
        return "size-md"
    if n <= 100:
        return "size-lg"
    return "size-xl"
