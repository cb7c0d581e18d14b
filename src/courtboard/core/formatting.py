"""Clock and color formatting helpers shared by log lines and the display."""

import re

_FULL_HEX_RE = re.compile(r"^#([0-9a-fA-F]{6})$")
_SHORT_HEX_RE = re.compile(r"^#([0-9a-fA-F]{3})$")

DEFAULT_COLOR = "#6B7280"


def format_clock(total_seconds: int) -> str:
    """Render seconds as ``m:ss`` (e.g. 605 -> ``10:05``)."""
    total_seconds = max(0, int(total_seconds))
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes}:{seconds:02d}"


def format_minutes(seconds_played: int) -> str:
    """Render seconds played as decimal minutes with one digit."""
    return f"{seconds_played / 60:.1f}"


def normalize_hex_color(value: str, fallback: str = DEFAULT_COLOR) -> str:
    """Return ``value`` as canonical ``#RRGGBB`` or ``fallback``.

    Accepts 6-digit and 3-digit forms in any case; anything else
    (including non-strings) yields the fallback.
    """
    if not isinstance(value, str):
        return fallback
    value = value.strip()
    if _FULL_HEX_RE.match(value):
        return value.upper()
    short = _SHORT_HEX_RE.match(value)
    if short:
        r, g, b = short.group(1)
        return f"#{r}{r}{g}{g}{b}{b}".upper()
    return fallback
