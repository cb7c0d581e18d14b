"""courtboard — live basketball scoreboard with multi-instance clock sync."""

__version__ = "0.1.0"
