"""Display formatting for device facts."""

from __future__ import annotations

GB = 1024 ** 3


def format_uptime(seconds: int | float) -> str:
    """Format *seconds* as ``"Xd Yh Zm"``, dropping the day part when zero."""
    total = max(int(seconds), 0)
    days, rem = divmod(total, 86400)
    hours, rem = divmod(rem, 3600)
    minutes = rem // 60
    if days:
        return f"{days}d {hours}h {minutes}m"
    return f"{hours}h {minutes}m"


def group_digits(value: int, sep: str = " ") -> str:
    """Group digits in threes from the right: 1234567890 -> "1 234 567 890"."""
    return f"{value:,}".replace(",", sep)


def bytes_to_gb(value: int | float, ndigits: int | None = None) -> float | int:
    """Convert bytes to GB.  ``ndigits=None`` rounds to a whole number."""
    gb = value / GB
    if ndigits is None:
        return int(round(gb))
    return round(gb, ndigits)


def kib_to_gb(value: int | float) -> int:
    return bytes_to_gb(value * 1024)
