# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
General formatting helpers for recsync.
"""

from datetime import timedelta


def format_duration(td: timedelta) -> str:
    """
    Convert a timedelta into a human-readable string showing only relevant units.

    The output string includes days, hours, minutes, and seconds, but omits
    units that are zero.

    Args:
        td (timedelta): The duration to format.

    Returns:
        str: A formatted string representing the duration, e.g., '12h' or '1d 2h 3m 4s'.
    """
    total_seconds = int(td.total_seconds())

    days, remainder = divmod(total_seconds, 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes, seconds = divmod(remainder, 60)

    parts = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if seconds > 0 or total_seconds == 0:
        parts.append(f"{seconds}s")

    return " ".join(parts)


def format_size(n_bytes: int) -> str:
    """
    Format a number of bytes using the largest binary unit that keeps the value at least 1.

    Args:
        n_bytes (int): Size in bytes.

    Returns:
        str: The formatted size, e.g., '512 B', '1.5 GiB'.
    """
    value = float(n_bytes)
    for unit in ("B", "KiB", "MiB", "GiB", "TiB"):
        if value < 1024 or unit == "TiB":
            break
        value /= 1024

    if unit == "B":
        return f"{int(value)} B"
    return f"{value:.1f} {unit}"
