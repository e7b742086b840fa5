"""
Human-readable durations and file sizes for the status lines.
"""

from datetime import timedelta
from typing import Union

SIZE_UNITS = ("B", "KB", "MB", "GB", "TB", "PB")


def format_timedelta(td_object: timedelta) -> str:
    """
    Formats a timedelta as "HH:MM:SS", e.g. 7261 seconds -> "02:01:01".

    Anything that is not a timedelta gives "00:00:00".
    """
    if not isinstance(td_object, timedelta):
        return "00:00:00"
    minutes, seconds = divmod(int(td_object.total_seconds()), 60)
    hours, minutes = divmod(minutes, 60)
    return f"{hours:02}:{minutes:02}:{seconds:02}"


def format_duration(seconds: Union[float, str, None]) -> str:
    """
    Formats a duration in seconds as "HH:MM:SS.mmm".

    This is the layout of mediainfo's `Duration/String3`, so the status line
    reads the same with either probe tool.

    Args:
        seconds: A number, or a numeric string as ffprobe reports it
                 (e.g. "5400.123000").

    Returns:
        The formatted duration, or "" for missing, negative or non-numeric input.
    """
    try:
        millis_total = round(float(seconds) * 1000)
    except (TypeError, ValueError):
        return ""
    if millis_total < 0:
        return ""
    whole, millis = divmod(int(millis_total), 1000)
    return f"{format_timedelta(timedelta(seconds=whole))}.{millis:03}"


def formatted_size(size_bytes: float) -> str:
    """
    Formats a byte count with a binary unit.

    Examples: 512 -> "512 B", 1536 -> "1.50 KB", 2097152 -> "2 MB".
    """
    size = max(float(size_bytes), 0.0)
    unit_index = 0
    while size >= 1024 and unit_index < len(SIZE_UNITS) - 1:
        size /= 1024
        unit_index += 1
    unit = SIZE_UNITS[unit_index]
    if unit_index == 0:
        return f"{int(size)} {unit}"
    text = f"{size:.2f}"
    if text.endswith(".00"):
        text = text[:-3]
    return f"{text} {unit}"
