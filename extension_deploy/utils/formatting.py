"""Formatting utilities for display"""

from typing import Optional


def format_duration(seconds: Optional[float]) -> str:
    """Format duration in seconds to human readable format

    Args:
        seconds: Duration in seconds, None when unknown

    Returns:
        Human readable duration string

    Examples:
        >>> format_duration(1.5)
        '1.5s'
        >>> format_duration(65)
        '1m 5s'
    """
    if seconds is None:
        return "-"
    if seconds < 0:
        return "Invalid duration"

    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        minutes = int(seconds // 60)
        secs = int(seconds % 60)
        return f"{minutes}m {secs}s"


def pluralize(count: int, singular: str, plural: str = None) -> str:
    """Pluralize a word based on count

    >>> pluralize(1, "asset")
    '1 asset'
    >>> pluralize(3, "asset")
    '3 assets'
    """
    if plural is None:
        plural = singular + 's'

    word = singular if count == 1 else plural
    return f"{count} {word}"


def shorten_url(url: str, max_length: int = 60) -> str:
    """Shorten an asset URL for table display, keeping the filename end"""
    if len(url) <= max_length:
        return url

    keep_start = max_length // 2 - 2
    keep_end = max_length - keep_start - 3

    return f"{url[:keep_start]}...{url[-keep_end:]}"
