"""Duration helpers for the health info `deadline` query parameter."""

from __future__ import annotations

from datetime import timedelta
from typing import Final

_MICROSECONDS_PER_SECOND: Final[int] = 1_000_000


def domain_truncate_duration(duration: timedelta) -> timedelta:
    """Truncate a duration toward zero to whole seconds.

    Args:
        duration: Duration to truncate.

    Returns:
        timedelta: Duration without its sub-second remainder.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    total_microseconds = duration // timedelta(microseconds=1)
    whole_seconds = abs(total_microseconds) // _MICROSECONDS_PER_SECOND
    if total_microseconds < 0:
        whole_seconds = -whole_seconds
    return timedelta(seconds=whole_seconds)


def domain_format_duration(duration: timedelta) -> str:
    """Render a duration in the `1h2m3s` syntax the admin endpoint parses.

    Sub-second precision is dropped before rendering.

    Args:
        duration: Duration to render.

    Returns:
        str: Rendered duration, for example `0s`, `45s`, `1m30s` or `1h0m0s`.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    total_seconds = int(domain_truncate_duration(duration).total_seconds())
    if total_seconds == 0:
        return "0s"

    sign = "-" if total_seconds < 0 else ""
    remaining_seconds = abs(total_seconds)
    hours, remaining_seconds = divmod(remaining_seconds, 3600)
    minutes, seconds = divmod(remaining_seconds, 60)

    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{sign}{minutes}m{seconds}s"
    return f"{sign}{seconds}s"
