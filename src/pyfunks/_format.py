"""Canonical duration text encoding."""

from __future__ import annotations

from pyfunks._constants import MICROSECOND, MILLISECOND, SECOND


def _fraction(value: int, digits: int) -> str:
    """Render ``value`` as a decimal fraction of ``digits`` places, trailing zeros trimmed."""
    if not value:
        return ""
    return "." + f"{value:0{digits}d}".rstrip("0")


def format_duration(nanoseconds: int) -> str:
    """Encode a nanosecond count in the canonical Go duration form.

    Zero is ``"0s"``. Magnitudes under one second use a single unit
    (``"750ns"``, ``"1.5µs"``, ``"300ms"``). Anything larger is written
    as hours, minutes and (fractional) seconds, dropping leading zero
    components only: ``"5s"``, ``"1m30s"``, ``"1h0m0s"``, ``"2h45m0.5s"``.
    Negative values carry a leading ``-``.
    """
    if nanoseconds == 0:
        return "0s"

    sign = "-" if nanoseconds < 0 else ""
    magnitude = abs(nanoseconds)

    if magnitude < SECOND:
        if magnitude < MICROSECOND:
            return f"{sign}{magnitude}ns"
        if magnitude < MILLISECOND:
            whole, rest = divmod(magnitude, MICROSECOND)
            return f"{sign}{whole}{_fraction(rest, 3)}µs"
        whole, rest = divmod(magnitude, MILLISECOND)
        return f"{sign}{whole}{_fraction(rest, 6)}ms"

    seconds, rest = divmod(magnitude, SECOND)
    minutes, seconds = divmod(seconds, 60)
    text = f"{seconds}{_fraction(rest, 9)}s"
    if minutes:
        hours, minutes = divmod(minutes, 60)
        text = f"{minutes}m{text}"
        if hours:
            text = f"{hours}h{text}"
    return sign + text
