"""Duration unit and range constants."""

NANOSECOND = 1
MICROSECOND = 1_000 * NANOSECOND
MILLISECOND = 1_000 * MICROSECOND
SECOND = 1_000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE

MAX_DURATION = (1 << 63) - 1
"""Largest representable duration in nanoseconds (signed 64-bit)."""

MIN_DURATION = -(1 << 63)
"""Smallest representable duration in nanoseconds (signed 64-bit)."""

# Unit suffix -> nanoseconds per unit
UNIT_MAP: dict[str, int] = {
    "ns": NANOSECOND,
    "us": MICROSECOND,
    "µs": MICROSECOND,  # U+00B5 micro sign
    "μs": MICROSECOND,  # U+03BC Greek letter mu
    "ms": MILLISECOND,
    "s": SECOND,
    "m": MINUTE,
    "h": HOUR,
}
