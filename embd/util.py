"""Small numeric and filesystem helpers."""

from __future__ import annotations

import glob


def map_range(x: int, inmin: int, inmax: int, outmin: int, outmax: int) -> int:
    """Re-map an integer from one range to another.

    The division truncates toward zero, so negative intermediate values
    round the same way as positive ones.  For example,
    ``map_range(angle, 0, 180, 1000, 2000)`` maps an angle onto a pulse width.
    """
    numerator = (x - inmin) * (outmax - outmin)
    denominator = inmax - inmin
    quotient = abs(numerator) // abs(denominator)
    if (numerator < 0) != (denominator < 0):
        quotient = -quotient
    return quotient + outmin


def find_first_matching_file(pattern: str) -> str | None:
    """Return the first path (in sorted order) matching a glob pattern, or None."""
    matches = sorted(glob.glob(pattern))
    return matches[0] if matches else None