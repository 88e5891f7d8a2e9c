"""
Rhythm primitives - durations in beats.

Rhythm weights are positive rationals, one per melody position.
Uses Fraction for exact subdivision representation; a quarter note is
1 beat (Fraction(1)).
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from fractions import Fraction

# Named durations (in beats)
WHOLE = Fraction(4)
HALF = Fraction(2)
QUARTER = Fraction(1)
EIGHTH = Fraction(1, 2)
SIXTEENTH = Fraction(1, 4)


def to_beats(value: int | float | str | Fraction) -> Fraction:
    """
    Convert a duration value to an exact Fraction of beats.

    Floats go through their shortest repr so 0.1 becomes 1/10 rather than
    the binary approximation. Strings like '3/2' are accepted.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, Fraction):
        return value
    if isinstance(value, float):
        return Fraction(repr(value))
    if isinstance(value, (int, str)):
        return Fraction(value)
    raise ValueError(f"Invalid duration: {value!r}")


def parse_rhythm(values: Iterable[int | float | str | Fraction]) -> tuple[Fraction, ...]:
    """Convert every value of a rhythm to beats."""
    return tuple(to_beats(v) for v in values)


def onsets(rhythm: Sequence[Fraction]) -> list[Fraction]:
    """Start beat of every position (running sum, starting at 0)."""
    result: list[Fraction] = []
    current = Fraction(0)
    for duration in rhythm:
        result.append(current)
        current += duration
    return result


def beats_to_float(value: Fraction) -> float | int:
    """Serialize a beat value: int when whole, float otherwise."""
    if value.denominator == 1:
        return value.numerator
    return float(value)
