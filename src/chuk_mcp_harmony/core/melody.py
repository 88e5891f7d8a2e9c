"""
Melody primitives - Pitch, Rest, MelodyElement.

A melody is an ordered sequence of elements where each element is either a
sounding Pitch or the Rest marker. Rest is its own type so that MIDI note 0
(a legitimate, if extreme, pitch) can never be mistaken for silence.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from .pitch import PitchClass


@dataclass(frozen=True, order=True)
class Pitch:
    """
    A sounding MIDI note (0-127).

    Immutable, hashable and ordered by note number.
    """

    note: int

    def __post_init__(self) -> None:
        if isinstance(self.note, bool) or not isinstance(self.note, int):
            raise ValueError(f"Pitch must be an integer, got {self.note!r}")
        if not 0 <= self.note <= 127:
            raise ValueError(f"Pitch must be 0-127, got {self.note}")

    @property
    def pitch_class(self) -> PitchClass:
        """Octave-independent pitch class."""
        return PitchClass.from_midi(self.note)

    def __str__(self) -> str:
        octave = self.note // 12 - 1
        return f"{self.pitch_class.spell()}{octave}"


class Rest(Enum):
    """The silence marker. Use the REST singleton."""

    REST = "rest"

    def __str__(self) -> str:
        return "rest"


REST = Rest.REST

MelodyElement = Pitch | Rest

# Spellings accepted as a rest when parsing loose input
_REST_TOKENS = {"r", "rest", "-"}


def is_rest(element: MelodyElement) -> bool:
    """Return True if the element is the rest marker."""
    return element is REST


def to_element(value: object) -> MelodyElement:
    """
    Coerce a loose value into a MelodyElement.

    Accepts Pitch, Rest, an int note number, None, or a rest token
    ('r', 'rest', '-').
    """
    if isinstance(value, (Pitch, Rest)):
        return value
    if value is None:
        return REST
    if isinstance(value, str):
        if value.strip().lower() in _REST_TOKENS:
            return REST
        raise ValueError(f"Unknown melody element: {value!r}")
    if isinstance(value, int) and not isinstance(value, bool):
        return Pitch(value)
    raise ValueError(f"Unknown melody element: {value!r}")


def parse_melody(values: Iterable[object]) -> tuple[MelodyElement, ...]:
    """Coerce every value of a loose melody (see to_element)."""
    return tuple(to_element(v) for v in values)


def sounding_notes(melody: Sequence[MelodyElement]) -> list[int]:
    """MIDI note numbers of every non-rest element, in order."""
    return [e.note for e in melody if isinstance(e, Pitch)]


def element_to_value(element: MelodyElement) -> int | None:
    """Serialize an element: note number for pitches, None for rests."""
    return None if is_rest(element) else element.note  # type: ignore[union-attr]
