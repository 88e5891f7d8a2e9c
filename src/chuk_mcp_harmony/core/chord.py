"""
Chord primitives - the Chord Vocabulary.

ChordQuality is a closed enumeration. Every quality carries its interval set
(semitones from the root, extensions above the octave included) through a
single dispatch table, so voicing is one lookup plus a transpose.
"""

from __future__ import annotations

from enum import Enum

from chuk_mcp_harmony.constants import HarmonicComplexity

from .pitch import PitchClass


class ChordQuality(str, Enum):
    """The chord-quality symbols understood by generation and editing."""

    # Triads
    MAJOR = "M"
    MINOR = "m"
    DIMINISHED = "dim"
    AUGMENTED = "aug"
    SUS2 = "sus2"
    SUS4 = "sus4"

    # Sevenths
    MAJOR_7 = "M7"
    MINOR_7 = "m7"
    DOMINANT_7 = "dom7"
    DIMINISHED_7 = "dim7"
    HALF_DIMINISHED_7 = "hdim7"
    MINOR_MAJOR_7 = "mM7"

    # Ninths
    MAJOR_9 = "M9"
    MINOR_9 = "m9"
    DOMINANT_9 = "dom9"

    # Elevenths
    MAJOR_11 = "M11"
    MINOR_11 = "m11"
    DOMINANT_11 = "dom11"

    # Thirteenths
    MAJOR_13 = "M13"
    MINOR_13 = "m13"
    DOMINANT_13 = "dom13"

    # Altered dominants
    SEVEN_SHARP_9 = "7#9"
    SEVEN_FLAT_9 = "7b9"
    SEVEN_SHARP_5 = "7#5"
    SEVEN_FLAT_5 = "7b5"
    SEVEN_SHARP_11 = "7#11"
    ALTERED = "alt"

    # Added-tone chords
    ADD_9 = "add9"
    SIX = "6"
    MINOR_6 = "m6"

    @property
    def intervals(self) -> tuple[int, ...]:
        """Ordered semitone offsets from the root."""
        return CHORD_INTERVALS[self]

    @property
    def suffix(self) -> str:
        """Display suffix appended to the root name."""
        return _LABEL_SUFFIXES[self]

    def pitch_classes(self, root: int) -> list[PitchClass]:
        """Absolute pitch classes of this quality built on root, in chord order."""
        root_pc = PitchClass(int(root) % 12)
        return [root_pc.transpose(i) for i in self.intervals]

    @classmethod
    def parse(cls, text: str | ChordQuality) -> ChordQuality:
        """Parse a quality from its symbol ('dom7') or member name ('DOMINANT_7')."""
        if isinstance(text, ChordQuality):
            return text
        if not isinstance(text, str):
            raise ValueError(f"Unknown chord quality: {text!r}")
        symbol = text.strip()
        for member in cls:
            if member.value == symbol or member.name == symbol.upper():
                return member
        raise ValueError(f"Unknown chord quality: {text}")

    def __str__(self) -> str:
        return self.value


CHORD_INTERVALS: dict[ChordQuality, tuple[int, ...]] = {
    ChordQuality.MAJOR: (0, 4, 7),
    ChordQuality.MINOR: (0, 3, 7),
    ChordQuality.DIMINISHED: (0, 3, 6),
    ChordQuality.AUGMENTED: (0, 4, 8),
    ChordQuality.SUS2: (0, 2, 7),
    ChordQuality.SUS4: (0, 5, 7),
    ChordQuality.MAJOR_7: (0, 4, 7, 11),
    ChordQuality.MINOR_7: (0, 3, 7, 10),
    ChordQuality.DOMINANT_7: (0, 4, 7, 10),
    ChordQuality.DIMINISHED_7: (0, 3, 6, 9),
    ChordQuality.HALF_DIMINISHED_7: (0, 3, 6, 10),
    ChordQuality.MINOR_MAJOR_7: (0, 3, 7, 11),
    ChordQuality.MAJOR_9: (0, 4, 7, 11, 14),
    ChordQuality.MINOR_9: (0, 3, 7, 10, 14),
    ChordQuality.DOMINANT_9: (0, 4, 7, 10, 14),
    ChordQuality.MAJOR_11: (0, 4, 7, 11, 14, 17),
    ChordQuality.MINOR_11: (0, 3, 7, 10, 14, 17),
    ChordQuality.DOMINANT_11: (0, 4, 7, 10, 14, 17),
    ChordQuality.MAJOR_13: (0, 4, 7, 11, 14, 17, 21),
    ChordQuality.MINOR_13: (0, 3, 7, 10, 14, 17, 21),
    ChordQuality.DOMINANT_13: (0, 4, 7, 10, 14, 17, 21),
    ChordQuality.SEVEN_SHARP_9: (0, 4, 7, 10, 15),
    ChordQuality.SEVEN_FLAT_9: (0, 4, 7, 10, 13),
    ChordQuality.SEVEN_SHARP_5: (0, 4, 8, 10),
    ChordQuality.SEVEN_FLAT_5: (0, 4, 6, 10),
    ChordQuality.SEVEN_SHARP_11: (0, 4, 7, 10, 18),
    ChordQuality.ALTERED: (0, 4, 6, 10, 13, 15),
    ChordQuality.ADD_9: (0, 4, 7, 14),
    ChordQuality.SIX: (0, 4, 7, 9),
    ChordQuality.MINOR_6: (0, 3, 7, 9),
}

_LABEL_SUFFIXES: dict[ChordQuality, str] = {
    ChordQuality.MAJOR: "",
    ChordQuality.MINOR: "m",
    ChordQuality.DIMINISHED: "dim",
    ChordQuality.AUGMENTED: "aug",
    ChordQuality.SUS2: "sus2",
    ChordQuality.SUS4: "sus4",
    ChordQuality.MAJOR_7: "maj7",
    ChordQuality.MINOR_7: "m7",
    ChordQuality.DOMINANT_7: "7",
    ChordQuality.DIMINISHED_7: "dim7",
    ChordQuality.HALF_DIMINISHED_7: "m7b5",
    ChordQuality.MINOR_MAJOR_7: "mM7",
    ChordQuality.MAJOR_9: "maj9",
    ChordQuality.MINOR_9: "m9",
    ChordQuality.DOMINANT_9: "9",
    ChordQuality.MAJOR_11: "maj11",
    ChordQuality.MINOR_11: "m11",
    ChordQuality.DOMINANT_11: "11",
    ChordQuality.MAJOR_13: "maj13",
    ChordQuality.MINOR_13: "m13",
    ChordQuality.DOMINANT_13: "13",
    ChordQuality.SEVEN_SHARP_9: "7#9",
    ChordQuality.SEVEN_FLAT_9: "7b9",
    ChordQuality.SEVEN_SHARP_5: "7#5",
    ChordQuality.SEVEN_FLAT_5: "7b5",
    ChordQuality.SEVEN_SHARP_11: "7#11",
    ChordQuality.ALTERED: "alt",
    ChordQuality.ADD_9: "add9",
    ChordQuality.SIX: "6",
    ChordQuality.MINOR_6: "m6",
}

# Qualities newly permitted at each complexity level (cumulative upward)
_COMPLEXITY_ADDITIONS: dict[HarmonicComplexity, tuple[ChordQuality, ...]] = {
    HarmonicComplexity.BASIC: (
        ChordQuality.MAJOR,
        ChordQuality.MINOR,
        ChordQuality.DIMINISHED,
        ChordQuality.AUGMENTED,
        ChordQuality.SUS2,
        ChordQuality.SUS4,
    ),
    HarmonicComplexity.SEVENTH: (
        ChordQuality.MAJOR_7,
        ChordQuality.MINOR_7,
        ChordQuality.DOMINANT_7,
        ChordQuality.DIMINISHED_7,
        ChordQuality.HALF_DIMINISHED_7,
        ChordQuality.MINOR_MAJOR_7,
        ChordQuality.SIX,
        ChordQuality.MINOR_6,
    ),
    HarmonicComplexity.NINTH: (
        ChordQuality.MAJOR_9,
        ChordQuality.MINOR_9,
        ChordQuality.DOMINANT_9,
        ChordQuality.ADD_9,
    ),
    HarmonicComplexity.ELEVENTH: (
        ChordQuality.MAJOR_11,
        ChordQuality.MINOR_11,
        ChordQuality.DOMINANT_11,
    ),
    HarmonicComplexity.THIRTEENTH: (
        ChordQuality.MAJOR_13,
        ChordQuality.MINOR_13,
        ChordQuality.DOMINANT_13,
    ),
    HarmonicComplexity.EXTENDED: (ChordQuality.SEVEN_SHARP_11,),
    HarmonicComplexity.ALTERED: (
        ChordQuality.SEVEN_SHARP_9,
        ChordQuality.SEVEN_FLAT_9,
        ChordQuality.SEVEN_SHARP_5,
        ChordQuality.SEVEN_FLAT_5,
        ChordQuality.ALTERED,
    ),
}

# Altered dominants in preference order
ALTERED_DOMINANTS: tuple[ChordQuality, ...] = (
    ChordQuality.SEVEN_FLAT_9,
    ChordQuality.SEVEN_SHARP_9,
    ChordQuality.SEVEN_SHARP_5,
    ChordQuality.SEVEN_FLAT_5,
    ChordQuality.SEVEN_SHARP_11,
    ChordQuality.ALTERED,
)


def eligible_qualities(complexity: HarmonicComplexity) -> frozenset[ChordQuality]:
    """
    Qualities permitted at a complexity level.

    Each level permits everything the levels below it permit.
    """
    allowed: set[ChordQuality] = set()
    for level in HarmonicComplexity:
        allowed.update(_COMPLEXITY_ADDITIONS[level])
        if level == complexity:
            break
    return frozenset(allowed)


def generate_chord_label(root: int, quality: ChordQuality | str, *, prefer_flats: bool = False) -> str:
    """
    Display label for a chord.

    Pure; used identically by generation and by the editor.

        generate_chord_label(0, ChordQuality.DOMINANT_7) -> 'C7'
        generate_chord_label(9, 'm') -> 'Am'
        generate_chord_label(10, 'M7', prefer_flats=True) -> 'Bbmaj7'
    """
    quality = ChordQuality.parse(quality)
    root_pc = PitchClass(int(root) % 12)
    return f"{root_pc.spell(prefer_flats)}{quality.suffix}"


def generate_chord_labels(
    roots: tuple[int, ...] | list[int],
    qualities: tuple[ChordQuality, ...] | list[ChordQuality],
    *,
    prefer_flats: bool = False,
) -> tuple[str, ...]:
    """Labels for a whole compact progression, regenerated from both arrays."""
    if len(roots) != len(qualities):
        raise ValueError(
            f"Progression arrays differ in length: {len(qualities)} qualities, {len(roots)} roots"
        )
    return tuple(
        generate_chord_label(root, quality, prefer_flats=prefer_flats)
        for root, quality in zip(roots, qualities)
    )
