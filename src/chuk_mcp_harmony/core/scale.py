"""
Scale primitives - modes and Key.

Scales are interval patterns from a root. A Key is a tonic pitch class plus
a quality (major/minor) and the diatonic scale used to map chord roots.
Modal keys carry their mode; their quality follows the mode's third.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from chuk_mcp_harmony.constants import KeyQuality, ModalMode

from .pitch import PitchClass

# Step patterns (semitones from one degree to the next, summing to 12)
_MODE_STEPS: dict[ModalMode, tuple[int, ...]] = {
    ModalMode.IONIAN: (2, 2, 1, 2, 2, 2, 1),
    ModalMode.DORIAN: (2, 1, 2, 2, 2, 1, 2),
    ModalMode.PHRYGIAN: (1, 2, 2, 2, 1, 2, 2),
    ModalMode.LYDIAN: (2, 2, 2, 1, 2, 2, 1),
    ModalMode.MIXOLYDIAN: (2, 2, 1, 2, 2, 1, 2),
    ModalMode.AEOLIAN: (2, 1, 2, 2, 1, 2, 2),
    ModalMode.LOCRIAN: (1, 2, 2, 1, 2, 2, 2),
}


def scale_offsets(mode: ModalMode) -> tuple[int, ...]:
    """
    Semitone offsets of the seven degrees from the tonic.

    IONIAN -> (0, 2, 4, 5, 7, 9, 11)
    """
    offsets = [0]
    for step in _MODE_STEPS[mode][:-1]:
        offsets.append(offsets[-1] + step)
    return tuple(offsets)


def mode_quality(mode: ModalMode) -> KeyQuality:
    """Major if the mode has a major third above its final, else minor."""
    return KeyQuality.MAJOR if scale_offsets(mode)[2] == 4 else KeyQuality.MINOR


@dataclass(frozen=True)
class Key:
    """
    A tonal center: tonic pitch class + quality + diatonic mode.

    Examples:
        Key(PitchClass.C, KeyQuality.MAJOR) = C major (ionian)
        Key(PitchClass.A, KeyQuality.MINOR) = A minor (aeolian)
        Key(PitchClass.D, KeyQuality.MINOR, ModalMode.DORIAN) = D dorian
    """

    tonic: PitchClass
    quality: KeyQuality
    mode: ModalMode | None = None
    _offsets: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tonic", PitchClass(int(self.tonic) % 12))
        object.__setattr__(self, "_offsets", scale_offsets(self.scale_mode))

    @property
    def scale_mode(self) -> ModalMode:
        """The diatonic mode actually in use."""
        if self.mode is not None:
            return self.mode
        return ModalMode.IONIAN if self.quality == KeyQuality.MAJOR else ModalMode.AEOLIAN

    def get_pitches(self) -> list[PitchClass]:
        """The seven diatonic pitch classes, tonic first."""
        return [self.tonic.transpose(o) for o in self._offsets]

    def contains(self, pitch_class: int) -> bool:
        """True if the pitch class is diatonic to this key."""
        return (int(pitch_class) - self.tonic) % 12 in self._offsets

    def degree_of(self, pitch_class: int) -> int | None:
        """0-based scale degree of a diatonic pitch class, or None."""
        offset = (int(pitch_class) - self.tonic) % 12
        if offset in self._offsets:
            return self._offsets.index(offset)
        return None

    def degree_to_pitch(self, degree: int) -> PitchClass:
        """Pitch class of a 0-based scale degree (wraps past the octave)."""
        return self.tonic.transpose(self._offsets[degree % 7])

    def nearest_diatonic(self, pitch_class: int) -> PitchClass:
        """
        Map any pitch class onto the nearest diatonic one.

        Diatonic pitch classes map to themselves. Equal distances resolve
        downward (F# in C major -> F).
        """
        pc = PitchClass(int(pitch_class) % 12)
        for distance in range(7):
            for candidate in (pc.transpose(-distance), pc.transpose(distance)):
                if self.contains(candidate):
                    return candidate
        return self.tonic

    def stacked_thirds(self, root: int, count: int = 4) -> tuple[int, ...]:
        """
        Semitone intervals of the diatonic chord built in thirds on root.

        C major, root D, count 4 -> (0, 3, 7, 10)  (D minor 7)
        Non-diatonic roots are treated as their nearest diatonic degree.
        """
        root_pc = self.nearest_diatonic(root)
        degree = self.degree_of(root_pc)
        assert degree is not None
        intervals = []
        for step in range(count):
            pc = self.degree_to_pitch(degree + 2 * step)
            intervals.append((pc - root_pc) % 12)
        return tuple(intervals)

    def spell(self, prefer_flats: bool = False) -> str:
        """Human-readable key name like 'C major' or 'D dorian'."""
        suffix = self.mode.value if self.mode is not None else self.quality.value
        return f"{self.tonic.spell(prefer_flats)} {suffix}"

    def __str__(self) -> str:
        return self.spell()
