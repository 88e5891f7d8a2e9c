"""
Constants and enums for the harmony system.

No magic strings - use enums for every closed option set.
"""

from enum import Enum


class KeyCenter(str, Enum):
    """How the tonal center is chosen."""

    AUTOMATIC = "automatic"  # Detect from melody
    MAJOR = "major"  # Force major key
    MINOR = "minor"  # Force minor key
    MODAL = "modal"  # Use the configured mode


class KeyQuality(str, Enum):
    """Quality of a detected key."""

    MAJOR = "major"
    MINOR = "minor"


class ModalMode(str, Enum):
    """Diatonic modes available for modal key centers."""

    IONIAN = "ionian"
    DORIAN = "dorian"
    PHRYGIAN = "phrygian"
    LYDIAN = "lydian"
    MIXOLYDIAN = "mixolydian"
    AEOLIAN = "aeolian"
    LOCRIAN = "locrian"


class VoicingStyle(str, Enum):
    """Temporal articulation pattern for a voiced chord."""

    BLOCK = "block"  # All notes together
    BROKEN = "broken"  # One note per slot, detached
    ARPEGGIATED = "arpeggiated"  # One note per onset, left ringing
    ALBERTI = "alberti"  # Low - high - middle - high
    WALTZ = "waltz"  # Bass - chord - chord
    ROLLING = "rolling"  # Notes accumulate into the chord
    STRIDE = "stride"  # Bass - chord alternation
    TREMOLO = "tremolo"  # Rapid alternation of two tone groups
    SUSTAINED = "sustained"  # Long held chord
    STACCATO = "staccato"  # Short detached hits


class HarmonicComplexity(str, Enum):
    """
    Ordinal complexity levels, from triads only to altered dominants.

    Order matters: each level permits every quality of the levels below it.
    """

    BASIC = "basic"
    SEVENTH = "seventh"
    NINTH = "ninth"
    ELEVENTH = "eleventh"
    THIRTEENTH = "thirteenth"
    EXTENDED = "extended"
    ALTERED = "altered"

    @property
    def level(self) -> int:
        """Ordinal position (0 = basic)."""
        return list(HarmonicComplexity).index(self)


class DoublingPreference(str, Enum):
    """Which chord tone is doubled when density exceeds the chord size."""

    BALANCED = "balanced"
    ROOT = "root"
    THIRD = "third"
    FIFTH = "fifth"


# Variations available for each voicing style; the first is the default
STYLE_VARIATIONS: dict[VoicingStyle, tuple[str, ...]] = {
    VoicingStyle.BLOCK: ("block",),
    VoicingStyle.SUSTAINED: ("long", "medium", "short", "crescendo", "swell"),
    VoicingStyle.BROKEN: ("ascending", "descending", "outer-inner", "inner-outer", "bass-treble"),
    VoicingStyle.ARPEGGIATED: ("up", "down", "up-down", "down-up", "cascading"),
    VoicingStyle.ALBERTI: ("classic", "reversed", "expanded"),
    VoicingStyle.WALTZ: ("classic", "reverse-bass", "double-bass", "syncopated"),
    VoicingStyle.ROLLING: ("smooth", "cascading", "reverse", "alternating"),
    VoicingStyle.STRIDE: ("classic", "modern", "swing"),
    VoicingStyle.TREMOLO: ("binary", "triple", "quad", "measured"),
    VoicingStyle.STACCATO: ("crisp", "gentle", "rhythmic", "swing"),
}

# Default orchestral register (C2 - C6)
DEFAULT_LOWEST_NOTE = 36
DEFAULT_HIGHEST_NOTE = 84

# Voicings fold pitches by octaves, so the register must hold two octaves
MIN_REGISTER_SPAN = 24

# Target harmonic segment length in beats
DEFAULT_SEGMENT_BEATS = 4.0

# Editor history capacity (snapshots)
HISTORY_LIMIT = 50


class ErrorMessages:
    """Standardized error messages."""

    EMPTY_MELODY = "Melody must contain at least one element."
    LENGTH_MISMATCH = "Melody has {melody} elements but rhythm has {rhythm}."
    INVALID_DURATION = "Rhythm value at position {index} must be positive, got {value}."
    INVALID_INDEX = "Chord index {index} is out of range [0, {length})."
    LAST_CHORD = "Cannot delete the last chord. At least one chord must remain."
    EMPTY_PROGRESSION = "Chord progression cannot be empty."
    SESSION_NOT_FOUND = "Session '{name}' not found."
    PRESET_NOT_FOUND = "Preset '{name}' not found."


class SuccessMessages:
    """Standardized success messages."""

    CHORD_CHANGED = "Chord #{number} changed to {quality}."
    CHORD_DELETED = "Chord #{number} deleted."
    CHORD_INSERTED = "Chord added {position} chord #{number}."
    CHANGES_SAVED = "Saved {count} chords."
    CHANGES_DISCARDED = "Changes discarded."
