"""
Core music primitives - the Radix layer.

These are the invariants everything else composes on:
- PitchClass: The 12 chromatic pitch classes (0-11)
- Pitch / Rest: Melody elements (a rest is never pitch 0)
- Rhythm: Durations in beats as exact fractions
- Key: Tonic + quality + diatonic mode, maps pitches onto scale degrees
- ChordQuality: The closed chord vocabulary and its interval table
"""

from chuk_mcp_harmony.core.chord import (
    CHORD_INTERVALS,
    ChordQuality,
    eligible_qualities,
    generate_chord_label,
    generate_chord_labels,
)
from chuk_mcp_harmony.core.melody import (
    REST,
    MelodyElement,
    Pitch,
    Rest,
    is_rest,
    parse_melody,
    sounding_notes,
)
from chuk_mcp_harmony.core.pitch import PitchClass
from chuk_mcp_harmony.core.rhythm import onsets, parse_rhythm, to_beats
from chuk_mcp_harmony.core.scale import Key, mode_quality, scale_offsets

__all__ = [
    # Pitch
    "PitchClass",
    # Melody
    "Pitch",
    "Rest",
    "REST",
    "MelodyElement",
    "is_rest",
    "parse_melody",
    "sounding_notes",
    # Rhythm
    "to_beats",
    "parse_rhythm",
    "onsets",
    # Scale
    "Key",
    "scale_offsets",
    "mode_quality",
    # Chord
    "ChordQuality",
    "CHORD_INTERVALS",
    "eligible_qualities",
    "generate_chord_label",
    "generate_chord_labels",
]
