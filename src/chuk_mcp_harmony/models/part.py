"""
Harmonized part - the output of the harmonization pipeline.

The part is an immutable bundle of:
- The original melody and rhythm
- The harmonic analysis (key + compact progression)
- The segment timeline and the voiced harmony steps aligned to it
- Chord labels, compact (one per segment) or expanded (one per sounding note)

Everything here is a frozen dataclass so that edits always produce new
values and earlier snapshots stay valid.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from fractions import Fraction
from typing import Any

from chuk_mcp_harmony.constants import KeyQuality, ModalMode
from chuk_mcp_harmony.core.chord import ChordQuality
from chuk_mcp_harmony.core.melody import MelodyElement, element_to_value
from chuk_mcp_harmony.core.pitch import PitchClass
from chuk_mcp_harmony.core.rhythm import beats_to_float
from chuk_mcp_harmony.core.scale import Key
from chuk_mcp_harmony.models.params import HarmonyParams


@dataclass(frozen=True)
class KeyAnalysis:
    """
    Result of key detection.

    confidence is 0..1; forced key centers report 1.0 and an all-rest
    melody reports 0.0 (with tonic C).
    """

    detected_key: PitchClass
    key_quality: KeyQuality
    confidence: float
    mode: ModalMode | None = None
    prefer_flats: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "detected_key", PitchClass(int(self.detected_key) % 12))
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence must be 0-1, got {self.confidence}")

    @property
    def key(self) -> Key:
        """The Key this analysis describes."""
        return Key(self.detected_key, self.key_quality, self.mode)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        d: dict[str, Any] = {
            "detected_key": int(self.detected_key),
            "key_name": self.key.spell(self.prefer_flats),
            "key_quality": self.key_quality.value,
            "confidence": round(self.confidence, 4),
        }
        if self.mode is not None:
            d["mode"] = self.mode.value
        return d


@dataclass(frozen=True)
class HarmonicAnalysis:
    """
    KeyAnalysis plus the compact progression.

    chord_qualities and chord_roots are always the same length, one entry
    per harmonic segment.
    """

    key: KeyAnalysis
    chord_qualities: tuple[ChordQuality, ...]
    chord_roots: tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.chord_qualities) != len(self.chord_roots):
            raise ValueError(
                f"Progression arrays differ in length: {len(self.chord_qualities)} qualities, "
                f"{len(self.chord_roots)} roots"
            )

    @property
    def detected_key(self) -> PitchClass:
        return self.key.detected_key

    @property
    def key_quality(self) -> KeyQuality:
        return self.key.key_quality

    @property
    def confidence(self) -> float:
        return self.key.confidence

    @property
    def prefer_flats(self) -> bool:
        return self.key.prefer_flats

    def __len__(self) -> int:
        return len(self.chord_roots)

    def with_progression(
        self, chord_qualities: tuple[ChordQuality, ...], chord_roots: tuple[int, ...]
    ) -> HarmonicAnalysis:
        """Return a copy carrying a different compact progression."""
        return replace(self, chord_qualities=tuple(chord_qualities), chord_roots=tuple(chord_roots))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        d = self.key.to_dict()
        d["chord_qualities"] = [q.value for q in self.chord_qualities]
        d["chord_roots"] = list(self.chord_roots)
        return d


@dataclass(frozen=True, order=True)
class SegmentSpan:
    """
    One harmonic segment: melody positions [start, end) and their timing.

    Ordered by position.
    """

    start: int
    end: int
    onset: Fraction = field(compare=False)
    duration: Fraction = field(compare=False)

    def __post_init__(self) -> None:
        if self.start < 0 or self.end <= self.start:
            raise ValueError(f"Invalid segment positions [{self.start}, {self.end})")
        if self.duration <= 0:
            raise ValueError(f"Segment duration must be positive, got {self.duration}")

    @property
    def positions(self) -> range:
        """Melody positions covered by this segment."""
        return range(self.start, self.end)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "start": self.start,
            "end": self.end,
            "onset": beats_to_float(self.onset),
            "duration": beats_to_float(self.duration),
        }


@dataclass(frozen=True)
class HarmonyStep:
    """
    One articulation event of a voiced chord.

    onset/duration describe the time slot (beats from the start of the
    melody); sustain is how long the pitches actually sound from the onset.
    A step whose sustain is shorter than its slot leaves silence behind it.
    """

    segment: int
    onset: Fraction
    duration: Fraction
    sustain: Fraction
    pitches: tuple[int, ...]

    def __post_init__(self) -> None:
        if self.duration <= 0:
            raise ValueError(f"Step duration must be positive, got {self.duration}")
        if self.sustain <= 0:
            raise ValueError(f"Step sustain must be positive, got {self.sustain}")
        for p in self.pitches:
            if not 0 <= p <= 127:
                raise ValueError(f"Pitch must be 0-127, got {p}")

    @property
    def end(self) -> Fraction:
        """End of the time slot."""
        return self.onset + self.duration

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "segment": self.segment,
            "onset": beats_to_float(self.onset),
            "duration": beats_to_float(self.duration),
            "sustain": beats_to_float(self.sustain),
            "pitches": list(self.pitches),
        }


@dataclass(frozen=True)
class HarmonizedPart:
    """
    A melody together with its generated (or edited) harmony.

    chord_labels is compact (one per segment) unless labels_expanded is
    set, in which case it holds one label per non-rest melody position.
    """

    original_melody: tuple[MelodyElement, ...]
    rhythm: tuple[Fraction, ...]
    analysis: HarmonicAnalysis
    segments: tuple[SegmentSpan, ...]
    voicings: tuple[tuple[int, ...], ...]
    harmony_notes: tuple[HarmonyStep, ...]
    chord_labels: tuple[str, ...]
    params: HarmonyParams
    labels_expanded: bool = False

    @property
    def chord_qualities(self) -> tuple[ChordQuality, ...]:
        return self.analysis.chord_qualities

    @property
    def chord_roots(self) -> tuple[int, ...]:
        return self.analysis.chord_roots

    @property
    def total_beats(self) -> Fraction:
        return sum(self.rhythm, Fraction(0))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "original_melody": [element_to_value(e) for e in self.original_melody],
            "rhythm": [beats_to_float(r) for r in self.rhythm],
            "analysis": self.analysis.to_dict(),
            "segments": [s.to_dict() for s in self.segments],
            "voicings": [list(v) for v in self.voicings],
            "harmony_notes": [n.to_dict() for n in self.harmony_notes],
            "chord_labels": list(self.chord_labels),
            "labels_expanded": self.labels_expanded,
            "params": self.params.model_dump(mode="json"),
        }


@dataclass(frozen=True)
class Part:
    """
    A monophonic playback line: a melody with a parallel rhythm.

    This is the only shape playback and export consumers see.
    """

    name: str
    melody: tuple[MelodyElement, ...]
    rhythm: tuple[Fraction, ...]

    def __post_init__(self) -> None:
        if len(self.melody) != len(self.rhythm):
            raise ValueError(
                f"Part '{self.name}' has {len(self.melody)} notes but {len(self.rhythm)} durations"
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "melody": [element_to_value(e) for e in self.melody],
            "rhythm": [beats_to_float(r) for r in self.rhythm],
        }
