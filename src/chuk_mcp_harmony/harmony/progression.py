"""
Progression Generator - segments the melody and picks a chord per segment.

Pipeline:
1. segment_timeline: split the timeline into equal-time windows of about
   segment_beats each; every melody position lands in exactly one segment.
2. choose_root: the most salient pitch class of the segment (longest total
   duration), mapped onto the nearest diatonic degree, preferring smooth
   root motion when several are equally salient.
3. choose_quality: the diatonic chord family of the root, climbed up the
   complexity ladder as far as the complexity setting allows.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from fractions import Fraction

from chuk_mcp_harmony.constants import HarmonicComplexity
from chuk_mcp_harmony.core.chord import ALTERED_DOMINANTS, ChordQuality
from chuk_mcp_harmony.core.melody import MelodyElement, Pitch
from chuk_mcp_harmony.core.pitch import PitchClass, fifth_or_step_cost
from chuk_mcp_harmony.core.rhythm import onsets, to_beats
from chuk_mcp_harmony.core.scale import Key
from chuk_mcp_harmony.models.params import HarmonyParams
from chuk_mcp_harmony.models.part import KeyAnalysis, SegmentSpan

logger = logging.getLogger(__name__)


# Root degrees (semitones above the tonic) cycled by custom progressions: I-IV-V-I
CUSTOM_ROOT_CYCLE: tuple[int, ...] = (0, 5, 7, 0)


# Chord family -> quality at each complexity level (basic ... altered)
_FAMILY_LADDERS: dict[str, tuple[ChordQuality, ...]] = {
    "major": (
        ChordQuality.MAJOR,
        ChordQuality.MAJOR_7,
        ChordQuality.MAJOR_9,
        ChordQuality.MAJOR_11,
        ChordQuality.MAJOR_13,
        ChordQuality.MAJOR_13,
        ChordQuality.MAJOR_13,
    ),
    "minor": (
        ChordQuality.MINOR,
        ChordQuality.MINOR_7,
        ChordQuality.MINOR_9,
        ChordQuality.MINOR_11,
        ChordQuality.MINOR_13,
        ChordQuality.MINOR_13,
        ChordQuality.MINOR_13,
    ),
    "dominant": (
        ChordQuality.MAJOR,
        ChordQuality.DOMINANT_7,
        ChordQuality.DOMINANT_9,
        ChordQuality.DOMINANT_11,
        ChordQuality.DOMINANT_13,
        ChordQuality.SEVEN_SHARP_11,
        ChordQuality.ALTERED,
    ),
    "half-diminished": (ChordQuality.DIMINISHED,) + (ChordQuality.HALF_DIMINISHED_7,) * 6,
    "diminished": (ChordQuality.DIMINISHED,) + (ChordQuality.DIMINISHED_7,) * 6,
    "augmented": (ChordQuality.AUGMENTED,) * 6 + (ChordQuality.SEVEN_SHARP_5,),
    "minor-major": (ChordQuality.MINOR,) + (ChordQuality.MINOR_MAJOR_7,) * 6,
}

# (third, fifth, seventh) above the root -> chord family
_FAMILIES: dict[tuple[int, int, int], str] = {
    (4, 7, 11): "major",
    (3, 7, 10): "minor",
    (4, 7, 10): "dominant",
    (3, 6, 10): "half-diminished",
    (3, 6, 9): "diminished",
    (4, 8, 11): "augmented",
    (4, 8, 10): "augmented",
    (3, 7, 11): "minor-major",
}


@dataclass(frozen=True)
class ProgressionPlan:
    """Compact progression plus the segment each chord covers."""

    segments: tuple[SegmentSpan, ...]
    chord_qualities: tuple[ChordQuality, ...]
    chord_roots: tuple[int, ...]


# ---------------------------------------------------------------------------
# Segmentation
# ---------------------------------------------------------------------------


def _build_spans(
    groups: Sequence[tuple[int, int]], rhythm: Sequence[Fraction]
) -> tuple[SegmentSpan, ...]:
    starts = onsets(rhythm)
    return tuple(
        SegmentSpan(
            start=start,
            end=end,
            onset=starts[start],
            duration=sum(rhythm[start:end], Fraction(0)),
        )
        for start, end in groups
    )


def segment_timeline(
    rhythm: Sequence[Fraction], segment_beats: float | Fraction = 4
) -> tuple[SegmentSpan, ...]:
    """
    Partition the melody timeline into contiguous harmonic segments.

    The segment count is ceil(total_beats / segment_beats), at least 1 and
    at most the number of positions. Each position joins the equal-time
    window its onset falls in; windows holding no onset are dropped.
    """
    if not rhythm:
        return ()
    target = to_beats(segment_beats)
    total = sum(rhythm, Fraction(0))
    count = max(1, min(len(rhythm), math.ceil(total / target)))
    window = total / count

    groups: list[tuple[int, int]] = []
    current_window = -1
    for position, onset in enumerate(onsets(rhythm)):
        index = min(math.floor(onset / window), count - 1)
        if index != current_window:
            groups.append((position, position + 1))
            current_window = index
        else:
            groups[-1] = (groups[-1][0], position + 1)
    return _build_spans(groups, rhythm)


def expanded_chord_index(position: int, melody_length: int, chord_count: int) -> int:
    """
    Chord covering a melody position in the expanded view.

    interval = ceil(N / M); index = min(position // interval, M - 1).
    """
    interval = math.ceil(melody_length / chord_count)
    return min(position // interval, chord_count - 1)


def expansion_spans(rhythm: Sequence[Fraction], chord_count: int) -> tuple[SegmentSpan, ...]:
    """
    Segments implied by spreading chord_count chords evenly over the melody.

    Uses the same position mapping as expanded labels. Trailing chords that
    receive no position get no segment.
    """
    if chord_count < 1:
        raise ValueError("Chord progression cannot be empty")
    groups: list[tuple[int, int]] = []
    current = -1
    for position in range(len(rhythm)):
        index = expanded_chord_index(position, len(rhythm), chord_count)
        if index != current:
            groups.append((position, position + 1))
            current = index
        else:
            groups[-1] = (groups[-1][0], position + 1)
    return _build_spans(groups, rhythm)


# ---------------------------------------------------------------------------
# Roots
# ---------------------------------------------------------------------------


def salient_pitch_classes(
    melody: Sequence[MelodyElement], rhythm: Sequence[Fraction], span: SegmentSpan
) -> list[PitchClass]:
    """
    Pitch classes carrying the segment's maximal total duration.

    Returned in order of first occurrence. Empty for an all-rest segment.
    """
    weights: dict[int, Fraction] = {}
    for position in span.positions:
        element = melody[position]
        if isinstance(element, Pitch):
            pc = element.note % 12
            weights[pc] = weights.get(pc, Fraction(0)) + rhythm[position]
    if not weights:
        return []
    best = max(weights.values())
    # dicts keep first-insertion order, which is first occurrence
    return [PitchClass(pc) for pc, weight in weights.items() if weight == best]


def choose_root(candidates: Sequence[PitchClass], key: Key, previous: int | None) -> PitchClass:
    """
    Pick the segment root from its salient pitch classes.

    Candidates map to their nearest diatonic degree. With a previous root,
    motion by fifth/fourth beats a step, which beats a leap; earlier
    candidates win remaining ties.
    """
    if not candidates:
        return PitchClass(previous) if previous is not None else key.tonic

    roots: list[PitchClass] = []
    for pc in candidates:
        diatonic = key.nearest_diatonic(pc)
        if diatonic not in roots:
            roots.append(diatonic)

    if previous is None or len(roots) == 1:
        return roots[0]
    return min(roots, key=lambda r: (fifth_or_step_cost(previous, r), roots.index(r)))


# ---------------------------------------------------------------------------
# Qualities
# ---------------------------------------------------------------------------


def chord_family(key: Key, root: int) -> str:
    """Diatonic chord family of a root in the key ('major', 'dominant', ...)."""
    _, third, fifth, seventh = key.stacked_thirds(root, 4)
    return _FAMILIES.get((third, fifth, seventh), "major")


def best_altered_dominant(
    root: int,
    melody: Sequence[MelodyElement],
    rhythm: Sequence[Fraction],
    span: SegmentSpan | None,
) -> ChordQuality:
    """
    The altered dominant whose tones cover the most melody duration.

    Ties keep the ALTERED_DOMINANTS preference order.
    """
    if span is None:
        return ALTERED_DOMINANTS[0]
    best_quality = ALTERED_DOMINANTS[0]
    best_cover = Fraction(-1)
    for quality in ALTERED_DOMINANTS:
        tones = set(quality.pitch_classes(root))
        cover = sum(
            (
                rhythm[p]
                for p in span.positions
                if isinstance(melody[p], Pitch) and melody[p].note % 12 in tones  # type: ignore[union-attr]
            ),
            Fraction(0),
        )
        if cover > best_cover:
            best_quality, best_cover = quality, cover
    return best_quality


def choose_quality(
    key: Key,
    root: int,
    complexity: HarmonicComplexity,
    melody: Sequence[MelodyElement] = (),
    rhythm: Sequence[Fraction] = (),
    span: SegmentSpan | None = None,
) -> ChordQuality:
    """
    Quality for a root: its diatonic family climbed to the complexity level.

    At the altered level the fifth degree and every dominant-family chord
    take the best-covering altered dominant.
    """
    family = chord_family(key, root)
    if complexity == HarmonicComplexity.ALTERED:
        is_fifth_degree = key.degree_of(root) == 4
        if family == "dominant" or is_fifth_degree:
            return best_altered_dominant(root, melody, rhythm, span)

    return _FAMILY_LADDERS[family][complexity.level]


def family_ladder(family: str) -> tuple[ChordQuality, ...]:
    """Qualities of a chord family, one per complexity level."""
    return _FAMILY_LADDERS[family]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def custom_progression_plan(
    rhythm: Sequence[Fraction], key: Key, qualities: Sequence[ChordQuality]
) -> ProgressionPlan:
    """
    Spread a user-given quality sequence evenly over the melody.

    Roots cycle I-IV-V-I from the tonic.
    """
    roots = tuple(int(key.tonic.transpose(CUSTOM_ROOT_CYCLE[i % 4])) for i in range(len(qualities)))
    return ProgressionPlan(
        segments=expansion_spans(rhythm, len(qualities)),
        chord_qualities=tuple(qualities),
        chord_roots=roots,
    )


def generate_progression(
    melody: Sequence[MelodyElement],
    rhythm: Sequence[Fraction],
    analysis: KeyAnalysis,
    params: HarmonyParams | None = None,
) -> ProgressionPlan:
    """
    Generate the compact progression for a melody.

    Args:
        melody: Pitches and rests
        rhythm: Durations in beats, parallel to melody
        analysis: Detected key
        params: Harmony options (complexity, quality override, segment length)

    Returns:
        ProgressionPlan with one (root, quality) per segment
    """
    params = params or HarmonyParams()
    key = analysis.key

    if params.custom_progression:
        plan = custom_progression_plan(rhythm, key, params.custom_progression)
        logger.info("Applied custom progression of %d chords", len(plan.chord_roots))
        return plan

    segments = segment_timeline(rhythm, params.segment_beats)
    qualities: list[ChordQuality] = []
    roots: list[int] = []
    previous: int | None = None

    for span in segments:
        candidates = salient_pitch_classes(melody, rhythm, span)
        root = choose_root(candidates, key, previous)
        if params.quality is not None:
            quality = params.quality
        else:
            quality = choose_quality(key, root, params.complexity, melody, rhythm, span)
        logger.debug(
            "Segment [%d, %d): candidates=%s root=%s quality=%s",
            span.start,
            span.end,
            [c.spell() for c in candidates],
            root.spell(),
            quality.value,
        )
        roots.append(int(root))
        qualities.append(quality)
        previous = int(root)

    logger.info("Generated progression of %d chords in %s", len(roots), key)
    return ProgressionPlan(
        segments=segments,
        chord_qualities=tuple(qualities),
        chord_roots=tuple(roots),
    )
