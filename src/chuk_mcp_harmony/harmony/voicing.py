"""
Voicing Realizer - turns (root, quality) into concrete MIDI pitches.

Two steps:
1. select_tones: choose exactly `density` chord tones (as semitone offsets
   from the root), thinning or doubling as needed.
2. place_voicing: assign every tone an octave inside the register.
   Closed voicings stack as tightly as possible just beneath the melody;
   open voicings spread across the register.

Every placed pitch is drawn from the positions of its pitch class that lie
inside [lowest_note, highest_note], so range containment holds by
construction.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from chuk_mcp_harmony.constants import DoublingPreference
from chuk_mcp_harmony.core.chord import ChordQuality
from chuk_mcp_harmony.models.params import HarmonyParams

logger = logging.getLogger(__name__)


def _distinct_offsets(quality: ChordQuality) -> list[int]:
    """Chord intervals with pitch-class duplicates removed, chord order kept."""
    seen: set[int] = set()
    result: list[int] = []
    for interval in quality.intervals:
        if interval % 12 not in seen:
            seen.add(interval % 12)
            result.append(interval)
    return result


def _thinning_order(offsets: Sequence[int]) -> list[int]:
    """Priority for keeping tones: root, fifth, third, then extensions from the top."""
    priority = [offsets[0]]
    if len(offsets) > 2:
        priority.append(offsets[2])
    if len(offsets) > 1:
        priority.append(offsets[1])
    priority.extend(reversed(offsets[3:]))
    return priority


def _doubling_order(offsets: Sequence[int], preference: DoublingPreference) -> list[int]:
    """Tones to double, in order; cycled when more doubles are needed."""
    if preference == DoublingPreference.ROOT:
        return [offsets[0]]
    if preference == DoublingPreference.THIRD and len(offsets) > 1:
        return [offsets[1]]
    if preference == DoublingPreference.FIFTH and len(offsets) > 2:
        return [offsets[2]]
    if preference == DoublingPreference.BALANCED:
        return list(offsets)
    return [offsets[0]]


def select_tones(
    quality: ChordQuality,
    density: int,
    doubling: DoublingPreference = DoublingPreference.BALANCED,
) -> list[int]:
    """
    Pick exactly `density` chord tones as semitone offsets from the root.

    Thinning keeps the root, fifth and third, then the highest extensions.
    Thickening doubles tones by preference (balanced = round-robin).

        select_tones(ChordQuality.DOMINANT_13, 4) -> [0, 4, 7, 21]
        select_tones(ChordQuality.MAJOR, 5, DoublingPreference.ROOT) -> [0, 4, 7, 0, 0]
    """
    if density < 1:
        raise ValueError(f"Density must be positive, got {density}")
    offsets = _distinct_offsets(quality)

    if density <= len(offsets):
        keep = set(_thinning_order(offsets)[:density])
        return [o for o in offsets if o in keep]

    tones = list(offsets)
    doubles = _doubling_order(offsets, doubling)
    i = 0
    while len(tones) < density:
        tones.append(doubles[i % len(doubles)])
        i += 1
    return tones


def pitch_positions(pitch_class: int, lowest: int, highest: int) -> list[int]:
    """Every MIDI pitch of a pitch class inside [lowest, highest], ascending."""
    first = lowest + (pitch_class - lowest) % 12
    return list(range(first, highest + 1, 12))


def _closed_span(bass_pc: int, pitch_classes: Sequence[int]) -> int:
    return max((pc - bass_pc) % 12 for pc in pitch_classes)


def choose_bass(
    pitch_classes: Sequence[int],
    root_pc: int,
    params: HarmonyParams,
    previous_bass: int | None = None,
) -> int:
    """
    Pitch class for the lowest voice.

    Without inversions this is always the root. Closed voicings take the
    tone that minimizes the stacked span; open voicings take the tone whose
    lowest position is nearest the previous bass. Chord order breaks ties.
    """
    if not params.allow_inversions:
        return root_pc
    if params.prefer_closed_voicing:
        return min(pitch_classes, key=lambda pc: _closed_span(pc, pitch_classes))
    if previous_bass is None:
        return root_pc
    return min(
        pitch_classes,
        key=lambda pc: abs(
            pitch_positions(pc, params.lowest_note, params.highest_note)[0] - previous_bass
        ),
    )


def _closed_bass_pitch(
    bass_pc: int, span: int, params: HarmonyParams, ceiling: int | None
) -> int:
    """Highest bass that keeps the stack under the ceiling, else a mid-register bass."""
    positions = [
        b
        for b in pitch_positions(bass_pc, params.lowest_note, params.highest_note)
        if b + span <= params.highest_note
    ]
    if ceiling is not None:
        fitting = [b for b in positions if b + span < ceiling]
        if fitting:
            return fitting[-1]
    anchor = (params.lowest_note + params.highest_note - span) / 2
    return min(positions, key=lambda b: (abs(b - anchor), b))


def _place_double(
    pc: int, used: list[int], params: HarmonyParams, floor: int, target: float
) -> int:
    """Position for a doubled tone: unused, not below the bass, nearest target."""
    positions = pitch_positions(pc, params.lowest_note, params.highest_note)
    candidates = [p for p in positions if p >= floor and p not in used]
    if not candidates:
        candidates = [p for p in positions if p >= floor] or positions
    return min(candidates, key=lambda p: (abs(p - target), p))


def place_voicing(
    tones: Sequence[int],
    root: int,
    params: HarmonyParams,
    *,
    ceiling: int | None = None,
    previous_bass: int | None = None,
) -> tuple[int, ...]:
    """
    Place chord tones in concrete octaves.

    Args:
        tones: Semitone offsets from the root (duplicates are doublings)
        root: Root pitch class
        params: Register, closed/open and inversion options
        ceiling: Lowest melody note of the segment (closed voicings stay under it)
        previous_bass: Bass pitch of the previous chord (open voicings track it)

    Returns:
        Ascending MIDI pitches, one per tone, all inside the register.
    """
    root_pc = int(root) % 12
    distinct: list[int] = []
    doubled: list[int] = []
    for offset in tones:
        pc = (root_pc + offset) % 12
        if pc in distinct:
            doubled.append(pc)
        else:
            distinct.append(pc)

    bass_pc = choose_bass(distinct, root_pc, params, previous_bass)
    lowest, highest = params.lowest_note, params.highest_note
    placed: list[int]

    if params.prefer_closed_voicing:
        span = _closed_span(bass_pc, distinct)
        bass = _closed_bass_pitch(bass_pc, span, params, ceiling)
        placed = sorted(bass + (pc - bass_pc) % 12 for pc in distinct)
        target = float(placed[-1])
    else:
        bass = pitch_positions(bass_pc, lowest, highest)[0]
        placed = [bass]
        upper = [pc for pc in distinct if pc != bass_pc]
        for k, pc in enumerate(upper):
            goal = bass + (highest - bass) * (k + 1) / (len(upper) + 1)
            options = [
                p for p in pitch_positions(pc, lowest, highest) if p > bass and p not in placed
            ]
            placed.append(min(options, key=lambda p: (abs(p - goal), p)))
        target = (lowest + highest) / 2

    for pc in doubled:
        placed.append(_place_double(pc, placed, params, bass, target))

    voicing = tuple(sorted(placed))
    logger.debug("Voiced root=%d tones=%s -> %s", root_pc, list(tones), voicing)
    return voicing


def realize_voicing(
    quality: ChordQuality,
    root: int,
    params: HarmonyParams,
    *,
    ceiling: int | None = None,
    previous_bass: int | None = None,
) -> tuple[int, ...]:
    """select_tones + place_voicing for one chord."""
    tones = select_tones(quality, params.density, params.doubling_preference)
    return place_voicing(tones, root, params, ceiling=ceiling, previous_bass=previous_bass)
