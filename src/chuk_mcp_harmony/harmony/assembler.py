"""
Harmonized-Part Assembler - the public harmonization pipeline.

    melody + rhythm + params
        -> detect_key -> generate_progression -> realize_part
        -> HarmonizedPart

to_playback_parts projects a HarmonizedPart onto plain monophonic parts so
playback and export never deal with compact vs expanded labels.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from fractions import Fraction
from typing import Any

from chuk_mcp_harmony.analysis.key_detector import detect_key
from chuk_mcp_harmony.constants import ErrorMessages
from chuk_mcp_harmony.core.chord import generate_chord_labels
from chuk_mcp_harmony.core.melody import REST, MelodyElement, Pitch, parse_melody
from chuk_mcp_harmony.core.rhythm import parse_rhythm
from chuk_mcp_harmony.exceptions import InvalidInputError
from chuk_mcp_harmony.harmony.articulation import articulate
from chuk_mcp_harmony.harmony.progression import generate_progression
from chuk_mcp_harmony.harmony.voicing import realize_voicing
from chuk_mcp_harmony.models.params import HarmonyParams
from chuk_mcp_harmony.models.part import (
    HarmonicAnalysis,
    HarmonizedPart,
    HarmonyStep,
    Part,
    SegmentSpan,
)

logger = logging.getLogger(__name__)


def validate_input(
    melody: Sequence[Any], rhythm: Sequence[Any]
) -> tuple[tuple[MelodyElement, ...], tuple[Fraction, ...]]:
    """
    Check and normalize pipeline input.

    Raises:
        InvalidInputError: empty melody, length mismatch, bad pitch or
            non-positive duration
    """
    if len(melody) == 0:
        raise InvalidInputError(ErrorMessages.EMPTY_MELODY)
    if len(melody) != len(rhythm):
        raise InvalidInputError(
            ErrorMessages.LENGTH_MISMATCH.format(melody=len(melody), rhythm=len(rhythm))
        )
    try:
        elements = parse_melody(melody)
    except ValueError as e:
        raise InvalidInputError(str(e)) from e

    durations: list[Fraction] = []
    for index, value in enumerate(rhythm):
        try:
            duration = parse_rhythm([value])[0]
        except (ValueError, TypeError, OverflowError, ZeroDivisionError) as e:
            raise InvalidInputError(
                ErrorMessages.INVALID_DURATION.format(index=index, value=value)
            ) from e
        if duration <= 0:
            raise InvalidInputError(ErrorMessages.INVALID_DURATION.format(index=index, value=value))
        durations.append(duration)
    return elements, tuple(durations)


def _resolve_params(params: HarmonyParams | Mapping[str, Any] | None) -> HarmonyParams:
    if params is None:
        return HarmonyParams()
    if isinstance(params, HarmonyParams):
        return params
    return HarmonyParams.model_validate(dict(params))


def _segment_ceiling(melody: Sequence[MelodyElement], span: SegmentSpan) -> int | None:
    notes = [melody[p].note for p in span.positions if isinstance(melody[p], Pitch)]  # type: ignore[union-attr]
    return min(notes) if notes else None


def realize_part(
    melody: Sequence[MelodyElement],
    rhythm: Sequence[Fraction],
    analysis: HarmonicAnalysis,
    segments: Sequence[SegmentSpan],
    params: HarmonyParams,
    *,
    chord_labels: Sequence[str] | None = None,
    labels_expanded: bool = False,
) -> HarmonizedPart:
    """
    Voice a compact progression over a segment timeline.

    Chord i is voiced over segments[i]; chords beyond the last segment
    have no timeline and are not voiced. Labels default to the compact
    view regenerated from the analysis.
    """
    if len(segments) > len(analysis):
        raise ValueError(
            f"{len(segments)} segments but only {len(analysis)} chords in the progression"
        )

    voicings: list[tuple[int, ...]] = []
    steps: list[HarmonyStep] = []
    previous_bass: int | None = None

    for index, span in enumerate(segments):
        voicing = realize_voicing(
            analysis.chord_qualities[index],
            analysis.chord_roots[index],
            params,
            ceiling=_segment_ceiling(melody, span),
            previous_bass=previous_bass,
        )
        voicings.append(voicing)
        steps.extend(
            articulate(
                voicing,
                span.onset,
                span.duration,
                params.voicing_style,
                params.variation,
                segment=index,
            )
        )
        previous_bass = voicing[0]

    if chord_labels is None:
        chord_labels = generate_chord_labels(
            analysis.chord_roots, analysis.chord_qualities, prefer_flats=analysis.prefer_flats
        )

    return HarmonizedPart(
        original_melody=tuple(melody),
        rhythm=tuple(rhythm),
        analysis=analysis,
        segments=tuple(segments),
        voicings=tuple(voicings),
        harmony_notes=tuple(steps),
        chord_labels=tuple(chord_labels),
        params=params,
        labels_expanded=labels_expanded,
    )


def harmonize(
    melody: Sequence[Any],
    rhythm: Sequence[Any],
    params: HarmonyParams | Mapping[str, Any] | None = None,
) -> HarmonizedPart:
    """
    Harmonize a monophonic melody.

    Args:
        melody: MIDI note numbers (0-127) or rests (REST, None, 'r', 'rest')
        rhythm: Positive durations in beats, one per melody element
        params: HarmonyParams or a dict of its fields (defaults when omitted)

    Returns:
        HarmonizedPart with compact chord labels

    Raises:
        InvalidInputError: If the input is rejected (nothing is computed)
        pydantic.ValidationError: If params are invalid
    """
    elements, durations = validate_input(melody, rhythm)
    params = _resolve_params(params)

    key = detect_key(elements, durations, params)
    plan = generate_progression(elements, durations, key, params)
    analysis = HarmonicAnalysis(
        key=key, chord_qualities=plan.chord_qualities, chord_roots=plan.chord_roots
    )

    part = realize_part(elements, durations, analysis, plan.segments, params)
    logger.info(
        "Harmonized %d notes: %s",
        len(elements),
        " ".join(part.chord_labels),
    )
    return part


def to_playback_parts(part: HarmonizedPart) -> list[Part]:
    """
    Project a harmonized part onto monophonic playback parts.

    The first part is the melody. Then one part per harmony voice: voice i
    plays the i-th lowest pitch of every step, holding it until the next
    step or until its sustain ends; missing voices and silences are rests.
    """
    parts = [Part(name="melody", melody=part.original_melody, rhythm=part.rhythm)]
    steps = sorted(part.harmony_notes, key=lambda s: s.onset)
    if not steps:
        return parts

    total = part.total_beats
    voice_count = max(len(s.pitches) for s in steps)

    for voice in range(voice_count):
        notes: list[MelodyElement] = []
        durations: list[Fraction] = []
        cursor = Fraction(0)
        for i, step in enumerate(steps):
            if step.onset > cursor:
                notes.append(REST)
                durations.append(step.onset - cursor)
            window_end = steps[i + 1].onset if i + 1 < len(steps) else total
            window = window_end - step.onset
            if window <= 0:
                continue
            if voice < len(step.pitches):
                sounding = min(step.sustain, window)
                notes.append(Pitch(step.pitches[voice]))
                durations.append(sounding)
                if sounding < window:
                    notes.append(REST)
                    durations.append(window - sounding)
            else:
                notes.append(REST)
                durations.append(window)
            cursor = window_end
        parts.append(Part(name=f"voice_{voice + 1}", melody=tuple(notes), rhythm=tuple(durations)))

    return parts
