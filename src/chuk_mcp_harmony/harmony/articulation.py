"""
Articulation - how a voiced chord is laid out in time.

Each voicing style spreads the same pitch set over a segment as a list of
HarmonyStep events. Styles differ only in timing: every pattern sounds
every pitch of the voicing, and nothing else.

Each style has named variations (see STYLE_VARIATIONS); the first one is
the default.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from fractions import Fraction

from chuk_mcp_harmony.constants import STYLE_VARIATIONS, VoicingStyle
from chuk_mcp_harmony.models.part import HarmonyStep

# A pattern returns (offset, slot, sustain, pitches) tuples relative to the segment start
StepSpec = tuple[Fraction, Fraction, Fraction, tuple[int, ...]]
Pattern = Callable[[tuple[int, ...], Fraction, str], list[StepSpec]]

# Alternations per segment for tremolo variations
_TREMOLO_COUNTS: dict[str, int] = {"binary": 8, "triple": 12, "quad": 16, "measured": 4}

# Sounding fraction of the segment for shortened sustained chords
_SUSTAIN_LENGTHS: dict[str, Fraction] = {"medium": Fraction(3, 4), "short": Fraction(1, 2)}


def _sequence(
    groups: Sequence[tuple[int, ...]], duration: Fraction, *, ring: bool = False
) -> list[StepSpec]:
    """Equal slots in order; ring=True lets each group sound to the segment end."""
    slot = duration / len(groups)
    steps: list[StepSpec] = []
    for i, group in enumerate(groups):
        offset = slot * i
        sustain = duration - offset if ring else slot
        steps.append((offset, slot, sustain, group))
    return steps


def _outer_inner(pitches: tuple[int, ...]) -> list[int]:
    """Alternate from the outside in: low, high, next low, next high ..."""
    order: list[int] = []
    lo, hi = 0, len(pitches) - 1
    while lo <= hi:
        order.append(pitches[lo])
        if hi != lo:
            order.append(pitches[hi])
        lo += 1
        hi -= 1
    return order


def _swung(groups: Sequence[tuple[int, ...]], duration: Fraction) -> list[StepSpec]:
    """Pairs of long-short slots (2:1) across the segment."""
    beat = duration / ((len(groups) + 1) // 2)
    steps: list[StepSpec] = []
    offset = Fraction(0)
    for i, group in enumerate(groups):
        slot = beat * 2 / 3 if i % 2 == 0 else beat / 3
        if i == len(groups) - 1:
            slot = duration - offset
        steps.append((offset, slot, slot, group))
        offset += slot
    return steps


def _singles(order: Sequence[int]) -> list[tuple[int, ...]]:
    return [(p,) for p in order]


def _block(pitches: tuple[int, ...], duration: Fraction, variation: str) -> list[StepSpec]:
    return [(Fraction(0), duration, duration, pitches)]


def _sustained(pitches: tuple[int, ...], duration: Fraction, variation: str) -> list[StepSpec]:
    if variation == "swell" and len(pitches) > 1:
        entry = duration / 4
        return [
            (Fraction(0), entry, duration, pitches[:1]),
            (entry, duration - entry, duration - entry, pitches[1:]),
        ]
    if variation == "crescendo":
        # Voices enter from the bass up over the first half and hold
        slot = duration / (2 * len(pitches))
        return [(slot * i, slot, duration - slot * i, (p,)) for i, p in enumerate(pitches)]
    if variation in _SUSTAIN_LENGTHS:
        return [(Fraction(0), duration, duration * _SUSTAIN_LENGTHS[variation], pitches)]
    return _block(pitches, duration, variation)


def _broken(pitches: tuple[int, ...], duration: Fraction, variation: str) -> list[StepSpec]:
    if variation == "descending":
        order = list(reversed(pitches))
    elif variation == "outer-inner":
        order = _outer_inner(pitches)
    elif variation == "inner-outer":
        order = list(reversed(_outer_inner(pitches)))
    elif variation == "bass-treble":
        return _sequence([pitches[:1], pitches[1:]], duration)
    else:
        order = list(pitches)
    return _sequence(_singles(order), duration)


def _arpeggiated(pitches: tuple[int, ...], duration: Fraction, variation: str) -> list[StepSpec]:
    up = list(pitches)
    down = list(reversed(pitches))
    if variation == "down":
        order = down
    elif variation == "up-down":
        order = up + down[1:-1]
    elif variation == "down-up":
        order = down + up[1:-1]
    elif variation == "cascading":
        # Every note enters within the first half, all ringing to the end
        slot = duration / (2 * len(pitches))
        return [(slot * i, slot, duration - slot * i, (p,)) for i, p in enumerate(up)]
    else:
        order = up
    return _sequence(_singles(order), duration, ring=True)


def _alberti(pitches: tuple[int, ...], duration: Fraction, variation: str) -> list[StepSpec]:
    low, top = pitches[0], pitches[-1]
    inner = list(pitches[1:-1])
    figure = [low, top]
    for note in inner:
        figure.extend([note, top])
    if variation == "reversed":
        figure = list(reversed(figure))
    elif variation == "expanded":
        figure = figure * 2
    return _sequence(_singles(figure), duration)


def _waltz(pitches: tuple[int, ...], duration: Fraction, variation: str) -> list[StepSpec]:
    bass, upper = pitches[:1], pitches[1:]
    if variation == "reverse-bass":
        groups = [upper, upper, bass]
    elif variation == "double-bass":
        groups = [bass, bass, upper]
    elif variation == "syncopated":
        # Bass, a silent slot, then the upper voices twice
        slot = duration / 4
        return [(Fraction(0), slot, slot, bass), (slot * 2, slot, slot, upper), (slot * 3, slot, slot, upper)]
    else:
        groups = [bass, upper, upper]
    return _sequence(groups, duration)


def _rolling(pitches: tuple[int, ...], duration: Fraction, variation: str) -> list[StepSpec]:
    if variation == "alternating":
        # Roll up over the first half, then release from the top down
        slot = duration / (2 * len(pitches))
        return [(slot * i, slot, duration - 2 * slot * i, (p,)) for i, p in enumerate(pitches)]
    order = list(reversed(pitches)) if variation == "reverse" else list(pitches)
    window = duration / 2 if variation == "cascading" else duration / 4
    slot = window / len(order)
    return [(slot * i, slot, duration - slot * i, (p,)) for i, p in enumerate(order)]


def _stride(pitches: tuple[int, ...], duration: Fraction, variation: str) -> list[StepSpec]:
    bass, upper = pitches[:1], pitches[1:]
    if variation == "modern":
        half = duration / 2
        quarter = duration / 4
        return [
            (Fraction(0), half, half, bass),
            (half, quarter, quarter, upper),
            (half + quarter, quarter, quarter, upper),
        ]
    if variation == "swing":
        return _swung([bass, upper, bass, upper], duration)
    return _sequence([bass, upper, bass, upper], duration)


def _tremolo(pitches: tuple[int, ...], duration: Fraction, variation: str) -> list[StepSpec]:
    split = max(1, len(pitches) // 2)
    lower, upper = pitches[:split], pitches[split:]
    if not upper:
        return _block(pitches, duration, variation)
    count = _TREMOLO_COUNTS.get(variation, 8)
    return _sequence([lower if i % 2 == 0 else upper for i in range(count)], duration)


def _staccato(pitches: tuple[int, ...], duration: Fraction, variation: str) -> list[StepSpec]:
    if variation == "rhythmic":
        groups = _singles(pitches)
    elif variation == "gentle":
        groups = [pitches] * 2
    elif variation == "swing":
        return [(offset, slot, slot / 2, group) for offset, slot, _, group in _swung([pitches] * 3, duration)]
    else:
        groups = [pitches] * 4
    slot = duration / len(groups)
    return [(slot * i, slot, slot / 2, group) for i, group in enumerate(groups)]


_PATTERNS: dict[VoicingStyle, Pattern] = {
    VoicingStyle.BLOCK: _block,
    VoicingStyle.SUSTAINED: _sustained,
    VoicingStyle.BROKEN: _broken,
    VoicingStyle.ARPEGGIATED: _arpeggiated,
    VoicingStyle.ALBERTI: _alberti,
    VoicingStyle.WALTZ: _waltz,
    VoicingStyle.ROLLING: _rolling,
    VoicingStyle.STRIDE: _stride,
    VoicingStyle.TREMOLO: _tremolo,
    VoicingStyle.STACCATO: _staccato,
}


def articulate(
    pitches: Sequence[int],
    onset: Fraction,
    duration: Fraction,
    style: VoicingStyle = VoicingStyle.BLOCK,
    variation: str | None = None,
    *,
    segment: int = 0,
) -> list[HarmonyStep]:
    """
    Lay a voicing out in time over one segment.

    Args:
        pitches: The voicing (sorted internally, lowest first)
        onset: Segment start in beats
        duration: Segment length in beats
        style: Voicing style
        variation: Style variation (defaults to the style's first)
        segment: Segment index recorded on each step

    Returns:
        Steps in onset order, sounding exactly the given pitches
    """
    if duration <= 0:
        raise ValueError(f"Segment duration must be positive, got {duration}")
    allowed = STYLE_VARIATIONS[style]
    variation = variation or allowed[0]
    if variation not in allowed:
        raise ValueError(f"Unknown variation '{variation}' for style {style.value}")

    voiced = tuple(sorted(pitches))
    if len(voiced) < 2:
        specs = _block(voiced, duration, variation)
    else:
        specs = _PATTERNS[style](voiced, duration, variation)

    return [
        HarmonyStep(
            segment=segment,
            onset=onset + offset,
            duration=slot,
            sustain=sustain,
            pitches=group,
        )
        for offset, slot, sustain, group in specs
    ]
