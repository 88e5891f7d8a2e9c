"""
Key Detector - infers the tonal center of a melody.

Automatic detection builds a duration-weighted pitch-class histogram and
correlates it (Pearson) against the Krumhansl-Schmuckler major and minor
profiles rotated to each of the 12 roots. Forced key centers skip the
correlation and only pick a tonic.

keyCenterBias never reaches this scoring; it only decides how the result
is spelled.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from fractions import Fraction

from chuk_mcp_harmony.constants import KeyCenter, KeyQuality, ModalMode
from chuk_mcp_harmony.core.melody import MelodyElement, Pitch
from chuk_mcp_harmony.core.pitch import PitchClass
from chuk_mcp_harmony.core.scale import Key, mode_quality
from chuk_mcp_harmony.models.params import HarmonyParams
from chuk_mcp_harmony.models.part import KeyAnalysis

logger = logging.getLogger(__name__)

# Krumhansl-Schmuckler key profiles, tonic first
MAJOR_PROFILE: tuple[float, ...] = (
    6.35, 2.23, 3.48, 2.33, 4.38, 4.09, 2.52, 5.19, 2.39, 3.66, 2.29, 2.88,
)
MINOR_PROFILE: tuple[float, ...] = (
    6.33, 2.68, 3.52, 5.38, 2.60, 3.53, 2.54, 4.75, 3.98, 2.69, 3.34, 3.17,
)


def pitch_class_histogram(
    melody: Sequence[MelodyElement], rhythm: Sequence[Fraction]
) -> list[Fraction]:
    """Total duration per pitch class (index 0-11). Rests contribute nothing."""
    histogram = [Fraction(0)] * 12
    for element, duration in zip(melody, rhythm):
        if isinstance(element, Pitch):
            histogram[element.note % 12] += duration
    return histogram


def correlation(profile: Sequence[float], template: Sequence[float]) -> float:
    """Pearson correlation of two 12-element profiles; 0.0 when either is flat."""
    mean_profile = sum(profile) / 12
    mean_template = sum(template) / 12

    numerator = sum((p - mean_profile) * (t - mean_template) for p, t in zip(profile, template))
    sum_sq_profile = sum((p - mean_profile) ** 2 for p in profile)
    sum_sq_template = sum((t - mean_template) ** 2 for t in template)

    denominator = (sum_sq_profile * sum_sq_template) ** 0.5
    if denominator == 0:
        return 0.0
    return numerator / denominator


def rotate_profile(profile: Sequence[float], root: int) -> list[float]:
    """Align a tonic-first profile so index pc holds the weight of pc in root's key."""
    return [profile[(pc - root) % 12] for pc in range(12)]


def score_keys(histogram: Sequence[Fraction]) -> list[tuple[Key, float]]:
    """
    Correlation score for all 24 candidate keys.

    Majors come first, then minors, roots ascending within each.
    """
    values = [float(h) for h in histogram]
    scores: list[tuple[Key, float]] = []
    for quality, profile in ((KeyQuality.MAJOR, MAJOR_PROFILE), (KeyQuality.MINOR, MINOR_PROFILE)):
        for root in range(12):
            score = correlation(values, rotate_profile(profile, root))
            scores.append((Key(PitchClass(root), quality), score))
    return scores


def confidence_from_scores(scores: Sequence[float]) -> float:
    """
    Normalized gap between the best and second-best score.

    (best - second) / (best - worst), clamped to [0, 1]; 0 on ties.
    """
    if len(scores) < 2:
        return 0.0
    ordered = sorted(scores, reverse=True)
    best, second, worst = ordered[0], ordered[1], ordered[-1]
    spread = best - worst
    if spread <= 0:
        return 0.0
    return min(1.0, max(0.0, (best - second) / spread))


def dominant_pitch_class(histogram: Sequence[Fraction]) -> PitchClass:
    """Pitch class with the most total duration (lowest pitch class on ties)."""
    best = max(histogram)
    return PitchClass(histogram.index(best))


def detect_key(
    melody: Sequence[MelodyElement],
    rhythm: Sequence[Fraction],
    params: HarmonyParams | None = None,
) -> KeyAnalysis:
    """
    Infer the key of a melody.

    Args:
        melody: Pitches and rests
        rhythm: Durations in beats, parallel to melody
        params: Harmony options (key_center, mode, modal_final, bias)

    Returns:
        KeyAnalysis. An all-rest melody has tonic C and confidence 0; its
        quality is major unless a forced key center says otherwise.
    """
    params = params or HarmonyParams()
    prefer_flats = params.prefer_flats
    histogram = pitch_class_histogram(melody, rhythm)
    sounding = any(histogram)
    if not sounding:
        logger.info("Melody has no sounding notes; defaulting to tonic C")

    forced_confidence = 1.0 if sounding else 0.0
    tonic = dominant_pitch_class(histogram) if sounding else PitchClass.C

    if params.key_center == KeyCenter.MAJOR:
        analysis = KeyAnalysis(tonic, KeyQuality.MAJOR, forced_confidence, prefer_flats=prefer_flats)
    elif params.key_center == KeyCenter.MINOR:
        analysis = KeyAnalysis(tonic, KeyQuality.MINOR, forced_confidence, prefer_flats=prefer_flats)
    elif params.key_center == KeyCenter.MODAL:
        mode = params.mode or ModalMode.IONIAN
        if params.modal_final is not None:
            tonic = PitchClass(params.modal_final)
        analysis = KeyAnalysis(
            tonic, mode_quality(mode), forced_confidence, mode=mode, prefer_flats=prefer_flats
        )
    elif not sounding:
        analysis = KeyAnalysis(PitchClass.C, KeyQuality.MAJOR, 0.0, prefer_flats=prefer_flats)
    else:
        scores = score_keys(histogram)
        best_key, best_score = scores[0]
        for key, score in scores[1:]:
            if score > best_score:
                best_key, best_score = key, score
        confidence = confidence_from_scores([s for _, s in scores])
        analysis = KeyAnalysis(
            best_key.tonic, best_key.quality, confidence, prefer_flats=prefer_flats
        )
        logger.debug("Key correlation best=%.4f (%s)", best_score, best_key)

    logger.info(
        "Detected key %s (confidence %.2f)",
        analysis.key.spell(prefer_flats),
        analysis.confidence,
    )
    return analysis
