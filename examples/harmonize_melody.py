#!/usr/bin/env python3
"""
Example: Harmonize a melody.

This demonstrates the full pipeline from a bare melody to voiced chords:
key detection, progression generation, voicing and playback parts.

Usage:
    python examples/harmonize_melody.py
"""

from chuk_mcp_harmony.constants import STYLE_VARIATIONS, VoicingStyle
from chuk_mcp_harmony.harmony import harmonize, to_playback_parts
from chuk_mcp_harmony.models import HarmonyParams

# Twinkle Twinkle Little Star, with a rest at the end of the second bar
MELODY = [60, 60, 67, 67, 69, 69, 67, None, 65, 65, 64, 64, 62, 62, 60]
RHYTHM = [1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 2]


def main() -> None:
    """Harmonize one melody with a few different settings."""
    print("CHUK Harmony Demo")
    print("=" * 40)

    part = harmonize(MELODY, RHYTHM)
    analysis = part.analysis
    print(f"Key: {analysis.key.to_dict()['key_name']} (confidence {analysis.confidence:.2f})")
    print(f"Chords: {' | '.join(part.chord_labels)}")
    print()

    print("Voicings:")
    for label, voicing, span in zip(part.chord_labels, part.voicings, part.segments):
        print(f"  {label:8} beats {float(span.onset):>5.1f}+{float(span.duration):<4} {voicing}")
    print()

    # Same melody, richer harmony
    for complexity in ["basic", "ninth", "altered"]:
        params = HarmonyParams(complexity=complexity, density=5)
        labels = harmonize(MELODY, RHYTHM, params).chord_labels
        print(f"  {complexity:10} {' | '.join(labels)}")
    print()

    # Voicing styles change timing only
    print("Voicing styles (steps per part):")
    for style in VoicingStyle:
        variation = STYLE_VARIATIONS[style][0]
        styled = harmonize(MELODY, RHYTHM, {"voicing_style": style})
        print(f"  {style.value:12} {variation:12} {len(styled.harmony_notes)} steps")
    print()

    print("Playback parts:")
    for playback in to_playback_parts(part):
        print(f"  {playback.name:8} {len(playback.melody)} events, {float(sum(playback.rhythm))} beats")


if __name__ == "__main__":
    main()
