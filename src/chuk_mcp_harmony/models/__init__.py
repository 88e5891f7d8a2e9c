"""
Models for the harmony system.

This module provides:
- HarmonyParams: Validated harmonizer configuration
- KeyAnalysis / HarmonicAnalysis: Key detection and the compact progression
- SegmentSpan / HarmonyStep: Segment timeline and voiced articulation events
- HarmonizedPart: The harmonization result
- Part: Monophonic playback projection
- Preset: Named bundle of harmony options
"""

from chuk_mcp_harmony.models.params import HarmonyParams
from chuk_mcp_harmony.models.part import (
    HarmonicAnalysis,
    HarmonizedPart,
    HarmonyStep,
    KeyAnalysis,
    Part,
    SegmentSpan,
)
from chuk_mcp_harmony.models.preset import Preset, PresetMetadata

__all__ = [
    "HarmonyParams",
    "Preset",
    "PresetMetadata",
    "KeyAnalysis",
    "HarmonicAnalysis",
    "SegmentSpan",
    "HarmonyStep",
    "HarmonizedPart",
    "Part",
]
