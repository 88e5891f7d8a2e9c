"""
Melody analysis.

- detect_key: Duration-weighted Krumhansl-Schmuckler key detection
"""

from chuk_mcp_harmony.analysis.key_detector import (
    MAJOR_PROFILE,
    MINOR_PROFILE,
    detect_key,
    pitch_class_histogram,
    score_keys,
)

__all__ = [
    "MAJOR_PROFILE",
    "MINOR_PROFILE",
    "detect_key",
    "pitch_class_histogram",
    "score_keys",
]
