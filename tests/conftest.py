"""
Pytest configuration and shared fixtures.
"""

import tempfile
from fractions import Fraction
from pathlib import Path

import pytest

from chuk_mcp_harmony.harmony import harmonize
from chuk_mcp_harmony.models import HarmonizedPart, HarmonyParams


@pytest.fixture
def temp_dir() -> Path:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def presets_library_path() -> Path:
    """Path to the built-in preset library."""
    return Path(__file__).parent.parent / "src" / "chuk_mcp_harmony" / "presets" / "library"


@pytest.fixture
def scale_fragment() -> tuple[list[int], list[Fraction]]:
    """C-D-E-F in quarter notes."""
    return [60, 62, 64, 65], [Fraction(1)] * 4


@pytest.fixture
def twinkle() -> tuple[list[int | None], list[int]]:
    """Twinkle Twinkle in C major, two bars of four beats plus a rest."""
    melody: list[int | None] = [60, 60, 67, 67, 69, 69, 67, None, 65, 65, 64, 64, 62, 62, 60]
    rhythm = [1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 2]
    return melody, rhythm


@pytest.fixture
def twinkle_part(twinkle) -> HarmonizedPart:
    """Twinkle harmonized with default options."""
    melody, rhythm = twinkle
    return harmonize(melody, rhythm, HarmonyParams())
