"""
Tests for the harmonization pipeline and playback projection.
"""

from fractions import Fraction

import pytest
from pydantic import ValidationError

from chuk_mcp_harmony.constants import STYLE_VARIATIONS, HarmonicComplexity, VoicingStyle
from chuk_mcp_harmony.core import REST, ChordQuality, Pitch, eligible_qualities
from chuk_mcp_harmony.exceptions import HarmonyError, InvalidInputError
from chuk_mcp_harmony.harmony import harmonize, to_playback_parts, validate_input
from chuk_mcp_harmony.models import HarmonizedPart, HarmonyParams


class TestValidateInput:
    """Tests for input validation."""

    def test_normalizes(self) -> None:
        """Loose input becomes elements and fractions."""
        melody, rhythm = validate_input([60, None, 0], [1, 0.5, "1/3"])
        assert melody == (Pitch(60), REST, Pitch(0))
        assert rhythm == (Fraction(1), Fraction(1, 2), Fraction(1, 3))

    def test_empty_melody(self) -> None:
        """An empty melody is rejected."""
        with pytest.raises(InvalidInputError, match="at least one"):
            validate_input([], [])

    def test_length_mismatch(self) -> None:
        """Melody and rhythm must line up."""
        with pytest.raises(InvalidInputError, match="3 elements but rhythm has 2"):
            validate_input([60, 62, 64], [1, 1])

    def test_pitch_out_of_range(self) -> None:
        """Pitches above 127 are rejected."""
        with pytest.raises(InvalidInputError):
            validate_input([60, 128], [1, 1])

    def test_non_positive_duration(self) -> None:
        """Zero and negative durations are rejected."""
        with pytest.raises(InvalidInputError, match="position 1"):
            validate_input([60, 62], [1, 0])
        with pytest.raises(InvalidInputError):
            validate_input([60, 62], [1, -1])

    def test_unparseable_duration(self) -> None:
        """Garbage durations are rejected."""
        with pytest.raises(InvalidInputError):
            validate_input([60], ["quarter"])
        with pytest.raises(InvalidInputError):
            validate_input([60], [float("nan")])

    def test_errors_share_a_base(self) -> None:
        """Input errors are HarmonyErrors and ValueErrors."""
        with pytest.raises(HarmonyError):
            validate_input([], [])
        with pytest.raises(ValueError):
            validate_input([], [])


class TestHarmonize:
    """Tests for harmonize."""

    def test_scale_fragment(self, scale_fragment) -> None:
        """C-D-E-F: C major, one chord, compact labels."""
        part = harmonize(*scale_fragment)
        assert isinstance(part, HarmonizedPart)
        assert part.analysis.detected_key == 0
        assert part.analysis.confidence > 0
        assert part.chord_labels == ("Cmaj7",)
        assert not part.labels_expanded

    def test_twinkle_labels(self, twinkle_part) -> None:
        """One label per segment."""
        assert twinkle_part.chord_labels == ("Cmaj7", "Am7", "Em7", "Dm7")
        assert len(twinkle_part.voicings) == len(twinkle_part.segments) == 4

    def test_keeps_original_input(self, twinkle, twinkle_part) -> None:
        """The part carries the melody it was built from."""
        melody, rhythm = twinkle
        assert len(twinkle_part.original_melody) == len(melody)
        assert twinkle_part.original_melody[7] is REST
        assert twinkle_part.total_beats == sum(rhythm)

    def test_voicings_respect_params(self, twinkle) -> None:
        """Voicings hold density pitches inside the register."""
        melody, rhythm = twinkle
        params = HarmonyParams(density=5, lowest_note=40, highest_note=70)
        part = harmonize(melody, rhythm, params)
        for voicing in part.voicings:
            assert len(voicing) == 5
            assert all(40 <= p <= 70 for p in voicing)

    def test_params_as_dict(self, scale_fragment) -> None:
        """Options can be given as a plain mapping."""
        part = harmonize(*scale_fragment, {"complexity": "basic", "density": 3})
        assert part.chord_labels == ("C",)
        assert part.params.complexity == HarmonicComplexity.BASIC

    def test_invalid_params(self, scale_fragment) -> None:
        """Unknown or out-of-range options are rejected."""
        with pytest.raises(ValidationError):
            harmonize(*scale_fragment, {"density": 9})
        with pytest.raises(ValidationError):
            harmonize(*scale_fragment, {"colour": "dark"})
        with pytest.raises(ValidationError):
            harmonize(*scale_fragment, {"lowest_note": 60, "highest_note": 70})

    def test_invalid_input_computes_nothing(self) -> None:
        """Bad input raises before the pipeline runs."""
        with pytest.raises(InvalidInputError):
            harmonize([60, 62], [1])

    def test_flat_spelling(self) -> None:
        """Negative bias spells roots with flats."""
        melody = [70, 74, 70, 77, 70]
        rhythm = [1, 1, 1, 1, 4]
        part = harmonize(melody, rhythm, {"key_center_bias": -1.0, "complexity": "basic"})
        assert part.chord_labels == ("Bb", "Bb")
        assert part.analysis.key.to_dict()["key_name"] == "Bb major"

    def test_qualities_eligible(self, twinkle) -> None:
        """Every complexity yields eligible qualities only."""
        melody, rhythm = twinkle
        for complexity in HarmonicComplexity:
            part = harmonize(melody, rhythm, {"complexity": complexity})
            assert set(part.chord_qualities) <= eligible_qualities(complexity)

    def test_every_style_renders(self, twinkle) -> None:
        """Each style and variation produces steps for every segment."""
        melody, rhythm = twinkle
        for style, variations in STYLE_VARIATIONS.items():
            for variation in variations:
                part = harmonize(
                    melody, rhythm, {"voicing_style": style, "style_variation": variation}
                )
                assert {s.segment for s in part.harmony_notes} == {0, 1, 2, 3}

    def test_custom_progression(self, twinkle) -> None:
        """Custom progressions override generation."""
        melody, rhythm = twinkle
        part = harmonize(melody, rhythm, {"custom_progression": ["M", "M", "dom7", "M"]})
        assert part.chord_roots == (0, 5, 7, 0)
        assert part.chord_labels == ("C", "F", "G7", "C")
        assert part.chord_qualities[2] == ChordQuality.DOMINANT_7

    def test_to_dict(self, twinkle_part) -> None:
        """Serialization uses plain JSON types."""
        d = twinkle_part.to_dict()
        assert d["original_melody"][7] is None
        assert d["rhythm"][-1] == 2
        assert d["chord_labels"] == ["Cmaj7", "Am7", "Em7", "Dm7"]
        assert d["analysis"]["key_name"] == "C major"
        assert d["params"]["voicing_style"] == "block"
        assert d["segments"][0] == {"start": 0, "end": 4, "onset": 0, "duration": 4}


class TestPlaybackParts:
    """Tests for to_playback_parts."""

    def test_melody_first(self, twinkle_part) -> None:
        """The first part is the original melody."""
        parts = to_playback_parts(twinkle_part)
        assert parts[0].name == "melody"
        assert parts[0].melody == twinkle_part.original_melody
        assert parts[0].rhythm == twinkle_part.rhythm

    def test_one_part_per_voice(self, twinkle_part) -> None:
        """Block chords in four voices give four harmony parts."""
        parts = to_playback_parts(twinkle_part)
        assert [p.name for p in parts[1:]] == ["voice_1", "voice_2", "voice_3", "voice_4"]

    def test_parts_fill_the_timeline(self, twinkle) -> None:
        """Every part lasts exactly as long as the melody."""
        melody, rhythm = twinkle
        total = sum(Fraction(r) for r in rhythm)
        for style, variations in STYLE_VARIATIONS.items():
            part = harmonize(
                melody, rhythm, {"voicing_style": style, "style_variation": variations[-1]}
            )
            for playback in to_playback_parts(part):
                assert sum(playback.rhythm, Fraction(0)) == total, (style, playback.name)
                assert all(d > 0 for d in playback.rhythm)

    def test_block_voices_hold_chords(self, twinkle_part) -> None:
        """Each voice of a block chord sounds once per segment."""
        voice = to_playback_parts(twinkle_part)[1]
        assert len(voice.melody) == 4
        assert list(voice.rhythm) == [4, 4, 4, 4]
        assert [p.note for p in voice.melody] == [v[0] for v in twinkle_part.voicings]

    def test_staccato_leaves_rests(self, twinkle) -> None:
        """Detached styles alternate notes and rests."""
        melody, rhythm = twinkle
        part = harmonize(melody, rhythm, {"voicing_style": VoicingStyle.STACCATO})
        voice = to_playback_parts(part)[1]
        assert REST in voice.melody
