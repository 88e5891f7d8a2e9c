"""
Tests for the voicing realizer and articulation patterns.
"""

from fractions import Fraction

import pytest

from chuk_mcp_harmony.constants import STYLE_VARIATIONS, DoublingPreference, VoicingStyle
from chuk_mcp_harmony.core import ChordQuality
from chuk_mcp_harmony.harmony import articulate, place_voicing, realize_voicing, select_tones
from chuk_mcp_harmony.harmony.voicing import pitch_positions
from chuk_mcp_harmony.models import HarmonyParams

REGISTERS = [(36, 84), (40, 76), (0, 24), (103, 127), (48, 72)]


class TestSelectTones:
    """Tests for select_tones."""

    def test_exact_density(self) -> None:
        """Every quality yields exactly density tones at every density."""
        for quality in ChordQuality:
            for density in range(3, 8):
                assert len(select_tones(quality, density)) == density

    def test_thinning_keeps_core_tones(self) -> None:
        """Thirteenth chords keep root, third, fifth and the top extension."""
        assert select_tones(ChordQuality.DOMINANT_13, 4) == [0, 4, 7, 21]

    def test_three_voice_seventh(self) -> None:
        """Three voices of a seventh chord drop the seventh."""
        assert select_tones(ChordQuality.DOMINANT_7, 3) == [0, 4, 7]

    def test_root_doubling(self) -> None:
        """Root doubling repeats the root."""
        assert select_tones(ChordQuality.MAJOR, 5, DoublingPreference.ROOT) == [0, 4, 7, 0, 0]

    def test_third_and_fifth_doubling(self) -> None:
        """Third and fifth doubling pick their tone."""
        assert select_tones(ChordQuality.MAJOR, 4, DoublingPreference.THIRD) == [0, 4, 7, 4]
        assert select_tones(ChordQuality.MAJOR, 4, DoublingPreference.FIFTH) == [0, 4, 7, 7]

    def test_balanced_doubling(self) -> None:
        """Balanced doubling cycles through the chord."""
        assert select_tones(ChordQuality.MINOR, 6) == [0, 3, 7, 0, 3, 7]

    def test_invalid_density(self) -> None:
        """Density must be positive."""
        with pytest.raises(ValueError):
            select_tones(ChordQuality.MAJOR, 0)


class TestPlaceVoicing:
    """Tests for place_voicing."""

    def test_pitch_positions(self) -> None:
        """Every C between C2 and C4."""
        assert pitch_positions(0, 36, 60) == [36, 48, 60]
        assert pitch_positions(7, 36, 60) == [43, 55]

    def test_range_containment(self) -> None:
        """Every voiced pitch stays inside the register."""
        for lowest, highest in REGISTERS:
            for closed in (False, True):
                for inversions in (False, True):
                    params = HarmonyParams(
                        lowest_note=lowest,
                        highest_note=highest,
                        prefer_closed_voicing=closed,
                        allow_inversions=inversions,
                        density=7,
                    )
                    for quality in ChordQuality:
                        for root in (0, 5, 11):
                            voicing = realize_voicing(quality, root, params, ceiling=66)
                            assert len(voicing) == 7
                            assert all(lowest <= p <= highest for p in voicing)

    def test_root_in_bass_without_inversions(self) -> None:
        """Without inversions the bass is always the root."""
        for closed in (False, True):
            params = HarmonyParams(allow_inversions=False, prefer_closed_voicing=closed)
            for quality in ChordQuality:
                voicing = realize_voicing(quality, 9, params, previous_bass=40)
                assert voicing[0] % 12 == 9

    def test_closed_voicing_is_compact(self) -> None:
        """A closed triad fits inside an octave."""
        params = HarmonyParams(prefer_closed_voicing=True, density=3)
        voicing = realize_voicing(ChordQuality.MAJOR, 0, params)
        assert voicing[-1] - voicing[0] < 12
        assert sorted(p % 12 for p in voicing) == [0, 4, 7]

    def test_closed_voicing_stays_under_melody(self) -> None:
        """Closed voicings sit below the segment's lowest melody note."""
        params = HarmonyParams(prefer_closed_voicing=True)
        voicing = realize_voicing(ChordQuality.MAJOR_7, 0, params, ceiling=72)
        assert max(voicing) < 72

    def test_open_voicing_spreads(self) -> None:
        """Open voicings start at the bottom of the register."""
        params = HarmonyParams(allow_inversions=False)
        voicing = realize_voicing(ChordQuality.MAJOR_7, 0, params)
        assert voicing[0] == 36
        assert voicing[-1] - voicing[0] > 12

    def test_closed_inversion_minimizes_span(self) -> None:
        """With inversions a closed voicing takes its tightest stacking."""
        params = HarmonyParams(prefer_closed_voicing=True, density=3)
        voicing = realize_voicing(ChordQuality.MAJOR, 0, params)
        assert voicing[-1] - voicing[0] == 7

    def test_doubled_tones_are_placed(self) -> None:
        """Doubles land inside the register above the bass."""
        params = HarmonyParams(density=6, doubling_preference=DoublingPreference.ROOT)
        voicing = place_voicing([0, 4, 7, 0, 0, 0], 2, params)
        assert len(voicing) == 6
        assert sum(1 for p in voicing if p % 12 == 2) == 4
        assert all(36 <= p <= 84 for p in voicing)

    def test_pitch_classes_come_from_the_chord(self) -> None:
        """No voiced pitch falls outside the chord."""
        params = HarmonyParams(density=5)
        voicing = realize_voicing(ChordQuality.DOMINANT_9, 7, params)
        chord = {int(pc) for pc in ChordQuality.DOMINANT_9.pitch_classes(7)}
        assert {p % 12 for p in voicing} <= chord


class TestArticulate:
    """Tests for articulation patterns."""

    VOICING = (48, 55, 64, 71)

    def test_block(self) -> None:
        """Block chords are one step holding everything."""
        steps = articulate(self.VOICING, Fraction(4), Fraction(4))
        assert len(steps) == 1
        assert steps[0].onset == 4
        assert steps[0].duration == 4
        assert steps[0].pitches == self.VOICING

    def test_every_style_sounds_the_same_pitches(self) -> None:
        """Styles change timing only; the pitch set never changes."""
        for style, variations in STYLE_VARIATIONS.items():
            for variation in variations:
                steps = articulate(self.VOICING, Fraction(0), Fraction(4), style, variation)
                sounded = {p for step in steps for p in step.pitches}
                assert sounded == set(self.VOICING), (style, variation)

    def test_steps_stay_in_segment(self) -> None:
        """Steps start inside the segment and sound within it."""
        for style, variations in STYLE_VARIATIONS.items():
            for variation in variations:
                steps = articulate(self.VOICING, Fraction(8), Fraction(3), style, variation)
                for step in steps:
                    assert 8 <= step.onset < 11
                    assert step.onset + step.sustain <= 11
                assert steps == sorted(steps, key=lambda s: s.onset)

    def test_waltz(self) -> None:
        """Bass on one, upper voices on two and three."""
        steps = articulate(self.VOICING, Fraction(0), Fraction(3), VoicingStyle.WALTZ)
        assert [s.pitches for s in steps] == [(48,), (55, 64, 71), (55, 64, 71)]
        assert [s.onset for s in steps] == [0, 1, 2]

    def test_alberti(self) -> None:
        """Low, top, inner, top."""
        steps = articulate((48, 55, 64), Fraction(0), Fraction(4), VoicingStyle.ALBERTI)
        assert [s.pitches[0] for s in steps] == [48, 64, 55, 64]

    def test_arpeggio_rings(self) -> None:
        """Arpeggiated notes sustain to the segment end."""
        steps = articulate(self.VOICING, Fraction(0), Fraction(4), VoicingStyle.ARPEGGIATED)
        assert [s.pitches[0] for s in steps] == list(self.VOICING)
        assert all(s.onset + s.sustain == 4 for s in steps)

    def test_staccato_is_detached(self) -> None:
        """Staccato hits sound for half their slot."""
        steps = articulate(self.VOICING, Fraction(0), Fraction(4), VoicingStyle.STACCATO)
        assert len(steps) == 4
        assert all(s.sustain == s.duration / 2 for s in steps)

    def test_waltz_syncopated(self) -> None:
        """Bass, a silent slot, then the upper voices twice."""
        steps = articulate(self.VOICING, Fraction(0), Fraction(4), VoicingStyle.WALTZ, "syncopated")
        assert [s.onset for s in steps] == [0, 2, 3]
        assert [s.pitches for s in steps] == [(48,), (55, 64, 71), (55, 64, 71)]

    def test_sustained_lengths(self) -> None:
        """Medium and short chords release before the segment ends."""
        medium = articulate(self.VOICING, Fraction(0), Fraction(4), VoicingStyle.SUSTAINED, "medium")
        short = articulate(self.VOICING, Fraction(0), Fraction(4), VoicingStyle.SUSTAINED, "short")
        assert [(s.duration, s.sustain) for s in medium] == [(4, 3)]
        assert [(s.duration, s.sustain) for s in short] == [(4, 2)]

    def test_sustained_crescendo(self) -> None:
        """Voices enter from the bass up and hold to the end."""
        steps = articulate(self.VOICING, Fraction(0), Fraction(4), VoicingStyle.SUSTAINED, "crescendo")
        assert [s.pitches[0] for s in steps] == list(self.VOICING)
        assert [s.onset for s in steps] == [0, Fraction(1, 2), 1, Fraction(3, 2)]
        assert all(s.onset + s.sustain == 4 for s in steps)

    def test_rolling_alternating(self) -> None:
        """Rolls up, then the top voice releases first."""
        steps = articulate(self.VOICING, Fraction(0), Fraction(4), VoicingStyle.ROLLING, "alternating")
        ends = [s.onset + s.sustain for s in steps]
        assert [s.pitches[0] for s in steps] == list(self.VOICING)
        assert ends == sorted(ends, reverse=True)
        assert ends[0] == 4

    def test_swing_timing(self) -> None:
        """Swing pairs split each beat two to one."""
        stride = articulate(self.VOICING, Fraction(0), Fraction(4), VoicingStyle.STRIDE, "swing")
        assert [s.onset for s in stride] == [0, Fraction(4, 3), 2, Fraction(10, 3)]
        assert [s.pitches for s in stride] == [(48,), (55, 64, 71), (48,), (55, 64, 71)]
        staccato = articulate(self.VOICING, Fraction(0), Fraction(4), VoicingStyle.STACCATO, "swing")
        assert len(staccato) == 3
        assert all(s.sustain == s.duration / 2 for s in staccato)

    def test_tremolo_quad(self) -> None:
        """Quad tremolo alternates sixteen times."""
        steps = articulate(self.VOICING, Fraction(0), Fraction(4), VoicingStyle.TREMOLO, "quad")
        assert len(steps) == 16
        assert steps[0].pitches == (48, 55)
        assert steps[1].pitches == (64, 71)

    def test_single_pitch_falls_back_to_block(self) -> None:
        """One pitch cannot be broken up."""
        steps = articulate((60,), Fraction(0), Fraction(2), VoicingStyle.TREMOLO)
        assert len(steps) == 1

    def test_unknown_variation(self) -> None:
        """Variations must belong to the style."""
        with pytest.raises(ValueError):
            articulate(self.VOICING, Fraction(0), Fraction(4), VoicingStyle.WALTZ, "swell")

    def test_segment_index_recorded(self) -> None:
        """Each step records its segment."""
        steps = articulate(self.VOICING, Fraction(0), Fraction(4), VoicingStyle.BROKEN, segment=3)
        assert {s.segment for s in steps} == {3}
