"""
HarmonyParams - the harmonizer's configuration.

Every recognised option is a validated field. Unknown options are rejected
so typos in presets or tool arguments surface immediately.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from chuk_mcp_harmony.constants import (
    DEFAULT_HIGHEST_NOTE,
    DEFAULT_LOWEST_NOTE,
    DEFAULT_SEGMENT_BEATS,
    MIN_REGISTER_SPAN,
    STYLE_VARIATIONS,
    DoublingPreference,
    HarmonicComplexity,
    KeyCenter,
    ModalMode,
    VoicingStyle,
)
from chuk_mcp_harmony.core.chord import ChordQuality


class HarmonyParams(BaseModel):
    """
    Configuration for one harmonization run.

    Defaults: automatic key center, block chords, 4 voices, seventh-chord
    complexity, C2-C6 register, open voicing, inversions allowed.
    """

    # Key
    key_center: KeyCenter = Field(KeyCenter.AUTOMATIC, description="How the tonal center is chosen")
    key_center_bias: float = Field(
        0.0, ge=-1.0, le=1.0, description="Spelling preference: negative = flats, otherwise sharps"
    )
    mode: ModalMode | None = Field(None, description="Diatonic mode for modal key centers")
    modal_final: int | None = Field(
        None, ge=0, le=11, description="Tonic pitch class for modal key centers"
    )

    # Articulation
    voicing_style: VoicingStyle = Field(VoicingStyle.BLOCK, description="Temporal pattern")
    style_variation: str | None = Field(None, description="Variation of the voicing style")

    # Chord content
    density: int = Field(4, ge=3, le=7, description="Number of chord tones per voicing")
    complexity: HarmonicComplexity = Field(
        HarmonicComplexity.SEVENTH, description="Which chord qualities are eligible"
    )
    quality: ChordQuality | None = Field(None, description="Force one quality on every chord")
    custom_progression: tuple[ChordQuality, ...] | None = Field(
        None, min_length=1, description="Explicit chord qualities spread over the melody"
    )

    # Register and voicing
    lowest_note: int = Field(DEFAULT_LOWEST_NOTE, ge=0, le=127, description="Lowest MIDI note")
    highest_note: int = Field(DEFAULT_HIGHEST_NOTE, ge=0, le=127, description="Highest MIDI note")
    prefer_closed_voicing: bool = Field(False, description="Keep voicings compact")
    allow_inversions: bool = Field(True, description="Allow non-root bass notes")
    doubling_preference: DoublingPreference = Field(
        DoublingPreference.BALANCED, description="Tone to double when density exceeds chord size"
    )

    # Timeline
    segment_beats: float = Field(
        DEFAULT_SEGMENT_BEATS, gt=0, description="Target harmonic segment length in beats"
    )

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("quality", mode="before")
    @classmethod
    def parse_quality(cls, v: Any) -> Any:
        """Accept quality symbols ('dom7') and member names ('DOMINANT_7')."""
        if isinstance(v, str):
            return ChordQuality.parse(v)
        return v

    @field_validator("custom_progression", mode="before")
    @classmethod
    def parse_custom_progression(cls, v: Any) -> Any:
        """Accept a list of quality symbols."""
        if isinstance(v, (list, tuple)):
            return tuple(ChordQuality.parse(q) if isinstance(q, str) else q for q in v)
        return v

    @model_validator(mode="after")
    def validate_ranges(self) -> HarmonyParams:
        """Check the register span and the style variation."""
        if self.highest_note - self.lowest_note < MIN_REGISTER_SPAN:
            raise ValueError(
                f"Register {self.lowest_note}-{self.highest_note} must span at least "
                f"{MIN_REGISTER_SPAN} semitones"
            )
        if self.style_variation is not None:
            allowed = STYLE_VARIATIONS[self.voicing_style]
            if self.style_variation not in allowed:
                raise ValueError(
                    f"Variation '{self.style_variation}' is not available for "
                    f"{self.voicing_style.value}; choose one of {', '.join(allowed)}"
                )
        return self

    @property
    def prefer_flats(self) -> bool:
        """Spell roots with flats (display only)."""
        return self.key_center_bias < 0

    @property
    def variation(self) -> str:
        """The style variation in effect (the style's first variation by default)."""
        return self.style_variation or STYLE_VARIATIONS[self.voicing_style][0]

    def with_overrides(self, **overrides: Any) -> HarmonyParams:
        """Return a validated copy with some options replaced."""
        data = self.model_dump()
        if "voicing_style" in overrides and "style_variation" not in overrides:
            data["style_variation"] = None
        data.update(overrides)
        return HarmonyParams.model_validate(data)
