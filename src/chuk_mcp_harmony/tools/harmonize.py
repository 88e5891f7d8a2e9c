"""
Harmonize tools - MCP tools for harmonizing melodies.

Tools for running the harmonization pipeline, detecting keys, labelling
chords and projecting results onto playback parts.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from chuk_mcp_harmony.analysis import detect_key
from chuk_mcp_harmony.constants import ErrorMessages, HarmonicComplexity
from chuk_mcp_harmony.core.chord import CHORD_INTERVALS, eligible_qualities, generate_chord_label
from chuk_mcp_harmony.editor import HarmonySessionManager
from chuk_mcp_harmony.harmony import to_playback_parts, validate_input
from chuk_mcp_harmony.models.params import HarmonyParams
from chuk_mcp_harmony.presets import PresetLoader
from chuk_mcp_harmony.tools.editor import editor_state

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def resolve_params(
    preset_loader: PresetLoader,
    preset: str | None,
    options: dict[str, Any] | None,
) -> HarmonyParams:
    """Preset params (or defaults) with tool options layered on top."""
    base = HarmonyParams()
    if preset:
        found = preset_loader.get_preset(preset)
        if found is None:
            raise ValueError(ErrorMessages.PRESET_NOT_FOUND.format(name=preset))
        base = found.params
    if options:
        return base.with_overrides(**options)
    return base


def register_harmonize_tools(
    mcp: ChukMCPServer,
    manager: HarmonySessionManager,
    preset_loader: PresetLoader,
) -> dict[str, Any]:
    """
    Register harmonization tools with the MCP server.

    Args:
        mcp: The MCP server instance
        manager: The harmony session manager
        preset_loader: The preset loader

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    @mcp.tool  # type: ignore[arg-type]
    async def harmony_harmonize(
        name: str,
        melody: list[int | None],
        rhythm: list[float],
        preset: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> str:
        """
        Harmonize a melody and open an editing session on the result.

        Detects the key, generates a chord progression and voices it.

        Args:
            name: Session name for later edits
            melody: MIDI note numbers (0-127); null for rests
            rhythm: Duration of each melody element in beats
            preset: Optional preset name (e.g., 'jazz', 'chorale')
            options: Optional harmony options overriding the preset
                (e.g., {"voicing_style": "alberti", "density": 3})

        Returns:
            JSON string with the harmonized part and session state

        Example:
            harmony_harmonize(
                name="verse",
                melody=[60, 62, 64, 65, 67, null, 67, 65],
                rhythm=[1, 1, 1, 1, 2, 1, 1, 1],
                preset="jazz"
            )
        """
        try:
            params = resolve_params(preset_loader, preset, options)
            editor = await manager.create(name, melody, rhythm, params)
            return json.dumps(
                {
                    "status": "success",
                    "part": editor.current.to_dict(),
                    "session": editor_state(name, editor),
                }
            )
        except Exception as e:
            logger.exception("Failed to harmonize melody")
            return json.dumps({"status": "error", "message": str(e)})

    tools["harmony_harmonize"] = harmony_harmonize

    @mcp.tool  # type: ignore[arg-type]
    async def harmony_detect_key(
        melody: list[int | None],
        rhythm: list[float],
        key_center: str = "automatic",
        key_center_bias: float = 0.0,
    ) -> str:
        """
        Detect the key of a melody.

        Args:
            melody: MIDI note numbers (0-127); null for rests
            rhythm: Duration of each melody element in beats
            key_center: automatic, major, minor or modal
            key_center_bias: Negative values spell the result with flats

        Returns:
            JSON string with detected key, quality and confidence

        Example:
            harmony_detect_key(melody=[60, 62, 64, 65], rhythm=[1, 1, 1, 1])
        """
        try:
            elements, durations = validate_input(melody, rhythm)
            params = HarmonyParams(key_center=key_center, key_center_bias=key_center_bias)
            analysis = detect_key(elements, durations, params)
            return json.dumps({"status": "success", "analysis": analysis.to_dict()})
        except Exception as e:
            logger.exception("Failed to detect key")
            return json.dumps({"status": "error", "message": str(e)})

    tools["harmony_detect_key"] = harmony_detect_key

    @mcp.tool  # type: ignore[arg-type]
    async def harmony_chord_label(root: int, quality: str, prefer_flats: bool = False) -> str:
        """
        Get the display label of a chord.

        Args:
            root: Root pitch class (0=C ... 11=B)
            quality: Quality symbol (e.g., 'dom7', 'm', 'hdim7')
            prefer_flats: Spell the root with flats

        Returns:
            JSON string with the label

        Example:
            harmony_chord_label(root=0, quality="dom7")
        """
        try:
            label = generate_chord_label(root, quality, prefer_flats=prefer_flats)
            return json.dumps({"status": "success", "label": label})
        except Exception as e:
            logger.exception("Failed to label chord")
            return json.dumps({"status": "error", "message": str(e)})

    tools["harmony_chord_label"] = harmony_chord_label

    @mcp.tool  # type: ignore[arg-type]
    async def harmony_list_qualities(complexity: str | None = None) -> str:
        """
        List chord qualities and their intervals.

        Args:
            complexity: Only list qualities eligible at this level
                (basic, seventh, ninth, eleventh, thirteenth, extended, altered)

        Returns:
            JSON string with qualities, intervals and labels

        Example:
            harmony_list_qualities(complexity="seventh")
        """
        try:
            allowed = eligible_qualities(HarmonicComplexity(complexity)) if complexity else None
            qualities = [
                {
                    "quality": quality.value,
                    "intervals": list(intervals),
                    "example": generate_chord_label(0, quality),
                }
                for quality, intervals in CHORD_INTERVALS.items()
                if allowed is None or quality in allowed
            ]
            return json.dumps({"status": "success", "qualities": qualities, "count": len(qualities)})
        except Exception as e:
            logger.exception("Failed to list qualities")
            return json.dumps({"status": "error", "message": str(e)})

    tools["harmony_list_qualities"] = harmony_list_qualities

    @mcp.tool  # type: ignore[arg-type]
    async def harmony_playback_parts(name: str, saved: bool = False) -> str:
        """
        Get a session's melody and harmony voices as monophonic parts.

        Args:
            name: Session name
            saved: Use the last saved part instead of the current state

        Returns:
            JSON string with one part for the melody and one per voice

        Example:
            harmony_playback_parts(name="verse")
        """
        try:
            editor = await manager.get(name)
            if editor is None:
                return json.dumps(
                    {"status": "error", "message": ErrorMessages.SESSION_NOT_FOUND.format(name=name)}
                )
            part = await manager.last_saved(name) if saved else editor.current
            if part is None:
                return json.dumps({"status": "error", "message": f"Session '{name}' has not been saved"})
            parts = to_playback_parts(part)
            return json.dumps(
                {"status": "success", "parts": [p.to_dict() for p in parts], "count": len(parts)}
            )
        except Exception as e:
            logger.exception("Failed to build playback parts")
            return json.dumps({"status": "error", "message": str(e)})

    tools["harmony_playback_parts"] = harmony_playback_parts

    return tools
