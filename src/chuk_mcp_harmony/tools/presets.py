"""
Preset tools - MCP tools for preset discovery and customization.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from chuk_mcp_harmony.constants import ErrorMessages
from chuk_mcp_harmony.models import Preset
from chuk_mcp_harmony.presets import PresetLoader

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def register_preset_tools(
    mcp: ChukMCPServer,
    preset_loader: PresetLoader,
) -> dict[str, Any]:
    """
    Register preset tools with the MCP server.

    Args:
        mcp: The MCP server instance
        preset_loader: The preset loader

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    @mcp.tool  # type: ignore[arg-type]
    async def harmony_list_presets() -> str:
        """
        List available presets.

        Returns all presets from the library and project.

        Returns:
            JSON string with list of preset summaries

        Example:
            harmony_list_presets()
        """
        try:
            presets = preset_loader.list_presets()
            return json.dumps(
                {
                    "status": "success",
                    "presets": [p.model_dump() for p in presets],
                    "count": len(presets),
                }
            )
        except Exception as e:
            logger.exception("Failed to list presets")
            return json.dumps({"status": "error", "message": str(e)})

    tools["harmony_list_presets"] = harmony_list_presets

    @mcp.tool  # type: ignore[arg-type]
    async def harmony_describe_preset(name: str) -> str:
        """
        Get the full harmony options of a preset.

        Args:
            name: Preset name

        Returns:
            JSON string with the preset's options

        Example:
            harmony_describe_preset(name="chorale")
        """
        try:
            preset = preset_loader.get_preset(name)
            if preset is None:
                return json.dumps(
                    {"status": "error", "message": ErrorMessages.PRESET_NOT_FOUND.format(name=name)}
                )
            return json.dumps(
                {
                    "status": "success",
                    "preset": {
                        "name": preset.name,
                        "description": preset.description,
                        "params": preset.params.model_dump(mode="json"),
                    },
                }
            )
        except Exception as e:
            logger.exception("Failed to describe preset")
            return json.dumps({"status": "error", "message": str(e)})

    tools["harmony_describe_preset"] = harmony_describe_preset

    @mcp.tool  # type: ignore[arg-type]
    async def harmony_copy_preset_to_project(name: str) -> str:
        """
        Copy a library preset into the project for customization.

        The project copy overrides the library preset of the same name.

        Args:
            name: Preset name

        Returns:
            JSON string with the path of the copy

        Example:
            harmony_copy_preset_to_project(name="jazz")
        """
        try:
            path = preset_loader.copy_to_project(name)
            if path is None:
                return json.dumps(
                    {"status": "error", "message": ErrorMessages.PRESET_NOT_FOUND.format(name=name)}
                )
            return json.dumps(
                {"status": "success", "message": f"Copied preset '{name}'", "path": str(path)}
            )
        except Exception as e:
            logger.exception("Failed to copy preset")
            return json.dumps({"status": "error", "message": str(e)})

    tools["harmony_copy_preset_to_project"] = harmony_copy_preset_to_project

    @mcp.tool  # type: ignore[arg-type]
    async def harmony_save_preset(
        name: str,
        options: dict[str, Any] | None = None,
        description: str = "",
    ) -> str:
        """
        Save a set of harmony options as a project preset.

        Only options that differ from the defaults are written. A project
        preset with the same name is replaced.

        Args:
            name: Preset name (letters, digits, '-' and '_')
            options: Harmony options, as accepted by harmony_harmonize
            description: Short description shown in listings

        Returns:
            JSON string with the path and the stored options

        Example:
            harmony_save_preset(
                name="dark_waltz",
                options={"voicing_style": "waltz", "complexity": "ninth", "key_center_bias": -0.5},
                description="Waltz with flat spellings"
            )
        """
        try:
            preset = Preset(name=name, description=description, params=options or {})
            path = preset_loader.save_preset(preset)
            return json.dumps(
                {
                    "status": "success",
                    "message": f"Saved preset '{preset.name}'",
                    "path": str(path),
                    "preset": preset.to_yaml_dict(),
                }
            )
        except Exception as e:
            logger.exception("Failed to save preset")
            return json.dumps({"status": "error", "message": str(e)})

    tools["harmony_save_preset"] = harmony_save_preset

    return tools
