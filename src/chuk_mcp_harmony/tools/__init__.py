"""
MCP tool implementations.

Tools are organized by domain:
- harmonize - Harmonization, key detection, chord labels, playback parts
- editor - Session inspection and progression editing
- presets - Preset discovery and customization
"""

from chuk_mcp_harmony.tools.editor import register_editor_tools
from chuk_mcp_harmony.tools.harmonize import register_harmonize_tools
from chuk_mcp_harmony.tools.presets import register_preset_tools

__all__ = [
    "register_editor_tools",
    "register_harmonize_tools",
    "register_preset_tools",
]
