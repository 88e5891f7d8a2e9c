#!/usr/bin/env python3
"""
Async Harmony MCP Server using chuk-mcp-server

This server provides MCP tools for harmonizing melodies and editing the
resulting chord progressions.

The server provides tools for:
- Harmonizing a melody (key detection, progression, voicing)
- Chord labels and the chord-quality vocabulary
- Editing progressions with undo/redo, save and discard
- Playback projection of harmonized parts
- Preset discovery and customization
"""

import logging
import os
from pathlib import Path

from chuk_mcp_server import ChukMCPServer

from chuk_mcp_harmony.editor import HarmonySessionManager
from chuk_mcp_harmony.presets import PresetLoader
from chuk_mcp_harmony.tools import (
    register_editor_tools,
    register_harmonize_tools,
    register_preset_tools,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create the MCP server instance
mcp = ChukMCPServer("chuk-mcp-harmony")

# Paths - use standard project structure
BASE_PATH = Path.cwd()
PRESETS_DIR = Path(os.environ.get("CHUK_HARMONY_PRESETS_DIR", BASE_PATH / "presets"))
PRESETS_LIBRARY_PATH = Path(__file__).parent / "presets" / "library"

# Create managers
session_manager = HarmonySessionManager()
preset_loader = PresetLoader(
    library_path=PRESETS_LIBRARY_PATH,
    project_path=PRESETS_DIR,
)

# Register all tools
harmonize_tools = register_harmonize_tools(mcp, session_manager, preset_loader)
editor_tools = register_editor_tools(mcp, session_manager)
preset_tools = register_preset_tools(mcp, preset_loader)

# Export tool functions for direct access
harmony_harmonize = harmonize_tools["harmony_harmonize"]
harmony_detect_key = harmonize_tools["harmony_detect_key"]
harmony_chord_label = harmonize_tools["harmony_chord_label"]
harmony_list_qualities = harmonize_tools["harmony_list_qualities"]
harmony_playback_parts = harmonize_tools["harmony_playback_parts"]

harmony_get_session = editor_tools["harmony_get_session"]
harmony_list_sessions = editor_tools["harmony_list_sessions"]
harmony_close_session = editor_tools["harmony_close_session"]
harmony_change_chord = editor_tools["harmony_change_chord"]
harmony_delete_chord = editor_tools["harmony_delete_chord"]
harmony_insert_chord = editor_tools["harmony_insert_chord"]
harmony_undo = editor_tools["harmony_undo"]
harmony_redo = editor_tools["harmony_redo"]
harmony_save = editor_tools["harmony_save"]
harmony_discard = editor_tools["harmony_discard"]

harmony_list_presets = preset_tools["harmony_list_presets"]
harmony_describe_preset = preset_tools["harmony_describe_preset"]
harmony_copy_preset_to_project = preset_tools["harmony_copy_preset_to_project"]
harmony_save_preset = preset_tools["harmony_save_preset"]

logger.info("CHUK Harmony MCP Server initialized")
logger.info(f"  Preset library: {PRESETS_LIBRARY_PATH}")
logger.info(f"  Project presets: {PRESETS_DIR}")
