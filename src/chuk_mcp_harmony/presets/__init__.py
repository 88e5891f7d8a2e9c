"""
Preset system - named bundles of harmony options.

Presets don't add behaviour, they pick a point in the option space:
voicing style, density, complexity, register.
"""

from chuk_mcp_harmony.presets.loader import PresetLoader

__all__ = ["PresetLoader"]
