"""
Preset model - named bundles of harmony options.

Presets are configuration, not behaviour: each one is a HarmonyParams
plus a name and description, stored as YAML.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from chuk_mcp_harmony.models.params import HarmonyParams


class Preset(BaseModel):
    """A named set of harmony options."""

    name: str = Field(..., description="Preset identifier (e.g., 'jazz')")
    description: str = Field("", description="What the preset sounds like")
    params: HarmonyParams = Field(default_factory=HarmonyParams, description="Harmony options")

    model_config = {"frozen": True}

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Ensure preset name is a valid identifier."""
        if not v or not v.replace("_", "").replace("-", "").isalnum():
            raise ValueError(f"Invalid preset name: {v}")
        return v.lower()

    def to_yaml_dict(self) -> dict[str, Any]:
        """Convert to a dictionary suitable for YAML."""
        defaults = HarmonyParams().model_dump(mode="json")
        params = {
            k: v for k, v in self.params.model_dump(mode="json").items() if defaults.get(k) != v
        }
        return {"name": self.name, "description": self.description, "params": params}


class PresetMetadata(BaseModel):
    """Lightweight preset info for listing."""

    name: str
    description: str
    voicing_style: str
    complexity: str
    density: int

    @classmethod
    def from_preset(cls, preset: Preset) -> PresetMetadata:
        """Create metadata from a full preset."""
        return cls(
            name=preset.name,
            description=preset.description,
            voicing_style=preset.params.voicing_style.value,
            complexity=preset.params.complexity.value,
            density=preset.params.density,
        )
