"""
Harmonization pipeline.

- progression: Segments the melody and picks (root, quality) per segment
- voicing: Places chord tones inside the register
- articulation: Lays voicings out in time per voicing style
- assembler: harmonize / realize_part / to_playback_parts
"""

from chuk_mcp_harmony.harmony.articulation import articulate
from chuk_mcp_harmony.harmony.assembler import (
    harmonize,
    realize_part,
    to_playback_parts,
    validate_input,
)
from chuk_mcp_harmony.harmony.progression import (
    ProgressionPlan,
    expanded_chord_index,
    expansion_spans,
    generate_progression,
    segment_timeline,
)
from chuk_mcp_harmony.harmony.voicing import place_voicing, realize_voicing, select_tones

__all__ = [
    "articulate",
    "harmonize",
    "realize_part",
    "to_playback_parts",
    "validate_input",
    "ProgressionPlan",
    "expanded_chord_index",
    "expansion_spans",
    "generate_progression",
    "segment_timeline",
    "place_voicing",
    "realize_voicing",
    "select_tones",
]
