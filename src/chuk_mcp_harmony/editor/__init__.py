"""
Progression editing.

- EditHistory / Snapshot: Bounded undo/redo over immutable snapshots
- ProgressionValidator: Checks a compact progression before saving
- ProgressionEditor: Change/delete/insert/undo/redo/save/discard
- HarmonySessionManager: Named in-memory editing sessions
"""

from chuk_mcp_harmony.editor.history import EditHistory, Snapshot
from chuk_mcp_harmony.editor.manager import HarmonySessionManager, SessionMetadata
from chuk_mcp_harmony.editor.session import ProgressionEditor, expand_labels
from chuk_mcp_harmony.editor.validator import (
    ProgressionValidator,
    ValidationIssue,
    ValidationResult,
    ValidationSeverity,
)

__all__ = [
    "EditHistory",
    "Snapshot",
    "HarmonySessionManager",
    "SessionMetadata",
    "ProgressionEditor",
    "expand_labels",
    "ProgressionValidator",
    "ValidationIssue",
    "ValidationResult",
    "ValidationSeverity",
]
