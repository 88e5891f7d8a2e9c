"""
Edit history - a bounded linear undo/redo stack.

History is an explicit value owned by one editing session: a list of
immutable snapshots plus a cursor. Pushing truncates the redo tail; the
oldest snapshot is evicted once the limit is exceeded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from chuk_mcp_harmony.constants import HISTORY_LIMIT
from chuk_mcp_harmony.core.chord import ChordQuality


@dataclass(frozen=True)
class Snapshot:
    """One state of a compact progression. Timestamps do not affect equality."""

    chord_qualities: tuple[ChordQuality, ...]
    chord_roots: tuple[int, ...]
    chord_labels: tuple[str, ...]
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC), compare=False)

    def __post_init__(self) -> None:
        if not len(self.chord_qualities) == len(self.chord_roots) == len(self.chord_labels):
            raise ValueError(
                f"Snapshot arrays differ in length: {len(self.chord_qualities)} qualities, "
                f"{len(self.chord_roots)} roots, {len(self.chord_labels)} labels"
            )

    def __len__(self) -> int:
        return len(self.chord_roots)

    def same_progression(self, other: Snapshot) -> bool:
        """True if both snapshots hold the same qualities and roots."""
        return (
            self.chord_qualities == other.chord_qualities and self.chord_roots == other.chord_roots
        )


class EditHistory:
    """Snapshots plus a cursor pointing at the current one."""

    def __init__(self, initial: Snapshot, limit: int = HISTORY_LIMIT):
        if limit < 1:
            raise ValueError(f"History limit must be at least 1, got {limit}")
        self.limit = limit
        self._entries: list[Snapshot] = [initial]
        self._cursor = 0

    @property
    def current(self) -> Snapshot:
        return self._entries[self._cursor]

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def entries(self) -> tuple[Snapshot, ...]:
        return tuple(self._entries)

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._entries) - 1

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, snapshot: Snapshot) -> None:
        """Record a new state, dropping any redo tail and the oldest overflow."""
        del self._entries[self._cursor + 1 :]
        self._entries.append(snapshot)
        while len(self._entries) > self.limit:
            self._entries.pop(0)
        self._cursor = len(self._entries) - 1

    def undo(self) -> Snapshot | None:
        """Step back one snapshot. Returns None at the start."""
        if not self.can_undo:
            return None
        self._cursor -= 1
        return self.current

    def redo(self) -> Snapshot | None:
        """Step forward one snapshot. Returns None at the end."""
        if not self.can_redo:
            return None
        self._cursor += 1
        return self.current

    def reset(self, snapshot: Snapshot) -> None:
        """Forget everything and start over from one snapshot."""
        self._entries = [snapshot]
        self._cursor = 0
