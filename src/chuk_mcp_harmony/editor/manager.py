"""
Harmony Session Manager - handles editing-session lifecycle.

Sessions live in memory only: each one owns a ProgressionEditor over a
freshly harmonized part. Closing a session forgets it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

from chuk_mcp_harmony.editor.session import ProgressionEditor
from chuk_mcp_harmony.harmony.assembler import harmonize
from chuk_mcp_harmony.models.params import HarmonyParams
from chuk_mcp_harmony.models.part import HarmonizedPart

logger = logging.getLogger(__name__)


class SessionMetadata:
    """Lightweight metadata for listing sessions."""

    def __init__(
        self,
        name: str,
        key: str,
        chord_count: int,
        is_dirty: bool,
        created: datetime,
    ):
        self.name = name
        self.key = key
        self.chord_count = chord_count
        self.is_dirty = is_dirty
        self.created = created

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "key": self.key,
            "chord_count": self.chord_count,
            "is_dirty": self.is_dirty,
            "created": self.created.isoformat(),
        }

    def __repr__(self) -> str:
        return f"SessionMetadata({self.name!r}, {self.key}, {self.chord_count} chords)"


class HarmonySessionManager:
    """
    Manages named editing sessions in memory.

    Provides methods to create, get, list and close sessions, and keeps the
    last saved part of each session.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, ProgressionEditor] = {}
        self._created: dict[str, datetime] = {}
        self._saved: dict[str, HarmonizedPart] = {}

    async def create(
        self,
        name: str,
        melody: Sequence[Any],
        rhythm: Sequence[Any],
        params: HarmonyParams | Mapping[str, Any] | None = None,
    ) -> ProgressionEditor:
        """
        Harmonize a melody and open an editing session on the result.

        An existing session with the same name is replaced.

        Args:
            name: Session name
            melody: MIDI note numbers or rests
            rhythm: Durations in beats
            params: Harmony options

        Returns:
            The session's ProgressionEditor
        """
        part = harmonize(melody, rhythm, params)

        def remember(saved: HarmonizedPart) -> None:
            self._saved[name] = saved

        editor = ProgressionEditor(part, on_save=remember)
        if name in self._sessions:
            logger.info("Replacing session '%s'", name)
        self._sessions[name] = editor
        self._created[name] = datetime.now(UTC)
        self._saved.pop(name, None)
        return editor

    async def get(self, name: str) -> ProgressionEditor | None:
        """
        Get a session's editor by name.

        Returns:
            The ProgressionEditor or None if not found
        """
        return self._sessions.get(name)

    async def last_saved(self, name: str) -> HarmonizedPart | None:
        """The part most recently saved in a session, if any."""
        return self._saved.get(name)

    async def list_sessions(self) -> list[SessionMetadata]:
        """
        List open sessions, newest first.

        Returns:
            List of session metadata
        """
        result = []
        for name, editor in self._sessions.items():
            part = editor.current
            result.append(
                SessionMetadata(
                    name=name,
                    key=part.analysis.key.key.spell(part.analysis.prefer_flats),
                    chord_count=len(editor.chord_roots),
                    is_dirty=editor.is_dirty,
                    created=self._created[name],
                )
            )
        return sorted(result, key=lambda m: m.created, reverse=True)

    async def close(self, name: str) -> bool:
        """
        Close a session.

        Returns:
            True if closed, False if not found
        """
        if name not in self._sessions:
            return False
        del self._sessions[name]
        self._created.pop(name, None)
        self._saved.pop(name, None)
        return True
