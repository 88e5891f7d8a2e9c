"""
Editor tools - MCP tools for editing a session's chord progression.

Tools for inspecting sessions and for change/delete/insert, undo/redo,
save and discard on the compact progression.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from chuk_mcp_harmony.constants import ErrorMessages
from chuk_mcp_harmony.editor import HarmonySessionManager, ProgressionEditor
from chuk_mcp_harmony.exceptions import EditRejectedError

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def editor_state(name: str, editor: ProgressionEditor) -> dict[str, Any]:
    """Compact view of a session for tool responses."""
    analysis = editor.current.analysis
    return {
        "name": name,
        "key": analysis.key.to_dict(),
        "chord_qualities": [q.value for q in editor.chord_qualities],
        "chord_roots": list(editor.chord_roots),
        "chord_labels": list(editor.chord_labels),
        "is_dirty": editor.is_dirty,
        "history_length": editor.history_length,
        "can_undo": editor.can_undo,
        "can_redo": editor.can_redo,
    }


def _not_found(name: str) -> str:
    return json.dumps({"status": "error", "message": ErrorMessages.SESSION_NOT_FOUND.format(name=name)})


def register_editor_tools(
    mcp: ChukMCPServer,
    manager: HarmonySessionManager,
) -> dict[str, Any]:
    """
    Register progression editing tools with the MCP server.

    Args:
        mcp: The MCP server instance
        manager: The harmony session manager

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    @mcp.tool  # type: ignore[arg-type]
    async def harmony_get_session(name: str) -> str:
        """
        Get the current state of an editing session.

        Args:
            name: Session name

        Returns:
            JSON string with the compact progression and history state

        Example:
            harmony_get_session(name="verse")
        """
        try:
            editor = await manager.get(name)
            if editor is None:
                return _not_found(name)
            return json.dumps({"status": "success", "session": editor_state(name, editor)})
        except Exception as e:
            logger.exception("Failed to get session")
            return json.dumps({"status": "error", "message": str(e)})

    tools["harmony_get_session"] = harmony_get_session

    @mcp.tool  # type: ignore[arg-type]
    async def harmony_list_sessions() -> str:
        """
        List open editing sessions.

        Returns:
            JSON string with session summaries, newest first

        Example:
            harmony_list_sessions()
        """
        try:
            sessions = await manager.list_sessions()
            return json.dumps(
                {
                    "status": "success",
                    "sessions": [s.to_dict() for s in sessions],
                    "count": len(sessions),
                }
            )
        except Exception as e:
            logger.exception("Failed to list sessions")
            return json.dumps({"status": "error", "message": str(e)})

    tools["harmony_list_sessions"] = harmony_list_sessions

    @mcp.tool  # type: ignore[arg-type]
    async def harmony_close_session(name: str) -> str:
        """
        Close an editing session and forget its state.

        Args:
            name: Session name

        Returns:
            JSON string with result

        Example:
            harmony_close_session(name="verse")
        """
        try:
            if not await manager.close(name):
                return _not_found(name)
            return json.dumps({"status": "success", "message": f"Closed session '{name}'"})
        except Exception as e:
            logger.exception("Failed to close session")
            return json.dumps({"status": "error", "message": str(e)})

    tools["harmony_close_session"] = harmony_close_session

    @mcp.tool  # type: ignore[arg-type]
    async def harmony_change_chord(name: str, index: int, quality: str) -> str:
        """
        Change the quality of one chord.

        The root stays; all labels are regenerated.

        Args:
            name: Session name
            index: Chord index (0-based)
            quality: New quality symbol (e.g., 'dom7', 'm', 'M7')

        Returns:
            JSON string with the updated session

        Example:
            harmony_change_chord(name="verse", index=0, quality="dom7")
        """
        try:
            editor = await manager.get(name)
            if editor is None:
                return _not_found(name)
            editor.apply_change(index, quality)
            return json.dumps(
                {
                    "status": "success",
                    "message": editor.last_message,
                    "session": editor_state(name, editor),
                }
            )
        except EditRejectedError as e:
            return json.dumps({"status": "error", "message": str(e)})
        except Exception as e:
            logger.exception("Failed to change chord")
            return json.dumps({"status": "error", "message": str(e)})

    tools["harmony_change_chord"] = harmony_change_chord

    @mcp.tool  # type: ignore[arg-type]
    async def harmony_delete_chord(name: str, index: int) -> str:
        """
        Delete one chord. The last chord cannot be deleted.

        Args:
            name: Session name
            index: Chord index (0-based)

        Returns:
            JSON string with the updated session

        Example:
            harmony_delete_chord(name="verse", index=2)
        """
        try:
            editor = await manager.get(name)
            if editor is None:
                return _not_found(name)
            editor.apply_delete(index)
            return json.dumps(
                {
                    "status": "success",
                    "message": editor.last_message,
                    "session": editor_state(name, editor),
                }
            )
        except EditRejectedError as e:
            return json.dumps({"status": "error", "message": str(e)})
        except Exception as e:
            logger.exception("Failed to delete chord")
            return json.dumps({"status": "error", "message": str(e)})

    tools["harmony_delete_chord"] = harmony_delete_chord

    @mcp.tool  # type: ignore[arg-type]
    async def harmony_insert_chord(
        name: str,
        index: int,
        quality: str,
        position: str = "after",
    ) -> str:
        """
        Insert a chord next to an existing one, sharing its root.

        Args:
            name: Session name
            index: Reference chord index (0-based)
            quality: Quality symbol of the new chord
            position: 'before' or 'after' the reference chord

        Returns:
            JSON string with the updated session

        Example:
            harmony_insert_chord(name="verse", index=0, quality="dom7", position="after")
        """
        try:
            if position not in ("before", "after"):
                return json.dumps(
                    {"status": "error", "message": "position must be 'before' or 'after'"}
                )
            editor = await manager.get(name)
            if editor is None:
                return _not_found(name)
            editor.apply_insert(index, quality, before=position == "before")
            return json.dumps(
                {
                    "status": "success",
                    "message": editor.last_message,
                    "session": editor_state(name, editor),
                }
            )
        except EditRejectedError as e:
            return json.dumps({"status": "error", "message": str(e)})
        except Exception as e:
            logger.exception("Failed to insert chord")
            return json.dumps({"status": "error", "message": str(e)})

    tools["harmony_insert_chord"] = harmony_insert_chord

    @mcp.tool  # type: ignore[arg-type]
    async def harmony_undo(name: str) -> str:
        """
        Undo the last edit.

        Args:
            name: Session name

        Returns:
            JSON string with whether anything was undone and the session

        Example:
            harmony_undo(name="verse")
        """
        try:
            editor = await manager.get(name)
            if editor is None:
                return _not_found(name)
            changed = editor.undo()
            return json.dumps(
                {"status": "success", "changed": changed, "session": editor_state(name, editor)}
            )
        except Exception as e:
            logger.exception("Failed to undo")
            return json.dumps({"status": "error", "message": str(e)})

    tools["harmony_undo"] = harmony_undo

    @mcp.tool  # type: ignore[arg-type]
    async def harmony_redo(name: str) -> str:
        """
        Redo the last undone edit.

        Args:
            name: Session name

        Returns:
            JSON string with whether anything was redone and the session

        Example:
            harmony_redo(name="verse")
        """
        try:
            editor = await manager.get(name)
            if editor is None:
                return _not_found(name)
            changed = editor.redo()
            return json.dumps(
                {"status": "success", "changed": changed, "session": editor_state(name, editor)}
            )
        except Exception as e:
            logger.exception("Failed to redo")
            return json.dumps({"status": "error", "message": str(e)})

    tools["harmony_redo"] = harmony_redo

    @mcp.tool  # type: ignore[arg-type]
    async def harmony_save(name: str) -> str:
        """
        Save the session's progression.

        Returns the harmonized part with one chord label per sounding
        melody note.

        Args:
            name: Session name

        Returns:
            JSON string with the saved part

        Example:
            harmony_save(name="verse")
        """
        try:
            editor = await manager.get(name)
            if editor is None:
                return _not_found(name)
            saved = editor.save()
            return json.dumps(
                {"status": "success", "message": editor.last_message, "part": saved.to_dict()}
            )
        except EditRejectedError as e:
            return json.dumps({"status": "error", "message": str(e)})
        except Exception as e:
            logger.exception("Failed to save session")
            return json.dumps({"status": "error", "message": str(e)})

    tools["harmony_save"] = harmony_save

    @mcp.tool  # type: ignore[arg-type]
    async def harmony_discard(name: str) -> str:
        """
        Discard unsaved edits and reset the history.

        Args:
            name: Session name

        Returns:
            JSON string with the restored session

        Example:
            harmony_discard(name="verse")
        """
        try:
            editor = await manager.get(name)
            if editor is None:
                return _not_found(name)
            editor.discard()
            return json.dumps(
                {
                    "status": "success",
                    "message": editor.last_message,
                    "session": editor_state(name, editor),
                }
            )
        except Exception as e:
            logger.exception("Failed to discard edits")
            return json.dumps({"status": "error", "message": str(e)})

    tools["harmony_discard"] = harmony_discard

    return tools
