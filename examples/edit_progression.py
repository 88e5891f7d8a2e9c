#!/usr/bin/env python3
"""
Example: Edit a generated progression.

This demonstrates the progression editor: change, insert and delete
chords, undo and redo, then save to get one chord label per melody note.

Usage:
    python examples/edit_progression.py
"""

from chuk_mcp_harmony.editor import ProgressionEditor
from chuk_mcp_harmony.exceptions import EditRejectedError
from chuk_mcp_harmony.harmony import harmonize

MELODY = [60, 64, 67, 72, 71, 67, 65, 62, 60]
RHYTHM = [1, 1, 1, 1, 1, 1, 1, 1, 4]


def show(editor: ProgressionEditor, action: str) -> None:
    """Print the compact progression after an action."""
    dirty = "*" if editor.is_dirty else " "
    print(f"  {action:28}{dirty} {' | '.join(editor.chord_labels)}")


def main() -> None:
    """Walk through an editing session."""
    print("CHUK Harmony Progression Editor")
    print("=" * 40)

    editor = ProgressionEditor(harmonize(MELODY, RHYTHM, {"complexity": "basic"}))
    show(editor, "generated")

    editor.apply_change(1, "dom7")
    show(editor, "change #2 to dom7")

    editor.insert_before(0, "sus4")
    show(editor, "insert sus4 before #1")

    editor.apply_delete(2)
    show(editor, "delete #3")

    editor.undo()
    show(editor, "undo")

    editor.redo()
    show(editor, "redo")

    try:
        editor.apply_change(10, "m")
    except EditRejectedError as e:
        print(f"  rejected: {e}")
    print()

    saved = editor.save()
    print(f"Saved ({editor.last_message})")
    for note, label in zip([n for n in MELODY if n is not None], saved.chord_labels):
        print(f"  {note:3} {label}")
    print()

    editor.apply_change(0, "m")
    show(editor, "change #1 to m")
    editor.discard()
    show(editor, "discard")


if __name__ == "__main__":
    main()
