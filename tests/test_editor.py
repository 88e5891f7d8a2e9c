"""
Tests for the progression editor, its history and the session manager.
"""

import pytest

from chuk_mcp_harmony.constants import HarmonicComplexity
from chuk_mcp_harmony.core import ChordQuality, parse_melody
from chuk_mcp_harmony.editor import (
    EditHistory,
    HarmonySessionManager,
    ProgressionEditor,
    ProgressionValidator,
    Snapshot,
    expand_labels,
)
from chuk_mcp_harmony.exceptions import EditRejectedError
from chuk_mcp_harmony.harmony import harmonize


def _snapshot(*roots: int) -> Snapshot:
    return Snapshot(
        chord_qualities=tuple(ChordQuality.MAJOR for _ in roots),
        chord_roots=tuple(roots),
        chord_labels=tuple(str(r) for r in roots),
    )


@pytest.fixture
def three_chords():
    """Eight quarter notes in C major over a custom I-IV-V progression."""
    melody = [60, 64, 67, 72, 67, 64, 62, 60]
    return harmonize(melody, [1] * 8, {"custom_progression": ["M", "M", "M"]})


class TestEditHistory:
    """Tests for EditHistory."""

    def test_initial_state(self) -> None:
        """History starts with one snapshot and nothing to undo."""
        history = EditHistory(_snapshot(0))
        assert len(history) == 1
        assert history.cursor == 0
        assert not history.can_undo
        assert not history.can_redo

    def test_push_undo_redo(self) -> None:
        """Undo then redo returns to the same snapshot."""
        history = EditHistory(_snapshot(0))
        history.push(_snapshot(0, 5))
        assert history.undo() == _snapshot(0)
        assert history.redo() == _snapshot(0, 5)
        assert history.redo() is None

    def test_undo_at_start(self) -> None:
        """Undo at the first snapshot is a no-op."""
        history = EditHistory(_snapshot(0))
        assert history.undo() is None
        assert history.current == _snapshot(0)

    def test_push_truncates_redo_tail(self) -> None:
        """A new edit after undo forgets the undone states."""
        history = EditHistory(_snapshot(0))
        history.push(_snapshot(1))
        history.push(_snapshot(2))
        history.undo()
        history.push(_snapshot(3))
        assert len(history) == 3
        assert not history.can_redo
        assert [s.chord_roots for s in history.entries] == [(0,), (1,), (3,)]

    def test_limit_evicts_oldest(self) -> None:
        """Beyond the limit the oldest snapshot goes first."""
        history = EditHistory(_snapshot(0), limit=50)
        for root in range(1, 60):
            history.push(_snapshot(root % 12, root))
        assert len(history) == 50
        assert history.cursor == 49
        assert history.entries[0].chord_roots == (10, 10)
        assert history.current.chord_roots == (59 % 12, 59)

    def test_invalid_limit(self) -> None:
        """The limit must hold at least one snapshot."""
        with pytest.raises(ValueError):
            EditHistory(_snapshot(0), limit=0)

    def test_snapshot_equality_ignores_time(self) -> None:
        """Snapshots compare by content."""
        assert _snapshot(0, 5) == _snapshot(0, 5)

    def test_snapshot_lengths_must_match(self) -> None:
        """Snapshot arrays line up."""
        with pytest.raises(ValueError):
            Snapshot((ChordQuality.MAJOR,), (0, 5), ("C",))


class TestExpandLabels:
    """Tests for expand_labels."""

    def test_eight_notes_three_chords(self) -> None:
        """Positions 0-2, 3-5 and 6-7 map to the three chords."""
        melody = [60] * 8
        labels = expand_labels(parse_melody(melody), ["C", "F", "G"])
        assert labels == ("C", "C", "C", "F", "F", "F", "G", "G")

    def test_rests_emit_nothing_but_advance(self) -> None:
        """A rest consumes a position without a label."""
        labels = expand_labels(parse_melody([60, None, 62, 64]), ["C", "G"])
        assert labels == ("C", "G", "G")

    def test_empty_labels(self) -> None:
        """An empty progression cannot be expanded."""
        with pytest.raises(EditRejectedError):
            expand_labels((), [])


class TestProgressionEditor:
    """Tests for ProgressionEditor."""

    def test_starts_clean(self, twinkle_part) -> None:
        """A fresh editor mirrors the part."""
        editor = ProgressionEditor(twinkle_part)
        assert editor.chord_labels == twinkle_part.chord_labels
        assert editor.chord_roots == twinkle_part.chord_roots
        assert not editor.is_dirty
        assert editor.history_length == 1
        assert editor.current == twinkle_part

    def test_change(self, twinkle_part) -> None:
        """Changing a quality regenerates its label."""
        editor = ProgressionEditor(twinkle_part)
        editor.apply_change(0, "dom7")
        assert editor.chord_qualities[0] == ChordQuality.DOMINANT_7
        assert editor.chord_labels[0] == "C7"
        assert editor.chord_roots == twinkle_part.chord_roots
        assert editor.is_dirty
        assert editor.last_message == "Chord #1 changed to dom7."

    def test_delete_regenerates_labels(self, three_chords) -> None:
        """Deleting the first of three chords leaves two consistent arrays."""
        editor = ProgressionEditor(three_chords)
        assert editor.chord_roots == (0, 5, 7)
        editor.apply_delete(0)
        assert editor.chord_roots == (5, 7)
        assert editor.chord_qualities == (ChordQuality.MAJOR, ChordQuality.MAJOR)
        assert editor.chord_labels == ("F", "G")

    def test_insert_after_copies_root(self, three_chords) -> None:
        """insert_after(0, 'dom7') puts a C7 at index 1."""
        editor = ProgressionEditor(three_chords)
        editor.insert_after(0, "dom7")
        assert editor.chord_roots == (0, 0, 5, 7)
        assert editor.chord_qualities[1] == ChordQuality.DOMINANT_7
        assert editor.chord_labels == ("C", "C7", "F", "G")

    def test_insert_before(self, three_chords) -> None:
        """insert_before places the chord at the index itself."""
        editor = ProgressionEditor(three_chords)
        editor.insert_before(2, ChordQuality.SUS4)
        assert editor.chord_roots == (0, 5, 7, 7)
        assert editor.chord_labels == ("C", "F", "Gsus4", "G")

    def test_delete_last_chord_rejected(self, scale_fragment) -> None:
        """At least one chord must remain."""
        editor = ProgressionEditor(harmonize(*scale_fragment))
        assert len(editor.chord_roots) == 1
        with pytest.raises(EditRejectedError, match="last chord"):
            editor.apply_delete(0)
        assert editor.history_length == 1

    def test_rejections_leave_state_untouched(self, three_chords) -> None:
        """Bad indexes and qualities change nothing."""
        editor = ProgressionEditor(three_chords)
        before = editor.snapshot
        with pytest.raises(EditRejectedError):
            editor.apply_change(3, "M")
        with pytest.raises(EditRejectedError):
            editor.apply_change(-1, "M")
        with pytest.raises(EditRejectedError):
            editor.apply_change(0, "power")
        with pytest.raises(EditRejectedError):
            editor.insert_after(0, None)  # type: ignore[arg-type]
        with pytest.raises(EditRejectedError):
            editor.apply_delete(True)  # type: ignore[arg-type]
        assert editor.snapshot == before
        assert editor.history_length == 1
        assert not editor.is_dirty

    def test_undo_redo(self, three_chords) -> None:
        """Undo restores the previous state; redo re-applies it."""
        editor = ProgressionEditor(three_chords)
        editor.apply_change(1, "m")
        edited = editor.snapshot
        assert editor.undo()
        assert editor.chord_labels == ("C", "F", "G")
        assert not editor.is_dirty
        assert editor.redo()
        assert editor.snapshot == edited
        assert not editor.redo()

    def test_undo_at_start(self, three_chords) -> None:
        """Nothing to undo reports False."""
        editor = ProgressionEditor(three_chords)
        assert not editor.undo()

    def test_history_capped(self, three_chords) -> None:
        """Only the 50 most recent states are kept."""
        editor = ProgressionEditor(three_chords)
        for i in range(60):
            editor.apply_change(0, "m" if i % 2 == 0 else "M")
        assert editor.history_length == 50
        undone = 0
        while editor.undo():
            undone += 1
        assert undone == 49

    def test_edits_do_not_touch_old_snapshots(self, three_chords) -> None:
        """Earlier snapshots stay valid after later edits."""
        editor = ProgressionEditor(three_chords)
        first = editor.snapshot
        editor.apply_change(0, "m")
        editor.apply_delete(2)
        assert first.chord_roots == (0, 5, 7)
        assert first.chord_labels == ("C", "F", "G")

    def test_current_revoices_edits(self, three_chords) -> None:
        """The current part follows the edited arrays."""
        editor = ProgressionEditor(three_chords)
        editor.apply_delete(1)
        part = editor.current
        assert part.chord_roots == (0, 7)
        assert len(part.voicings) == 2
        assert not part.labels_expanded
        assert part.chord_labels == ("C", "G")

    def test_save_expands_labels(self, three_chords) -> None:
        """Saved parts carry one label per sounding note."""
        editor = ProgressionEditor(three_chords)
        saved = editor.save()
        assert saved.labels_expanded
        assert saved.chord_labels == ("C", "C", "C", "F", "F", "F", "G", "G")
        assert saved.chord_roots == (0, 5, 7)

    def test_save_after_edit(self, three_chords) -> None:
        """Saving makes the edited state the new baseline."""
        editor = ProgressionEditor(three_chords)
        editor.apply_change(2, "dom7")
        saved = editor.save()
        assert saved.chord_labels[-1] == "G7"
        assert not editor.is_dirty
        assert editor.last_message == "Saved 3 chords."

    def test_save_warns_above_complexity(self, three_chords, caplog) -> None:
        """Qualities beyond the part's complexity save with a warning."""
        editor = ProgressionEditor(three_chords)
        editor.apply_change(2, "dom13")
        with caplog.at_level("WARNING", logger="chuk_mcp_harmony.editor.session"):
            saved = editor.save()
        assert saved.chord_labels[-1] == "G13"
        assert "ABOVE_COMPLEXITY" in caplog.text
        assert "chords/2" in caplog.text

    def test_save_is_idempotent(self, three_chords) -> None:
        """Saving twice yields identical parts."""
        editor = ProgressionEditor(three_chords)
        editor.insert_after(0, "m7")
        first = editor.save()
        second = editor.save()
        assert first.to_dict() == second.to_dict()

    def test_on_save_callback(self, three_chords) -> None:
        """on_save receives the saved part."""
        received = []
        editor = ProgressionEditor(three_chords, on_save=received.append)
        saved = editor.save()
        assert received == [saved]

    def test_discard(self, three_chords) -> None:
        """Discard restores the baseline and signals cancellation."""
        cancelled = []
        editor = ProgressionEditor(three_chords, on_cancel=lambda: cancelled.append(True))
        editor.apply_change(0, "m")
        editor.apply_delete(1)
        editor.discard()
        assert editor.chord_labels == ("C", "F", "G")
        assert editor.history_length == 1
        assert not editor.can_undo
        assert not editor.is_dirty
        assert cancelled == [True]

    def test_discard_returns_to_last_save(self, three_chords) -> None:
        """After a save, discard goes back to the saved state."""
        editor = ProgressionEditor(three_chords)
        editor.apply_change(0, "m")
        editor.save()
        editor.apply_change(1, "m")
        editor.discard()
        assert editor.chord_labels == ("Cm", "F", "G")

    def test_flat_spelling_survives_edits(self) -> None:
        """Edited labels keep the part's spelling preference."""
        part = harmonize(
            [70, 74, 70, 77, 70], [1, 1, 1, 1, 4], {"key_center_bias": -1.0, "complexity": "basic"}
        )
        editor = ProgressionEditor(part)
        editor.apply_change(0, "M7")
        assert editor.chord_labels[0] == "Bbmaj7"


class TestProgressionValidator:
    """Tests for ProgressionValidator."""

    def test_valid(self) -> None:
        """Consistent arrays pass."""
        result = ProgressionValidator().validate(
            (ChordQuality.MAJOR, ChordQuality.MINOR), (0, 9), ("C", "Am")
        )
        assert result.is_valid
        assert not result.issues

    def test_empty(self) -> None:
        """Empty progressions fail."""
        result = ProgressionValidator().validate((), ())
        assert not result.is_valid
        assert result.errors[0].code == "EMPTY_PROGRESSION"

    def test_length_mismatch(self) -> None:
        """Arrays of different length fail."""
        result = ProgressionValidator().validate((ChordQuality.MAJOR,), (0, 5))
        assert result.errors[0].code == "LENGTH_MISMATCH"

    def test_bad_root_and_quality(self) -> None:
        """Roots outside 0-11 and unknown qualities fail."""
        result = ProgressionValidator().validate(("power", ChordQuality.MAJOR), (0, 12))
        codes = {issue.code for issue in result.errors}
        assert codes == {"UNKNOWN_QUALITY", "INVALID_ROOT"}

    def test_stale_label(self) -> None:
        """Labels must match the arrays."""
        result = ProgressionValidator().validate((ChordQuality.MAJOR,), (0,), ("Am",))
        assert result.errors[0].code == "STALE_LABEL"

    def test_complexity_warning(self) -> None:
        """Qualities above the complexity level only warn."""
        result = ProgressionValidator().validate(
            (ChordQuality.DOMINANT_13,), (7,), complexity=HarmonicComplexity.BASIC
        )
        assert result.is_valid
        assert result.warnings[0].code == "ABOVE_COMPLEXITY"


class TestHarmonySessionManager:
    """Tests for HarmonySessionManager."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, twinkle) -> None:
        """Created sessions can be fetched by name."""
        manager = HarmonySessionManager()
        editor = await manager.create("tune", *twinkle)
        assert await manager.get("tune") is editor
        assert await manager.get("missing") is None

    @pytest.mark.asyncio
    async def test_list_sessions(self, twinkle, scale_fragment) -> None:
        """Listing reports key, size and dirtiness."""
        manager = HarmonySessionManager()
        await manager.create("tune", *twinkle)
        editor = await manager.create("scale", *scale_fragment)
        editor.apply_change(0, "dom7")
        sessions = {m.name: m for m in await manager.list_sessions()}
        assert sessions["tune"].key == "C major"
        assert sessions["tune"].chord_count == 4
        assert not sessions["tune"].is_dirty
        assert sessions["scale"].is_dirty
        assert sessions["scale"].to_dict()["chord_count"] == 1

    @pytest.mark.asyncio
    async def test_last_saved(self, twinkle) -> None:
        """Saving through the editor is remembered by the manager."""
        manager = HarmonySessionManager()
        editor = await manager.create("tune", *twinkle)
        assert await manager.last_saved("tune") is None
        saved = editor.save()
        assert await manager.last_saved("tune") is saved

    @pytest.mark.asyncio
    async def test_close(self, twinkle) -> None:
        """Closed sessions are forgotten."""
        manager = HarmonySessionManager()
        await manager.create("tune", *twinkle)
        assert await manager.close("tune")
        assert not await manager.close("tune")
        assert await manager.get("tune") is None
