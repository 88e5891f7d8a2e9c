"""
Progression Editor - history-tracked edits over a compact progression.

States:
    clean  - the arrays equal the baseline (the generated or last saved state)
    dirty  - unsaved edits are present

save() emits a HarmonizedPart with expanded labels and makes the saved
state the new baseline. discard() restores the baseline and resets history.

Every mutation validates first. A rejected operation raises
EditRejectedError and leaves arrays and history untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import replace

from chuk_mcp_harmony.constants import HISTORY_LIMIT, ErrorMessages, SuccessMessages
from chuk_mcp_harmony.core.chord import ChordQuality, generate_chord_labels
from chuk_mcp_harmony.core.melody import MelodyElement, is_rest
from chuk_mcp_harmony.editor.history import EditHistory, Snapshot
from chuk_mcp_harmony.editor.validator import ProgressionValidator
from chuk_mcp_harmony.exceptions import EditRejectedError
from chuk_mcp_harmony.harmony.assembler import realize_part
from chuk_mcp_harmony.harmony.progression import expanded_chord_index, expansion_spans
from chuk_mcp_harmony.models.part import HarmonizedPart

logger = logging.getLogger(__name__)


def expand_labels(melody: Sequence[MelodyElement], compact_labels: Sequence[str]) -> tuple[str, ...]:
    """
    Expand compact labels into one label per non-rest melody position.

    interval = ceil(N / M); position i takes chord min(i // interval, M - 1).
    Rest positions still advance i but emit nothing.
    """
    if not compact_labels:
        raise EditRejectedError(ErrorMessages.EMPTY_PROGRESSION)
    n, m = len(melody), len(compact_labels)
    return tuple(
        compact_labels[expanded_chord_index(i, n, m)]
        for i, element in enumerate(melody)
        if not is_rest(element)
    )


class ProgressionEditor:
    """
    Editing session over one HarmonizedPart.

    Example:
        editor = ProgressionEditor(harmonize(melody, rhythm))
        editor.apply_change(0, "dom7")
        editor.insert_after(0, ChordQuality.MINOR_7)
        editor.undo()
        saved = editor.save()
    """

    def __init__(
        self,
        part: HarmonizedPart,
        on_save: Callable[[HarmonizedPart], None] | None = None,
        on_cancel: Callable[[], None] | None = None,
        history_limit: int = HISTORY_LIMIT,
    ):
        self._part = part
        self._prefer_flats = part.analysis.prefer_flats
        self._on_save = on_save
        self._on_cancel = on_cancel
        self._validator = ProgressionValidator()

        self._baseline = self._snapshot(part.chord_qualities, part.chord_roots)
        self._history = EditHistory(self._baseline, history_limit)
        self._last_message: str | None = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> Snapshot:
        """The current compact state."""
        return self._history.current

    @property
    def chord_qualities(self) -> tuple[ChordQuality, ...]:
        return self.snapshot.chord_qualities

    @property
    def chord_roots(self) -> tuple[int, ...]:
        return self.snapshot.chord_roots

    @property
    def chord_labels(self) -> tuple[str, ...]:
        return self.snapshot.chord_labels

    @property
    def current(self) -> HarmonizedPart:
        """
        The part in its compact view.

        Unedited, this is the baseline part itself. Once the arrays differ,
        the harmony is re-voiced over the expanded chord spans.
        """
        snapshot = self.snapshot
        if snapshot.same_progression(self._baseline):
            return replace(self._part, chord_labels=snapshot.chord_labels, labels_expanded=False)
        return self._realize(snapshot, snapshot.chord_labels, expanded=False)

    @property
    def is_dirty(self) -> bool:
        """True if the arrays differ from the baseline."""
        return not self.snapshot.same_progression(self._baseline)

    @property
    def history_length(self) -> int:
        return len(self._history)

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    @property
    def last_message(self) -> str | None:
        """Human-readable description of the last successful operation."""
        return self._last_message

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def apply_change(self, index: int, quality: ChordQuality | str) -> Snapshot:
        """Replace the quality of chord `index`."""
        self._check_index(index)
        new_quality = self._parse_quality(quality)

        qualities = list(self.chord_qualities)
        qualities[index] = new_quality
        snapshot = self._commit(tuple(qualities), self.chord_roots)
        self._last_message = SuccessMessages.CHORD_CHANGED.format(
            number=index + 1, quality=new_quality.value
        )
        return snapshot

    def apply_delete(self, index: int) -> Snapshot:
        """Remove chord `index`. The last remaining chord cannot be deleted."""
        self._check_index(index)
        if len(self.snapshot) <= 1:
            raise EditRejectedError(ErrorMessages.LAST_CHORD)

        qualities = self.chord_qualities[:index] + self.chord_qualities[index + 1 :]
        roots = self.chord_roots[:index] + self.chord_roots[index + 1 :]
        snapshot = self._commit(qualities, roots)
        self._last_message = SuccessMessages.CHORD_DELETED.format(number=index + 1)
        return snapshot

    def apply_insert(
        self, index: int, quality: ChordQuality | str, *, before: bool = False
    ) -> Snapshot:
        """Insert a chord next to chord `index`, sharing its root."""
        self._check_index(index)
        new_quality = self._parse_quality(quality)

        root = self.chord_roots[index]
        position = index if before else index + 1
        qualities = self.chord_qualities[:position] + (new_quality,) + self.chord_qualities[position:]
        roots = self.chord_roots[:position] + (root,) + self.chord_roots[position:]
        snapshot = self._commit(qualities, roots)
        self._last_message = SuccessMessages.CHORD_INSERTED.format(
            position="before" if before else "after", number=index + 1
        )
        return snapshot

    def insert_before(self, index: int, quality: ChordQuality | str) -> Snapshot:
        return self.apply_insert(index, quality, before=True)

    def insert_after(self, index: int, quality: ChordQuality | str) -> Snapshot:
        return self.apply_insert(index, quality, before=False)

    def undo(self) -> bool:
        """Step back one snapshot. Returns False at the start of history."""
        return self._history.undo() is not None

    def redo(self) -> bool:
        """Step forward one snapshot. Returns False at the end of history."""
        return self._history.redo() is not None

    # ------------------------------------------------------------------
    # Commit / cancel
    # ------------------------------------------------------------------

    def expanded_labels(self) -> tuple[str, ...]:
        """Labels of the current state, one per non-rest melody position."""
        return expand_labels(self._part.original_melody, self.chord_labels)

    def save(self) -> HarmonizedPart:
        """
        Commit the current state.

        Returns the part in its expanded view. Saving the same state twice
        yields identical output.

        Raises:
            EditRejectedError: If the progression is empty or inconsistent
        """
        snapshot = self.snapshot
        result = self._validator.validate(
            snapshot.chord_qualities,
            snapshot.chord_roots,
            snapshot.chord_labels,
            prefer_flats=self._prefer_flats,
            complexity=self._part.params.complexity,
        )
        if not result.is_valid:
            raise EditRejectedError(str(result))
        for warning in result.warnings:
            logger.warning("%s", warning)

        saved = self._realize(snapshot, self.expanded_labels(), expanded=True)

        self._part = replace(saved, chord_labels=snapshot.chord_labels, labels_expanded=False)
        self._baseline = snapshot
        self._last_message = SuccessMessages.CHANGES_SAVED.format(count=len(snapshot))
        logger.info("Saved progression: %s", " ".join(snapshot.chord_labels))

        if self._on_save is not None:
            self._on_save(saved)
        return saved

    def discard(self) -> None:
        """Restore the baseline, reset history to it and signal cancellation."""
        self._history.reset(self._baseline)
        self._last_message = SuccessMessages.CHANGES_DISCARDED
        logger.info("Discarded edits")
        if self._on_cancel is not None:
            self._on_cancel()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _snapshot(
        self, qualities: tuple[ChordQuality, ...], roots: tuple[int, ...]
    ) -> Snapshot:
        labels = generate_chord_labels(roots, qualities, prefer_flats=self._prefer_flats)
        return Snapshot(chord_qualities=tuple(qualities), chord_roots=tuple(roots), chord_labels=labels)

    def _commit(self, qualities: tuple[ChordQuality, ...], roots: tuple[int, ...]) -> Snapshot:
        snapshot = self._snapshot(qualities, roots)
        self._history.push(snapshot)
        logger.debug("Edit committed: %s", " ".join(snapshot.chord_labels))
        return snapshot

    def _check_index(self, index: int) -> None:
        length = len(self.snapshot)
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < length:
            raise EditRejectedError(ErrorMessages.INVALID_INDEX.format(index=index, length=length))

    @staticmethod
    def _parse_quality(quality: ChordQuality | str) -> ChordQuality:
        try:
            return ChordQuality.parse(quality)
        except ValueError as e:
            raise EditRejectedError(str(e)) from e

    def _realize(
        self, snapshot: Snapshot, labels: Sequence[str], *, expanded: bool
    ) -> HarmonizedPart:
        analysis = self._part.analysis.with_progression(
            snapshot.chord_qualities, snapshot.chord_roots
        )
        return realize_part(
            self._part.original_melody,
            self._part.rhythm,
            analysis,
            expansion_spans(self._part.rhythm, len(snapshot)),
            self._part.params,
            chord_labels=labels,
            labels_expanded=expanded,
        )
