"""
Progression Validator - checks a compact progression before it is saved.

Validates:
- The progression is not empty
- Qualities, roots and labels are the same length
- Roots are pitch classes (0-11)
- Qualities belong to the chord vocabulary
- Labels match the labels regenerated from the arrays
- Qualities fit the complexity setting (warning only)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from chuk_mcp_harmony.constants import ErrorMessages, HarmonicComplexity
from chuk_mcp_harmony.core.chord import ChordQuality, eligible_qualities, generate_chord_label


class ValidationSeverity(str, Enum):
    """Severity level for validation issues."""

    ERROR = "error"  # Prevents saving
    WARNING = "warning"  # Saving possible but may sound off
    INFO = "info"  # Informational only


@dataclass
class ValidationIssue:
    """A single validation issue."""

    severity: ValidationSeverity
    code: str
    message: str
    location: str | None = None

    def __str__(self) -> str:
        prefix = f"[{self.severity.value.upper()}]"
        location = f" at {self.location}" if self.location else ""
        return f"{prefix} {self.code}: {self.message}{location}"


class ValidationResult:
    """Result of validating a progression."""

    def __init__(self) -> None:
        self.issues: list[ValidationIssue] = []

    def add_error(self, code: str, message: str, location: str | None = None) -> None:
        """Add an error issue."""
        self.issues.append(ValidationIssue(ValidationSeverity.ERROR, code, message, location))

    def add_warning(self, code: str, message: str, location: str | None = None) -> None:
        """Add a warning issue."""
        self.issues.append(ValidationIssue(ValidationSeverity.WARNING, code, message, location))

    @property
    def is_valid(self) -> bool:
        """Return True if no errors (warnings are OK)."""
        return not any(i.severity == ValidationSeverity.ERROR for i in self.issues)

    @property
    def errors(self) -> list[ValidationIssue]:
        """Get all error issues."""
        return [i for i in self.issues if i.severity == ValidationSeverity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        """Get all warning issues."""
        return [i for i in self.issues if i.severity == ValidationSeverity.WARNING]

    def __bool__(self) -> bool:
        """Boolean conversion returns is_valid."""
        return self.is_valid

    def __str__(self) -> str:
        if not self.issues:
            return "Validation passed: no issues found"
        return "\n".join(str(issue) for issue in self.issues)


class ProgressionValidator:
    """Validates compact progressions."""

    def validate(
        self,
        chord_qualities: Sequence[object],
        chord_roots: Sequence[object],
        chord_labels: Sequence[str] | None = None,
        *,
        prefer_flats: bool = False,
        complexity: HarmonicComplexity | None = None,
    ) -> ValidationResult:
        """
        Validate a compact progression.

        Args:
            chord_qualities: One quality per chord
            chord_roots: One root pitch class per chord
            chord_labels: Compact labels to check against the arrays (optional)
            prefer_flats: Spelling used when regenerating labels
            complexity: Warn about qualities above this level (optional)

        Returns:
            ValidationResult with any issues found
        """
        result = ValidationResult()

        if not chord_qualities or not chord_roots:
            result.add_error("EMPTY_PROGRESSION", ErrorMessages.EMPTY_PROGRESSION)
            return result

        if len(chord_qualities) != len(chord_roots):
            result.add_error(
                "LENGTH_MISMATCH",
                f"{len(chord_qualities)} qualities but {len(chord_roots)} roots",
            )
            return result

        self._validate_chords(chord_qualities, chord_roots, result)
        if not result.is_valid:
            return result

        if chord_labels is not None:
            self._validate_labels(chord_qualities, chord_roots, chord_labels, prefer_flats, result)
        if complexity is not None:
            self._validate_complexity(chord_qualities, complexity, result)

        return result

    def _validate_chords(
        self,
        chord_qualities: Sequence[object],
        chord_roots: Sequence[object],
        result: ValidationResult,
    ) -> None:
        """Check every root and quality."""
        for index, (quality, root) in enumerate(zip(chord_qualities, chord_roots)):
            if not isinstance(quality, ChordQuality):
                result.add_error(
                    "UNKNOWN_QUALITY", f"Unknown chord quality: {quality!r}", f"chords/{index}"
                )
            if isinstance(root, bool) or not isinstance(root, int) or not 0 <= root <= 11:
                result.add_error(
                    "INVALID_ROOT", f"Root must be a pitch class 0-11, got {root!r}", f"chords/{index}"
                )

    def _validate_labels(
        self,
        chord_qualities: Sequence[object],
        chord_roots: Sequence[object],
        chord_labels: Sequence[str],
        prefer_flats: bool,
        result: ValidationResult,
    ) -> None:
        """Labels must be exactly the ones regenerated from the arrays."""
        if len(chord_labels) != len(chord_roots):
            result.add_error(
                "LABEL_MISMATCH",
                f"{len(chord_labels)} labels for {len(chord_roots)} chords",
            )
            return
        for index, (quality, root, label) in enumerate(
            zip(chord_qualities, chord_roots, chord_labels)
        ):
            expected = generate_chord_label(root, quality, prefer_flats=prefer_flats)  # type: ignore[arg-type]
            if label != expected:
                result.add_error(
                    "STALE_LABEL",
                    f"Label '{label}' does not match chord '{expected}'",
                    f"chords/{index}",
                )

    def _validate_complexity(
        self,
        chord_qualities: Sequence[object],
        complexity: HarmonicComplexity,
        result: ValidationResult,
    ) -> None:
        """Warn about qualities the complexity setting would not generate."""
        allowed = eligible_qualities(complexity)
        for index, quality in enumerate(chord_qualities):
            if quality not in allowed:
                result.add_warning(
                    "ABOVE_COMPLEXITY",
                    f"{quality} is beyond {complexity.value} complexity",
                    f"chords/{index}",
                )
