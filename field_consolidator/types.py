"""Data contracts shared by the extractor, the engine, and the writer.

This module contains pure data structures with no business logic dependencies,
ensuring they can be imported without circular dependencies.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator

__all__ = [
    "DEFAULT_SCREEN",
    "DEFAULT_SECTION",
    "DEFAULT_SUBSECTION",
    "EXPORT_COLUMNS",
    "ISSUE_KINDS",
    "MISSING_COLUMN_MAPPING",
    "MISSING_FORMULA",
    "SCREEN_CONTEXTS",
    "ColumnMapping",
    "ConsolidatedRecord",
    "ConsolidationResult",
    "FieldDescriptor",
    "FormulaMapping",
    "ValidationIssue",
]

# Checked in this order against the lower-cased node name; first hit wins.
SCREEN_CONTEXTS = ("create", "edit", "delete", "view")
DEFAULT_SCREEN = "view"

DEFAULT_SECTION = "Default Section"
DEFAULT_SUBSECTION = "Default Subsection"

MISSING_COLUMN_MAPPING = "missing_column_mapping"
MISSING_FORMULA = "missing_formula"
ISSUE_KINDS = (MISSING_COLUMN_MAPPING, MISSING_FORMULA)

EXPORT_COLUMNS = (
    "section",
    "subsection",
    "field_name",
    "order",
    "screen_context",
    "db_column",
    "is_computed",
    "formula",
    "plan_type",
)


@dataclass(frozen=True)
class FieldDescriptor:
    """One form field found in the design document.

    Attributes
    ----------
        section: Nearest named container above the field (or the default label)
        subsection: Nearest group above the field (or the default label)
        field_name: Node name exactly as it appears in the document
        order: 1-based emission index across the whole traversal
        screen_context: One of ``create``, ``edit``, ``delete``, ``view``
    """

    section: str
    subsection: str
    field_name: str
    order: int
    screen_context: str


@dataclass(frozen=True)
class ColumnMapping:
    """Field name to database column, both already trimmed and non-empty."""

    field_name: str
    db_column: str


@dataclass(frozen=True)
class FormulaMapping:
    """Field name to computation formula, both already trimmed and non-empty."""

    field_name: str
    formula: str


@dataclass(frozen=True)
class ConsolidatedRecord:
    """Merged view of one field across the document and both lookup tables."""

    section: str
    subsection: str
    field_name: str
    order: int
    screen_context: str
    db_column: str
    is_computed: bool
    formula: str
    plan_type: str

    def to_dict(self) -> dict[str, Any]:
        """Return the record as a plain mapping keyed by field name."""
        return asdict(self)

    def to_row(self) -> dict[str, Any]:
        """Return the record as an export row.

        ``is_computed`` is rendered as ``"YES"``/``"NO"`` so the spreadsheet
        reads naturally; every other value is passed through.
        """
        row = self.to_dict()
        row["is_computed"] = "YES" if self.is_computed else "NO"
        return {column: row[column] for column in EXPORT_COLUMNS}


@dataclass(frozen=True)
class ValidationIssue:
    """A non-fatal finding about incomplete cross-source data."""

    field_name: str
    kind: str
    message: str


@dataclass
class ConsolidationResult:
    """Consolidated records plus the issues discovered while building them.

    Unpacks as ``records, issues`` so callers can treat it as a pair.
    """

    records: list[ConsolidatedRecord] = field(default_factory=list)
    issues: list[ValidationIssue] = field(default_factory=list)

    def __iter__(self) -> Iterator[Any]:
        yield self.records
        yield self.issues

    def has_issues(self, kind: str | None = None) -> bool:
        """Check for validation issues, optionally filtered by kind.

        Parameters
        ----------
        kind
            Optional filter: ``None`` (all), ``"missing_column_mapping"``,
            or ``"missing_formula"``.

        Returns
        -------
        bool
            ``True`` when at least one matching issue was recorded.
        """
        if kind is None:
            return bool(self.issues)
        return any(issue.kind == kind for issue in self.issues)

    def issue_counts(self) -> dict[str, int]:
        """Count issues per kind, including kinds with no occurrences."""
        counts = Counter(issue.kind for issue in self.issues)
        return {kind: counts.get(kind, 0) for kind in ISSUE_KINDS}
