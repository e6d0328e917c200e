"""Tests for the consolidation engine and validation report formatting.

Tests cover:
1. Case-insensitive joining of fields with column and formula mappings
2. Validation issue generation and ordering
3. Edge cases: empty input, duplicates, idempotence
4. ConsolidationResult helpers
5. Issue preview and report formatting
"""

from __future__ import annotations

from field_consolidator.types import (
    DEFAULT_SECTION,
    DEFAULT_SUBSECTION,
    MISSING_COLUMN_MAPPING,
    MISSING_FORMULA,
    ColumnMapping,
    ConsolidationResult,
    FieldDescriptor,
    FormulaMapping,
    ValidationIssue,
)
from field_consolidator.validation.engine import build_lookup, consolidate, normalize_field_key
from field_consolidator.validation.format import format_issue_preview, format_validation_report


def _field(name: str, order: int = 1, screen: str = "view") -> FieldDescriptor:
    return FieldDescriptor(DEFAULT_SECTION, DEFAULT_SUBSECTION, name, order, screen)


def _issues(count: int) -> list[ValidationIssue]:
    return [
        ValidationIssue(f"f{i}", MISSING_COLUMN_MAPPING, f'Field "f{i}" does not have a DB mapping')
        for i in range(count)
    ]


# =============================================================================
# Join Key
# =============================================================================


class TestJoinKey:
    """Tests for normalize_field_key and build_lookup."""

    def test_normalize_is_trimmed_and_casefolded(self) -> None:
        """Join keys ignore case and surrounding whitespace."""
        assert normalize_field_key("  Email ") == "email"
        assert normalize_field_key("EMAIL") == normalize_field_key("email")

    def test_build_lookup_last_write_wins(self) -> None:
        """Later duplicates overwrite earlier ones."""
        lookup = build_lookup(
            [ColumnMapping("Email", "users.email"), ColumnMapping("EMAIL", "contacts.email")],
            "db_column",
        )

        assert lookup == {"email": "contacts.email"}


# =============================================================================
# consolidate
# =============================================================================


class TestConsolidate:
    """Tests for consolidate."""

    def test_case_insensitive_match(self) -> None:
        """A mapping spelled in a different case still joins."""
        records, issues = consolidate(
            [_field("Email")],
            [ColumnMapping("email", "users.email")],
            [],
            "PPO",
        )

        assert records[0].db_column == "users.email"
        assert records[0].is_computed is False
        assert records[0].formula == ""
        assert issues == []

    def test_missing_mapping_reports_issue(self) -> None:
        """A field without a column mapping gets an empty column and one issue."""
        records, issues = consolidate(
            [_field("Phone")],
            [ColumnMapping("Email", "users.email")],
            [],
            "PPO",
        )

        assert records[0].db_column == ""
        assert issues == [
            ValidationIssue("Phone", MISSING_COLUMN_MAPPING, 'Field "Phone" does not have a DB mapping'),
        ]

    def test_computed_field(self) -> None:
        """A formula marks the field computed and is copied onto the record."""
        (record,), issues = consolidate(
            [_field("Deductible")],
            [ColumnMapping("Deductible", "plans.deductible")],
            [FormulaMapping("DEDUCTIBLE", "base * factor")],
            "HMO",
        )

        assert record.is_computed is True
        assert record.formula == "base * factor"
        assert issues == []

    def test_missing_formula_never_reported(self) -> None:
        """Computed status comes from the formula itself."""
        result = consolidate([_field("A"), _field("B", 2)], [], [FormulaMapping("A", "x + 1")], "PPO")

        assert not result.has_issues(MISSING_FORMULA)
        assert len(result.issues) == 2

    def test_empty_input(self) -> None:
        """No fields means no records and no issues."""
        result = consolidate([], [ColumnMapping("Email", "users.email")], [], "PPO")

        assert result.records == []
        assert result.issues == []

    def test_preserves_order_and_descriptor_values(self) -> None:
        """Records follow input order and copy descriptor attributes verbatim."""
        fields = [
            FieldDescriptor("Account", "Profile", "Zeta", 7, "edit"),
            FieldDescriptor("Account", "Profile", "Alpha", 3, "create"),
        ]

        records, _ = consolidate(fields, [], [], "PPO")

        assert [r.field_name for r in records] == ["Zeta", "Alpha"]
        assert [r.order for r in records] == [7, 3]
        assert [r.screen_context for r in records] == ["edit", "create"]
        assert records[0].section == "Account"
        assert records[0].subsection == "Profile"

    def test_plan_type_copied_verbatim(self) -> None:
        """The plan type label is not trimmed or normalized."""
        records, _ = consolidate([_field("A"), _field("B", 2)], [], [], "  Gold PPO ")

        assert {r.plan_type for r in records} == {"  Gold PPO "}

    def test_duplicate_field_names_each_get_a_record(self) -> None:
        """Repeated names in the document produce repeated records and issues."""
        records, issues = consolidate([_field("Name", 1), _field("Name", 2)], [], [], "PPO")

        assert len(records) == 2
        assert len(issues) == 2

    def test_duplicate_mappings_last_wins(self) -> None:
        """The last of several mappings for the same name is used."""
        records, _ = consolidate(
            [_field("Email")],
            [ColumnMapping("Email", "old.email"), ColumnMapping("email", "new.email")],
            [],
            "PPO",
        )

        assert records[0].db_column == "new.email"

    def test_issues_in_discovery_order(self) -> None:
        """Issues follow field order."""
        _, issues = consolidate([_field("B", 1), _field("A", 2)], [], [], "PPO")

        assert [i.field_name for i in issues] == ["B", "A"]

    def test_idempotent(self) -> None:
        """Repeated calls with the same arguments give equal results."""
        args = ([_field("Email"), _field("Phone", 2)], [ColumnMapping("Email", "users.email")], [], "PPO")

        assert consolidate(*args) == consolidate(*args)


# =============================================================================
# ConsolidationResult
# =============================================================================


class TestConsolidationResult:
    """Tests for ConsolidationResult helpers."""

    def test_unpacks_as_pair(self) -> None:
        """The result behaves like ``(records, issues)``."""
        result = ConsolidationResult(records=[], issues=_issues(1))
        records, issues = result

        assert records == []
        assert len(issues) == 1

    def test_has_issues(self) -> None:
        """has_issues filters by kind when given one."""
        result = ConsolidationResult(issues=_issues(2))

        assert result.has_issues()
        assert result.has_issues(MISSING_COLUMN_MAPPING)
        assert not result.has_issues(MISSING_FORMULA)
        assert not ConsolidationResult().has_issues()

    def test_issue_counts_include_zero_kinds(self) -> None:
        """Every issue kind appears in the counts."""
        assert ConsolidationResult(issues=_issues(3)).issue_counts() == {
            MISSING_COLUMN_MAPPING: 3,
            MISSING_FORMULA: 0,
        }

    def test_to_row_renders_yes_no(self) -> None:
        """Export rows use YES/NO for the computed flag."""
        records, _ = consolidate(
            [_field("A"), _field("B", 2)],
            [],
            [FormulaMapping("A", "x")],
            "PPO",
        )

        assert records[0].to_row()["is_computed"] == "YES"
        assert records[1].to_row()["is_computed"] == "NO"
        assert records[1].to_dict()["is_computed"] is False


# =============================================================================
# Formatting
# =============================================================================


class TestFormatIssuePreview:
    """Tests for format_issue_preview."""

    def test_under_limit_lists_all(self) -> None:
        """All issues are listed when within the limit."""
        lines = format_issue_preview(_issues(3))

        assert lines == [f'  • Field "f{i}" does not have a DB mapping' for i in range(3)]

    def test_exactly_limit_has_no_summary(self) -> None:
        """No summary line when the count equals the limit."""
        assert len(format_issue_preview(_issues(10))) == 10

    def test_over_limit_summarizes_rest(self) -> None:
        """Only the first ``limit`` issues are listed, then a count of the rest."""
        lines = format_issue_preview(_issues(15))

        assert len(lines) == 11
        assert lines[-1] == "  ... and 5 more"
        assert "f9" in lines[9]

    def test_custom_limit(self) -> None:
        """The limit is configurable."""
        assert format_issue_preview(_issues(4), limit=2)[-1] == "  ... and 2 more"


class TestFormatValidationReport:
    """Tests for format_validation_report."""

    def test_clean_report(self) -> None:
        """A run without issues reports success."""
        result = consolidate([_field("Email")], [ColumnMapping("Email", "users.email")], [], "PPO")

        report = format_validation_report(result)

        assert "CONSOLIDATION REPORT" in report
        assert "Consolidated fields: 1 (0 computed)" in report
        assert "✓ All fields have a DB mapping" in report

    def test_report_with_issues(self) -> None:
        """Issues are counted by kind and previewed."""
        result = consolidate(
            [_field("Email"), _field("Phone", 2), _field("Total", 3)],
            [ColumnMapping("Email", "users.email")],
            [FormulaMapping("Total", "a + b")],
            "PPO",
        )

        report = format_validation_report(result, limit=1)

        assert "Consolidated fields: 3 (1 computed)" in report
        assert "Validation Issues (2) - Missing DB mapping: 2" in report
        assert 'Field "Phone" does not have a DB mapping' in report
        assert 'Field "Total"' not in report
        assert "... and 1 more" in report
