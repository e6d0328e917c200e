"""Tests for Excel and CSV export of consolidated records."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from openpyxl import load_workbook

from field_consolidator.types import EXPORT_COLUMNS, ConsolidatedRecord
from field_consolidator.writer.workbook_writer import (
    column_widths,
    export_to_excel,
    read_exported_records,
    records_to_dataframe,
    write_records_to_csv,
)

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def records() -> list[ConsolidatedRecord]:
    """Two records, one computed and one without a DB column."""
    return [
        ConsolidatedRecord(
            section="Account Settings",
            subsection="Profile",
            field_name="Email",
            order=1,
            screen_context="view",
            db_column="users.email",
            is_computed=False,
            formula="",
            plan_type="PPO",
        ),
        ConsolidatedRecord(
            section="Account Settings",
            subsection="Default Subsection",
            field_name="Deductible",
            order=2,
            screen_context="edit",
            db_column="",
            is_computed=True,
            formula="base_deductible * tier_factor",
            plan_type="PPO",
        ),
    ]


class TestColumnWidths:
    """Tests for column_widths."""

    def test_clamped_to_bounds(self) -> None:
        """Short headers get the minimum, long ones the maximum."""
        assert column_widths(["id", "screen_context", "x" * 80]) == [10, 14, 50]

    def test_export_headers(self) -> None:
        """Widths for the export header row."""
        assert column_widths(list(EXPORT_COLUMNS)) == [10, 10, 10, 10, 14, 10, 11, 10, 10]

    def test_custom_bounds(self) -> None:
        """Bounds are configurable."""
        assert column_widths(["abc", "abcdefgh"], min_width=5, max_width=6) == [5, 6]


class TestRecordsToDataframe:
    """Tests for records_to_dataframe."""

    def test_columns_and_flag_rendering(self, records: list[ConsolidatedRecord]) -> None:
        """Columns follow export order and the flag reads YES/NO."""
        df = records_to_dataframe(records)

        assert list(df.columns) == list(EXPORT_COLUMNS)
        assert df["is_computed"].tolist() == ["NO", "YES"]
        assert df["order"].tolist() == [1, 2]


class TestExportToExcel:
    """Tests for export_to_excel."""

    def test_writes_sheet_and_widths(self, records: list[ConsolidatedRecord], tmp_path: Path) -> None:
        """One sheet named after the export settings, with sized columns."""
        path = export_to_excel(records, tmp_path / "out" / "consolidated_fields.xlsx")

        assert path.exists()
        wb = load_workbook(path)
        assert wb.sheetnames == ["Consolidated Fields"]
        ws = wb["Consolidated Fields"]
        assert [cell.value for cell in ws[1]] == list(EXPORT_COLUMNS)
        assert ws.max_row == 3
        assert ws.column_dimensions["A"].width == 10
        assert ws.column_dimensions["E"].width == 14

    def test_round_trip_through_parser(self, records: list[ConsolidatedRecord], tmp_path: Path) -> None:
        """Exported rows read back as text with the same values."""
        path = export_to_excel(records, tmp_path / "consolidated_fields.xlsx")

        rows = read_exported_records(path)

        assert rows == [{key: str(value) for key, value in record.to_row().items()} for record in records]

    def test_empty_records_rejected(self, tmp_path: Path) -> None:
        """Nothing is written when there are no records."""
        target = tmp_path / "empty.xlsx"

        with pytest.raises(ValueError, match="No data to export"):
            export_to_excel([], target)

        assert not target.exists()


class TestWriteRecordsToCsv:
    """Tests for write_records_to_csv."""

    def test_csv_round_trip(self, records: list[ConsolidatedRecord], tmp_path: Path) -> None:
        """CSV export matches the workbook layout."""
        path = write_records_to_csv(records, tmp_path / "consolidated_fields.csv")

        rows = read_exported_records(path)

        assert rows[1]["formula"] == "base_deductible * tier_factor"
        assert rows[1]["is_computed"] == "YES"
        assert rows[0]["db_column"] == "users.email"
        assert rows[1]["db_column"] == ""

    def test_empty_records_rejected(self, tmp_path: Path) -> None:
        """CSV export also refuses empty input."""
        with pytest.raises(ValueError, match="No data to export"):
            write_records_to_csv([], tmp_path / "empty.csv")
