"""Export of consolidated records to Excel and CSV.

Workbook output: ``consolidated_fields.xlsx`` with a single
``Consolidated Fields`` sheet, one column per record attribute:

| section | subsection | field_name | order | screen_context | db_column | is_computed | formula | plan_type |
|---------|------------|------------|-------|----------------|-----------|-------------|---------|-----------|
| Account | Profile    | Email      | 1     | view           | users.email | NO        |         | PPO       |

Column widths follow the header length, clamped to the configured bounds
(10 to 50 character units by default).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd
from openpyxl.utils import get_column_letter

from field_consolidator.config import OUTPUT_DIR, get_export_settings, setup_logging
from field_consolidator.extractor.table_parser import parse_tabular_file
from field_consolidator.types import EXPORT_COLUMNS

if TYPE_CHECKING:
    from collections.abc import Sequence

    from field_consolidator.types import ConsolidatedRecord

logger = setup_logging(__name__)

__all__ = [
    "column_widths",
    "export_to_excel",
    "read_exported_records",
    "records_to_dataframe",
    "write_records_to_csv",
]


def records_to_dataframe(records: Sequence[ConsolidatedRecord]) -> pd.DataFrame:
    """Convert consolidated records to a DataFrame in export column order.

    Parameters
    ----------
    records
        Consolidated records in output order.

    Returns
    -------
    pd.DataFrame
        One row per record; ``is_computed`` rendered as ``"YES"``/``"NO"``.
    """
    return pd.DataFrame([record.to_row() for record in records], columns=list(EXPORT_COLUMNS))


def column_widths(headers: Sequence[str], min_width: int = 10, max_width: int = 50) -> list[int]:
    """Compute column widths from header lengths.

    Parameters
    ----------
    headers
        Column headers in sheet order.
    min_width
        Lower bound in character units.
    max_width
        Upper bound in character units.

    Returns
    -------
    list[int]
        ``min(max_width, max(len(header), min_width))`` per header.
    """
    return [min(max_width, max(len(header), min_width)) for header in headers]


def _require_records(records: Sequence[ConsolidatedRecord]) -> None:
    if not records:
        msg = "No data to export"
        raise ValueError(msg)


def export_to_excel(
    records: Sequence[ConsolidatedRecord],
    output_path: Path | None = None,
) -> Path:
    """Write consolidated records to an Excel workbook.

    Parameters
    ----------
    records
        Records to export; must be non-empty.
    output_path
        Destination file; defaults to ``OUTPUT_DIR/<export.filename>``.

    Returns
    -------
    Path
        Location of the written workbook.

    Raises
    ------
    ValueError
        If ``records`` is empty.
    """
    _require_records(records)
    settings = get_export_settings()

    filepath = output_path if output_path is not None else OUTPUT_DIR / settings["filename"]
    filepath.parent.mkdir(parents=True, exist_ok=True)

    df = records_to_dataframe(records)
    sheet_name = settings["sheet_name"][:31]  # Excel sheet name limit

    with pd.ExcelWriter(filepath, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)

        worksheet = writer.sheets[sheet_name]
        widths = column_widths(
            list(df.columns),
            min_width=settings["min_column_width"],
            max_width=settings["max_column_width"],
        )
        for idx, width in enumerate(widths, start=1):
            worksheet.column_dimensions[get_column_letter(idx)].width = width

    logger.info("Exported %d records to %s", len(records), filepath)
    return filepath


def write_records_to_csv(
    records: Sequence[ConsolidatedRecord],
    output_path: Path | None = None,
) -> Path:
    """Write consolidated records to a CSV file.

    Parameters
    ----------
    records
        Records to export; must be non-empty.
    output_path
        Destination file; defaults to the workbook name with a ``.csv`` suffix
        under ``OUTPUT_DIR``.

    Returns
    -------
    Path
        Location of the written CSV file.
    """
    _require_records(records)

    if output_path is None:
        output_path = (OUTPUT_DIR / get_export_settings()["filename"]).with_suffix(".csv")
    output_path.parent.mkdir(parents=True, exist_ok=True)

    records_to_dataframe(records).to_csv(output_path, index=False, encoding="utf-8")

    logger.info("Saved consolidated CSV: %s", output_path)
    return output_path


def read_exported_records(filepath: Path) -> list[dict[str, str]]:
    """Read an exported workbook or CSV back as string-keyed records.

    Parameters
    ----------
    filepath
        File written by :func:`export_to_excel` or :func:`write_records_to_csv`.

    Returns
    -------
    list[dict[str, str]]
        One mapping per row; every value is text (``order`` as digits,
        ``is_computed`` as ``"YES"``/``"NO"``).
    """
    return parse_tabular_file(Path(filepath))
