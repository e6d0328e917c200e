"""Writer module for Excel and CSV output.

Workbook output: consolidated_fields.xlsx with one row per consolidated field.
"""

from field_consolidator.writer.workbook_writer import (
    column_widths,
    export_to_excel,
    read_exported_records,
    records_to_dataframe,
    write_records_to_csv,
)

__all__ = [
    "column_widths",
    "export_to_excel",
    "read_exported_records",
    "records_to_dataframe",
    "write_records_to_csv",
]
