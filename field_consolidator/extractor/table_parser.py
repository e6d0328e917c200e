"""Tabular file parsing for the mapping and computed-field uploads.

Dispatches on the file extension and returns a list of string-keyed records,
one per data row, keyed by the (stripped) header row.

Supported formats
-----------------
* ``xlsx`` / ``xls``: first worksheet, first row as header (pandas)
* ``csv``: comma-separated with header row, UTF-8 with optional BOM (pandas)
* ``pdf`` / ``doc`` / ``docx``: accepted but not parsed; a warning is logged
  and an empty list is returned so the run can continue

Any other extension raises :class:`~field_consolidator.errors.UnsupportedFormatError`;
a missing or unreadable file raises :class:`~field_consolidator.errors.FileParseError`.
"""

from __future__ import annotations

from pathlib import Path
from typing import IO, TYPE_CHECKING, Any
from zipfile import BadZipFile

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException
from xlrd import XLRDError

from field_consolidator.config import setup_logging
from field_consolidator.errors import FileParseError, UnsupportedFormatError

if TYPE_CHECKING:
    from collections.abc import Callable

logger = setup_logging(__name__)

__all__ = [
    "PLACEHOLDER_EXTENSIONS",
    "SUPPORTED_EXTENSIONS",
    "check_upload",
    "file_extension",
    "parse_tabular_file",
]

TabularSource = Path | str | IO[bytes]


def file_extension(filename: str | Path) -> str:
    """Return the lower-cased extension of ``filename`` without the dot."""
    return Path(filename).suffix.lstrip(".").lower()


def _cell_to_str(value: Any) -> str:
    """Render a spreadsheet cell as text; blanks become ``""``."""
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    # Excel stores whole numbers as floats
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)



def _frame_to_records(df: pd.DataFrame) -> list[dict[str, str]]:
    """Convert a DataFrame to string-keyed, string-valued records."""
    headers = [str(column).strip() for column in df.columns]
    return [
        {header: _cell_to_str(value) for header, value in zip(headers, row, strict=True)}
        for row in df.itertuples(index=False, name=None)
    ]


def _parse_excel(source: TabularSource) -> list[dict[str, str]]:
    df = pd.read_excel(source, sheet_name=0, dtype=object)
    return _frame_to_records(df)


def _parse_csv(source: TabularSource) -> list[dict[str, str]]:
    df = pd.read_csv(source, dtype=str, keep_default_na=False, encoding="utf-8-sig")
    return _frame_to_records(df)


def _parse_pdf(source: TabularSource) -> list[dict[str, str]]:
    logger.warning("PDF parsing not fully implemented. Please use Excel or CSV format.")
    return []


def _parse_word(source: TabularSource) -> list[dict[str, str]]:
    logger.warning("Word document parsing not fully implemented. Please use Excel or CSV format.")
    return []


_PARSERS: dict[str, Callable[[TabularSource], list[dict[str, str]]]] = {
    "xlsx": _parse_excel,
    "xls": _parse_excel,
    "csv": _parse_csv,
    "pdf": _parse_pdf,
    "doc": _parse_word,
    "docx": _parse_word,
}

SUPPORTED_EXTENSIONS = frozenset({"xlsx", "xls", "csv"})
PLACEHOLDER_EXTENSIONS = frozenset({"pdf", "doc", "docx"})

# Errors a reader raises on empty, corrupt, or mis-encoded input
# (pandas EmptyDataError and UnicodeDecodeError are ValueErrors)
_READ_ERRORS = (OSError, ValueError, pd.errors.ParserError, BadZipFile, InvalidFileException, XLRDError)


def check_upload(path: str | Path) -> str:
    """Check that an upload path exists and has an accepted extension.

    Parameters
    ----------
    path : str | Path
        Location of the uploaded file.

    Returns
    -------
    str
        The lower-cased extension.

    Raises
    ------
    UnsupportedFormatError
        If the extension has no parser.
    FileParseError
        If the file does not exist.
    """
    extension = file_extension(path)
    if extension not in _PARSERS:
        raise UnsupportedFormatError(extension)

    if not Path(path).is_file():
        msg = f"Input file not found: {path}"
        raise FileParseError(msg)

    return extension


def parse_tabular_file(source: TabularSource, filename: str | None = None) -> list[dict[str, str]]:
    """Parse an uploaded mapping file into string-keyed records.

    Parameters
    ----------
    source : Path | str | IO[bytes]
        File path, or an open binary handle (e.g. an upload stream).
    filename : str, optional
        Name used for extension dispatch; required when ``source`` is a handle
        without a ``name`` attribute.

    Returns
    -------
    list[dict[str, str]]
        One mapping per data row keyed by header; empty for placeholder formats.

    Raises
    ------
    UnsupportedFormatError
        If the extension is not one of ``xlsx``, ``xls``, ``csv``, ``pdf``,
        ``doc``, or ``docx``.
    FileParseError
        If ``source`` is a path that does not exist, or the file is empty,
        corrupt, or not UTF-8 text.
    """
    if isinstance(source, (str, Path)):
        extension = check_upload(source)
        filename = filename or str(source)
    else:
        filename = filename or getattr(source, "name", "")
        extension = file_extension(filename)
        if extension not in _PARSERS:
            raise UnsupportedFormatError(extension)

    name = Path(filename).name
    logger.debug("Parsing %s as %s", filename, extension)
    try:
        records = _PARSERS[extension](source)
    except _READ_ERRORS as err:
        logger.error("Error parsing %s: %s", name, err)
        msg = f"Failed to parse {name}: {err}"
        raise FileParseError(msg) from err

    logger.info("Parsed %d rows from %s", len(records), name)
    return records
