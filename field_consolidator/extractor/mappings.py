"""Build column and formula mappings from parsed spreadsheet rows.

Mapping files come from different teams and rarely agree on header names, so
each logical column accepts several spellings (see ``header_aliases`` in
``config/config.json``). The first alias holding a non-empty value wins.
Rows whose field name or value is blank after trimming are dropped.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from field_consolidator.config import get_header_aliases, setup_logging
from field_consolidator.types import ColumnMapping, FormulaMapping

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

logger = setup_logging(__name__)

__all__ = [
    "extract_column_mappings",
    "extract_formula_mappings",
    "resolve_alias",
]


def resolve_alias(row: Mapping[str, Any], aliases: Sequence[str]) -> str:
    """Return the trimmed value of the first alias present and non-empty in ``row``.

    Parameters
    ----------
    row
        One parsed spreadsheet record.
    aliases
        Header spellings in priority order.

    Returns
    -------
    str
        Trimmed cell text, or ``""`` when no alias yields a value.
    """
    for alias in aliases:
        value = row.get(alias)
        if value is None:
            continue
        text = str(value)
        if text:
            return text.strip()
    return ""


def _resolve_pairs(
    rows: Iterable[Mapping[str, Any]],
    value_kind: str,
) -> list[tuple[str, str]]:
    """Resolve ``(field_name, value)`` pairs and drop incomplete rows."""
    name_aliases = get_header_aliases("field_name")
    value_aliases = get_header_aliases(value_kind)

    pairs: list[tuple[str, str]] = []
    dropped = 0
    for row in rows:
        field_name = resolve_alias(row, name_aliases)
        value = resolve_alias(row, value_aliases)
        if field_name and value:
            pairs.append((field_name, value))
        else:
            dropped += 1

    if dropped:
        logger.debug("Dropped %d rows without field_name/%s", dropped, value_kind)
    return pairs


def extract_column_mappings(rows: Iterable[Mapping[str, Any]]) -> list[ColumnMapping]:
    """Extract field-to-database-column mappings from parsed rows.

    Parameters
    ----------
    rows
        Records returned by :func:`~field_consolidator.extractor.table_parser.parse_tabular_file`.

    Returns
    -------
    list[ColumnMapping]
        Complete mappings in row order.
    """
    mappings = [ColumnMapping(field_name=name, db_column=column) for name, column in _resolve_pairs(rows, "db_column")]
    logger.info("Extracted %d DB mappings", len(mappings))
    return mappings


def extract_formula_mappings(rows: Iterable[Mapping[str, Any]]) -> list[FormulaMapping]:
    """Extract field-to-formula mappings from parsed rows.

    Parameters
    ----------
    rows
        Records returned by :func:`~field_consolidator.extractor.table_parser.parse_tabular_file`.

    Returns
    -------
    list[FormulaMapping]
        Complete mappings in row order.
    """
    mappings = [FormulaMapping(field_name=name, formula=formula) for name, formula in _resolve_pairs(rows, "formula")]
    logger.info("Extracted %d computed fields", len(mappings))
    return mappings
