"""Consolidation and validation of extracted fields against the lookup tables.

This module is pure: no logging, no I/O. Lookup tables are rebuilt on every
call so results only depend on the arguments.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from field_consolidator.types import (
    MISSING_COLUMN_MAPPING,
    MISSING_FORMULA,
    ConsolidatedRecord,
    ConsolidationResult,
    ValidationIssue,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from field_consolidator.types import ColumnMapping, FieldDescriptor, FormulaMapping

__all__ = [
    "build_lookup",
    "consolidate",
    "normalize_field_key",
]


def normalize_field_key(field_name: str) -> str:
    """Return the join key for a field name: trimmed and case-folded."""
    return field_name.strip().casefold()


def build_lookup(entries: Iterable[ColumnMapping | FormulaMapping], value_attr: str) -> dict[str, str]:
    """Index mapping entries by normalized field name.

    Parameters
    ----------
    entries
        Column or formula mappings.
    value_attr
        Attribute holding the looked-up value (``"db_column"`` or ``"formula"``).

    Returns
    -------
    dict[str, str]
        Normalized field name to value; later duplicates overwrite earlier ones.
    """
    return {normalize_field_key(entry.field_name): getattr(entry, value_attr) for entry in entries}


def consolidate(
    fields: Sequence[FieldDescriptor],
    columns: Iterable[ColumnMapping],
    formulas: Iterable[FormulaMapping],
    plan_type: str,
) -> ConsolidationResult:
    """Merge field descriptors with column and formula mappings.

    Parameters
    ----------
    fields
        Descriptors from the document extractor, in emission order.
    columns
        Field-to-database-column mappings.
    formulas
        Field-to-formula mappings; a field is computed iff it has one.
    plan_type
        Label copied verbatim onto every record.

    Returns
    -------
    ConsolidationResult
        One record per descriptor in input order, plus issues in discovery
        order (column check before formula check for each field).
    """
    column_lookup = build_lookup(columns, "db_column")
    formula_lookup = build_lookup(formulas, "formula")

    result = ConsolidationResult()

    for descriptor in fields:
        key = normalize_field_key(descriptor.field_name)
        db_column = column_lookup.get(key, "")
        formula = formula_lookup.get(key, "")
        is_computed = bool(formula)

        if not db_column:
            result.issues.append(
                ValidationIssue(
                    field_name=descriptor.field_name,
                    kind=MISSING_COLUMN_MAPPING,
                    message=f'Field "{descriptor.field_name}" does not have a DB mapping',
                ),
            )

        # is_computed is derived from the formula, so this cannot fire today
        if is_computed and not formula:
            result.issues.append(
                ValidationIssue(
                    field_name=descriptor.field_name,
                    kind=MISSING_FORMULA,
                    message=f'Computed field "{descriptor.field_name}" is missing formula',
                ),
            )

        result.records.append(
            ConsolidatedRecord(
                section=descriptor.section,
                subsection=descriptor.subsection,
                field_name=descriptor.field_name,
                order=descriptor.order,
                screen_context=descriptor.screen_context,
                db_column=db_column,
                is_computed=is_computed,
                formula=formula,
                plan_type=plan_type,
            ),
        )

    return result
