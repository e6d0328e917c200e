"""Validation package for the consolidation step.

This package provides the consolidation engine that joins extracted fields
with the column and formula tables, plus formatting of the resulting issues.
"""

from field_consolidator.validation.engine import (
    build_lookup,
    consolidate,
    normalize_field_key,
)
from field_consolidator.validation.format import (
    format_issue_preview,
    format_validation_report,
    log_validation_issues,
)

__all__ = [
    "build_lookup",
    "consolidate",
    "format_issue_preview",
    "format_validation_report",
    "log_validation_issues",
    "normalize_field_key",
]
