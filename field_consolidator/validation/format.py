"""Validation report formatting utilities.

This module provides functions to format consolidation results for display
and logging. All functions are pure formatters with no side effects beyond
logging.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from field_consolidator.types import MISSING_COLUMN_MAPPING, MISSING_FORMULA

if TYPE_CHECKING:
    from collections.abc import Sequence

    from field_consolidator.types import ConsolidationResult, ValidationIssue

logger = logging.getLogger(__name__)

__all__ = [
    "format_issue_preview",
    "format_validation_report",
    "log_validation_issues",
]

ISSUE_LABELS = {
    MISSING_COLUMN_MAPPING: "Missing DB mapping",
    MISSING_FORMULA: "Missing formula",
}


def format_issue_preview(issues: Sequence[ValidationIssue], limit: int = 10) -> list[str]:
    """Format the first ``limit`` issues, summarizing the remainder.

    Parameters
    ----------
    issues
        Issues in discovery order.
    limit
        Maximum number of issues listed individually.

    Returns
    -------
    list[str]
        One line per listed issue, plus ``"... and N more"`` when truncated.
    """
    lines = [f"  • {issue.message}" for issue in issues[:limit]]
    remaining = len(issues) - limit
    if remaining > 0:
        lines.append(f"  ... and {remaining} more")
    return lines


def format_validation_report(result: ConsolidationResult, limit: int = 10) -> str:
    """Format a consolidation result for display.

    Parameters
    ----------
    result
        Records and issues from :func:`~field_consolidator.validation.engine.consolidate`.
    limit
        Maximum number of issues listed individually.

    Returns
    -------
    str
        Formatted multi-line report string.
    """
    separator = "═" * 60
    lines = [separator, "                  CONSOLIDATION REPORT", separator, ""]

    computed = sum(1 for record in result.records if record.is_computed)
    lines.append(f"Consolidated fields: {len(result.records)} ({computed} computed)")
    lines.append("")

    if not result.issues:
        lines.append("Validation: ✓ All fields have a DB mapping")
    else:
        counts = result.issue_counts()
        summary = ", ".join(f"{ISSUE_LABELS[kind]}: {count}" for kind, count in counts.items() if count)
        lines.append(f"Validation Issues ({len(result.issues)}) - {summary}")
        lines.extend(format_issue_preview(result.issues, limit))

    lines.extend(["", separator])
    return "\n".join(lines)


def log_validation_issues(issues: Sequence[ValidationIssue]) -> None:
    """Log each validation issue as a warning.

    Parameters
    ----------
    issues
        Issues to log.
    """
    if not issues:
        logger.info("✓ No validation issues")
        return

    logger.warning("⚠ %d validation issues found", len(issues))
    for issue in issues:
        logger.warning("  • [%s] %s", issue.kind, issue.message)
