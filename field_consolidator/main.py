#!/usr/bin/env python3
"""Field consolidator orchestrator - fetch, parse, consolidate, and export.

This module exposes the workflow two ways:
1. One-shot CLI: all inputs as flags, process once, export unless told not to
2. Interactive form (``--interactive``): collect the inputs with questionary,
   then loop over Process / Export / Reset / Quit

Usage (from project root):
    python -m field_consolidator.main --file-key AbC123 --node-id 12:345 \\
        --db-mapping mappings.xlsx --computed-fields computed.csv --plan-type PPO
    python -m field_consolidator.main ... --no-export --quiet
    python -m field_consolidator.main --interactive

CLI Flags:
    --file-key, -f        Figma file key
    --node-id, -n         Figma node id
    --token, -t           Figma API token (default: FIGMA_API_TOKEN)
    --db-mapping, -d      DB mapping spreadsheet (xlsx, xls, csv)
    --computed-fields, -c Computed fields spreadsheet (xlsx, xls, csv)
    --plan-type, -p       Plan type label
    --output, -o          Export path (default: output/consolidated_fields.xlsx)
    --no-export           Don't write the workbook
    --quiet               Suppress report output
    --interactive, -i     Collect inputs interactively
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import questionary

from field_consolidator.config import FIGMA_API_TOKEN, get_issue_preview_limit, setup_logging
from field_consolidator.errors import FieldConsolidatorError
from field_consolidator.pipeline import ProcessInputs, run_pipeline
from field_consolidator.validation.format import format_validation_report, log_validation_issues
from field_consolidator.writer.workbook_writer import export_to_excel

if TYPE_CHECKING:
    import httpx

    from field_consolidator.types import ConsolidationResult

logger = setup_logging(__name__)

ACTION_PROCESS = "Process"
ACTION_EXPORT = "Export"
ACTION_RESET = "Reset"
ACTION_EDIT = "Edit inputs"
ACTION_QUIT = "Quit"


# =============================================================================
# Session State
# =============================================================================


@dataclass
class SessionState:
    """Form inputs and the outcome of the last Process action."""

    inputs: ProcessInputs = field(default_factory=ProcessInputs)
    result: ConsolidationResult | None = None
    error: str | None = None

    @property
    def can_export(self) -> bool:
        """Export is offered only when the last run produced records."""
        return self.result is not None and bool(self.result.records)

    def reset(self) -> None:
        """Clear all inputs, results, and the last error."""
        self.inputs = ProcessInputs()
        self.result = None
        self.error = None


def process(state: SessionState, client: httpx.Client | None = None) -> bool:
    """Run the pipeline for the current inputs and store the outcome.

    Parameters
    ----------
    state : SessionState
        Session to read inputs from and write results to.
    client : httpx.Client, optional
        HTTP client forwarded to the Figma fetcher.

    Returns
    -------
    bool
        ``True`` on success; ``False`` when a fatal error was recorded in
        ``state.error`` (previous results are discarded either way).
    """
    state.result = None
    state.error = None

    try:
        state.result = run_pipeline(state.inputs, client=client)
    except FieldConsolidatorError as err:
        state.error = str(err)
        logger.error("Error processing data: %s", err)
        return False

    log_validation_issues(state.result.issues)
    return True


def export(state: SessionState, output_path: Path | None = None) -> Path | None:
    """Export the last results, or log why nothing was written.

    Parameters
    ----------
    state : SessionState
        Session holding the results.
    output_path : Path, optional
        Destination workbook; defaults to the configured export path.

    Returns
    -------
    Path | None
        Written workbook path, or ``None`` when there was nothing to export.
    """
    if not state.can_export:
        logger.warning("No data to export")
        return None

    assert state.result is not None  # guaranteed by can_export
    return export_to_excel(state.result.records, output_path)


def print_results(result: ConsolidationResult) -> None:
    """Print the consolidation report with a capped issue preview."""
    print(format_validation_report(result, limit=get_issue_preview_limit()))


# =============================================================================
# Interactive Form
# =============================================================================


def _ask_text(message: str, default: str, password: bool = False) -> str:
    prompt = questionary.password(message, default=default) if password else questionary.text(message, default=default)
    return (prompt.ask() or "").strip()


def _ask_file(message: str, current: Path | None) -> Path | None:
    answer = questionary.path(message, default=str(current) if current else "").ask()
    return Path(answer.strip()) if answer and answer.strip() else None


def prompt_inputs(state: SessionState) -> None:
    """Collect the six form inputs, pre-filled with the current values."""
    inputs = state.inputs
    inputs.file_key = _ask_text("Figma file key:", inputs.file_key)
    inputs.node_id = _ask_text("Figma node ID:", inputs.node_id)
    inputs.api_token = _ask_text("Figma API token:", inputs.api_token or FIGMA_API_TOKEN, password=True)
    inputs.db_mapping_file = _ask_file("DB mapping file (xlsx, xls, csv):", inputs.db_mapping_file)
    inputs.computed_fields_file = _ask_file("Computed fields file (xlsx, xls, csv):", inputs.computed_fields_file)
    inputs.plan_type = _ask_text("Plan type:", inputs.plan_type)


def _action_choices(state: SessionState) -> list[questionary.Choice]:
    return [
        questionary.Choice(ACTION_PROCESS),
        questionary.Choice(ACTION_EXPORT, disabled=None if state.can_export else "no results yet"),
        questionary.Choice(ACTION_EDIT),
        questionary.Choice(ACTION_RESET),
        questionary.Choice(ACTION_QUIT),
    ]


def interactive_session(output_path: Path | None = None) -> int:
    """Run the interactive form until the user quits.

    Returns
    -------
    int
        ``0`` when the last Process succeeded (or none was run); ``1`` when
        the last Process failed.
    """
    state = SessionState()
    prompt_inputs(state)

    while True:
        action = questionary.select("Choose an action:", choices=_action_choices(state)).ask()

        if action is None or action == ACTION_QUIT:
            return 1 if state.error else 0

        if action == ACTION_PROCESS:
            if process(state):
                assert state.result is not None
                print_results(state.result)
            else:
                print(f"Error: {state.error}")
        elif action == ACTION_EXPORT:
            written = export(state, output_path)
            if written is not None:
                print(f"Exported to {written}")
        elif action == ACTION_EDIT:
            prompt_inputs(state)
        elif action == ACTION_RESET:
            state.reset()
            logger.info("Inputs and results cleared")
            prompt_inputs(state)


# =============================================================================
# CLI
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the one-shot and interactive modes."""
    parser = argparse.ArgumentParser(
        description="Consolidate Figma fields with DB mappings and computed fields into one Excel file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m field_consolidator.main -f AbC123 -n 12:345 -d db.xlsx -c computed.csv -p PPO
  python -m field_consolidator.main -f AbC123 -n 12:345 -d db.csv -c computed.csv -p HMO -o out.xlsx
  python -m field_consolidator.main --interactive
        """,
    )
    parser.add_argument("--file-key", "-f", default="", help="Figma file key")
    parser.add_argument("--node-id", "-n", default="", help="Figma node ID (e.g., 12:345)")
    parser.add_argument("--token", "-t", default=FIGMA_API_TOKEN, help="Figma API token (default: $FIGMA_API_TOKEN)")
    parser.add_argument("--db-mapping", "-d", type=Path, default=None, help="DB mapping file")
    parser.add_argument("--computed-fields", "-c", type=Path, default=None, help="Computed fields file")
    parser.add_argument("--plan-type", "-p", default="", help="Plan type label")
    parser.add_argument("--output", "-o", type=Path, default=None, help="Export path for the workbook")
    parser.add_argument("--no-export", action="store_true", help="Don't write the workbook")
    parser.add_argument("--quiet", action="store_true", help="Don't print report")
    parser.add_argument("--interactive", "-i", action="store_true", help="Collect inputs interactively")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse CLI flags and run one consolidation.

    Returns
    -------
    int
        ``0`` on success; ``1`` when a fatal error stopped the run.
    """
    args = build_parser().parse_args(argv)

    if args.interactive:
        return interactive_session(args.output)

    state = SessionState(
        inputs=ProcessInputs(
            file_key=args.file_key,
            node_id=args.node_id,
            api_token=args.token,
            db_mapping_file=args.db_mapping,
            computed_fields_file=args.computed_fields,
            plan_type=args.plan_type,
        ),
    )

    if not process(state):
        return 1

    assert state.result is not None
    if not args.quiet:
        print_results(state.result)

    if not args.no_export:
        written = export(state, args.output)
        if written is not None:
            logger.info("Saved to: %s", written)

    return 0


if __name__ == "__main__":
    sys.exit(main())
