"""End-to-end consolidation workflow.

This module orchestrates one complete run:
1. Validate that every required input is present
2. Fetch the Figma node and extract field descriptors
3. Parse the DB mapping file and resolve column mappings
4. Parse the computed fields file and resolve formula mappings
5. Consolidate and validate

Any fatal error (missing input, fetch failure, unsupported file) propagates
and no partial result is returned. Validation issues never stop the run.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from field_consolidator.config import get_figma_settings, setup_logging
from field_consolidator.errors import InputValidationError
from field_consolidator.extractor.document_tree import extract_fields
from field_consolidator.extractor.mappings import extract_column_mappings, extract_formula_mappings
from field_consolidator.extractor.table_parser import check_upload, parse_tabular_file
from field_consolidator.fetcher.figma_client import fetch_document_node
from field_consolidator.validation.engine import consolidate

if TYPE_CHECKING:
    import httpx

    from field_consolidator.types import ConsolidationResult

logger = setup_logging(__name__)

__all__ = [
    "ProcessInputs",
    "run_pipeline",
    "validate_inputs",
]


@dataclass
class ProcessInputs:
    """Everything the user supplies for one run.

    Attributes
    ----------
    file_key : str
        Figma file key.
    node_id : str
        Figma node id to extract from.
    api_token : str
        Figma personal access token.
    db_mapping_file : Path | None
        Spreadsheet linking field names to DB columns.
    computed_fields_file : Path | None
        Spreadsheet linking field names to formulas.
    plan_type : str
        Free-text plan type label stamped on every record.
    """

    file_key: str = ""
    node_id: str = ""
    api_token: str = ""
    db_mapping_file: Path | None = None
    computed_fields_file: Path | None = None
    plan_type: str = ""


def validate_inputs(inputs: ProcessInputs) -> None:
    """Check that every required input is present and both uploads are readable.

    Parameters
    ----------
    inputs : ProcessInputs
        Form values to check.

    Raises
    ------
    InputValidationError
        On the first missing value, in form order.
    UnsupportedFormatError
        If an upload has an extension no parser handles.
    FileParseError
        If an upload path does not exist.
    """
    if not (inputs.file_key.strip() and inputs.node_id.strip() and inputs.api_token.strip()):
        msg = "Please provide Figma file key, node ID, and API token"
        raise InputValidationError(msg)
    if inputs.db_mapping_file is None:
        msg = "Please upload DB mapping file"
        raise InputValidationError(msg)
    if inputs.computed_fields_file is None:
        msg = "Please upload computed fields file"
        raise InputValidationError(msg)
    if not inputs.plan_type.strip():
        msg = "Please enter plan type"
        raise InputValidationError(msg)

    check_upload(inputs.db_mapping_file)
    check_upload(inputs.computed_fields_file)


def run_pipeline(inputs: ProcessInputs, client: httpx.Client | None = None) -> ConsolidationResult:
    """Run fetch, extraction, parsing, and consolidation for one set of inputs.

    Parameters
    ----------
    inputs : ProcessInputs
        Validated or unvalidated form values (validated here first).
    client : httpx.Client, optional
        HTTP client forwarded to the Figma fetcher.

    Returns
    -------
    ConsolidationResult
        Consolidated records and validation issues.

    Raises
    ------
    InputValidationError
        If a required input is missing.
    FetchError
        If the Figma document cannot be retrieved or lacks the node.
    UnsupportedFormatError
        If either upload has an unsupported extension.
    FileParseError
        If either upload is missing, empty, or unreadable.
    """
    validate_inputs(inputs)
    db_mapping_file = Path(inputs.db_mapping_file)  # type: ignore[arg-type]
    computed_fields_file = Path(inputs.computed_fields_file)  # type: ignore[arg-type]

    # Step 1: Extract fields from Figma
    logger.info("Extracting fields from Figma...")
    document = fetch_document_node(inputs.file_key, inputs.node_id, inputs.api_token, client=client)
    fields = extract_fields(document, default_screen=get_figma_settings()["default_screen"])

    # Step 2: Parse DB mapping file
    logger.info("Parsing DB mapping file...")
    columns = extract_column_mappings(parse_tabular_file(db_mapping_file))

    # Step 3: Parse computed fields file
    logger.info("Parsing computed fields file...")
    formulas = extract_formula_mappings(parse_tabular_file(computed_fields_file))

    # Step 4: Consolidate data
    logger.info("Consolidating data...")
    result = consolidate(fields, columns, formulas, inputs.plan_type)

    logger.info(
        "Processing complete: %d records, %d validation issues",
        len(result.records),
        len(result.issues),
    )
    return result
