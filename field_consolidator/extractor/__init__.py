"""Extraction of fields and mappings from the three input sources.

Submodules
----------
document_tree
    Depth-first walk of the Figma document into ordered field descriptors.
table_parser
    Extension-dispatched parsing of uploaded spreadsheets into records.
mappings
    Header-alias resolution from parsed records into column/formula mappings.
"""

from field_consolidator.extractor.document_tree import (
    DocumentNode,
    classify_node,
    extract_fields,
    infer_screen_context,
    is_field_name,
)
from field_consolidator.extractor.mappings import (
    extract_column_mappings,
    extract_formula_mappings,
    resolve_alias,
)
from field_consolidator.extractor.table_parser import (
    PLACEHOLDER_EXTENSIONS,
    SUPPORTED_EXTENSIONS,
    file_extension,
    parse_tabular_file,
)

__all__ = [
    "PLACEHOLDER_EXTENSIONS",
    "SUPPORTED_EXTENSIONS",
    "DocumentNode",
    "classify_node",
    "extract_column_mappings",
    "extract_fields",
    "extract_formula_mappings",
    "file_extension",
    "infer_screen_context",
    "is_field_name",
    "parse_tabular_file",
    "resolve_alias",
]
