"""Exceptions that abort a consolidation run.

Validation issues (missing column mapping, missing formula) are findings,
not failures, and are returned by the engine rather than raised here.
"""

from __future__ import annotations

__all__ = [
    "FetchError",
    "FieldConsolidatorError",
    "FileParseError",
    "InputValidationError",
    "NodeNotFoundError",
    "UnsupportedFormatError",
]


class FieldConsolidatorError(Exception):
    """Base class for errors that stop the pipeline."""


class InputValidationError(FieldConsolidatorError, ValueError):
    """Raised when a required input is missing before processing starts."""


class FetchError(FieldConsolidatorError):
    """Raised when the Figma document cannot be retrieved.

    The message carries the originating cause so it can be shown verbatim.
    """


class NodeNotFoundError(FetchError, LookupError):
    """Raised when the requested node id is absent from the fetched document."""

    def __init__(self, node_id: str) -> None:
        self.node_id = node_id
        super().__init__("Node not found in Figma file")


class UnsupportedFormatError(FieldConsolidatorError, ValueError):
    """Raised when an uploaded file has an extension no parser handles."""

    def __init__(self, extension: str) -> None:
        self.extension = extension
        super().__init__(f"Unsupported file type: {extension}")


class FileParseError(FieldConsolidatorError):
    """Raised when an uploaded file is missing or cannot be read as a table.

    The message names the file and carries the underlying reader error.
    """
