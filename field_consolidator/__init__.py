"""field-consolidator: one spreadsheet of form fields from Figma and mapping tables.

The package fetches a Figma design node, extracts the form fields it lays out,
joins them with a DB column mapping table and a computed-field formula table,
flags fields without a DB mapping, and exports the result to Excel.

Architecture
------------
* ``fetcher``: httpx client for the Figma ``/files/:key/nodes`` endpoint.
* ``extractor``: document-tree field extraction and spreadsheet parsing (pandas).
* ``validation``: case-insensitive join, validation issues, and report formatting.
* ``writer``: Excel (openpyxl) and CSV export of consolidated records.
* ``pipeline``: input validation and the end-to-end run.

Configuration and credentials
-----------------------------
Settings live in ``config/config.json``. ``OUTPUT_DIR`` and ``LOGS_DIR``
override output locations and ``FIGMA_API_TOKEN`` supplies the default token.

Examples
--------
Run once from the command line:

    >>> python -m field_consolidator.main -f AbC123 -n 12:345 -d db.xlsx -c computed.csv -p PPO

Collect inputs interactively:

    >>> python -m field_consolidator.main --interactive
"""

from field_consolidator.validation.engine import consolidate

__version__ = "0.1.0"
__all__ = ["__version__", "consolidate"]


def get_version() -> str:
    """Return the current package version string.

    Returns
    -------
    str
        Semantic version identifier (e.g., ``"0.1.0"``).
    """
    return __version__


__all__.append("get_version")
