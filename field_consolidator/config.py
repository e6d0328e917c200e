"""Configuration management for field-consolidator.

This module centralizes file-system paths, environment variables, and the JSON
configuration loader used by the fetch, parse, and export steps.

Configuration file
------------------
``config/config.json`` holds:

* ``figma``: API base URL, request timeout, and default screen context
* ``header_aliases``: accepted spreadsheet header spellings per logical column
* ``export``: workbook filename, sheet name, and column width bounds
* ``display``: how many validation issues to preview before summarizing

Environment variables
---------------------
``OUTPUT_DIR`` and ``LOGS_DIR`` override default directories; the Figma
personal access token is read from ``FIGMA_API_TOKEN``. Directories are
created eagerly on import so downstream callers can rely on their existence.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, cast

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"
OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR", PROJECT_ROOT / "output"))
LOGS_DIR = Path(os.getenv("LOGS_DIR", PROJECT_ROOT / "logs"))

# Ensure directories exist
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
LOGS_DIR.mkdir(parents=True, exist_ok=True)

# API Keys
FIGMA_API_TOKEN = os.getenv("FIGMA_API_TOKEN", "")

HEADER_ALIAS_KINDS = ("field_name", "db_column", "formula")


def get_config() -> dict[str, Any]:
    """Load the primary project configuration.

    Returns
    -------
    dict[str, Any]
        Parsed contents of ``config/config.json``.

    Raises
    ------
    FileNotFoundError
        If ``config/config.json`` is missing.
    json.JSONDecodeError
        If the file exists but is not valid JSON.
    """
    config_path = CONFIG_DIR / "config.json"
    if not config_path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    with Path(config_path).open(encoding="utf-8") as f:
        return json.load(f)  # type: ignore[no-any-return]


def setup_logging(name: str = "field_consolidator") -> logging.Logger:
    """Configure a console+file logger if not already present.

    Parameters
    ----------
    name : str, optional
        Logger namespace; reused to avoid duplicate handlers.

    Returns
    -------
    logging.Logger
        Logger with INFO-level console handler and DEBUG-level file handler
        under ``LOGS_DIR``.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        logger.setLevel(logging.DEBUG)

        # Console handler
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.INFO)
        console_format = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
        console_handler.setFormatter(console_format)
        logger.addHandler(console_handler)

        # File handler
        log_filename = f"{datetime.now(UTC).strftime('%Y-%m-%d')}_run.log"
        file_handler = logging.FileHandler(LOGS_DIR / log_filename)
        file_handler.setLevel(logging.DEBUG)
        file_format = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        file_handler.setFormatter(file_format)
        logger.addHandler(file_handler)

    return logger


def validate_api_keys() -> dict[str, bool]:
    """Report availability of third-party API credentials.

    Returns
    -------
    dict[str, bool]
        Flag for ``figma`` indicating whether ``FIGMA_API_TOKEN`` is set.
    """
    return {"figma": bool(FIGMA_API_TOKEN)}


# =============================================================================
# Section Accessors
# =============================================================================


def get_figma_settings() -> dict[str, Any]:
    """Return Figma API settings with defaults filled in.

    Returns
    -------
    dict[str, Any]
        Keys ``base_url``, ``timeout_seconds``, and ``default_screen``.
    """
    figma = get_config().get("figma", {})
    return {
        "base_url": figma.get("base_url", "https://api.figma.com/v1"),
        "timeout_seconds": float(figma.get("timeout_seconds", 60.0)),
        "default_screen": figma.get("default_screen", "view"),
    }


def get_header_aliases(kind: str) -> list[str]:
    """Return accepted header spellings for a logical spreadsheet column.

    Parameters
    ----------
    kind : str
        One of ``"field_name"``, ``"db_column"``, or ``"formula"``.

    Returns
    -------
    list[str]
        Header names in priority order (first non-empty match wins).

    Raises
    ------
    ValueError
        If ``kind`` is not a known alias group.
    """
    if kind not in HEADER_ALIAS_KINDS:
        msg = f"Unknown header alias kind: {kind}. Must be one of {HEADER_ALIAS_KINDS}."
        raise ValueError(msg)

    aliases = get_config().get("header_aliases", {})
    return cast("list[str]", aliases.get(kind, [kind]))


def get_export_settings() -> dict[str, Any]:
    """Return workbook export settings with defaults filled in.

    Returns
    -------
    dict[str, Any]
        Keys ``filename``, ``sheet_name``, ``min_column_width``, and
        ``max_column_width``.
    """
    export = get_config().get("export", {})
    return {
        "filename": export.get("filename", "consolidated_fields.xlsx"),
        "sheet_name": export.get("sheet_name", "Consolidated Fields"),
        "min_column_width": int(export.get("min_column_width", 10)),
        "max_column_width": int(export.get("max_column_width", 50)),
    }


def get_issue_preview_limit() -> int:
    """Return how many validation issues are listed before summarizing the rest."""
    display = get_config().get("display", {})
    return int(display.get("issue_preview_limit", 10))
