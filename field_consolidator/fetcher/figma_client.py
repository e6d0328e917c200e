"""Figma REST API client for fetching a document subtree.

This module provides both sync and async fetch functions using httpx.
Both call ``GET /v1/files/:file_key/nodes?ids=:node_id`` with the
``X-Figma-Token`` header and return the ``document`` object of the requested
node.

Functions
---------
fetch_document_node : Sync fetch with httpx.Client (CLI and pipeline)
fetch_document_node_async : Async fetch with httpx.AsyncClient

Notes
-----
Transport, credential, and HTTP-status failures are wrapped in a single
:class:`~field_consolidator.errors.FetchError` carrying the original message.
A response that does not contain the node raises
:class:`~field_consolidator.errors.NodeNotFoundError` unwrapped.
"""

from __future__ import annotations

from typing import Any

import httpx

from field_consolidator.config import get_figma_settings, setup_logging
from field_consolidator.errors import FetchError, NodeNotFoundError

# Module-level logger for fetch operations
logger = setup_logging(__name__)

__all__ = [
    "build_nodes_url",
    "fetch_document_node",
    "fetch_document_node_async",
    "select_node_document",
]


def build_nodes_url(file_key: str, base_url: str | None = None) -> str:
    """Return the ``/files/:key/nodes`` endpoint for a Figma file.

    Parameters
    ----------
    file_key : str
        Key from the Figma file URL.
    base_url : str, optional
        API root; defaults to ``figma.base_url`` in config.

    Returns
    -------
    str
        Endpoint URL without query string.
    """
    root = base_url if base_url is not None else get_figma_settings()["base_url"]
    return f"{root.rstrip('/')}/files/{file_key}/nodes"


def _request_kwargs(node_id: str, api_token: str) -> dict[str, Any]:
    return {
        "params": {"ids": node_id},
        "headers": {"X-Figma-Token": api_token},
    }


def _wrap_failure(err: Exception) -> FetchError:
    logger.error("Error fetching Figma data: %s", err)
    return FetchError(f"Failed to fetch Figma data: {err}")


def select_node_document(payload: Any, node_id: str) -> dict[str, Any]:
    """Pick the requested node's ``document`` out of a ``/nodes`` response.

    Parameters
    ----------
    payload : Any
        Decoded JSON response body.
    node_id : str
        Node id as passed in the ``ids`` query parameter.

    Returns
    -------
    dict[str, Any]
        The node's document tree.

    Raises
    ------
    NodeNotFoundError
        If the response has no entry (or a null entry) for ``node_id``.
    """
    nodes = payload.get("nodes") if isinstance(payload, dict) else None
    entry = (nodes or {}).get(node_id)
    document = entry.get("document") if isinstance(entry, dict) else None
    if not document:
        logger.error("Node %s not found in Figma response", node_id)
        raise NodeNotFoundError(node_id)
    return document  # type: ignore[no-any-return]


def fetch_document_node(
    file_key: str,
    node_id: str,
    api_token: str,
    client: httpx.Client | None = None,
    timeout: float | None = None,
) -> dict[str, Any]:
    """Fetch one node's document tree synchronously.

    Parameters
    ----------
    file_key : str
        Key from the Figma file URL.
    node_id : str
        Node id to fetch (e.g. ``"12:345"``).
    api_token : str
        Figma personal access token.
    client : httpx.Client, optional
        Preconfigured client (used by tests); a short-lived one is created
        otherwise.
    timeout : float, optional
        Request timeout in seconds; defaults to ``figma.timeout_seconds``.

    Returns
    -------
    dict[str, Any]
        Raw document tree of the requested node.

    Raises
    ------
    FetchError
        On connection errors, 4xx/5xx responses, or an undecodable body.
    NodeNotFoundError
        If the node is absent from the response.
    """
    url = build_nodes_url(file_key)
    request_timeout = timeout if timeout is not None else get_figma_settings()["timeout_seconds"]

    logger.info("Fetching Figma node %s from file %s", node_id, file_key)

    try:
        if client is None:
            with httpx.Client(timeout=request_timeout, follow_redirects=True) as sync_client:
                resp = sync_client.get(url, **_request_kwargs(node_id, api_token))
        else:
            resp = client.get(url, **_request_kwargs(node_id, api_token))
        resp.raise_for_status()  # Raise on 4xx/5xx
        payload = resp.json()
    except (httpx.HTTPError, ValueError) as err:
        raise _wrap_failure(err) from err

    return select_node_document(payload, node_id)


async def fetch_document_node_async(
    file_key: str,
    node_id: str,
    api_token: str,
    client: httpx.AsyncClient | None = None,
    timeout: float | None = None,
) -> dict[str, Any]:
    """Fetch one node's document tree asynchronously.

    Same contract as :func:`fetch_document_node`, using ``httpx.AsyncClient``
    for callers already running an event loop.
    """
    url = build_nodes_url(file_key)
    request_timeout = timeout if timeout is not None else get_figma_settings()["timeout_seconds"]

    logger.info("Fetching Figma node %s from file %s", node_id, file_key)

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=request_timeout, follow_redirects=True) as async_http:
                resp = await async_http.get(url, **_request_kwargs(node_id, api_token))
        else:
            resp = await client.get(url, **_request_kwargs(node_id, api_token))
        resp.raise_for_status()
        payload = resp.json()
    except (httpx.HTTPError, ValueError) as err:
        raise _wrap_failure(err) from err

    return select_node_document(payload, node_id)
