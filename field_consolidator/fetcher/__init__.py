"""Fetcher module for retrieving design documents from the Figma REST API."""

from field_consolidator.fetcher.figma_client import (
    build_nodes_url,
    fetch_document_node,
    fetch_document_node_async,
    select_node_document,
)

__all__ = [
    "build_nodes_url",
    "fetch_document_node",
    "fetch_document_node_async",
    "select_node_document",
]
