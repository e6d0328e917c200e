"""Field extraction from Figma document trees.

Walks a design document depth-first and turns every named content node into a
:class:`~field_consolidator.types.FieldDescriptor`, tagging it with the
section (nearest named frame), subsection (nearest group), and screen context
it belongs to.

Node classification
-------------------
* ``FRAME`` / ``SECTION``: containers; the outermost one names the section
* ``GROUP``: groups; the innermost one names the subsection
* ``TEXT`` / ``RECTANGLE`` / ``INSTANCE``: leaf content; candidate fields
* anything else: passed through, children still visited

Notes
-----
The walk uses an explicit stack of ``(node, section, subsection, screen)``
frames, so document depth is not limited by the interpreter recursion limit.
Context travels by value down each branch; siblings never see each other's
updates.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from field_consolidator.config import setup_logging
from field_consolidator.types import (
    DEFAULT_SCREEN,
    DEFAULT_SECTION,
    DEFAULT_SUBSECTION,
    SCREEN_CONTEXTS,
    FieldDescriptor,
)

logger = setup_logging(__name__)

__all__ = [
    "NODE_KINDS",
    "DocumentNode",
    "classify_node",
    "extract_fields",
    "infer_screen_context",
    "is_field_name",
]

NODE_KINDS: dict[str, str] = {
    "FRAME": "container",
    "SECTION": "container",
    "GROUP": "group",
    "TEXT": "leaf",
    "RECTANGLE": "leaf",
    "INSTANCE": "leaf",
}


@dataclass
class DocumentNode:
    """A node of the Figma document tree.

    Attributes
    ----------
    id : str
        Figma node id (e.g. ``"12:345"``).
    name : str
        Layer name as shown in the design tool.
    type : str
        Figma node type (``FRAME``, ``GROUP``, ``TEXT``, ...).
    children : list[DocumentNode]
        Child nodes in document order.
    """

    id: str
    name: str
    type: str
    children: list[DocumentNode] = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> DocumentNode:
        """Build a typed tree from the JSON ``document`` object of the Figma API.

        Missing ``id``/``name``/``type`` keys become empty strings and a missing
        ``children`` list becomes an empty one.

        Parameters
        ----------
        payload : Mapping[str, Any]
            Raw node mapping as returned by ``GET /v1/files/:key/nodes``.

        Returns
        -------
        DocumentNode
            Root of the converted tree.
        """
        root = cls._from_fields(payload)
        pending: list[tuple[Mapping[str, Any], DocumentNode]] = [(payload, root)]

        while pending:
            raw, node = pending.pop()
            for raw_child in raw.get("children") or []:
                child = cls._from_fields(raw_child)
                node.children.append(child)
                pending.append((raw_child, child))

        return root

    @classmethod
    def _from_fields(cls, raw: Mapping[str, Any]) -> DocumentNode:
        return cls(
            id=str(raw.get("id") or ""),
            name=str(raw.get("name") or ""),
            type=str(raw.get("type") or ""),
        )


def classify_node(node_type: str) -> str:
    """Map a Figma node type to ``container``, ``group``, ``leaf`` or ``other``."""
    return NODE_KINDS.get(node_type, "other")


def is_field_name(name: str) -> bool:
    """Return ``True`` when a leaf node name should be emitted as a field.

    Names that are blank after trimming, or that start with ``_`` (the design
    team's convention for decorative layers), are skipped.
    """
    return bool(name.strip()) and not name.startswith("_")


def infer_screen_context(name: str, inherited: str = DEFAULT_SCREEN) -> str:
    """Infer the workflow screen a field belongs to from its node name.

    Parameters
    ----------
    name : str
        Leaf node name.
    inherited : str, optional
        Screen context of the enclosing branch.

    Returns
    -------
    str
        The first of ``create``, ``edit``, ``delete``, ``view`` found in the
        lower-cased name, otherwise ``inherited``.

    Examples
    --------
    >>> infer_screen_context("Delete Confirmation")
    'delete'
    >>> infer_screen_context("Email", "edit")
    'edit'
    """
    lowered = name.lower()
    for screen in SCREEN_CONTEXTS:
        if screen in lowered:
            return screen
    return inherited


def extract_fields(
    document_root: DocumentNode | Mapping[str, Any],
    default_screen: str = DEFAULT_SCREEN,
) -> list[FieldDescriptor]:
    """Extract ordered field descriptors from a document tree.

    Parameters
    ----------
    document_root : DocumentNode | Mapping[str, Any]
        Root node, either typed or as the raw Figma JSON mapping.
    default_screen : str, optional
        Screen context inherited by the whole traversal. Default ``"view"``.

    Returns
    -------
    list[FieldDescriptor]
        One descriptor per qualifying leaf node in pre-order, with ``order``
        running ``1..N``.
    """
    root = document_root if isinstance(document_root, DocumentNode) else DocumentNode.from_dict(document_root)

    fields: list[FieldDescriptor] = []
    order = 0
    stack: list[tuple[DocumentNode, str, str, str]] = [(root, "", "", default_screen)]

    while stack:
        node, section, subsection, screen = stack.pop()
        kind = classify_node(node.type)

        if kind == "container":
            # Outermost named container wins
            section = section or node.name
        elif kind == "group":
            subsection = node.name
        elif kind == "leaf" and is_field_name(node.name):
            order += 1
            fields.append(
                FieldDescriptor(
                    section=section or DEFAULT_SECTION,
                    subsection=subsection or DEFAULT_SUBSECTION,
                    field_name=node.name,
                    order=order,
                    # Override applies to this emission only
                    screen_context=infer_screen_context(node.name, screen),
                ),
            )

        # Reversed so children pop in document order
        stack.extend((child, section, subsection, screen) for child in reversed(node.children))

    logger.info("Extracted %d fields from document node %s", len(fields), root.id or "<root>")
    return fields
