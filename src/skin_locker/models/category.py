"""Vendor category tree and hero data models.

The vendor returns an arbitrarily nested list of category nodes. We parse
it once into a closed recursive shape (CategoryNode) so the taxonomy
builder never has to inspect raw dicts.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


@dataclass(slots=True)
class CategoryNode:
    """One node of the vendor category tree (folder or hero)."""
    id: int
    name: str
    children: list[CategoryNode] = field(default_factory=list)
    icon_url: str | None = None
    item_count: int = 0
    profile_url: str | None = None
    parent_id: int | None = None

    @property
    def is_leaf(self) -> bool:
        return not self.children


@dataclass(frozen=True, slots=True)
class Hero:
    """A selectable taxonomy entity that skins attach to."""
    id: int
    name: str
    icon_url: str | None = None


def optional_int(value: Any) -> int | None:
    """Lenient int for vendor ids: None for missing, bool or unparseable values."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_category_node(payload: Mapping[str, Any]) -> CategoryNode | None:
    """Parse one vendor node (and its subtree).

    Returns None for nodes without a usable id or name. Malformed children
    are dropped individually; the rest of the subtree survives.
    """
    node_id = optional_int(payload.get("id"))
    name = payload.get("name")
    if node_id is None or not isinstance(name, str) or not name.strip():
        logger.warning("Skipping malformed category node: %r", dict(payload))
        return None

    raw_children = payload.get("children") or []
    children = parse_category_tree(raw_children)

    return CategoryNode(
        id=node_id,
        name=name.strip(),
        children=children,
        icon_url=payload.get("iconUrl") or None,
        item_count=optional_int(payload.get("itemCount")) or 0,
        profile_url=payload.get("profileUrl") or None,
        parent_id=optional_int(payload.get("parentId")),
    )


def parse_category_tree(payload: Iterable[Mapping[str, Any]]) -> list[CategoryNode]:
    """Parse the vendor's top-level node list, keeping input order."""
    nodes: list[CategoryNode] = []
    for raw in payload:
        if not isinstance(raw, Mapping):
            logger.warning("Skipping non-object category node: %r", raw)
            continue
        node = parse_category_node(raw)
        if node is not None:
            nodes.append(node)
    return nodes
