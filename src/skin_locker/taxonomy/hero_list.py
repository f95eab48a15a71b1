"""Flatten the vendor category tree into the hero list.

The vendor tree mixes organizational folders ("Skins", "Sounds", ...) with
the hero categories mods actually attach to. Which nodes count as heroes is
decided by an injectable selection predicate, since the vendor can reshape
the tree at any time:

  - children_of("Skins"): direct children of a folder named "Skins" (default)
  - leaves_under("Skins"): leaf nodes anywhere below a folder named "Skins"
  - leaf_nodes: every leaf in the tree

Traversal is depth-first pre-order, so output order is deterministic and
matches the vendor's display order.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence

from skin_locker.models.category import CategoryNode, Hero

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

DEFAULT_HERO_ROOT = "Skins"

# (node, ancestors from root to parent) -> is this node a hero?
HeroPredicate = Callable[[CategoryNode, Sequence[CategoryNode]], bool]


def _same_name(a: str, b: str) -> bool:
    return a.strip().casefold() == b.strip().casefold()


def children_of(root_name: str) -> HeroPredicate:
    """Select nodes whose direct parent is named ``root_name``."""
    def predicate(node: CategoryNode, ancestors: Sequence[CategoryNode]) -> bool:
        return bool(ancestors) and _same_name(ancestors[-1].name, root_name)
    return predicate


def leaves_under(root_name: str) -> HeroPredicate:
    """Select leaf nodes with any ancestor named ``root_name``."""
    def predicate(node: CategoryNode, ancestors: Sequence[CategoryNode]) -> bool:
        return node.is_leaf and any(_same_name(a.name, root_name) for a in ancestors)
    return predicate


def leaf_nodes(node: CategoryNode, ancestors: Sequence[CategoryNode]) -> bool:
    return node.is_leaf


def walk_categories(
    tree: Iterable[CategoryNode],
) -> Iterable[tuple[CategoryNode, tuple[CategoryNode, ...]]]:
    """Yield (node, ancestors) pairs in depth-first pre-order."""
    def visit(nodes, ancestors):
        for node in nodes:
            yield node, ancestors
            if node.children:
                yield from visit(node.children, ancestors + (node,))

    yield from visit(tree, ())


def build_hero_list(
    tree: Iterable[CategoryNode],
    predicate: HeroPredicate | None = None,
) -> list[Hero]:
    """Return the de-duplicated hero list for a category tree.

    The same id reachable through several paths (vendor inconsistency) is
    kept once, at its first position; later copies are logged and skipped.
    """
    if predicate is None:
        predicate = children_of(DEFAULT_HERO_ROOT)

    heroes: list[Hero] = []
    seen: dict[int, Hero] = {}
    names: dict[str, Hero] = {}
    for node, ancestors in walk_categories(tree):
        if not predicate(node, ancestors):
            continue
        first = seen.get(node.id)
        if first is not None:
            logger.warning(
                "Duplicate hero category id %d (%r); keeping first occurrence %r",
                node.id, node.name, first.name,
            )
            continue
        hero = Hero(id=node.id, name=node.name, icon_url=node.icon_url)
        same_name = names.get(node.name.casefold())
        if same_name is not None:
            logger.warning(
                "Duplicate hero name %r (ids %d and %d); name lookups resolve to id %d",
                node.name, same_name.id, node.id, same_name.id,
            )
        else:
            names[node.name.casefold()] = hero
        seen[node.id] = hero
        heroes.append(hero)
    return heroes


def find_category_by_name(
    tree: Iterable[CategoryNode],
    name: str,
) -> CategoryNode | None:
    """First node named ``name`` (case-insensitive) in depth-first order."""
    for node, _ancestors in walk_categories(tree):
        if _same_name(node.name, name):
            return node
    return None


def hero_by_id(heroes: Iterable[Hero], hero_id: int) -> Hero | None:
    for hero in heroes:
        if hero.id == hero_id:
            return hero
    return None


def hero_by_name(heroes: Iterable[Hero], name: str) -> Hero | None:
    for hero in heroes:
        if _same_name(hero.name, name):
            return hero
    return None
