"""Partition installed mods into per-hero buckets."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from skin_locker.models.category import Hero
from skin_locker.models.mod import Mod

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


@dataclass(slots=True)
class ModGroups:
    """Mods keyed by hero id, plus the ones we could not place.

    Bucket order is install/discovery order (the input order).
    """
    by_category: dict[int, list[Mod]] = field(default_factory=dict)
    uncategorized: list[Mod] = field(default_factory=list)

    def bucket(self, hero_id: int) -> list[Mod]:
        return self.by_category.get(hero_id, [])

    def enabled(self, hero_id: int) -> list[Mod]:
        return [mod for mod in self.bucket(hero_id) if mod.enabled]


def _id_set(known: Iterable[int | Hero]) -> set[int]:
    return {item.id if isinstance(item, Hero) else int(item) for item in known}


def group_mods_by_category(
    mods: Iterable[Mod],
    known_ids: Iterable[int | Hero] | None = None,
) -> ModGroups:
    """Group mods by category id in a single pass.

    A mod lands in ``uncategorized`` when it has no category id or, if
    ``known_ids`` is given, when its id is not part of that taxonomy
    snapshot (stale mod cache vs. refreshed taxonomy).
    """
    known = _id_set(known_ids) if known_ids is not None else None
    groups = ModGroups()

    for mod in mods:
        category_id = mod.category_id
        if not category_id:
            groups.uncategorized.append(mod)
            continue
        if known is not None and category_id not in known:
            logger.debug(
                "Mod %s references unknown category %d; treating as uncategorized",
                mod.id, category_id,
            )
            groups.uncategorized.append(mod)
            continue
        groups.by_category.setdefault(category_id, []).append(mod)

    return groups
