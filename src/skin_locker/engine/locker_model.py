"""UI-facing snapshot over the taxonomy, mod buckets and presets.

This module intentionally contains no GUI code. A LockerModel is rebuilt
from the latest categories + mods after every refresh or toggle; it never
mutates and never talks to the external collaborators itself.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from skin_locker.engine.locker_config import LockerConfig
from skin_locker.locker.exclusivity import set_active
from skin_locker.locker.grouping import ModGroups, group_mods_by_category
from skin_locker.models.category import CategoryNode, Hero
from skin_locker.models.mod import Mod, ToggleOp
from skin_locker.models.preset import Preset, VariantApplyRequest
from skin_locker.models.variant import CompoundVariant
from skin_locker.taxonomy.hero_list import build_hero_list, hero_by_id
from skin_locker.variants.presets import (
    active_preset,
    build_presets,
    detect_texture_mods,
    is_skin_mod,
    plan_preset_activation,
)


@dataclass(frozen=True, slots=True)
class LockerModel:
    """Derived, read-only view of one taxonomy + mod-list snapshot."""

    heroes: list[Hero]
    groups: ModGroups
    presets: list[Preset]
    mods: list[Mod] = field(default_factory=list)
    config: LockerConfig = field(default_factory=LockerConfig)

    @classmethod
    def build(
        cls,
        categories: Sequence[CategoryNode],
        mods: Sequence[Mod],
        config: LockerConfig | None = None,
    ) -> "LockerModel":
        config = config or LockerConfig()
        heroes = build_hero_list(categories, config.hero_predicate())
        return cls(
            heroes=heroes,
            groups=group_mods_by_category((m for m in mods if is_skin_mod(m)), heroes),
            presets=build_presets(mods, config.preset_registry),
            mods=list(mods),
            config=config,
        )

    def hero(self, hero_id: int) -> Hero | None:
        return hero_by_id(self.heroes, hero_id)

    def skins(self, hero_id: int) -> list[Mod]:
        return self.groups.bucket(hero_id)

    def active_skin(self, hero_id: int) -> Mod | None:
        enabled = self.groups.enabled(hero_id)
        return enabled[0] if enabled else None

    def is_compound(self, hero: Hero) -> bool:
        return self.config.is_compound_hero(hero.name)

    def plan_set_active(self, hero_id: int, mod_id: str | None) -> list[ToggleOp]:
        return set_active(self.skins(hero_id), mod_id)

    def active_preset(self) -> Preset | None:
        return active_preset(self.presets)

    def plan_preset(self, preset_file_name: str) -> list[ToggleOp]:
        return plan_preset_activation(self.mods, preset_file_name, self.config.preset_registry)

    def texture_mods(self) -> list[Mod]:
        return detect_texture_mods(self.mods)

    def favorite_heroes(self, favorite_ids: Iterable[int]) -> list[Hero]:
        """Favorites in the caller's order; ids no longer in the taxonomy are dropped."""
        by_id = {hero.id: hero for hero in self.heroes}
        result: list[Hero] = []
        for hero_id in dict.fromkeys(favorite_ids):
            hero = by_id.get(hero_id)
            if hero is not None:
                result.append(hero)
        return result


def build_apply_request(
    archive_path: str,
    variant: CompoundVariant,
    hero: Hero,
    config: LockerConfig | None = None,
) -> VariantApplyRequest:
    """Arguments for the collaborator that installs ``variant`` as a mod.

    The hero id is only attached when ``hero`` is a compound-cosmetic
    hero, so the applied file lands in that hero's bucket.
    """
    config = config or LockerConfig()
    path = archive_path.strip()
    if not path:
        raise ValueError("Archive path is empty")
    return VariantApplyRequest(
        archive_path=path,
        archive_entry=variant.archive_entry,
        preset_label=variant.label,
        hero_category_id=hero.id if config.is_compound_hero(hero.name) else None,
    )
