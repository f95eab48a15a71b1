"""Configuration knobs for the locker engine.

Defaults match the Deadlock category layout on the vendor site: heroes are
the direct children of the "Skins" folder, and Mina is the only hero whose
outfit ships as a compound-variant archive.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from skin_locker.models.preset import PresetSignature
from skin_locker.taxonomy.hero_list import (
    DEFAULT_HERO_ROOT,
    HeroPredicate,
    children_of,
    leaf_nodes,
    leaves_under,
)
from skin_locker.variants.codec import DuplicatePolicy

HERO_SELECTION_MODES = ("children", "leaves", "all-leaves")


@dataclass(slots=True)
class LockerConfig:
    """Tuneable parameters supplied by the caller's settings store."""

    hero_root_name: str = DEFAULT_HERO_ROOT
    hero_selection: str = "children"   # see HERO_SELECTION_MODES
    compound_heroes: frozenset[str] = frozenset({"Mina"})
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.KEEP
    preset_registry: tuple[PresetSignature, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.hero_selection not in HERO_SELECTION_MODES:
            raise ValueError(
                f"Unknown hero selection mode {self.hero_selection!r}; "
                f"expected one of {', '.join(HERO_SELECTION_MODES)}"
            )

    def hero_predicate(self) -> HeroPredicate:
        if self.hero_selection == "leaves":
            return leaves_under(self.hero_root_name)
        if self.hero_selection == "all-leaves":
            return leaf_nodes
        return children_of(self.hero_root_name)

    def is_compound_hero(self, name: str) -> bool:
        wanted = name.strip().casefold()
        return any(wanted == hero.casefold() for hero in self.compound_heroes)

    @classmethod
    def from_mapping(cls, settings: Mapping[str, Any]) -> "LockerConfig":
        """Build from a settings dict (camelCase keys); unknown keys are ignored."""
        kwargs: dict[str, Any] = {}
        if "heroRootName" in settings:
            kwargs["hero_root_name"] = str(settings["heroRootName"])
        if "heroSelection" in settings:
            kwargs["hero_selection"] = str(settings["heroSelection"])
        if "compoundHeroes" in settings:
            heroes = settings["compoundHeroes"]
            if isinstance(heroes, str) or not hasattr(heroes, "__iter__"):
                raise ValueError("compoundHeroes must be a list of hero names")
            kwargs["compound_heroes"] = frozenset(str(h) for h in heroes)
        if "duplicatePolicy" in settings:
            try:
                kwargs["duplicate_policy"] = DuplicatePolicy(str(settings["duplicatePolicy"]).lower())
            except ValueError as exc:
                raise ValueError(
                    f"Unknown duplicatePolicy {settings['duplicatePolicy']!r}"
                ) from exc
        if "presetRegistry" in settings:
            kwargs["preset_registry"] = tuple(
                _signature_from_dict(raw) for raw in settings["presetRegistry"]
            )
        return cls(**kwargs)


def _signature_from_dict(raw: Mapping[str, Any]) -> PresetSignature:
    label = raw.get("label")
    files = raw.get("files")
    if not isinstance(label, str) or not label.strip():
        raise ValueError(f"Preset registry entry without a label: {raw!r}")
    if isinstance(files, str):
        files = [files]
    if not files:
        raise ValueError(f"Preset registry entry {label!r} lists no files")
    return PresetSignature(label=label.strip(), files=tuple(str(f) for f in files))
