"""Compound cosmetic variant data model.

A compound-cosmetic archive packages one file per combination of outfit
attributes. Each attribute is a slot holding one value of a small closed
enum, and every slot has a canonical default used when a name or a
selection does not mention it.

Slot declaration order (also the label order):
  futa, top, skirt, stockings, belt_sash, gloves, garter, dress
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any


class SelectionError(ValueError):
    """A selection that violates the slot contract (unknown slot/value, missing slot)."""


class FutaOption(str, Enum):
    NO = "No"
    YES = "Yes"


class TopOption(str, Enum):
    DEFAULT = "Default"       # top with sleeves
    SLEEVELESS = "Sleeveless"
    NONE = "None"


class GarmentOption(str, Enum):
    DEFAULT = "Default"       # garment present as in the base outfit
    NONE = "None"


SlotValue = FutaOption | TopOption | GarmentOption


@dataclass(frozen=True, slots=True)
class CompoundSelection:
    """One chosen value per slot; unset slots hold the canonical default."""
    futa: FutaOption = FutaOption.NO
    top: TopOption = TopOption.DEFAULT
    skirt: GarmentOption = GarmentOption.DEFAULT
    stockings: GarmentOption = GarmentOption.DEFAULT
    belt_sash: GarmentOption = GarmentOption.DEFAULT
    gloves: GarmentOption = GarmentOption.DEFAULT
    garter: GarmentOption = GarmentOption.DEFAULT
    dress: GarmentOption = GarmentOption.DEFAULT

    def values(self) -> dict[str, SlotValue]:
        """Slot name -> value, in declaration order."""
        return {name: getattr(self, name) for name in SLOT_NAMES}

    def with_slot(self, slot: str, value: SlotValue | str) -> "CompoundSelection":
        return replace(self, **{_slot_name(slot): coerce_slot_value(slot, value)})

    @classmethod
    def from_mapping(
        cls,
        values: Mapping[str, Any],
        *,
        partial: bool = True,
    ) -> "CompoundSelection":
        """Build a selection from a plain mapping (UI state, JSON).

        Keys may use snake_case or the camelCase UI names (``beltSash``).
        With ``partial=False`` every slot must be present.
        """
        parsed: dict[str, SlotValue] = {}
        for key, raw in values.items():
            slot = _slot_name(key)
            if slot in parsed:
                raise SelectionError(f"Slot {slot!r} given more than once")
            parsed[slot] = coerce_slot_value(slot, raw)
        if not partial:
            missing = [name for name in SLOT_NAMES if name not in parsed]
            if missing:
                raise SelectionError(
                    "Selection is missing slots: " + ", ".join(missing)
                )
        return cls(**parsed)


@dataclass(frozen=True, slots=True)
class CompoundVariant:
    """A decoded archive entry: one packaged attribute combination."""
    archive_entry: str
    label: str
    selection: CompoundSelection
    # Later entries with the same combination (only under DuplicatePolicy.MERGE).
    alternate_entries: tuple[str, ...] = ()

    def matches(self, selection: CompoundSelection) -> bool:
        return self.selection == selection


SLOT_NAMES: tuple[str, ...] = tuple(f.name for f in fields(CompoundSelection))

SLOT_TYPES: dict[str, type[Enum]] = {
    "futa": FutaOption,
    "top": TopOption,
    "skirt": GarmentOption,
    "stockings": GarmentOption,
    "belt_sash": GarmentOption,
    "gloves": GarmentOption,
    "garter": GarmentOption,
    "dress": GarmentOption,
}

# camelCase names used by the locker UI state.
_SLOT_ALIASES: dict[str, str] = {"beltSash": "belt_sash", "beltsash": "belt_sash"}


def _slot_name(key: str) -> str:
    name = _SLOT_ALIASES.get(key, key)
    if name not in SLOT_TYPES:
        raise SelectionError(f"Unknown slot {key!r}")
    return name


def coerce_slot_value(slot: str, value: Any) -> SlotValue:
    """Return the enum member for ``value`` in ``slot`` (case-insensitive)."""
    enum_type = SLOT_TYPES[_slot_name(slot)]
    if isinstance(value, enum_type):
        return value
    if isinstance(value, str):
        wanted = value.strip().lower()
        for member in enum_type:
            if member.value.lower() == wanted:
                return member
    raise SelectionError(f"Invalid value {value!r} for slot {slot!r}")


def slot_choices(slot: str) -> list[SlotValue]:
    """All values a slot may hold, default first."""
    return list(SLOT_TYPES[_slot_name(slot)])
