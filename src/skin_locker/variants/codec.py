"""Decode/encode compound variants and match user selections.

decode_variant() turns one archive entry name into a CompoundVariant, or
None when the entry is not a variant (READMEs, previews, other outfits).
find_variant() is exact-match only: every slot must be equal, with the
default counting as a value like any other.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace
from enum import Enum
from typing import Any

from skin_locker.models.variant import (
    SLOT_NAMES,
    CompoundSelection,
    CompoundVariant,
    FutaOption,
    SelectionError,
    SlotValue,
    slot_choices,
)
from skin_locker.variants.grammar import (
    MIDNIGHT_MINA_GRAMMAR,
    FlagRule,
    VariantGrammar,
    tokenize,
)

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


class DuplicatePolicy(str, Enum):
    """What to do with several entries decoding to the same combination."""
    KEEP = "keep"      # keep every physical file, first one wins matching
    MERGE = "merge"    # one variant per combination, extras in alternate_entries


_SLOT_TITLES: dict[str, str] = {
    "top": "Top",
    "skirt": "Skirt",
    "stockings": "Stockings",
    "belt_sash": "Belt",
    "gloves": "Gloves",
    "garter": "Garter",
    "dress": "Dress",
}

LABEL_SEPARATOR = " • "


def variant_label(selection: CompoundSelection) -> str:
    """'Non-Futa • Top: Default • Skirt: None • ...' in slot order."""
    parts = ["Futa" if selection.futa is FutaOption.YES else "Non-Futa"]
    for slot in SLOT_NAMES:
        if slot == "futa":
            continue
        parts.append(f"{_SLOT_TITLES[slot]}: {getattr(selection, slot).value}")
    return LABEL_SEPARATOR.join(parts)


def _match_at(tokens: list[str], i: int, wanted: tuple[str, ...]) -> bool:
    return tuple(tokens[i:i + len(wanted)]) == wanted


def _assign_slots(tokens: list[str], grammar: VariantGrammar) -> dict[str, SlotValue] | None:
    assigned: dict[str, SlotValue] = {}

    def assign(slot: str, value: SlotValue) -> bool:
        previous = assigned.setdefault(slot, value)
        return previous is value

    i = 0
    while i < len(tokens):
        for rule in grammar.candidates:
            if isinstance(rule, FlagRule):
                if _match_at(tokens, i, rule.phrase):
                    if not assign(rule.slot, rule.value):
                        return None
                    i += len(rule.phrase)
                    break
                continue

            if not _match_at(tokens, i, rule.key):
                continue
            j = i + len(rule.key)
            for value_phrase in sorted(rule.values, key=len, reverse=True):
                if _match_at(tokens, j, value_phrase):
                    if not assign(rule.slot, rule.values[value_phrase]):
                        return None
                    i = j + len(value_phrase)
                    break
            else:
                if rule.bare is None:
                    return None
                if not assign(rule.slot, rule.bare):
                    return None
                i = j
            break
        else:
            i += 1
    return assigned


def decode_variant(
    raw_entry: str,
    grammar: VariantGrammar = MIDNIGHT_MINA_GRAMMAR,
) -> CompoundVariant | None:
    """Parse one archive entry name; None if it is not a variant.

    Directory components of the entry count as tokens too (the archive
    sorts some variants into futa/ and non-futa/ folders).
    """
    entry = raw_entry.strip()
    if not entry or not grammar.accepts_extension(entry.lower()):
        return None
    if not grammar.has_marker(entry):
        return None

    assigned = _assign_slots(tokenize(grammar.strip_extension(entry)), grammar)
    if assigned is None:
        logger.debug("Malformed variant entry name: %s", raw_entry)
        return None

    selection = CompoundSelection(**assigned)
    return CompoundVariant(
        archive_entry=raw_entry,
        label=variant_label(selection),
        selection=selection,
    )


def decode_variants(
    entries: Iterable[str],
    grammar: VariantGrammar = MIDNIGHT_MINA_GRAMMAR,
    duplicates: DuplicatePolicy = DuplicatePolicy.KEEP,
) -> list[CompoundVariant]:
    """Decode an archive listing, skipping non-variant entries."""
    variants: list[CompoundVariant] = []
    by_selection: dict[CompoundSelection, int] = {}

    for entry in entries:
        variant = decode_variant(entry, grammar)
        if variant is None:
            continue
        if duplicates is DuplicatePolicy.MERGE:
            index = by_selection.get(variant.selection)
            if index is not None:
                first = variants[index]
                variants[index] = replace(
                    first,
                    alternate_entries=first.alternate_entries + (entry,),
                )
                continue
            by_selection[variant.selection] = len(variants)
        variants.append(variant)
    return variants


def _encode_slot(slot: str, value: SlotValue, grammar: VariantGrammar) -> tuple[str, ...]:
    for rule in grammar.flags:
        if rule.slot == slot and rule.value is value:
            return rule.phrase
    for rule in grammar.keyed:
        if rule.slot != slot:
            continue
        for value_phrase, candidate in rule.values.items():
            if candidate is value:
                return rule.key + value_phrase
    raise ValueError(f"Grammar cannot encode {slot}={value.value}")


def encode_variant(
    selection: CompoundSelection,
    grammar: VariantGrammar = MIDNIGHT_MINA_GRAMMAR,
) -> str:
    """Canonical entry name naming every slot explicitly."""
    tokens = list(grammar.marker)
    for slot in SLOT_NAMES:
        tokens.extend(_encode_slot(slot, getattr(selection, slot), grammar))
    extension = grammar.extensions[0] if grammar.extensions else ""
    return grammar.delimiter.join(tokens) + extension


def _as_selection(selection: CompoundSelection | Mapping[str, Any]) -> CompoundSelection:
    if isinstance(selection, CompoundSelection):
        return selection
    if isinstance(selection, Mapping):
        return CompoundSelection.from_mapping(selection, partial=False)
    raise SelectionError(f"Expected a CompoundSelection, got {type(selection).__name__}")


def find_variant(
    variants: Sequence[CompoundVariant],
    selection: CompoundSelection | Mapping[str, Any],
) -> CompoundVariant | None:
    """First variant whose every slot equals the selection, else None."""
    wanted = _as_selection(selection)
    for variant in variants:
        if variant.matches(wanted):
            return variant
    return None


def available_values(
    variants: Sequence[CompoundVariant],
    slot: str,
    selection: CompoundSelection | Mapping[str, Any],
) -> list[SlotValue]:
    """Values of ``slot`` that are packaged with the other slots held fixed."""
    base = _as_selection(selection)
    packaged = {variant.selection for variant in variants}
    return [
        value for value in slot_choices(slot)
        if base.with_slot(slot, value) in packaged
    ]
