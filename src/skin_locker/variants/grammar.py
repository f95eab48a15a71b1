"""Entry-name grammar for compound-cosmetic archives.

Archive entries carry no metadata; the file name is the only record of
which attribute combination a file holds. A name is read as a bag of
tokens (lowercased, split on path separators, '_', '-', '.', whitespace),
and a slot-assignment table maps token phrases onto slots:

  keyed rule   <key> <value>     "skirt yes", "top with sleeves"
  flag rule    <phrase>          "non futa", "hands bare"

Matching is greedy and longest-first at each position, so "non futa" is
read before "futa" and "stockings and boots" before "stockings". Token
order does not matter. Unrecognized tokens ("sts", "pak20", "v1") are
ignored; a key with no recognizable value makes the whole name invalid.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from skin_locker.models.variant import (
    FutaOption,
    GarmentOption,
    SLOT_NAMES,
    SlotValue,
    TopOption,
)

Phrase = tuple[str, ...]

_TOKEN_SPLIT = re.compile(r"[\\/_\-.\s]+")
_PATH_SPLIT = re.compile(r"[\\/]")


def tokenize(text: str) -> list[str]:
    return [tok for tok in _TOKEN_SPLIT.split(text.lower()) if tok]


def phrase(text: str) -> Phrase:
    return tuple(tokenize(text))


@dataclass(frozen=True, slots=True)
class KeyedRule:
    """``key`` followed by one of ``values``; ``bare`` applies when no value follows."""
    slot: str
    key: Phrase
    values: dict[Phrase, SlotValue]
    bare: SlotValue | None = None


@dataclass(frozen=True, slots=True)
class FlagRule:
    """A standalone phrase that assigns ``value`` to ``slot``."""
    slot: str
    phrase: Phrase
    value: SlotValue


@dataclass(frozen=True, slots=True)
class VariantGrammar:
    marker: Phrase
    extensions: tuple[str, ...] = ()
    keyed: tuple[KeyedRule, ...] = ()
    flags: tuple[FlagRule, ...] = ()
    delimiter: str = "_"
    _candidates: tuple[KeyedRule | FlagRule, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        known = set(SLOT_NAMES)
        for rule in (*self.keyed, *self.flags):
            if rule.slot not in known:
                raise ValueError(f"Grammar rule for unknown slot {rule.slot!r}")
        candidates = sorted(
            (*self.keyed, *self.flags),
            key=lambda r: len(r.key if isinstance(r, KeyedRule) else r.phrase),
            reverse=True,
        )
        object.__setattr__(self, "_candidates", tuple(candidates))

    @property
    def candidates(self) -> tuple[KeyedRule | FlagRule, ...]:
        """Rules ordered longest phrase first."""
        return self._candidates

    def accepts_extension(self, lower_entry: str) -> bool:
        if not self.extensions:
            return True
        return lower_entry.endswith(self.extensions)

    def strip_extension(self, entry: str) -> str:
        lower = entry.lower()
        for ext in self.extensions:
            if lower.endswith(ext):
                return entry[: -len(ext)]
        return entry

    def has_marker(self, entry: str) -> bool:
        """Marker phrase present in the file-name part of ``entry``."""
        file_name = _PATH_SPLIT.split(self.strip_extension(entry))[-1]
        return _find_phrase(tokenize(file_name), self.marker) >= 0


def _find_phrase(tokens: list[str], wanted: Phrase) -> int:
    if not wanted:
        return 0
    n = len(wanted)
    for i in range(len(tokens) - n + 1):
        if tuple(tokens[i:i + n]) == wanted:
            return i
    return -1


def _yes_no(default: SlotValue, absent: SlotValue) -> dict[Phrase, SlotValue]:
    return {
        ("yes",): default,
        ("no",): absent,
        ("default",): default,
        ("none",): absent,
    }


def _garment(slot: str, key: str, bare: SlotValue | None = None) -> KeyedRule:
    return KeyedRule(
        slot, phrase(key), _yes_no(GarmentOption.DEFAULT, GarmentOption.NONE), bare
    )


# Layout of the "extra clothing presets" archive shipped with the Midnight
# Mina outfit: sts_midnight_mina_..._top_sleeveless_skirt_yes_..._dir.vpk,
# optionally under a futa/ or non-futa/ folder.
MIDNIGHT_MINA_GRAMMAR = VariantGrammar(
    marker=phrase("sts_midnight_mina"),
    extensions=(".vpk",),
    keyed=(
        KeyedRule(
            "futa",
            phrase("futa"),
            {("yes",): FutaOption.YES, ("no",): FutaOption.NO},
            bare=FutaOption.YES,
        ),
        KeyedRule(
            "top",
            phrase("top"),
            {
                phrase("with_sleeves"): TopOption.DEFAULT,
                ("sleeveless",): TopOption.SLEEVELESS,
                ("no",): TopOption.NONE,
                ("yes",): TopOption.DEFAULT,
                ("default",): TopOption.DEFAULT,
                ("none",): TopOption.NONE,
            },
        ),
        _garment("skirt", "skirt"),
        _garment("stockings", "stockings"),
        _garment("belt_sash", "belt_sash"),
        _garment("gloves", "gloves", bare=GarmentOption.DEFAULT),
        _garment("garter", "garter"),
        _garment("dress", "dress"),
    ),
    flags=(
        FlagRule("futa", phrase("non-futa"), FutaOption.NO),
        FlagRule("stockings", phrase("stockings_and_boots"), GarmentOption.DEFAULT),
        FlagRule("gloves", phrase("hands_bare"), GarmentOption.NONE),
    ),
)
