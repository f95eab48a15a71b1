"""Compound-variant decoding, matching and preset interfaces."""

from skin_locker.variants.codec import (
    DuplicatePolicy,
    available_values,
    decode_variant,
    decode_variants,
    encode_variant,
    find_variant,
    variant_label,
)
from skin_locker.variants.grammar import MIDNIGHT_MINA_GRAMMAR, VariantGrammar
from skin_locker.variants.presets import (
    PresetNotFoundError,
    active_preset,
    build_presets,
    detect_texture_mods,
    is_skin_mod,
    plan_preset_activation,
)

__all__ = [
    "DuplicatePolicy",
    "MIDNIGHT_MINA_GRAMMAR",
    "PresetNotFoundError",
    "VariantGrammar",
    "active_preset",
    "available_values",
    "build_presets",
    "decode_variant",
    "decode_variants",
    "detect_texture_mods",
    "encode_variant",
    "find_variant",
    "is_skin_mod",
    "plan_preset_activation",
    "variant_label",
]
