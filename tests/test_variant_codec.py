"""Tests for compound variant decoding, encoding and matching.

Entry names follow the layout of the Midnight Mina "extra clothing
presets" archive; no archive is needed.
"""

import itertools

import pytest

from skin_locker.models.variant import (
    CompoundSelection,
    FutaOption,
    GarmentOption,
    SLOT_TYPES,
    SelectionError,
    TopOption,
)
from skin_locker.variants.codec import (
    DuplicatePolicy,
    available_values,
    decode_variant,
    decode_variants,
    encode_variant,
    find_variant,
    variant_label,
)
from skin_locker.variants.grammar import (
    MIDNIGHT_MINA_GRAMMAR,
    FlagRule,
    VariantGrammar,
    phrase,
    tokenize,
)

G = GarmentOption


# ---------------------------------------------------------------------------
# decode_variant
# ---------------------------------------------------------------------------


def test_decode_listing_example():
    entries = [
        "sts_midnight_mina_top_sleeveless_skirt_no.vpk",
        "sts_midnight_mina_top_sleeveless.vpk",
        "preview.png",
    ]
    variants = [decode_variant(e) for e in entries]

    assert variants[2] is None
    first, second = variants[0], variants[1]
    assert first.selection == CompoundSelection(top=TopOption.SLEEVELESS, skirt=G.NONE)
    assert second.selection == CompoundSelection(top=TopOption.SLEEVELESS)
    assert second.selection.skirt is G.DEFAULT

    found = find_variant([first, second], CompoundSelection(top=TopOption.SLEEVELESS))
    assert found is second


def test_unmentioned_slots_take_canonical_defaults():
    variant = decode_variant("sts_midnight_mina_pak20_dir.vpk")
    assert variant.selection == CompoundSelection()
    assert variant.selection.futa is FutaOption.NO


def test_full_name_with_every_token():
    entry = (
        "extra clothing presets/futa/"
        "sts_midnight_mina_futa_top_with_sleeves_skirt_yes_stockings_and_boots"
        "_belt_sash_no_hands_bare_garter_yes_dress_no-pak20_dir.vpk"
    )
    variant = decode_variant(entry)
    assert variant.archive_entry == entry
    assert variant.selection == CompoundSelection(
        futa=FutaOption.YES,
        top=TopOption.DEFAULT,
        skirt=G.DEFAULT,
        stockings=G.DEFAULT,
        belt_sash=G.NONE,
        gloves=G.NONE,
        garter=G.DEFAULT,
        dress=G.NONE,
    )


def test_non_futa_wins_over_futa_token():
    variant = decode_variant("non-futa/sts_midnight_mina_top_no.vpk")
    assert variant.selection.futa is FutaOption.NO
    assert variant.selection.top is TopOption.NONE


def test_futa_folder_prefix_sets_futa():
    variant = decode_variant("Futa/STS_Midnight_Mina_Skirt_No.VPK")
    assert variant.selection.futa is FutaOption.YES
    assert variant.selection.skirt is G.NONE


def test_token_order_does_not_matter():
    a = decode_variant("sts_midnight_mina_skirt_no_top_sleeveless_gloves_no.vpk")
    b = decode_variant("sts_midnight_mina_gloves_no_top_sleeveless_skirt_no.vpk")
    assert a.selection == b.selection
    assert a.label == b.label
    assert a.archive_entry != b.archive_entry


def test_hyphen_and_case_tolerated():
    variant = decode_variant("STS-Midnight-Mina-Top-Sleeveless-Belt-Sash-No.vpk")
    assert variant.selection.top is TopOption.SLEEVELESS
    assert variant.selection.belt_sash is G.NONE


def test_bare_gloves_token_means_gloves_on():
    variant = decode_variant("sts_midnight_mina_gloves_top_no.vpk")
    assert variant.selection.gloves is G.DEFAULT
    assert variant.selection.top is TopOption.NONE


@pytest.mark.parametrize("entry", [
    "README.txt",
    "preview.png",
    "sts_midnight_mina_top_no.zip",
    "other_outfit_top_no.vpk",
    "sts_midnight_mina/readme.vpk",          # marker only in the folder
    "sts_midnight_mina_top_purple.vpk",      # key without a known value
    "sts_midnight_mina_skirt_yes_skirt_no.vpk",  # conflicting values
    "",
])
def test_non_variants_decode_to_none(entry):
    assert decode_variant(entry) is None


def test_repeated_identical_assignment_is_fine():
    variant = decode_variant("sts_midnight_mina_skirt_no_skirt_none.vpk")
    assert variant.selection.skirt is G.NONE


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------


def test_label_format():
    label = variant_label(CompoundSelection(top=TopOption.SLEEVELESS, gloves=G.NONE))
    assert label == (
        "Non-Futa • Top: Sleeveless • Skirt: Default • Stockings: Default • "
        "Belt: Default • Gloves: None • Garter: Default • Dress: Default"
    )
    assert variant_label(CompoundSelection(futa=FutaOption.YES)).startswith("Futa • ")


# ---------------------------------------------------------------------------
# encode_variant
# ---------------------------------------------------------------------------


def test_encode_names_every_slot():
    name = encode_variant(CompoundSelection())
    assert name.startswith("sts_midnight_mina_")
    assert name.endswith(".vpk")
    assert "non_futa" in name
    assert "top_with_sleeves" in name


@pytest.mark.parametrize("values", list(itertools.product(*SLOT_TYPES.values())))
def test_encoded_name_decodes_to_same_selection(values):
    selection = CompoundSelection(**dict(zip(SLOT_TYPES, values)))
    decoded = decode_variant(encode_variant(selection))
    assert decoded is not None
    assert decoded.selection == selection


def test_custom_grammar_without_extension():
    top_rules = tuple(r for r in MIDNIGHT_MINA_GRAMMAR.keyed if r.slot == "top")
    grammar = VariantGrammar(marker=phrase("outfit"), keyed=top_rules)
    variant = decode_variant("outfit_top_no", grammar)
    assert variant.selection.top is TopOption.NONE
    assert decode_variant("sts_midnight_mina_top_no.vpk", grammar) is None


def test_grammar_rejects_unknown_slot():
    with pytest.raises(ValueError, match="unknown slot"):
        VariantGrammar(marker=("x",), flags=(FlagRule("hat", ("hat",), G.NONE),))


def test_tokenize_splits_paths_and_delimiters():
    assert tokenize("A/b\\C_d-e.f g") == ["a", "b", "c", "d", "e", "f", "g"]


# ---------------------------------------------------------------------------
# decode_variants
# ---------------------------------------------------------------------------


def _listing() -> list[str]:
    return [
        "sts_midnight_mina_top_no_skirt_no.vpk",
        "preview.png",
        "sts_midnight_mina_skirt_no_top_no-pak21_dir.vpk",  # same combination
        "sts_midnight_mina_top_sleeveless.vpk",
    ]


def test_decode_variants_keeps_duplicates_by_default():
    variants = decode_variants(_listing())
    assert [v.archive_entry for v in variants] == [
        "sts_midnight_mina_top_no_skirt_no.vpk",
        "sts_midnight_mina_skirt_no_top_no-pak21_dir.vpk",
        "sts_midnight_mina_top_sleeveless.vpk",
    ]
    assert all(v.alternate_entries == () for v in variants)


def test_decode_variants_merge_policy():
    variants = decode_variants(_listing(), duplicates=DuplicatePolicy.MERGE)
    assert len(variants) == 2
    assert variants[0].archive_entry == "sts_midnight_mina_top_no_skirt_no.vpk"
    assert variants[0].alternate_entries == ("sts_midnight_mina_skirt_no_top_no-pak21_dir.vpk",)


# ---------------------------------------------------------------------------
# find_variant
# ---------------------------------------------------------------------------


def test_find_variant_empty_and_no_match():
    assert find_variant([], CompoundSelection()) is None
    variants = decode_variants(_listing())
    assert find_variant(variants, CompoundSelection(dress=G.NONE)) is None


def test_find_variant_first_duplicate_wins():
    variants = decode_variants(_listing())
    found = find_variant(variants, CompoundSelection(top=TopOption.NONE, skirt=G.NONE))
    assert found.archive_entry == "sts_midnight_mina_top_no_skirt_no.vpk"


def test_find_variant_requires_every_slot_to_match():
    variants = decode_variants(["sts_midnight_mina_top_sleeveless_gloves_no.vpk"])
    assert find_variant(variants, CompoundSelection(top=TopOption.SLEEVELESS)) is None
    assert find_variant(
        variants, CompoundSelection(top=TopOption.SLEEVELESS, gloves=G.NONE)
    ) is variants[0]


def test_find_variant_accepts_complete_mapping():
    variants = decode_variants(_listing())
    selection = {
        "futa": "No", "top": "Sleeveless", "skirt": "Default", "stockings": "Default",
        "beltSash": "Default", "gloves": "Default", "garter": "Default", "dress": "Default",
    }
    assert find_variant(variants, selection).archive_entry == "sts_midnight_mina_top_sleeveless.vpk"


def test_find_variant_rejects_incomplete_selection():
    with pytest.raises(SelectionError, match="missing slots"):
        find_variant([], {"top": "None"})
    with pytest.raises(SelectionError):
        find_variant([], ["top", "None"])


def test_available_values_holds_other_slots_fixed():
    variants = decode_variants(_listing())
    base = CompoundSelection(skirt=G.NONE)
    assert available_values(variants, "top", base) == [TopOption.NONE]
    assert available_values(variants, "top", CompoundSelection()) == [TopOption.SLEEVELESS]
    assert available_values(variants, "dress", CompoundSelection(top=TopOption.SLEEVELESS)) == [G.DEFAULT]
