"""Dump the skin locker state from JSON snapshots.

Reads the vendor category tree and the mod store's mod list (both as the
JSON the collaborators return), then prints heroes, per-hero skin buckets,
presets and, optionally, the decoded variants of an archive listing.

Usage:
    python -m scripts.dump_locker --categories tree.json --mods mods.json
    python -m scripts.dump_locker --categories tree.json --mods mods.json \
        --entries listing.txt --hero Mina --json
"""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any

from skin_locker.engine.locker_config import LockerConfig
from skin_locker.engine.locker_model import LockerModel
from skin_locker.models.category import parse_category_tree
from skin_locker.models.mod import Mod
from skin_locker.taxonomy.hero_list import hero_by_name
from skin_locker.variants.codec import decode_variants


def _load_json(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as fh:
        return json.load(fh)


def _mods_from_json(payload: Any) -> list[Mod]:
    if isinstance(payload, dict):
        payload = payload.get("mods", [])
    if not isinstance(payload, list):
        raise ValueError("Mod snapshot must be a list of mod records")
    return [Mod.from_payload(raw) for raw in payload]


def _read_entries(path: Path) -> list[str]:
    lines = path.read_text(encoding="utf-8").splitlines()
    return [line.strip() for line in lines if line.strip()]


def _locker_payload(
    model: LockerModel,
    hero_name: str | None,
    entries: list[str] | None,
) -> dict[str, Any]:
    heroes = model.heroes
    if hero_name:
        hero = hero_by_name(heroes, hero_name)
        heroes = [hero] if hero is not None else []

    payload: dict[str, Any] = {
        "heroes": [
            {
                "id": hero.id,
                "name": hero.name,
                "compound": model.is_compound(hero),
                "skins": [
                    {"id": mod.id, "name": mod.name, "enabled": mod.enabled}
                    for mod in model.skins(hero.id)
                ],
            }
            for hero in heroes
        ],
        "uncategorized": [mod.id for mod in model.groups.uncategorized],
        "presets": [asdict(preset) for preset in model.presets],
    }
    if entries is not None:
        variants = decode_variants(entries, duplicates=model.config.duplicate_policy)
        payload["variants"] = [
            {
                "archive_entry": v.archive_entry,
                "label": v.label,
                "alternate_entries": list(v.alternate_entries),
            }
            for v in variants
        ]
    return payload


def _print_text(payload: dict[str, Any]) -> None:
    print(f"\n{'='*60}")
    print("  Heroes")
    print(f"{'='*60}")
    for hero in payload["heroes"]:
        marker = " [compound]" if hero["compound"] else ""
        print(f"  {hero['name']} ({hero['id']}){marker}")
        for skin in hero["skins"]:
            state = "*" if skin["enabled"] else " "
            print(f"    [{state}] {skin['name']}")

    if payload["uncategorized"]:
        print(f"\n  Uncategorized mods: {len(payload['uncategorized'])}")

    print(f"\n{'='*60}")
    print("  Presets")
    print(f"{'='*60}")
    for preset in payload["presets"]:
        state = "*" if preset["enabled"] else " "
        print(f"  [{state}] {preset['label']}  ({preset['file_name']})")

    if "variants" in payload:
        print(f"\n{'='*60}")
        print(f"  Variants ({len(payload['variants'])})")
        print(f"{'='*60}")
        for variant in payload["variants"]:
            print(f"  {variant['label']}")
            print(f"      {variant['archive_entry']}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Dump skin locker state")
    parser.add_argument("--categories", type=Path, required=True,
                        help="Vendor category tree JSON.")
    parser.add_argument("--mods", type=Path, required=True,
                        help="Installed mod list JSON.")
    parser.add_argument("--entries", type=Path,
                        help="Archive listing, one entry name per line.")
    parser.add_argument("--settings", type=Path,
                        help="Locker settings JSON (heroRootName, compoundHeroes, ...).")
    parser.add_argument("--hero", help="Only show this hero.")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log warnings and debug info.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        categories = parse_category_tree(_load_json(args.categories))
        mods = _mods_from_json(_load_json(args.mods))
        config = (
            LockerConfig.from_mapping(_load_json(args.settings))
            if args.settings else LockerConfig()
        )
        entries = _read_entries(args.entries) if args.entries else None
    except (OSError, ValueError, KeyError) as exc:
        print(f"Error: {exc}")
        return 1

    model = LockerModel.build(categories, mods, config)
    payload = _locker_payload(model, args.hero, entries)
    if args.json:
        print(json.dumps(payload, indent=2))
    else:
        _print_text(payload)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
