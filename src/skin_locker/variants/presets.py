"""Preset index: named outfit combinations already installed as mod files.

Two sources of presets:
  - a static registry of PresetSignatures (label + expected files); such a
    preset is enabled only when every one of its files is an enabled mod
  - presets discovered from file naming: CLOTHING_PRESET_*.vpk, files
    containing "sts_midnight_mina_", or mods whose display name carries
    the "Midnight Mina — " prefix written when a variant is applied

Texture packs are never presets; they are tracked separately because a
preset only renders correctly with its texture pack enabled.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from skin_locker.models.mod import Mod, ToggleOp
from skin_locker.models.preset import Preset, PresetSignature

PRESET_NAME_PREFIX = "Midnight Mina — "
PRESET_FILE_PREFIX = "clothing_preset_"
VARIANT_FILE_MARKER = "sts_midnight_mina_"
DEFAULT_TEXTURE_FILE = "textures-pak21_dir.vpk"
SKIN_SOURCE_SECTION = "Mod"

_PRESET_PREFIX_RE = re.compile(r"^CLOTHING_PRESET_", re.IGNORECASE)
_PAK_SUFFIX_RE = re.compile(r"-pak\d+_dir\.vpk$", re.IGNORECASE)


class PresetNotFoundError(KeyError):
    """Requested preset file is not installed."""


def preset_display_name(label: str) -> str:
    """Mod display name for an applied variant with this label."""
    return f"{PRESET_NAME_PREFIX}{label}"


def is_preset_mod(mod: Mod) -> bool:
    lower = mod.file_name.lower()
    if not lower.endswith(".vpk") or "textures" in lower:
        return False
    return (
        lower.startswith(PRESET_FILE_PREFIX)
        or VARIANT_FILE_MARKER in lower
        or (mod.name or "").startswith(PRESET_NAME_PREFIX.rstrip())
    )


def is_texture_mod(mod: Mod) -> bool:
    lower = mod.file_name.lower()
    if not lower.endswith(".vpk") or "textures" not in lower:
        return False
    return "mina" in lower or "midnight" in lower or lower == DEFAULT_TEXTURE_FILE


def detect_texture_mods(mods: Iterable[Mod]) -> list[Mod]:
    return [mod for mod in mods if is_texture_mod(mod)]


def is_skin_mod(mod: Mod) -> bool:
    """True for mods that belong in a hero's single-active skin bucket.

    CLOTHING_PRESET_* files and texture packs are driven through presets,
    and other store sections (sounds, HUD and so on) are not skins. A mod
    with no recorded section is kept.
    """
    if mod.source_section is not None and mod.source_section != SKIN_SOURCE_SECTION:
        return False
    if mod.file_name.lower().startswith(PRESET_FILE_PREFIX):
        return False
    return not is_texture_mod(mod)


def _preset_label(mod: Mod) -> str:
    name = (mod.name or "").strip()
    if name.startswith(PRESET_NAME_PREFIX):
        name = name[len(PRESET_NAME_PREFIX):]
    if name:
        return name.strip()
    raw = _PRESET_PREFIX_RE.sub("", mod.file_name)
    raw = _PAK_SUFFIX_RE.sub("", raw)
    return raw.replace("_", " ").strip()


def _in_category(mod: Mod, category_id: int | None) -> bool:
    return category_id is None or not mod.category_id or mod.category_id == category_id


def build_presets(
    mods: Sequence[Mod],
    registry: Iterable[PresetSignature] = (),
    category_id: int | None = None,
) -> list[Preset]:
    """All presets for the current mod list, sorted by label.

    With ``category_id`` only that hero's mods (and uncategorized ones)
    count towards a registry signature.
    """
    presets: list[Preset] = []
    claimed: set[str] = set()

    relevant = [mod for mod in mods if _in_category(mod, category_id)]
    enabled_files = {mod.file_name for mod in relevant if mod.enabled}
    installed_files = {mod.file_name for mod in relevant}
    for signature in registry:
        if not signature.files:
            continue
        if not any(name in installed_files for name in signature.files):
            continue
        presets.append(Preset(
            file_name=signature.files[0],
            label=signature.label,
            enabled=all(name in enabled_files for name in signature.files),
            files=tuple(signature.files),
        ))
        claimed.update(signature.files)

    for mod in relevant:
        if mod.file_name in claimed or not is_preset_mod(mod):
            continue
        presets.append(Preset(
            file_name=mod.file_name,
            label=_preset_label(mod),
            enabled=mod.enabled,
            files=(mod.file_name,),
        ))

    presets.sort(key=lambda p: (p.label.casefold(), p.file_name))
    return presets


def active_preset(presets: Iterable[Preset]) -> Preset | None:
    for preset in presets:
        if preset.enabled:
            return preset
    return None


def plan_preset_activation(
    mods: Sequence[Mod],
    preset_file_name: str,
    registry: Iterable[PresetSignature] = (),
) -> list[ToggleOp]:
    """Ops that make ``preset_file_name`` the only enabled preset.

    Every other enabled preset file is disabled and every disabled texture
    pack is enabled. Ops follow mod-list order.
    """
    presets = build_presets(mods, registry)
    target = next((p for p in presets if p.file_name == preset_file_name), None)
    if target is None:
        raise PresetNotFoundError(f"Preset {preset_file_name} not found")

    wanted = set(target.files)
    preset_files = {name for preset in presets for name in preset.files}
    ops: list[ToggleOp] = []
    for mod in mods:
        if mod.file_name in wanted:
            if not mod.enabled:
                ops.append(ToggleOp(mod.id, True))
        elif mod.file_name in preset_files:
            if mod.enabled:
                ops.append(ToggleOp(mod.id, False))
        elif is_texture_mod(mod) and not mod.enabled:
            ops.append(ToggleOp(mod.id, True))
    return ops
