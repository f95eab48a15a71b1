"""Preset data models."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PresetSignature:
    """Static registry entry: the files a known preset installs."""
    label: str
    files: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Preset:
    """A named pre-packaged combination, derived from the installed mods.

    `file_name` is the file that identifies the preset (the first file of
    its signature). `enabled` is all-or-nothing over `files`.
    """
    file_name: str
    label: str
    enabled: bool
    files: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class VariantApplyRequest:
    """Arguments for the external collaborator that materializes a variant."""
    archive_path: str
    archive_entry: str
    preset_label: str
    hero_category_id: int | None = None
