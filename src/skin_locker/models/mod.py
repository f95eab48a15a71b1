"""Installed mod records and toggle operations.

Mods are owned by the external mod store; the engine only sees read-only
snapshots and emits ToggleOps for the store to execute.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from skin_locker.models.category import optional_int


@dataclass(frozen=True, slots=True)
class Mod:
    """Read-only view of one installed mod file."""
    id: str
    name: str
    file_name: str
    enabled: bool
    category_id: int | None = None    # hero id; None = uncategorized
    path: str = ""
    priority: int = 0
    size: int = 0
    installed_at: str = ""
    description: str | None = None
    thumbnail_url: str | None = None
    game_banana_id: int | None = None
    source_section: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Mod":
        """Build from the mod store's camelCase record."""
        return cls(
            id=str(payload["id"]),
            name=str(payload.get("name") or payload.get("fileName") or payload["id"]),
            file_name=str(payload.get("fileName") or ""),
            enabled=bool(payload.get("enabled", False)),
            category_id=optional_int(payload.get("categoryId")),
            path=str(payload.get("path") or ""),
            priority=optional_int(payload.get("priority")) or 0,
            size=optional_int(payload.get("size")) or 0,
            installed_at=str(payload.get("installedAt") or ""),
            description=payload.get("description"),
            thumbnail_url=payload.get("thumbnailUrl"),
            game_banana_id=optional_int(payload.get("gameBananaId")),
            source_section=payload.get("sourceSection"),
        )


@dataclass(frozen=True, slots=True)
class ToggleOp:
    """Request to move one mod into the given enabled state."""
    mod_id: str
    desired_enabled: bool


@dataclass(frozen=True, slots=True)
class ToggleFailure:
    """A toggle the external mechanism rejected."""
    mod_id: str
    desired_enabled: bool
    error: Exception


@dataclass(slots=True)
class ToggleBatchResult:
    """Outcome of one concurrently dispatched toggle batch.

    Partial application is possible: `applied` and `failures` together
    account for every op in the batch.
    """
    applied: list[ToggleOp] = field(default_factory=list)
    failures: list[ToggleFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def failed_ids(self) -> list[str]:
        return [f.mod_id for f in self.failures]
