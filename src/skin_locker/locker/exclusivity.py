"""Single-active-skin-per-hero controller.

set_active() only computes the toggle ops; dispatch_toggles() issues them
concurrently against the external toggle mechanism and gathers every
outcome. Ops within one batch are independent (one mod file each), so a
failed op never rolls back or blocks the others.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import replace

from skin_locker.models.mod import Mod, ToggleBatchResult, ToggleFailure, ToggleOp

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

# External mechanism: move mod_id into the desired state.
ToggleFn = Callable[[str, bool], Awaitable[None]]


def set_active(bucket: Sequence[Mod], target_id: str | None) -> list[ToggleOp]:
    """Ops that leave exactly ``target_id`` enabled in ``bucket``.

    ``target_id=None`` disables every enabled mod. Returns [] when the
    bucket is already in the requested state. Ops follow bucket order.
    """
    if target_id is not None and not any(mod.id == target_id for mod in bucket):
        raise ValueError(f"Mod {target_id!r} is not in this category")

    ops: list[ToggleOp] = []
    for mod in bucket:
        if mod.id == target_id:
            if not mod.enabled:
                ops.append(ToggleOp(mod.id, True))
        elif mod.enabled:
            ops.append(ToggleOp(mod.id, False))
    return ops


def apply_toggle_ops(
    bucket: Sequence[Mod],
    ops: Iterable[ToggleOp],
    failed_ids: Iterable[str] = (),
) -> list[Mod]:
    """The bucket as it looks once every non-failed op has landed."""
    failed = set(failed_ids)
    desired = {op.mod_id: op.desired_enabled for op in ops if op.mod_id not in failed}
    return [
        replace(mod, enabled=desired[mod.id]) if mod.id in desired else mod
        for mod in bucket
    ]


async def dispatch_toggles(ops: Sequence[ToggleOp], toggle: ToggleFn) -> ToggleBatchResult:
    """Issue every op concurrently and report per-op outcomes.

    Exceptions raised by ``toggle`` are collected, never re-raised.
    Cancellation and other BaseExceptions propagate.
    """
    result = ToggleBatchResult()
    if not ops:
        return result

    async def run(op: ToggleOp) -> None:
        await toggle(op.mod_id, op.desired_enabled)

    outcomes = await asyncio.gather(*(run(op) for op in ops), return_exceptions=True)
    for op, outcome in zip(ops, outcomes):
        if isinstance(outcome, Exception):
            logger.warning(
                "Failed to %s mod %s: %s",
                "enable" if op.desired_enabled else "disable", op.mod_id, outcome,
            )
            result.failures.append(ToggleFailure(op.mod_id, op.desired_enabled, outcome))
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            result.applied.append(op)
    return result


async def activate(
    bucket: Sequence[Mod],
    target_id: str | None,
    toggle: ToggleFn,
) -> ToggleBatchResult:
    """set_active() + dispatch_toggles() for one user action."""
    ops = set_active(bucket, target_id)
    logger.debug("Activating %s: %d toggle op(s)", target_id, len(ops))
    return await dispatch_toggles(ops, toggle)


def flip_toggle(toggle_mod: Callable[[str], Awaitable[None]]) -> ToggleFn:
    """Adapt a flip-only ``toggle_mod(mod_id)`` mechanism to ToggleFn.

    Only valid for ops from set_active()/plan_preset_activation(), which
    never request the state a mod is already in.
    """
    async def toggle(mod_id: str, desired_enabled: bool) -> None:
        await toggle_mod(mod_id)
    return toggle
