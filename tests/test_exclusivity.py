"""Tests for the single-active-skin controller and toggle batch dispatch."""

import asyncio
import logging

import pytest

from skin_locker.locker.exclusivity import (
    activate,
    apply_toggle_ops,
    dispatch_toggles,
    flip_toggle,
    set_active,
)
from skin_locker.models.mod import Mod, ToggleOp


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _mod(mod_id: str, enabled: bool = False) -> Mod:
    return Mod(id=mod_id, name=mod_id, file_name=f"{mod_id}.vpk", enabled=enabled, category_id=1)


def _bucket(*states: tuple[str, bool]) -> list[Mod]:
    return [_mod(mod_id, enabled) for mod_id, enabled in states]


class _FakeStore:
    """In-memory stand-in for the external toggle mechanism."""

    def __init__(self, fail: set[str] | None = None):
        self.fail = fail or set()
        self.calls: list[tuple[str, bool]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def toggle(self, mod_id: str, desired_enabled: bool) -> None:
        self.calls.append((mod_id, desired_enabled))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0)
        self.in_flight -= 1
        if mod_id in self.fail:
            raise OSError(f"cannot move {mod_id}")


# ---------------------------------------------------------------------------
# set_active
# ---------------------------------------------------------------------------


def test_switch_active_skin():
    bucket = _bucket(("a", True), ("b", False))
    assert set_active(bucket, "b") == [
        ToggleOp(mod_id="a", desired_enabled=False),
        ToggleOp(mod_id="b", desired_enabled=True),
    ]


def test_deactivate_all():
    assert set_active(_bucket(("a", True)), None) == [ToggleOp("a", False)]
    assert set_active(_bucket(("a", False)), None) == []


def test_already_sole_active_is_noop():
    assert set_active(_bucket(("a", True), ("b", False)), "a") == []


def test_multiple_enabled_collapse_to_target():
    bucket = _bucket(("a", True), ("b", True), ("c", False), ("d", True))
    ops = set_active(bucket, "b")
    assert ops == [ToggleOp("a", False), ToggleOp("d", False)]


def test_unknown_target_is_contract_error():
    with pytest.raises(ValueError, match="not in this category"):
        set_active(_bucket(("a", True)), "zzz")


def test_second_call_after_apply_is_idempotent():
    bucket = _bucket(("a", True), ("b", False), ("c", True))
    ops = set_active(bucket, "b")
    after = apply_toggle_ops(bucket, ops)
    assert set_active(after, "b") == []


@pytest.mark.parametrize("sequence", [
    ["a", "b", "c", "a"],
    ["c", None, "b", "b"],
    [None, "a", None],
])
def test_at_most_one_enabled_after_sequential_calls(sequence):
    bucket = _bucket(("a", True), ("b", True), ("c", False))
    for target in sequence:
        bucket = apply_toggle_ops(bucket, set_active(bucket, target))
        enabled = [m.id for m in bucket if m.enabled]
        assert len(enabled) <= 1
        assert enabled == ([] if target is None else [target])


def test_apply_toggle_ops_skips_failed():
    bucket = _bucket(("a", True), ("b", False))
    after = apply_toggle_ops(bucket, set_active(bucket, "b"), failed_ids=["a"])
    assert [(m.id, m.enabled) for m in after] == [("a", True), ("b", True)]


# ---------------------------------------------------------------------------
# dispatch_toggles / activate
# ---------------------------------------------------------------------------


def test_dispatch_issues_ops_concurrently():
    store = _FakeStore()
    ops = [ToggleOp("a", False), ToggleOp("b", False), ToggleOp("c", True)]
    result = asyncio.run(dispatch_toggles(ops, store.toggle))

    assert result.ok
    assert result.applied == ops
    assert store.max_in_flight == 3


def test_dispatch_reports_partial_failure_without_rollback(caplog):
    store = _FakeStore(fail={"a"})
    ops = [ToggleOp("a", False), ToggleOp("b", True)]
    with caplog.at_level(logging.WARNING, logger="skin_locker.locker.exclusivity"):
        result = asyncio.run(dispatch_toggles(ops, store.toggle))

    assert not result.ok
    assert result.failed_ids == ["a"]
    assert isinstance(result.failures[0].error, OSError)
    assert result.failures[0].desired_enabled is False
    assert result.applied == [ToggleOp("b", True)]
    assert store.calls == [("a", False), ("b", True)]
    assert "Failed to disable mod a" in caplog.text


def test_dispatch_collects_errors_raised_before_awaiting():
    store = _FakeStore()

    def toggle(mod_id: str, desired_enabled: bool):
        if mod_id == "a":
            raise OSError("store unavailable")
        return store.toggle(mod_id, desired_enabled)

    ops = [ToggleOp("a", False), ToggleOp("b", True)]
    result = asyncio.run(dispatch_toggles(ops, toggle))

    assert result.failed_ids == ["a"]
    assert isinstance(result.failures[0].error, OSError)
    assert result.applied == [ToggleOp("b", True)]
    assert store.calls == [("b", True)]


def test_dispatch_empty_batch():
    store = _FakeStore()
    result = asyncio.run(dispatch_toggles([], store.toggle))
    assert result.ok and result.applied == []
    assert store.calls == []


def test_activate_runs_plan_and_dispatch():
    store = _FakeStore()
    bucket = _bucket(("a", True), ("b", False))
    result = asyncio.run(activate(bucket, "b", store.toggle))
    assert result.ok
    assert sorted(store.calls) == [("a", False), ("b", True)]


def test_flip_toggle_adapter():
    flipped: list[str] = []

    async def toggle_mod(mod_id: str) -> None:
        flipped.append(mod_id)

    bucket = _bucket(("a", True), ("b", False))
    result = asyncio.run(activate(bucket, "b", flip_toggle(toggle_mod)))
    assert result.ok
    assert sorted(flipped) == ["a", "b"]


def test_cancellation_propagates():
    async def toggle(mod_id: str, desired_enabled: bool) -> None:
        raise asyncio.CancelledError()

    with pytest.raises(asyncio.CancelledError):
        asyncio.run(dispatch_toggles([ToggleOp("a", True)], toggle))
