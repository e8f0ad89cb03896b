"""Tests for modkit.hooks -- registration, ordering, dispatch, removal."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from modkit.hooks import ActionHook, FilterHook, HookBus, HookRegistration


def _ids(registrations: tuple[HookRegistration, ...]) -> list[str]:
    return [r.id for r in registrations]


def _noop(*args: Any) -> None:
    return None


# ---------------------------------------------------------------------------
# HookRegistration
# ---------------------------------------------------------------------------


class TestHookRegistration:
    def test_defaults(self) -> None:
        reg = HookRegistration(id="a", func=_noop)
        assert reg.priority == 0
        assert reg.config is None

    def test_none_priority_counts_as_zero(self) -> None:
        assert HookRegistration(id="a", func=_noop, priority=None).priority == 0


# ---------------------------------------------------------------------------
# Registration and ordering
# ---------------------------------------------------------------------------


class TestRegistrationOrder:
    def test_higher_priority_runs_first(self) -> None:
        bus = HookBus()
        bus.add_action("h", HookRegistration(id="low", func=_noop, priority=1))
        bus.add_action("h", HookRegistration(id="high", func=_noop, priority=10))
        bus.add_action("h", HookRegistration(id="mid", func=_noop, priority=5))
        assert _ids(bus.get_actions("h")) == ["high", "mid", "low"]

    def test_equal_priorities_keep_insertion_order(self) -> None:
        bus = HookBus()
        for name in ("first", "second", "third"):
            bus.add_filter("h", HookRegistration(id=name, func=_noop))
        assert _ids(bus.get_filters("h")) == ["first", "second", "third"]

    def test_negative_priorities_run_after_default(self) -> None:
        bus = HookBus()
        bus.add_action("h", HookRegistration(id="late", func=_noop, priority=-5))
        bus.add_action("h", HookRegistration(id="normal", func=_noop))
        assert _ids(bus.get_actions("h")) == ["normal", "late"]

    def test_same_id_replaces_previous_registration(self) -> None:
        bus = HookBus()
        bus.add_action("h", HookRegistration(id="x", func=_noop, priority=1))
        bus.add_action("h", HookRegistration(id="y", func=_noop, priority=2))
        replacement = HookRegistration(id="x", func=_noop, priority=3)
        bus.add_action("h", replacement)

        actions = bus.get_actions("h")
        assert _ids(actions) == ["x", "y"]
        assert actions[0] is replacement

    def test_replacement_with_equal_priority_moves_to_end(self) -> None:
        bus = HookBus()
        bus.add_filter("h", HookRegistration(id="a", func=_noop))
        bus.add_filter("h", HookRegistration(id="b", func=_noop))
        bus.add_filter("h", HookRegistration(id="a", func=_noop))
        assert _ids(bus.get_filters("h")) == ["b", "a"]

    def test_actions_and_filters_are_independent(self) -> None:
        bus = HookBus()
        bus.add_action("h", HookRegistration(id="same", func=_noop))
        bus.add_filter("h", HookRegistration(id="same", func=_noop))

        assert _ids(bus.get_actions("h")) == ["same"]
        assert _ids(bus.get_filters("h")) == ["same"]

    def test_adding_filter_does_not_remove_action_with_same_id(self) -> None:
        bus = HookBus()
        bus.add_action("h", HookRegistration(id="x", func=_noop))
        bus.add_filter("h", HookRegistration(id="x", func=_noop))
        bus.add_filter("h", HookRegistration(id="x", func=_noop))
        assert len(bus.get_actions("h")) == 1

    def test_unknown_hook_has_no_registrations(self) -> None:
        bus = HookBus()
        assert bus.get_actions("nope") == ()
        assert bus.get_filters("nope") == ()

    def test_getters_return_snapshots(self) -> None:
        bus = HookBus()
        bus.add_action("h", HookRegistration(id="a", func=_noop))
        snapshot = bus.get_actions("h")
        bus.add_action("h", HookRegistration(id="b", func=_noop))
        assert _ids(snapshot) == ["a"]

    def test_enum_names_are_plain_strings(self) -> None:
        bus = HookBus()
        bus.add_filter(FilterHook.SCHEMA, HookRegistration(id="a", func=_noop))
        assert _ids(bus.get_filters("SCHEMA")) == ["a"]


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


class TestPerformActions:
    @pytest.mark.asyncio
    async def test_runs_in_priority_order(self) -> None:
        bus = HookBus()
        calls: list[str] = []
        bus.add_action("h", HookRegistration(id="b", func=lambda c: calls.append("b"), priority=1))
        bus.add_action("h", HookRegistration(id="a", func=lambda c: calls.append("a"), priority=2))

        await bus.perform_actions("h")

        assert calls == ["a", "b"]

    @pytest.mark.asyncio
    async def test_each_action_receives_merged_config(self) -> None:
        bus = HookBus()
        received: list[dict] = []
        bus.add_action(
            "h",
            HookRegistration(
                id="a",
                func=received.append,
                config={"static": 1, "nested": {"x": 1, "y": 1}},
            ),
        )

        await bus.perform_actions("h", {"nested": {"y": 2}, "call": True})

        assert received == [{"static": 1, "nested": {"x": 1, "y": 2}, "call": True}]

    @pytest.mark.asyncio
    async def test_registration_config_is_not_mutated(self) -> None:
        bus = HookBus()
        static = {"nested": {"x": 1}}
        bus.add_action("h", HookRegistration(id="a", func=_noop, config=static))
        await bus.perform_actions("h", {"nested": {"x": 2}})
        assert static == {"nested": {"x": 1}}

    @pytest.mark.asyncio
    async def test_without_any_config_receives_empty_dict(self) -> None:
        bus = HookBus()
        received: list[dict] = []
        bus.add_action("h", HookRegistration(id="a", func=received.append))
        await bus.perform_actions("h")
        assert received == [{}]

    @pytest.mark.asyncio
    async def test_unknown_hook_is_noop(self) -> None:
        await HookBus().perform_actions(ActionHook.AFTER_SERVER_START)

    @pytest.mark.asyncio
    async def test_async_actions_run_sequentially(self) -> None:
        bus = HookBus()
        events: list[str] = []

        async def slow(config: dict) -> None:
            events.append("slow:start")
            await asyncio.sleep(0.01)
            events.append("slow:end")

        async def fast(config: dict) -> None:
            events.append("fast")

        bus.add_action("h", HookRegistration(id="slow", func=slow, priority=1))
        bus.add_action("h", HookRegistration(id="fast", func=fast))

        await bus.perform_actions("h")

        assert events == ["slow:start", "slow:end", "fast"]

    @pytest.mark.asyncio
    async def test_failure_stops_dispatch_and_propagates(self) -> None:
        bus = HookBus()
        calls: list[str] = []

        def boom(config: dict) -> None:
            raise RuntimeError("boom")

        bus.add_action("h", HookRegistration(id="boom", func=boom, priority=1))
        bus.add_action("h", HookRegistration(id="after", func=lambda c: calls.append("after")))

        with pytest.raises(RuntimeError, match="boom"):
            await bus.perform_actions("h")
        assert calls == []


class TestPerformFilters:
    @pytest.mark.asyncio
    async def test_threads_value_through_filters(self) -> None:
        bus = HookBus()
        bus.add_filter("h", HookRegistration(id="double", func=lambda v, c: v * 2, priority=2))
        bus.add_filter("h", HookRegistration(id="inc", func=lambda v, c: v + 1, priority=1))

        assert await bus.perform_filters("h", 5) == 11

    @pytest.mark.asyncio
    async def test_no_filters_returns_value_unchanged(self) -> None:
        value = {"a": 1}
        assert await HookBus().perform_filters("h", value) is value

    @pytest.mark.asyncio
    async def test_mixes_sync_and_async_filters(self) -> None:
        bus = HookBus()

        async def add_b(value: list, config: dict) -> list:
            return value + ["b"]

        bus.add_filter("h", HookRegistration(id="a", func=lambda v, c: v + ["a"], priority=1))
        bus.add_filter("h", HookRegistration(id="b", func=add_b))

        assert await bus.perform_filters("h", []) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_filter_receives_merged_config(self) -> None:
        bus = HookBus()
        bus.add_filter(
            "h",
            HookRegistration(
                id="suffix",
                func=lambda v, c: v + c["suffix"] + c["sep"],
                config={"suffix": "x", "sep": "-"},
            ),
        )

        assert await bus.perform_filters("h", "v", {"suffix": "y"}) == "vy-"

    @pytest.mark.asyncio
    async def test_failure_propagates(self) -> None:
        bus = HookBus()

        def boom(value: Any, config: dict) -> Any:
            raise ValueError("bad value")

        bus.add_filter("h", HookRegistration(id="boom", func=boom))
        with pytest.raises(ValueError, match="bad value"):
            await bus.perform_filters("h", 1)

    @pytest.mark.asyncio
    async def test_registration_during_dispatch_affects_next_dispatch_only(self) -> None:
        bus = HookBus()

        def register_more(value: int, config: dict) -> int:
            bus.add_filter("h", HookRegistration(id="late", func=lambda v, c: v + 100))
            return value + 1

        bus.add_filter("h", HookRegistration(id="first", func=register_more))

        assert await bus.perform_filters("h", 0) == 1
        assert await bus.perform_filters("h", 0) == 101


# ---------------------------------------------------------------------------
# Removal
# ---------------------------------------------------------------------------


class TestRemoval:
    def _bus(self) -> HookBus:
        bus = HookBus()
        for hook in ("h1", "h2"):
            for reg_id in ("a", "b"):
                bus.add_action(hook, HookRegistration(id=reg_id, func=_noop))
                bus.add_filter(hook, HookRegistration(id=reg_id, func=_noop))
        return bus

    def test_remove_action_from_one_hook(self) -> None:
        bus = self._bus()
        bus.remove_action("h1", "a")
        assert _ids(bus.get_actions("h1")) == ["b"]
        assert _ids(bus.get_actions("h2")) == ["a", "b"]
        assert _ids(bus.get_filters("h1")) == ["a", "b"]

    def test_remove_filter_from_one_hook(self) -> None:
        bus = self._bus()
        bus.remove_filter("h2", "b")
        assert _ids(bus.get_filters("h2")) == ["a"]
        assert _ids(bus.get_actions("h2")) == ["a", "b"]

    def test_remove_unknown_is_noop(self) -> None:
        bus = self._bus()
        bus.remove_action("missing", "a")
        bus.remove_filter("h1", "missing")
        assert _ids(bus.get_filters("h1")) == ["a", "b"]

    def test_remove_action_from_all_hooks(self) -> None:
        bus = self._bus()
        bus.remove_action_from_all_hooks("a")
        assert _ids(bus.get_actions("h1")) == ["b"]
        assert _ids(bus.get_actions("h2")) == ["b"]
        assert _ids(bus.get_filters("h1")) == ["a", "b"]

    def test_remove_filter_from_all_hooks(self) -> None:
        bus = self._bus()
        bus.remove_filter_from_all_hooks("b")
        assert _ids(bus.get_filters("h1")) == ["a"]
        assert _ids(bus.get_filters("h2")) == ["a"]
        assert _ids(bus.get_actions("h2")) == ["a", "b"]

    def test_clear_action_hook(self) -> None:
        bus = self._bus()
        bus.clear_action_hook("h1")
        assert bus.get_actions("h1") == ()
        assert _ids(bus.get_actions("h2")) == ["a", "b"]

    def test_clear_filter_hook(self) -> None:
        bus = self._bus()
        bus.clear_filter_hook("h2")
        assert bus.get_filters("h2") == ()
        assert _ids(bus.get_filters("h1")) == ["a", "b"]

    def test_clear_all_action_hooks(self) -> None:
        bus = self._bus()
        bus.clear_all_action_hooks()
        assert bus.get_actions("h1") == ()
        assert bus.get_actions("h2") == ()
        assert _ids(bus.get_filters("h1")) == ["a", "b"]

    def test_clear_all_filter_hooks(self) -> None:
        bus = self._bus()
        bus.clear_all_filter_hooks()
        assert bus.get_filters("h1") == ()
        assert _ids(bus.get_actions("h1")) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_removed_filter_no_longer_runs(self) -> None:
        bus = HookBus()
        bus.add_filter("h", HookRegistration(id="inc", func=lambda v, c: v + 1))
        bus.remove_filter("h", "inc")
        assert await bus.perform_filters("h", 1) == 1
