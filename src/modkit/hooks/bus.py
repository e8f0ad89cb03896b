"""Hook registrations and the bus that dispatches them.

The bus keeps two independent tables, one per hook *kind*:

* **Action hooks** are fired for their side effects. Every registered
  callback receives the merged configuration and nothing is returned.
* **Filter hooks** form a pipeline. Each callback receives the value produced
  by the previous one and returns the value for the next.

Within one hook, registrations are unique by id and ordered by descending
priority; registrations with equal priority keep their insertion order.
Dispatch is strictly sequential: each callback is awaited before the next
starts, so a later callback may rely on an earlier one having completed.

A callback's exception is not caught here. It propagates unchanged to the
caller of :meth:`HookBus.perform_actions` / :meth:`HookBus.perform_filters`
and the remaining callbacks of that dispatch are skipped.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from modkit.merge import merge

logger = logging.getLogger(__name__)


@dataclass
class HookRegistration:
    """One callback registered under a hook name.

    Attributes:
        id: Identifier, unique within a single hook. Registering the same id
            again replaces the earlier registration.
        func: The callback. Action callbacks are called as ``func(config)``,
            filter callbacks as ``func(value, config)``. Either may be a
            plain function or a coroutine function.
        priority: Higher priorities run first. ``None`` counts as ``0``.
        config: Static configuration merged with the per-invocation
            configuration on every dispatch.
    """

    id: str
    func: Callable[..., Any]
    priority: Optional[int] = 0
    config: Optional[dict[str, Any]] = None

    def __post_init__(self) -> None:
        if self.priority is None:
            self.priority = 0


class HookBus:
    """Registry and dispatcher for action and filter hooks.

    A single bus is created with the :class:`~modkit.server.Server` and
    reached by extensions through ``server.hooks``.

    Registering or removing callbacks of a hook from within one of that
    hook's own callbacks does not affect the dispatch already in progress:
    dispatch iterates over a snapshot of the list taken when it started.
    """

    def __init__(self) -> None:
        self._actions: dict[str, list[HookRegistration]] = {}
        self._filters: dict[str, list[HookRegistration]] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add_action(self, hook: str, registration: HookRegistration) -> None:
        """Register an action callback, replacing any with the same id.

        Args:
            hook: Name of the action hook.
            registration: The callback to register.
        """
        _insert(self._actions, hook, registration)
        logger.debug(
            "Registered action '%s' on hook '%s' (priority %s)",
            registration.id, hook, registration.priority,
        )

    def add_filter(self, hook: str, registration: HookRegistration) -> None:
        """Register a filter callback, replacing any with the same id.

        Args:
            hook: Name of the filter hook.
            registration: The callback to register.
        """
        _insert(self._filters, hook, registration)
        logger.debug(
            "Registered filter '%s' on hook '%s' (priority %s)",
            registration.id, hook, registration.priority,
        )

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def perform_actions(
        self, hook: str, config: Optional[dict[str, Any]] = None
    ) -> None:
        """Run every action registered on *hook*, in priority order.

        Each callback receives ``merge({}, registration.config, config)``.
        An unknown hook or a hook without registrations is a no-op.

        Args:
            hook: Name of the action hook.
            config: Per-invocation configuration.
        """
        actions = self.get_actions(hook)
        logger.debug("Performing %d action(s) on hook '%s'", len(actions), hook)
        for action in actions:
            await _call(action.func, merge({}, action.config, config))

    async def perform_filters(
        self, hook: str, value: Any, config: Optional[dict[str, Any]] = None
    ) -> Any:
        """Thread *value* through every filter registered on *hook*.

        Args:
            hook: Name of the filter hook.
            value: The initial value.
            config: Per-invocation configuration, merged over each
                registration's static config.

        Returns:
            The value returned by the last filter, or *value* unchanged when
            no filter is registered.
        """
        filters = self.get_filters(hook)
        logger.debug("Performing %d filter(s) on hook '%s'", len(filters), hook)
        for hook_filter in filters:
            value = await _call(hook_filter.func, value, merge({}, hook_filter.config, config))
        return value

    # ------------------------------------------------------------------
    # Querying
    # ------------------------------------------------------------------

    def get_actions(self, hook: str) -> tuple[HookRegistration, ...]:
        """Return a snapshot of the actions registered on *hook*, in dispatch order."""
        return tuple(self._actions.get(hook, ()))

    def get_filters(self, hook: str) -> tuple[HookRegistration, ...]:
        """Return a snapshot of the filters registered on *hook*, in dispatch order."""
        return tuple(self._filters.get(hook, ()))

    # ------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------

    def remove_action(self, hook: str, action_id: str) -> None:
        """Remove the action with *action_id* from *hook* only."""
        _remove(self._actions, hook, action_id)

    def remove_filter(self, hook: str, filter_id: str) -> None:
        """Remove the filter with *filter_id* from *hook* only."""
        _remove(self._filters, hook, filter_id)

    def remove_action_from_all_hooks(self, action_id: str) -> None:
        """Remove the action with *action_id* from every action hook."""
        for hook in list(self._actions):
            _remove(self._actions, hook, action_id)

    def remove_filter_from_all_hooks(self, filter_id: str) -> None:
        """Remove the filter with *filter_id* from every filter hook."""
        for hook in list(self._filters):
            _remove(self._filters, hook, filter_id)

    def clear_action_hook(self, hook: str) -> None:
        self._actions[hook] = []

    def clear_filter_hook(self, hook: str) -> None:
        self._filters[hook] = []

    def clear_all_action_hooks(self) -> None:
        self._actions = {}

    def clear_all_filter_hooks(self) -> None:
        self._filters = {}


def _insert(
    table: dict[str, list[HookRegistration]], hook: str, registration: HookRegistration
) -> None:
    registrations = [r for r in table.get(hook, []) if r.id != registration.id]
    registrations.append(registration)
    # sorted() is stable, so equal priorities keep their insertion order.
    table[hook] = sorted(registrations, key=lambda r: r.priority, reverse=True)


def _remove(table: dict[str, list[HookRegistration]], hook: str, registration_id: str) -> None:
    if hook in table:
        table[hook] = [r for r in table[hook] if r.id != registration_id]


async def _call(func: Callable[..., Any], *args: Any) -> Any:
    result = func(*args)
    if inspect.isawaitable(result):
        result = await result
    return result
