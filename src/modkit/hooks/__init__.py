"""Hook bus -- named, priority-ordered action and filter callbacks.

Key classes:

* :class:`HookBus` -- the two hook tables plus dispatch.
* :class:`HookRegistration` -- one callback registered under a hook name.
* :class:`ActionHook` / :class:`FilterHook` -- well-known hook names.

Example::

    from modkit.hooks import FilterHook, HookBus, HookRegistration

    bus = HookBus()
    bus.add_filter(
        FilterHook.OUTGOING_RESPONSE,
        HookRegistration(id="wrap", func=lambda value, cfg: {"data": value}),
    )
    body = await bus.perform_filters(FilterHook.OUTGOING_RESPONSE, {"ok": True})
"""

from modkit.hooks.bus import HookBus, HookRegistration
from modkit.hooks.names import ActionHook, FilterHook

__all__ = ["ActionHook", "FilterHook", "HookBus", "HookRegistration"]
