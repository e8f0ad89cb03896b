"""Request-time hook integration for transport adapters.

Transport adapters (HTTP routes, GraphQL resolvers) call into the server
through the functions below so that every extension gets the chance to
inspect or rewrite what flows through a request.
"""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Union

from modkit.hooks import FilterHook

if TYPE_CHECKING:
    from modkit.server import Server

Handler = Callable[[Any], Union[Any, Awaitable[Any]]]


async def resolve(server: Server, handler: Handler, context: Any) -> Any:
    """Run *handler* with request filters applied on both sides.

    The request context is filtered through ``FilterHook.INCOMING_REQUEST``
    before the handler runs; the handler's result is filtered through
    ``FilterHook.OUTGOING_RESPONSE`` before it is returned. Exceptions from
    filters or from the handler propagate unchanged.
    """
    context = await server.hooks.perform_filters(FilterHook.INCOMING_REQUEST, context)
    response = handler(context)
    if inspect.isawaitable(response):
        response = await response
    return await server.hooks.perform_filters(FilterHook.OUTGOING_RESPONSE, response)


async def build_request_context(server: Server, context: Any) -> Any:
    """Filter the per-request engine context through ``FilterHook.REQUEST_CONTEXT``."""
    return await server.hooks.perform_filters(FilterHook.REQUEST_CONTEXT, context)
