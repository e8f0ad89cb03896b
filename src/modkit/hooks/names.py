"""Well-known hook names used by the server and its built-in collaborators.

Both enums derive from ``str`` so a member and its plain string value are
interchangeable as hook names: ``bus.add_filter("SCHEMA", ...)`` and
``bus.add_filter(FilterHook.SCHEMA, ...)`` address the same hook.
"""

from __future__ import annotations

import enum


class ActionHook(str, enum.Enum):
    """Action hooks fired by :meth:`~modkit.server.Server.start`."""

    BEFORE_SERVER_START = "BEFORE_SERVER_START"
    AFTER_SERVER_START = "AFTER_SERVER_START"


class FilterHook(str, enum.Enum):
    """Filter hooks through which extensions intercept requests and schemas.

    * ``REQUEST_CONTEXT`` -- context handed to the GraphQL engine per request.
    * ``SCHEMA_DEFINITION`` -- list of SDL fragments before they are merged.
    * ``SCHEMA`` -- the merged SDL document.
    * ``INCOMING_REQUEST`` -- request context before the handler runs
      (see :func:`modkit.resolver.resolve`).
    * ``OUTGOING_RESPONSE`` -- handler result before it is returned.
    """

    REQUEST_CONTEXT = "REQUEST_CONTEXT"
    SCHEMA_DEFINITION = "SCHEMA_DEFINITION"
    SCHEMA = "SCHEMA"
    INCOMING_REQUEST = "INCOMING_REQUEST"
    OUTGOING_RESPONSE = "OUTGOING_RESPONSE"
