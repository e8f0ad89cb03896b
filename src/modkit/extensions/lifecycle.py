"""Initialisation of modules and services from a configuration map.

:func:`init_extensions` runs one lifecycle pass over a ``modules`` or
``services`` map:

1. Every entry is classified (see :mod:`modkit.extensions.descriptors`).
   A malformed entry fails the pass before anything is registered or
   initialised. Ready instances then go straight into the registry;
   everything else is queued.
2. The queue is stable-sorted by ascending position, so entries with equal
   positions keep the order of the configuration map.
3. Queued entries are initialised one after the other. Deactivated entries
   are skipped and never appear in the registry. Because each ``init`` is
   awaited before the next starts, an extension may look up anything that
   is already in the registry.

An exception raised by an ``init`` aborts the pass and propagates unchanged.
Entries registered before the failure stay in the registry.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Mapping, MutableMapping
from typing import Any, Optional

from modkit.extensions.base import Extension
from modkit.extensions.descriptors import (
    ExtensionKind,
    FactoryExtension,
    ReadyExtension,
    classify_descriptor,
)
from modkit.merge import merge

logger = logging.getLogger(__name__)


async def init_extensions(
    config_map: Optional[Mapping[str, Any]],
    context: Any,
    kind: ExtensionKind = ExtensionKind.MODULE,
    registry: Optional[MutableMapping[str, Extension]] = None,
) -> MutableMapping[str, Extension]:
    """Initialise every extension of *config_map* in position order.

    Args:
        config_map: Mapping of extension id to instance, factory, or
            descriptor record. ``None`` or an empty map is a no-op.
        context: Passed as first argument to every ``factory.init`` call
            (normally the :class:`~modkit.server.Server`).
        kind: Whether *config_map* holds modules or services.
        registry: Existing registry to extend. A new dict is created when
            omitted.

    Returns:
        The registry, keyed by extension id.

    Raises:
        ConfigurationError: If an entry matches none of the known shapes.
    """
    if registry is None:
        registry = {}
    if not config_map:
        return registry

    descriptors = [
        classify_descriptor(extension_id, value, kind)
        for extension_id, value in config_map.items()
    ]

    queued: list[FactoryExtension] = []
    for descriptor in descriptors:
        if isinstance(descriptor, ReadyExtension):
            registry[descriptor.id] = descriptor.instance
            logger.debug("Registered %s instance '%s'", kind.value, descriptor.id)
        else:
            queued.append(descriptor)

    for descriptor in sorted(queued, key=lambda d: d.position):
        if descriptor.deactivated:
            logger.debug("%s '%s' is deactivated, skipping", kind.value.capitalize(), descriptor.id)
            continue
        instance = descriptor.factory.init(context, merge({}, descriptor.config))
        if inspect.isawaitable(instance):
            instance = await instance
        registry[descriptor.id] = instance
        logger.info(
            "Initialized %s '%s' (position %s)", kind.value, descriptor.id, descriptor.position
        )

    return registry


async def init_modules(
    config_map: Optional[Mapping[str, Any]], context: Any
) -> MutableMapping[str, Extension]:
    """Initialise modules into ``context.modules`` and return that registry."""
    return await init_extensions(
        config_map, context, ExtensionKind.MODULE, registry=context.modules
    )


async def init_services(
    config_map: Optional[Mapping[str, Any]], context: Any
) -> MutableMapping[str, Extension]:
    """Initialise services into ``context.services`` and return that registry."""
    return await init_extensions(
        config_map, context, ExtensionKind.SERVICE, registry=context.services
    )
