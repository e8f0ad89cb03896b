"""Extension lifecycle -- modules and services composed into one server.

Key names:

* :class:`Extension`, :class:`Module`, :class:`Service` -- base classes.
* :func:`init_extensions` -- one ordered lifecycle pass over a config map.
* :func:`classify_descriptor` -- turn a config entry into a descriptor.
* :func:`discover_extensions` -- entry-point based discovery.

Example::

    registry = await init_extensions(
        {"audit": {"module": AuditModule, "position": 5}, "cors": CorsModule},
        server,
        ExtensionKind.MODULE,
    )
"""

from modkit.extensions.base import Extension, Module, Service
from modkit.extensions.descriptors import (
    ExtensionDescriptor,
    ExtensionKind,
    FactoryExtension,
    ReadyExtension,
    classify_descriptor,
)
from modkit.extensions.discovery import discover_extensions
from modkit.extensions.lifecycle import init_extensions, init_modules, init_services

__all__ = [
    "Extension",
    "ExtensionDescriptor",
    "ExtensionKind",
    "FactoryExtension",
    "Module",
    "ReadyExtension",
    "Service",
    "classify_descriptor",
    "discover_extensions",
    "init_extensions",
    "init_modules",
    "init_services",
]
