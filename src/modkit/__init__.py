"""modkit -- extension runtime for modular API servers.

This package composes independently written *modules* and *services* into
one server process, lets them intercept each other's data through a hook
bus, and merges the GraphQL type definition fragments they contribute into
one schema document.

Typical startup::

    from modkit import Server

    server = await Server().start("config/")
    sdl = await server.build_schema()

Modules:
    merge: Deep merge of configuration trees (sequences replace).
    hooks: Action and filter hook bus.
    extensions: Module/service base classes and the lifecycle manager.
    schema: SDL loading and merging.
    server: The server context shared by all extensions.
    resolver: Request-time filter integration for transport adapters.
    store: Declarative record type definitions.
    config: Configuration files, environments, and settings.
    exceptions: Exception hierarchy with exit-code mapping.
"""

__version__ = "0.1.0"

from modkit.extensions import Module, Service
from modkit.hooks import ActionHook, FilterHook, HookBus, HookRegistration
from modkit.merge import merge
from modkit.schema import merge_type_definitions
from modkit.server import Server

__all__ = [
    "ActionHook",
    "FilterHook",
    "HookBus",
    "HookRegistration",
    "Module",
    "Server",
    "Service",
    "__version__",
    "merge",
    "merge_type_definitions",
]
