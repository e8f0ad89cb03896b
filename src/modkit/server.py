"""The server context shared by every extension.

A :class:`Server` owns everything the extensions of one process share: the
config tree, the :class:`~modkit.hooks.HookBus`, the module and service
registries, and the record type registry. It is passed explicitly as the
context of every ``init`` call, so extensions reach each other through
``self.server`` instead of through module-level globals.

Startup sequence (:meth:`Server.start`):

1. Combine the default config with the given config object or paths.
2. Initialise services, then modules, each in position order.
3. Fire ``BEFORE_SERVER_START``.
4. Await the optional ``serve`` callable (the transport adapter).
5. Fire ``AFTER_SERVER_START``.

Any exception raised along the way aborts startup and propagates unchanged.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Mapping, MutableMapping
from pathlib import Path
from typing import Any, Callable, Optional, Union

from modkit.config import default_config, load_configs, resolve_core_settings
from modkit.extensions import (
    Extension,
    ExtensionKind,
    discover_extensions,
    init_modules,
    init_services,
)
from modkit.hooks import ActionHook, FilterHook, HookBus
from modkit.merge import merge
from modkit.models import CoreSettings
from modkit.schema import load_type_definitions, merge_type_definitions
from modkit.schema.loader import SchemaSources
from modkit.store import RecordTypeRegistry

logger = logging.getLogger(__name__)

ConfigOrPaths = Union[Mapping[str, Any], str, Path, list, tuple, None]


class Server:
    """Process-wide context for modules and services.

    Attributes:
        config: The merged config tree.
        hooks: The hook bus of this server.
        modules: Registry of initialised modules, keyed by id.
        services: Registry of initialised services, keyed by id.
        record_types: Record types registered by extensions.
    """

    def __init__(self) -> None:
        self.config: dict[str, Any] = default_config()
        self.hooks = HookBus()
        self.modules: MutableMapping[str, Extension] = {}
        self.services: MutableMapping[str, Extension] = {}
        self.record_types = RecordTypeRegistry()
        self._settings: Optional[CoreSettings] = None

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def combine_configurations(self, config_or_paths: ConfigOrPaths = None) -> dict[str, Any]:
        """Merge *config_or_paths* into the current config tree.

        A path (or list of paths) is loaded with
        :func:`~modkit.config.load_configs`. A mapping is merged directly;
        if it names ``core.configuration.paths``, those files are merged
        first so the mapping itself takes precedence.

        Returns:
            The updated config tree.
        """
        if config_or_paths is None:
            return self.config

        if isinstance(config_or_paths, Mapping):
            configuration = (config_or_paths.get("core") or {}).get("configuration") or {}
            paths = configuration.get("paths")
            if paths:
                merge(
                    self.config,
                    load_configs(
                        paths,
                        environment=configuration.get("environment"),
                        environment_dir=configuration.get("environment_dir", "env"),
                    ),
                )
            merge(self.config, config_or_paths)
        else:
            merge(self.config, load_configs(config_or_paths))

        self._settings = None
        return self.config

    @property
    def settings(self) -> CoreSettings:
        """Validated ``core`` settings, re-resolved after every config change."""
        if self._settings is None:
            self._settings = resolve_core_settings(self.config)
        return self._settings

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(
        self,
        config_or_paths: ConfigOrPaths = None,
        serve: Optional[Callable[[Server], Awaitable[Any]]] = None,
    ) -> Server:
        """Configure the server, initialise extensions, and fire start hooks.

        Args:
            config_or_paths: Config object or config file/directory path(s).
            serve: Awaited between ``BEFORE_SERVER_START`` and
                ``AFTER_SERVER_START``; this is where a transport adapter
                starts listening.

        Returns:
            This server.
        """
        self.combine_configurations(config_or_paths)
        settings = self.settings

        await init_services(self._extension_map(ExtensionKind.SERVICE), self)
        await init_modules(self._extension_map(ExtensionKind.MODULE), self)

        hook_config = {"server": settings.server.model_dump()}
        await self.hooks.perform_actions(ActionHook.BEFORE_SERVER_START, hook_config)
        if serve is not None:
            result = serve(self)
            if inspect.isawaitable(result):
                await result
        await self.hooks.perform_actions(ActionHook.AFTER_SERVER_START, hook_config)

        logger.info(
            "Server '%s' started with %d service(s) and %d module(s)",
            settings.server.name, len(self.services), len(self.modules),
        )
        return self

    async def shutdown(self) -> None:
        """Call ``cleanup`` on every extension, modules first, newest first.

        Exceptions from individual extensions are logged and swallowed so
        that one failing cleanup does not keep the others from running.
        """
        for kind, registry in (("module", self.modules), ("service", self.services)):
            for extension_id, extension in reversed(list(registry.items())):
                cleanup = getattr(extension, "cleanup", None)
                if not callable(cleanup):
                    continue
                try:
                    result = cleanup()
                    if inspect.isawaitable(result):
                        await result
                except Exception as exc:
                    logger.warning("Error cleaning up %s '%s': %s", kind, extension_id, exc)

    def _extension_map(self, kind: ExtensionKind) -> dict[str, Any]:
        configured = self.config.get(f"{kind.value}s") or {}
        extensions = self.settings.extensions
        if not extensions.discover:
            return configured
        discovered = discover_extensions(kind, extensions.enabled, extensions.disabled)
        return merge(discovered, configured)

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    async def build_schema(self, sources: SchemaSources = None) -> str:
        """Compose the GraphQL schema from configured and extra sources.

        The fragment list passes through ``FilterHook.SCHEMA_DEFINITION``
        (so extensions can contribute fragments), is merged with
        :func:`~modkit.schema.merge_type_definitions`, and the merged SDL
        passes through ``FilterHook.SCHEMA``.

        Args:
            sources: Extra schema sources appended after ``core.schema.sources``.

        Returns:
            The final SDL document.
        """
        fragments: list[Any] = load_type_definitions(self.settings.schema_.sources)
        fragments.extend(load_type_definitions(sources))
        fragments = await self.hooks.perform_filters(FilterHook.SCHEMA_DEFINITION, fragments)
        merged = merge_type_definitions(fragments)
        return await self.hooks.perform_filters(FilterHook.SCHEMA, merged)
