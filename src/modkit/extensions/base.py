"""Base classes for server extensions.

An *extension* is either a :class:`Module` or a :class:`Service`. Both share
the same lifecycle, driven by :func:`~modkit.extensions.lifecycle.init_extensions`:

1. :meth:`Extension.init` -- classmethod called with the server context and
   the extension's configuration. It constructs the instance and awaits
   :meth:`Extension.setup`.
2. :meth:`Extension.setup` -- register hooks, look up services that were
   initialised earlier, open connections.
3. :meth:`Extension.cleanup` -- called once by
   :meth:`~modkit.server.Server.shutdown`.

Example:
    A module that wraps every outgoing response::

        class EnvelopeModule(Module):
            default_config = {"key": "data"}

            async def setup(self) -> None:
                self.server.hooks.add_filter(
                    FilterHook.OUTGOING_RESPONSE,
                    HookRegistration(id="envelope", func=self.wrap),
                )

            def wrap(self, value, config):
                return {self.config["key"]: value}
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Optional

from modkit.merge import merge

if TYPE_CHECKING:
    from modkit.server import Server


class Extension:
    """Common base of modules and services.

    Attributes:
        default_config: Class-level defaults. The configuration passed to
            :meth:`init` is merged over a copy of them.
        server: The server context the extension was initialised with.
        config: The effective configuration of this instance.
    """

    default_config: ClassVar[dict[str, Any]] = {}

    def __init__(self, server: Server, config: Optional[dict[str, Any]] = None) -> None:
        self.server = server
        self.config: dict[str, Any] = merge({}, self.default_config, config)

    @classmethod
    async def init(
        cls, server: Server, config: Optional[dict[str, Any]] = None
    ) -> Extension:
        """Construct an instance for *server* and run its :meth:`setup`.

        Args:
            server: The server context.
            config: Extension configuration from the descriptor record.

        Returns:
            The initialised instance that will be stored in the registry.
        """
        instance = cls(server, config)
        await instance.setup()
        return instance

    async def setup(self) -> None:
        """Hook for subclasses; called once right after construction."""

    async def cleanup(self) -> None:
        """Hook for subclasses; called once during server shutdown."""


class Module(Extension):
    """Extension that contributes behaviour (hooks, schema fragments, routes)."""


class Service(Extension):
    """Extension that provides shared functionality to modules."""
