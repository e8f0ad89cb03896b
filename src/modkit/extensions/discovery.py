"""Entry-point discovery of installed extensions.

Third-party packages register extensions by declaring entry points in the
``modkit.modules`` or ``modkit.services`` group of their ``pyproject.toml``::

    [project.entry-points."modkit.modules"]
    audit = "my_package.audit:AuditModule"

:func:`discover_extensions` turns those entry points into a configuration
map that :func:`~modkit.extensions.lifecycle.init_extensions` accepts. The
server merges it *under* the explicitly configured map, so a configuration
file can still override position or deactivate a discovered extension.
"""

from __future__ import annotations

import importlib.metadata
import logging
from collections.abc import Iterable
from typing import Any

from modkit.extensions.descriptors import ExtensionKind

logger = logging.getLogger(__name__)


def discover_extensions(
    kind: ExtensionKind,
    enabled: Iterable[str] = (),
    disabled: Iterable[str] = (),
) -> dict[str, Any]:
    """Load the extensions registered under *kind*'s entry-point group.

    When *enabled* is non-empty only those names are loaded; otherwise every
    discovered entry point not in *disabled* is loaded.

    Args:
        kind: Selects the ``modkit.modules`` or ``modkit.services`` group.
        enabled: Explicit allowlist of entry-point names.
        disabled: Blocklist of entry-point names.

    Returns:
        A mapping of entry-point name to the loaded object. Entry points
        that fail to load are logged as warnings and skipped.
    """
    enabled_set = set(enabled)
    disabled_set = set(disabled)
    discovered: dict[str, Any] = {}

    for ep in importlib.metadata.entry_points(group=kind.entry_point_group):
        name = ep.name
        if enabled_set and name not in enabled_set:
            logger.debug("%s '%s' not in enabled list, skipping", kind.value.capitalize(), name)
            continue
        if name in disabled_set:
            logger.debug("%s '%s' is disabled, skipping", kind.value.capitalize(), name)
            continue
        try:
            discovered[name] = ep.load()
        except Exception as exc:
            logger.warning("Failed to load %s '%s': %s", kind.value, name, exc)

    return discovered
