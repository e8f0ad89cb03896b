"""Deep merge for configuration trees with array-replace semantics.

:func:`merge` behaves like a regular recursive dictionary merge, with one
deviation: a sequence value in a source never gets merged element by element
into what the target already holds. It replaces the previous value outright.
This is what makes layered configuration predictable -- a project config that
sets ``plugins: [a]`` really ends up with ``[a]``, not with the defaults plus
``a``.

Example::

    defaults = {"server": {"port": 8080, "tags": ["a", "b"]}}
    override = {"server": {"tags": ["c"]}}
    merge({}, defaults, override)
    # {"server": {"port": 8080, "tags": ["c"]}}
"""

from __future__ import annotations

import copy
from collections.abc import Mapping, MutableMapping
from typing import Any, Optional


def merge(
    target: MutableMapping[str, Any], *sources: Optional[Mapping[str, Any]]
) -> MutableMapping[str, Any]:
    """Merge *sources* into *target* from left to right and return *target*.

    Merge rules for each key of a source:

    * mapping into mapping -- recurse.
    * mapping into anything else -- replaced by a fresh copy of the mapping.
    * ``list``/``tuple`` -- replaces the previous value (deep-copied, so
      later mutation of the target never reaches the source).
    * any other value -- replaces the previous value ("later wins").

    Keys absent from a source leave the target untouched and ``None``
    sources are skipped, which lets callers pass optional configs directly.

    Args:
        target: The tree to merge into. Mutated in place.
        *sources: Trees applied in order; never mutated.

    Returns:
        The same *target* object.
    """
    for source in sources:
        if source is None:
            continue
        for key, value in source.items():
            target[key] = _merge_value(target.get(key), value)
    return target


def _merge_value(current: Any, incoming: Any) -> Any:
    if isinstance(incoming, Mapping):
        base = current if isinstance(current, MutableMapping) else {}
        return merge(base, incoming)
    if isinstance(incoming, (list, tuple)):
        return copy.deepcopy(incoming)
    return incoming
