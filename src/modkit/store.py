"""Declarative record type definitions for the persistence adapter.

Extensions describe the record types they persist with a builder, once,
during :meth:`~modkit.extensions.base.Extension.setup`::

    user = (
        RecordTypeBuilder("User")
        .field("email", str)
        .field("roles", list)
        .input_hook(hash_password)
        .build()
    )
    server.record_types.register(user)

The result is an immutable :class:`RecordType`. The persistence adapter
(outside this package) reads :meth:`RecordTypeRegistry.definitions` and
:meth:`RecordTypeRegistry.hooks` when it connects.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

from modkit.exceptions import ExtensionError

Hook = Optional[Callable[..., Any]]

_WORD_RE = re.compile(r"[A-Z]?[a-z0-9]+|[A-Z]+(?![a-z])")


def camel_case(name: str) -> str:
    """Convert ``"UserProfile"`` / ``"user_profile"`` to ``"userProfile"``."""
    words = _WORD_RE.findall(name)
    if not words:
        return name
    return words[0].lower() + "".join(word.capitalize() for word in words[1:])


@dataclass(frozen=True)
class RecordType:
    """Immutable description of one record type.

    Attributes:
        name: Record type name used by the store.
        fields: Read-only mapping of field name to field type.
        input_hook: Called on records before they are written.
        output_hook: Called on records after they are read.
    """

    name: str
    fields: Mapping[str, Any]
    input_hook: Hook = None
    output_hook: Hook = None


class RecordTypeBuilder:
    """Fluent builder for :class:`RecordType`.

    Args:
        name: Class-style name of the record type.
        record_type_name: Explicit store name; defaults to ``camel_case(name)``.
    """

    def __init__(self, name: str, record_type_name: Optional[str] = None) -> None:
        self._name = record_type_name or camel_case(name)
        self._fields: dict[str, Any] = {}
        self._input_hook: Hook = None
        self._output_hook: Hook = None

    def field(self, name: str, field_type: Any) -> RecordTypeBuilder:
        self._fields[name] = field_type
        return self

    def input_hook(self, func: Callable[..., Any]) -> RecordTypeBuilder:
        self._input_hook = func
        return self

    def output_hook(self, func: Callable[..., Any]) -> RecordTypeBuilder:
        self._output_hook = func
        return self

    def build(self) -> RecordType:
        return RecordType(
            name=self._name,
            fields=MappingProxyType(dict(self._fields)),
            input_hook=self._input_hook,
            output_hook=self._output_hook,
        )


class RecordTypeRegistry:
    """Record types registered by the extensions of one server."""

    def __init__(self) -> None:
        self._record_types: dict[str, RecordType] = {}

    def register(self, record_type: RecordType) -> None:
        """Add *record_type*.

        Raises:
            ExtensionError: If a record type with the same name exists.
        """
        if record_type.name in self._record_types:
            raise ExtensionError(f"Record type '{record_type.name}' is already registered")
        self._record_types[record_type.name] = record_type

    def get(self, name: str) -> RecordType:
        try:
            return self._record_types[name]
        except KeyError:
            raise ExtensionError(f"Record type '{name}' is not registered") from None

    def __contains__(self, name: object) -> bool:
        return name in self._record_types

    def __len__(self) -> int:
        return len(self._record_types)

    def definitions(self) -> dict[str, dict[str, Any]]:
        """Return ``{record type name: {field: type}}`` as fresh dicts."""
        return {name: dict(rt.fields) for name, rt in self._record_types.items()}

    def hooks(self) -> dict[str, tuple[Hook, Hook]]:
        """Return ``{record type name: (input_hook, output_hook)}``."""
        return {
            name: (rt.input_hook, rt.output_hook) for name, rt in self._record_types.items()
        }
