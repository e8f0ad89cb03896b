"""Classification of extension configuration entries.

Every value in a ``modules`` or ``services`` configuration map takes one of
three shapes, resolved once into an explicit descriptor:

* an already constructed instance of the expected base class
  -> :class:`ReadyExtension` (an instance of the other kind is rejected);
* a factory -- any class or object with a callable ``init`` attribute
  -> :class:`FactoryExtension` at position ``0``;
* a record ``{"module": Factory, "position": 5, "deactivated": False, ...}``
  -> :class:`FactoryExtension` carrying the remaining keys as config. The
  factory key is the kind name (``"module"`` / ``"service"``) or the generic
  ``"factory"``.

Strings of the form ``"package.module:attribute"`` are import references.
They are resolved to the object they name before classification, which lets
JSON and YAML configuration files point at extension classes.
"""

from __future__ import annotations

import enum
import importlib
import numbers
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from modkit.exceptions import ConfigurationError
from modkit.extensions.base import Extension, Module, Service


class ExtensionKind(str, enum.Enum):
    """The two families of extensions, initialised by separate passes."""

    MODULE = "module"
    SERVICE = "service"

    @property
    def base(self) -> type[Extension]:
        return Module if self is ExtensionKind.MODULE else Service

    @property
    def entry_point_group(self) -> str:
        return f"modkit.{self.value}s"


GENERIC_FACTORY_KEY = "factory"
RESERVED_KEYS = ("position", "deactivated")


@dataclass(frozen=True)
class ReadyExtension:
    """An instance that is placed into the registry as-is."""

    id: str
    instance: Extension


@dataclass(frozen=True)
class FactoryExtension:
    """A factory awaiting ``factory.init(context, config)``."""

    id: str
    factory: Any
    position: float = 0
    config: Mapping[str, Any] = field(default_factory=dict)
    deactivated: bool = False


ExtensionDescriptor = Union[ReadyExtension, FactoryExtension]


def classify_descriptor(
    extension_id: str, value: Any, kind: ExtensionKind
) -> ExtensionDescriptor:
    """Resolve one configuration entry into a descriptor.

    Args:
        extension_id: The key of the entry in the configuration map.
        value: The entry itself.
        kind: Whether the map configures modules or services.

    Returns:
        A :class:`ReadyExtension` or :class:`FactoryExtension`.

    Raises:
        ConfigurationError: If *value* is neither an instance, a factory,
            nor a record naming a factory, or if an import reference cannot
            be resolved.
    """
    if isinstance(value, str):
        value = resolve_reference(extension_id, value)

    if isinstance(value, kind.base):
        return ReadyExtension(id=extension_id, instance=value)

    if isinstance(value, Extension):
        raise ConfigurationError(
            f"Invalid {kind.value} '{extension_id}': got a "
            f"{type(value).__name__} instance, expected a {kind.base.__name__}",
            extension_id=extension_id,
        )

    if is_factory(value):
        return FactoryExtension(id=extension_id, factory=value)

    if isinstance(value, Mapping):
        return _classify_record(extension_id, value, kind)

    raise ConfigurationError(
        f"Missing {kind.value} '{extension_id}': expected an instance, a factory "
        f"or a record with a '{kind.value}' entry. Check the configuration file(s).",
        extension_id=extension_id,
    )


def _classify_record(
    extension_id: str, record: Mapping[str, Any], kind: ExtensionKind
) -> FactoryExtension:
    factory_key = kind.value if kind.value in record else GENERIC_FACTORY_KEY
    factory = record.get(factory_key)
    if isinstance(factory, str):
        factory = resolve_reference(extension_id, factory)
    if not is_factory(factory):
        raise ConfigurationError(
            f"Missing {kind.value} '{extension_id}': the record has no usable "
            f"'{kind.value}' entry. Check the configuration file(s).",
            extension_id=extension_id,
        )

    position = record.get("position")
    if position is None:
        position = 0
    elif isinstance(position, bool) or not isinstance(position, numbers.Real):
        raise ConfigurationError(
            f"Invalid position {position!r} for {kind.value} '{extension_id}'",
            extension_id=extension_id,
        )

    config = {
        key: value
        for key, value in record.items()
        if key != factory_key and key not in RESERVED_KEYS
    }
    return FactoryExtension(
        id=extension_id,
        factory=factory,
        position=position,
        config=config,
        deactivated=bool(record.get("deactivated", False)),
    )


def is_factory(value: Any) -> bool:
    """Return ``True`` for objects exposing a callable ``init`` attribute.

    Extension instances are never factories, even though the inherited
    ``init`` classmethod is reachable through them.
    """
    if value is None or isinstance(value, (str, Mapping, Extension)):
        return False
    return callable(getattr(value, "init", None))


def resolve_reference(extension_id: str, reference: str) -> Any:
    """Import the object named by ``"package.module:attribute"``.

    The attribute part may be dotted (``"pkg.mod:Outer.Inner"``).

    Raises:
        ConfigurationError: If the reference is malformed, the module cannot
            be imported, or the attribute does not exist.
    """
    module_name, sep, attr_path = reference.partition(":")
    if not sep or not module_name or not attr_path:
        raise ConfigurationError(
            f"Invalid import reference '{reference}' for '{extension_id}' "
            "(expected 'package.module:attribute')",
            extension_id=extension_id,
        )
    try:
        obj: Any = importlib.import_module(module_name)
        for attr in attr_path.split("."):
            obj = getattr(obj, attr)
    except (ImportError, AttributeError) as exc:
        raise ConfigurationError(
            f"Cannot resolve '{reference}' for '{extension_id}': {exc}",
            extension_id=extension_id,
        ) from exc
    return obj
