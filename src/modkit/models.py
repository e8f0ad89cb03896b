"""Pydantic models for the typed ``core`` section of the server configuration.

The full server configuration is a plain nested dict (a *config tree*) that
may hold extension classes and instances in its ``modules`` and ``services``
maps, so it is never validated as a whole. Only the ``core`` section, which
is pure data, is validated into :class:`CoreSettings` by
:func:`~modkit.config.resolve_core_settings`.

Config tree layout::

    {
        "core": {
            "server": {"name": ..., "hostname": ..., "port": ...},
            "schema": {"sources": [...]},
            "configuration": {"paths": [...], "environment": ..., "environment_dir": "env"},
            "extensions": {"discover": False, "enabled": [], "disabled": []},
        },
        "modules": {...},
        "services": {...},
    }

``CoreSettings`` uses ``extra="allow"`` so extensions can keep their own
keys under ``core`` without model changes.
"""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ServerSettings(BaseModel):
    """Identity and bind address handed to the transport layer."""

    name: str = Field(default="modkit", description="Name of the server")
    hostname: str = Field(
        default="0.0.0.0",
        description="Bind address: 0.0.0.0 for all interfaces, 127.0.0.1 for local only",
    )
    port: int = Field(default=8080, description="Port the transport listens on")


class SchemaSettings(BaseModel):
    """Where the server finds its GraphQL type definition fragments."""

    sources: list[str] = Field(
        default_factory=list,
        description="Inline SDL, .graphql files, directories, or http(s) URLs",
    )


class ConfigurationSettings(BaseModel):
    """Automatic loading of further configuration files."""

    paths: Optional[Union[str, list[str]]] = Field(
        default=None, description="Files or directories merged under the given config"
    )
    environment: Optional[str] = Field(
        default=None, description="Active environment (falls back to MODKIT_ENV)"
    )
    environment_dir: str = Field(
        default="env", description="Directory name holding per-environment files"
    )


class ExtensionsSettings(BaseModel):
    """Entry-point discovery of installed modules and services."""

    discover: bool = Field(default=False, description="Load entry-point extensions")
    enabled: list[str] = Field(default_factory=list)
    disabled: list[str] = Field(default_factory=list)


class CoreSettings(BaseModel):
    """Validated view of the ``core`` section of the config tree."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    server: ServerSettings = Field(default_factory=ServerSettings)
    schema_: SchemaSettings = Field(default_factory=SchemaSettings, alias="schema")
    configuration: ConfigurationSettings = Field(default_factory=ConfigurationSettings)
    extensions: ExtensionsSettings = Field(default_factory=ExtensionsSettings)
