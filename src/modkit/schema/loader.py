"""Load GraphQL type definition fragments from strings, files, directories, or URLs.

Schema sources in the server configuration may be given as a single entry or
a list, where each entry is one of:

* an http(s) URL -- fetched with :mod:`httpx`;
* a path to a ``.graphql`` / ``.gql`` file;
* a path to a directory -- every ``.graphql`` / ``.gql`` file below it,
  in sorted path order;
* anything else -- treated as inline SDL text.

The result is a flat list of SDL strings ready for
:func:`~modkit.schema.composer.merge_type_definitions`. Parsing happens
there; this module only does I/O.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Union

import httpx

from modkit.exceptions import SchemaParseError

SCHEMA_SUFFIXES = (".graphql", ".gql")

SchemaSources = Union[str, Path, Iterable[Union[str, Path]], None]


def load_type_definitions(sources: SchemaSources) -> list[str]:
    """Collect SDL fragments from *sources*.

    Args:
        sources: A source, an iterable of sources, or ``None``.

    Returns:
        The fragments in source order (``[]`` for ``None``).

    Raises:
        SchemaParseError: If a file, directory, or URL cannot be read.
    """
    if sources is None:
        return []
    if isinstance(sources, (str, Path)):
        sources = [sources]

    fragments: list[str] = []
    for source in sources:
        fragments.extend(_load_source(source))
    return fragments


def _load_source(source: Union[str, Path]) -> list[str]:
    if isinstance(source, str) and source.startswith(("http://", "https://")):
        return [_load_from_url(source)]

    path = Path(source)
    if isinstance(source, Path) or _looks_like_path(source):
        if path.is_dir():
            return [
                _load_from_file(file_path)
                for file_path in sorted(path.rglob("*"))
                if file_path.is_file() and file_path.suffix.lower() in SCHEMA_SUFFIXES
            ]
        if path.is_file():
            return [_load_from_file(path)]
        if isinstance(source, Path) or path.suffix.lower() in SCHEMA_SUFFIXES:
            raise SchemaParseError(f"Schema file not found: {source}", fragment=str(source))

    return [str(source)]


def _looks_like_path(source: str) -> bool:
    # Inline SDL with a body has braces or spans lines; anything else is tried as a path.
    return "\n" not in source and "{" not in source


def _load_from_file(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SchemaParseError(
            f"Failed to read schema file {path}: {exc}", fragment=str(path)
        ) from exc


def _load_from_url(url: str) -> str:
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SchemaParseError(
            f"HTTP {exc.response.status_code} fetching schema from {url}", fragment=url
        ) from exc
    except httpx.RequestError as exc:
        raise SchemaParseError(f"Failed to fetch schema from {url}: {exc}", fragment=url) from exc
    return response.text
