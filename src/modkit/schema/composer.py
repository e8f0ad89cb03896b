"""Merge partial GraphQL type definition documents into one document.

Modules contribute SDL fragments independently, and several of them often
declare the same type -- ``Query`` and ``Mutation`` above all. Handing such a
set to the execution engine unmerged fails with duplicate type errors, so
:func:`merge_type_definitions` folds them into a single document:

* one declaration per name survives, at the position where the name first
  appeared;
* it carries the union of all fields declared for that name. A field keeps
  the position where it was first seen, but a later redefinition replaces
  its definition;
* all other attributes (kind, description, directives, interfaces) come from
  the *last* declaration of that name;
* unnamed declarations (``schema { ... }``) are emitted verbatim, every time.

The routine is purely structural. It knows nothing about object types versus
enums or scalars; it only looks at the ``name`` and ``fields`` of each node.

Example::

    merge_type_definitions([
        "type User { id: ID }",
        "type User @cached { name: String }",
    ])
    # 'type User @cached {\\n  id: ID\\n  name: String\\n}'
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Optional, Union

from graphql import DefinitionNode, DocumentNode, GraphQLSyntaxError, parse, print_ast

from modkit.exceptions import SchemaParseError

logger = logging.getLogger(__name__)

TypeDefinitions = Union[str, DocumentNode, Sequence[Union[str, DocumentNode]]]


def merge_type_definitions(docs: TypeDefinitions) -> str:
    """Merge one or more SDL documents and print the result as SDL.

    Args:
        docs: A single SDL string or parsed document, or a sequence of them.

    Returns:
        The merged document printed as SDL.

    Raises:
        SchemaParseError: If a fragment is not valid GraphQL. Nothing is
            merged in that case.
    """
    return print_ast(merge_documents(docs))


def merge_documents(docs: TypeDefinitions) -> DocumentNode:
    """Merge one or more SDL documents into a new :class:`~graphql.DocumentNode`.

    The input documents are not modified.

    Args:
        docs: A single SDL string or parsed document, or a sequence of them.

    Returns:
        A new document with one declaration per name.

    Raises:
        SchemaParseError: If a fragment is not valid GraphQL.
    """
    definitions = _concat_definitions(docs)

    last_seen: dict[str, DefinitionNode] = {}
    fields_by_name: dict[str, dict[str, Any]] = {}
    for definition in definitions:
        name = _name_of(definition)
        if name is None:
            continue
        last_seen[name] = definition
        fields = getattr(definition, "fields", None)
        if fields is not None:
            merged = fields_by_name.setdefault(name, {})
            for field in fields:
                # Reassigning an existing key keeps its insertion position.
                merged[field.name.value] = field

    emitted: set[str] = set()
    output: list[DefinitionNode] = []
    for definition in definitions:
        name = _name_of(definition)
        if name is None:
            output.append(definition)
            continue
        if name in emitted:
            continue
        emitted.add(name)
        output.append(_with_fields(last_seen[name], fields_by_name.get(name)))

    logger.debug(
        "Merged %d declaration(s) into %d", len(definitions), len(output)
    )
    return DocumentNode(definitions=tuple(output))


def _concat_definitions(docs: TypeDefinitions) -> list[DefinitionNode]:
    if isinstance(docs, (str, DocumentNode)):
        docs = [docs]

    definitions: list[DefinitionNode] = []
    for index, doc in enumerate(docs):
        if isinstance(doc, str):
            if not doc.strip():
                continue
            doc = _parse_fragment(doc, index)
        elif not isinstance(doc, DocumentNode):
            raise SchemaParseError(
                f"Type definitions fragment {index} must be SDL text or a parsed "
                f"document (got {type(doc).__name__})",
                fragment=index,
            )
        definitions.extend(doc.definitions)
    return definitions


def _parse_fragment(source: str, index: int) -> DocumentNode:
    try:
        return parse(source)
    except GraphQLSyntaxError as exc:
        raise SchemaParseError(
            f"Invalid type definitions in fragment {index}: {exc.message}",
            fragment=index,
        ) from exc


def _name_of(definition: DefinitionNode) -> Optional[str]:
    name = getattr(definition, "name", None)
    return name.value if name is not None else None


def _with_fields(
    definition: DefinitionNode, fields: Optional[dict[str, Any]]
) -> DefinitionNode:
    if fields is None or "fields" not in definition.keys:
        return definition
    # AST nodes are immutable, so the merged declaration is a new node.
    attributes = {key: getattr(definition, key) for key in definition.keys if key != "fields"}
    return type(definition)(**attributes, fields=tuple(fields.values()))
