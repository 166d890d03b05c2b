"""Definition index: normalizes a discovery document into name -> Definition.

Two renderings of the same OpenAPI v2 ``definitions`` collection are accepted:

- the gnostic JSON form, where collections are
  ``{"additional_properties": [{"name": ..., "value": ...}]}``, refs are
  ``_ref``, types are ``{"value": [...]}`` and enum literals are
  ``[{"yaml": ...}]``;
- the plain Swagger 2.0 JSON served at ``/openapi/v2``, where collections are
  objects keyed by name and refs are ``$ref``.

A document that cannot be decoded at all raises ParseError and no index is
produced. A single malformed definition is skipped and logged.
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from typing import Any

from kubedocs.models.schema import Definition, ItemsDescriptor, ItemSchema, Property
from kubedocs.observability.logging import get_logger

_logger = get_logger("docs.definitions")

_GNOSTIC_LIST_KEY = "additional_properties"


class ParseError(ValueError):
    """Raised when the discovery document cannot be decoded."""


class _MalformedDefinition(ValueError):
    """Raised for a single definition that cannot be normalized."""


def index_definitions(raw: str | bytes | Mapping[str, Any]) -> dict[str, Definition]:
    """Build the name -> Definition index for one discovery snapshot.

    Args:
        raw: The discovery document as JSON text or an already decoded mapping.

    Returns:
        Definitions keyed by fully-qualified name, in document order. A name
        that appears twice keeps its last definition.

    Raises:
        ParseError: if the document is not JSON, not an object, or carries no
            definitions collection.
    """
    document = _decode(raw)
    index: dict[str, Definition] = {}
    skipped = 0
    for position, (name, body) in enumerate(_definition_entries(document)):
        try:
            definition = _parse_definition(name, body)
        except (_MalformedDefinition, TypeError, ValueError) as exc:
            skipped += 1
            _logger.warning("definition_skipped", name=name, position=position, error=str(exc))
            continue
        index[definition.name] = definition

    _logger.info("definitions_indexed", count=len(index), skipped=skipped)
    return index


def _decode(raw: str | bytes | Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(raw, Mapping):
        return raw
    try:
        document = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ParseError(f"discovery document is not valid JSON: {exc}") from exc
    except TypeError as exc:
        raise ParseError(f"unsupported discovery document type: {type(raw).__name__}") from exc
    if not isinstance(document, Mapping):
        raise ParseError(f"discovery document must be a JSON object, got {type(document).__name__}")
    return document


def _definition_entries(document: Mapping[str, Any]) -> Iterator[tuple[Any, Any]]:
    definitions = document.get("definitions")
    if definitions is None:
        raise ParseError("discovery document has no definitions collection")
    if not isinstance(definitions, Mapping):
        raise ParseError(f"definitions must be an object, got {type(definitions).__name__}")
    return _named_entries(definitions)


def _named_entries(collection: Mapping[str, Any]) -> Iterator[tuple[Any, Any]]:
    """Yield (name, body) pairs from either collection rendering."""
    entries = collection.get(_GNOSTIC_LIST_KEY)
    if isinstance(entries, list):
        for entry in entries:
            if isinstance(entry, Mapping):
                yield entry.get("name"), entry.get("value")
            else:
                yield None, entry
        return
    yield from collection.items()


def _parse_definition(name: Any, body: Any) -> Definition:
    if not isinstance(name, str) or not name:
        raise _MalformedDefinition(f"definition name must be a non-empty string, got {name!r}")
    if not isinstance(body, Mapping):
        raise _MalformedDefinition(f"definition body must be an object, got {type(body).__name__}")
    return Definition(
        name=name,
        description=_text(body.get("description")),
        type=_first_type(body.get("type")),
        properties=_parse_properties(body.get("properties")),
    )


def _parse_properties(value: Any) -> tuple[Property, ...]:
    if value is None:
        return ()
    if not isinstance(value, Mapping):
        raise _MalformedDefinition(f"properties must be an object, got {type(value).__name__}")
    return tuple(_parse_property(name, body) for name, body in _named_entries(value))


def _parse_property(name: Any, body: Any) -> Property:
    if not isinstance(name, str) or not name:
        raise _MalformedDefinition(f"property name must be a non-empty string, got {name!r}")
    if not isinstance(body, Mapping):
        raise _MalformedDefinition(f"property {name!r} must be an object")
    return Property(
        name=name,
        description=_text(body.get("description")),
        type=_first_type(body.get("type")),
        ref=_ref_of(body),
        enum=_parse_enum(body.get("enum")),
        items=_parse_items(body.get("items")),
        properties=_parse_properties(body.get("properties")),
    )


def _parse_items(value: Any) -> ItemsDescriptor | None:
    if value is None:
        return None
    if isinstance(value, Mapping):
        schemas = value.get("schema")
        if isinstance(schemas, list):
            # gnostic: {"schema": [{"_ref": ...}, ...]}
            return ItemsDescriptor(schema=tuple(ItemSchema(ref=_ref_of(s)) for s in schemas if isinstance(s, Mapping)))
        return ItemsDescriptor(schema=(ItemSchema(ref=_ref_of(value)),))
    if isinstance(value, list):
        return ItemsDescriptor(schema=tuple(ItemSchema(ref=_ref_of(s)) for s in value if isinstance(s, Mapping)))
    raise _MalformedDefinition(f"items must be an object or a list, got {type(value).__name__}")


def _parse_enum(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise _MalformedDefinition(f"enum must be a list, got {type(value).__name__}")
    literals: list[str] = []
    for entry in value:
        if isinstance(entry, Mapping):
            literals.append(_text(entry.get("yaml")).rstrip("\n"))
        elif isinstance(entry, str):
            literals.append(entry)
        else:
            literals.append(json.dumps(entry))
    return tuple(literals)


def _first_type(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        value = value.get("value")
    if isinstance(value, list):
        for entry in value:
            if isinstance(entry, str):
                return entry
        return ""
    if value is None:
        return ""
    raise _MalformedDefinition(f"unsupported type declaration: {value!r}")


def _ref_of(body: Mapping[str, Any]) -> str:
    return _text(body.get("_ref") or body.get("$ref"))


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)
