"""Typed representation of a Swagger 2.0 document.

Only the pieces the generator needs are decoded: ``definitions`` and
``paths``. Unknown keys are ignored. Structural problems raise
``MalformedDocument`` with a JSON pointer to the offending node.

Property shapes are decided once here, so the type resolver can match
on a single variant instead of re-checking which keys are present.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Final, Union

from .errors import MalformedDocument

logger = logging.getLogger(__name__)

# Emission order: reads before mutations
HTTP_METHODS: Final[tuple[str, ...]] = ("get", "post", "put", "delete", "patch")


class PrimitiveType(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"


SCALAR_TYPES: Final[frozenset[PrimitiveType]] = frozenset({
    PrimitiveType.STRING,
    PrimitiveType.INTEGER,
    PrimitiveType.NUMBER,
    PrimitiveType.BOOLEAN,
})


class ParameterLocation(str, Enum):
    QUERY = "query"
    PATH = "path"
    BODY = "body"


# No slot in the generated Params type
IGNORED_LOCATIONS: Final[frozenset[str]] = frozenset({"header", "formData"})


class DefinitionKind(str, Enum):
    OBJECT = "object"
    ENUM = "enum"


# ---------------------------------------------------------------------------
# Property shapes
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Scalar:
    primitive: PrimitiveType


@dataclass(frozen=True, slots=True)
class Reference:
    name: str


@dataclass(frozen=True, slots=True)
class InlineObject:
    fields: tuple[tuple[str, str], ...]


@dataclass(frozen=True, slots=True)
class InlineArrayOfReference:
    name: str


@dataclass(frozen=True, slots=True)
class InlineArrayOfObject:
    fields: tuple[tuple[str, str], ...]


@dataclass(frozen=True, slots=True)
class Unresolved:
    reason: str


PropertyShape = Union[
    Scalar, Reference, InlineObject, InlineArrayOfReference, InlineArrayOfObject, Unresolved
]


# ---------------------------------------------------------------------------
# Document entities
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Property:
    """One field of an object definition."""

    primitive_type: PrimitiveType | None
    shape: PropertyShape


@dataclass(frozen=True, slots=True)
class Definition:
    kind: DefinitionKind
    properties: dict[str, Property] = field(default_factory=dict)
    enum_values: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class SchemaRef:
    """Schema of a response or body parameter: a reference or an array of one."""

    reference: str | None = None
    items_reference: str | None = None


@dataclass(frozen=True, slots=True)
class Parameter:
    name: str
    location: ParameterLocation
    primitive_type: PrimitiveType | None = None
    required: bool | None = None
    body_schema: SchemaRef | None = None
    items_type: PrimitiveType | None = None


@dataclass(frozen=True, slots=True)
class Response:
    status_code: str
    schema: SchemaRef | None = None


@dataclass(frozen=True, slots=True)
class Operation:
    operation_id: str | None
    parameters: tuple[Parameter, ...] = ()
    responses: dict[str, Response] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class PathItem:
    operations: dict[str, Operation] = field(default_factory=dict)

    def get_operation(self, method: str) -> Operation | None:
        return self.operations.get(method)


@dataclass(frozen=True, slots=True)
class Document:
    definitions: dict[str, Definition] = field(default_factory=dict)
    paths: dict[str, PathItem] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def _pointer(*parts: str) -> str:
    escaped = (p.replace("~", "~0").replace("/", "~1") for p in parts)
    return "#/" + "/".join(escaped)


def _require_mapping(value: Any, *location: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise MalformedDocument(
            f"expected an object, got {type(value).__name__}", _pointer(*location)
        )
    return value


def _optional_mapping(node: dict[str, Any], key: str, *location: str) -> dict[str, Any]:
    value = node.get(key)
    if value is None:
        return {}
    return _require_mapping(value, *location, key)


def _primitive(value: Any, *location: str) -> PrimitiveType | None:
    if value is None:
        return None
    try:
        return PrimitiveType(value)
    except ValueError:
        raise MalformedDocument(f"unsupported type {value!r}", _pointer(*location)) from None


def _string_pairs(mapping: dict[str, Any], *location: str) -> tuple[tuple[str, str], ...]:
    """Keep the ``field -> type name`` pairs of an inline map, sorted by field."""
    pairs = []
    for key, value in sorted(mapping.items()):
        if not isinstance(value, str):
            logger.warning("Ignoring non-string inline type %s at %s", key, _pointer(*location))
            continue
        pairs.append((key, value))
    return tuple(pairs)


def decode_property_shape(node: dict[str, Any], *location: str) -> PropertyShape:
    """Pick the single shape a property describes."""
    primitive = _primitive(node.get("type"), *location, "type")
    ref = node.get("$ref")
    items = node.get("items")
    additional = node.get("additionalProperties")

    if ref is not None and not isinstance(ref, str):
        raise MalformedDocument("$ref must be a string", _pointer(*location, "$ref"))
    if items is not None and not isinstance(items, dict):
        items = None
    if not isinstance(additional, dict):
        additional = None

    if primitive in SCALAR_TYPES:
        return Scalar(primitive)

    if ref is not None and (items is not None or additional is not None):
        return Unresolved("both a $ref and an inline shape are present")

    if primitive is PrimitiveType.ARRAY:
        if ref is not None:
            return InlineArrayOfReference(ref)
        if items is not None:
            item_ref = items.get("$ref")
            if isinstance(item_ref, str):
                return InlineArrayOfReference(item_ref)
            return InlineArrayOfObject(_string_pairs(items, *location, "items"))
        return Unresolved("array without $ref or items")

    if primitive is PrimitiveType.OBJECT:
        if ref is not None:
            return Reference(ref)
        if items is not None:
            return InlineObject(_string_pairs(items, *location, "items"))
        if additional is not None:
            return InlineObject(_string_pairs(additional, *location, "additionalProperties"))
        return Unresolved("object without $ref, items or additionalProperties")

    if ref is not None:
        return Reference(ref)
    return Unresolved("no type and no $ref")


def decode_property(value: Any, *location: str) -> Property:
    node = _require_mapping(value, *location)
    return Property(
        primitive_type=_primitive(node.get("type"), *location, "type"),
        shape=decode_property_shape(node, *location),
    )


def decode_definition(value: Any, name: str) -> Definition:
    location = ("definitions", name)
    node = _require_mapping(value, *location)

    if "enum" in node:
        values = node["enum"]
        if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
            raise MalformedDocument("enum must be a list of strings", _pointer(*location, "enum"))
        return Definition(kind=DefinitionKind.ENUM, enum_values=tuple(values))

    raw_properties = _optional_mapping(node, "properties", *location)
    properties = {
        key: decode_property(prop, *location, "properties", key)
        for key, prop in raw_properties.items()
    }
    return Definition(kind=DefinitionKind.OBJECT, properties=properties)


def decode_schema_ref(value: Any, *location: str) -> SchemaRef:
    node = _require_mapping(value, *location)
    ref = node.get("$ref")
    items = node.get("items")
    items_ref = items.get("$ref") if isinstance(items, dict) else None
    return SchemaRef(
        reference=ref if isinstance(ref, str) else None,
        items_reference=items_ref if isinstance(items_ref, str) else None,
    )


def decode_parameter(value: Any, *location: str) -> Parameter | None:
    """Decode one parameter; header and formData parameters yield ``None``."""
    node = _require_mapping(value, *location)

    name = node.get("name")
    if not isinstance(name, str):
        raise MalformedDocument("parameter name is required", _pointer(*location, "name"))

    if node.get("in") in IGNORED_LOCATIONS:
        logger.debug("Skipping %s parameter %s at %s", node["in"], name, _pointer(*location))
        return None

    try:
        param_location = ParameterLocation(node.get("in"))
    except ValueError:
        raise MalformedDocument(
            f"unsupported parameter location {node.get('in')!r}", _pointer(*location, "in")
        ) from None

    required = node.get("required")
    if required is not None and not isinstance(required, bool):
        raise MalformedDocument("required must be a boolean", _pointer(*location, "required"))

    items = node.get("items")
    items_type = None
    if isinstance(items, dict):
        items_type = _primitive(items.get("type"), *location, "items", "type")

    body_schema = None
    if "schema" in node:
        body_schema = decode_schema_ref(node["schema"], *location, "schema")

    return Parameter(
        name=name,
        location=param_location,
        primitive_type=_primitive(node.get("type"), *location, "type"),
        required=required,
        body_schema=body_schema,
        items_type=items_type,
    )


def decode_operation(value: Any, path: str, method: str) -> Operation:
    location = ("paths", path, method)
    node = _require_mapping(value, *location)

    raw_parameters = node.get("parameters") or []
    if not isinstance(raw_parameters, list):
        raise MalformedDocument("parameters must be a list", _pointer(*location, "parameters"))
    decoded = (
        decode_parameter(param, *location, "parameters", str(index))
        for index, param in enumerate(raw_parameters)
    )
    parameters = tuple(param for param in decoded if param is not None)

    responses: dict[str, Response] = {}
    for status, raw in _optional_mapping(node, "responses", *location).items():
        resp = _require_mapping(raw, *location, "responses", status)
        schema = None
        if resp.get("schema") is not None:
            schema = decode_schema_ref(resp["schema"], *location, "responses", status, "schema")
        responses[str(status)] = Response(status_code=str(status), schema=schema)

    operation_id = node.get("operationId")
    return Operation(
        operation_id=operation_id if isinstance(operation_id, str) else None,
        parameters=parameters,
        responses=responses,
    )


def decode_path_item(value: Any, path: str) -> PathItem:
    node = _require_mapping(value, "paths", path)
    operations = {
        method: decode_operation(node[method], path, method)
        for method in HTTP_METHODS
        if node.get(method) is not None
    }
    return PathItem(operations=operations)


def decode_document(data: Any) -> Document:
    """Decode a parsed JSON value into a ``Document``."""
    if not isinstance(data, dict):
        raise MalformedDocument(
            f"document root must be an object, got {type(data).__name__}", "#"
        )

    definitions = {
        name: decode_definition(raw, name)
        for name, raw in _optional_mapping(data, "definitions").items()
    }
    paths = {
        path: decode_path_item(raw, path)
        for path, raw in _optional_mapping(data, "paths").items()
    }
    logger.debug("Decoded %d definitions and %d paths", len(definitions), len(paths))
    return Document(definitions=definitions, paths=paths)
