"""Resolve schema elements to TypeScript type expressions.

Handles:
- Scalars (string, integer, number, boolean)
- $ref to #/definitions/ (emitted by name, never inlined, so cycles are fine)
- Arrays of references and of inline field maps
- Inline objects from items / additionalProperties maps
- Enum definitions as string literal unions (source order)
- Query/path parameter optionality
- Promise-wrapped response unions per status class

Every function is pure apart from warning-level diagnostics for shapes
that cannot be resolved; those resolve to the bottom type instead of
failing the run.
"""

from __future__ import annotations

import logging
from typing import Final, Iterable, Mapping

from .model import (
    Definition,
    DefinitionKind,
    InlineArrayOfObject,
    InlineArrayOfReference,
    InlineObject,
    Parameter,
    ParameterLocation,
    PrimitiveType,
    Property,
    PropertyShape,
    Reference,
    Response,
    Scalar,
    SchemaRef,
    Unresolved,
)
from .naming import clear_ref, property_key

logger = logging.getLogger(__name__)

BOTTOM: Final = "never"
UNKNOWN: Final = "unknown"
NULL: Final = "null"
UNDEFINED: Final = "undefined"
UNKNOWN_RESULT: Final = f"Promise<{UNKNOWN}>"

SUCCESS_CLASS: Final[tuple[str, ...]] = ("2",)
ERROR_CLASS: Final[tuple[str, ...]] = ("4", "5")

_SCALARS: Final[dict[PrimitiveType, str]] = {
    PrimitiveType.STRING: "string",
    PrimitiveType.INTEGER: "number",
    PrimitiveType.NUMBER: "number",
    PrimitiveType.BOOLEAN: "boolean",
}


def union(operands: Iterable[str]) -> str:
    """Join operands with ``|``, dropping repeats but keeping first-seen order."""
    unique = list(dict.fromkeys(operands))
    if not unique:
        return BOTTOM
    return " | ".join(unique)


def resolve_scalar(primitive: PrimitiveType) -> str:
    return _SCALARS.get(primitive, BOTTOM)


def resolve_type_name(name: str) -> str:
    """Resolve a bare type name from an inline field map.

    Swagger scalar names map to their TypeScript spelling, anything else
    is taken as a definition reference.
    """
    try:
        return _SCALARS[PrimitiveType(name)]
    except (ValueError, KeyError):
        return clear_ref(name)


def render_fields(fields: Iterable[tuple[str, str]]) -> str:
    """Render ``field:type;`` pairs as an object literal."""
    body = "".join(f"{property_key(key)}:{resolve_type_name(value)};" for key, value in fields)
    return f"{{{body}}}"


def resolve_shape(shape: PropertyShape, context: str = "") -> str:
    """Resolve a decoded property shape."""
    if isinstance(shape, Scalar):
        return resolve_scalar(shape.primitive)
    if isinstance(shape, Reference):
        return clear_ref(shape.name)
    if isinstance(shape, InlineArrayOfReference):
        return f"{clear_ref(shape.name)}[]"
    if isinstance(shape, InlineArrayOfObject):
        return f"{render_fields(shape.fields)}[]"
    if isinstance(shape, InlineObject):
        return render_fields(shape.fields)
    if isinstance(shape, Unresolved):
        logger.warning("Unresolvable type for %s: %s", context or "property", shape.reason)
        return BOTTOM
    raise TypeError(f"Unknown property shape {shape!r}")


def resolve_property(prop: Property, context: str = "") -> str:
    return resolve_shape(prop.shape, context)


def resolve_object(properties: Mapping[str, Property], context: str = "") -> str:
    """Resolve an object definition body, fields sorted by name."""
    parts = []
    for name in sorted(properties):
        field_type = resolve_property(properties[name], f"{context}.{name}" if context else name)
        parts.append(f"{property_key(name)}:{field_type};")
    return "{" + "".join(parts) + "}"


def resolve_enum(values: Iterable[str]) -> str:
    """Resolve enum values to a union of string literals, in source order."""
    literals = []
    for value in values:
        escaped = value.replace("\\", "\\\\").replace("'", "\\'")
        literals.append(f"'{escaped}'")
    return " | ".join(literals) or BOTTOM


def resolve_definition(definition: Definition, name: str = "") -> str:
    if definition.kind is DefinitionKind.ENUM:
        return resolve_enum(definition.enum_values)
    return resolve_object(definition.properties, name)


def resolve_parameter(param: Parameter) -> str:
    """Resolve a query or path parameter, applying optionality.

    ``required: true`` keeps the type as is, ``required: false`` adds
    ``null`` and an undeclared ``required`` adds ``null`` and ``undefined``.
    """
    primitive = param.primitive_type
    if primitive is None:
        return BOTTOM

    if primitive is PrimitiveType.ARRAY:
        item = resolve_scalar(param.items_type) if param.items_type else BOTTOM
        base = f"{item}[]"
    elif primitive is PrimitiveType.OBJECT:
        logger.warning("Unresolvable type for parameter %s: object parameter", param.name)
        base = BOTTOM
    else:
        base = resolve_scalar(primitive)

    if param.required is True:
        return base
    if param.required is False:
        return union([base, NULL])
    return union([base, NULL, UNDEFINED])


def resolve_parameters(parameters: Iterable[Parameter], location: ParameterLocation) -> str:
    """Render the parameters at one location as an object literal of ``name: type`` fields."""
    fields = ", ".join(
        f"{property_key(param.name)}: {resolve_parameter(param)}"
        for param in parameters
        if param.location is location
    )
    return f"{{{fields}}}"


def resolve_schema_ref(schema: SchemaRef) -> str | None:
    """Resolve a response/body schema, or ``None`` when it names no definition."""
    if schema.reference is not None:
        return clear_ref(schema.reference)
    if schema.items_reference is not None:
        return f"{clear_ref(schema.items_reference)}[]"
    return None


def resolve_response(response: Response, context: str = "") -> str:
    """Resolve one response to a ``Promise<T>`` operand."""
    if response.schema is None:
        logger.warning(
            "No schema found for response %s%s", response.status_code, f" of {context}" if context else ""
        )
        return UNKNOWN_RESULT

    resolved = resolve_schema_ref(response.schema)
    if resolved is None:
        return UNKNOWN_RESULT
    return f"Promise<{resolved}>"


def resolve_response_union(
    responses: Mapping[str, Response],
    status_class: tuple[str, ...],
    context: str = "",
) -> str:
    """Union of the responses whose status code starts with one of ``status_class``."""
    operands = [
        resolve_response(responses[status], context)
        for status in sorted(responses)
        if status.startswith(status_class)
    ]
    return union(operands)


def resolve_body(parameters: Iterable[Parameter], context: str = "") -> str:
    """Resolve the request body type from the ``body`` parameter, if any."""
    bodies = [p for p in parameters if p.location is ParameterLocation.BODY]
    if not bodies:
        return BOTTOM
    if len(bodies) > 1:
        logger.warning("Multiple body parameters for %s, using %s", context or "operation", bodies[0].name)

    body = bodies[0]
    if body.body_schema is None:
        logger.warning("Body parameter %s has no schema", body.name)
        return BOTTOM
    return resolve_schema_ref(body.body_schema) or UNKNOWN
