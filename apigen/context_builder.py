"""Build Jinja2 template context from a decoded Document.

Resolves every definition and operation into plain dicts for the
templates. All ordering happens here: definitions sorted by synthesized
type name, paths sorted by template, methods in HTTP_METHODS order.
"""

from __future__ import annotations

import logging
from typing import Any

from .model import HTTP_METHODS, Document, ParameterLocation
from .naming import build_function_name, build_params_type_name, deduplicate_names, normalize_key
from .type_resolver import (
    BOTTOM,
    ERROR_CLASS,
    SUCCESS_CLASS,
    resolve_body,
    resolve_definition,
    resolve_parameters,
    resolve_response_union,
)

logger = logging.getLogger(__name__)

FETCH_HELPER = "__fetcher"
MUTATE_HELPER = "__mutator"


def build_definitions(document: Document) -> list[dict[str, Any]]:
    """Resolve definitions into ``{"name", "type"}`` entries sorted by name.

    Keys that flatten to the same name (``a.b`` and ``a_b``) cannot both be
    emitted; the first key in sorted order wins and the rest are dropped
    with a warning.
    """
    resolved: dict[str, str] = {}
    sources: dict[str, str] = {}
    for key in sorted(document.definitions):
        name = normalize_key(key)
        if name in sources:
            logger.warning(
                "Definitions %s and %s both map to type %s, keeping %s",
                sources[name], key, name, sources[name],
            )
            continue
        sources[name] = key
        resolved[name] = resolve_definition(document.definitions[key], name)

    return [{"name": name, "type": resolved[name]} for name in sorted(resolved)]


def build_operations(document: Document) -> list[dict[str, Any]]:
    """Build one entry per (path, method) that has an operation."""
    operations: list[dict[str, Any]] = []

    for path in sorted(document.paths):
        path_item = document.paths[path]

        for method in HTTP_METHODS:
            operation = path_item.get_operation(method)
            if operation is None:
                continue

            context = f"{method.upper()} {path}"
            is_mutation = method != "get"
            body_type = resolve_body(operation.parameters, context) if is_mutation else BOTTOM

            operations.append({
                "path": path,
                "method": method,
                "http_method": method.upper(),
                "operation_id": operation.operation_id,
                "function_name": build_function_name(method, path),
                "params_type": build_params_type_name(path, method),
                "query_type": resolve_parameters(operation.parameters, ParameterLocation.QUERY),
                "path_type": resolve_parameters(operation.parameters, ParameterLocation.PATH),
                "response_type": resolve_response_union(operation.responses, SUCCESS_CLASS, context),
                "error_type": resolve_response_union(operation.responses, ERROR_CLASS, context),
                "is_mutation": is_mutation,
                "helper": MUTATE_HELPER if is_mutation else FETCH_HELPER,
                "body_type": body_type,
                "has_body": body_type != BOTTOM,
            })

    _assign_unique_names(operations, {normalize_key(key) for key in document.definitions})
    return operations


def _assign_unique_names(operations: list[dict[str, Any]], type_names: set[str]) -> None:
    """Ensure function and alias names are unique.

    Aliases share the type namespace with definitions, so ``type_names``
    are treated as taken.
    """
    function_names = deduplicate_names([op["function_name"] for op in operations])
    params_types = deduplicate_names([op["params_type"] for op in operations], type_names)
    aliases = {
        suffix: deduplicate_names([f"{name}_{suffix}" for name in function_names], type_names)
        for suffix in ("response", "error", "body")
    }

    for index, op in enumerate(operations):
        op["function_name"] = function_names[index]
        op["params_type"] = params_types[index]
        op["response_type_name"] = aliases["response"][index]
        op["error_type_name"] = aliases["error"][index]
        op["body_type_name"] = aliases["body"][index]


def build_context(document: Document) -> dict[str, Any]:
    """Build the full template context."""
    definitions = build_definitions(document)
    operations = build_operations(document)
    return {
        "definitions": definitions,
        "operations": operations,
        "definition_count": len(definitions),
        "operation_count": len(operations),
    }
