"""Derive TypeScript identifiers from schema keys and path templates.

Examples:
  definition key  models.User              -> models_User
  reference       #/definitions/models.User -> models_User
  function name   GET /users/{id}/posts    -> get_users_by_posts
  params type     /users/{id}, "get"       -> get_users_id_Params
"""

from __future__ import annotations

import re
from typing import Iterable

DEFINITIONS_PREFIX = "#/definitions/"

PARAMS_SUFFIX = "_Params"

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# Dashes and any other character a TypeScript identifier cannot hold
_NON_IDENTIFIER_CHARS = re.compile(r"[^A-Za-z0-9_$]")

# Only ``delete`` can come out of a bare method, the rest guard sanitized names
_RESERVED_WORDS = frozenset({
    "break", "case", "catch", "class", "const", "continue", "debugger", "default",
    "delete", "do", "else", "enum", "export", "extends", "false", "finally", "for",
    "function", "if", "import", "in", "instanceof", "new", "null", "return",
    "super", "switch", "this", "throw", "true", "try", "typeof", "var", "void",
    "while", "with",
})

ROOT_SUFFIX = "_root"


def normalize_key(key: str) -> str:
    """Flatten dotted namespacing in a definition key."""
    return key.replace(".", "_")


def clear_ref(ref: str) -> str:
    """Turn a ``#/definitions/...`` reference into a type name."""
    return normalize_key(ref).replace(DEFINITIONS_PREFIX, "")


def _sanitize(name: str) -> str:
    return _NON_IDENTIFIER_CHARS.sub("_", name)


def is_identifier(name: str) -> bool:
    """Check whether a name can be used unquoted as a TypeScript property key."""
    return bool(_IDENTIFIER.match(name))


def property_key(name: str) -> str:
    """Quote a property key when it is not a plain identifier."""
    if is_identifier(name):
        return name
    escaped = name.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def build_function_name(method: str, path: str) -> str:
    """Build a client function name from HTTP method and URL template.

    Path variables contribute ``by_`` instead of their name. A name that
    would be a reserved word (``DELETE /``) gets a ``_root`` suffix.
    """
    fn_name = method.lower() + "_"

    for segment in path.split("/"):
        if not segment:
            continue
        if segment.startswith("{") and segment.endswith("}"):
            fn_name += "by_"
        else:
            fn_name += segment + "_"

    fn_name = _sanitize(fn_name.rstrip("_"))
    if fn_name in _RESERVED_WORDS:
        fn_name += ROOT_SUFFIX
    return fn_name


def build_params_type_name(path: str, prefix: str | None = None) -> str:
    """Build the input-parameters type name for a URL template."""
    clear = _sanitize(path.replace("/", "_").replace("{", "").replace("}", ""))
    return f"{prefix or ''}{clear}{PARAMS_SUFFIX}"


def deduplicate_names(names: list[str], reserved: Iterable[str] = ()) -> list[str]:
    """Make names unique by appending a counter to repeated ones.

    The first occurrence keeps its name; later ones get ``_2``, ``_3``...
    Names in ``reserved`` are already declared elsewhere, so even their
    first occurrence is renamed.
    """
    reserved = set(reserved)
    seen: dict[str, int] = {}
    taken = set(names) | reserved
    result: list[str] = []
    for name in names:
        if name not in seen and name not in reserved:
            seen[name] = 1
            result.append(name)
            continue
        seen.setdefault(name, 1)
        count = seen[name]
        candidate = name
        while candidate in taken:
            count += 1
            candidate = f"{name}_{count}"
        seen[name] = count
        taken.add(candidate)
        result.append(candidate)
    return result
