"""Convert HTTP method + path to MCP tool names.

Pattern: {method}{Segment}{Segment}... with {param} segments as By{Param}

Examples:
  GET    /pets                 -> getPets
  GET    /pets/{petId}         -> getPetsByPetId
  GET    /users/{id}/orders    -> getUsersByIdOrders
  POST   /pet-store/orders     -> postPetStoreOrders
  DELETE /                     -> delete

An operationId wins over synthesis when it is already a legal identifier.
Identifiers must work in both generated targets: a Python function or
argument name, and a TypeScript object key.
"""

from __future__ import annotations

import keyword
import re

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_WORD_SPLIT = re.compile(r"[^A-Za-z0-9_]+")

# Names the generated Python server binds at module level or inside every
# tool body; a tool or argument with one of these names would shadow it.
RESERVED_NAMES: frozenset[str] = frozenset({
    "mcp",
    "client",
    "logger",
    "get_headers",
    "get_auth_params",
    "to_result",
    "os",
    "base64",
    "logging",
    "urllib",
    "httpx",
    "Any",
    "FastMCP",
    "load_dotenv",
    "API_BASE_URL",
    "API_KEY",
    "BEARER_TOKEN",
    "BASIC_USERNAME",
    "BASIC_PASSWORD",
    "_url",
    "_params",
    "_headers",
    "_body",
    "_response",
    # builtins the generated server calls or uses in annotations
    "str",
    "int",
    "float",
    "bool",
    "list",
    "dict",
    "Exception",
    "ValueError",
})


def is_identifier(name: str) -> bool:
    """True if *name* is usable as a tool or argument name in every target."""
    return (
        bool(_IDENTIFIER.match(name))
        and not keyword.iskeyword(name)
        and name not in RESERVED_NAMES
    )


def to_identifier(name: str) -> str:
    """Map an arbitrary wire name to a legal identifier.

    ``X-Request-Id`` -> ``X_Request_Id``, ``from`` -> ``from_``,
    ``2fa`` -> ``_2fa``.
    """
    ident = re.sub(r"[^A-Za-z0-9_]", "_", name)
    if not ident:
        return "param"
    if ident[0].isdigit():
        ident = "_" + ident
    if keyword.iskeyword(ident) or ident in RESERVED_NAMES:
        ident += "_"
    return ident


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:]


def _segment_words(segment: str) -> str:
    """Capitalize each word of a path segment, dropping separators."""
    return "".join(_capitalize(w) for w in _WORD_SPLIT.split(segment) if w)


def _path_suffix(path: str) -> str:
    parts: list[str] = []
    for segment in path.split("/"):
        if not segment:
            continue
        if segment.startswith("{") and segment.endswith("}"):
            parts.append("By" + _segment_words(segment[1:-1]))
        else:
            parts.append(_segment_words(segment))
    return "".join(parts)


def build_tool_name(method: str, path: str, operation_id: str | None = None) -> str:
    """Build a tool name from an operationId or from HTTP method and path.

    Returns a name like 'getPetsByPetId'.
    """
    if operation_id:
        return operation_id if is_identifier(operation_id) else to_identifier(operation_id)
    return to_identifier(method.lower() + _path_suffix(path))


def server_name_from_title(title: str) -> str:
    """Slug an API title into a default server/package name."""
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")
    return slug or "my-mcp-server"
