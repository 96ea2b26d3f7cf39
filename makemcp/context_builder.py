"""Build Jinja2 template context from finalized tool configurations.

Partitions each tool's parameters into path/query/header/body groups,
computes the required-first call signature for targets that need it,
and assembles the full context dict shared by every template.
"""

from __future__ import annotations

from typing import Any

from .errors import GenerationError
from .models import GenerateRequest, ToolConfig
from .naming import is_identifier

# Used in generated files when the document declares no base URL
PLACEHOLDER_BASE_URL = "https://api.example.com"

# Non-path parameters of these methods travel in the JSON body; all others in the query string.
_BODY_METHODS = {"POST", "PUT", "PATCH"}


def split_endpoint_id(endpoint_id: str) -> tuple[str, str]:
    """'GET-/users/{id}' -> ('GET', '/users/{id}')."""
    method, _, path = endpoint_id.partition("-")
    return method.upper(), path


def is_path_param(path: str, original_name: str) -> bool:
    """A parameter is a path parameter iff its placeholder appears in the path."""
    return "{" + original_name + "}" in path


def _classify(method: str, path: str, original_name: str, location: str) -> str:
    if is_path_param(path, original_name):
        return "path"
    if location == "header":
        return "header"
    return "body" if method in _BODY_METHODS else "query"


def required_first(params: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Stable reorder: required parameters before optional ones."""
    return sorted(params, key=lambda p: not p["required"])


def build_tool_context(tool: ToolConfig) -> dict[str, Any]:
    """Template context for one enabled tool."""
    method, path = split_endpoint_id(tool.endpoint_id)

    params: list[dict[str, Any]] = []
    for p in tool.parameters:
        params.append({
            "name": p.name,
            "wire_name": p.original_name,
            "type": p.type,
            "required": p.required,
            "description": p.description,
            "kind": _classify(method, path, p.original_name, p.location),
        })

    def of_kind(kind: str) -> list[dict[str, Any]]:
        return [p for p in params if p["kind"] == kind]

    return {
        "name": tool.tool_name,
        "description": tool.description,
        "endpoint_id": tool.endpoint_id,
        "method": method,
        "path": path,
        "params": params,
        "ordered_params": required_first(params),
        "path_params": of_kind("path"),
        "query_params": of_kind("query"),
        "header_params": of_kind("header"),
        "body_params": of_kind("body"),
    }


def _check_identifiers(tools: list[ToolConfig]) -> None:
    """Reject edited names that would produce unusable code."""
    seen: set[str] = set()
    for tool in tools:
        if not is_identifier(tool.tool_name):
            raise GenerationError(
                "invalid-identifier",
                f"tool name {tool.tool_name!r} ({tool.endpoint_id}) is not a valid identifier",
            )
        if tool.tool_name in seen:
            raise GenerationError("duplicate-tool-name", f"tool name {tool.tool_name!r} is used twice")
        seen.add(tool.tool_name)

        param_names: set[str] = set()
        for p in tool.parameters:
            if not is_identifier(p.name):
                raise GenerationError(
                    "invalid-identifier",
                    f"parameter {p.name!r} of tool {tool.tool_name!r} is not a valid identifier",
                )
            if p.name in param_names:
                raise GenerationError(
                    "invalid-identifier",
                    f"parameter {p.name!r} appears twice in tool {tool.tool_name!r}",
                )
            param_names.add(p.name)


def build_context(request: GenerateRequest) -> dict[str, Any]:
    """Build the full template context for a generation request."""
    enabled = request.enabled_tools
    if not enabled:
        raise GenerationError("no-tools-selected", "no tools selected")
    _check_identifiers(enabled)

    server, auth, export = request.server, request.auth, request.export
    api_key = auth.api_key if auth.type == "apiKey" else None

    return {
        "server": server,
        "export": export,
        "api": request.api,
        "base_url": request.api.base_url or PLACEHOLDER_BASE_URL,
        "transport": server.transport,
        "auth_type": auth.type,
        "api_key_name": api_key.name if api_key else None,
        "api_key_in_header": bool(api_key and api_key.location == "header"),
        "api_key_in_query": bool(api_key and api_key.location == "query"),
        "env_vars": auth.env_vars,
        "tools": [build_tool_context(t) for t in enabled],
        "tool_count": len(enabled),
    }
