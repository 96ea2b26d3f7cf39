"""Derive editable tool configurations from endpoint descriptors.

Every derived tool starts disabled; selecting tools is always an explicit
user act.
"""

from __future__ import annotations

from typing import Any

from .models import (
    ApiKeyConfig,
    AuthConfig,
    EndpointDescriptor,
    NormalizedSpec,
    ToolConfig,
    ToolParameter,
)
from .naming import build_tool_name, to_identifier

# Methods whose request-body properties become tool parameters
BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


def _body_properties(schema: dict[str, Any]) -> tuple[dict[str, Any], set[str]]:
    """Top-level properties and required names, with allOf members merged."""
    properties: dict[str, Any] = {}
    required: set[str] = set()
    for sub in schema.get("allOf") or []:
        if isinstance(sub, dict):
            sub_props, sub_required = _body_properties(sub)
            properties.update(sub_props)
            required |= sub_required
    properties.update(schema.get("properties") or {})
    required |= set(schema.get("required") or [])
    return properties, required


def _description(endpoint: EndpointDescriptor) -> str:
    return endpoint.summary or endpoint.description or f"{endpoint.method} {endpoint.path}"


def derive(endpoint: EndpointDescriptor) -> ToolConfig:
    """Build the default tool configuration for one endpoint."""
    params: list[ToolParameter] = []
    for p in endpoint.parameters:
        params.append(ToolParameter(
            name=to_identifier(p.name),
            original_name=p.name,
            type=p.type,
            required=p.required,
            description=p.description,
            # Cookies have no slot of their own in a tool call; they travel as headers.
            location="header" if p.location == "cookie" else p.location,
        ))

    if endpoint.method in BODY_METHODS and endpoint.request_body is not None:
        properties, required = _body_properties(endpoint.request_body.body_schema)
        declared = {p.original_name for p in params}
        for prop_name, prop_schema in properties.items():
            if prop_name in declared:
                continue
            prop_schema = prop_schema if isinstance(prop_schema, dict) else {}
            params.append(ToolParameter(
                name=to_identifier(prop_name),
                original_name=prop_name,
                type=prop_schema.get("type") if isinstance(prop_schema.get("type"), str) else "object",
                required=prop_name in required,
                description=str(prop_schema.get("description") or ""),
                location="body",
            ))

    used: set[str] = set()
    for p in params:
        base, n = p.name, 2
        while p.name in used:
            p.name = f"{base}_{n}"
            n += 1
        used.add(p.name)

    return ToolConfig(
        endpoint_id=endpoint.id,
        enabled=False,
        tool_name=build_tool_name(endpoint.method, endpoint.path, endpoint.operation_id),
        description=_description(endpoint),
        parameters=params,
    )


def _deduplicate_tool_names(tools: list[ToolConfig]) -> None:
    """Ensure all tool names are unique by appending a counter if needed."""
    taken = {t.tool_name for t in tools}
    seen: set[str] = set()
    for tool in tools:
        name = tool.tool_name
        if name in seen:
            n = 2
            while f"{name}_{n}" in taken:
                n += 1
            tool.tool_name = f"{name}_{n}"
            taken.add(tool.tool_name)
        seen.add(tool.tool_name)


def derive_tools(spec: NormalizedSpec) -> list[ToolConfig]:
    """Derive one tool per endpoint, in endpoint order, with unique names."""
    tools = [derive(e) for e in spec.endpoints]
    _deduplicate_tool_names(tools)
    return tools


def suggest_auth(spec: NormalizedSpec) -> AuthConfig:
    """Pick an auth strategy from the first declared security scheme."""
    for scheme in spec.security_schemes.values():
        if not isinstance(scheme, dict):
            continue
        kind = scheme.get("type")
        if kind == "apiKey" and scheme.get("in") in ("header", "query"):
            return AuthConfig(
                type="apiKey",
                api_key=ApiKeyConfig(name=scheme.get("name") or "X-API-Key", location=scheme["in"]),
            )
        if kind == "http" and str(scheme.get("scheme", "")).lower() == "basic":
            return AuthConfig(type="basic")
        if kind == "basic":
            return AuthConfig(type="basic")
        if kind in ("http", "oauth2", "openIdConnect"):
            return AuthConfig(type="bearer")
    return AuthConfig(type="none")
