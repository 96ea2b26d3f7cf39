"""Flatten an OpenAPI 2/3 description into endpoint descriptors.

Handles:
- JSON or YAML text, or a URL to fetch
- $ref resolution before extraction
- Base URL from servers[0] (with variable defaults) or Swagger host/basePath
- Path-item level parameters shared by every operation
- Parameter type from schema.type, then inline type, then "string"
- OpenAPI 3 requestBody (first content type only)
- Swagger 2 body / formData parameters folded into a request body
"""

from __future__ import annotations

import logging
import re
from typing import Any
from urllib.parse import urljoin

from pydantic import ValidationError

from .errors import ParseError
from .loader import (
    DEFAULT_TIMEOUT,
    dereference,
    fetch_text,
    get_paths,
    get_security_schemes,
    is_url,
    parse_document,
)
from .models import EndpointDescriptor, NormalizedSpec, RequestBody, SpecInfo, SpecParameter

logger = logging.getLogger(__name__)

# Supported operations, in emission order. HEAD/OPTIONS/TRACE are left out on purpose.
METHODS: tuple[str, ...] = ("get", "post", "put", "patch", "delete")

_DECLARED_LOCATIONS = {"path", "query", "header", "cookie"}


def _text(value: Any) -> str | None:
    """Metadata as text; YAML reads yes, 123 or dates as other types."""
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _substitute_server_variables(url: str, variables: dict[str, Any]) -> str:
    def repl(match: re.Match[str]) -> str:
        var = variables.get(match.group(1)) or {}
        default = var.get("default") if isinstance(var, dict) else None
        return str(default) if default is not None else match.group(0)

    return re.sub(r"\{([^{}]+)\}", repl, url)


def resolve_base_url(spec: dict[str, Any], source_url: str | None = None) -> str:
    """servers[0].url, else scheme://host + basePath, else ''."""
    servers = spec.get("servers") or []
    if servers and isinstance(servers[0], dict) and servers[0].get("url"):
        server = servers[0]
        url = _substitute_server_variables(str(server["url"]), server.get("variables") or {})
        if source_url and "://" not in url:
            url = urljoin(source_url, url)
        return url

    host = spec.get("host")
    if host:
        schemes = spec.get("schemes") or ["https"]
        return f"{schemes[0]}://{host}{spec.get('basePath') or ''}"

    return ""


def resolve_parameter_type(param: dict[str, Any]) -> str:
    """Schema type, then legacy inline type, then 'string'."""
    schema = param.get("schema")
    if isinstance(schema, dict) and isinstance(schema.get("type"), str):
        return schema["type"]
    if isinstance(param.get("type"), str):
        return param["type"]
    return "string"


def _merge_parameters(shared: list[Any], own: list[Any]) -> list[dict[str, Any]]:
    """Path-item parameters first; operation parameters override by (name, in)."""
    merged: dict[tuple[str, str], dict[str, Any]] = {}
    for param in list(shared) + list(own):
        if isinstance(param, dict) and "name" in param:
            merged[(param["name"], param.get("in", "query"))] = param
    return list(merged.values())


def _request_body_v3(body: dict[str, Any]) -> RequestBody:
    content = body.get("content") or {}
    content_type = next(iter(content), "application/json")
    media = content.get(content_type) or {}
    return RequestBody(
        required=bool(body.get("required", False)),
        content_type=content_type,
        schema=media.get("schema") or {},
    )


def _request_body_v2(
    params: list[dict[str, Any]],
    consumes: list[str],
) -> RequestBody | None:
    body = next((p for p in params if p.get("in") == "body"), None)
    if body is not None:
        return RequestBody(
            required=bool(body.get("required", False)),
            content_type=consumes[0] if consumes else "application/json",
            schema=body.get("schema") or {},
        )

    form = [p for p in params if p.get("in") == "formData"]
    if not form:
        return None
    properties: dict[str, Any] = {}
    required: list[str] = []
    for p in form:
        prop = {"type": p.get("type", "string")}
        if p.get("description"):
            prop["description"] = p["description"]
        properties[p["name"]] = prop
        if p.get("required"):
            required.append(p["name"])
    has_file = any(p.get("type") == "file" for p in form)
    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return RequestBody(
        required=bool(required),
        content_type="multipart/form-data" if has_file else "application/x-www-form-urlencoded",
        schema=schema,
    )


def parse_parameters(params: list[dict[str, Any]]) -> list[SpecParameter]:
    """Declared path/query/header/cookie parameters, in declaration order."""
    result: list[SpecParameter] = []
    for param in params:
        location = param.get("in", "query")
        if location not in _DECLARED_LOCATIONS:
            continue
        result.append(SpecParameter(
            name=str(param["name"]),
            location=location,
            required=bool(param.get("required", False)),
            type=resolve_parameter_type(param),
            description=_text(param.get("description")) or "",
        ))
    return result


def parse_operation(
    spec: dict[str, Any],
    method: str,
    path: str,
    path_item: dict[str, Any],
) -> EndpointDescriptor:
    operation = path_item[method]
    params = _merge_parameters(path_item.get("parameters") or [], operation.get("parameters") or [])

    if isinstance(operation.get("requestBody"), dict):
        request_body = _request_body_v3(operation["requestBody"])
    else:
        consumes = operation.get("consumes") or spec.get("consumes") or []
        request_body = _request_body_v2(params, consumes)

    return EndpointDescriptor(
        id=f"{method.upper()}-{path}",
        method=method.upper(),
        path=path,
        parameters=parse_parameters(params),
        request_body=request_body,
        summary=_text(operation.get("summary")),
        description=_text(operation.get("description")),
        operation_id=_text(operation.get("operationId")),
        tags=[str(t) for t in operation.get("tags") or []],
    )


def normalize_document(doc: Any, source_url: str | None = None) -> NormalizedSpec:
    """Normalize an already-parsed document."""
    if not isinstance(doc, dict):
        raise ParseError("schema", "document is not a mapping")
    info = doc.get("info")
    paths = doc.get("paths")
    if not isinstance(info, dict) or not isinstance(paths, dict):
        raise ParseError("schema", "document must declare 'info' and 'paths'")

    spec = dereference(doc)

    endpoints: list[EndpointDescriptor] = []
    seen: set[str] = set()
    for path, path_item in get_paths(spec).items():
        if not isinstance(path_item, dict):
            logger.debug("Skipping non-mapping path item %s", path)
            continue
        for method in METHODS:
            if not isinstance(path_item.get(method), dict):
                continue
            try:
                endpoint = parse_operation(spec, method, str(path), path_item)
            except ValidationError as exc:
                raise ParseError("schema", f"{method.upper()} {path}: {exc}") from exc
            if endpoint.id in seen:
                raise ParseError("duplicate-endpoint", f"{endpoint.id} is declared more than once")
            seen.add(endpoint.id)
            endpoints.append(endpoint)

    info = spec["info"]
    try:
        normalized = NormalizedSpec(
            info=SpecInfo(
                title=str(info.get("title") or ""),
                version=str(info.get("version") or ""),
                description=_text(info.get("description")),
            ),
            base_url=resolve_base_url(spec, source_url),
            endpoints=endpoints,
            security_schemes=get_security_schemes(spec),
        )
    except ValidationError as exc:
        raise ParseError("schema", str(exc)) from exc
    logger.info(
        "Normalized %r: %d endpoints from %d paths",
        normalized.info.title, len(endpoints), len(paths),
    )
    return normalized


def normalize(source: str, *, timeout: float = DEFAULT_TIMEOUT) -> NormalizedSpec:
    """Normalize raw JSON/YAML text, or the document behind an http(s) URL."""
    source_url: str | None = None
    text = source
    if is_url(source):
        source_url = source.strip()
        text = fetch_text(source_url, timeout=timeout)
    return normalize_document(parse_document(text), source_url=source_url)
