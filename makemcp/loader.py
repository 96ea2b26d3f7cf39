"""Load an OpenAPI description and resolve its internal references.

Accepts raw JSON/YAML text or an http(s) URL. Parsing rejects duplicate
mapping keys so two declarations of the same path cannot silently shadow
each other.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Hashable
from typing import Any

import httpx
import yaml

from .errors import ParseError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class _DuplicateKey(Exception):
    def __init__(self, key: Any) -> None:
        super().__init__(key)
        self.key = key


def is_url(source: str) -> bool:
    """True if *source* looks like an http(s) URL rather than document text."""
    head = source.lstrip()[:8].lower()
    return head.startswith(("http://", "https://")) and "\n" not in source.strip()


def fetch_text(url: str, timeout: float = DEFAULT_TIMEOUT) -> str:
    """Fetch a spec document over HTTP."""
    logger.info("Fetching API description from %s", url)
    try:
        resp = httpx.get(url, timeout=timeout, follow_redirects=True)
        resp.raise_for_status()
    except httpx.HTTPError as exc:
        raise ParseError("fetch", f"could not fetch {url}: {exc}") from exc
    return resp.text


# ---------------------------------------------------------------------------
# JSON / YAML parsing with duplicate-key detection
# ---------------------------------------------------------------------------

def _strict_pairs(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise _DuplicateKey(key)
        result[key] = value
    return result


class _StrictLoader(yaml.SafeLoader):
    """SafeLoader that refuses repeated keys in a mapping."""


def _construct_strict_mapping(loader: _StrictLoader, node: yaml.MappingNode, deep: bool = False) -> dict:
    loader.flatten_mapping(node)
    mapping: dict[Any, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if not isinstance(key, Hashable):
            raise yaml.constructor.ConstructorError(
                "while constructing a mapping", node.start_mark,
                "found unhashable key", key_node.start_mark,
            )
        if key in mapping:
            raise _DuplicateKey(key)
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


_StrictLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_strict_mapping,
)


def _duplicate_error(exc: _DuplicateKey) -> ParseError:
    key = exc.key
    if isinstance(key, str) and key.startswith("/"):
        return ParseError("duplicate-endpoint", f"path {key!r} is declared more than once")
    return ParseError("syntax", f"duplicate key {key!r}")


def parse_document(text: str) -> Any:
    """Parse JSON, falling back to YAML."""
    try:
        return json.loads(text, object_pairs_hook=_strict_pairs)
    except _DuplicateKey as exc:
        raise _duplicate_error(exc) from None
    except ValueError:
        pass

    try:
        return yaml.load(text, Loader=_StrictLoader)  # noqa: S506 - SafeLoader subclass
    except _DuplicateKey as exc:
        raise _duplicate_error(exc) from None
    except yaml.YAMLError as exc:
        raise ParseError("syntax", f"not valid JSON or YAML: {exc}") from exc


# ---------------------------------------------------------------------------
# $ref resolution
# ---------------------------------------------------------------------------

def _unescape(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


def resolve_ref(spec: dict[str, Any], ref: str) -> Any:
    """Resolve a local ``#/...`` pointer in the document."""
    if not ref.startswith("#"):
        raise ParseError("unresolvable-reference", f"external reference {ref!r} is not supported")
    pointer = ref[1:]
    node: Any = spec
    if not pointer:
        return node
    for part in pointer.lstrip("/").split("/"):
        part = _unescape(part)
        if isinstance(node, dict) and part in node:
            node = node[part]
        elif isinstance(node, list) and part.isdigit() and int(part) < len(node):
            node = node[int(part)]
        else:
            raise ParseError("unresolvable-reference", f"reference {ref!r} does not resolve")
    return node


def dereference(spec: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of *spec* with every internal ``$ref`` inlined.

    A reference that would recurse into itself is left as a ``$ref`` node.
    Sibling keys next to a ``$ref`` are merged over the resolved target.
    """

    def walk(node: Any, stack: tuple[str, ...]) -> Any:
        if isinstance(node, dict):
            ref = node.get("$ref")
            if isinstance(ref, str):
                if ref in stack:
                    return dict(node)
                target = walk(resolve_ref(spec, ref), stack + (ref,))
                siblings = {k: walk(v, stack) for k, v in node.items() if k != "$ref"}
                if siblings and isinstance(target, dict):
                    return {**target, **siblings}
                return target
            return {k: walk(v, stack) for k, v in node.items()}
        if isinstance(node, list):
            return [walk(item, stack) for item in node]
        return node

    return walk(spec, ())


def get_paths(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract paths from the document."""
    return spec.get("paths") or {}


def get_security_schemes(spec: dict[str, Any]) -> dict[str, Any]:
    """Declared security schemes (OpenAPI 3 components, else Swagger 2)."""
    components = spec.get("components") or {}
    return components.get("securitySchemes") or spec.get("securityDefinitions") or {}
