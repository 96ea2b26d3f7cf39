"""Tests for the tools module (endpoint -> tool configuration)."""

import pytest

from makemcp.models import EndpointDescriptor, NormalizedSpec, RequestBody, SpecInfo, SpecParameter
from makemcp.schema_parser import normalize
from makemcp.tools import derive, derive_tools, suggest_auth


def _endpoint(method: str, path: str, **kwargs) -> EndpointDescriptor:
    return EndpointDescriptor(id=f"{method}-{path}", method=method, path=path, **kwargs)


_ORDER_BODY = RequestBody(
    required=True,
    schema={
        "type": "object",
        "required": ["status"],
        "properties": {
            "status": {"type": "string", "description": "New status"},
            "note": {"type": "string"},
            "meta": {},
        },
    },
)


class TestDerive:
    def test_name_synthesis(self):
        tool = derive(_endpoint("GET", "/pets/{petId}"))
        assert tool.tool_name == "getPetsByPetId"

    def test_operation_id_wins(self):
        tool = derive(_endpoint("GET", "/pets", operation_id="listPets"))
        assert tool.tool_name == "listPets"

    def test_starts_disabled(self):
        assert derive(_endpoint("GET", "/pets")).enabled is False

    def test_description_fallbacks(self):
        assert derive(_endpoint("GET", "/a", summary="S", description="D")).description == "S"
        assert derive(_endpoint("GET", "/a", description="D")).description == "D"
        assert derive(_endpoint("GET", "/a")).description == "GET /a"

    def test_declared_parameter_locations(self):
        tool = derive(_endpoint("GET", "/orders/{id}", parameters=[
            SpecParameter(name="id", location="path", required=True),
            SpecParameter(name="status", location="query"),
            SpecParameter(name="X-Trace", location="header"),
            SpecParameter(name="session", location="cookie"),
        ]))
        assert [(p.original_name, p.location) for p in tool.parameters] == [
            ("id", "path"),
            ("status", "query"),
            ("X-Trace", "header"),
            ("session", "header"),
        ]

    def test_body_properties_flattened(self):
        tool = derive(_endpoint("POST", "/orders", request_body=_ORDER_BODY))
        body = {p.original_name: p for p in tool.parameters}
        assert list(body) == ["status", "note", "meta"]
        assert all(p.location == "body" for p in body.values())
        assert body["status"].required is True
        assert body["status"].description == "New status"
        # Not in the schema's required list, so optional even though the body is required
        assert body["note"].required is False
        assert body["meta"].type == "object"

    def test_body_ignored_for_get(self):
        tool = derive(_endpoint("GET", "/orders", request_body=_ORDER_BODY))
        assert tool.parameters == []

    def test_all_of_body_merged(self):
        body = RequestBody(schema={"allOf": [
            {"type": "object", "properties": {"a": {"type": "string"}}, "required": ["a"]},
            {"type": "object", "properties": {"b": {"type": "integer"}}},
        ]})
        tool = derive(_endpoint("PUT", "/x", request_body=body))
        assert [(p.name, p.type, p.required) for p in tool.parameters] == [
            ("a", "string", True),
            ("b", "integer", False),
        ]

    def test_body_property_colliding_with_declared_param_dropped(self):
        body = RequestBody(schema={"properties": {"id": {"type": "string"}, "name": {"type": "string"}}})
        tool = derive(_endpoint("PATCH", "/x/{id}", request_body=body, parameters=[
            SpecParameter(name="id", location="path", required=True),
        ]))
        assert [(p.name, p.location) for p in tool.parameters] == [("id", "path"), ("name", "body")]

    def test_wire_name_kept(self):
        tool = derive(_endpoint("GET", "/x", parameters=[
            SpecParameter(name="X-Request-Id", location="header"),
            SpecParameter(name="from", location="query"),
        ]))
        assert [(p.name, p.original_name) for p in tool.parameters] == [
            ("X_Request_Id", "X-Request-Id"),
            ("from_", "from"),
        ]

    def test_sanitized_names_made_unique(self):
        tool = derive(_endpoint("GET", "/x", parameters=[
            SpecParameter(name="page-size", location="query"),
            SpecParameter(name="page_size", location="header"),
        ]))
        assert [p.name for p in tool.parameters] == ["page_size", "page_size_2"]


class TestLocationPartition:
    """Tool parameters cover the declared parameters plus body properties exactly once."""

    @pytest.mark.parametrize("method", ["GET", "POST", "PUT", "PATCH", "DELETE"])
    def test_partition(self, method):
        endpoint = _endpoint(method, "/users/{id}/orders", request_body=_ORDER_BODY, parameters=[
            SpecParameter(name="id", location="path", required=True),
            SpecParameter(name="limit", location="query"),
            SpecParameter(name="X-Trace", location="header"),
        ])
        tool = derive(endpoint)
        names = [p.original_name for p in tool.parameters]
        expected = ["id", "limit", "X-Trace"]
        if method in ("POST", "PUT", "PATCH"):
            expected += ["status", "note", "meta"]
        assert names == expected
        assert len(set(names)) == len(names)
        assert {p.location for p in tool.parameters} <= {"path", "query", "header", "body"}


class TestDeriveTools:
    def test_petstore(self, petstore_yaml):
        tools = derive_tools(normalize(petstore_yaml))
        assert [t.tool_name for t in tools] == [
            "getPets",
            "createPet",
            "getPetsByPetId",
            "deletePetsByPetId",
        ]
        assert not any(t.enabled for t in tools)

    def test_duplicate_names_suffixed(self):
        spec = NormalizedSpec(
            info=SpecInfo(title="t", version="1"),
            endpoints=[
                _endpoint("GET", "/a", operation_id="fetch"),
                _endpoint("GET", "/b", operation_id="fetch"),
                _endpoint("GET", "/c", operation_id="fetch"),
            ],
        )
        assert [t.tool_name for t in derive_tools(spec)] == ["fetch", "fetch_2", "fetch_3"]


class TestSuggestAuth:
    def _spec(self, schemes: dict) -> NormalizedSpec:
        return NormalizedSpec(info=SpecInfo(title="t", version="1"), security_schemes=schemes)

    def test_api_key(self, petstore_yaml):
        auth = suggest_auth(normalize(petstore_yaml))
        assert auth.type == "apiKey"
        assert auth.api_key.name == "X-Api-Key"
        assert auth.api_key.location == "header"

    def test_bearer(self):
        assert suggest_auth(self._spec({"jwt": {"type": "http", "scheme": "bearer"}})).type == "bearer"

    def test_basic(self):
        assert suggest_auth(self._spec({"b": {"type": "http", "scheme": "basic"}})).type == "basic"
        assert suggest_auth(self._spec({"b": {"type": "basic"}})).type == "basic"

    def test_oauth2(self):
        assert suggest_auth(self._spec({"o": {"type": "oauth2", "flows": {}}})).type == "bearer"

    def test_none(self):
        assert suggest_auth(self._spec({})).type == "none"
