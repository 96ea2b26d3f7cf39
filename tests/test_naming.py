"""Tests for the naming module."""

from makemcp.naming import (
    build_tool_name,
    is_identifier,
    server_name_from_title,
    to_identifier,
)


class TestBuildToolName:
    """Test tool name generation from HTTP method + path."""

    def test_list_pets(self):
        assert build_tool_name("GET", "/pets") == "getPets"

    def test_path_param(self):
        assert build_tool_name("GET", "/pets/{petId}") == "getPetsByPetId"

    def test_nested_path_params(self):
        assert build_tool_name("GET", "/users/{id}/orders") == "getUsersByIdOrders"

    def test_method_lowercased(self):
        assert build_tool_name("DELETE", "/users/{id}") == "deleteUsersById"

    def test_hyphenated_segment(self):
        assert build_tool_name("POST", "/pet-store/orders") == "postPetStoreOrders"

    def test_root_path(self):
        assert build_tool_name("GET", "/") == "get"

    def test_operation_id_verbatim(self):
        assert build_tool_name("GET", "/pets", "listPets") == "listPets"

    def test_illegal_operation_id_sanitized(self):
        assert build_tool_name("GET", "/pets", "list-pets") == "list_pets"

    def test_keyword_operation_id(self):
        assert build_tool_name("DELETE", "/x", "del") == "del_"

    def test_reserved_operation_id(self):
        """Names bound by the generated server get a suffix."""
        assert build_tool_name("GET", "/x", "client") == "client_"

    def test_builtin_operation_id(self):
        assert build_tool_name("GET", "/lists", "list") == "list_"
        assert build_tool_name("GET", "/strings", "str") == "str_"

    def test_valid_identifier(self):
        """Tool names must be valid identifiers."""
        name = build_tool_name("get", "/v1.0/files/{file.name}/$value")
        assert is_identifier(name)


class TestIdentifiers:
    def test_header_name(self):
        assert to_identifier("X-Request-Id") == "X_Request_Id"

    def test_keyword(self):
        assert to_identifier("from") == "from_"

    def test_leading_digit(self):
        assert to_identifier("2fa") == "_2fa"

    def test_empty(self):
        assert to_identifier("") == "param"

    def test_legal_name_unchanged(self):
        assert to_identifier("petId") == "petId"

    def test_is_identifier(self):
        assert is_identifier("getPets")
        assert not is_identifier("get-pets")
        assert not is_identifier("class")
        assert not is_identifier("1abc")
        assert not is_identifier("_url")
        assert not is_identifier("dict")
        assert not is_identifier("Exception")

    def test_builtin_parameter(self):
        assert to_identifier("str") == "str_"


class TestServerName:
    def test_slug(self):
        assert server_name_from_title("Swagger Petstore - OpenAPI 3.0") == "swagger-petstore-openapi-3-0"

    def test_empty_title(self):
        assert server_name_from_title("!!!") == "my-mcp-server"
