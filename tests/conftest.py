"""Shared fixtures: a small OpenAPI 3 document and generation helpers."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from makemcp.models import (
    ApiInfo,
    AuthConfig,
    ExportConfig,
    GenerateRequest,
    ServerConfig,
    ToolConfig,
    ToolParameter,
)

PETSTORE_YAML = """\
openapi: 3.0.3
info:
  title: Swagger Petstore
  version: 1.0.7
servers:
  - url: https://petstore.example.com/v1
components:
  securitySchemes:
    api_key:
      type: apiKey
      name: X-Api-Key
      in: header
  parameters:
    Limit:
      name: limit
      in: query
      schema:
        type: integer
      description: How many items to return
  schemas:
    NewPet:
      type: object
      required: [name]
      properties:
        name:
          type: string
          description: Pet name
        tag:
          type: string
paths:
  /pets:
    get:
      summary: List all pets
      parameters:
        - $ref: '#/components/parameters/Limit'
    post:
      operationId: createPet
      requestBody:
        required: true
        content:
          application/json:
            schema:
              $ref: '#/components/schemas/NewPet'
  /pets/{petId}:
    parameters:
      - name: petId
        in: path
        required: true
        schema:
          type: string
    get:
      description: Info for a specific pet
    delete:
      parameters:
        - name: X-Request-Id
          in: header
          schema:
            type: string
    head:
      summary: Not a supported method
"""


@pytest.fixture
def petstore_yaml() -> str:
    return PETSTORE_YAML


def make_tool(
    endpoint_id: str,
    params: list[tuple[str, str, bool]] = (),
    tool_name: str = "doThing",
    enabled: bool = True,
    description: str = "Does a thing",
) -> ToolConfig:
    """Build a ToolConfig from (name, location, required) triples."""
    return ToolConfig(
        endpoint_id=endpoint_id,
        enabled=enabled,
        tool_name=tool_name,
        description=description,
        parameters=[
            ToolParameter(
                name=name,
                original_name=name,
                type="string",
                required=required,
                description=f"{name} parameter",
                location=location,
            )
            for name, location, required in params
        ],
    )


@pytest.fixture
def request_factory() -> Callable[..., GenerateRequest]:
    """Build a GenerateRequest with sensible defaults; kwargs override sections."""

    def _make(tools: list[ToolConfig], **kwargs: Any) -> GenerateRequest:
        return GenerateRequest(
            tools=tools,
            server=kwargs.get("server", ServerConfig(name="pets-server")),
            auth=kwargs.get("auth", AuthConfig()),
            export=kwargs.get("export", ExportConfig(language="python")),
            api=kwargs.get("api", ApiInfo(title="Pets", version="1.0", base_url="https://api.pets.test")),
        )

    return _make
