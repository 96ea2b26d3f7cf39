"""Data models shared by the normalizer, the tool deriver and the generator.

Attributes are snake_case; every model also accepts the camelCase wire
names (``endpointId``, ``toolName``, ``originalName``, ``apiKey`` ...) so
editor state saved as JSON or YAML validates directly.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]
Transport = Literal["stdio", "sse", "http"]
Language = Literal["node", "python"]

# Exactly one framework per language; the field is derived, not chosen.
FRAMEWORKS: dict[str, str] = {
    "node": "mcp-ts-sdk",
    "python": "fastmcp",
}

PACKAGE_MANAGERS: dict[str, tuple[str, ...]] = {
    "node": ("npm", "pnpm", "yarn"),
    "python": ("pip", "uv"),
}


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Normalized API description
# ---------------------------------------------------------------------------

class SpecParameter(_Model):
    """A declared operation parameter (path, query, header, or cookie)."""

    model_config = ConfigDict(frozen=True)

    name: str
    location: Literal["path", "query", "header", "cookie"]
    required: bool = False
    type: str = "string"
    description: str = ""


class RequestBody(_Model):
    """The first declared content type of an operation's request body."""

    model_config = ConfigDict(frozen=True)

    required: bool = False
    content_type: str = "application/json"
    body_schema: dict[str, Any] = Field(default_factory=dict, alias="schema")


class EndpointDescriptor(_Model):
    """One HTTP operation extracted from an API description."""

    model_config = ConfigDict(frozen=True)

    id: str  # METHOD-path
    method: HttpMethod
    path: str
    parameters: list[SpecParameter] = Field(default_factory=list)
    request_body: RequestBody | None = None
    summary: str | None = None
    description: str | None = None
    operation_id: str | None = None
    tags: list[str] = Field(default_factory=list)


class SpecInfo(_Model):
    title: str
    version: str
    description: str | None = None


class NormalizedSpec(_Model):
    info: SpecInfo
    base_url: str = ""
    endpoints: list[EndpointDescriptor] = Field(default_factory=list)
    security_schemes: dict[str, Any] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Editable tool configuration
# ---------------------------------------------------------------------------

class ToolParameter(_Model):
    """A caller-visible tool argument.

    ``original_name`` is the wire name and never changes; ``name`` is what
    the LLM sees and may be edited. ``location`` is fixed at derivation time.
    """

    name: str
    original_name: str
    type: str = "string"
    required: bool = False
    description: str = ""
    location: Literal["path", "query", "header", "body"]


class ToolConfig(_Model):
    endpoint_id: str
    enabled: bool = False
    tool_name: str
    description: str
    parameters: list[ToolParameter] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Generation settings
# ---------------------------------------------------------------------------

class ServerConfig(_Model):
    name: str = "my-mcp-server"
    version: str = "1.0.0"
    host: str = "localhost"
    port: int = Field(default=3000, ge=1, le=65535)
    transport: Transport = "stdio"


class ApiKeyConfig(_Model):
    name: str
    location: Literal["header", "query"] = Field(default="header", alias="in")


class AuthConfig(_Model):
    type: Literal["none", "apiKey", "bearer", "basic"] = "none"
    api_key: ApiKeyConfig | None = None

    @model_validator(mode="after")
    def _check_api_key(self) -> "AuthConfig":
        if self.type == "apiKey" and self.api_key is None:
            raise ValueError("auth type 'apiKey' requires an apiKey {name, in} block")
        return self

    @property
    def env_vars(self) -> list[str]:
        """Credential environment variables this strategy reads."""
        if self.type == "apiKey":
            return ["API_KEY"]
        if self.type == "bearer":
            return ["BEARER_TOKEN"]
        if self.type == "basic":
            return ["BASIC_USERNAME", "BASIC_PASSWORD"]
        return []


class ExportConfig(_Model):
    language: Language = "node"
    framework: Literal["mcp-ts-sdk", "fastmcp"] | None = None
    package_manager: Literal["npm", "pnpm", "yarn", "pip", "uv"] | None = None

    @model_validator(mode="after")
    def _derive_framework(self) -> "ExportConfig":
        expected = FRAMEWORKS[self.language]
        if self.framework is None:
            self.framework = expected
        elif self.framework != expected:
            raise ValueError(
                f"framework {self.framework!r} is not available for language {self.language!r}"
                f" (expected {expected!r})"
            )

        allowed = PACKAGE_MANAGERS[self.language]
        if self.package_manager is None:
            self.package_manager = allowed[0]
        elif self.package_manager not in allowed:
            raise ValueError(
                f"package manager {self.package_manager!r} is not available for"
                f" language {self.language!r} (choose from {', '.join(allowed)})"
            )
        return self


class ApiInfo(_Model):
    """API metadata carried into generated files."""

    title: str = ""
    version: str = ""
    description: str | None = None
    base_url: str = ""


class GenerateRequest(_Model):
    tools: list[ToolConfig]
    server: ServerConfig = Field(default_factory=ServerConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    api: ApiInfo = Field(default_factory=ApiInfo)

    @property
    def enabled_tools(self) -> list[ToolConfig]:
        return [t for t in self.tools if t.enabled]
