"""makemcp: OpenAPI description in, MCP tool server project out."""

from .codegen import generate
from .errors import GenerationError, ParseError
from .schema_parser import normalize
from .tools import derive, derive_tools

__all__ = ["GenerationError", "ParseError", "derive", "derive_tools", "generate", "normalize"]
