"""Project files: saved generation settings and per-tool edits.

A project file is YAML (or JSON) shaped like::

    server: {name: petstore, transport: sse, port: 8080}
    auth: {type: apiKey, apiKey: {name: X-Api-Key, in: header}}
    export: {language: python, packageManager: uv}
    tools:
      getPetsByPetId:               # derived tool name or endpoint id
        enabled: true
        toolName: get_pet
        parameters:
          petId: {name: pet_id}     # keyed by original (wire) name

Edits are applied to freshly derived tools; a parameter keeps its
location and wire name whatever it is renamed to.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .models import AuthConfig, ExportConfig, ServerConfig, ToolConfig

logger = logging.getLogger(__name__)


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class ParameterOverride(_Model):
    name: str | None = None
    description: str | None = None


class ToolOverride(_Model):
    enabled: bool | None = None
    tool_name: str | None = None
    description: str | None = None
    parameters: dict[str, ParameterOverride] = Field(default_factory=dict)


class ProjectConfig(_Model):
    server: ServerConfig | None = None
    auth: AuthConfig | None = None
    export: ExportConfig | None = None
    tools: dict[str, ToolOverride] = Field(default_factory=dict)


def load_project(path: Path) -> ProjectConfig:
    """Read and validate a project file."""
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return ProjectConfig.model_validate(data)


def apply_overrides(tools: list[ToolConfig], overrides: dict[str, ToolOverride]) -> list[str]:
    """Apply per-tool edits in place.

    Returns the override keys that matched no tool, so callers can warn.
    """
    by_key: dict[str, ToolConfig] = {}
    for tool in tools:
        by_key[tool.tool_name] = tool
        by_key[tool.endpoint_id] = tool

    unmatched: list[str] = []
    for key, override in overrides.items():
        tool = by_key.get(key)
        if tool is None:
            unmatched.append(key)
            continue
        if override.enabled is not None:
            tool.enabled = override.enabled
        if override.tool_name is not None:
            tool.tool_name = override.tool_name
        if override.description is not None:
            tool.description = override.description
        for param in tool.parameters:
            edit = override.parameters.get(param.original_name)
            if edit is None:
                continue
            if edit.name is not None:
                param.name = edit.name
            if edit.description is not None:
                param.description = edit.description

    for key in unmatched:
        logger.warning("Project file edits %r, which matches no endpoint", key)
    return unmatched
