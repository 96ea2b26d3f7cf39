"""Entry point: python -m makemcp

Reads an OpenAPI description (file or URL), derives tools, and writes a
generated MCP server project.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError

from .codegen import build_archive, generate, write_files
from .config import ProjectConfig, apply_overrides, load_project
from .errors import GenerationError, ParseError
from .loader import is_url
from .models import ApiInfo, AuthConfig, ExportConfig, GenerateRequest, NormalizedSpec, ServerConfig
from .naming import server_name_from_title
from .schema_parser import normalize
from .tools import derive_tools, suggest_auth


def _load(source: str) -> NormalizedSpec:
    if is_url(source):
        return normalize(source)
    path = Path(source)
    if not path.is_file():
        raise click.BadParameter(f"file {source!r} does not exist", param_hint="SOURCE")
    return normalize(path.read_text(encoding="utf-8"))


def _merged(base: Any, flags: dict[str, Any]) -> dict[str, Any]:
    data = base.model_dump(by_alias=False, exclude_none=True) if base is not None else {}
    data.update({k: v for k, v in flags.items() if v is not None})
    return data


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """makemcp: turn an OpenAPI description into an MCP server project."""
    logging.basicConfig(
        format="%(levelname)s %(name)s: %(message)s",
        level=logging.DEBUG if verbose else logging.WARNING,
    )


@main.command()
@click.argument("source")
def inspect(source: str) -> None:
    """List the endpoints of SOURCE (file path or URL) and their tool names."""
    try:
        spec = _load(source)
    except ParseError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"{spec.info.title} {spec.info.version}")
    click.echo(f"Base URL: {spec.base_url or '(none declared)'}")
    click.echo(f"Suggested auth: {suggest_auth(spec).type}")
    click.echo(f"{len(spec.endpoints)} endpoints:")
    for tool in derive_tools(spec):
        params = ", ".join(f"{p.name}:{p.location}" for p in tool.parameters)
        click.echo(f"  {tool.endpoint_id:<40} {tool.tool_name}({params})")


@main.command("generate")
@click.argument("source")
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output directory.")
@click.option("-c", "--config", "config_path", type=click.Path(exists=True, path_type=Path), help="Project file (YAML).")
@click.option("--all", "select_all", is_flag=True, help="Enable every endpoint.")
@click.option("-s", "--select", multiple=True, help="Enable a tool by name or endpoint id (repeatable).")
@click.option("--name", default=None, help="Server name (defaults to a slug of the API title).")
@click.option("--transport", type=click.Choice(["stdio", "sse", "http"]), default=None)
@click.option("--host", default=None)
@click.option("--port", type=int, default=None)
@click.option("--language", type=click.Choice(["node", "python"]), default=None)
@click.option("--package-manager", type=click.Choice(["npm", "pnpm", "yarn", "pip", "uv"]), default=None)
@click.option("--auth", "auth_type", type=click.Choice(["none", "apiKey", "bearer", "basic"]), default=None)
@click.option("--api-key-name", default=None, help="Header or query parameter carrying the API key.")
@click.option("--api-key-in", type=click.Choice(["header", "query"]), default=None)
@click.option("--zip", "as_zip", is_flag=True, help="Write <name>.zip instead of a directory tree.")
def generate_cmd(
    source: str,
    output: Path,
    config_path: Path | None,
    select_all: bool,
    select: tuple[str, ...],
    name: str | None,
    transport: str | None,
    host: str | None,
    port: int | None,
    language: str | None,
    package_manager: str | None,
    auth_type: str | None,
    api_key_name: str | None,
    api_key_in: str | None,
    as_zip: bool,
) -> None:
    """Generate an MCP server project from SOURCE (file path or URL)."""
    try:
        project = load_project(config_path) if config_path else ProjectConfig()
        spec = _load(source)
    except (ParseError, ValidationError) as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"Parsed {spec.info.title!r}: {len(spec.endpoints)} endpoints.")
    tools = derive_tools(spec)
    apply_overrides(tools, project.tools)

    wanted = set(select)
    for tool in tools:
        if select_all or tool.tool_name in wanted or tool.endpoint_id in wanted:
            tool.enabled = True
    missing = wanted - {t.tool_name for t in tools} - {t.endpoint_id for t in tools}
    if missing:
        raise click.ClickException(f"unknown tool(s): {', '.join(sorted(missing))}")

    server_flags = {"name": name, "transport": transport, "host": host, "port": port}
    if name is None and (project.server is None or "name" not in project.server.model_fields_set):
        server_flags["name"] = server_name_from_title(spec.info.title)

    export = _merged(project.export, {})
    if language is not None and language != export.get("language"):
        export = {"language": language}
    if package_manager is not None:
        export["package_manager"] = package_manager
    export.pop("framework", None)

    auth = _merged(project.auth, {}) if project.auth else suggest_auth(spec).model_dump(exclude_none=True)
    if auth_type is not None and auth_type != auth.get("type"):
        auth = {"type": auth_type}
    if api_key_name is not None or api_key_in is not None:
        key = dict(auth.get("api_key") or {})
        if api_key_name is not None:
            key["name"] = api_key_name
        if api_key_in is not None:
            key["location"] = api_key_in
        auth["api_key"] = key

    try:
        request = GenerateRequest(
            tools=tools,
            server=ServerConfig(**_merged(project.server, server_flags)),
            auth=AuthConfig(**auth),
            export=ExportConfig(**export),
            api=ApiInfo(
                title=spec.info.title,
                version=spec.info.version,
                description=spec.info.description,
                base_url=spec.base_url,
            ),
        )
        files = generate(request)
    except ValidationError as exc:
        raise click.ClickException(str(exc)) from exc
    except GenerationError as exc:
        if exc.is_client_error:
            raise click.UsageError(str(exc)) from exc
        raise click.ClickException(str(exc)) from exc

    server_name = request.server.name
    if as_zip:
        output.mkdir(parents=True, exist_ok=True)
        archive = output / f"{server_name}.zip"
        archive.write_bytes(build_archive(files, server_name))
        click.echo(f"Wrote {archive} ({len(files)} files, {len(request.enabled_tools)} tools)")
        return

    for path in write_files(files, output):
        click.echo(f"  Created {path}")
    click.echo(f"Generated {len(files)} files in {output} ({len(request.enabled_tools)} tools)")


if __name__ == "__main__":
    main()
