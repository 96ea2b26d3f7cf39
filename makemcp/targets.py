"""Runtime target profiles for generated servers.

A closed set of targets, one per ``ExportConfig.language``. Each target
renders the same four artifacts (manifest, env template, entry point,
README) plus whatever support files its toolchain needs. Adding a target
means adding one class here and its templates.
"""

from __future__ import annotations

import json
from typing import Any, Callable, ClassVar

Renderer = Callable[[str, dict[str, Any]], str]


class Target:
    """Base profile; subclasses set paths and templates."""

    language: ClassVar[str]
    manifest_path: ClassVar[str]
    entry_point_path: ClassVar[str]
    entry_point_template: ClassVar[str]
    env_path: ClassVar[str] = ".env.example"
    readme_path: ClassVar[str] = "README.md"

    def __init__(self, render: Renderer) -> None:
        self._render = render

    def render_manifest(self, ctx: dict[str, Any]) -> str:
        raise NotImplementedError

    def render_env_template(self, ctx: dict[str, Any]) -> str:
        return self._render("env.example.j2", ctx)

    def render_entry_point(self, ctx: dict[str, Any]) -> str:
        return self._render(self.entry_point_template, ctx)

    def render_readme(self, ctx: dict[str, Any]) -> str:
        return self._render("README.md.j2", {**ctx, **self.readme_commands(ctx)})

    def readme_commands(self, ctx: dict[str, Any]) -> dict[str, Any]:
        raise NotImplementedError

    def extra_files(self, ctx: dict[str, Any]) -> dict[str, str]:
        return {}

    def render_files(self, ctx: dict[str, Any]) -> dict[str, str]:
        """All files for this target, in a fixed order."""
        files = {self.manifest_path: self.render_manifest(ctx)}
        files.update(self.extra_files(ctx))
        files[self.env_path] = self.render_env_template(ctx)
        files[self.entry_point_path] = self.render_entry_point(ctx)
        files[self.readme_path] = self.render_readme(ctx)
        return files


class NodeTarget(Target):
    """TypeScript server on the official MCP TypeScript SDK."""

    language = "node"
    manifest_path = "package.json"
    entry_point_path = "src/index.ts"
    entry_point_template = "node/index.ts.j2"

    def render_manifest(self, ctx: dict[str, Any]) -> str:
        server = ctx["server"]
        package = {
            "name": server.name,
            "version": server.version,
            "description": f"MCP server for {ctx['api'].title or server.name}",
            "type": "module",
            "main": "dist/index.js",
            "scripts": {
                "build": "tsc",
                "start": "node dist/index.js",
                "dev": "tsx src/index.ts",
            },
            "dependencies": {
                "@modelcontextprotocol/sdk": "^1.0.0",
                "zod": "^3.22.0",
            },
            "devDependencies": {
                "@types/node": "^20.0.0",
                "tsx": "^4.7.0",
                "typescript": "^5.3.0",
            },
        }
        return json.dumps(package, indent=2) + "\n"

    def extra_files(self, ctx: dict[str, Any]) -> dict[str, str]:
        tsconfig = {
            "compilerOptions": {
                "target": "ES2022",
                "module": "ESNext",
                "moduleResolution": "bundler",
                "strict": True,
                "esModuleInterop": True,
                "skipLibCheck": True,
                "outDir": "./dist",
                "rootDir": "./src",
            },
            "include": ["src/**/*"],
        }
        return {"tsconfig.json": json.dumps(tsconfig, indent=2) + "\n"}

    def readme_commands(self, ctx: dict[str, Any]) -> dict[str, Any]:
        pm = ctx["export"].package_manager
        run = f"{pm} run" if pm == "npm" else pm
        return {
            "install_commands": [f"{pm} install"],
            "dev_commands": [f"{run} dev"],
            "run_commands": [f"{run} build", f"{run} start"],
        }


class PythonTarget(Target):
    """Python server on FastMCP."""

    language = "python"
    manifest_path = "pyproject.toml"
    entry_point_path = "src/server.py"
    entry_point_template = "python/server.py.j2"

    def render_manifest(self, ctx: dict[str, Any]) -> str:
        return self._render("python/pyproject.toml.j2", ctx)

    def extra_files(self, ctx: dict[str, Any]) -> dict[str, str]:
        return {"src/__init__.py": ""}

    def readme_commands(self, ctx: dict[str, Any]) -> dict[str, Any]:
        if ctx["export"].package_manager == "uv":
            return {
                "install_commands": ["uv sync"],
                "dev_commands": [],
                "run_commands": ["uv run python src/server.py"],
            }
        return {
            "install_commands": ["pip install -e ."],
            "dev_commands": [],
            "run_commands": ["python src/server.py"],
        }


TARGETS: dict[str, type[Target]] = {
    NodeTarget.language: NodeTarget,
    PythonTarget.language: PythonTarget,
}


def get_target(language: str) -> type[Target]:
    """Look up the target profile for an export language."""
    try:
        return TARGETS[language]
    except KeyError:
        raise ValueError(f"unsupported language: {language!r}") from None
