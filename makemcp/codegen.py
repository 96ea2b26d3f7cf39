"""Render templates and produce the generated file set.

``generate`` is a pure function of its request: no clock, no randomness,
no process-wide template state. Writing to disk and zipping are separate
steps used by the CLI.
"""

from __future__ import annotations

import io
import json
import logging
import zipfile
from functools import partial
from pathlib import Path
from typing import Any, Callable

import jinja2

from .context_builder import build_context
from .models import GenerateRequest
from .targets import get_target

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

_ZOD_TYPES: dict[str, str] = {
    "string": "z.string()",
    "integer": "z.number().int()",
    "number": "z.number()",
    "boolean": "z.boolean()",
    "array": "z.array(z.unknown())",
    "object": "z.record(z.unknown())",
}

_PYTHON_TYPES: dict[str, str] = {
    "string": "str",
    "integer": "int",
    "number": "float",
    "boolean": "bool",
    "array": "list",
    "object": "dict",
}


def zod_type(type_name: str) -> str:
    return _ZOD_TYPES.get(type_name.lower(), "z.string()")


def python_type(type_name: str) -> str:
    return _PYTHON_TYPES.get(type_name.lower(), "str")


def quote(value: Any) -> str:
    """A double-quoted literal valid in both TypeScript and Python source."""
    return json.dumps(value)


def docstring(text: str) -> str:
    """Make *text* safe inside a triple-quoted Python docstring."""
    text = text.strip().replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    if text.endswith('"'):
        text += " "
    return text


def one_line(text: str) -> str:
    return " ".join(text.split())


HELPERS: dict[str, Callable[..., Any]] = {
    "zod_type": zod_type,
    "python_type": python_type,
    "quote": quote,
    "docstring": docstring,
    "one_line": one_line,
}


def render(template_name: str, context: dict[str, Any], helpers: dict[str, Callable[..., Any]]) -> str:
    """Render one template with an explicit helper set."""
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )
    env.filters.update(helpers)
    return env.get_template(template_name).render(**context)


def generate(request: GenerateRequest) -> dict[str, str]:
    """Produce {relative path: content} for the requested target runtime."""
    context = build_context(request)
    target = get_target(request.export.language)(partial(render, helpers=HELPERS))
    files = target.render_files(context)
    logger.info(
        "Generated %d files for %s target (%d tools)",
        len(files), request.export.language, context["tool_count"],
    )
    return files


def write_files(files: dict[str, str], output_dir: Path) -> list[Path]:
    """Write a generated file set under *output_dir*."""
    written = []
    for rel_path, content in files.items():
        path = output_dir / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        written.append(path)
    return written


def build_archive(files: dict[str, str], root_name: str) -> bytes:
    """Zip a generated file set under a single ``root_name/`` directory."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9) as zf:
        for rel_path, content in files.items():
            # Fixed timestamp so identical file sets give identical archives.
            info = zipfile.ZipInfo(f"{root_name}/{rel_path}", date_time=(1980, 1, 1, 0, 0, 0))
            info.compress_type = zipfile.ZIP_DEFLATED
            info.external_attr = 0o644 << 16
            zf.writestr(info, content)
    return buf.getvalue()
