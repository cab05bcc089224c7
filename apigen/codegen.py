"""Render templates and write generated output.

Takes a decoded Document, builds the template context and produces the
ordered TypeScript fragments: runtime preamble, definition aliases, then
one block per operation.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

import jinja2

from .context_builder import build_context
from .model import Document

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"


@lru_cache(maxsize=1)
def _environment() -> jinja2.Environment:
    return jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )


def render_fragments(context: dict[str, Any]) -> list[str]:
    """Render an already built context into ordered output fragments."""
    env = _environment()
    runtime = env.get_template("runtime.ts.j2")
    definition_template = env.get_template("definition.ts.j2")
    operation_template = env.get_template("operation.ts.j2")

    fragments = [runtime.render()]
    fragments.extend(
        definition_template.render(definition=definition)
        for definition in context["definitions"]
    )
    fragments.extend(
        operation_template.render(op=op)
        for op in context["operations"]
    )
    return fragments


def generate_fragments(document: Document) -> list[str]:
    """Produce the ordered output fragments for a document."""
    return render_fragments(build_context(document))


def render(document: Document) -> str:
    """Produce the complete TypeScript source for a document."""
    return "".join(generate_fragments(document))


def write_output(text: str, output_path: Path) -> Path:
    """Write generated source, creating parent directories first."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(text, encoding="utf-8")
    return output_path


def generate(document: Document, output_path: Path) -> dict[str, Any]:
    """Render a document and write it to ``output_path``.

    Returns the template context so callers can report what was generated.
    """
    context = build_context(document)
    write_output("".join(render_fragments(context)), output_path)
    logger.info(
        "Generated %s (%d definitions, %d operations)",
        output_path,
        context["definition_count"],
        context["operation_count"],
    )
    return context
