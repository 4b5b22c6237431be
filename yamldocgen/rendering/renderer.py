"""Renders synthesized documentation through Jinja2 templates."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict

from jinja2 import Environment, FileSystemLoader, TemplateError, TemplateNotFound

from ..errors import RenderError
from ..logging import get_logger
from ..models import DocumentSet

TEMPLATES: Dict[str, str] = {
    "go": "go.j2",
    "markdown": "markdown.j2",
}

_ANCHOR_STRIP = re.compile(r"[^a-z0-9_-]")


def go_string(value: object) -> str:
    """Escape free text for use inside a Go interpreted string literal."""
    text = "" if value is None else str(value)
    return (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\r", "")
        .replace("\n", "\\n")
        .strip()
    )


def anchor(value: object) -> str:
    """Markdown heading anchor for a type name."""
    return _ANCHOR_STRIP.sub("", str(value).lower().replace(" ", "-"))


class Renderer:
    """Turns a DocumentSet into target-format text."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir
        self._env = self._create_env(templates_dir)
        self.logger = get_logger("rendering")

    def render(self, document_set: DocumentSet, target: str = "go") -> str:
        template_name = TEMPLATES.get(target)
        if template_name is None:
            raise RenderError(
                f"Unknown output format {target!r}; expected one of {', '.join(sorted(TEMPLATES))}"
            )
        try:
            template = self._env.get_template(template_name)
            rendered = template.render(doc=document_set)
        except TemplateNotFound as exc:
            raise RenderError(f"Template not found: {exc.name}") from exc
        except TemplateError as exc:
            raise RenderError(f"could not execute template {template_name}: {exc}") from exc
        self.logger.debug("Rendered %d types with %s", len(document_set.structs), template_name)
        return rendered.rstrip() + "\n"

    def write(self, text: str, destination: Path) -> Path:
        path = Path(destination).expanduser().resolve()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise RenderError(f"could not create output file {path}: {exc}") from exc
        return path

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories = []
        if templates_dir:
            directories.append(str(templates_dir))
        default_dir = str(Path(__file__).with_name("templates"))
        if default_dir not in directories:
            directories.append(default_dir)
        env = Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        env.filters["go_string"] = go_string
        env.filters["anchor"] = anchor
        return env


__all__ = ["Renderer", "TEMPLATES", "anchor", "go_string"]
