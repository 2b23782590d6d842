"""Template renderer: template name + context map in, HTML out"""

from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, select_autoescape


BUNDLED_TEMPLATES = Path(__file__).parent / "templates"
TEMPLATE_SUFFIX = ".html"


def format_date(value: Optional[str], fmt: str = "%d %B %Y") -> str:
    """Format an ISO-8601 timestamp for display; passes other values through."""
    if not value:
        return ""
    try:
        return datetime.fromisoformat(value).strftime(fmt)
    except (TypeError, ValueError):
        return str(value)


class Renderer:
    """Jinja2 environment over the content dir's templates, falling back to bundled ones."""

    def __init__(self, templates_dir: Optional[Path] = None):
        loaders = [FileSystemLoader(str(BUNDLED_TEMPLATES))]
        if templates_dir is not None and templates_dir.is_dir():
            loaders.insert(0, FileSystemLoader(str(templates_dir)))
        self._env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(["html"]),
        )
        self._env.filters["format_date"] = format_date

    def render(self, template_name: str, context: dict[str, Any]) -> str:
        """Render `<template_name>.html`. Raises jinja2.TemplateError on failure."""
        return self._env.get_template(f"{template_name}{TEMPLATE_SUFFIX}").render(**context)
