"""
Jinja2 environment for the C# templates.

Templates are looked up first among in-memory overrides, then in the
packaged ``templates/`` directory (or a directory given by the caller).
Undefined payload keys fail the render instead of producing blanks.
"""

import json
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from jinja2 import (
    ChoiceLoader,
    DictLoader,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    Template,
    TemplateNotFound,
)

from .naming import to_canonical_name

DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


class TemplateError(Exception):
    """A template could not be loaded or rendered."""

    pass


def comment(value: str, marker: str = "//") -> str:
    """Prefix every non-blank line with a line-comment marker."""
    return "\n".join(
        f"{marker} {line}" if line.strip() else line for line in str(value).split("\n")
    )


def csharp_literal(value: Any) -> str:
    """C# literal for scalars; compact JSON for anything else."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        return json.dumps(value)
    return json.dumps(value, separators=(",", ":"))


FILTERS: Dict[str, Callable[..., str]] = {
    "canonical": to_canonical_name,
    "comment": comment,
    "csharp_literal": csharp_literal,
}


class TemplateEngine:
    """Renders named templates or template strings with the C# filters."""

    def __init__(self, template_dir: Optional[Path] = None):
        """
        Args:
            template_dir: Directory of ``.j2`` files; the packaged templates
                when omitted
        """
        self.template_dir = Path(template_dir) if template_dir else DEFAULT_TEMPLATE_DIR
        self._overrides = DictLoader({})

        loaders = [self._overrides]
        if self.template_dir.is_dir():
            loaders.append(FileSystemLoader(str(self.template_dir)))

        self._env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._env.filters.update(FILTERS)

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """Render a named template; any failure becomes a TemplateError."""
        try:
            template = self._env.get_template(template_name)
        except Exception as e:
            raise TemplateError(f"Cannot load template {template_name}: {e}") from e
        return self._render(template, context, template_name)

    def render_string(self, source: str, context: Dict[str, Any]) -> str:
        try:
            template = self._env.from_string(source)
        except Exception as e:
            raise TemplateError(f"Invalid template string: {e}") from e
        return self._render(template, context, "<string>")

    def _render(self, template: Template, context: Dict[str, Any], label: str) -> str:
        try:
            return template.render(**context)
        except Exception as e:
            raise TemplateError(f"Failed to render template {label}: {e}") from e

    def add_template(self, name: str, content: str):
        """Register an in-memory template; it shadows a file of the same name."""
        self._overrides.mapping[name] = content

    def template_exists(self, template_name: str) -> bool:
        try:
            self._env.get_template(template_name)
        except TemplateNotFound:
            return False
        return True


def create_template_engine(template_dir: Optional[Path] = None) -> TemplateEngine:
    """Create a template engine, defaulting to the packaged templates."""
    return TemplateEngine(template_dir)
