"""
Jinja2 rendering for generated source.

Backends keep their templates in memory and look them up by name; every
template renders with strict undefined handling so a missing context key
fails the render instead of emitting an empty string.
"""

from typing import Any, Callable, Dict, Mapping, Optional

from jinja2 import DictLoader, Environment, StrictUndefined


class TemplateError(Exception):
    """Exception raised for template-related errors."""

    pass


def indent_lines(value: str, spaces: int = 4) -> str:
    """Indent every non-blank line."""
    prefix = " " * spaces
    return "\n".join(prefix + line if line.strip() else line for line in str(value).split("\n"))


def comment_lines(value: str, style: str = "//") -> str:
    """Prefix every line with a line-comment marker; blank lines get the bare marker."""
    return "\n".join(f"{style} {line}".rstrip() for line in str(value).split("\n"))


class TemplateEngine:
    """In-memory template store around a Jinja2 environment."""

    def __init__(self, templates: Optional[Mapping[str, str]] = None):
        self._templates: Dict[str, str] = dict(templates or {})
        self._env = Environment(
            loader=DictLoader(self._templates),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self._env.filters["indent"] = indent_lines
        self._env.filters["comment"] = comment_lines

    def add_filter(self, name: str, func: Callable[..., Any]) -> None:
        self._env.filters[name] = func

    def add_template(self, name: str, content: str) -> None:
        # DictLoader reads the mapping on every lookup
        self._templates[name] = content

    def template_exists(self, template_name: str) -> bool:
        return template_name in self._templates

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a named template.

        Raises:
            TemplateError: If the template is missing or rendering fails
        """
        try:
            return self._env.get_template(template_name).render(**context)
        except Exception as e:
            raise TemplateError(f"Failed to render template {template_name}: {e}") from e

    def render_string(self, template_string: str, context: Dict[str, Any]) -> str:
        try:
            return self._env.from_string(template_string).render(**context)
        except Exception as e:
            raise TemplateError(f"Failed to render template string: {e}") from e


def create_template_engine(
    templates: Optional[Mapping[str, str]] = None,
    filters: Optional[Mapping[str, Callable[..., Any]]] = None,
) -> TemplateEngine:
    """Create an engine preloaded with templates and extra filters."""
    engine = TemplateEngine(templates)
    for name, func in (filters or {}).items():
        engine.add_filter(name, func)
    return engine
