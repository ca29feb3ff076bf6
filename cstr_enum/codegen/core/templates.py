"""
Template engine wrapper for code generation.

Provides a simple interface for Jinja2 template rendering
with the literal-formatting filters generators need.
"""

from typing import Dict, Any, Optional
from pathlib import Path

from jinja2 import (
    DictLoader,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError as JinjaTemplateError,
)


class TemplateError(Exception):
    """Exception raised for template-related errors."""

    pass


def python_bytes_literal(value: bytes) -> str:
    """Render bytes as a Python literal (``b'Apple\\x00'``)."""
    return repr(bytes(value))


def python_str_literal(value: str) -> str:
    """Render text as a Python string literal."""
    return repr(str(value))


def c_string_literal(value: bytes) -> str:
    """
    Render bytes as a C string literal.

    Non-printable bytes, quotes, backslashes and ``?`` (trigraphs) use
    three-digit octal escapes, which never absorb following characters.
    """
    parts = ['"']
    for byte in value:
        char = chr(byte)
        if 0x20 <= byte < 0x7F and char not in '"\\?':
            parts.append(char)
        else:
            parts.append(f"\\{byte:03o}")
    parts.append('"')
    return "".join(parts)


class TemplateEngine:
    """Wrapper for Jinja2 template engine with code generation utilities."""

    def __init__(self, template_dir: Optional[Path] = None):
        """
        Initialize template engine.

        Args:
            template_dir: Directory containing template files
        """
        self.template_dir = template_dir
        self._env = None
        self._setup_environment()

    def _setup_environment(self):
        """Setup Jinja2 environment with code generation utilities."""
        if self.template_dir and self.template_dir.exists():
            loader = FileSystemLoader(str(self.template_dir))
        else:
            loader = DictLoader({})

        # Generated source is not markup: never escape
        self._env = Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )

        self._env.filters["py_bytes"] = python_bytes_literal
        self._env.filters["py_str"] = python_str_literal
        self._env.filters["c_string"] = c_string_literal
        self._env.filters["comment"] = self._comment_filter

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with the given context.

        Args:
            template_name: Name of template file
            context: Variables to pass to template

        Returns:
            Rendered template content
        """
        try:
            template = self._env.get_template(template_name)
            return template.render(**context)
        except JinjaTemplateError as e:
            raise TemplateError(
                f"Failed to render template {template_name}: {str(e)}"
            ) from e

    def _comment_filter(self, value: str, style: str = "#") -> str:
        """Add comment markers to each line."""
        lines = str(value).split("\n")
        return "\n".join(f"{style} {line}" if line.strip() else style for line in lines)


def create_template_engine(template_dir: Optional[Path] = None) -> TemplateEngine:
    """Create a template engine, optionally backed by a template directory."""
    return TemplateEngine(template_dir)
