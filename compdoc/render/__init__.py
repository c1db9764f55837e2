"""Markdown and JSON renderers for component documents."""

from .aggregate import aggregate, aggregate_markdown, aggregate_structured
from .markdown import format_value, render_markdown
from .structured import build_structured, dumps, render_structured

__all__ = [
    "aggregate",
    "aggregate_markdown",
    "aggregate_structured",
    "build_structured",
    "dumps",
    "format_value",
    "render_markdown",
    "render_structured",
]
