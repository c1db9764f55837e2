"""Markdown rendering of component documents."""

from __future__ import annotations

from typing import Any, List

from ..logging import get_logger
from ..models import Document, PropertyDefinition, PropertyKind

logger = get_logger("render.markdown")


def render_markdown(document: Document) -> str:
    """Render a resolved document as Markdown."""
    lines: List[str] = [
        f"# {document.subject_name}",
        "",
        "## Overview",
        f"- Variants: {document.member_count}",
        f"- Component Properties: {document.property_count}",
        "",
        "## Component Props",
    ]
    for definition in document.properties:
        if definition.kind is None:
            logger.debug("Skipping property %s with unsupported type %s", definition.key, definition.raw_type)
            continue
        lines.append(f"[{definition.kind.label}] **{definition.name}**  ")
        lines.extend(_property_lines(definition))
        lines.append("")
    return "\n".join(lines)


def _property_lines(definition: PropertyDefinition) -> List[str]:
    kind = definition.kind
    default = definition.default_value
    if kind is PropertyKind.BOOLEAN:
        lines = ["Values: True / False"]
        if isinstance(default, bool):
            lines.append(f"Default: {format_value(default)}")
        return lines
    if kind in (PropertyKind.TEXT, PropertyKind.NUMBER):
        if default is not None and format_value(default).strip():
            return [f"Default: {format_value(default)}"]
        return []
    if kind is PropertyKind.INSTANCE_SWAP:
        return _instance_swap_lines(definition)
    if kind is PropertyKind.VARIANT and definition.variant_options:
        return [f"Values: {', '.join(definition.variant_options)}"]
    return []


def _instance_swap_lines(definition: PropertyDefinition) -> List[str]:
    lines: List[str] = []
    default = definition.default_value
    if definition.resolved_default_name:
        lines.append(f"Default: {definition.resolved_default_name}")
    elif isinstance(default, str) and default:
        lines.append(f"Default: {default}")
    names = definition.preferred_instance_names or []
    if names:
        lines.append(f"Preferred Instances ({len(names)}): {', '.join(names)}")
    elif definition.preferred_values_count is not None:
        lines.append(f"Preferred Instances ({definition.preferred_values_count})")
    return lines


def format_value(value: Any) -> str:
    """Stringify a default value the way the design tool displays it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


__all__ = ["format_value", "render_markdown"]
