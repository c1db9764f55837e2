"""JSON rendering of component documents."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from ..models import Document, PropertyDefinition, PropertyKind
from .markdown import format_value

_PLAIN_KINDS = (PropertyKind.BOOLEAN, PropertyKind.TEXT, PropertyKind.NUMBER)


def build_structured(document: Document) -> Dict[str, Any]:
    """Return the structured payload for a resolved document."""
    definitions = list(document.properties)
    return {
        "name": document.subject_name,
        "overview": {
            "variantsCount": document.member_count,
            "componentPropsCount": document.property_count,
        },
        "componentProps": [definition_record(definition) for definition in definitions],
        "pretty": {
            "componentProps": [
                pretty_record(definition) for definition in definitions if definition.kind is not None
            ]
        },
    }


def render_structured(document: Document) -> str:
    return dumps(build_structured(document))


def dumps(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


def definition_record(definition: PropertyDefinition) -> Dict[str, Any]:
    """Full definition as collected, with unset fields left out."""
    record: Dict[str, Any] = {"name": definition.name, "type": definition.raw_type}
    optional = (
        ("defaultValue", definition.default_value),
        ("preferredValuesCount", definition.preferred_values_count),
        ("preferredValuesRaw", definition.preferred_values_raw),
        ("preferredInstanceNames", definition.preferred_instance_names or None),
        ("variantOptions", definition.variant_options),
    )
    for field_name, value in optional:
        if value is not None:
            record[field_name] = value
    return record


def pretty_record(definition: PropertyDefinition) -> Dict[str, Any]:
    """Kind-specific projection holding only the fields that mean something."""
    record: Dict[str, Any] = {"name": definition.name, "type": definition.raw_type}
    kind = definition.kind
    if kind in _PLAIN_KINDS:
        default = definition.default_value
        # Blank defaults are omitted, matching the Markdown stanza.
        if default is not None and format_value(default).strip():
            record["default"] = default
    elif kind is PropertyKind.INSTANCE_SWAP:
        default = definition.resolved_default_name
        if not default and isinstance(definition.default_value, str) and definition.default_value:
            default = definition.default_value
        if default:
            record["default"] = default
        if definition.preferred_values_count is not None:
            record["preferredInstancesCount"] = definition.preferred_values_count
        if definition.preferred_instance_names:
            record["preferredInstances"] = list(definition.preferred_instance_names)
    elif kind is PropertyKind.VARIANT:
        if definition.variant_options:
            record["values"] = list(definition.variant_options)
    return record


__all__ = [
    "build_structured",
    "definition_record",
    "dumps",
    "pretty_record",
    "render_structured",
]
