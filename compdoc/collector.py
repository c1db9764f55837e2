"""Collect component property definitions from host nodes."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from .host import COMPONENT, HostNode
from .logging import get_logger
from .models import (
    AnalysisTarget,
    OrderedPropertySet,
    PropertyDefinition,
    PropertyKind,
    TargetKind,
    clean_property_name,
)
from .ordering import order_property_keys

logger = get_logger("collector")


def collect_properties(target: AnalysisTarget) -> OrderedPropertySet:
    """Return the ordered property set for a resolved analysis target."""
    if target.is_empty or target.node is None:
        return OrderedPropertySet()
    if target.kind is TargetKind.GROUP:
        return collect_from_group(target.node)
    return collect_from_node(target.node)


def collect_from_node(node: HostNode) -> OrderedPropertySet:
    """Collect the definitions a single node exposes."""
    definitions = _parse_definitions(node.property_definitions or {}, source=node)
    return _ordered(definitions)


def collect_from_group(node: HostNode) -> OrderedPropertySet:
    """Collect a component set's definitions.

    Older files expose no definitions on the set itself; in that case the
    member components are merged, the first occurrence of each key winning.
    """
    if node.property_definitions is not None:
        return collect_from_node(node)

    logger.debug("No set-level definitions on %s; merging member components", node.name)
    merged: Dict[str, PropertyDefinition] = {}
    for member in node.children:
        if member.type != COMPONENT or member.property_definitions is None:
            continue
        for key, definition in _parse_definitions(member.property_definitions, source=member).items():
            if key in merged:
                continue
            merged[key] = definition
    return _ordered(merged)


def parse_definition(key: str, raw: Mapping[str, Any]) -> PropertyDefinition:
    """Reshape one raw host definition into a :class:`PropertyDefinition`."""
    raw_type = raw.get("type")
    kind = PropertyKind.parse(raw_type)
    definition = PropertyDefinition(
        key=key,
        name=clean_property_name(key),
        kind=kind,
        raw_type=kind.value if kind is not None else _type_label(raw_type),
    )
    if kind is not PropertyKind.VARIANT:
        definition.default_value = raw.get("defaultValue")
    preferred = raw.get("preferredValues")
    if isinstance(preferred, list):
        definition.preferred_values_raw = list(preferred)
        definition.preferred_values_count = len(preferred)
    if kind is PropertyKind.VARIANT:
        options = raw.get("variantOptions")
        if isinstance(options, list):
            definition.variant_options = [str(option) for option in options]
    return definition


def _parse_definitions(
    raw_definitions: Mapping[str, Any], *, source: Optional[HostNode] = None
) -> Dict[str, PropertyDefinition]:
    parsed: Dict[str, PropertyDefinition] = {}
    for key, raw in raw_definitions.items():
        if not isinstance(key, str) or not isinstance(raw, Mapping):
            logger.debug(
                "Ignoring malformed property definition %r on %s",
                key,
                source.name if source is not None else "<unknown>",
            )
            continue
        parsed[key] = parse_definition(key, raw)
    return parsed


def _type_label(raw_type: Any) -> str:
    return raw_type if isinstance(raw_type, str) and raw_type else "UNKNOWN"


def _ordered(definitions: Dict[str, PropertyDefinition]) -> OrderedPropertySet:
    return OrderedPropertySet(definitions=definitions, order=order_property_keys(definitions))


__all__ = [
    "collect_from_group",
    "collect_from_node",
    "collect_properties",
    "parse_definition",
]
