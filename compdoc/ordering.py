"""Panel-like ordering of component properties.

The host exposes property definitions as an unordered mapping, so the order
authors see in the properties panel is reconstructed from two conventions:
variant axes come first, and a boolean toggle named ``"Has X"`` sits directly
above the property ``"X"`` it controls. Everything else keeps the host order.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Set

from .models import PropertyDefinition

HAS_PREFIX = "Has "


def order_property_keys(definitions: Mapping[str, PropertyDefinition]) -> List[str]:
    """Return the keys of ``definitions`` in reconstructed panel order."""
    variant_keys = [key for key, definition in definitions.items() if definition.is_variant]
    others = [key for key, definition in definitions.items() if not definition.is_variant]

    # base name -> "Has <base>" key; a repeated base keeps the later key
    has_keys: Dict[str, str] = {}
    for key in others:
        name = definitions[key].name
        if name.startswith(HAS_PREFIX):
            has_keys[name[len(HAS_PREFIX):]] = key

    names = {definitions[key].name for key in others}
    held_back = {has_key for base, has_key in has_keys.items() if base in names}

    placed: Set[str] = set()
    ordered: List[str] = []

    def place(key: str) -> None:
        counterpart = has_keys.get(definitions[key].name)
        if counterpart is not None and counterpart not in placed:
            place(counterpart)
        ordered.append(key)
        placed.add(key)

    for key in others:
        if key in placed or key in held_back:
            continue
        place(key)

    return variant_keys + ordered


__all__ = ["HAS_PREFIX", "order_property_keys"]
