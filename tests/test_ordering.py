"""Tests for the panel-order heuristic."""

from __future__ import annotations

import itertools
from typing import Dict, Mapping

from compdoc.collector import parse_definition
from compdoc.models import PropertyDefinition
from compdoc.ordering import order_property_keys


def _definitions(raw: Mapping[str, str]) -> Dict[str, PropertyDefinition]:
    return {key: parse_definition(key, {"type": kind}) for key, kind in raw.items()}


def _names(definitions: Mapping[str, PropertyDefinition], order) -> list[str]:
    return [definitions[key].name for key in order]


def test_variants_lead_and_keep_host_order() -> None:
    definitions = _definitions(
        {
            "Label#3:0": "TEXT",
            "Size#1": "VARIANT",
            "Disabled#4:0": "BOOLEAN",
            "State#2": "VARIANT",
        }
    )

    order = order_property_keys(definitions)

    assert order == ["Size#1", "State#2", "Label#3:0", "Disabled#4:0"]


def test_has_toggle_moves_in_front_of_its_property() -> None:
    definitions = _definitions(
        {
            "Left Icon#1:0": "INSTANCE_SWAP",
            "Text#2:0": "TEXT",
            "Has Left Icon#3:0": "BOOLEAN",
        }
    )

    order = order_property_keys(definitions)

    assert _names(definitions, order) == ["Has Left Icon", "Left Icon", "Text"]


def test_has_toggle_listed_earlier_still_lands_directly_before_its_property() -> None:
    definitions = _definitions(
        {
            "Has Right Icon#1:0": "BOOLEAN",
            "Text#2:0": "TEXT",
            "Right Icon#3:0": "INSTANCE_SWAP",
        }
    )

    order = order_property_keys(definitions)

    assert _names(definitions, order) == ["Text", "Has Right Icon", "Right Icon"]


def test_has_toggle_without_counterpart_stays_in_place() -> None:
    definitions = _definitions(
        {
            "Label#1:0": "TEXT",
            "Has Badge#2:0": "BOOLEAN",
            "Icon#3:0": "INSTANCE_SWAP",
        }
    )

    assert order_property_keys(definitions) == ["Label#1:0", "Has Badge#2:0", "Icon#3:0"]


def test_toggle_pairs_with_first_property_sharing_the_display_name() -> None:
    definitions = _definitions(
        {
            "Icon#1:0": "INSTANCE_SWAP",
            "Icon#2:0": "INSTANCE_SWAP",
            "Has Icon#3:0": "BOOLEAN",
        }
    )

    assert order_property_keys(definitions) == ["Has Icon#3:0", "Icon#1:0", "Icon#2:0"]


def test_nested_has_prefixes_chain_in_front_of_each_other() -> None:
    definitions = _definitions(
        {
            "Icon#1:0": "INSTANCE_SWAP",
            "Has Has Icon#2:0": "BOOLEAN",
            "Has Icon#3:0": "BOOLEAN",
        }
    )

    assert _names(definitions, order_property_keys(definitions)) == [
        "Has Has Icon",
        "Has Icon",
        "Icon",
    ]


def test_order_is_a_permutation_with_every_invariant_for_all_input_orders() -> None:
    raw = {
        "Size#1": "VARIANT",
        "Has Left Icon#2:0": "BOOLEAN",
        "Left Icon#3:0": "INSTANCE_SWAP",
        "Has Badge#4:0": "BOOLEAN",
        "Label#5:0": "TEXT",
        "Count#6:0": "NUMBER",
        "Tone#7": "VARIANT",
    }
    for permutation in itertools.permutations(raw.items()):
        definitions = _definitions(dict(permutation))
        order = order_property_keys(definitions)

        assert sorted(order) == sorted(definitions)
        assert len(order) == len(set(order))

        kinds = [definitions[key].is_variant for key in order]
        assert kinds == sorted(kinds, reverse=True)

        names = _names(definitions, order)
        assert names[names.index("Has Left Icon") + 1] == "Left Icon"

        assert order_property_keys(definitions) == order


def test_empty_definitions_produce_empty_order() -> None:
    assert order_property_keys({}) == []
