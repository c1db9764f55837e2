"""Tests for JSON rendering and batch aggregation."""

from __future__ import annotations

import asyncio
import json

from compdoc.collector import parse_definition
from compdoc.generator import DocumentGenerator
from compdoc.models import (
    AnalysisTarget,
    Document,
    ItemFailure,
    ItemSuccess,
    OrderedPropertySet,
    OutputFormat,
)
from compdoc.render import (
    aggregate,
    aggregate_markdown,
    aggregate_structured,
    build_structured,
    render_markdown,
)
from compdoc.render.aggregate import SEPARATOR

from tests._fixtures.document_builder import boolean, instance_swap, number, text


def _document(raw) -> Document:
    definitions = {key: parse_definition(key, value) for key, value in raw.items()}
    return Document(
        subject_name="Sample",
        member_count=2,
        properties=OrderedPropertySet(definitions=definitions, order=list(definitions)),
    )


def test_button_payload(button_builder) -> None:
    host = button_builder.host()
    generator = DocumentGenerator(host)
    document = asyncio.run(generator.build(AnalysisTarget.group(host.find_component_sets()[0])))

    payload = build_structured(document)

    assert payload["name"] == "Button"
    assert payload["overview"] == {"variantsCount": 105, "componentPropsCount": 5}
    assert [prop["name"] for prop in payload["componentProps"]] == [
        "Size",
        "Variant",
        "Has Left Icon",
        "Left Icon",
        "Text",
    ]
    left_icon = payload["componentProps"][3]
    assert left_icon["type"] == "INSTANCE_SWAP"
    assert left_icon["preferredValuesCount"] == 3
    assert left_icon["preferredInstanceNames"] == ["icon/chevron-left", "icon/back", "icon/menu"]
    assert payload["pretty"]["componentProps"][3] == {
        "name": "Left Icon",
        "type": "INSTANCE_SWAP",
        "default": "dashboard_customize",
        "preferredInstancesCount": 3,
        "preferredInstances": ["icon/chevron-left", "icon/back", "icon/menu"],
    }
    assert payload["pretty"]["componentProps"][0] == {
        "name": "Size",
        "type": "VARIANT",
        "values": ["L", "M", "S"],
    }
    assert "defaultValue" not in payload["componentProps"][0]


def test_pretty_projection_for_plain_kinds() -> None:
    payload = build_structured(
        _document(
            {
                "Disabled": boolean(False),
                "Label": text(),
                "Count": number(4),
                "Empty": text(""),
                "Blank": text("   "),
            }
        )
    )

    assert payload["pretty"]["componentProps"] == [
        {"name": "Disabled", "type": "BOOLEAN", "default": False},
        {"name": "Label", "type": "TEXT"},
        {"name": "Count", "type": "NUMBER", "default": 4},
        {"name": "Empty", "type": "TEXT"},
        {"name": "Blank", "type": "TEXT"},
    ]
    assert payload["componentProps"][0]["defaultValue"] is False
    assert payload["componentProps"][4]["defaultValue"] == "   "


def test_blank_text_default_agrees_across_formats() -> None:
    document = _document({"Blank": text("   ")})

    assert "Default:" not in render_markdown(document)
    assert "default" not in build_structured(document)["pretty"]["componentProps"][0]


def test_unresolved_instance_swap_keeps_raw_values() -> None:
    payload = build_structured(_document({"Icon": instance_swap("9:99", [{"key": "a"}])}))

    record = payload["componentProps"][0]
    assert record["defaultValue"] == "9:99"
    assert record["preferredValuesRaw"] == [{"key": "a"}]
    assert "preferredInstanceNames" not in record
    assert payload["pretty"]["componentProps"][0] == {
        "name": "Icon",
        "type": "INSTANCE_SWAP",
        "default": "9:99",
        "preferredInstancesCount": 1,
    }


def test_unknown_kind_kept_in_full_list_only() -> None:
    payload = build_structured(_document({"Slot": {"type": "SLOT"}}))

    assert payload["overview"]["componentPropsCount"] == 1
    assert payload["componentProps"] == [{"name": "Slot", "type": "SLOT"}]
    assert payload["pretty"]["componentProps"] == []


def test_aggregate_markdown_substitutes_failure_stanza() -> None:
    outcomes = [
        ItemSuccess(subject_name="Button", markdown="# Button"),
        ItemFailure(subject_name="Broken", reason="boom"),
        ItemSuccess(subject_name="Chip", markdown="# Chip"),
    ]

    content = aggregate_markdown(outcomes)

    assert content.split(SEPARATOR) == [
        "# Button",
        "# Broken\n\n> ⚠️ Failed to generate this Component Set. Skipped.",
        "# Chip",
    ]


def test_aggregate_structured_envelope() -> None:
    outcomes = [
        ItemSuccess(subject_name="Button", structured={"name": "Button"}),
        ItemFailure(subject_name="Broken", reason="Failed to generate this Component Set"),
    ]

    payload = aggregate_structured("Design System", outcomes)

    assert payload == {
        "document": "Design System",
        "count": 2,
        "items": [
            {"name": "Button"},
            {"name": "Broken", "error": "Failed to generate this Component Set"},
        ],
    }


def test_aggregate_json_is_pretty_printed_unicode() -> None:
    content = aggregate("Café", OutputFormat.JSON, [])

    assert json.loads(content) == {"document": "Café", "count": 0, "items": []}
    assert "Café" in content
    assert content.startswith("{\n  ")


def test_aggregate_markdown_of_nothing_is_empty() -> None:
    assert aggregate("Doc", OutputFormat.MD, []) == ""
