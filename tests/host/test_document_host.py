"""Tests for the JSON-export backed host."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from compdoc.host import COMPONENT_SET, INSTANCE, DocumentHost, DocumentLoadError


def test_builds_parent_links_and_walk_order(document_builder) -> None:
    frame = document_builder.add_frame("Screen")
    inner = document_builder.add_frame("Inner", parent=frame)
    sibling = document_builder.add_frame("Sibling")
    host = document_builder.host()

    nodes = host.find_all(lambda node: node.type == "FRAME")

    assert [node.id for node in nodes] == [frame["id"], inner["id"], sibling["id"]]
    assert nodes[1].parent is nodes[0]
    assert nodes[0].parent.type == "CANVAS"
    assert host.root.parent is None


def test_instances_point_at_component_ids(document_builder) -> None:
    component = document_builder.add_component("Badge", {})
    document_builder.add_instance("Badge", component)
    host = document_builder.host()

    instance = host.find_all(lambda node: node.type == INSTANCE)[0]
    main = asyncio.run(host.get_main_component(instance))

    assert instance.main_component_id == component["id"]
    assert main is not None and main.name == "Badge"


def test_component_keys_are_accepted_as_ids(button_builder) -> None:
    host = button_builder.host()

    node = asyncio.run(host.get_node_by_id("key-menu"))

    assert node is not None and node.name == "icon/menu"
    assert asyncio.run(host.get_node_by_id("missing")) is None


def test_find_component_sets_spans_pages(document_builder) -> None:
    second_page = document_builder.add_page("Second")
    document_builder.add_component_set("First")
    document_builder.add_component_set("Other", parent=second_page)
    host = document_builder.host()

    assert [node.name for node in host.find_component_sets()] == ["First", "Other"]
    assert all(node.type == COMPONENT_SET for node in host.find_component_sets())


def test_load_all_pages_marks_pages_loaded(document_builder) -> None:
    host = document_builder.host()

    assert not host.pages_loaded
    asyncio.run(host.load_all_pages())
    assert host.pages_loaded


def test_selection_keeps_order_and_rejects_unknown_ids(document_builder) -> None:
    first = document_builder.add_frame("A")
    second = document_builder.add_frame("B")
    host = document_builder.host([second["id"], first["id"]])

    assert [node.name for node in host.selection] == ["B", "A"]
    with pytest.raises(DocumentLoadError):
        host.select(["does-not-exist"])


def test_document_name_defaults_to_empty() -> None:
    host = DocumentHost({"document": {"id": "0:0", "type": "DOCUMENT", "children": []}})

    assert host.document_name == ""


@pytest.mark.parametrize(
    "payload",
    [
        {"document": {"id": "0:0", "children": [{"name": "no id"}]}},
        {"document": {"id": "0:0", "children": [{"id": "0:0"}]}},
        {"document": {"id": "0:0", "children": "nope"}},
        {"document": []},
    ],
)
def test_malformed_payloads_raise(payload) -> None:
    with pytest.raises(DocumentLoadError):
        DocumentHost(payload)


def test_from_file_reports_unreadable_and_invalid_files(tmp_path: Path) -> None:
    with pytest.raises(DocumentLoadError):
        DocumentHost.from_file(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(DocumentLoadError):
        DocumentHost.from_file(broken)


def test_from_file_loads_export(tmp_path: Path, button_builder) -> None:
    path = tmp_path / "design.json"
    path.write_text(json.dumps(button_builder.payload()), encoding="utf-8")

    host = DocumentHost.from_file(path)

    assert host.document_name == "Design System"
    assert [node.name for node in host.find_component_sets()] == ["Button"]
