"""Host backed by a design-file JSON export."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from ..logging import get_logger
from .base import DOCUMENT, INSTANCE, Host, HostNode


class DocumentLoadError(RuntimeError):
    """Raised when a design file cannot be read or has an unexpected shape."""


class DocumentHost(Host):
    """Serves nodes from a file export (``name``, ``document``, ``components``).

    Instances point at their component through ``componentId``; published
    component keys listed under ``components``/``componentSets`` are accepted
    wherever a node id is.
    """

    def __init__(self, payload: Mapping[str, Any], *, selection: Sequence[str] = ()) -> None:
        if not isinstance(payload, Mapping):
            raise DocumentLoadError("Design file must contain a JSON object at the root")
        self.logger = get_logger("host")
        root_payload = payload.get("document", payload)
        if not isinstance(root_payload, Mapping):
            raise DocumentLoadError("'document' must be a JSON object")
        self._name = _as_name(payload.get("name"))
        self._nodes: Dict[str, HostNode] = {}
        self.root = self._build(root_payload, parent=None)
        self._keys: Dict[str, str] = {}
        for section in ("components", "componentSets"):
            self._index_keys(payload.get(section))
        self._pages_loaded = False
        self._selection: List[HostNode] = []
        self.select(selection)

    @classmethod
    def from_file(cls, path: Path, *, selection: Sequence[str] = ()) -> "DocumentHost":
        try:
            payload = json.loads(Path(path).read_text(encoding="utf-8"))
        except OSError as exc:
            raise DocumentLoadError(f"Unable to read {path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise DocumentLoadError(f"{path} is not valid JSON: {exc}") from exc
        return cls(payload, selection=selection)

    @property
    def document_name(self) -> str:
        return self._name

    @property
    def selection(self) -> Sequence[HostNode]:
        return tuple(self._selection)

    @property
    def pages_loaded(self) -> bool:
        return self._pages_loaded

    def select(self, node_ids: Iterable[str]) -> None:
        """Replace the selection with the given node ids, keeping their order."""
        selection: List[HostNode] = []
        for node_id in node_ids:
            node = self._lookup(node_id)
            if node is None:
                raise DocumentLoadError(f"Unknown node id in selection: {node_id}")
            selection.append(node)
        self._selection = selection

    async def load_all_pages(self) -> None:
        # Exports carry every page already; only record that the step ran.
        if not self._pages_loaded:
            self.logger.debug("All pages loaded (%d nodes)", len(self._nodes))
        self._pages_loaded = True

    async def get_node_by_id(self, node_id: str) -> Optional[HostNode]:
        return self._lookup(node_id)

    def find_all(self, predicate: Callable[[HostNode], bool]) -> List[HostNode]:
        return [node for node in self.root.walk() if predicate(node)]

    def _lookup(self, node_id: str) -> Optional[HostNode]:
        node = self._nodes.get(node_id)
        if node is None and node_id in self._keys:
            node = self._nodes.get(self._keys[node_id])
        return node

    def _build(self, data: Mapping[str, Any], parent: Optional[HostNode]) -> HostNode:
        node_id = data.get("id")
        if not isinstance(node_id, str) or not node_id:
            raise DocumentLoadError("Every node needs a string 'id'")
        if node_id in self._nodes:
            raise DocumentLoadError(f"Duplicate node id: {node_id}")
        node_type = data.get("type")
        if not isinstance(node_type, str):
            node_type = DOCUMENT if parent is None else "UNKNOWN"
        definitions = data.get("componentPropertyDefinitions")
        main_component_id = data.get("componentId") if node_type == INSTANCE else None
        node = HostNode(
            id=node_id,
            name=_as_name(data.get("name")),
            type=node_type,
            parent=parent,
            property_definitions=definitions if isinstance(definitions, Mapping) else None,
            main_component_id=main_component_id if isinstance(main_component_id, str) else None,
        )
        self._nodes[node_id] = node
        children = data.get("children") or []
        if not isinstance(children, list):
            raise DocumentLoadError(f"'children' of {node_id} must be a list")
        for child in children:
            if not isinstance(child, Mapping):
                raise DocumentLoadError(f"Child of {node_id} is not a JSON object")
            node.children.append(self._build(child, parent=node))
        return node

    def _index_keys(self, section: Any) -> None:
        if not isinstance(section, Mapping):
            return
        for node_id, meta in section.items():
            if isinstance(meta, Mapping) and isinstance(meta.get("key"), str):
                self._keys[meta["key"]] = node_id


def _as_name(value: Any) -> str:
    return value if isinstance(value, str) else ""


__all__ = ["DocumentHost", "DocumentLoadError"]
