"""Base classes for design-tool hosts."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping, Optional, Sequence

DOCUMENT = "DOCUMENT"
CANVAS = "CANVAS"
COMPONENT_SET = "COMPONENT_SET"
COMPONENT = "COMPONENT"
INSTANCE = "INSTANCE"


@dataclass(eq=False)
class HostNode:
    """A node of the host's scene tree, as far as compdoc needs to see it."""

    id: str
    name: str
    type: str
    parent: Optional["HostNode"] = field(default=None, repr=False)
    children: List["HostNode"] = field(default_factory=list, repr=False)
    property_definitions: Optional[Mapping[str, Any]] = field(default=None, repr=False)
    main_component_id: Optional[str] = None

    def walk(self) -> List["HostNode"]:
        """Return this node and its descendants, depth-first pre-order."""
        nodes: List[HostNode] = []
        stack: List[HostNode] = [self]
        while stack:
            node = stack.pop()
            nodes.append(node)
            stack.extend(reversed(node.children))
        return nodes


class Host(ABC):
    """Contract for the design tool the extraction engine reads from."""

    @property
    @abstractmethod
    def document_name(self) -> str:
        """Name of the open workspace/document (may be empty)."""

    @property
    @abstractmethod
    def selection(self) -> Sequence[HostNode]:
        """Currently selected nodes, in selection order."""

    @abstractmethod
    async def load_all_pages(self) -> None:
        """Ensure every page of the document is loaded before a full scan."""

    @abstractmethod
    async def get_node_by_id(self, node_id: str) -> Optional[HostNode]:
        """Look up a node by identifier; may be slow or fail."""

    @abstractmethod
    def find_all(self, predicate: Callable[[HostNode], bool]) -> List[HostNode]:
        """Return every loaded node matching ``predicate``."""

    async def get_main_component(self, instance: HostNode) -> Optional[HostNode]:
        """Return the component an instance points at, if it can be found."""
        if not instance.main_component_id:
            return None
        return await self.get_node_by_id(instance.main_component_id)

    def find_component_sets(self) -> List[HostNode]:
        return self.find_all(lambda node: node.type == COMPONENT_SET)


__all__ = [
    "CANVAS",
    "COMPONENT",
    "COMPONENT_SET",
    "DOCUMENT",
    "Host",
    "HostNode",
    "INSTANCE",
]
