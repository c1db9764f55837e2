"""Core data models shared across compdoc components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Sequence, Union

from .host.base import COMPONENT, HostNode

PROPERTY_KEY_DELIMITER = "#"


class OutputFormat(str, Enum):
    MD = "md"
    JSON = "json"

    @property
    def mime(self) -> str:
        return "text/markdown" if self is OutputFormat.MD else "application/json"


class PropertyKind(str, Enum):
    """Closed set of component property kinds."""

    BOOLEAN = "BOOLEAN"
    TEXT = "TEXT"
    NUMBER = "NUMBER"
    INSTANCE_SWAP = "INSTANCE_SWAP"
    VARIANT = "VARIANT"

    @classmethod
    def parse(cls, value: Any) -> Optional["PropertyKind"]:
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def label(self) -> str:
        return self.value.replace("_", " ", 1)


def clean_property_name(key: str) -> str:
    """Return the display name of a property key (suffix after '#' stripped)."""
    index = key.find(PROPERTY_KEY_DELIMITER)
    return key[:index] if index >= 0 else key


class TargetKind(str, Enum):
    GROUP = "group"
    SINGLE = "single"
    NONE = "none"


@dataclass(frozen=True)
class AnalysisTarget:
    """Canonical analysis target resolved from a selection."""

    kind: TargetKind
    node: Optional[HostNode] = None

    @classmethod
    def group(cls, node: HostNode) -> "AnalysisTarget":
        return cls(TargetKind.GROUP, node)

    @classmethod
    def single(cls, node: HostNode) -> "AnalysisTarget":
        return cls(TargetKind.SINGLE, node)

    @classmethod
    def none(cls) -> "AnalysisTarget":
        return cls(TargetKind.NONE)

    @property
    def is_empty(self) -> bool:
        return self.kind is TargetKind.NONE or self.node is None

    @property
    def name(self) -> str:
        return self.node.name if self.node is not None else ""

    @property
    def member_count(self) -> int:
        if self.kind is TargetKind.GROUP and self.node is not None:
            return sum(1 for child in self.node.children if child.type == COMPONENT)
        if self.kind is TargetKind.SINGLE:
            return 1
        return 0


@dataclass
class PropertyDefinition:
    """One component property, reshaped from the host's raw definition."""

    key: str
    name: str
    kind: Optional[PropertyKind]
    raw_type: str
    default_value: Any = None
    preferred_values_raw: Optional[List[Any]] = None
    preferred_values_count: Optional[int] = None
    resolved_default_name: Optional[str] = None
    preferred_instance_names: Optional[List[str]] = None
    variant_options: Optional[List[str]] = None

    @property
    def is_variant(self) -> bool:
        return self.kind is PropertyKind.VARIANT


@dataclass
class OrderedPropertySet:
    """Property definitions plus the order in which they are presented."""

    definitions: Dict[str, PropertyDefinition] = field(default_factory=dict)
    order: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if len(self.order) != len(self.definitions) or set(self.order) != set(self.definitions):
            raise ValueError("order must contain every definition key exactly once")

    def __iter__(self) -> Iterator[PropertyDefinition]:
        for key in self.order:
            yield self.definitions[key]

    def __len__(self) -> int:
        return len(self.order)


@dataclass
class Document:
    """Renderable unit for one analysis target."""

    subject_name: str
    member_count: int
    properties: OrderedPropertySet

    @property
    def property_count(self) -> int:
        return len(self.properties)


@dataclass
class ItemSuccess:
    subject_name: str
    markdown: Optional[str] = None
    structured: Optional[Dict[str, Any]] = None


@dataclass
class ItemFailure:
    subject_name: str
    reason: str


ItemOutcome = Union[ItemSuccess, ItemFailure]


@dataclass
class BatchResult:
    """Outcomes accumulated during one scan/generate pass."""

    document_name: str
    format: OutputFormat
    total_discovered: int
    outcomes: List[ItemOutcome] = field(default_factory=list)

    @property
    def completed_count(self) -> int:
        return len(self.outcomes)

    @property
    def failures(self) -> Sequence[ItemFailure]:
        return [outcome for outcome in self.outcomes if isinstance(outcome, ItemFailure)]


__all__ = [
    "AnalysisTarget",
    "BatchResult",
    "Document",
    "ItemFailure",
    "ItemOutcome",
    "ItemSuccess",
    "OrderedPropertySet",
    "OutputFormat",
    "PropertyDefinition",
    "PropertyKind",
    "TargetKind",
    "clean_property_name",
]
