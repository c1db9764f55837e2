"""Host adapters the extraction engine reads design documents through."""

from .base import (
    CANVAS,
    COMPONENT,
    COMPONENT_SET,
    DOCUMENT,
    INSTANCE,
    Host,
    HostNode,
)
from .document import DocumentHost, DocumentLoadError

__all__ = [
    "CANVAS",
    "COMPONENT",
    "COMPONENT_SET",
    "DOCUMENT",
    "DocumentHost",
    "DocumentLoadError",
    "Host",
    "HostNode",
    "INSTANCE",
]
