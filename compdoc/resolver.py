"""Time-bounded resolution of node references into display names."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Set

from .host import HostNode
from .logging import get_logger
from .models import OrderedPropertySet, PropertyKind

DEFAULT_TIMEOUT = 0.6
_REFERENCE_FIELDS = ("id", "value", "nodeId", "key")

Lookup = Callable[[str], Awaitable[Optional[HostNode]]]


def extract_reference_id(value: Any) -> Optional[str]:
    """Return the node identifier a raw reference carries, if any."""
    if isinstance(value, str):
        return value or None
    if isinstance(value, dict):
        for field_name in _REFERENCE_FIELDS:
            candidate = value.get(field_name)
            if isinstance(candidate, str) and candidate:
                return candidate
    return None


class IdentifierResolver:
    """Resolves references to node names, giving up after ``timeout`` seconds.

    A lookup that loses the race is not cancelled: it may still be running
    when ``resolve_name`` returns, and whatever it produces is discarded.
    """

    def __init__(self, lookup: Lookup, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self._lookup = lookup
        self.timeout = timeout
        self.logger = get_logger("resolver")

    async def resolve_name(self, reference: Any) -> Optional[str]:
        node_id = extract_reference_id(reference)
        if node_id is None:
            return None
        try:
            task = asyncio.ensure_future(self._lookup(node_id))
        except Exception as exc:
            self.logger.debug("Lookup for %s could not start: %s", node_id, exc)
            return None
        done, _ = await asyncio.wait({task}, timeout=self.timeout)
        if not done:
            self.logger.debug("Lookup for %s timed out after %.0f ms", node_id, self.timeout * 1000)
            task.add_done_callback(_discard_result)
            return None
        if task.cancelled():
            return None
        exc = task.exception()
        if exc is not None:
            self.logger.debug("Lookup for %s failed: %s", node_id, exc)
            return None
        node = task.result()
        name = getattr(node, "name", None)
        return name if isinstance(name, str) and name else None

    async def resolve_names(self, references: Iterable[Any]) -> List[str]:
        """Resolve references one after another, de-duplicating names in order."""
        names: List[str] = []
        seen: Set[str] = set()
        for reference in references:
            name = await self.resolve_name(reference)
            if name and name not in seen:
                seen.add(name)
                names.append(name)
        return names

    async def resolve_properties(self, properties: OrderedPropertySet) -> None:
        """Fill resolved names on every instance-swap definition, in order."""
        for definition in properties:
            if definition.kind is not PropertyKind.INSTANCE_SWAP:
                continue
            definition.resolved_default_name = await self.resolve_name(definition.default_value)
            if definition.preferred_values_raw is not None:
                definition.preferred_instance_names = await self.resolve_names(
                    definition.preferred_values_raw
                )


def _discard_result(task: "asyncio.Future[Any]") -> None:
    # Retrieve the outcome so a late failure is not reported as unhandled.
    if not task.cancelled():
        task.exception()


__all__ = ["DEFAULT_TIMEOUT", "IdentifierResolver", "extract_reference_id"]
