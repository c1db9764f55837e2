"""Normalise a selection into a canonical analysis target."""

from __future__ import annotations

from typing import Iterable, Optional

from .host import COMPONENT, COMPONENT_SET, INSTANCE, Host, HostNode
from .logging import get_logger
from .models import AnalysisTarget

logger = get_logger("targets")


async def resolve_target(host: Host, node: Optional[HostNode]) -> AnalysisTarget:
    """Walk up from ``node`` until a component set or component is found."""
    current = node
    while current is not None:
        if current.type == COMPONENT_SET:
            logger.debug("Resolved %s to component set", current.name)
            return AnalysisTarget.group(current)
        if current.type == COMPONENT:
            return _target_for_component(current)
        if current.type == INSTANCE:
            main = await _main_component(host, current)
            if main is not None:
                logger.debug("Resolved instance %s through its main component", current.name)
                return _target_for_component(main)
        current = current.parent
    logger.debug("No component found above %s", node.name if node is not None else "<nothing>")
    return AnalysisTarget.none()


async def resolve_selection(
    host: Host, nodes: Optional[Iterable[HostNode]] = None
) -> AnalysisTarget:
    """Resolve selected nodes in order; the first one that resolves wins."""
    selection = list(host.selection if nodes is None else nodes)
    logger.debug("Resolving selection of %d node(s)", len(selection))
    for node in selection:
        target = await resolve_target(host, node)
        if not target.is_empty:
            return target
    return AnalysisTarget.none()


def _target_for_component(component: HostNode) -> AnalysisTarget:
    parent = component.parent
    if parent is not None and parent.type == COMPONENT_SET:
        return AnalysisTarget.group(parent)
    return AnalysisTarget.single(component)


async def _main_component(host: Host, instance: HostNode) -> Optional[HostNode]:
    try:
        main = await host.get_main_component(instance)
    except Exception as exc:
        logger.debug("Main component lookup failed for %s: %s", instance.name, exc)
        return None
    if main is None or main.type != COMPONENT:
        return None
    return main


__all__ = ["resolve_selection", "resolve_target"]
