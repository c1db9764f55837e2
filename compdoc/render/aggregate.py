"""Fold per-item batch outcomes into one combined document."""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from ..failsafe import build_failure_item, build_failure_stanza
from ..models import ItemFailure, ItemOutcome, OutputFormat
from .structured import dumps

SEPARATOR = "\n\n---\n\n"


def aggregate_markdown(outcomes: Sequence[ItemOutcome]) -> str:
    parts: List[str] = []
    for outcome in outcomes:
        if isinstance(outcome, ItemFailure):
            parts.append(build_failure_stanza(outcome.subject_name))
        else:
            parts.append(outcome.markdown or "")
    return SEPARATOR.join(parts)


def aggregate_structured(document_name: str, outcomes: Sequence[ItemOutcome]) -> Dict[str, Any]:
    items: List[Dict[str, Any]] = []
    for outcome in outcomes:
        if isinstance(outcome, ItemFailure):
            items.append(build_failure_item(outcome.subject_name, outcome.reason))
        else:
            items.append(outcome.structured or {"name": outcome.subject_name})
    return {"document": document_name, "count": len(items), "items": items}


def aggregate(document_name: str, fmt: OutputFormat, outcomes: Sequence[ItemOutcome]) -> str:
    """Render the combined document for ``fmt``."""
    if fmt is OutputFormat.MD:
        return aggregate_markdown(outcomes)
    return dumps(aggregate_structured(document_name, outcomes))


__all__ = ["SEPARATOR", "aggregate", "aggregate_markdown", "aggregate_structured"]
