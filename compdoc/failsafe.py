"""Placeholder output used when a document cannot be generated."""

from __future__ import annotations

import re
from typing import Dict

from .models import OutputFormat

FAILURE_REASON = "Failed to generate this Component Set"

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|]+')


def build_failure_stanza(subject_name: str) -> str:
    """Return the Markdown stanza that stands in for a failed item."""
    return f"# {subject_name}\n\n> ⚠️ {FAILURE_REASON}. Skipped."


def build_failure_item(subject_name: str, reason: str | None = None) -> Dict[str, str]:
    """Return the JSON record that stands in for a failed item."""
    return {"name": subject_name, "error": reason or FAILURE_REASON}


def safe_filename(name: str) -> str:
    """Replace characters file systems reject with underscores."""
    return _UNSAFE_FILENAME_CHARS.sub("_", name).strip()


def output_filename(stem: str, fmt: OutputFormat, *, suffix: str = "") -> str:
    return safe_filename(f"{stem}{suffix}.{fmt.value}")


def format_reason(reason: object) -> str | None:
    """Collapse an error message to one short line for status output."""
    if reason is None:
        return None
    cleaned = " ".join(str(reason).strip().split())
    if not cleaned:
        return None
    return cleaned[:200] + ("…" if len(cleaned) > 200 else "")


__all__ = [
    "FAILURE_REASON",
    "build_failure_item",
    "build_failure_stanza",
    "format_reason",
    "output_filename",
    "safe_filename",
]
