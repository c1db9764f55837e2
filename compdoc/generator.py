"""Build and render the document for one analysis target."""

from __future__ import annotations

from typing import Dict, Sequence

from .collector import collect_properties
from .host import Host
from .logging import get_logger, log_duration
from .models import AnalysisTarget, Document, OutputFormat
from .render import render_markdown, render_structured
from .resolver import DEFAULT_TIMEOUT, IdentifierResolver


class DocumentGenerator:
    """Runs collect -> order -> resolve for a target and renders the result."""

    def __init__(
        self,
        host: Host,
        resolver: IdentifierResolver | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.host = host
        self.resolver = resolver or IdentifierResolver(host.get_node_by_id, timeout=timeout)
        self.logger = get_logger("generator")

    def summarize(self, target: AnalysisTarget) -> Document:
        """Collect and order properties without resolving references."""
        if target.is_empty:
            raise ValueError("Cannot build a document without a target")
        return Document(
            subject_name=target.name,
            member_count=target.member_count,
            properties=collect_properties(target),
        )

    async def build(self, target: AnalysisTarget) -> Document:
        document = self.summarize(target)
        with log_duration(self.logger, f"resolve {document.subject_name}"):
            await self.resolver.resolve_properties(document.properties)
        return document

    async def render(self, target: AnalysisTarget, fmt: OutputFormat) -> str:
        rendered = await self.render_formats(target, (fmt,))
        return rendered[fmt]

    async def render_formats(
        self, target: AnalysisTarget, formats: Sequence[OutputFormat]
    ) -> Dict[OutputFormat, str]:
        """Resolve once and render every requested format from the same document."""
        document = await self.build(target)
        return {fmt: render_document(document, fmt) for fmt in formats}


def render_document(document: Document, fmt: OutputFormat) -> str:
    if fmt is OutputFormat.MD:
        return render_markdown(document)
    return render_structured(document)


__all__ = ["DocumentGenerator", "render_document"]
