"""Workspace-wide scan and generate passes with per-item fault isolation."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager, contextmanager
from enum import Enum
from typing import AsyncIterator, Iterator, List, Optional

from .config import CompDocConfig, default_config
from .failsafe import FAILURE_REASON, format_reason, output_filename
from .generator import DocumentGenerator
from .host import Host, HostNode
from .logging import get_logger, log_duration
from .messages import (
    Busy,
    EventSink,
    GenComplete,
    GenStart,
    GenTick,
    Progress,
    ScanComplete,
    ScanStart,
    ScanTick,
    Status,
    discard,
)
from .models import (
    AnalysisTarget,
    BatchResult,
    ItemFailure,
    ItemOutcome,
    ItemSuccess,
    OutputFormat,
)
from .render import aggregate, build_structured, render_markdown

NO_SETS_MESSAGE = "⚠️ No Component Sets found."

_FORMAT_LABELS = {OutputFormat.MD: "Markdown", OutputFormat.JSON: "JSON"}


class PipelineState(str, Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    GENERATING = "generating"
    AGGREGATING = "aggregating"


class BatchPipeline:
    """Discovers every component set and renders them into one document.

    The pipeline owns the two run flags: ``busy`` (a batch run is underway, so
    selection refreshes are skipped) and ``scan_permitted`` (a one-shot grant
    an export request gives the scan step). Both are reset on every exit path.
    """

    def __init__(
        self,
        host: Host,
        generator: DocumentGenerator | None = None,
        *,
        sink: EventSink | None = None,
        config: CompDocConfig | None = None,
    ) -> None:
        self.host = host
        self.config = config or default_config()
        self.generator = generator or DocumentGenerator(host, timeout=self.config.resolver.timeout)
        self.sink: EventSink = sink or discard
        self.logger = get_logger("pipeline")
        self.state = PipelineState.IDLE
        self._busy = False
        self._scan_permitted = False
        self._discovered: List[HostNode] = []

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def scan_permitted(self) -> bool:
        return self._scan_permitted

    @property
    def document_name(self) -> str:
        return self.host.document_name or self.config.output.untitled_name

    @contextmanager
    def authorize_scan(self) -> Iterator[None]:
        self._scan_permitted = True
        try:
            yield
        finally:
            self._scan_permitted = False

    @asynccontextmanager
    async def running(self) -> AsyncIterator[None]:
        self._busy = True
        self.sink(Busy(value=True))
        try:
            yield
        finally:
            self._busy = False
            self.state = PipelineState.IDLE
            self.sink(Busy(value=False))

    async def scan(self, fmt: OutputFormat) -> Optional[List[HostNode]]:
        """Discover all component sets; refused unless an export granted it."""
        if not self._scan_permitted:
            self.logger.info("Scan ignored: no export request authorised it")
            return None
        self.state = PipelineState.SCANNING
        with log_duration(self.logger, "scan"):
            await self.host.load_all_pages()
            sets = self.host.find_component_sets()
            self.logger.debug("Discovered %d component set(s)", len(sets))
            self._discovered = list(sets)
            total = len(sets)
            self.sink(ScanStart(total=total))
            for index, node in enumerate(sets, start=1):
                self.sink(ScanTick(index=index, total=total, name=node.name))
            self.sink(ScanComplete(total=total, format=fmt))
        return list(sets)

    async def generate_all(self, fmt: OutputFormat) -> BatchResult:
        """Render every discovered set, isolating failures to their own entry."""
        sets, self._discovered = self._discovered, []
        total = len(sets)
        result = BatchResult(document_name=self.document_name, format=fmt, total_discovered=total)
        self.state = PipelineState.GENERATING
        self.sink(GenStart(total=total))
        if total:
            self.sink(Status(message=f"⏳ Generating {_FORMAT_LABELS[fmt]} for {total} sets…"))
            self.sink(Progress(current=0, total=total, label="Initializing…"))
        with log_duration(self.logger, "generate all"):
            for index, node in enumerate(sets, start=1):
                self.sink(GenTick(index=index, total=total, name=node.name))
                self.sink(Progress(current=index, total=total, label=node.name))
                result.outcomes.append(await self._generate_item(node, fmt))

            self.state = PipelineState.AGGREGATING
            content = aggregate(result.document_name, fmt, result.outcomes)
        stem = self.host.document_name or self.config.output.fallback_name
        self.sink(
            GenComplete(
                content=content,
                filename=output_filename(stem, fmt, suffix="-all"),
                mime=fmt.mime,
                format=fmt,
            )
        )
        if total:
            self.sink(Status(message=f"✅ {_FORMAT_LABELS[fmt]} ready."))
        self.logger.info(
            "Generated %d of %d component set(s) (%d skipped)",
            total - len(result.failures),
            total,
            len(result.failures),
        )
        return result

    async def export_all(self, fmt: OutputFormat) -> Optional[BatchResult]:
        """Scan the whole workspace and generate the combined document."""
        with self.authorize_scan():
            async with self.running():
                try:
                    sets = await self.scan(fmt)
                    if not sets:
                        self.sink(Status(message=NO_SETS_MESSAGE))
                    return await self.generate_all(fmt)
                except Exception as exc:
                    self._log_exception("Export failed", exc)
                    self.sink(Status(message=f"❌ Export .{fmt.value} failed."))
                    return None

    async def _generate_item(self, node: HostNode, fmt: OutputFormat) -> ItemOutcome:
        try:
            document = await self.generator.build(AnalysisTarget.group(node))
            if fmt is OutputFormat.MD:
                return ItemSuccess(subject_name=node.name, markdown=render_markdown(document))
            return ItemSuccess(subject_name=node.name, structured=build_structured(document))
        except Exception as exc:
            self.logger.warning("Skipped %s: %s", node.name, format_reason(exc))
            self.sink(Status(message=f"⚠️ Skipped: {node.name}"))
            return ItemFailure(subject_name=node.name, reason=FAILURE_REASON)

    def _log_exception(self, message: str, exc: Exception) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.exception("%s: %s", message, exc)
        else:
            self.logger.error("%s: %s", message, exc)


__all__ = ["BatchPipeline", "NO_SETS_MESSAGE", "PipelineState"]
