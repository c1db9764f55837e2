"""Request handling for single-target and workspace-wide flows."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Dict, Mapping, Optional, Tuple, Union

from .collector import collect_properties
from .config import CompDocConfig, default_config
from .failsafe import format_reason, output_filename
from .generator import DocumentGenerator
from .host import Host
from .logging import get_logger
from .messages import (
    Command,
    CopyPayload,
    EventSink,
    GenComplete,
    GenerationResult,
    Request,
    SelectionInfo,
    Status,
    discard,
)
from .models import BatchResult, OutputFormat
from .pipeline import BatchPipeline
from .targets import resolve_selection

NO_SELECTION_NAME = "No selection detected"
NO_SELECTION_MESSAGE = "⚠️ No valid selection. Select a Component, Instance or Component Set."
SELECT_TARGET_MESSAGE = "⚠️ Please select a Component, Instance or Component Set."
NOTHING_TO_COPY_MESSAGE = "⚠️ Nothing to copy: no selection."

Handler = Callable[[Request], Awaitable[object]]

_BATCH_COMMANDS = frozenset({Command.SCAN, Command.GENERATE_ALL, Command.EXPORT_ALL})


class Orchestrator:
    """Dispatches requests to the single-target flow or the batch pipeline."""

    def __init__(
        self,
        host: Host,
        *,
        sink: EventSink | None = None,
        config: CompDocConfig | None = None,
        generator: DocumentGenerator | None = None,
        pipeline: BatchPipeline | None = None,
    ) -> None:
        self.host = host
        self.sink: EventSink = sink or discard
        self.config = config or default_config()
        self.generator = generator or DocumentGenerator(host, timeout=self.config.resolver.timeout)
        self.pipeline = pipeline or BatchPipeline(
            host, self.generator, sink=self.sink, config=self.config
        )
        self.logger = get_logger("orchestrator")
        self._handlers: Dict[Command, Handler] = {
            Command.READY: self._on_ready,
            Command.GENERATE: self._on_generate,
            Command.SCAN: self._on_scan,
            Command.GENERATE_ALL: self._on_generate_all,
            Command.EXPORT_SINGLE: self._on_export_single,
            Command.EXPORT_ALL: self._on_export_all,
            Command.COPY: self._on_copy,
            Command.SELECTION_CHANGED: self._on_selection_changed,
        }

    async def handle(self, request: Union[Request, Mapping[str, object]]) -> object:
        """Run one request to completion; raw messages are normalised first."""
        if not isinstance(request, Request):
            request = Request.from_message(request)
        self.logger.debug("Handling %s (format=%s)", request.command.value, request.format)
        if self.pipeline.busy and request.command in _BATCH_COMMANDS:
            self.logger.info("Ignoring %s: a batch run is already active", request.command.value)
            return None
        return await self._handlers[request.command](request)

    async def selection_info(self) -> Optional[SelectionInfo]:
        """Report name and counts for the current selection."""
        target = await resolve_selection(self.host)
        if target.is_empty:
            self.sink(SelectionInfo(name=NO_SELECTION_NAME, member_count=0, property_count=0))
            self._status(NO_SELECTION_MESSAGE)
            return None
        properties = collect_properties(target)
        info = SelectionInfo(
            name=target.name,
            member_count=target.member_count,
            property_count=len(properties),
        )
        self.sink(info)
        self._status("✅ Selection detected.")
        return info

    async def generate(self, fmt: OutputFormat | None = None) -> Dict[OutputFormat, str]:
        """Render the current selection; both formats when ``fmt`` is omitted."""
        formats: Tuple[OutputFormat, ...] = (fmt,) if fmt else (OutputFormat.MD, OutputFormat.JSON)
        self._status("⚙️ Generating…")
        try:
            target = await resolve_selection(self.host)
            if target.is_empty:
                self.sink(GenerationResult(format=fmt, output=""))
                self._status(SELECT_TARGET_MESSAGE)
                return {}
            outputs = await self.generator.render_formats(target, formats)
        except Exception as exc:
            self._log_exception("Generation failed", exc)
            self.sink(GenerationResult(format=fmt, output=""))
            self._status(f"❌ Error while generating: {format_reason(exc)}")
            return {}
        for output_format, output in outputs.items():
            self.sink(GenerationResult(format=output_format, output=output))
        self._status("✅ Generated.")
        return outputs

    async def copy(self) -> Tuple[str, str]:
        """Render both formats of the selection for the clipboard."""
        try:
            target = await resolve_selection(self.host)
            if target.is_empty:
                self._status(NOTHING_TO_COPY_MESSAGE)
                self.sink(CopyPayload(markdown_text="", structured_text=""))
                return "", ""
            outputs = await self.generator.render_formats(target, (OutputFormat.MD, OutputFormat.JSON))
        except Exception as exc:
            self._log_exception("Copy failed", exc)
            self._status("❌ Copy failed.")
            return "", ""
        markdown, structured = outputs[OutputFormat.MD], outputs[OutputFormat.JSON]
        self.sink(CopyPayload(markdown_text=markdown, structured_text=structured))
        self._status("📋 Copy payload ready.")
        return markdown, structured

    async def export_single(self, fmt: OutputFormat | None = None) -> Optional[GenComplete]:
        """Render the selection as a file-ready payload named after the target."""
        fmt = fmt or self._default_format()
        try:
            target = await resolve_selection(self.host)
            if target.is_empty:
                self._status(SELECT_TARGET_MESSAGE)
                return None
            content = await self.generator.render(target, fmt)
        except Exception as exc:
            self._log_exception("Export failed", exc)
            self._status(f"❌ Error while exporting: {format_reason(exc)}")
            return None
        event = GenComplete(
            content=content,
            filename=output_filename(target.name or self.config.output.fallback_name, fmt),
            mime=fmt.mime,
            format=fmt,
        )
        self.sink(event)
        self._status(f"💾 Export ready ({fmt.value.upper()}).")
        return event

    async def export_all(self, fmt: OutputFormat | None = None) -> Optional[BatchResult]:
        return await self.pipeline.export_all(fmt or self._default_format())

    async def _on_ready(self, request: Request) -> Optional[SelectionInfo]:
        info = await self.selection_info()
        self._status("🟢 Backend ready")
        return info

    async def _on_generate(self, request: Request) -> Dict[OutputFormat, str]:
        return await self.generate(request.format)

    async def _on_scan(self, request: Request) -> None:
        # Scans run only inside export-all, which is busy for their whole duration.
        self.logger.debug("Scan request ignored (scan not allowed)")
        return None

    async def _on_generate_all(self, request: Request) -> Optional[BatchResult]:
        fmt = request.format or self._default_format()
        async with self.pipeline.running():
            try:
                return await self.pipeline.generate_all(fmt)
            except Exception as exc:
                self._log_exception("Generate all failed", exc)
                self._status(f"❌ Generate failed: {format_reason(exc)}")
                return None

    async def _on_export_single(self, request: Request) -> Optional[GenComplete]:
        return await self.export_single(request.format)

    async def _on_export_all(self, request: Request) -> Optional[BatchResult]:
        return await self.export_all(request.format)

    async def _on_copy(self, request: Request) -> Tuple[str, str]:
        return await self.copy()

    async def _on_selection_changed(self, request: Request) -> Optional[SelectionInfo]:
        if self.pipeline.busy:
            self.logger.debug("Selection change ignored while a batch run is active")
            return None
        self._status("🔄 Selection changed")
        return await self.selection_info()

    def _default_format(self) -> OutputFormat:
        return self.config.output.default_format or OutputFormat.MD

    def _status(self, message: str) -> None:
        self.logger.debug("status: %s", message)
        self.sink(Status(message=message))

    def _log_exception(self, message: str, exc: Exception) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.exception("%s: %s", message, exc)
        else:
            self.logger.error("%s: %s", message, exc)


__all__ = ["Orchestrator"]
