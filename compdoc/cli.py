"""CLI entrypoints for compdoc commands."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from .config import CONFIG_FILENAME, CompDocConfig, ConfigError, load_config
from .host import DocumentHost, DocumentLoadError
from .logging import configure_logging, get_logger
from .messages import Event, EventLog, EventSink, GenComplete, Progress, Status
from .models import OutputFormat
from .orchestrator import Orchestrator

logger = get_logger("cli")


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_document_arguments(parser: argparse.ArgumentParser, *, selection: bool) -> None:
    parser.add_argument("file", type=Path, help="Design file exported as JSON.")
    if selection:
        parser.add_argument(
            "-s",
            "--select",
            dest="selection",
            action="append",
            default=[],
            metavar="NODE_ID",
            help="Node id to select; repeat to select several (first match wins).",
        )


def _add_format_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-f",
        "--format",
        choices=[fmt.value for fmt in OutputFormat],
        default=None,
        help="Output format (defaults to the configured format, else Markdown).",
    )


def _add_output_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Write the document to this path instead of stdout.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="compdoc",
        description="Document component properties from design files as Markdown or JSON.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Path to {CONFIG_FILENAME} (defaults to the design file's directory).",
    )
    parser.add_argument(
        "--timeout-ms",
        type=int,
        default=None,
        help="Per-reference lookup timeout in milliseconds.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    info_parser = subparsers.add_parser("info", help="Show what the selection resolves to.")
    _add_verbose_option(info_parser, suppress_default=True)
    _add_document_arguments(info_parser, selection=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate the document for the selected component or component set.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_document_arguments(generate_parser, selection=True)
    _add_format_option(generate_parser)
    _add_output_option(generate_parser)

    copy_parser = subparsers.add_parser(
        "copy",
        help="Print both Markdown and JSON for the selection.",
    )
    _add_verbose_option(copy_parser, suppress_default=True)
    _add_document_arguments(copy_parser, selection=True)

    export_parser = subparsers.add_parser(
        "export",
        help="Export every component set in the file into one document.",
    )
    _add_verbose_option(export_parser, suppress_default=True)
    _add_document_arguments(export_parser, selection=False)
    _add_format_option(export_parser)
    _add_output_option(export_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for compdoc commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    try:
        config = _load_config(args)
        host = DocumentHost.from_file(args.file, selection=getattr(args, "selection", []))
    except (ConfigError, DocumentLoadError) as exc:
        parser.exit(1, f"{exc}\n")

    events = EventLog()
    orchestrator = Orchestrator(host, sink=_reporting_sink(events), config=config)
    fmt = OutputFormat(args.format) if getattr(args, "format", None) else None

    try:
        if args.command == "info":
            info = asyncio.run(orchestrator.selection_info())
            if info is None:
                parser.exit(1, "Selection does not resolve to a component or component set.\n")
            print(f"{info.name}: {info.member_count} variant(s), {info.property_count} propert(ies)")
        elif args.command == "generate":
            outputs = asyncio.run(orchestrator.generate(fmt or config.output.default_format))
            if not outputs:
                parser.exit(1, f"{_last_status(events)}\n")
            _emit("\n\n".join(outputs.values()), args.output)
        elif args.command == "copy":
            markdown, structured = asyncio.run(orchestrator.copy())
            if not markdown:
                parser.exit(1, f"{_last_status(events)}\n")
            _emit(f"{markdown}\n\n{structured}", None)
        elif args.command == "export":
            result = asyncio.run(orchestrator.export_all(fmt))
            completed = events.last(GenComplete)
            if result is None or completed is None:
                parser.exit(1, f"{_last_status(events)}\n")
            _emit(completed.content, args.output)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except Exception as exc:  # pragma: no cover - defensive guard
        parser.exit(1, f"compdoc {args.command} failed: {exc}\nRun with --verbose for more details.\n")


def _load_config(args: argparse.Namespace) -> CompDocConfig:
    config = load_config(args.config or args.file.expanduser().resolve().parent)
    if args.timeout_ms is not None:
        if args.timeout_ms <= 0:
            raise ConfigError("--timeout-ms must be a positive integer")
        config.resolver.timeout_ms = args.timeout_ms
    return config


def _reporting_sink(events: EventLog) -> EventSink:
    def _sink(event: Event) -> None:
        events(event)
        if isinstance(event, Status):
            logger.info("%s", event.message)
        elif isinstance(event, Progress) and event.current:
            logger.debug("Progress %d/%d %s", event.current, event.total, event.label or "")

    return _sink


def _last_status(events: EventLog) -> str:
    status = events.last(Status)
    return status.message if status is not None else "Nothing was generated."


def _emit(content: str, output: Path | None) -> None:
    if output is None:
        sys.stdout.write(content if content.endswith("\n") else content + "\n")
        return
    output.write_text(content, encoding="utf-8")
    print(f"Wrote {_relativize(output)}")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
