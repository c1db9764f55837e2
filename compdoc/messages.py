"""Request and event message models exchanged with the interface layer."""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, ClassVar, Dict, List, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from .models import OutputFormat


class Command(str, Enum):
    READY = "ready"
    GENERATE = "generate"
    SCAN = "scan"
    GENERATE_ALL = "generate-all"
    EXPORT_SINGLE = "export-single"
    EXPORT_ALL = "export-all"
    COPY = "copy-request"
    SELECTION_CHANGED = "selection-changed"


class RequestError(ValueError):
    """Raised when a transport message cannot be turned into a request."""


class UnknownCommandError(RequestError):
    """Raised when a message type matches no known command or alias."""


class InvalidRequestError(RequestError):
    """Raised when a known command carries fields that fail validation."""


# Every spelling the interface has used, mapped once to (command, implied format).
_ALIASES: Dict[str, Tuple[Command, Optional[OutputFormat]]] = {
    "ready": (Command.READY, None),
    "ui-ready": (Command.READY, None),
    "uiReady": (Command.READY, None),
    "generate": (Command.GENERATE, None),
    "Generate": (Command.GENERATE, OutputFormat.MD),
    "ui-generate": (Command.GENERATE, None),
    "uiGenerate": (Command.GENERATE, None),
    "generate-md": (Command.GENERATE, OutputFormat.MD),
    "generate-json": (Command.GENERATE, OutputFormat.JSON),
    "scan": (Command.SCAN, None),
    "ui-scan": (Command.SCAN, None),
    "uiScan": (Command.SCAN, None),
    "generate-all": (Command.GENERATE_ALL, None),
    "ui-generate-all": (Command.GENERATE_ALL, None),
    "uiGenerateAll": (Command.GENERATE_ALL, None),
    "export-single": (Command.EXPORT_SINGLE, None),
    "ui-export": (Command.EXPORT_SINGLE, None),
    "uiExport": (Command.EXPORT_SINGLE, None),
    "export-all": (Command.EXPORT_ALL, None),
    "export-md": (Command.EXPORT_ALL, OutputFormat.MD),
    "Export .md": (Command.EXPORT_ALL, OutputFormat.MD),
    "ui-export-all-md": (Command.EXPORT_ALL, OutputFormat.MD),
    "uiExportAllMd": (Command.EXPORT_ALL, OutputFormat.MD),
    "export-json": (Command.EXPORT_ALL, OutputFormat.JSON),
    "Export .json": (Command.EXPORT_ALL, OutputFormat.JSON),
    "ui-export-all-json": (Command.EXPORT_ALL, OutputFormat.JSON),
    "uiExportAllJson": (Command.EXPORT_ALL, OutputFormat.JSON),
    "copy": (Command.COPY, None),
    "Copy": (Command.COPY, None),
    "copy-request": (Command.COPY, None),
    "ui-copy-request": (Command.COPY, None),
    "copyRequest": (Command.COPY, None),
    "selection-changed": (Command.SELECTION_CHANGED, None),
    "selectionchange": (Command.SELECTION_CHANGED, None),
}


def normalize_command(raw: str) -> Tuple[Command, Optional[OutputFormat]]:
    """Map a transport message type to its command and any format it implies."""
    try:
        return _ALIASES[raw]
    except KeyError:
        raise UnknownCommandError(f"Unknown command: {raw!r}") from None


class Request(BaseModel):
    command: Command
    format: Optional[OutputFormat] = None
    payload: Optional[str] = None

    @classmethod
    def from_message(cls, message: Mapping[str, Any]) -> "Request":
        raw_type = message.get("type")
        if not isinstance(raw_type, str):
            raise UnknownCommandError("Message has no 'type'")
        command, implied_format = normalize_command(raw_type)
        options = message.get("options")
        explicit_format = message.get("format")
        if explicit_format is None and isinstance(options, Mapping):
            explicit_format = options.get("format")
        try:
            return cls(
                command=command,
                format=implied_format or explicit_format,
                payload=message.get("payload"),
            )
        except ValidationError as exc:
            raise InvalidRequestError(f"Invalid {raw_type!r} request: {exc}") from exc


class Event(BaseModel):
    """Base for everything the engine reports back to the interface."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    type: ClassVar[str] = "event"

    def to_message(self) -> Dict[str, Any]:
        payload = self.model_dump(by_alias=True, mode="json", exclude_none=True)
        return {"type": self.type, **payload}


class SelectionInfo(Event):
    type: ClassVar[str] = "selection-info"

    name: str
    member_count: int
    property_count: int


class Status(Event):
    type: ClassVar[str] = "status"

    message: str


class Progress(Event):
    type: ClassVar[str] = "progress"

    current: int
    total: int
    label: Optional[str] = None


class Busy(Event):
    type: ClassVar[str] = "busy"

    value: bool


class ScanStart(Event):
    type: ClassVar[str] = "scan-start"

    total: int


class ScanTick(Event):
    type: ClassVar[str] = "scan-tick"

    index: int
    total: int
    name: str


class ScanComplete(Event):
    type: ClassVar[str] = "scan-complete"

    total: int
    format: OutputFormat


class GenStart(Event):
    type: ClassVar[str] = "gen-start"

    total: int


class GenTick(Event):
    type: ClassVar[str] = "gen-tick"

    index: int
    total: int
    name: str


class GenComplete(Event):
    type: ClassVar[str] = "gen-complete"

    content: str
    filename: str
    mime: str
    format: OutputFormat


class GenerationResult(Event):
    type: ClassVar[str] = "generation-result"

    format: Optional[OutputFormat] = None
    output: str


class CopyPayload(Event):
    type: ClassVar[str] = "copy-payload"

    markdown_text: str
    structured_text: str


EventSink = Callable[[Event], None]

E = TypeVar("E", bound=Event)


class EventLog:
    """Sink that keeps every event it receives, in order."""

    def __init__(self) -> None:
        self.events: List[Event] = []

    def __call__(self, event: Event) -> None:
        self.events.append(event)

    def of_type(self, event_type: Type[E]) -> List[E]:
        return [event for event in self.events if isinstance(event, event_type)]

    def last(self, event_type: Type[E]) -> Optional[E]:
        matches = self.of_type(event_type)
        return matches[-1] if matches else None

    def messages(self) -> List[Dict[str, Any]]:
        return [event.to_message() for event in self.events]


def discard(event: Event) -> None:
    return None


__all__ = [
    "Busy",
    "Command",
    "CopyPayload",
    "Event",
    "EventLog",
    "EventSink",
    "GenComplete",
    "GenStart",
    "GenTick",
    "GenerationResult",
    "InvalidRequestError",
    "Progress",
    "Request",
    "RequestError",
    "ScanComplete",
    "ScanStart",
    "ScanTick",
    "SelectionInfo",
    "Status",
    "UnknownCommandError",
    "discard",
    "normalize_command",
]
