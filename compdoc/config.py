"""Configuration loading for compdoc (.compdoc.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .models import OutputFormat

CONFIG_FILENAME = ".compdoc.yml"
DEFAULT_TIMEOUT_MS = 600


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ResolverConfig:
    """Identifier lookup settings."""

    timeout_ms: int = DEFAULT_TIMEOUT_MS

    @property
    def timeout(self) -> float:
        return self.timeout_ms / 1000


@dataclass
class OutputConfig:
    """Rendering and file naming defaults."""

    default_format: Optional[OutputFormat] = None
    fallback_name: str = "component-metadata"
    untitled_name: str = "Untitled"


@dataclass
class CompDocConfig:
    """Represents the high-level settings defined in .compdoc.yml."""

    root: Path
    resolver: ResolverConfig = field(default_factory=ResolverConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def default_config() -> CompDocConfig:
    return CompDocConfig(root=Path.cwd())


def load_config(config_path: Path) -> CompDocConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return CompDocConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    resolver = ResolverConfig()
    resolver_data = _as_dict(data.get("resolver"))
    if "timeout_ms" in resolver_data:
        timeout_ms = _as_int(resolver_data.get("timeout_ms"))
        if timeout_ms is None or timeout_ms <= 0:
            raise ConfigError("resolver.timeout_ms must be a positive integer")
        resolver.timeout_ms = timeout_ms

    output = OutputConfig()
    output_data = _as_dict(data.get("output"))
    if output_data:
        format_name = _as_str(output_data.get("default_format"))
        if format_name:
            try:
                output.default_format = OutputFormat(format_name.lower())
            except ValueError as exc:
                raise ConfigError(
                    f"output.default_format must be 'md' or 'json', got {format_name!r}"
                ) from exc
        fallback_name = _as_str(output_data.get("fallback_name"))
        if fallback_name:
            output.fallback_name = fallback_name
        untitled_name = _as_str(output_data.get("untitled_name"))
        if untitled_name:
            output.untitled_name = untitled_name

    return CompDocConfig(root=root, resolver=resolver, output=output)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


__all__ = [
    "CONFIG_FILENAME",
    "CompDocConfig",
    "ConfigError",
    "OutputConfig",
    "ResolverConfig",
    "default_config",
    "load_config",
]
