"""Configuration sections, duration parsing and YAML loading."""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_COLLECT_INTERVAL = timedelta(seconds=30)

# Go-style duration units, expressed in microseconds
_UNITS: dict[str, float] = {
    "ns": 0.001,
    "us": 1.0,
    "µs": 1.0,
    "μs": 1.0,
    "ms": 1_000.0,
    "s": 1_000_000.0,
    "m": 60_000_000.0,
    "h": 3_600_000_000.0,
}
_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


class ConfigurationError(ValueError):
    """A configuration file, section or plugin option is unusable."""


@dataclass(frozen=True)
class Section:
    """A named configuration block selecting a plugin type.

    Attributes:
        name: Instance name (e.g. "gateway").
        type: Registered plugin type name (e.g. "ping").
        interval: Collection interval as a duration string (e.g. "30s").
        options: Plugin-specific options.
    """

    name: str = ""
    type: str = ""
    interval: str = ""
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", MappingProxyType(dict(self.options or {})))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Section":
        """Build a section from a parsed YAML mapping."""
        if not isinstance(data, Mapping):
            raise ConfigurationError(f"section must be a mapping, got {type(data).__name__}")
        options = data.get("options") or {}
        if not isinstance(options, Mapping):
            raise ConfigurationError(
                f"options of section {data.get('name')!r} must be a mapping"
            )
        return cls(
            name=str(data.get("name") or ""),
            type=str(data.get("type") or ""),
            interval=str(data.get("interval") or ""),
            options=options,
        )


@dataclass(frozen=True)
class Config:
    """Top-level agent configuration."""

    collectors: list[Section] = field(default_factory=list)
    reporters: list[Section] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "Config":
        if not data:
            return cls()
        if not isinstance(data, Mapping):
            raise ConfigurationError("configuration root must be a mapping")
        return cls(
            collectors=_sections(data, "collectors"),
            reporters=_sections(data, "reporters"),
        )


def _sections(data: Mapping[str, Any], key: str) -> list[Section]:
    raw = data.get(key) or []
    if not isinstance(raw, list):
        raise ConfigurationError(f"{key!r} must be a list of sections")
    return [Section.from_mapping(item) for item in raw]


def parse_duration(text: str) -> timedelta:
    """Parse a Go-style duration string such as "1m30s" or "250ms".

    A bare "0" is accepted. A leading sign is allowed.

    Raises:
        ValueError: If the string is not a valid duration.
    """
    s = text.strip()
    if not s:
        raise ValueError("empty duration")
    sign = 1
    if s[0] in "+-":
        sign = -1 if s[0] == "-" else 1
        s = s[1:]
    if not s:
        raise ValueError(f"invalid duration {text!r}")
    if s == "0":
        return timedelta(0)
    micros = 0.0
    pos = 0
    while pos < len(s):
        match = _COMPONENT.match(s, pos)
        if match is None:
            raise ValueError(f"invalid duration {text!r}")
        micros += float(match.group(1)) * _UNITS[match.group(2)]
        pos = match.end()
    return sign * timedelta(microseconds=micros)


def duration_from_string(text: str | None, default: timedelta) -> timedelta:
    """Parse a duration, falling back to ``default`` when absent, invalid or not positive."""
    if not text:
        return default
    try:
        duration = parse_duration(text)
    except ValueError:
        logger.debug("Invalid duration %r, using default %s", text, default)
        return default
    if duration <= timedelta(0):
        return default
    return duration


def load_config(path: str | Path) -> Config:
    """Load the agent configuration from a YAML file.

    A missing file yields an empty configuration.

    Raises:
        ConfigurationError: If the file cannot be read or parsed.
    """
    config_path = Path(path).expanduser()
    try:
        contents = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.info("Configuration file %s not found, using defaults", config_path)
        return Config()
    except OSError as exc:
        raise ConfigurationError(f"cannot read configuration file {config_path}: {exc}") from exc
    try:
        data = yaml.safe_load(contents)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"invalid configuration file {config_path}: {exc}") from exc
    return Config.from_mapping(data)
