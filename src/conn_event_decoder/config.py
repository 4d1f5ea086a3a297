"""Configuration loading, environment-variable interpolation, and validation.

Resolution order for ``${VAR}`` placeholders:
    CLI overrides → environment variables → default in the placeholder.

``${VAR}`` (no default) raises if unresolvable.
``${VAR:-default}`` falls back to *default*.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import orjson

logger = logging.getLogger(__name__)

_VAR_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-(.*?))?\}")

_SCHEMA_PATH = Path(__file__).resolve().parent.parent.parent / "config" / "config.schema.json"

OUTPUT_FORMATS = ("line", "json")


@dataclass
class StreamConfig:
    """Which notifications on the input stream carry connection events."""

    event_name: str = "connEventStats"


@dataclass
class DirectoryConfig:
    """Roster file used to resolve device names.

    An empty ``path`` means no directory: device ids are printed as-is.
    """

    path: str = ""


@dataclass
class FilterConfig:
    """Notification filtering rules."""

    drop_device_ids: list[str] = field(default_factory=list)
    keep_device_ids: list[str] = field(default_factory=list)


@dataclass
class OutputConfig:
    """Output settings."""

    format: str = "line"


@dataclass
class LogFileConfig:
    """Optional log file output settings.

    When ``enabled`` is True the application writes operational logs to a
    rotating file in addition to stderr.
    """

    enabled: bool = False
    path: str = "/var/log/conn-event-decoder/app.log"
    max_size_bytes: int = 10485760   # 10 MB
    backup_count: int = 5


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "info"
    format: str = "json"
    file: LogFileConfig = field(default_factory=LogFileConfig)


@dataclass
class AppConfig:
    """Top-level application configuration."""

    instance_id: str = "decoder-01"
    stream: StreamConfig = field(default_factory=StreamConfig)
    directory: DirectoryConfig = field(default_factory=DirectoryConfig)
    filter: FilterConfig = field(default_factory=FilterConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _interpolate_value(value: str, overrides: dict[str, str] | None = None) -> str:
    """Replace ``${VAR}`` / ``${VAR:-default}`` in *value*."""

    def _replacer(match: re.Match) -> str:
        var_name = match.group(1)
        default = match.group(2)  # None when no ``:-`` present

        # 1. CLI overrides
        if overrides and var_name in overrides:
            return overrides[var_name]
        # 2. Environment variables
        env_val = os.environ.get(var_name)
        if env_val is not None:
            return env_val
        # 3. Default
        if default is not None:
            return default

        raise ValueError(
            f"Required variable ${{{var_name}}} is not set in environment "
            f"or CLI overrides"
        )

    return _VAR_RE.sub(_replacer, value)


def _walk_and_interpolate(obj: Any, overrides: dict[str, str] | None = None) -> Any:
    """Recursively interpolate all string values in a JSON-like structure."""
    if isinstance(obj, str):
        return _interpolate_value(obj, overrides)
    if isinstance(obj, dict):
        return {k: _walk_and_interpolate(v, overrides) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_walk_and_interpolate(item, overrides) for item in obj]
    return obj


def _pick(cls: type, raw: dict[str, Any]) -> dict[str, Any]:
    """Keep only the keys of *raw* that are fields of dataclass *cls*."""
    return {k: raw[k] for k in raw if k in cls.__dataclass_fields__}


def _dict_to_config(raw: dict[str, Any]) -> AppConfig:
    """Convert a raw dict into a typed :class:`AppConfig`."""
    filter_raw = raw.get("filter", {})
    logging_raw = raw.get("logging", {})

    return AppConfig(
        instance_id=raw.get("instance_id", "decoder-01"),
        stream=StreamConfig(**_pick(StreamConfig, raw.get("stream", {}))),
        directory=DirectoryConfig(**_pick(DirectoryConfig, raw.get("directory", {}))),
        filter=FilterConfig(
            drop_device_ids=filter_raw.get("drop_device_ids", []),
            keep_device_ids=filter_raw.get("keep_device_ids", []),
        ),
        output=OutputConfig(**_pick(OutputConfig, raw.get("output", {}))),
        logging=LoggingConfig(
            level=logging_raw.get("level", "info"),
            format=logging_raw.get("format", "json"),
            file=LogFileConfig(**_pick(LogFileConfig, logging_raw.get("file", {}))),
        ),
    )


def load_config(
    path: str | Path | None = None,
    overrides: dict[str, str] | None = None,
    schema_path: str | Path | None = None,
) -> AppConfig:
    """Load, interpolate, validate, and return the application config.

    Parameters
    ----------
    path:
        Filesystem path to ``config.json``.  When ``None`` the defaults of
        :class:`AppConfig` are returned.
    overrides:
        CLI-supplied variable overrides.
    schema_path:
        Path to the JSON Schema file.  Defaults to
        ``config/config.schema.json`` relative to the project root.

    Returns
    -------
    AppConfig
        Fully resolved and validated configuration.

    Raises
    ------
    ValueError
        If a required ``${VAR}`` cannot be resolved.
    jsonschema.ValidationError
        If the config fails schema validation.
    """
    if path is None:
        return AppConfig()

    raw: dict[str, Any] = orjson.loads(Path(path).read_bytes())

    interpolated = _walk_and_interpolate(raw, overrides=overrides)

    # --- schema validation ---
    sp = Path(schema_path) if schema_path else _SCHEMA_PATH
    if sp.exists():
        schema = orjson.loads(sp.read_bytes())
        jsonschema.validate(instance=interpolated, schema=schema)
        logger.debug("Config passed schema validation")
    else:
        logger.warning("Schema file not found at %s, skipping validation", sp)

    return _dict_to_config(interpolated)
