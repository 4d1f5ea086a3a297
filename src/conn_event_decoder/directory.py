"""Read-only device id → device name lookup.

The directory is built once, before any notification is decoded, from a
roster file.  Two file shapes are accepted::

    [{"id": "3a00...", "name": "truck-7", ...}, ...]   # list-devices body
    {"3a00...": "truck-7", ...}                          # plain mapping
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping

import jsonschema
import orjson

logger = logging.getLogger(__name__)

ROSTER_SCHEMA: dict[str, Any] = {
    "oneOf": [
        {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["id"],
                "properties": {
                    "id": {"type": "string"},
                    "name": {"type": ["string", "null"]},
                },
            },
        },
        {
            "type": "object",
            "additionalProperties": {"type": "string"},
        },
    ]
}


class DeviceDirectory(Mapping[str, str]):
    """Immutable mapping of device id to friendly name."""

    def __init__(self, names: Mapping[str, str] | None = None) -> None:
        self._names: Mapping[str, str] = MappingProxyType(dict(names or {}))

    @classmethod
    def from_roster(cls, devices: Iterable[dict]) -> "DeviceDirectory":
        """Build from roster entries carrying ``id`` and ``name`` keys.

        Entries without a name are skipped.
        """
        return cls({
            device["id"]: device["name"]
            for device in devices
            if device.get("id") and device.get("name")
        })

    def resolve(self, device_id: str) -> str:
        """Return the friendly name for *device_id*, or the id itself."""
        return self._names.get(device_id) or device_id

    def __getitem__(self, device_id: str) -> str:
        return self._names[device_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)


def load_directory(path: str | Path) -> DeviceDirectory:
    """Load and validate a roster file.

    Raises
    ------
    OSError
        If the file cannot be read.
    orjson.JSONDecodeError
        If the file is not valid JSON.
    jsonschema.ValidationError
        If the JSON matches neither accepted shape.
    """
    raw = orjson.loads(Path(path).read_bytes())
    jsonschema.validate(instance=raw, schema=ROSTER_SCHEMA)

    if isinstance(raw, list):
        directory = DeviceDirectory.from_roster(raw)
    else:
        directory = DeviceDirectory(raw)

    logger.info("Loaded %d device names from %s", len(directory), path)
    return directory
