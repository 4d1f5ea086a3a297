"""Turn notifications into serialized output lines.

Two output formats::

    line   truck-7,2016-08-11T10:43:45.000Z,52,SETUP_STARTED
    json   {"event_type":"connection_event","device_id":...}

The transformer holds only read-only collaborators, so one instance can
serve any number of notifications (or threads) without interference.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Optional

import orjson

from conn_event_decoder.config import OUTPUT_FORMATS
from conn_event_decoder.decoder import NO_DATE, decode, format_date, format_line
from conn_event_decoder.directory import DeviceDirectory
from conn_event_decoder.models import (
    DecodedEvent,
    EventRecord,
    MalformedNotification,
    Notification,
)
from conn_event_decoder.parser import parse_payload


class Transformer:
    """Stateless transform: :class:`Notification` → list of output lines."""

    def __init__(
        self,
        directory: Optional[DeviceDirectory] = None,
        output_format: str = "line",
        instance_id: str = "",
    ) -> None:
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Unknown output format: {output_format!r}")
        self._directory = directory if directory is not None else DeviceDirectory()
        self._format = output_format
        self._instance_id = instance_id

    def transform(self, notification: Notification) -> list[bytes]:
        """Decode every valid record in *notification*.

        Returns
        -------
        list[bytes]
            One newline-terminated line per valid record, in payload order.
            Records with the wrong field count contribute nothing.
        """
        device_name = self._directory.resolve(notification.device_id)
        render = self._render_json if self._format == "json" else self._render_line
        return [
            render(notification, device_name, record)
            for record in parse_payload(notification.data)
        ]

    def transform_malformed(self, malformed: MalformedNotification) -> Optional[bytes]:
        """Serialize *malformed* in ``json`` mode; ``None`` in ``line`` mode."""
        if self._format != "json":
            return None
        return orjson.dumps(asdict(malformed), option=orjson.OPT_APPEND_NEWLINE)

    # ── renderers ───────────────────────────────────────────────────

    def _render_line(
        self, notification: Notification, device_name: str, record: EventRecord
    ) -> bytes:
        line = format_line(device_name, record, decode(record))
        return line.encode("utf-8") + b"\n"

    def _render_json(
        self, notification: Notification, device_name: str, record: EventRecord
    ) -> bytes:
        message = decode(record)
        date_str = format_date(record.epoch_seconds)

        event = DecodedEvent(
            device_id=notification.device_id,
            device_name=device_name,
            timestamp=None if date_str == NO_DATE else date_str,
            epoch_seconds=record.epoch_seconds,
            device_millis=record.device_millis,
            event_code=record.event_code,
            event_name=message.event_name,
            data=record.data_value,
            message=message.text,
            published_at=notification.published_at,
            source={"instance_id": self._instance_id},
        )
        return orjson.dumps(asdict(event), option=orjson.OPT_APPEND_NEWLINE)
