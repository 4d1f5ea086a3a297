"""Classify raw notification lines into notifications or malformed records.

Classification pipeline::

    raw line
      │
      ├─ blank                  → None  (skip)
      ├─ JSON parse failure     → MalformedNotification(code="parse_error")
      ├─ no string ``data``     → MalformedNotification(code="schema_mismatch")
      ├─ missing ``coreid``     → MalformedNotification(code="missing_fields")
      └─ valid                  → Notification
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Union

import orjson

from conn_event_decoder.models import MalformedNotification, Notification

# Maximum bytes of raw payload preserved in malformed records.
MAX_RAW_PAYLOAD_BYTES = 4096


def classify(
    raw: str | bytes,
    instance_id: str = "",
) -> Union[Notification, MalformedNotification, None]:
    """Classify a single raw notification line.

    Parameters
    ----------
    raw:
        One NDJSON line from the event stream (``str`` or ``bytes``).
    instance_id:
        Value for ``source.instance_id`` in malformed records.

    Returns
    -------
    Notification
        When the line is a JSON object with a string ``data`` payload and
        a non-empty ``coreid``.
    MalformedNotification
        When the line cannot be parsed or fails structural checks.
    None
        When the line is blank.
    """
    if not raw.strip():
        return None

    source = {"instance_id": instance_id}

    # Step 1: parse JSON
    try:
        msg = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        return _malformed("parse_error", str(exc), raw, source)

    # Step 2: require a string payload
    if not isinstance(msg, dict) or not isinstance(msg.get("data"), str):
        return _malformed(
            "schema_mismatch", "Notification missing string field: data", raw, source
        )

    # Step 3: require the device id
    device_id = msg.get("coreid")
    if not isinstance(device_id, str) or not device_id:
        return _malformed(
            "missing_fields", "Notification missing required field: coreid", raw, source
        )

    return Notification(
        device_id=device_id,
        data=msg["data"],
        name=_optional_str(msg.get("name")),
        published_at=_optional_str(msg.get("published_at")),
    )


# ── helpers ─────────────────────────────────────────────────────────


def _optional_str(value: object) -> Optional[str]:
    return value if isinstance(value, str) else None


def _malformed(
    code: str,
    message: str,
    raw: str | bytes,
    source: dict,
) -> MalformedNotification:
    """Build a :class:`MalformedNotification` with truncation handling."""
    raw_bytes = raw.encode("utf-8") if isinstance(raw, str) else raw
    truncated = len(raw_bytes) > MAX_RAW_PAYLOAD_BYTES
    if truncated:
        raw_bytes = raw_bytes[:MAX_RAW_PAYLOAD_BYTES]

    return MalformedNotification(
        event_type="malformed",
        received_at=datetime.now(timezone.utc).isoformat(),
        error={
            "code": code,
            "message": message,
            "raw_payload": raw_bytes.decode("utf-8", errors="ignore"),
            "raw_payload_truncated": truncated,
        },
        source=source,
    )
