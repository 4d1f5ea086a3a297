"""Dataclass models for decoded connection events.

Output models are designed to be serializable via ``dataclasses.asdict()``
followed by ``orjson.dumps()``.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class EventRecord:
    """One ``epoch,millis,code,data`` record from a packed payload.

    Numeric fields are ``None`` when the wire text held no digits.
    """

    epoch_seconds: Optional[int]
    device_millis: str
    event_code: Optional[int]
    data_value: Optional[int]


@dataclass(frozen=True)
class DecodedMessage:
    """Human-readable meaning of a record's event code.

    ``event_name`` is ``None`` and ``text`` is empty when the code has no
    table entry.
    """

    event_code: Optional[int] = None
    event_name: Optional[str] = None
    text: str = ""

    @property
    def known(self) -> bool:
        return self.event_name is not None


@dataclass(frozen=True)
class Notification:
    """A single event-stream notification carrying a packed payload."""

    device_id: str
    data: str
    name: Optional[str] = None
    published_at: Optional[str] = None


@dataclass
class DecodedEvent:
    """Structured output record for one decoded :class:`EventRecord`."""

    event_type: str = "connection_event"
    device_id: str = ""
    device_name: str = ""
    timestamp: Optional[str] = None
    epoch_seconds: Optional[int] = None
    device_millis: str = ""
    event_code: Optional[int] = None
    event_name: Optional[str] = None
    data: Optional[int] = None
    message: str = ""
    published_at: Optional[str] = None
    source: Optional[dict] = field(default_factory=dict)


@dataclass
class MalformedNotification:
    """Wrapper for notification lines that fail classification."""

    event_type: str = "malformed"
    received_at: str = ""
    error: Optional[dict] = field(default_factory=dict)
    source: Optional[dict] = field(default_factory=dict)
