"""Map parsed records to human-readable messages and output lines.

Decoding is a pure lookup::

    EventRecord.event_code ──► _MESSAGES[code](data_value) ──► DecodedMessage
                                     │
                                     └─ RESET_REASON ──► _RESET_REASONS[data_value]

Both tables are read-only and built once at import.  Codes without an
entry decode to an empty :class:`DecodedMessage` rather than an error.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from types import MappingProxyType
from typing import Callable, Mapping, Optional

from conn_event_decoder.codes import EventCode, ResetReason
from conn_event_decoder.models import DecodedMessage, EventRecord

NO_DATE = "no date"
LINE_SEPARATOR = ","

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_Render = Callable[[Optional[int]], str]


def _constant(text: str) -> _Render:
    return lambda data: text


def _flag(prefix: str, on: str, off: str) -> _Render:
    # Any nonzero value is true; a non-numeric value counts as false.
    return lambda data: f"{prefix} {on if data else off}"


def _reset_reason(data: Optional[int]) -> str:
    return "RESET_REASON " + _RESET_REASONS.get(data, "")


def _tester_ping(data: Optional[int]) -> str:
    return f"TESTER_PING {'NaN' if data is None else data}"


_RESET_REASONS: Mapping[int, str] = MappingProxyType(
    {reason.value: reason.name for reason in ResetReason}
)

_MESSAGES: Mapping[int, _Render] = MappingProxyType({
    EventCode.SETUP_STARTED: _constant("SETUP_STARTED"),
    EventCode.CELLULAR_READY: _flag("CELLULAR_READY", "connected", "disconnected"),
    EventCode.CLOUD_CONNECTED: _flag("CLOUD_CONNECTED", "connected", "disconnected"),
    EventCode.LISTENING_ENTERED: _constant("LISTENING_ENTERED"),
    EventCode.MODEM_RESET: _constant("MODEM_RESET"),
    EventCode.REBOOT_LISTENING: _constant("REBOOT_LISTENING"),
    EventCode.REBOOT_NO_CLOUD: _constant("REBOOT_NO_CLOUD"),
    EventCode.PING_DNS: _flag("PING_DNS", "success", "failed"),
    EventCode.PING_API: _flag("PING_API", "success", "failed"),
    EventCode.APP_WATCHDOG: _constant("APP_WATCHDOG"),
    EventCode.TESTER_RESET: _constant("TESTER_RESET"),
    EventCode.TESTER_APP_WATCHDOG: _constant("TESTER_APP_WATCHDOG"),
    EventCode.TESTER_SLEEP: _constant("TESTER_SLEEP"),
    EventCode.LOW_BATTERY_SLEEP: _constant("LOW_BATTERY_SLEEP"),
    EventCode.SESSION_EVENT_LOST: _constant("SESSION_EVENT_LOST"),
    EventCode.SESSION_RESET: _constant("SESSION_RESET"),
    EventCode.TESTER_RESET_SESSION: _constant("TESTER_RESET_SESSION"),
    EventCode.TESTER_RESET_MODEM: _constant("TESTER_RESET_MODEM"),
    EventCode.RESET_REASON: _reset_reason,
    EventCode.TESTER_SAFE_MODE: _constant("TESTER_SAFE_MODE"),
    EventCode.TESTER_PING: _tester_ping,
    EventCode.STOP_SLEEP_WAKE: _constant("STOP_SLEEP_WAKE"),
})


def _check_exhaustive() -> None:
    """Fail at import if the dispatch table and :class:`EventCode` disagree."""
    missing = set(EventCode) - set(_MESSAGES)
    extra = set(_MESSAGES) - set(EventCode)
    if missing or extra:
        raise RuntimeError(
            f"Event dispatch table out of sync: missing={sorted(missing)} "
            f"extra={sorted(extra)}"
        )


_check_exhaustive()


def decode(record: EventRecord) -> DecodedMessage:
    """Resolve *record*'s event code (and reset reason) to a message.

    Parameters
    ----------
    record:
        A parsed record.  It is only read, never modified.

    Returns
    -------
    DecodedMessage
        ``known`` is False and ``text`` empty when the code has no entry,
        including codes that were not numeric on the wire.
    """
    code = record.event_code
    render = _MESSAGES.get(code)
    if render is None:
        return DecodedMessage(event_code=code)

    return DecodedMessage(
        event_code=code,
        event_name=EventCode(code).name,
        text=render(record.data_value),
    )


def format_date(epoch_seconds: Optional[int]) -> str:
    """Render Unix seconds as ``YYYY-MM-DDTHH:MM:SS.mmmZ``.

    ``0`` is the device's "clock not set" sentinel; it, a non-numeric
    value and an out-of-range value all render as ``no date``.
    """
    if not epoch_seconds:
        return NO_DATE
    try:
        instant = _EPOCH + timedelta(seconds=epoch_seconds)
    except OverflowError:
        return NO_DATE
    return instant.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_line(device_name: str, record: EventRecord, message: DecodedMessage) -> str:
    """Compose ``deviceName,dateStr,deviceMillis,message`` for one record."""
    return LINE_SEPARATOR.join((
        device_name,
        format_date(record.epoch_seconds),
        record.device_millis,
        message.text,
    ))
