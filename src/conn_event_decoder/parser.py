"""Split packed connection-event payloads into :class:`EventRecord` objects.

Payload grammar::

    payload := record (";" record)*
    record  := epoch "," millis "," code "," data

Devices terminate every record with ``;`` so a payload normally ends with
an empty candidate.  Any candidate that does not hold exactly four fields
is dropped without raising, so one corrupt record never hides its
siblings.
"""

from __future__ import annotations

import logging
import re
from typing import Iterator, Optional

from conn_event_decoder.models import EventRecord

logger = logging.getLogger(__name__)

RECORD_SEPARATOR = ";"
FIELD_SEPARATOR = ","
FIELD_COUNT = 4

# Leading integer, surrounding whitespace allowed, trailing text ignored.
_INT_PREFIX_RE = re.compile(r"\s*([+-]?[0-9]+)")


def parse_payload(raw: str) -> Iterator[EventRecord]:
    """Yield the valid records of *raw* in payload order.

    The generator is lazy; call again to iterate the payload a second time.
    """
    for candidate in raw.split(RECORD_SEPARATOR):
        record = parse_record(candidate)
        if record is not None:
            yield record


def parse_record(candidate: str) -> Optional[EventRecord]:
    """Parse one ``epoch,millis,code,data`` candidate.

    Returns ``None`` when the field count is not exactly four.
    """
    fields = candidate.split(FIELD_SEPARATOR)
    if len(fields) != FIELD_COUNT:
        if candidate:
            logger.debug(
                "Dropped record with %d fields: %r", len(fields), candidate
            )
        return None

    return EventRecord(
        epoch_seconds=parse_int(fields[0]),
        device_millis=fields[1],
        event_code=parse_int(fields[2]),
        data_value=parse_int(fields[3]),
    )


def parse_int(text: str) -> Optional[int]:
    """Parse the leading decimal integer of *text*, or ``None`` if there is none.

    >>> parse_int("1470912225")
    1470912225
    >>> parse_int(" 12abc")
    12
    >>> parse_int("abc") is None
    True
    """
    match = _INT_PREFIX_RE.match(text)
    if match is None:
        return None
    return int(match.group(1))
