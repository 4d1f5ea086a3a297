"""Tests for the transform module."""

import orjson
import pytest

from conn_event_decoder.classifier import classify
from conn_event_decoder.directory import DeviceDirectory
from conn_event_decoder.models import Notification
from conn_event_decoder.transform import Transformer


DEVICE_ID = "3a0021000447343138333038"
DIRECTORY = DeviceDirectory({DEVICE_ID: "truck-7"})

NOTIFICATION = Notification(
    device_id=DEVICE_ID,
    data="1470912225,52,0,0;0,1642,1,1;1470912228,3630,18,60;bad;1470912229,3700,99,0;",
    name="connEventStats",
    published_at="2016-08-11T10:43:46.120Z",
)


def test_line_format() -> None:
    """One line per valid record, in payload order."""
    xform = Transformer(directory=DIRECTORY)
    lines = xform.transform(NOTIFICATION)
    assert lines == [
        b"truck-7,2016-08-11T10:43:45.000Z,52,SETUP_STARTED\n",
        b"truck-7,no date,1642,CELLULAR_READY connected\n",
        b"truck-7,2016-08-11T10:43:48.000Z,3630,RESET_REASON RESET_REASON_WATCHDOG\n",
        b"truck-7,2016-08-11T10:43:49.000Z,3700,\n",
    ]


def test_unknown_device_uses_raw_id() -> None:
    xform = Transformer()
    lines = xform.transform(Notification(device_id="dev-x", data="0,1,3,0"))
    assert lines == [b"dev-x,no date,1,LISTENING_ENTERED\n"]


def test_empty_payload_produces_nothing() -> None:
    xform = Transformer(directory=DIRECTORY)
    assert xform.transform(Notification(device_id=DEVICE_ID, data="")) == []


def test_json_format() -> None:
    xform = Transformer(directory=DIRECTORY, output_format="json", instance_id="test-01")
    records = [orjson.loads(line) for line in xform.transform(NOTIFICATION)]

    assert len(records) == 4
    first = records[0]
    assert first["event_type"] == "connection_event"
    assert first["device_id"] == DEVICE_ID
    assert first["device_name"] == "truck-7"
    assert first["timestamp"] == "2016-08-11T10:43:45.000Z"
    assert first["epoch_seconds"] == 1470912225
    assert first["device_millis"] == "52"
    assert first["event_code"] == 0
    assert first["event_name"] == "SETUP_STARTED"
    assert first["message"] == "SETUP_STARTED"
    assert first["published_at"] == "2016-08-11T10:43:46.120Z"
    assert first["source"] == {"instance_id": "test-01"}

    assert records[1]["timestamp"] is None
    assert records[1]["data"] == 1

    unknown = records[3]
    assert unknown["event_code"] == 99
    assert unknown["event_name"] is None
    assert unknown["message"] == ""


def test_output_is_newline_terminated_bytes() -> None:
    xform = Transformer(output_format="json")
    for line in xform.transform(NOTIFICATION):
        assert isinstance(line, bytes)
        assert line.endswith(b"\n")


def test_malformed_json_mode() -> None:
    malformed = classify("{broken", instance_id="test-01")
    data = Transformer(output_format="json").transform_malformed(malformed)
    record = orjson.loads(data)
    assert record["event_type"] == "malformed"
    assert record["error"]["code"] == "parse_error"


def test_malformed_line_mode_is_not_emitted() -> None:
    malformed = classify("{broken")
    assert Transformer().transform_malformed(malformed) is None


def test_unknown_format_rejected() -> None:
    with pytest.raises(ValueError):
        Transformer(output_format="csv")


def test_transform_is_repeatable() -> None:
    """The transformer keeps no state between notifications."""
    xform = Transformer(directory=DIRECTORY)
    assert xform.transform(NOTIFICATION) == xform.transform(NOTIFICATION)
