"""Tests for the parser module."""

import pytest

from conn_event_decoder.models import EventRecord
from conn_event_decoder.parser import parse_int, parse_payload, parse_record


SAMPLE_PAYLOAD = "1470912225,52,0,0;1470912226,1642,1,1;1470912228,3630,2,1;"


def test_sample_payload_records() -> None:
    """The device's trailing ``;`` does not produce an extra record."""
    records = list(parse_payload(SAMPLE_PAYLOAD))
    assert records == [
        EventRecord(1470912225, "52", 0, 0),
        EventRecord(1470912226, "1642", 1, 1),
        EventRecord(1470912228, "3630", 2, 1),
    ]


def test_empty_payload() -> None:
    """An empty payload yields nothing."""
    assert list(parse_payload("")) == []


@pytest.mark.parametrize(
    "payload, expected",
    [
        ("1,2,3,4", 1),
        ("1,2,3,4;5,6,7", 1),
        ("1,2,3;4,5,6,7,8;;", 0),
        ("1,2,3,4;garbage;5,6,7,8;", 2),
        (",,,", 1),
    ],
)
def test_only_four_field_records_are_emitted(payload: str, expected: int) -> None:
    """Record count equals the number of 4-field candidates."""
    assert len(list(parse_payload(payload))) == expected


def test_corrupt_record_does_not_hide_siblings() -> None:
    """A bad record in the middle is skipped; order of the rest is kept."""
    records = list(parse_payload("10,1,3,0;bad,record;20,2,4,0"))
    assert [r.event_code for r in records] == [3, 4]


def test_payload_is_lazy_and_restartable() -> None:
    """Each call returns a fresh generator over the same payload."""
    first = parse_payload(SAMPLE_PAYLOAD)
    assert next(first).event_code == 0
    assert len(list(parse_payload(SAMPLE_PAYLOAD))) == 3


def test_millis_passed_through_unmodified() -> None:
    """Field 1 is kept as text, leading zeros and all."""
    record = parse_record("1470912225,0042,0,0")
    assert record is not None
    assert record.device_millis == "0042"


def test_non_numeric_fields_become_none() -> None:
    """Non-numeric numeric fields never raise."""
    record = parse_record("soon,52,abc,x")
    assert record == EventRecord(None, "52", None, None)


def test_wrong_field_count_returns_none() -> None:
    assert parse_record("1,2,3") is None
    assert parse_record("") is None


def test_record_is_immutable() -> None:
    record = parse_record("1,2,3,4")
    with pytest.raises(AttributeError):
        record.event_code = 5  # type: ignore[misc]


@pytest.mark.parametrize(
    "text, expected",
    [
        ("0", 0),
        ("1470912225", 1470912225),
        ("-3", -3),
        ("+7", 7),
        (" 12", 12),
        ("12abc", 12),
        ("abc", None),
        ("", None),
        ("-", None),
        ("٣", None),
        ("1٣", 1),
    ],
)
def test_parse_int(text: str, expected) -> None:
    assert parse_int(text) == expected
