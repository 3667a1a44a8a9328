from __future__ import annotations

import json
from datetime import UTC, datetime

import pytest

from pylaptime.exceptions import LapTimeMessageError
from pylaptime.models.messages import FeedEvent, Passing, StatusMessage, parse_message


def test_parse_passing_from_converter_payload() -> None:
    raw = json.dumps(
        {
            "passing_number": 42,
            "transponder": "4711",
            "date": "2024-01-12T09:06:35.944Z",
            "time": "09:06:35.944",
            "rtc_time": "2024-01-12T09:06:35.944Z",
            "strength": 87,
            "tran_code": "",
            "noise": 0,
            "hits": 12,
            "loop_id": 3,
        }
    )

    message = parse_message(raw)

    assert isinstance(message, Passing)
    assert message.transponder == "4711"
    assert message.passing_number == 42
    assert message.date == datetime(2024, 1, 12, 9, 6, 35, 944000, tzinfo=UTC)
    assert message.hits == 12
    assert message.raw["loop_id"] == 3


def test_naive_timestamp_is_made_timezone_aware() -> None:
    message = parse_message('{"passing_number": 1, "transponder": "A1", "date": "2024-01-12T09:06:35.944"}')

    assert isinstance(message, Passing)
    assert message.date.tzinfo is not None
    assert message.date.replace(tzinfo=None) == datetime(2024, 1, 12, 9, 6, 35, 944000)


def test_numeric_transponder_code_kept_as_string() -> None:
    message = parse_message(b'{"passing_number": 1, "transponder": 127, "date": "2024-01-12T09:06:35Z"}')

    assert isinstance(message, Passing)
    assert message.transponder == "127"


def test_passing_number_zero_still_identifies_a_passing() -> None:
    message = parse_message('{"passing_number": 0, "transponder": "A1", "date": "2024-01-12T09:06:35Z"}')

    assert isinstance(message, Passing)


@pytest.mark.parametrize("event", ["connected", "disconnected"])
def test_parse_status_events(event: str) -> None:
    message = parse_message(json.dumps({"event": event}))

    assert isinstance(message, StatusMessage)
    assert message.event == FeedEvent(event)


@pytest.mark.parametrize(
    "raw",
    [
        '{"event": "rebooting"}',
        '{"hello": "world"}',
        '{"passing_number": null, "transponder": "A1"}',
    ],
)
def test_unknown_objects_are_ignored(raw: str) -> None:
    assert parse_message(raw) is None


@pytest.mark.parametrize("raw", ["not json", "[1, 2]", '"text"', b"\xff\xfe"])
def test_non_object_payloads_raise(raw: str | bytes) -> None:
    with pytest.raises(LapTimeMessageError):
        parse_message(raw)


def test_invalid_passing_raises_with_payload() -> None:
    with pytest.raises(LapTimeMessageError) as excinfo:
        parse_message('{"passing_number": 5, "date": "yesterday"}')

    assert excinfo.value.payload == {"passing_number": 5, "date": "yesterday"}
