from __future__ import annotations

from datetime import datetime, timedelta, timezone

from feedstore.utils.datetime_utils import convert_timezone, to_naive_utc


def test_convert_timezone_treats_naive_values_as_utc() -> None:
    converted = convert_timezone("Europe/Paris", datetime(2026, 7, 1, 10, 0))

    assert converted.utcoffset() == timedelta(hours=2)
    assert converted.hour == 12


def test_convert_timezone_handles_aware_values() -> None:
    value = datetime(2026, 1, 1, 23, 30, tzinfo=timezone(timedelta(hours=-3)))

    converted = convert_timezone("Asia/Tokyo", value)

    assert converted.utcoffset() == timedelta(hours=9)
    assert (converted.day, converted.hour) == (2, 11)


def test_convert_timezone_falls_back_for_unknown_or_missing_names() -> None:
    value = datetime(2026, 3, 3, 3, 3)

    for name in ("Mars/Olympus", "", None):
        converted = convert_timezone(name, value)
        assert converted.utcoffset() == timedelta(0)
        assert converted.hour == 3


def test_convert_timezone_keeps_none() -> None:
    assert convert_timezone("UTC", None) is None


def test_to_naive_utc() -> None:
    aware = datetime(2026, 5, 5, 12, 0, tzinfo=timezone(timedelta(hours=5)))

    assert to_naive_utc(aware) == datetime(2026, 5, 5, 7, 0)
    assert to_naive_utc(None) is None
