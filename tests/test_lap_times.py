import pytest

from lapsheet.lap_times import format_lap_time, looks_like_timestamp, parse_lap_time_to_seconds


@pytest.mark.parametrize("token, expected", [
    ("1:23.456", 83.456),
    ("01:23.456", 83.456),
    ("59:59.999", 3599.999),
    ("1:23", 83.0),
    ("1:23.", 83.0),
    ("1:05.5", 65.5),
    (" 1:23.456 ", 83.456),
    ("0:01:45.234", 105.234),
    ("00:01:23.456", 83.456),
    ("1:00:00", 3600.0),
    ("83.456", 83.456),
    ("83", 83.0),
    (".5", 0.5),
])
def test_accepts_lap_durations(token, expected):
    assert parse_lap_time_to_seconds(token) == pytest.approx(expected)


@pytest.mark.parametrize("token", [
    "2024-03-15",
    "2024-03-15T10:30:00Z",
    "03/15/2024",
    "3/5/24",
    "10:30:00+02:00",
    "1:23.456Z",
    "T10:30:00",
])
def test_rejects_dates_and_timestamps(token):
    assert looks_like_timestamp(token)
    assert parse_lap_time_to_seconds(token) is None


@pytest.mark.parametrize("token", [
    "1:45:30",      # hours=1 but over an hour long
    "2:00:00",      # time of day
    "14:23:05",
    "1:60.000",     # seconds out of range
    "60:00.000",    # minutes out of range
    "0:60:00",
    "0:00.000",
    "0",
    "3600",
    "4000.5",
    "-83.456",
    "",
    "   ",
    "abc",
    "83.456s",
    "1,234",
    "nan",
    "inf",
    "٨٣",           # Arabic-Indic digits
    "١:٢٣.٤٥٦",
    "８３.４５６",   # full-width digits
])
def test_rejects_non_laps(token):
    assert parse_lap_time_to_seconds(token) is None


def test_non_string_input():
    assert parse_lap_time_to_seconds(None) is None
    assert parse_lap_time_to_seconds(83.4) is None


@pytest.mark.parametrize("seconds, expected", [
    (83.456, "1:23.456"),
    (65.5, "1:05.500"),
    (9.0, "0:09.000"),
    (59.9996, "1:00.000"),
    (3599.999, "59:59.999"),
])
def test_format_lap_time(seconds, expected):
    assert format_lap_time(seconds) == expected


@pytest.mark.parametrize("token", ["1:23.456", "0:59.999", "12:00.001", "2:07.090"])
def test_format_reproduces_parsed_token(token):
    assert format_lap_time(parse_lap_time_to_seconds(token)) == token
