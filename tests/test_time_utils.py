from datetime import UTC, date, time

from backend.invoicer.core.time import local_today, parse_clock, utc_now


def test_utc_now_is_timezone_aware_utc():
    value = utc_now()
    assert value.tzinfo is UTC


def test_local_today_returns_date():
    assert isinstance(local_today("America/New_York"), date)


def test_parse_clock():
    assert parse_clock("09:00") == time(9, 0)
    assert parse_clock("17:45") == time(17, 45)
    assert parse_clock("7") == time(7, 0)
