from datetime import date, datetime, timedelta, timezone

from ledger.dates import add_days_utc, days_between, parse_date


def test_parse_date_accepts_dates_datetimes_and_strings():
    assert parse_date(date(2024, 1, 1)) == date(2024, 1, 1)
    assert parse_date(datetime(2024, 1, 1, 23, 0)) == date(2024, 1, 1)
    assert parse_date("2024-01-01") == date(2024, 1, 1)
    assert parse_date("2024-01-01T10:30:00") == date(2024, 1, 1)


def test_parse_date_converts_aware_datetimes_to_utc():
    plus_ten = timezone(timedelta(hours=10))
    assert parse_date(datetime(2024, 1, 2, 5, 0, tzinfo=plus_ten)) == date(2024, 1, 1)


def test_parse_date_rejects_garbage():
    assert parse_date(None) is None
    assert parse_date("") is None
    assert parse_date("not a date") is None
    assert parse_date("2024-13-45") is None
    assert parse_date(20240101) is None


def test_add_days_utc_crosses_month_and_leap_day():
    assert add_days_utc("2024-01-01", 50) == date(2024, 2, 20)
    assert add_days_utc(date(2024, 2, 28), 1) == date(2024, 2, 29)
    assert add_days_utc("garbage", 5) is None


def test_days_between_never_negative():
    assert days_between(date(2024, 1, 21), date(2024, 1, 1)) == 20
    assert days_between(date(2024, 1, 1), date(2024, 1, 21)) == 0
