from datetime import date, datetime, time, timedelta

from django.utils import timezone

from carcruise.listings.domain.windows import (
    END_OF_DAY, has_ended, parse_time_of_day, resolve_instant, window_end, window_start,
)
from .helpers import stub_booking


def local(dt):
    return timezone.localtime(dt)


def test_parse_time_of_day_regular_and_partial():
    assert parse_time_of_day("10:30") == (10, 30)
    assert parse_time_of_day("7") == (7, 0)
    assert parse_time_of_day("ab:cd") == (0, 0)
    assert parse_time_of_day("09:5x") == (9, 5)


def test_parse_time_of_day_clamps_out_of_range():
    assert parse_time_of_day("25:70") == (23, 59)


def test_parse_time_of_day_empty_means_no_time():
    assert parse_time_of_day("") is None
    assert parse_time_of_day("   ") is None
    assert parse_time_of_day(None) is None


def test_resolve_instant_uses_project_timezone():
    moment = resolve_instant(date(2026, 3, 1), "10:30")
    assert timezone.is_aware(moment)
    assert local(moment).replace(tzinfo=None) == datetime(2026, 3, 1, 10, 30)


def test_resolve_instant_without_day_is_indeterminate():
    assert resolve_instant(None, "10:00") is None
    assert resolve_instant("2026-03-01", "10:00") is None


def test_window_defaults_when_times_are_missing():
    b = stub_booking(pickup_date=date(2026, 3, 1), return_date=date(2026, 3, 2),
                     pickup_time="", return_time=None)
    assert local(window_start(b)).time() == time(0, 0)
    assert local(window_end(b)).time() == END_OF_DAY


def test_has_ended_at_exact_end_instant():
    b = stub_booking(pickup_date=date(2026, 3, 1), return_date=date(2026, 3, 2))
    end = window_end(b)
    assert has_ended(b, end) is True
    assert has_ended(b, end - timedelta(seconds=1)) is False


def test_indeterminate_window_never_ends():
    b = stub_booking(pickup_date=date(2026, 3, 1), return_date=None)
    assert has_ended(b, timezone.now()) is False
