from datetime import date, datetime, timedelta
from types import SimpleNamespace

from recurrence import (
    Daily,
    Monthly,
    NonRecurring,
    Unrecognized,
    Weekly,
    expand_many,
    expand_occurrences,
    iter_days,
    month_window,
    normalize_weekdays,
    pattern_for,
    weekday_name,
)

MARCH_2024 = (date(2024, 3, 1), date(2024, 3, 31))
FEB_2024 = (date(2024, 2, 1), date(2024, 2, 29))


def test_one_time_event_expands_to_its_start_day(make_event):
    event = make_event(start=datetime(2024, 3, 10, 14, 30), is_recurring=False)
    assert expand_occurrences(event, *MARCH_2024) == [date(2024, 3, 10)]


def test_one_time_event_ignores_the_window(make_event):
    event = make_event(start=datetime(2024, 3, 10, 14, 30), is_recurring=False)
    assert expand_occurrences(event, date(2024, 1, 1), date(2024, 1, 31)) == [date(2024, 3, 10)]


def test_daily_covers_every_day_of_the_month(make_event):
    event = make_event(start=datetime(2023, 6, 1, 8), is_recurring=True, frequency='DAILY')
    days = expand_occurrences(event, *MARCH_2024)
    assert len(days) == 31
    assert days == list(iter_days(*MARCH_2024))


def test_daily_length_matches_window_in_february(make_event):
    event = make_event(is_recurring=True, frequency='DAILY')
    start, end = FEB_2024
    assert len(expand_occurrences(event, start, end)) == (end - start).days + 1


def test_weekly_monday_friday_in_march_2024(make_event):
    event = make_event(is_recurring=True, frequency='WEEKLY', weekdays=['MONDAY', 'FRIDAY'])
    expected = [date(2024, 3, d) for d in (1, 4, 8, 11, 15, 18, 22, 25, 29)]
    assert expand_occurrences(event, *MARCH_2024) == expected


def test_weekly_membership_matches_weekday_names(make_event):
    event = make_event(is_recurring=True, frequency='WEEKLY', weekdays=['SUNDAY', 'WEDNESDAY', 'SATURDAY'])
    days = set(expand_occurrences(event, *MARCH_2024))
    for day in iter_days(*MARCH_2024):
        assert (day in days) == (weekday_name(day) in {'SUNDAY', 'WEDNESDAY', 'SATURDAY'})


def test_weekly_without_days_is_empty(make_event):
    event = make_event(is_recurring=True, frequency='WEEKLY', weekdays=[])
    assert expand_occurrences(event, *MARCH_2024) == []


def test_weekly_reads_comma_joined_storage(make_event):
    event = make_event(is_recurring=True, frequency='WEEKLY', days_of_week='TUESDAY')
    assert expand_occurrences(event, *MARCH_2024) == [date(2024, 3, d) for d in (5, 12, 19, 26)]


def test_monthly_uses_start_day_of_month(make_event):
    event = make_event(start=datetime(2023, 11, 15, 10), is_recurring=True, frequency='MONTHLY')
    assert expand_occurrences(event, *FEB_2024) == [date(2024, 2, 15)]


def test_monthly_day_31_skips_february(make_event):
    event = make_event(start=datetime(2024, 1, 31, 10), is_recurring=True, frequency='MONTHLY')
    assert expand_occurrences(event, *FEB_2024) == []
    assert expand_occurrences(event, *MARCH_2024) == [date(2024, 3, 31)]
    assert expand_occurrences(event, date(2024, 4, 1), date(2024, 4, 30)) == []


def test_monthly_has_at_most_one_occurrence_per_month(make_event):
    event = make_event(start=datetime(2024, 1, 29), is_recurring=True, frequency='MONTHLY')
    for month in range(1, 13):
        window = month_window(date(2023, month, 1))
        days = expand_occurrences(event, *window)
        assert len(days) <= 1
        for day in days:
            assert day.day == 29


def test_unrecognized_frequency_yields_nothing(make_event):
    event = make_event(is_recurring=True, frequency='FORTNIGHTLY')
    assert expand_occurrences(event, *MARCH_2024) == []


def test_missing_frequency_yields_nothing(make_event):
    event = make_event(is_recurring=True, frequency=None)
    assert expand_occurrences(event, *MARCH_2024) == []


def test_frequency_matching_is_case_insensitive(make_event):
    event = make_event(is_recurring=True, frequency='daily')
    assert len(expand_occurrences(event, *MARCH_2024)) == 31


def test_recurrence_end_is_ignored_by_default(make_event):
    event = make_event(
        is_recurring=True,
        frequency='DAILY',
        recurrence_end=datetime(2024, 3, 10, 23, 0),
    )
    assert len(expand_occurrences(event, *MARCH_2024)) == 31


def test_recurrence_end_bounds_expansion_when_enforced(make_event):
    event = make_event(
        is_recurring=True,
        frequency='DAILY',
        recurrence_end=datetime(2024, 3, 10, 23, 0),
    )
    days = expand_occurrences(event, *MARCH_2024, enforce_recurrence_end=True)
    assert days[0] == date(2024, 3, 1)
    assert days[-1] == date(2024, 3, 10)
    assert len(days) == 10


def test_recurrence_end_does_not_touch_one_time_events(make_event):
    event = make_event(
        start=datetime(2024, 3, 20),
        is_recurring=False,
        recurrence_end=datetime(2024, 3, 1),
    )
    assert expand_occurrences(event, *MARCH_2024, enforce_recurrence_end=True) == [date(2024, 3, 20)]


def test_pattern_for_builds_tagged_variants(make_event):
    assert pattern_for(make_event(start=datetime(2024, 3, 10), is_recurring=False)) == NonRecurring(date(2024, 3, 10))
    assert pattern_for(make_event(is_recurring=True, frequency='DAILY')) == Daily()
    assert pattern_for(make_event(is_recurring=True, frequency='WEEKLY', weekdays=['FRI'])) == Weekly(frozenset({'FRIDAY'}))
    assert pattern_for(make_event(start=datetime(2024, 1, 31), is_recurring=True, frequency='MONTHLY')) == Monthly(31)
    assert pattern_for(make_event(is_recurring=True, frequency='HOURLY')) == Unrecognized('HOURLY')


def test_expansion_is_repeatable(make_event):
    event = make_event(is_recurring=True, frequency='WEEKLY', weekdays=['MONDAY'])
    assert expand_occurrences(event, *MARCH_2024) == expand_occurrences(event, *MARCH_2024)


def test_expand_many_keeps_going_past_a_broken_event(make_event):
    broken = SimpleNamespace(id=9, is_recurring=True, frequency='MONTHLY', start_date=None)
    good = make_event(start=datetime(2024, 3, 5), is_recurring=False)
    results = list(expand_many([broken, good], *MARCH_2024))
    assert results[0] == (broken, [])
    assert results[1] == (good, [date(2024, 3, 5)])


def test_weekday_name_is_sunday_first():
    assert weekday_name(date(2024, 3, 10)) == 'SUNDAY'
    assert weekday_name(date(2024, 3, 11)) == 'MONDAY'
    assert weekday_name(date(2024, 3, 16)) == 'SATURDAY'


def test_normalize_weekdays_accepts_strings_and_abbreviations():
    assert normalize_weekdays('fri, mon, bogus') == ['MONDAY', 'FRIDAY']
    assert normalize_weekdays(['SATURDAY', 'sun', 'Sunday']) == ['SUNDAY', 'SATURDAY']
    assert normalize_weekdays(None) == []


def test_month_window_handles_leap_february():
    assert month_window(date(2024, 2, 14)) == FEB_2024
    assert month_window(datetime(2023, 12, 31, 23, 59)) == (date(2023, 12, 1), date(2023, 12, 31))
    start, end = month_window(date(2023, 2, 1))
    assert end - start == timedelta(days=27)


def test_one_time_event_without_start_date_has_no_occurrences():
    event = SimpleNamespace(id=3, is_recurring=False, frequency=None, start_date=None)
    assert expand_occurrences(event, *MARCH_2024) == []
    assert list(expand_many([event], *MARCH_2024)) == [(event, [])]
