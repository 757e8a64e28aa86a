from datetime import date, datetime

from event_budget.dates import FixedClock, add_months, as_local_day, to_ymd


def test_add_months_keeps_day_of_month():
    assert add_months(date(2025, 3, 15), 1) == date(2025, 4, 15)


def test_add_months_clamps_to_shorter_month():
    assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2025, 3, 31), 1) == date(2025, 4, 30)


def test_add_months_rolls_over_year():
    assert add_months(date(2025, 12, 10), 1) == date(2026, 1, 10)
    assert add_months(date(2025, 11, 30), 14) == date(2027, 1, 30)


def test_as_local_day_strips_time():
    assert as_local_day('2025-03-31T23:59:00Z') == date(2025, 3, 31)
    assert as_local_day(datetime(2025, 3, 31, 23, 59)) == date(2025, 3, 31)
    assert as_local_day(date(2025, 3, 31)) == date(2025, 3, 31)


def test_as_local_day_rejects_garbage():
    assert as_local_day(None) is None
    assert as_local_day('') is None
    assert as_local_day('next tuesday') is None
    assert as_local_day('2025-02-30') is None
    assert as_local_day(42) is None


def test_fixed_clock_and_ymd():
    clock = FixedClock(date(2025, 5, 1))
    assert clock.today() == date(2025, 5, 1)
    assert to_ymd(clock.today()) == '2025-05-01'
    assert to_ymd(None) is None
