from datetime import date, datetime, time

import pytest

from dental_backend.scheduling.branch_hours import (
    BRANCH_HOURS,
    describe_branches,
    get_branch_hours,
    is_branch_closed,
)
from dental_backend.scheduling.time_slots import (
    day_of_week,
    format_slot,
    format_time,
    intervals_overlap,
    iterate_slots,
    parse_date,
    parse_time,
    slot_to_minutes,
)


@pytest.mark.parametrize(
    ('value', 'expected'),
    [
        ('2026-01-05', date(2026, 1, 5)),
        (' 2026-01-05 ', date(2026, 1, 5)),
        ('2026-01-05T09:30:00', date(2026, 1, 5)),
        (date(2026, 1, 5), date(2026, 1, 5)),
        (datetime(2026, 1, 5, 9, 30), date(2026, 1, 5)),
        ('', None),
        ('05/01/2026', None),
        (None, None),
    ],
)
def test_parse_date(value, expected) -> None:
    assert parse_date(value) == expected


@pytest.mark.parametrize(
    ('value', 'expected'),
    [
        ('09:30', time(9, 30)),
        ('09:30:45', time(9, 30)),
        (time(9, 30, 15), time(9, 30)),
        ('9:30 AM', None),
        ('', None),
        (None, None),
    ],
)
def test_parse_time(value, expected) -> None:
    assert parse_time(value) == expected


def test_day_of_week_counts_from_sunday() -> None:
    assert day_of_week(date(2026, 1, 4)) == 0
    assert day_of_week(date(2026, 1, 5)) == 1
    assert day_of_week(date(2026, 1, 10)) == 6


def test_iterate_slots_excludes_slot_running_past_window_end() -> None:
    assert iterate_slots(time(8, 0), time(9, 45), 30) == [480, 510, 540]


def test_iterate_slots_keeps_window_alignment() -> None:
    assert iterate_slots(time(8, 15), time(9, 15), 30) == [495, 525]


def test_iterate_slots_is_empty_for_short_or_inverted_windows() -> None:
    assert iterate_slots(time(8, 0), time(8, 20), 30) == []
    assert iterate_slots(time(12, 0), time(8, 0), 30) == []


def test_slot_formatting_round_trips() -> None:
    assert format_slot(545) == '09:05'
    assert slot_to_minutes('09:05') == 545


@pytest.mark.parametrize(
    ('first', 'second', 'expected'),
    [
        ((540, 570), (560, 600), True),
        ((540, 570), (570, 600), False),
        ((540, 600), (550, 560), True),
        ((600, 630), (540, 600), False),
    ],
)
def test_intervals_overlap_is_half_open(first, second, expected: bool) -> None:
    assert intervals_overlap(*first, *second) is expected


@pytest.mark.parametrize(
    ('value', 'expected'),
    [
        ('00:15', '12:15 AM'),
        ('08:00', '8:00 AM'),
        ('12:00', '12:00 PM'),
        ('17:30', '5:30 PM'),
        (time(13, 5), '1:05 PM'),
        ('', ''),
        (None, ''),
    ],
)
def test_format_time(value, expected: str) -> None:
    assert format_time(value) == expected


@pytest.mark.parametrize('branch', sorted(BRANCH_HOURS))
def test_every_closed_weekday_is_reported_closed(branch: str) -> None:
    week = [date(2026, 1, 4 + offset) for offset in range(7)]

    for day in week:
        closed = day_of_week(day) in BRANCH_HOURS[branch]['closed_days']
        assert is_branch_closed(branch, day) is closed
        assert get_branch_hours(branch, day).open is not closed


def test_branch_hours_for_open_day() -> None:
    hours = get_branch_hours('Cabugao', date(2026, 1, 5))

    assert hours.open is True
    assert hours.start_time == time(8, 0)
    assert hours.end_time == time(17, 0)
    assert hours.display_hours == '8:00 AM - 5:00 PM'


def test_unknown_branch_is_never_closed_but_has_no_hours() -> None:
    assert is_branch_closed('Vigan', date(2026, 1, 4)) is False
    assert get_branch_hours('Vigan', date(2026, 1, 5)).open is False
    assert get_branch_hours('Vigan', date(2026, 1, 5)).display_hours is None


def test_describe_branches_names_closed_days() -> None:
    described = {entry['branch']: entry['closed_days'] for entry in describe_branches()}

    assert described == {'Cabugao': ['Sunday'], 'San Juan': ['Saturday']}
