"""Static opening hours for each clinic branch.

Branch hours are the fallback schedule used when no doctor is requested or
the requested doctor has no window of their own for the day.
"""

from datetime import date, time

from pydantic import BaseModel

from dental_backend.scheduling.time_slots import day_of_week, format_time

SUNDAY = 0
SATURDAY = 6

BRANCH_HOURS = {
    'Cabugao': {
        'start_time': time(8, 0),
        'end_time': time(17, 0),
        'closed_days': {SUNDAY},
    },
    'San Juan': {
        'start_time': time(8, 0),
        'end_time': time(17, 0),
        'closed_days': {SATURDAY},
    },
}

DAY_NAMES = ['Sunday', 'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday']


class BranchHours(BaseModel):
    branch: str
    open: bool
    start_time: time | None = None
    end_time: time | None = None

    @property
    def display_hours(self) -> str | None:
        if not self.open:
            return None
        return f'{format_time(self.start_time)} - {format_time(self.end_time)}'


def is_branch_closed(branch: str, target_date: date) -> bool:
    """True only for a configured branch on one of its closed weekdays."""
    hours = BRANCH_HOURS.get(branch)
    if hours is None:
        return False
    return day_of_week(target_date) in hours['closed_days']


def get_branch_hours(branch: str, target_date: date) -> BranchHours:
    hours = BRANCH_HOURS.get(branch)
    if hours is None or day_of_week(target_date) in hours['closed_days']:
        return BranchHours(branch=branch, open=False)

    return BranchHours(
        branch=branch,
        open=True,
        start_time=hours['start_time'],
        end_time=hours['end_time'],
    )


def describe_branches() -> list[dict]:
    return [
        {
            'branch': branch,
            'start_time': hours['start_time'],
            'end_time': hours['end_time'],
            'closed_days': [DAY_NAMES[day] for day in sorted(hours['closed_days'])],
        }
        for branch, hours in BRANCH_HOURS.items()
    ]
