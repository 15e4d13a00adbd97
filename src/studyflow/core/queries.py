import calendar
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union

from studyflow.models.entities import Task, TaskStatus

DAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


class StatusFilter(str, Enum):
    ALL = "all"
    PENDING = "pending"
    DONE = "done"

    def matches(self, task: Task) -> bool:
        if self is StatusFilter.ALL:
            return True
        return task.status is TaskStatus(self.value)


def _as_date(value: Union[date, datetime]) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def filter_tasks(
    tasks: Iterable[Task],
    status: StatusFilter = StatusFilter.ALL,
    subject_id: Optional[str] = None,
) -> List[Task]:
    """Tasks matching both the status filter and, when given, the subject."""
    return [
        task
        for task in tasks
        if status.matches(task) and (subject_id is None or task.subject_id == subject_id)
    ]


def tasks_on(tasks: Iterable[Task], day: Union[date, datetime]) -> List[Task]:
    target = _as_date(day)
    return [task for task in tasks if task.date == target]


def pending_count(tasks: Iterable[Task]) -> int:
    return sum(1 for task in tasks if task.is_pending)


def week_bounds(day: Union[date, datetime]) -> Tuple[date, date]:
    """Sunday and Saturday of the week containing ``day``."""
    current = _as_date(day)
    start = current - timedelta(days=(current.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


def today_tasks(tasks: Iterable[Task], today: Union[date, datetime]) -> List[Task]:
    target = _as_date(today)
    return [task for task in tasks if task.date == target and task.is_pending]


def upcoming_this_week(tasks: Iterable[Task], today: Union[date, datetime]) -> List[Task]:
    current = _as_date(today)
    _, week_end = week_bounds(current)
    upcoming = [
        task
        for task in tasks
        if current < task.date <= week_end and task.is_pending
    ]
    return sorted(upcoming, key=lambda task: task.date)


def month_grid(year: int, month: int) -> Tuple[int, List[date]]:
    """
    Layout of a month for a Sunday-first calendar.

    Returns the number of blank cells before the 1st and every date of the month.
    """
    first_weekday, days_in_month = calendar.monthrange(year, month)
    blanks = (first_weekday + 1) % 7
    return blanks, [date(year, month, day) for day in range(1, days_in_month + 1)]


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1
