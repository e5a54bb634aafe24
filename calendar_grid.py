"""Month grid layout: full Sunday-to-Saturday weeks with per-day event buckets."""
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import List, Tuple

from recurrence import as_day, expand_many, iter_days, month_window

MAX_VISIBLE_EVENTS = 2


@dataclass
class CalendarCell:
    day: date
    is_same_month: bool
    events: List = field(default_factory=list)

    def visible_events(self, limit=MAX_VISIBLE_EVENTS):
        return self.events[:limit]

    def overflow_count(self, limit=MAX_VISIBLE_EVENTS):
        return max(len(self.events) - limit, 0)

    def overflow_label(self, limit=MAX_VISIBLE_EVENTS):
        extra = self.overflow_count(limit)
        return f"+{extra} more" if extra else ''


@dataclass
class MonthGrid:
    month_start: date
    month_end: date
    grid_start: date
    grid_end: date
    cells: List[CalendarCell]

    @property
    def weeks(self) -> List[List[CalendarCell]]:
        return [self.cells[i:i + 7] for i in range(0, len(self.cells), 7)]

    @property
    def previous_month(self) -> date:
        return (self.month_start - timedelta(days=1)).replace(day=1)

    @property
    def next_month(self) -> date:
        return self.month_end + timedelta(days=1)

    def cell_for(self, day):
        day = as_day(day)
        if not (self.grid_start <= day <= self.grid_end):
            return None
        return self.cells[(day - self.grid_start).days]


def grid_bounds(current_month) -> Tuple[date, date]:
    """Sunday on/before the first of the month and Saturday on/after its last day."""
    month_start, month_end = month_window(current_month)
    # weekday(): Monday=0 .. Sunday=6
    lead = (month_start.weekday() + 1) % 7
    trail = (5 - month_end.weekday()) % 7
    return month_start - timedelta(days=lead), month_end + timedelta(days=trail)


def build_month_grid(current_month, events, enforce_recurrence_end=False) -> MonthGrid:
    """
    Lay out the month containing `current_month` and bucket `events` per day.

    A day holds an event when it is the event's literal start day, or when the
    event's expansion over the strict month window includes it. Lead and trail
    days from neighbouring months therefore only show start-day matches.
    Events keep their incoming order inside each cell.
    """
    month_start, month_end = month_window(current_month)
    grid_start, grid_end = grid_bounds(current_month)

    cells = [
        CalendarCell(day=d, is_same_month=(month_start <= d <= month_end))
        for d in iter_days(grid_start, grid_end)
    ]

    for event, occurrences in expand_many(events, month_start, month_end, enforce_recurrence_end):
        days = set(occurrences)
        start_day = as_day(getattr(event, 'start_date', None))
        if start_day is not None:
            days.add(start_day)
        for day in sorted(days):
            if grid_start <= day <= grid_end:
                cells[(day - grid_start).days].events.append(event)

    return MonthGrid(
        month_start=month_start,
        month_end=month_end,
        grid_start=grid_start,
        grid_end=grid_end,
        cells=cells,
    )
