from datetime import datetime

import pytz

from calendar_grid import MAX_VISIBLE_EVENTS, build_month_grid


def local_today(tz_name='America/New_York'):
    tz = pytz.timezone(tz_name or 'UTC')
    return datetime.now(tz).date()


def _event_summary(event):
    return {
        'id': event.id,
        'title': event.title,
        'isRecurring': bool(event.is_recurring),
        'frequency': event.frequency,
        'startDate': event.start_date.isoformat() if event.start_date else None,
    }


def month_grid_payload(grid, visible_limit=MAX_VISIBLE_EVENTS):
    """JSON-ready view of a MonthGrid; each cell carries its full bucket."""
    weeks = []
    for week in grid.weeks:
        row = []
        for cell in week:
            row.append({
                'date': cell.day.isoformat(),
                'isSameMonth': cell.is_same_month,
                'events': [_event_summary(ev) for ev in cell.events],
                'visibleEvents': [ev.id for ev in cell.visible_events(visible_limit)],
                'moreCount': cell.overflow_count(visible_limit),
            })
        weeks.append(row)
    return {
        'month': grid.month_start.strftime('%Y-%m'),
        'monthStart': grid.month_start.isoformat(),
        'monthEnd': grid.month_end.isoformat(),
        'gridStart': grid.grid_start.isoformat(),
        'gridEnd': grid.grid_end.isoformat(),
        'previousMonth': grid.previous_month.strftime('%Y-%m'),
        'nextMonth': grid.next_month.strftime('%Y-%m'),
        'weeks': weeks,
    }


def build_grid_for_app(config, store, month_day):
    """Grid for `month_day` using every stored event and the app's recurrence settings."""
    return build_month_grid(
        month_day,
        store.list(),
        enforce_recurrence_end=bool(config.get('ENFORCE_RECURRENCE_END')),
    )
