"""
Recurrence expansion for the month calendar.

An event's recurrence fields are folded into one of a few pattern objects
(see `pattern_for`) and expanded against a strict calendar-month window.
Everything here is pure: no database access, no app context.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import FrozenSet, Iterable, Iterator, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = ('SUNDAY', 'MONDAY', 'TUESDAY', 'WEDNESDAY', 'THURSDAY', 'FRIDAY', 'SATURDAY')
FREQUENCIES = ('DAILY', 'WEEKLY', 'MONTHLY')

_WEEKDAY_ALIASES = {name[:3]: name for name in WEEKDAY_NAMES}


@dataclass(frozen=True)
class NonRecurring:
    start_day: date


@dataclass(frozen=True)
class Daily:
    pass


@dataclass(frozen=True)
class Weekly:
    days: FrozenSet[str]


@dataclass(frozen=True)
class Monthly:
    day_of_month: int


@dataclass(frozen=True)
class Unrecognized:
    """Recurring event whose frequency is missing or unknown."""
    frequency: Optional[str]


Pattern = Union[NonRecurring, Daily, Weekly, Monthly, Unrecognized]


def as_day(value) -> Optional[date]:
    """Calendar day of a date/datetime (None passes through)."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    return value


def weekday_name(day: date) -> str:
    # date.weekday() is Monday=0; names are Sunday-first
    return WEEKDAY_NAMES[(day.weekday() + 1) % 7]


def normalize_weekdays(raw) -> List[str]:
    """
    Normalize a weekday collection to canonical names ordered Sunday..Saturday.

    Accepts a list/tuple/set of names or a comma-joined string. Matching is
    case-insensitive and three-letter abbreviations are accepted. Unknown
    entries are dropped.
    """
    if not raw:
        return []
    if isinstance(raw, str):
        values = raw.split(',')
    else:
        values = list(raw)
    found = set()
    for val in values:
        key = str(val or '').strip().upper()
        if key in WEEKDAY_NAMES:
            found.add(key)
        elif key in _WEEKDAY_ALIASES:
            found.add(_WEEKDAY_ALIASES[key])
    return [name for name in WEEKDAY_NAMES if name in found]


def normalize_frequency(raw) -> Optional[str]:
    if raw is None:
        return None
    value = str(raw).strip().upper()
    return value if value in FREQUENCIES else None


def month_window(any_day: date) -> Tuple[date, date]:
    """First and last calendar day of the month containing `any_day`."""
    any_day = as_day(any_day)
    first = any_day.replace(day=1)
    next_month = (first.replace(day=28) + timedelta(days=4)).replace(day=1)
    return first, next_month - timedelta(days=1)


def iter_days(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def pattern_for(event) -> Pattern:
    """Fold an event's recurrence fields into a pattern object."""
    if not getattr(event, 'is_recurring', False):
        return NonRecurring(as_day(event.start_date))

    raw_frequency = getattr(event, 'frequency', None)
    frequency = normalize_frequency(raw_frequency)
    if frequency == 'DAILY':
        return Daily()
    if frequency == 'WEEKLY':
        return Weekly(frozenset(normalize_weekdays(getattr(event, 'days_of_week', None))))
    if frequency == 'MONTHLY':
        return Monthly(as_day(event.start_date).day)
    return Unrecognized(raw_frequency)


def _expand_pattern(pattern: Pattern, month_start: date, month_end: date) -> List[date]:
    if isinstance(pattern, NonRecurring):
        return [pattern.start_day] if pattern.start_day is not None else []
    if isinstance(pattern, Daily):
        return list(iter_days(month_start, month_end))
    if isinstance(pattern, Weekly):
        if not pattern.days:
            return []
        return [d for d in iter_days(month_start, month_end) if weekday_name(d) in pattern.days]
    if isinstance(pattern, Monthly):
        try:
            candidate = date(month_start.year, month_start.month, pattern.day_of_month)
        except ValueError:
            # day 31 in a 30-day month, day 30 in February, ...
            return []
        if month_start <= candidate <= month_end:
            return [candidate]
        return []
    if isinstance(pattern, Unrecognized):
        logger.debug("Skipping recurring event with unrecognized frequency %r", pattern.frequency)
        return []
    raise TypeError(f"Unhandled recurrence pattern: {pattern!r}")


def expand_occurrences(event, month_start: date, month_end: date,
                       enforce_recurrence_end: bool = False) -> List[date]:
    """
    Calendar days within [month_start, month_end] on which `event` occurs.

    Non-recurring events always expand to their start day, even when it lies
    outside the window; the caller intersects with whatever it renders.
    `recurrence_end` is ignored unless `enforce_recurrence_end` is set.
    """
    month_start = as_day(month_start)
    month_end = as_day(month_end)
    pattern = pattern_for(event)
    days = _expand_pattern(pattern, month_start, month_end)

    if enforce_recurrence_end and not isinstance(pattern, NonRecurring):
        stop = as_day(getattr(event, 'recurrence_end', None))
        if stop is not None:
            days = [d for d in days if d <= stop]
    return days


def expand_many(events: Iterable, month_start: date, month_end: date,
                enforce_recurrence_end: bool = False):
    """Yield (event, occurrence days) pairs; one bad event never stops the batch."""
    for event in events:
        try:
            days = expand_occurrences(event, month_start, month_end, enforce_recurrence_end)
        except (AttributeError, TypeError, ValueError) as exc:
            logger.warning("Could not expand event %s: %s", getattr(event, 'id', None), exc)
            days = []
        yield event, days
