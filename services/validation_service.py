import re
from datetime import date, datetime, time

import pytz

from recurrence import normalize_frequency, normalize_weekdays


def parse_bool(value, default=False):
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ["1", "true", "yes", "on"]


def parse_day_value(raw):
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    try:
        return datetime.strptime(str(raw), "%Y-%m-%d").date()
    except (TypeError, ValueError):
        return None


# grid bounds and prev/next month must stay within date.min..date.max
MIN_MONTH_YEAR = 2
MAX_MONTH_YEAR = 9998


def parse_month_value(raw):
    """
    Parse 'YYYY-MM' (or a full 'YYYY-MM-DD') into the first day of that month.
    Years outside MIN_MONTH_YEAR..MAX_MONTH_YEAR are rejected.
    """
    if isinstance(raw, date):
        month = parse_day_value(raw).replace(day=1)
    else:
        s = str(raw or "").strip()
        m = re.match(r"^(?P<year>\d{4})-(?P<month>\d{1,2})(-\d{1,2})?$", s)
        if not m:
            return None
        if m.group(3):
            day = parse_day_value(s)
            month = day.replace(day=1) if day else None
        else:
            try:
                month = date(int(m.group("year")), int(m.group("month")), 1)
            except ValueError:
                return None
    if month is None or not (MIN_MONTH_YEAR <= month.year <= MAX_MONTH_YEAR):
        return None
    return month


def parse_datetime_value(raw, tz_name=None):
    """
    Parse ISO timestamps, datetime-local form values ('YYYY-MM-DDTHH:MM') and
    bare dates into a naive datetime. Aware values are converted to `tz_name`
    before the offset is dropped; returns None on failure.
    """
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, date):
        return datetime.combine(raw, time())
    else:
        s = str(raw).strip()
        if s.endswith("Z") or s.endswith("z"):
            s = s[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(s)
        except ValueError:
            return None
    if value.tzinfo is not None:
        if tz_name:
            value = value.astimezone(pytz.timezone(tz_name))
        value = value.replace(tzinfo=None)
    return value


def parse_frequency(raw):
    return normalize_frequency(raw)


def parse_days_of_week(raw):
    return normalize_weekdays(raw)


def _clean_text(value):
    return value.strip() if isinstance(value, str) else ""


def validate_event_payload(data, tz_name=None, allow_inverted_range=False):
    """
    Validate a create/update payload (camelCase keys).

    Returns (fields, errors). `fields` uses model attribute names and already
    has recurrence fields cleared where they do not apply; `errors` maps the
    payload key to a message and is empty when the payload is acceptable.
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        return {}, {"body": "Request body must be a JSON object"}
    errors = {}

    raw_title = data.get("title")
    title = _clean_text(raw_title)
    if raw_title is not None and not isinstance(raw_title, str):
        errors["title"] = "Title must be text"
    elif not title:
        errors["title"] = "Title is required"
    elif len(title) > 200:
        errors["title"] = "Title must be 200 characters or fewer"

    start_date = parse_datetime_value(data.get("startDate"), tz_name)
    if not data.get("startDate"):
        errors["startDate"] = "Start date is required"
    elif start_date is None:
        errors["startDate"] = "Invalid start date"

    end_date = parse_datetime_value(data.get("endDate"), tz_name)
    if not data.get("endDate"):
        errors["endDate"] = "End date is required"
    elif end_date is None:
        errors["endDate"] = "Invalid end date"

    if start_date and end_date and end_date < start_date and not allow_inverted_range:
        errors["endDate"] = "End date must be on or after start date"

    is_recurring = parse_bool(data.get("isRecurring"))
    frequency = None
    days_of_week = []
    recurrence_end = None
    if is_recurring:
        frequency = parse_frequency(data.get("frequency"))
        if not frequency:
            errors["frequency"] = "Select a recurrence frequency"
        if frequency == "WEEKLY":
            days_of_week = parse_days_of_week(data.get("daysOfWeek"))
            if not days_of_week:
                errors["daysOfWeek"] = "Select at least one day of the week"
        if data.get("recurrenceEnd"):
            recurrence_end = parse_datetime_value(data.get("recurrenceEnd"), tz_name)
            if recurrence_end is None:
                errors["recurrenceEnd"] = "Invalid recurrence end date"

    raw_description = data.get("description")
    if raw_description is not None and not isinstance(raw_description, str):
        errors["description"] = "Description must be text"

    fields = {
        "title": title,
        "description": _clean_text(raw_description) or None,
        "start_date": start_date,
        "end_date": end_date,
        "is_recurring": is_recurring,
        "frequency": frequency,
        "days_of_week": days_of_week,
        "recurrence_end": recurrence_end,
    }
    return fields, errors
