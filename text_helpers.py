import re

from markupsafe import Markup, escape

from recurrence import normalize_frequency, normalize_weekdays


LINK_PATTERN = re.compile(r"\[([^\]]+)\]\((https?://[^\s)]+)\)")


def linkify_text(text):
    """Convert [label](url) in event descriptions into safe links and keep line breaks."""
    if not text:
        return ""
    parts = []
    last = 0
    for match in LINK_PATTERN.finditer(text):
        parts.append(escape(text[last:match.start()]))
        label = escape(match.group(1))
        url = match.group(2)
        parts.append(
            Markup(
                f'<a href="{escape(url)}" target="_blank" rel="noopener noreferrer">{label}</a>'
            )
        )
        last = match.end()
    parts.append(escape(text[last:]))
    joined = "".join(str(part) for part in parts)
    return Markup(joined.replace("\r\n", "\n").replace("\n", "<br>"))


def recurrence_summary(event):
    """Short human label for an event's recurrence, e.g. 'Weekly on Mon, Fri'."""
    if not getattr(event, "is_recurring", False):
        return "One-time"
    frequency = normalize_frequency(getattr(event, "frequency", None))
    if frequency == "DAILY":
        return "Daily"
    if frequency == "WEEKLY":
        days = normalize_weekdays(getattr(event, "days_of_week", None))
        if not days:
            return "Weekly"
        return "Weekly on " + ", ".join(day[:3].title() for day in days)
    if frequency == "MONTHLY":
        start = getattr(event, "start_date", None)
        if start is None:
            return "Monthly"
        return f"Monthly on day {start.day}"
    return "Recurring"
