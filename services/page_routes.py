"""Server-rendered pages. Mutations go through the JSON API from the browser."""
from flask import abort, current_app, render_template, request

from services.calendar_service import build_grid_for_app, local_today
from services.event_store import EventNotFound
from services.validation_service import parse_month_value

WEEKDAY_HEADERS = ('Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat')


def _store():
    return current_app.extensions['event_store']


def _load_event(event_id):
    try:
        return _store().get(event_id)
    except EventNotFound:
        abort(404)


def index():
    """Event list."""
    return render_template('index.html', events=_store().list())


def calendar_page():
    """Month grid; ?month=YYYY-MM, defaults to the current month."""
    month_day = parse_month_value(request.args.get('month')) if request.args.get('month') else None
    if not month_day:
        month_day = local_today(current_app.config.get('DEFAULT_TIMEZONE')).replace(day=1)
    grid = build_grid_for_app(current_app.config, _store(), month_day)
    return render_template(
        'calendar.html',
        grid=grid,
        weekday_headers=WEEKDAY_HEADERS,
        visible_limit=current_app.config.get('CALENDAR_VISIBLE_EVENTS_PER_DAY', 2),
        today=local_today(current_app.config.get('DEFAULT_TIMEZONE')),
    )


def create_event_page():
    return render_template('event_form.html', event=None, editing=False)


def edit_event_page(event_id):
    return render_template('event_form.html', event=_load_event(event_id), editing=True)


def event_detail_page(event_id):
    return render_template('event_detail.html', event=_load_event(event_id))


def not_found_page(error):
    if request.path.startswith('/api/'):
        return {'success': False, 'message': 'Not found'}, 404
    return render_template('not_found.html'), 404
