"""JSON API handlers for events and the month calendar."""
import re

from flask import current_app, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from recurrence import expand_occurrences, month_window
from services.calendar_service import build_grid_for_app, local_today, month_grid_payload
from services.event_store import EventNotFound
from services.validation_service import parse_day_value, parse_month_value, validate_event_payload


def _store():
    return current_app.extensions['event_store']


def _parse_event_id(raw):
    if raw is None or not re.fullmatch(r'[0-9]+', str(raw)):
        return None
    return int(str(raw))


def _failure(message, status, **extra):
    body = {'success': False, 'message': message}
    body.update(extra)
    return jsonify(body), status


def _server_error(action, exc):
    current_app.logger.exception("Error %s event", action)
    return _failure(f"Failed to {action} event", 500, error=str(exc))


def _validated_fields():
    return validate_event_payload(
        request.get_json(silent=True) or {},
        tz_name=current_app.config.get('DEFAULT_TIMEZONE'),
        allow_inverted_range=current_app.config.get('ALLOW_INVERTED_RANGES', False),
    )


def _requested_month():
    raw = request.args.get('month')
    if not raw:
        return local_today(current_app.config.get('DEFAULT_TIMEZONE')).replace(day=1)
    return parse_month_value(raw)


def list_events():
    start_raw = request.args.get('start')
    end_raw = request.args.get('end')
    try:
        if start_raw or end_raw:
            start_day = parse_day_value(start_raw) if start_raw else None
            end_day = parse_day_value(end_raw) if end_raw else None
            if start_raw and not start_day:
                return _failure('Invalid start date', 400)
            if end_raw and not end_day:
                return _failure('Invalid end date', 400)
            if start_day is None:
                start_day = month_window(end_day)[0]
            if end_day is None:
                end_day = month_window(start_day)[1]
            if end_day < start_day:
                return _failure('end must be on/after start', 400)
            events = _store().list_between(start_day, end_day)
        else:
            events = _store().list()
    except SQLAlchemyError as exc:
        return _server_error('fetch', exc)
    return jsonify({'success': True, 'events': [ev.to_dict() for ev in events]})


def create_event():
    fields, errors = _validated_fields()
    if errors:
        return _failure('Invalid event data', 400, errors=errors)
    try:
        event = _store().create(fields)
    except SQLAlchemyError as exc:
        return _server_error('create', exc)
    current_app.logger.info("Created event %s (%s)", event.id, event.title)
    return jsonify({'success': True, 'event': event.to_dict()}), 201


def event_detail(event_id):
    """GET / PUT / DELETE a single event."""
    numeric_id = _parse_event_id(event_id)
    if numeric_id is None:
        return _failure('Invalid or missing event ID', 400)

    if request.method == 'DELETE':
        try:
            _store().delete(numeric_id)
        except EventNotFound:
            return _failure('Event not found', 404)
        except SQLAlchemyError as exc:
            return _server_error('delete', exc)
        current_app.logger.info("Deleted event %s", numeric_id)
        return jsonify({'success': True, 'message': 'Event deleted successfully'})

    if request.method == 'PUT':
        fields, errors = _validated_fields()
        if errors:
            return _failure('Invalid event data', 400, errors=errors)
        try:
            event = _store().update(numeric_id, fields)
        except EventNotFound:
            return _failure('Event not found', 404)
        except SQLAlchemyError as exc:
            return _server_error('update', exc)
        current_app.logger.info("Updated event %s", numeric_id)
        return jsonify({
            'success': True,
            'message': 'Event updated successfully',
            'event': event.to_dict()
        })

    try:
        event = _store().get(numeric_id)
    except EventNotFound:
        return _failure('Event not found', 404)
    except SQLAlchemyError as exc:
        return _server_error('fetch', exc)
    return jsonify({'success': True, 'event': event.to_dict()})


def event_occurrences(event_id):
    numeric_id = _parse_event_id(event_id)
    if numeric_id is None:
        return _failure('Invalid or missing event ID', 400)
    month_day = _requested_month()
    if not month_day:
        return _failure('Invalid month', 400)
    try:
        event = _store().get(numeric_id)
    except EventNotFound:
        return _failure('Event not found', 404)
    except SQLAlchemyError as exc:
        return _server_error('fetch', exc)

    month_start, month_end = month_window(month_day)
    days = expand_occurrences(
        event, month_start, month_end,
        enforce_recurrence_end=current_app.config.get('ENFORCE_RECURRENCE_END', False)
    )
    return jsonify({
        'success': True,
        'eventId': event.id,
        'month': month_start.strftime('%Y-%m'),
        'occurrences': [d.isoformat() for d in days],
    })


def calendar_month():
    month_day = _requested_month()
    if not month_day:
        return _failure('Invalid month', 400)
    try:
        grid = build_grid_for_app(current_app.config, _store(), month_day)
    except SQLAlchemyError as exc:
        return _server_error('fetch', exc)
    payload = month_grid_payload(grid, current_app.config.get('CALENDAR_VISIBLE_EVENTS_PER_DAY', 2))
    payload['success'] = True
    return jsonify(payload)
