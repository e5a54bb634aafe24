import logging
import os

from dotenv import load_dotenv
from flask import Flask

load_dotenv()

from models import db
from services import event_routes, page_routes
from services.event_store import EventStore
from text_helpers import linkify_text, recurrence_summary


def _env_flag(name, default=False):
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ['1', 'true', 'yes', 'on']


def _env_int(name, default):
    try:
        return int(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


def _load_config(app, overrides=None):
    app.config['SQLALCHEMY_DATABASE_URI'] = os.environ.get('DATABASE_URL', 'sqlite:///events.db')
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')
    app.config['DEFAULT_TIMEZONE'] = os.environ.get('DEFAULT_TIMEZONE', 'America/New_York')
    # recurrence_end is stored but only bounds expansion when this is on
    app.config['ENFORCE_RECURRENCE_END'] = _env_flag('ENFORCE_RECURRENCE_END')
    app.config['ALLOW_INVERTED_RANGES'] = _env_flag('ALLOW_INVERTED_RANGES')
    app.config['CALENDAR_VISIBLE_EVENTS_PER_DAY'] = _env_int('CALENDAR_VISIBLE_EVENTS_PER_DAY', 2)
    app.config['LOG_LEVEL'] = os.environ.get('LOG_LEVEL', 'INFO').upper()
    if overrides:
        app.config.update(overrides)


def _register_routes(app):
    # Pages
    app.add_url_rule('/', 'index', page_routes.index)
    app.add_url_rule('/calendar', 'calendar_page', page_routes.calendar_page)
    app.add_url_rule('/events/create', 'create_event_page', page_routes.create_event_page)
    app.add_url_rule('/events/<int:event_id>', 'event_detail_page', page_routes.event_detail_page)
    app.add_url_rule('/events/edit/<int:event_id>', 'edit_event_page', page_routes.edit_event_page)
    app.register_error_handler(404, page_routes.not_found_page)

    # Events API
    app.add_url_rule('/api/events', 'list_events', event_routes.list_events, methods=['GET'])
    app.add_url_rule('/api/events', 'create_event', event_routes.create_event, methods=['POST'])
    app.add_url_rule('/api/events/<event_id>', 'event_detail', event_routes.event_detail,
                     methods=['GET', 'PUT', 'DELETE'])
    app.add_url_rule('/api/events/<event_id>/occurrences', 'event_occurrences',
                     event_routes.event_occurrences, methods=['GET'])

    # Calendar API
    app.add_url_rule('/api/calendar/month', 'calendar_month', event_routes.calendar_month, methods=['GET'])


def create_app(config=None):
    """Build the Flask app. `config` overrides environment-derived settings."""
    app = Flask(__name__)
    _load_config(app, config)
    app.logger.setLevel(getattr(logging, app.config['LOG_LEVEL'], logging.INFO))

    db.init_app(app)
    app.extensions['event_store'] = EventStore(db)

    app.jinja_env.filters['linkify'] = linkify_text
    app.jinja_env.filters['recurrence_summary'] = recurrence_summary

    _register_routes(app)

    with app.app_context():
        db.create_all()

    app.logger.debug("Event manager ready (database=%s)", app.config['SQLALCHEMY_DATABASE_URI'])
    return app


if __name__ == '__main__':
    create_app().run(debug=_env_flag('FLASK_DEBUG'))
