from datetime import datetime

import pytest

from app import create_app
from models import db, Event


@pytest.fixture
def app():
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'DEFAULT_TIMEZONE': 'America/New_York',
    })
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(app):
    with app.app_context():
        yield app.extensions['event_store']


@pytest.fixture
def make_event():
    """Unsaved Event; only the recurrence-relevant fields matter to the expander."""

    def _make(start=datetime(2024, 3, 10, 9, 0), **kwargs):
        kwargs.setdefault('title', 'Event')
        kwargs.setdefault('end_date', start)
        weekdays = kwargs.pop('weekdays', None)
        event = Event(start_date=start, **kwargs)
        if weekdays is not None:
            event.weekdays = weekdays
        return event

    return _make
