"""Event persistence over the Flask-SQLAlchemy session."""
import logging
from datetime import datetime, time, timedelta

from sqlalchemy.exc import SQLAlchemyError

from models import Event

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    'title',
    'description',
    'start_date',
    'end_date',
    'is_recurring',
    'frequency',
    'days_of_week',
    'recurrence_end',
)


class EventNotFound(LookupError):
    def __init__(self, event_id):
        super().__init__(f"Event {event_id} not found")
        self.event_id = event_id


def _apply_fields(event, fields):
    for name in EDITABLE_FIELDS:
        if name == 'days_of_week':
            event.weekdays = fields.get(name) or []
        else:
            setattr(event, name, fields.get(name))
    event.is_recurring = bool(event.is_recurring)
    if not event.is_recurring:
        event.frequency = None
        event.days_of_week = None
        event.recurrence_end = None
    elif event.frequency != 'WEEKLY':
        event.days_of_week = None
    return event


class EventStore:
    """
    CRUD access to Event rows. Needs an active app context.
    Database errors roll the session back and propagate.
    """

    def __init__(self, db):
        self.db = db

    @property
    def session(self):
        return self.db.session

    def _commit(self):
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

    def list(self):
        return Event.query.order_by(Event.start_date.asc(), Event.id.asc()).all()

    def list_between(self, start_day, end_day):
        """Events whose start calendar day lies in [start_day, end_day]."""
        lower = datetime.combine(start_day, time())
        upper = datetime.combine(end_day + timedelta(days=1), time())
        return Event.query.filter(
            Event.start_date >= lower,
            Event.start_date < upper
        ).order_by(Event.start_date.asc(), Event.id.asc()).all()

    def get(self, event_id):
        event = self.session.get(Event, event_id)
        if event is None:
            raise EventNotFound(event_id)
        return event

    def create(self, fields):
        event = _apply_fields(Event(), fields)
        self.session.add(event)
        self._commit()
        logger.debug("Created event %s", event.id)
        return event

    def update(self, event_id, fields):
        event = self.get(event_id)
        _apply_fields(event, fields)
        event.updated_at = datetime.utcnow()
        self._commit()
        return event

    def delete(self, event_id):
        event = self.get(event_id)
        self.session.delete(event)
        self._commit()
