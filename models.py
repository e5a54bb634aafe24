from flask_sqlalchemy import SQLAlchemy
from datetime import datetime

from recurrence import normalize_weekdays

db = SQLAlchemy()


class Event(db.Model):
    """
    Calendar event with optional recurrence metadata.
    Dates are naive timestamps in the server's DEFAULT_TIMEZONE.
    """
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    start_date = db.Column(db.DateTime, nullable=False)
    end_date = db.Column(db.DateTime, nullable=False)
    is_recurring = db.Column(db.Boolean, default=False, nullable=False)
    frequency = db.Column(db.String(20), nullable=True)  # DAILY | WEEKLY | MONTHLY
    days_of_week = db.Column(db.String(100), nullable=True)  # comma-joined weekday names
    recurrence_end = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def weekdays(self):
        return normalize_weekdays(self.days_of_week)

    @weekdays.setter
    def weekdays(self, values):
        names = normalize_weekdays(values)
        self.days_of_week = ','.join(names) if names else None

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'startDate': self.start_date.isoformat() if self.start_date else None,
            'endDate': self.end_date.isoformat() if self.end_date else None,
            'isRecurring': bool(self.is_recurring),
            'frequency': self.frequency,
            'daysOfWeek': self.weekdays,
            'recurrenceEnd': self.recurrence_end.isoformat() if self.recurrence_end else None,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<Event {self.id} {self.title!r}>"
