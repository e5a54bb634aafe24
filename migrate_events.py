"""
Create the event table if it does not exist and backfill columns added after
the first release.
Usage:  python migrate_events.py
"""
from sqlalchemy import inspect, text

from app import create_app
from models import db, Event

# column -> DDL type, in the order they were introduced
BACKFILL_COLUMNS = (
    ('is_recurring', 'BOOLEAN DEFAULT 0'),
    ('frequency', 'VARCHAR(20)'),
    ('days_of_week', 'VARCHAR(100)'),
    ('recurrence_end', 'DATETIME'),
    ('created_at', 'DATETIME'),
    ('updated_at', 'DATETIME'),
)


def ensure_event_schema(engine):
    """Idempotently create/upgrade the event table. Returns the added column names."""
    Event.__table__.create(engine, checkfirst=True)
    added = []
    with engine.begin() as conn:
        cols = {col['name'] for col in inspect(conn).get_columns(Event.__tablename__)}
        for column, col_type in BACKFILL_COLUMNS:
            if column in cols:
                print(f"[skip] event.{column} exists")
                continue
            conn.execute(text(f"ALTER TABLE {Event.__tablename__} ADD COLUMN {column} {col_type}"))
            added.append(column)
            print(f"[add] event.{column}")
        if 'is_recurring' in added:
            conn.execute(text(f"UPDATE {Event.__tablename__} SET is_recurring = 0 WHERE is_recurring IS NULL"))
    return added


def main():
    app = create_app()
    with app.app_context():
        ensure_event_schema(db.engine)
        print("event table is ensured.")


if __name__ == '__main__':
    main()
