"""
Repository layer over the events and venues tables.

Each write commits on its own, the same contract a hosted row-level backend
gives: there is no transaction spanning two repository calls. Storage
failures are rolled back and re-raised as BackendError.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterable, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import BackendError
from app.models import Event, Venue

logger = logging.getLogger(__name__)


@contextmanager
def _write(db: Session, operation: str):
    try:
        yield
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        message = str(getattr(exc, "orig", None) or exc)
        logger.error(f"Storage failure during {operation}", extra={"context": {"action": operation}})
        raise BackendError(message) from exc
    except Exception:
        db.rollback()
        raise


# -------- Event repository --------

class EventRepo:
    @staticmethod
    def insert(db: Session, owner_id: str, fields: Dict[str, Any]) -> Event:
        event = Event(user_id=owner_id, **fields)
        with _write(db, "insert_event"):
            db.add(event)
        db.refresh(event)
        return event

    @staticmethod
    def update_scoped(db: Session, event_id: str, owner_id: str, fields: Dict[str, Any]) -> int:
        """Update by id AND owner; returns the number of rows touched"""
        with _write(db, "update_event"):
            count = db.query(Event).filter(
                Event.id == event_id,
                Event.user_id == owner_id
            ).update(fields, synchronize_session=False)
        return count

    @staticmethod
    def delete_scoped(db: Session, event_id: str, owner_id: str) -> int:
        """Delete by id AND owner; venues go with it"""
        event = db.query(Event).filter(Event.id == event_id, Event.user_id == owner_id).first()
        if not event:
            return 0
        with _write(db, "delete_event"):
            db.delete(event)
        return 1

    @staticmethod
    def delete_by_id(db: Session, event_id: str) -> int:
        """Unscoped delete used to undo an insert this process just made"""
        event = db.query(Event).filter(Event.id == event_id).first()
        if not event:
            return 0
        with _write(db, "delete_event"):
            db.delete(event)
        return 1


# -------- Venue repository --------

class VenueRepo:
    @staticmethod
    def insert_many(db: Session, event_id: str, rows: Iterable[Dict[str, Any]]) -> List[Venue]:
        venues = [Venue(event_id=event_id, **row) for row in rows]
        with _write(db, "insert_venues"):
            db.add_all(venues)
        return venues

    @staticmethod
    def delete_for_event(db: Session, event_id: str) -> int:
        with _write(db, "delete_venues"):
            count = db.query(Venue).filter(Venue.event_id == event_id).delete(synchronize_session=False)
        return count
