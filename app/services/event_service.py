"""
Event write coordination.

Events and venues live in two tables and every repository call commits on
its own, so multi-row writes are run as small sagas: each step advances an
explicit state, and a failure after the first write triggers a compensating
action that puts the rows back the way the caller last saw them.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from app.core.errors import CompensationFailure, NotFoundOrUnauthorized
from app.models import Event
from app.schemas.event import EventCreate, EventUpdate, EventsQuery, VenueInput
from app.services.query_builder import EventPage, EventReadSpec, owned_event
from app.services.repositories import EventRepo, VenueRepo

logger = logging.getLogger(__name__)


class SagaState(str, Enum):
    STARTED = "started"
    EVENT_WRITTEN = "event_written"
    VENUES_CLEARED = "venues_cleared"
    VENUES_WRITTEN = "venues_written"
    COMPENSATING = "compensating"
    COMPENSATED = "compensated"
    COMPENSATION_FAILED = "compensation_failed"


@dataclass
class Saga:
    """Records the states a multi-step write went through"""
    operation: str
    context: Dict[str, Any] = field(default_factory=dict)
    states: List[SagaState] = field(default_factory=lambda: [SagaState.STARTED])

    @property
    def state(self) -> SagaState:
        return self.states[-1]

    def advance(self, state: SagaState) -> None:
        self.states.append(state)
        logger.debug(
            f"{self.operation}: {state.value}",
            extra={"context": {**self.context, "action": self.operation}}
        )


@dataclass
class EventSnapshot:
    """Scalar fields and venue rows of an event, captured before an update"""
    event_id: str
    fields: Dict[str, Any]
    venues: List[Dict[str, Any]]

    @classmethod
    def capture(cls, event: Event) -> "EventSnapshot":
        return cls(
            event_id=event.id,
            fields={
                "name": event.name,
                "sport_type": event.sport_type,
                "date_time": event.date_time,
                "description": event.description,
                "updated_at": event.updated_at,
            },
            venues=[
                {
                    "id": venue.id,
                    "name": venue.name,
                    "address": venue.address,
                    "created_at": venue.created_at,
                }
                for venue in event.venues
            ],
        )


def revalidation_paths(event_id: Optional[str] = None) -> List[str]:
    """Views a client should refresh after a write"""
    paths = ["/dashboard"]
    if event_id:
        paths.append(f"/dashboard/events/{event_id}")
    return paths


def _event_fields(command: EventCreate) -> Dict[str, Any]:
    return {
        "name": command.name,
        "sport_type": command.sport_type,
        "date_time": command.starts_at,
        "description": command.description or None,
    }


def _venue_rows(venues: List[VenueInput]) -> List[Dict[str, Any]]:
    return [{"name": venue.name, "address": venue.address or None} for venue in venues]


class EventService:
    """Reads and sequenced writes for one caller's events"""

    def __init__(self, db: Session):
        self.db = db
        self.last_saga: Optional[Saga] = None

    # -------- reads --------

    def list(self, owner_id: str, query: EventsQuery) -> EventPage:
        return EventReadSpec.from_query(owner_id, query).fetch(self.db)

    def get(self, owner_id: str, event_id: str) -> Event:
        event = owned_event(self.db, owner_id, event_id)
        if event is None:
            raise NotFoundOrUnauthorized()
        return event

    # -------- writes --------

    def create(self, owner_id: str, command: EventCreate) -> str:
        """Insert an event and its venues; remove the event again if the venues fail"""
        saga = Saga("create_event", {"user_id": owner_id})
        self.last_saga = saga

        event = EventRepo.insert(self.db, owner_id, _event_fields(command))
        event_id = event.id
        saga.context["event_id"] = event_id
        saga.advance(SagaState.EVENT_WRITTEN)

        try:
            VenueRepo.insert_many(self.db, event_id, _venue_rows(command.venues))
        except Exception as exc:
            logger.error(
                "Error creating venues",
                extra={"context": {**saga.context, "action": saga.operation}}
            )
            self._compensate(saga, lambda: EventRepo.delete_by_id(self.db, event_id), exc)
            raise

        saga.advance(SagaState.VENUES_WRITTEN)
        logger.info("Event created", extra={"context": {**saga.context, "action": saga.operation}})
        return event_id

    def update(self, owner_id: str, command: EventUpdate) -> str:
        """Replace an event's fields and its whole venue set.

        The previous fields and venues are snapshotted first; if clearing or
        re-inserting venues fails the snapshot is written back, so the event
        never stays without venues.
        """
        event_id = str(command.id)
        saga = Saga("update_event", {"user_id": owner_id, "event_id": event_id})
        self.last_saga = saga

        current = owned_event(self.db, owner_id, event_id)
        if current is None:
            raise NotFoundOrUnauthorized()
        snapshot = EventSnapshot.capture(current)

        fields = _event_fields(command)
        fields["updated_at"] = datetime.utcnow()
        if EventRepo.update_scoped(self.db, event_id, owner_id, fields) == 0:
            raise NotFoundOrUnauthorized()
        saga.advance(SagaState.EVENT_WRITTEN)

        try:
            VenueRepo.delete_for_event(self.db, event_id)
            saga.advance(SagaState.VENUES_CLEARED)
            VenueRepo.insert_many(self.db, event_id, _venue_rows(command.venues))
        except Exception as exc:
            logger.error(
                "Error replacing venues",
                extra={"context": {**saga.context, "action": saga.operation}}
            )
            self._compensate(saga, lambda: self._restore(owner_id, snapshot), exc)
            raise

        saga.advance(SagaState.VENUES_WRITTEN)
        logger.info("Event updated", extra={"context": {**saga.context, "action": saga.operation}})
        return event_id

    def delete(self, owner_id: str, event_id: str) -> None:
        if EventRepo.delete_scoped(self.db, event_id, owner_id) == 0:
            raise NotFoundOrUnauthorized()
        logger.info(
            "Event deleted",
            extra={"context": {"user_id": owner_id, "event_id": event_id, "action": "delete_event"}}
        )

    # -------- compensation --------

    def _restore(self, owner_id: str, snapshot: EventSnapshot) -> None:
        """Write the snapshot back. Venues are restored even if the fields cannot be."""
        failures = []
        steps = (
            ("fields", lambda: EventRepo.update_scoped(self.db, snapshot.event_id, owner_id, snapshot.fields)),
            ("venues", lambda: self._restore_venues(snapshot)),
        )
        for step, run in steps:
            try:
                run()
            except Exception as exc:
                logger.error(
                    f"Failed to restore event {step}",
                    extra={"context": {"user_id": owner_id, "event_id": snapshot.event_id, "action": "update_event"}},
                    exc_info=exc
                )
                failures.append(exc)
        if failures:
            raise failures[0]

    def _restore_venues(self, snapshot: EventSnapshot) -> None:
        VenueRepo.delete_for_event(self.db, snapshot.event_id)
        VenueRepo.insert_many(self.db, snapshot.event_id, snapshot.venues)

    def _compensate(self, saga: Saga, undo: Callable[[], Any], original: Exception) -> None:
        """Run the undo step. Its own failure is logged; the caller re-raises the original error."""
        saga.advance(SagaState.COMPENSATING)
        try:
            undo()
        except Exception as exc:
            saga.advance(SagaState.COMPENSATION_FAILED)
            failure = CompensationFailure(
                f"Failed to roll back {saga.operation}: {exc}",
                original
            )
            logger.critical(
                failure.message,
                extra={"context": {**saga.context, "action": saga.operation}},
                exc_info=exc
            )
            return
        saga.advance(SagaState.COMPENSATED)
