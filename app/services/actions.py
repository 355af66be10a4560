"""
Public event operations.

Every function here takes the caller explicitly and returns an ActionResult;
no exception escapes past the `action` wrapper.
"""

import functools
import logging
from typing import Any, Callable, Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import AuthenticationRequired, BackendError, FastbreakError
from app.schemas.auth import Caller
from app.schemas.common import ActionResult
from app.schemas.event import (
    EventCreate,
    EventId,
    EventList,
    EventsQuery,
    EventUpdate,
    EventWithVenues,
)
from app.services.event_service import EventService
from app.services.validation import first_error_message, validate_input

logger = logging.getLogger(__name__)


def action(fallback_message: str, success_status: int = 200):
    """Wrap an operation so every outcome is an ActionResult"""
    def decorator(func: Callable[..., Any]) -> Callable[..., ActionResult]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> ActionResult:
            context = {"action": func.__name__}
            try:
                return ActionResult.ok(func(*args, **kwargs), status_code=success_status)
            except BackendError as exc:
                logger.warning(exc.message, extra={"context": context})
                return ActionResult.fail(exc.message, exc.status_code)
            except FastbreakError as exc:
                return ActionResult.fail(exc.message, exc.status_code)
            except ValidationError as exc:
                return ActionResult.fail(first_error_message(exc), 400)
            except SQLAlchemyError as exc:
                logger.error(fallback_message, extra={"context": context}, exc_info=exc)
                return ActionResult.fail(str(getattr(exc, "orig", None) or exc), BackendError.status_code)
            except Exception:
                logger.exception(fallback_message, extra={"context": context})
                return ActionResult.fail(fallback_message, 500)
        return wrapper
    return decorator


def _require_caller(caller: Optional[Caller]) -> Caller:
    if caller is None:
        raise AuthenticationRequired()
    return caller


@action("Failed to fetch events")
def list_events(db: Session, caller: Optional[Caller], params: Any = None) -> EventList:
    caller = _require_caller(caller)
    query = validate_input(EventsQuery, params if params is not None else {})
    page = EventService(db).list(caller.uid, query)
    return EventList(
        items=[EventWithVenues.model_validate(event) for event in page.items],
        total=page.total,
        has_more=page.has_more,
    )


@action("Failed to fetch event")
def get_event(db: Session, caller: Optional[Caller], event_id: str) -> EventWithVenues:
    caller = _require_caller(caller)
    event = EventService(db).get(caller.uid, str(event_id))
    return EventWithVenues.model_validate(event)


@action("Failed to create event", success_status=201)
def create_event(db: Session, caller: Optional[Caller], payload: Any) -> EventId:
    caller = _require_caller(caller)
    command = validate_input(EventCreate, payload)
    return EventId(id=EventService(db).create(caller.uid, command))


@action("Failed to update event")
def update_event(db: Session, caller: Optional[Caller], payload: Any) -> EventId:
    caller = _require_caller(caller)
    command = validate_input(EventUpdate, payload)
    return EventId(id=EventService(db).update(caller.uid, command))


@action("Failed to delete event")
def delete_event(db: Session, caller: Optional[Caller], event_id: str) -> None:
    caller = _require_caller(caller)
    EventService(db).delete(caller.uid, str(event_id))
