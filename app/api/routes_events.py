"""
Event API routes - every operation runs on behalf of the resolved caller
"""

from typing import Any, Optional
from fastapi import APIRouter, Body, Depends, Request
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.schemas.auth import Caller
from app.schemas.common import ActionResult
from app.schemas.event import SPORT_TYPES
from app.services import actions
from app.api.ws import EVENT_DELETED, websocket_manager
from app.utils.security import get_current_caller
from app.utils.responses import result_response

router = APIRouter()

@router.get("/sport-types")
async def list_sport_types():
    """Sport categories an event can have"""
    return result_response(ActionResult.ok(SPORT_TYPES))

@router.get("/events")
async def list_events(
    request: Request,
    db: Session = Depends(get_db),
    caller: Optional[Caller] = Depends(get_current_caller)
):
    """List the caller's events with search, sport filter and pagination"""
    result = actions.list_events(db, caller, dict(request.query_params))
    return result_response(result)

@router.get("/events/{event_id}")
async def get_event(
    event_id: str,
    db: Session = Depends(get_db),
    caller: Optional[Caller] = Depends(get_current_caller)
):
    """Get one event with its venues"""
    result = actions.get_event(db, caller, event_id)
    return result_response(result)

@router.post("/events")
async def create_event(
    payload: Any = Body(None),
    db: Session = Depends(get_db),
    caller: Optional[Caller] = Depends(get_current_caller)
):
    """Create an event together with its venues"""
    result = actions.create_event(db, caller, payload)
    if result.success:
        await websocket_manager.notify_change(caller.uid, "event_created", result.data.id)
    return result_response(result)

@router.put("/events/{event_id}")
async def update_event(
    event_id: str,
    payload: Any = Body(None),
    db: Session = Depends(get_db),
    caller: Optional[Caller] = Depends(get_current_caller)
):
    """Replace an event's fields and its venue set"""
    if isinstance(payload, dict):
        payload = {**payload, "id": event_id}
    result = actions.update_event(db, caller, payload)
    if result.success:
        await websocket_manager.notify_change(caller.uid, "event_updated", event_id)
    return result_response(result)

@router.delete("/events/{event_id}")
async def delete_event(
    event_id: str,
    db: Session = Depends(get_db),
    caller: Optional[Caller] = Depends(get_current_caller)
):
    """Delete an event and its venues"""
    result = actions.delete_event(db, caller, event_id)
    if result.success:
        await websocket_manager.notify_change(caller.uid, EVENT_DELETED, event_id)
    return result_response(result)
