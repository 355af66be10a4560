"""
Pydantic schemas package
"""

from .common import *
from .auth import *
from .event import *

__all__ = [
    "ActionResult",
    "Caller",
    "SessionRequest",
    "SPORT_TYPES",
    "VenueInput",
    "EventCreate",
    "EventUpdate",
    "EventsQuery",
    "VenueResponse",
    "EventWithVenues",
    "EventList",
    "EventId",
]
