"""
Event-related Pydantic schemas
"""

import re
import uuid
from datetime import datetime, timezone
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator, field_serializer
from pydantic_core import PydanticCustomError

SPORT_TYPES = [
    "Soccer",
    "Basketball",
    "Tennis",
    "Baseball",
    "Football",
    "Volleyball",
    "Hockey",
    "Swimming",
    "Other",
]

ALL_SPORTS = "all"

MAX_VENUES = 10


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 string into a naive UTC datetime"""
    parsed = datetime.fromisoformat(re.sub(r"[zZ]$", "+00:00", value.strip()))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _required(value: str, message: str) -> str:
    if not value:
        raise PydanticCustomError("required", message)
    return value


class VenueInput(BaseModel):
    """A venue as submitted with an event"""
    name: str = Field(..., max_length=200)
    address: Optional[str] = Field(None, max_length=500)

    @field_validator("name")
    @classmethod
    def name_required(cls, value: str) -> str:
        return _required(value, "Venue name is required")


class EventCreate(BaseModel):
    """Schema for creating an event together with its venues"""
    name: str = Field(..., max_length=200)
    sport_type: str
    date_time: str
    description: Optional[str] = Field(None, max_length=2000)
    venues: List[VenueInput]

    @field_validator("name")
    @classmethod
    def name_required(cls, value: str) -> str:
        return _required(value, "Event name is required")

    @field_validator("sport_type")
    @classmethod
    def sport_type_known(cls, value: str) -> str:
        if value not in SPORT_TYPES:
            raise PydanticCustomError(
                "sport_type",
                "Sport type must be one of: {choices}",
                {"choices": ", ".join(SPORT_TYPES)},
            )
        return value

    @field_validator("date_time")
    @classmethod
    def date_time_iso(cls, value: str) -> str:
        _required(value, "Date and time are required")
        try:
            parse_iso_datetime(value)
        except ValueError:
            raise PydanticCustomError("date_time", "Date and time must be an ISO-8601 timestamp")
        return value

    @field_validator("venues")
    @classmethod
    def venue_count(cls, value: List[VenueInput]) -> List[VenueInput]:
        if len(value) < 1:
            raise PydanticCustomError("venues", "At least one venue is required")
        if len(value) > MAX_VENUES:
            raise PydanticCustomError("venues", "At most {max} venues are allowed", {"max": MAX_VENUES})
        return value

    @property
    def starts_at(self) -> datetime:
        return parse_iso_datetime(self.date_time)


class EventIdentity(BaseModel):
    id: uuid.UUID


class EventUpdate(EventCreate, EventIdentity):
    """Schema for replacing an event's fields and its whole venue set"""


class EventsQuery(BaseModel):
    """Search, filter and pagination parameters for listing events"""
    search_query: Optional[str] = Field(None, max_length=100, alias="searchQuery")
    sport_filter: Optional[str] = Field(None, alias="sportFilter")
    limit: int = Field(50, ge=1, le=100)
    offset: int = Field(0, ge=0)

    class Config:
        populate_by_name = True

    @field_validator("sport_filter")
    @classmethod
    def sport_filter_known(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        if value != ALL_SPORTS and value not in SPORT_TYPES:
            raise PydanticCustomError(
                "sport_filter",
                "Sport filter must be 'all' or one of: {choices}",
                {"choices": ", ".join(SPORT_TYPES)},
            )
        return value


class VenueResponse(BaseModel):
    """Venue as returned to callers"""
    id: str
    event_id: str
    name: str
    address: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

    @field_serializer("created_at")
    def serialize_utc(self, value: datetime) -> str:
        return _as_utc_iso(value)


class EventWithVenues(BaseModel):
    """An event together with all of its venues"""
    id: str
    user_id: str
    name: str
    sport_type: str
    date_time: datetime
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    venues: List[VenueResponse] = []

    class Config:
        from_attributes = True

    @field_serializer("date_time", "created_at", "updated_at")
    def serialize_utc(self, value: datetime) -> str:
        return _as_utc_iso(value)


class EventList(BaseModel):
    """One page of events plus the total match count"""
    items: List[EventWithVenues]
    total: int
    has_more: bool = Field(..., serialization_alias="hasMore")


class EventId(BaseModel):
    id: str


def _as_utc_iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat().replace("+00:00", "Z")
