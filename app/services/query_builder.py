"""
Read-side query composition for events.

Every query starts from the caller's own rows; nothing a client sends can
widen that scope.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.orm import Query, Session, selectinload

from app.models import Event
from app.schemas.event import ALL_SPORTS, EventsQuery

LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so user text is matched literally"""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


@dataclass
class EventPage:
    items: List[Event]
    total: int
    limit: int
    offset: int

    @property
    def has_more(self) -> bool:
        return self.offset + self.limit < self.total


@dataclass(frozen=True)
class EventReadSpec:
    """Ownership-scoped, filtered and paginated read of a caller's events"""

    owner_id: str
    search: Optional[str] = None
    sport: Optional[str] = None
    limit: int = 50
    offset: int = 0

    @classmethod
    def from_query(cls, owner_id: str, query: EventsQuery) -> "EventReadSpec":
        search = (query.search_query or "").strip() or None
        sport = query.sport_filter if query.sport_filter != ALL_SPORTS else None
        return cls(
            owner_id=owner_id,
            search=search,
            sport=sport,
            limit=query.limit,
            offset=query.offset,
        )

    def filtered(self, db: Session) -> Query:
        query = db.query(Event).filter(Event.user_id == self.owner_id)
        if self.search:
            query = query.filter(
                Event.name.ilike(f"%{escape_like(self.search)}%", escape=LIKE_ESCAPE)
            )
        if self.sport:
            query = query.filter(Event.sport_type == self.sport)
        return query

    def fetch(self, db: Session) -> EventPage:
        query = self.filtered(db)
        total = query.count()
        items = (
            query.options(selectinload(Event.venues))
            .order_by(Event.date_time.asc(), Event.created_at.asc(), Event.id.asc())
            .offset(self.offset)
            .limit(self.limit)
            .all()
        )
        return EventPage(items=items, total=total, limit=self.limit, offset=self.offset)


def owned_event(db: Session, owner_id: str, event_id: str) -> Optional[Event]:
    """Single event by id, restricted to the owner; None when nothing matches"""
    return (
        db.query(Event)
        .options(selectinload(Event.venues))
        .filter(Event.id == event_id, Event.user_id == owner_id)
        .first()
    )
