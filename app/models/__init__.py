"""
Database models package
"""

from .event import Event
from .venue import Venue

__all__ = ["Event", "Venue"]
