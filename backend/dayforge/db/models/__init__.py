"""ORM models exposed for metadata discovery."""
from dayforge.db.models.block import Block
from dayforge.db.models.daily_history import DailyHistory
from dayforge.db.models.fixed_event import FixedEvent
from dayforge.db.models.ritual import Ritual
from dayforge.db.models.user import User
from dayforge.db.models.work_item import WorkItem

__all__ = [
    "Block",
    "DailyHistory",
    "FixedEvent",
    "Ritual",
    "User",
    "WorkItem",
]
