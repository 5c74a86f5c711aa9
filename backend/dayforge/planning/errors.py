"""Failure taxonomy for a planning run.

A work item or skeleton entry that finds no slot is not an error: it is
left out of the plan and reported in the run summary.
"""
from __future__ import annotations


class PlanningError(Exception):
    """Base class for every planning failure surfaced to callers."""


class PlanningInputError(PlanningError, ValueError):
    """The request is malformed or refers to something that does not exist."""


class UserNotFoundError(PlanningInputError):
    def __init__(self, user_id) -> None:
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id


class CollaboratorReadError(PlanningError):
    """Fetching backlog, events, rituals or history failed."""


class CollaboratorWriteError(PlanningError):
    """Replacing the stored blocks for a date failed and was rolled back."""
