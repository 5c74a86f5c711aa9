"""Per-(user, date) mutual exclusion for planning runs."""
from __future__ import annotations

import hashlib
import logging
from contextlib import contextmanager, nullcontext
from datetime import date
from threading import Lock
from typing import Dict, Iterator, List, Tuple
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dayforge.planning.errors import CollaboratorReadError

logger = logging.getLogger(__name__)

_registry_lock = Lock()
# key -> [lock, number of holders or waiters]
_local_locks: Dict[Tuple[str, str], List] = {}


def advisory_key(user_id: UUID, day: date) -> int:
    """Stable signed 64-bit key for pg_advisory_xact_lock."""
    digest = hashlib.blake2b(f"{user_id}:{day.isoformat()}".encode(), digest_size=8).digest()
    return int.from_bytes(digest, "big", signed=True)


@contextmanager
def _local_lock(user_id: UUID, day: date) -> Iterator[None]:
    key = (str(user_id), day.isoformat())
    with _registry_lock:
        entry = _local_locks.setdefault(key, [Lock(), 0])
        entry[1] += 1
    try:
        with entry[0]:
            yield
    finally:
        with _registry_lock:
            entry[1] -= 1
            if entry[1] == 0:
                _local_locks.pop(key, None)


@contextmanager
def plan_date_lock(db: Session, user_id: UUID, day: date) -> Iterator[None]:
    """Serialize planning of one user's date.

    PostgreSQL uses a transaction-scoped advisory lock, released by the
    commit or rollback that ends the run. Other dialects fall back to an
    in-process lock. Any exception inside the block rolls the session back.
    """
    use_advisory = db.get_bind().dialect.name == "postgresql"
    guard = nullcontext() if use_advisory else _local_lock(user_id, day)
    with guard:
        if use_advisory:
            try:
                db.execute(text("SELECT pg_advisory_xact_lock(:key)"), {"key": advisory_key(user_id, day)})
            except SQLAlchemyError as exc:
                db.rollback()
                raise CollaboratorReadError(f"Could not lock {day.isoformat()} for planning: {exc}") from exc
            logger.debug("Advisory lock taken for %s/%s", user_id, day)
        try:
            yield
        except Exception:
            db.rollback()
            raise
