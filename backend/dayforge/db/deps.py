"""FastAPI dependencies for database access."""
from typing import Iterator

from sqlalchemy.orm import Session


def get_db() -> Iterator[Session]:
    """Yield a session per request and always close it."""
    from dayforge.db.session import SessionLocal

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
