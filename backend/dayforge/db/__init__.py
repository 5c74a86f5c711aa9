"""Database utilities and models."""

from dayforge.db.base import Base
from dayforge.db import models  # noqa: F401  (imported for side effects)

__all__ = ["Base"]
