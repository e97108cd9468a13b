"""Database package: declarative base, engine and request-scoped sessions."""

from pulselift.db.base import Base
from pulselift.db.session import async_session_maker, engine, get_db

__all__ = ["Base", "async_session_maker", "engine", "get_db"]
