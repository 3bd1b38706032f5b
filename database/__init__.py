"""Database package: record store backends, ORM models and engine helpers."""

from .database import create_db_engine, create_session_factory, init_db
from .store import RecordStore, create_memory_store, create_sql_store, create_store
from . import models

__all__ = [
    "create_db_engine",
    "create_session_factory",
    "init_db",
    "RecordStore",
    "create_memory_store",
    "create_sql_store",
    "create_store",
    "models",
]
