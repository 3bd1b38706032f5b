"""Database helpers: engine and session factory creation, schema init.

Any SQLAlchemy URL works; SQLite gets the connect args FastAPI's thread pool
needs, and in-memory SQLite shares one connection so every session sees
the same database.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.logger import get_logger
from .models import Base

logger = get_logger("database")


def create_db_engine(url: str) -> Engine:
    """Create an engine for `url` with SQLite-specific settings applied."""
    kwargs = {}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine)


def init_db(engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ready on %s", engine.url.render_as_string(hide_password=True))
