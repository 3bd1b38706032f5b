"""Record store: the four entity repositories behind one object.

The API and session layers only talk to `RecordStore`; whether the rows live
in process memory or in a SQL database is decided by the factory used.
"""

from typing import Optional

from sqlalchemy.engine import Engine

from core.config import DATABASE_URL, STORAGE_BACKEND
from core.exceptions import ConfigurationError
from core.logger import get_logger
from core.repository import BaseRepository, EntitySpec
from schemas.common import utcnow
from schemas.glucose_schema import ReadingRecord
from schemas.meal_schema import MealPlanRecord
from schemas.note_schema import NoteRecord
from schemas.user_schema import UserRecord
from . import models
from .database import create_db_engine, create_session_factory, init_db
from .memory import MemoryRepository
from .sql import SqlRepository, ping

logger = get_logger("database.store")

USER_SPEC = EntitySpec(
    name="User",
    record=UserRecord,
    list_fields=("allergies",),
)
READING_SPEC = EntitySpec(
    name="Glucose reading",
    record=ReadingRecord,
    order_by="timestamp",
    defaults={"timestamp": utcnow},
)
MEAL_PLAN_SPEC = EntitySpec(
    name="Meal plan",
    record=MealPlanRecord,
    order_by="created_at",
    server_fields={"created_at": utcnow},
    list_fields=("tags", "ingredients", "instructions"),
)
NOTE_SPEC = EntitySpec(
    name="Note",
    record=NoteRecord,
    order_by="timestamp",
    defaults={"timestamp": utcnow},
)


class RecordStore:
    """Users, glucose readings, meal plans and notes.

    Attributes:
        users: Repository of `UserRecord`.
        readings: Repository of `ReadingRecord`.
        meal_plans: Repository of `MealPlanRecord`.
        notes: Repository of `NoteRecord`.
        backend: "memory" or "sql".
    """

    def __init__(
        self,
        users: BaseRepository,
        readings: BaseRepository,
        meal_plans: BaseRepository,
        notes: BaseRepository,
        backend: str,
        engine: Optional[Engine] = None,
    ):
        self.users = users
        self.readings = readings
        self.meal_plans = meal_plans
        self.notes = notes
        self.backend = backend
        self.engine = engine

    def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        return self.users.find_first("username", username)

    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        return self.users.find_first("email", email)

    def ping(self) -> None:
        """Raise if the underlying storage cannot be reached."""
        if self.engine is not None:
            ping(create_session_factory(self.engine))

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()


def create_memory_store() -> RecordStore:
    """Build a store whose contents live only as long as the process."""
    return RecordStore(
        users=MemoryRepository(USER_SPEC),
        readings=MemoryRepository(READING_SPEC),
        meal_plans=MemoryRepository(MEAL_PLAN_SPEC),
        notes=MemoryRepository(NOTE_SPEC),
        backend="memory",
    )


def create_sql_store(url: str = DATABASE_URL, engine: Optional[Engine] = None) -> RecordStore:
    """Build a store on a SQL database, creating the schema if needed."""
    engine = engine or create_db_engine(url)
    init_db(engine)
    session_factory = create_session_factory(engine)
    return RecordStore(
        users=SqlRepository(USER_SPEC, models.User, session_factory),
        readings=SqlRepository(READING_SPEC, models.GlucoseReading, session_factory),
        meal_plans=SqlRepository(MEAL_PLAN_SPEC, models.MealPlan, session_factory),
        notes=SqlRepository(NOTE_SPEC, models.Note, session_factory),
        backend="sql",
        engine=engine,
    )


def create_store(backend: str = STORAGE_BACKEND, url: str = DATABASE_URL) -> RecordStore:
    """Build the store selected by configuration.

    Raises:
        ConfigurationError: If the backend name is not recognised.
    """
    if backend == "memory":
        store = create_memory_store()
    elif backend == "sql":
        store = create_sql_store(url)
    else:
        raise ConfigurationError(f"Unknown storage backend '{backend}'", config_key="STORAGE_BACKEND")
    logger.info("Record store initialised (backend=%s)", store.backend)
    return store
