"""Repository interface shared by every record store backend.

A repository owns one entity collection keyed by auto-incrementing integer
ids. Lookups that miss return ``None`` (or ``False`` for deletes); domain
errors are raised by the API layer, never here. The one storage-level error
is `UniqueConflict`, raised by the `*_unique` writes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Generic, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel

R = TypeVar("R", bound=BaseModel)


class UniqueConflict(Exception):
    """A write would give two records the same value in a unique field.

    Attributes:
        field: Name of the first conflicting field.
    """

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Duplicate value for unique field '{field}'")


@dataclass(frozen=True)
class EntitySpec:
    """Describes one entity collection independently of the backend.

    Attributes:
        name: Human-readable name used in error messages ("Glucose reading").
        record: Pydantic record class returned by the repository.
        order_by: Timestamp field used for newest-first listing and range filters.
        defaults: Factories filling fields that are missing or ``None`` on create.
        server_fields: Factories for fields always assigned on create.
        list_fields: Fields holding ordered string lists.
    """

    name: str
    record: Type[BaseModel]
    order_by: Optional[str] = None
    defaults: Dict[str, Callable[[], Any]] = field(default_factory=dict)
    server_fields: Dict[str, Callable[[], Any]] = field(default_factory=dict)
    list_fields: Tuple[str, ...] = ()

    @property
    def immutable_fields(self) -> Tuple[str, ...]:
        return ("id", "user_id") + tuple(self.server_fields)


class BaseRepository(ABC, Generic[R]):
    """Generic CRUD contract over one entity collection.

    Attributes:
        spec: Entity description driving defaults, ordering and immutability.
    """

    def __init__(self, spec: EntitySpec):
        self.spec = spec

    @abstractmethod
    def get(self, record_id: int) -> Optional[R]:
        """Return the record with this id, or None."""

    @abstractmethod
    def list_by_user(
        self,
        user_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
        **equals: Any
    ) -> List[R]:
        """Return the user's records newest-first.

        Args:
            user_id: Owning user.
            start: Inclusive lower bound on the ordering timestamp.
            end: Inclusive upper bound on the ordering timestamp.
            limit: Maximum number of records to return.
            **equals: Exact-match filters on other fields, ignored when None.
        """

    @abstractmethod
    def create(self, fields: Dict[str, Any]) -> R:
        """Persist a new record with a fresh id and return it."""

    @abstractmethod
    def create_unique(self, fields: Dict[str, Any], unique: Tuple[str, ...]) -> R:
        """Create a record unless another one already holds a value in `unique`.

        The check and the insert happen atomically. String values compare
        case-insensitively.

        Raises:
            UniqueConflict: Naming the first field, in `unique` order, that clashes.
        """

    @abstractmethod
    def update(self, record_id: int, fields: Dict[str, Any]) -> Optional[R]:
        """Apply a partial update; returns None when the id is unknown."""

    @abstractmethod
    def update_unique(
        self, record_id: int, fields: Dict[str, Any], unique: Tuple[str, ...]
    ) -> Optional[R]:
        """Like `update`, but fails if a changed field in `unique` clashes with another record.

        Raises:
            UniqueConflict: If another record already holds one of the new values.
        """

    @abstractmethod
    def delete(self, record_id: int) -> bool:
        """Remove a record; returns False when the id is unknown."""

    @abstractmethod
    def find_first(self, field_name: str, value: str) -> Optional[R]:
        """Return the first record whose string field equals value, ignoring case."""

    @abstractmethod
    def count(self) -> int:
        """Total number of records in the collection."""

    def _prepare_create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        data = {k: v for k, v in fields.items() if k != "id"}
        for name, factory in self.spec.defaults.items():
            if data.get(name) is None:
                data[name] = factory()
        for name, factory in self.spec.server_fields.items():
            data[name] = factory()
        for name in self.spec.list_fields:
            if data.get(name) is None:
                data[name] = []
        return data

    def _prepare_update(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in fields.items() if k not in self.spec.immutable_fields}

    @staticmethod
    def _active_filters(equals: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in equals.items() if v is not None}
