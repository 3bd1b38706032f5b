"""SQLAlchemy record store backend.

Every repository call opens its own session from the factory and commits
before returning, so a request never observes another request's half-applied
changes. Rows are converted to pydantic records before leaving the session.
"""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Type

from sqlalchemy import func, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from core.repository import BaseRepository, EntitySpec, R, UniqueConflict
from database.models import Base


class SqlRepository(BaseRepository[R]):
    """Repository backed by one ORM model.

    Attributes:
        model: SQLAlchemy model class mapped to the collection's table.
        session_factory: Factory producing sessions bound to the engine.
    """

    def __init__(self, spec: EntitySpec, model: Type[Base], session_factory: sessionmaker):
        super().__init__(spec)
        self.model = model
        self.session_factory = session_factory

    def _to_record(self, row: Base) -> R:
        data = {c.name: getattr(row, c.name) for c in self.model.__table__.columns}
        for name in self.spec.list_fields:
            raw = data.get(name)
            data[name] = json.loads(raw) if raw else []
        return self.spec.record.model_validate(data)

    def _to_columns(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        columns = {}
        for name, value in fields.items():
            if not hasattr(self.model, name):
                continue
            if name in self.spec.list_fields:
                value = json.dumps(list(value or []))
            columns[name] = value
        return columns

    def get(self, record_id: int) -> Optional[R]:
        with self.session_factory() as session:
            row = session.get(self.model, record_id)
            return self._to_record(row) if row is not None else None

    def list_by_user(
        self,
        user_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
        **equals: Any
    ) -> List[R]:
        with self.session_factory() as session:
            query = session.query(self.model).filter(self.model.user_id == user_id)
            for name, value in self._active_filters(equals).items():
                query = query.filter(getattr(self.model, name) == value)
            if self.spec.order_by:
                column = getattr(self.model, self.spec.order_by)
                if start is not None:
                    query = query.filter(column >= start)
                if end is not None:
                    query = query.filter(column <= end)
                query = query.order_by(column.desc(), self.model.id.desc())
            if limit is not None:
                query = query.limit(limit)
            return [self._to_record(row) for row in query.all()]

    def create(self, fields: Dict[str, Any]) -> R:
        return self.create_unique(fields, ())

    def create_unique(self, fields: Dict[str, Any], unique: Tuple[str, ...]) -> R:
        data = self._prepare_create(fields)
        with self.session_factory() as session:
            conflict = self._conflicting_field(session, data, unique)
            if conflict is not None:
                raise UniqueConflict(conflict)
            row = self.model(**self._to_columns(data))
            session.add(row)
            self._commit(session, data, unique)
            session.refresh(row)
            return self._to_record(row)

    def update(self, record_id: int, fields: Dict[str, Any]) -> Optional[R]:
        return self.update_unique(record_id, fields, ())

    def update_unique(
        self, record_id: int, fields: Dict[str, Any], unique: Tuple[str, ...]
    ) -> Optional[R]:
        changes = self._prepare_update(fields)
        with self.session_factory() as session:
            row = session.get(self.model, record_id)
            if row is None:
                return None
            conflict = self._conflicting_field(session, changes, unique, exclude_id=record_id)
            if conflict is not None:
                raise UniqueConflict(conflict)
            for name, value in self._to_columns(changes).items():
                setattr(row, name, value)
            self._commit(session, changes, unique, exclude_id=record_id)
            session.refresh(row)
            return self._to_record(row)

    def _conflicting_field(
        self,
        session: Session,
        data: Dict[str, Any],
        unique: Tuple[str, ...],
        exclude_id: Optional[int] = None,
    ) -> Optional[str]:
        for name in unique:
            value = data.get(name)
            if not isinstance(value, str):
                continue
            query = session.query(self.model.id).filter(func.lower(getattr(self.model, name)) == value.lower())
            if exclude_id is not None:
                query = query.filter(self.model.id != exclude_id)
            if query.first() is not None:
                return name
        return None

    def _commit(
        self,
        session: Session,
        data: Dict[str, Any],
        unique: Tuple[str, ...],
        exclude_id: Optional[int] = None,
    ) -> None:
        """Commit, turning a unique-index violation from a concurrent writer into `UniqueConflict`."""
        try:
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            conflict = self._conflicting_field(session, data, unique, exclude_id=exclude_id)
            if conflict is None:
                raise
            raise UniqueConflict(conflict) from exc

    def delete(self, record_id: int) -> bool:
        with self.session_factory() as session:
            row = session.get(self.model, record_id)
            if row is None:
                return False
            session.delete(row)
            session.commit()
            return True

    def find_first(self, field_name: str, value: str) -> Optional[R]:
        column = getattr(self.model, field_name)
        with self.session_factory() as session:
            row = (
                session.query(self.model)
                .filter(func.lower(column) == value.lower())
                .order_by(self.model.id)
                .first()
            )
            return self._to_record(row) if row is not None else None

    def count(self) -> int:
        with self.session_factory() as session:
            return session.query(self.model).count()


def ping(session_factory: sessionmaker) -> None:
    """Run a trivial query; raises if the database is unreachable."""
    with session_factory() as session:
        session.execute(text("SELECT 1"))
