"""In-process record store backend.

Each repository is a dict keyed by id plus a monotonically increasing
counter, so ids are never reused even after deletes. Records are copied on
the way in and out so callers cannot mutate stored state.
"""

import itertools
import threading
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from core.repository import BaseRepository, EntitySpec, R, UniqueConflict


class MemoryRepository(BaseRepository[R]):
    """Repository over a plain dict table guarded by a lock."""

    def __init__(self, spec: EntitySpec):
        super().__init__(spec)
        self._rows: Dict[int, R] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def get(self, record_id: int) -> Optional[R]:
        with self._lock:
            row = self._rows.get(record_id)
            return row.model_copy(deep=True) if row is not None else None

    def list_by_user(
        self,
        user_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
        **equals: Any
    ) -> List[R]:
        filters = self._active_filters(equals)
        order_by = self.spec.order_by
        with self._lock:
            rows = [r for r in self._rows.values() if getattr(r, "user_id", None) == user_id]
            rows = [r for r in rows if all(getattr(r, k) == v for k, v in filters.items())]
            if order_by:
                if start is not None:
                    rows = [r for r in rows if getattr(r, order_by) >= start]
                if end is not None:
                    rows = [r for r in rows if getattr(r, order_by) <= end]
                rows.sort(key=lambda r: (getattr(r, order_by), r.id), reverse=True)
            if limit is not None:
                rows = rows[:limit]
            return [r.model_copy(deep=True) for r in rows]

    def create(self, fields: Dict[str, Any]) -> R:
        return self.create_unique(fields, ())

    def create_unique(self, fields: Dict[str, Any], unique: Tuple[str, ...]) -> R:
        data = self._prepare_create(fields)
        with self._lock:
            conflict = self._conflicting_field(data, unique)
            if conflict is not None:
                raise UniqueConflict(conflict)
            data["id"] = next(self._ids)
            row = self.spec.record.model_validate(data)
            self._rows[row.id] = row
            return row.model_copy(deep=True)

    def update(self, record_id: int, fields: Dict[str, Any]) -> Optional[R]:
        return self.update_unique(record_id, fields, ())

    def update_unique(
        self, record_id: int, fields: Dict[str, Any], unique: Tuple[str, ...]
    ) -> Optional[R]:
        changes = self._prepare_update(fields)
        with self._lock:
            current = self._rows.get(record_id)
            if current is None:
                return None
            conflict = self._conflicting_field(changes, unique, exclude_id=record_id)
            if conflict is not None:
                raise UniqueConflict(conflict)
            row = self.spec.record.model_validate({**current.model_dump(), **changes})
            self._rows[record_id] = row
            return row.model_copy(deep=True)

    def _conflicting_field(
        self, data: Dict[str, Any], unique: Tuple[str, ...], exclude_id: Optional[int] = None
    ) -> Optional[str]:
        # caller holds self._lock
        for name in unique:
            value = data.get(name)
            if not isinstance(value, str):
                continue
            needle = value.lower()
            for row in self._rows.values():
                current = getattr(row, name, None)
                if row.id != exclude_id and isinstance(current, str) and current.lower() == needle:
                    return name
        return None

    def delete(self, record_id: int) -> bool:
        with self._lock:
            return self._rows.pop(record_id, None) is not None

    def find_first(self, field_name: str, value: str) -> Optional[R]:
        needle = value.lower()
        with self._lock:
            for row in sorted(self._rows.values(), key=lambda r: r.id):
                current = getattr(row, field_name, None)
                if isinstance(current, str) and current.lower() == needle:
                    return row.model_copy(deep=True)
        return None

    def count(self) -> int:
        with self._lock:
            return len(self._rows)
