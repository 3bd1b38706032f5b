"""Helpers shared by the per-user routers: ownership checks and input parsing."""

from datetime import datetime
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from core.error_handlers import format_validation_errors
from core.exceptions import AuthorizationError, NotFoundError, ValidationError
from core.repository import BaseRepository
from schemas.common import to_naive_utc

M = TypeVar("M", bound=BaseModel)


def load_owned(repo: BaseRepository, record_id: int, user_id: int, action: str):
    """Fetch a record the caller is allowed to modify.

    Raises:
        NotFoundError: If no record has this id.
        AuthorizationError: If the record belongs to another user.
    """
    record = repo.get(record_id)
    if record is None:
        raise NotFoundError(repo.spec.name, record_id)
    if record.user_id != user_id:
        raise AuthorizationError(repo.spec.name, action)
    return record


def validate_payload(model: Type[M], payload: Dict[str, Any]) -> M:
    """Validate a raw JSON body against `model`, reporting failures as 400."""
    if not isinstance(payload, dict):
        raise ValidationError("Invalid request data", field="body")
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        errors = format_validation_errors(exc.errors())
        raise ValidationError(
            "Invalid request data",
            fields=[e["field"] for e in errors],
            errors=errors,
        ) from exc


def parse_timestamp(value: Optional[str], field: str) -> datetime:
    """Parse an ISO 8601 date or datetime query value into naive UTC.

    Raises:
        ValidationError: If the value is missing or not a valid date.
    """
    if not value:
        raise ValidationError("Start and end dates are required", field=field)
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError as exc:
        raise ValidationError("Invalid date format", field=field) from exc
    return to_naive_utc(parsed)


def check_range(start: Optional[datetime], end: Optional[datetime]) -> None:
    """Reject a range whose start lies after its end.

    Raises:
        ValidationError: If both bounds are given and start > end.
    """
    if start is not None and end is not None and start > end:
        raise ValidationError("Start date must not be after end date", fields=["start", "end"])
