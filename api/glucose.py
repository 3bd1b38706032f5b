"""Glucose readings router.

All endpoints act on the logged-in user's readings. Listings are newest
first; update and delete check ownership before touching the body.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query

from api.common import check_range, load_owned, parse_timestamp, validate_payload
from core.logger import get_logger
from core.session import RequestContext, require_context
from schemas.common import MessageResponse
from schemas.glucose_schema import GlucoseStats, ReadingCreate, ReadingRecord, ReadingUpdate
from services.glucose_stats import summarize_readings

logger = get_logger("api.glucose")
router = APIRouter(prefix="/api/glucose", tags=["glucose"])


@router.get("", response_model=List[ReadingRecord])
def list_readings(
    limit: Optional[int] = Query(None, ge=1, le=1000),
    ctx: RequestContext = Depends(require_context),
):
    return ctx.store.readings.list_by_user(ctx.user_id, limit=limit)


@router.get("/range", response_model=List[ReadingRecord])
def list_readings_in_range(
    start: Optional[str] = None,
    end: Optional[str] = None,
    ctx: RequestContext = Depends(require_context),
):
    """Readings whose timestamp falls within [start, end], newest first.

    Raises:
        ValidationError: If either bound is missing or not an ISO date.
    """
    start_at = parse_timestamp(start, "start")
    end_at = parse_timestamp(end, "end")
    check_range(start_at, end_at)
    return ctx.store.readings.list_by_user(ctx.user_id, start=start_at, end=end_at)


@router.get("/stats", response_model=GlucoseStats)
def reading_stats(
    start: Optional[str] = None,
    end: Optional[str] = None,
    ctx: RequestContext = Depends(require_context),
):
    """Average, extremes and time in range, optionally limited to a date range."""
    start_at = parse_timestamp(start, "start") if start else None
    end_at = parse_timestamp(end, "end") if end else None
    check_range(start_at, end_at)
    readings = ctx.store.readings.list_by_user(ctx.user_id, start=start_at, end=end_at)
    return summarize_readings(readings)


@router.post("", response_model=ReadingRecord, status_code=201)
def create_reading(payload: ReadingCreate, ctx: RequestContext = Depends(require_context)):
    fields = payload.model_dump()
    fields["user_id"] = ctx.user_id
    reading = ctx.store.readings.create(fields)
    logger.info("Reading id=%s (%s mg/dL) created for user id=%s", reading.id, reading.value, ctx.user_id)
    return reading


@router.put("/{reading_id}", response_model=ReadingRecord)
def update_reading(
    reading_id: int,
    payload: Dict[str, Any] = Body(...),
    ctx: RequestContext = Depends(require_context),
):
    """Partially update a reading owned by the caller.

    Raises:
        NotFoundError: If the reading does not exist.
        AuthorizationError: If it belongs to someone else.
        ValidationError: If the body is invalid.
    """
    load_owned(ctx.store.readings, reading_id, ctx.user_id, "update")
    changes = validate_payload(ReadingUpdate, payload).model_dump(exclude_unset=True)
    return ctx.store.readings.update(reading_id, changes)


@router.delete("/{reading_id}", response_model=MessageResponse)
def delete_reading(reading_id: int, ctx: RequestContext = Depends(require_context)):
    load_owned(ctx.store.readings, reading_id, ctx.user_id, "delete")
    ctx.store.readings.delete(reading_id)
    logger.info("Reading id=%s deleted by user id=%s", reading_id, ctx.user_id)
    return MessageResponse(message="Reading deleted successfully")
