"""Schemas for glucose readings and their summary statistics."""

from datetime import datetime
from enum import Enum
from typing import Optional, Dict

from pydantic import Field, field_validator

from schemas.common import CamelModel, to_naive_utc

MIN_GLUCOSE = 20
MAX_GLUCOSE = 600


class ReadingType(str, Enum):
    """Meal-relative context a reading was taken in."""

    BEFORE_BREAKFAST = "before_breakfast"
    AFTER_BREAKFAST = "after_breakfast"
    BEFORE_LUNCH = "before_lunch"
    AFTER_LUNCH = "after_lunch"
    BEFORE_DINNER = "before_dinner"
    AFTER_DINNER = "after_dinner"
    AFTER_MEAL = "after_meal"
    BEDTIME = "bedtime"
    FASTING = "fasting"
    OTHER = "other"


class ReadingRecord(CamelModel):
    """A stored glucose reading."""

    id: int
    user_id: int
    value: int
    timestamp: datetime
    type: str
    note: Optional[str] = None


class ReadingCreate(CamelModel):
    value: int = Field(..., ge=MIN_GLUCOSE, le=MAX_GLUCOSE, examples=[118], description="mg/dL")
    timestamp: Optional[datetime] = Field(None, description="Defaults to the time of creation")
    type: ReadingType = Field(..., examples=["before_breakfast"])
    note: Optional[str] = None

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)


class ReadingUpdate(CamelModel):
    value: Optional[int] = Field(None, ge=MIN_GLUCOSE, le=MAX_GLUCOSE)
    timestamp: Optional[datetime] = None
    type: Optional[ReadingType] = None
    note: Optional[str] = None

    @field_validator("value", "timestamp", "type", mode="before")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)


class GlucoseStats(CamelModel):
    """Aggregates over a set of readings, as shown on the dashboard."""

    count: int
    average: Optional[int] = None
    minimum: Optional[int] = None
    maximum: Optional[int] = None
    highest_at: Optional[datetime] = None
    in_range_percent: Optional[int] = None
    distribution: Dict[str, int] = Field(default_factory=dict)
