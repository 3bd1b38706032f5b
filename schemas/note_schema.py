"""Schemas for free-form notes."""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from schemas.common import CamelModel, to_naive_utc


class NoteRecord(CamelModel):
    """A stored note."""

    id: int
    user_id: int
    title: str
    content: str
    timestamp: datetime
    category: Optional[str] = None


class NoteCreate(CamelModel):
    title: str = Field(..., min_length=1, examples=["Increased activity today"])
    content: str = Field(..., min_length=1)
    timestamp: Optional[datetime] = None
    category: Optional[str] = Field(None, examples=["Exercise"])

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)


class NoteUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = Field(None, min_length=1)
    timestamp: Optional[datetime] = None
    category: Optional[str] = None

    @field_validator("title", "content", "timestamp", mode="before")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)
