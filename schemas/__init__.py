"""Pydantic schema package for records, request bodies and responses."""

from .common import CamelModel, MessageResponse
from .user_schema import UserRecord, UserPublic, UserResponse
from .glucose_schema import ReadingRecord, ReadingType, GlucoseStats
from .meal_schema import MealPlanRecord, MealType, GeneratedMeal
from .note_schema import NoteRecord

__all__ = [
    "CamelModel",
    "MessageResponse",
    "UserRecord",
    "UserPublic",
    "UserResponse",
    "ReadingRecord",
    "ReadingType",
    "GlucoseStats",
    "MealPlanRecord",
    "MealType",
    "GeneratedMeal",
    "NoteRecord",
]
