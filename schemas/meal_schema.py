"""Schemas for meal plans and generated recipes."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator

from schemas.common import CamelModel


class MealType(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class MealPlanRecord(CamelModel):
    """A stored meal plan."""

    id: int
    user_id: int
    name: str
    description: Optional[str] = None
    meal_type: str
    image_url: Optional[str] = None
    carbs: Optional[int] = None
    servings: Optional[int] = None
    prep_time: Optional[int] = None
    tags: List[str] = Field(default_factory=list)
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    created_at: datetime


class MealPlanCreate(CamelModel):
    name: str = Field(..., min_length=1, examples=["Greek Yogurt Breakfast Bowl"])
    description: Optional[str] = None
    meal_type: MealType = Field(..., examples=["breakfast"])
    image_url: Optional[str] = None
    carbs: Optional[int] = Field(None, ge=0, description="Estimated carbohydrates in grams")
    servings: Optional[int] = Field(None, ge=0)
    prep_time: Optional[int] = Field(None, ge=0, description="Minutes")
    tags: List[str] = Field(default_factory=list)
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)


class MealPlanUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    meal_type: Optional[MealType] = None
    image_url: Optional[str] = None
    carbs: Optional[int] = Field(None, ge=0)
    servings: Optional[int] = Field(None, ge=0)
    prep_time: Optional[int] = Field(None, ge=0)
    tags: Optional[List[str]] = None
    ingredients: Optional[List[str]] = None
    instructions: Optional[List[str]] = None

    @field_validator("name", "meal_type", "tags", "ingredients", "instructions", mode="before")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class GenerateMealPlanRequest(CamelModel):
    meal_type: MealType = Field(..., examples=["breakfast"])
    allergies: Optional[List[str]] = Field(None, description="Defaults to the user's stored allergies")


class GeneratedMeal(CamelModel):
    """Recipe produced by a generator before it is persisted as a meal plan."""

    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    meal_type: Optional[str] = None
    image_url: Optional[str] = None
    carbs: Optional[int] = None
    servings: Optional[int] = None
    prep_time: Optional[int] = None
    tags: List[str] = Field(default_factory=list)
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
