"""Meal plans router.

CRUD over the logged-in user's meal plans plus the generation endpoint,
which produces a recipe (or the built-in sample) and stores it as a plan.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Request

from api.common import load_owned, validate_payload
from core.logger import get_logger
from core.session import RequestContext, require_context
from schemas.common import MessageResponse
from schemas.meal_schema import (
    GenerateMealPlanRequest,
    MealPlanCreate,
    MealPlanRecord,
    MealPlanUpdate,
    MealType,
)
from services.meal_plan_service import MealPlanService

logger = get_logger("api.meal_plans")
router = APIRouter(prefix="/api", tags=["meal-plans"])


def get_meal_plan_service(request: Request) -> MealPlanService:
    return request.app.state.meal_plan_service


@router.get("/meal-plans", response_model=List[MealPlanRecord])
def list_meal_plans(
    type: Optional[MealType] = Query(None, description="Only plans of this meal type"),
    limit: Optional[int] = Query(None, ge=1, le=1000),
    ctx: RequestContext = Depends(require_context),
):
    meal_type = type.value if type is not None else None
    return ctx.store.meal_plans.list_by_user(ctx.user_id, limit=limit, meal_type=meal_type)


@router.post("/meal-plans", response_model=MealPlanRecord, status_code=201)
def create_meal_plan(payload: MealPlanCreate, ctx: RequestContext = Depends(require_context)):
    fields = payload.model_dump()
    fields["user_id"] = ctx.user_id
    plan = ctx.store.meal_plans.create(fields)
    logger.info("Meal plan id=%s created for user id=%s", plan.id, ctx.user_id)
    return plan


@router.put("/meal-plans/{plan_id}", response_model=MealPlanRecord)
def update_meal_plan(
    plan_id: int,
    payload: Dict[str, Any] = Body(...),
    ctx: RequestContext = Depends(require_context),
):
    """Partially update a meal plan owned by the caller.

    Raises:
        NotFoundError: If the plan does not exist.
        AuthorizationError: If it belongs to someone else.
        ValidationError: If the body is invalid.
    """
    load_owned(ctx.store.meal_plans, plan_id, ctx.user_id, "update")
    changes = validate_payload(MealPlanUpdate, payload).model_dump(exclude_unset=True)
    return ctx.store.meal_plans.update(plan_id, changes)


@router.delete("/meal-plans/{plan_id}", response_model=MessageResponse)
def delete_meal_plan(plan_id: int, ctx: RequestContext = Depends(require_context)):
    load_owned(ctx.store.meal_plans, plan_id, ctx.user_id, "delete")
    ctx.store.meal_plans.delete(plan_id)
    logger.info("Meal plan id=%s deleted by user id=%s", plan_id, ctx.user_id)
    return MessageResponse(message="Meal plan deleted successfully")


@router.post("/generate-meal-plan", response_model=MealPlanRecord, status_code=201)
def generate_meal_plan(
    payload: GenerateMealPlanRequest,
    ctx: RequestContext = Depends(require_context),
    service: MealPlanService = Depends(get_meal_plan_service),
):
    """Generate a recipe for the requested meal type and save it.

    When `allergies` is omitted the user's stored allergies are used.
    """
    return service.generate_for_user(ctx.store, ctx.principal, payload.meal_type, payload.allergies)
