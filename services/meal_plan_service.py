"""Meal plan generation with a built-in fallback.

`MealPlanService` wraps an optional `MealGenerator`. When there is no
generator, or it fails in any way, the sample recipe for the meal type is
used instead. Either way allergen ingredients are filtered out and the
result is stored as an ordinary meal plan owned by the requesting user.
"""

import random
from typing import List, Optional

from core.config import OPENAI_API_KEY, OPENAI_MODEL, OPENAI_TIMEOUT
from core.logger import get_logger
from data.sample_meals import MEAL_IMAGES, SAMPLE_MEALS
from database.store import RecordStore
from schemas.meal_schema import GeneratedMeal, MealPlanRecord
from schemas.user_schema import UserRecord
from services.meal_generator import MealGenerator, OpenAIMealGenerator

logger = get_logger("services.meal_plan_service")

DEFAULT_SAMPLE = "snack"


def allergen_needles(allergies: List[str]) -> List[str]:
    """Lower-cased search terms for each allergy: the word itself plus singular stems.

    "peanuts" also yields "peanut", "tomatoes" yields "tomato", "berries"
    yields "berry". Stems shorter than three letters are dropped.
    """
    needles = set()
    for allergy in allergies:
        word = (allergy or "").strip().lower()
        if not word:
            continue
        needles.add(word)
        stem = None
        if word.endswith("ies"):
            stem = word[:-3] + "y"
        elif word.endswith("oes"):
            stem = word[:-2]
        elif word.endswith("s") and not word.endswith("ss"):
            stem = word[:-1]
        if stem and len(stem) >= 3:
            needles.add(stem)
    return sorted(needles)


def filter_allergens(ingredients: List[str], allergies: List[str]) -> List[str]:
    """Drop every ingredient containing an allergy (or its singular) as a case-insensitive substring."""
    needles = allergen_needles(allergies)
    return [i for i in ingredients if not any(n in i.lower() for n in needles)]


def sample_meal(meal_type: str, allergies: List[str]) -> GeneratedMeal:
    """Return the built-in recipe for `meal_type` (snack when unknown), allergen-free."""
    sample = dict(SAMPLE_MEALS.get(meal_type) or SAMPLE_MEALS[DEFAULT_SAMPLE])
    sample["ingredients"] = filter_allergens(sample["ingredients"], allergies)
    return GeneratedMeal.model_validate(sample)


class MealPlanService:
    """Generates recipes and persists them as meal plans.

    Attributes:
        generator: External recipe source, or None to always use samples.
    """

    def __init__(self, generator: Optional[MealGenerator] = None):
        self.generator = generator

    def generate(self, meal_type: str, allergies: List[str]) -> GeneratedMeal:
        """Return a recipe for `meal_type`. Never raises."""
        if self.generator is None:
            logger.warning("No meal generator configured; using sample %s recipe", meal_type)
            return sample_meal(meal_type, allergies)

        try:
            meal = self.generator.generate(meal_type, allergies)
        except Exception as exc:
            logger.warning("Meal generation failed, using sample %s recipe: %s", meal_type, exc)
            return sample_meal(meal_type, allergies)

        images = MEAL_IMAGES.get(meal_type) or MEAL_IMAGES[DEFAULT_SAMPLE]
        return meal.model_copy(update={
            "ingredients": filter_allergens(meal.ingredients, allergies),
            "image_url": meal.image_url or random.choice(images),
        })

    def generate_for_user(
        self,
        store: RecordStore,
        user: UserRecord,
        meal_type: str,
        allergies: Optional[List[str]] = None,
    ) -> MealPlanRecord:
        """Generate a recipe and store it as a meal plan owned by `user`.

        Args:
            store: Record store to persist into.
            user: Requesting user.
            meal_type: breakfast, lunch, dinner or snack.
            allergies: Allergens to avoid; None means the user's stored allergies.
        """
        if allergies is None:
            allergies = list(user.allergies)
        meal = self.generate(meal_type, allergies)

        fields = meal.model_dump(exclude={"meal_type"})
        fields["user_id"] = user.id
        fields["meal_type"] = meal_type
        fields["image_url"] = fields.get("image_url") or ""
        plan = store.meal_plans.create(fields)
        logger.info("Stored generated meal plan id=%s for user id=%s", plan.id, user.id)
        return plan


def create_meal_plan_service(api_key: Optional[str] = OPENAI_API_KEY) -> MealPlanService:
    """Build the service from configuration; without an API key only samples are served."""
    if not api_key:
        return MealPlanService(generator=None)
    return MealPlanService(OpenAIMealGenerator(api_key=api_key, model=OPENAI_MODEL, timeout=OPENAI_TIMEOUT))
