"""Meal generators: sources of diabetic-friendly recipes.

`MealGenerator` is the single-method interface the rest of the app depends
on. `OpenAIMealGenerator` asks the OpenAI chat completions API for a JSON
recipe. Generators raise `UpstreamError` on any failure; deciding what to do
about it is `MealPlanService`'s job.
"""

import json
from abc import ABC, abstractmethod
from typing import List, Optional

from openai import OpenAI
from pydantic import ValidationError as PydanticValidationError

from core.exceptions import UpstreamError
from core.logger import get_logger
from schemas.meal_schema import GeneratedMeal

logger = get_logger("services.meal_generator")

SYSTEM_PROMPT = (
    "You are a nutritionist specialized in diabetic meal planning. You create healthy, "
    "balanced meal plans that help regulate blood sugar levels."
)


def build_prompt(meal_type: str, allergies: List[str]) -> str:
    """Compose the user prompt asking for one recipe in a fixed JSON shape."""
    if allergies:
        allergies_text = (
            f"The person has the following allergies: {', '.join(allergies)}. "
            "Ensure the meal doesn't include these ingredients."
        )
    else:
        allergies_text = "The person has no known food allergies."

    return (
        f"Generate a diabetic-friendly {meal_type} recipe that is suitable for someone with diabetes.\n"
        f"{allergies_text}\n"
        "The recipe should have a low glycemic index and be balanced in terms of carbohydrates, "
        "proteins, and healthy fats.\n\n"
        "Provide the result in the following JSON format:\n"
        "{\n"
        '  "name": "Recipe Name",\n'
        '  "description": "A brief description of the meal",\n'
        f'  "mealType": "{meal_type}",\n'
        '  "carbs": integer (estimated carbohydrates in grams),\n'
        '  "servings": integer,\n'
        '  "prepTime": integer (in minutes),\n'
        '  "tags": ["tag1", "tag2"],\n'
        '  "ingredients": ["ingredient1", "ingredient2", ...],\n'
        '  "instructions": ["step1", "step2", ...]\n'
        "}"
    )


class MealGenerator(ABC):
    """Produces one recipe for a meal type while avoiding the given allergens."""

    @abstractmethod
    def generate(self, meal_type: str, allergies: List[str]) -> GeneratedMeal:
        """Return a recipe.

        Raises:
            UpstreamError: If no recipe could be produced.
        """


class OpenAIMealGenerator(MealGenerator):
    """Recipe generator backed by the OpenAI chat completions API.

    Attributes:
        model: Chat model name.
        timeout: Per-request timeout in seconds.
    """

    provider = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        timeout: float = 20.0,
        client: Optional[OpenAI] = None,
    ):
        self.model = model
        self.timeout = timeout
        self.client = client or OpenAI(api_key=api_key, timeout=timeout, max_retries=1)

    def generate(self, meal_type: str, allergies: List[str]) -> GeneratedMeal:
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_prompt(meal_type, allergies)},
                ],
                response_format={"type": "json_object"},
                timeout=self.timeout,
            )
        except Exception as exc:
            raise UpstreamError(f"Meal generation request failed: {exc}", provider=self.provider) from exc

        if not response.choices or not response.choices[0].message.content:
            raise UpstreamError("Empty response from meal generation provider", provider=self.provider)

        try:
            payload = json.loads(response.choices[0].message.content)
            meal = GeneratedMeal.model_validate(payload)
        except (json.JSONDecodeError, PydanticValidationError) as exc:
            raise UpstreamError(f"Malformed recipe from provider: {exc}", provider=self.provider) from exc

        logger.info("Generated %s recipe '%s' via %s", meal_type, meal.name, self.model)
        return meal
