"""
Recipe data model.

Field aliases match the remote model's structured-output schema and the
cookbook storage record (camelCase), so the same classes parse both.
"""

import time
import uuid
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

MIN_SERVINGS = 1
MAX_SERVINGS = 12
DEFAULT_SERVINGS = 2

Difficulty = Literal["Easy", "Medium", "Hard"]


class MealType(str, Enum):
    """Meal types offered by the request form."""

    BREAKFAST = "Breakfast"
    BRUNCH = "Brunch"
    LUNCH = "Lunch"
    DINNER = "Dinner"
    SNACK = "Snack"
    DESSERT = "Dessert"
    SURPRISE = "Surprise Me"


def clamp_servings(servings: int) -> int:
    """Clamp a serving count to the range the form allows."""
    return max(MIN_SERVINGS, min(MAX_SERVINGS, servings))


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class RecipeRequest(_CamelModel):
    """What the user asked for. Built per submission, never persisted."""

    meal_type: MealType = Field(default=MealType.DINNER, alias="mealType")
    available_ingredients: str = Field(default="", alias="availableIngredients")
    dietary_restrictions: str | None = Field(default=None, alias="dietaryRestrictions")
    servings: int = DEFAULT_SERVINGS

    @field_validator("servings")
    @classmethod
    def _clamp(cls, value: int) -> int:
        return clamp_servings(value)


class Ingredient(_CamelModel):
    name: str
    amount: str = Field(description="Quantity and unit")
    notes: str | None = None


class Recipe(_CamelModel):
    """A complete recipe as returned by the generative model."""

    title: str
    description: str
    meal_type: str = Field(default="", alias="mealType")
    servings: int
    prep_time_minutes: int = Field(alias="prepTimeMinutes")
    cook_time_minutes: int = Field(alias="cookTimeMinutes")
    calories_per_serving: int | None = Field(default=None, alias="caloriesPerServing")
    difficulty: Difficulty = "Medium"
    ingredients: list[Ingredient] = Field(min_length=1)
    instructions: list[str] = Field(min_length=1)
    chef_tips: list[str] = Field(default_factory=list, alias="chefTips")

    @field_validator("chef_tips", mode="before")
    @classmethod
    def _tips_default(cls, value):
        # Older records store null instead of an empty list
        return [] if value is None else value

    @property
    def total_time_minutes(self) -> int:
        return self.prep_time_minutes + self.cook_time_minutes

    def to_record(self) -> dict:
        """Serialize with camelCase keys, as stored and sent to the model."""
        return self.model_dump(mode="json", by_alias=True)


class SavedRecipe(Recipe):
    """A recipe in the cookbook, with identity and user annotations."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    saved_at: int = Field(default_factory=lambda: int(time.time() * 1000), alias="savedAt")
    image_url: str | None = Field(default=None, alias="imageUrl")
    rating: int | None = Field(default=None, ge=1, le=5)
    notes: str | None = None

    @field_validator("rating", mode="before")
    @classmethod
    def _unrated(cls, value):
        # The star widget reports 0 for "no rating"
        return None if value == 0 else value

    @classmethod
    def from_recipe(
        cls,
        recipe: Recipe,
        *,
        image_url: str | None = None,
        rating: int | None = None,
        notes: str | None = None,
    ) -> "SavedRecipe":
        """
        Wrap a recipe for the cookbook.

        A SavedRecipe keeps its id and saved_at; anything else gets fresh ones.
        """
        data = recipe.model_dump(include=set(Recipe.model_fields))
        if isinstance(recipe, SavedRecipe):
            data["id"] = recipe.id
            data["saved_at"] = recipe.saved_at
        return cls(**data, image_url=image_url, rating=rating, notes=notes)
