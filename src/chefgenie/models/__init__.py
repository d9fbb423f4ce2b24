"""ChefGenie data models."""

from chefgenie.models.recipe import (
    DEFAULT_SERVINGS,
    MAX_SERVINGS,
    MIN_SERVINGS,
    Difficulty,
    Ingredient,
    MealType,
    Recipe,
    RecipeRequest,
    SavedRecipe,
    clamp_servings,
)

__all__ = [
    "DEFAULT_SERVINGS",
    "MAX_SERVINGS",
    "MIN_SERVINGS",
    "Difficulty",
    "Ingredient",
    "MealType",
    "Recipe",
    "RecipeRequest",
    "SavedRecipe",
    "clamp_servings",
]
