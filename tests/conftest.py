"""
Pytest configuration and fixtures for ChefGenie tests.
"""

import asyncio
import os

import pytest

# Set test environment before importing chefgenie modules
os.environ["CHEFGENIE_ENV"] = "development"
os.environ["CHEFGENIE_LOG_PROMPTS"] = "0"

from chefgenie.errors import GenerationError
from chefgenie.models import Recipe, RecipeRequest
from chefgenie.storage import Cookbook, MemoryStore

# Tiny 1x1 PNG, base64
PIXEL_PNG = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8BQDwAEhQGAhKmMIQAAAABJRU5ErkJggg=="
)


def run(coro):
    """Run an async coroutine synchronously (no pytest-asyncio needed)."""
    return asyncio.run(coro)


def make_recipe_data(**overrides) -> dict:
    """Recipe payload in the remote model's camelCase shape."""
    data = {
        "title": "Lemon Chicken Rice Bowl",
        "description": "Juicy seared chicken over garlicky rice with a bright lemon finish.",
        "mealType": "Dinner",
        "servings": 4,
        "prepTimeMinutes": 15,
        "cookTimeMinutes": 25,
        "caloriesPerServing": 520,
        "difficulty": "Easy",
        "ingredients": [
            {"name": "chicken thighs", "amount": "600 g", "notes": "boneless"},
            {"name": "jasmine rice", "amount": "300 g"},
            {"name": "lemon", "amount": "1", "notes": "zest and juice"},
            {"name": "garlic", "amount": "3 cloves"},
        ],
        "instructions": [
            "Rinse the rice and cook it with a pinch of salt.",
            "Season the chicken and sear until golden, about 6 minutes per side.",
            "Toss the garlic in the pan, then deglaze with lemon juice.",
            "Slice the chicken and serve over the rice with the pan sauce.",
        ],
        "chefTips": ["Rest the chicken for 5 minutes before slicing."],
    }
    data.update(overrides)
    return data


class FakeGenerator:
    """
    Deterministic RecipeGenerator.

    Records every call; set `fail` to make recipe/tweak calls raise.
    """

    def __init__(self, recipe: Recipe | None = None, image: str | None = None, answer: str = "Use tofu."):
        self.recipe = recipe or Recipe.model_validate(make_recipe_data())
        self.image = image
        self.answer = answer
        self.fail = False
        self.image_gate: asyncio.Event | None = None
        self.calls: list[tuple] = []

    async def generate_recipe(self, request: RecipeRequest) -> Recipe:
        self.calls.append(("generate_recipe", request))
        if self.fail:
            raise GenerationError("Failed to generate recipe: boom")
        return self.recipe.model_copy(update={"servings": request.servings, "meal_type": request.meal_type.value})

    async def generate_recipe_image(self, title: str, description: str) -> str | None:
        self.calls.append(("generate_recipe_image", title, description))
        if self.image_gate is not None:
            await self.image_gate.wait()
        return self.image

    async def ask_chef_about_recipe(self, recipe: Recipe, question: str) -> str:
        self.calls.append(("ask_chef_about_recipe", recipe.title, question))
        return self.answer

    async def tweak_recipe(self, recipe: Recipe, feedback: str) -> Recipe:
        self.calls.append(("tweak_recipe", recipe.title, feedback))
        if self.fail:
            raise GenerationError("Failed to update recipe: boom")
        data = recipe.model_dump(include=set(Recipe.model_fields))
        return Recipe.model_validate({**data, "title": f"Spicy {recipe.title}", "chef_tips": [feedback]})


@pytest.fixture
def recipe_data() -> dict:
    return make_recipe_data()


@pytest.fixture
def sample_recipe() -> Recipe:
    return Recipe.model_validate(make_recipe_data())


@pytest.fixture
def image_uri() -> str:
    return f"data:image/png;base64,{PIXEL_PNG}"


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def cookbook(store) -> Cookbook:
    return Cookbook(store)


@pytest.fixture
def fake_generator(image_uri) -> FakeGenerator:
    return FakeGenerator(image=image_uri)
