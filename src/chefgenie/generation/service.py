"""
Recipe generation service.

RecipeGenerator is the boundary to the generative model. ChefGenieClient
implements it against OpenAI; tests substitute a fixture-backed double.

Failure policy:
- generate_recipe / tweak_recipe raise GenerationError (no retry)
- generate_recipe_image returns None on any failure
- ask_chef_about_recipe returns a fixed fallback answer on any failure
"""

import logging
from typing import Protocol

from chefgenie.config import ChefGenieSettings, get_settings
from chefgenie.errors import GenerationError
from chefgenie.generation.prompts import (
    CHAT_FALLBACK,
    build_chat_prompt,
    build_image_prompt,
    build_recipe_prompt,
    build_tweak_prompt,
)
from chefgenie.llm.client import call_image, call_llm, call_llm_text, to_data_uri
from chefgenie.models import Recipe, RecipeRequest

logger = logging.getLogger(__name__)


class RecipeGenerator(Protocol):
    """The four operations the app needs from a generative model."""

    async def generate_recipe(self, request: RecipeRequest) -> Recipe: ...

    async def generate_recipe_image(self, title: str, description: str) -> str | None: ...

    async def ask_chef_about_recipe(self, recipe: Recipe, question: str) -> str: ...

    async def tweak_recipe(self, recipe: Recipe, feedback: str) -> Recipe: ...


class ChefGenieClient:
    """OpenAI-backed RecipeGenerator."""

    def __init__(self, settings: ChefGenieSettings | None = None):
        self._settings = settings

    @property
    def settings(self) -> ChefGenieSettings:
        return self._settings if self._settings is not None else get_settings()

    async def generate_recipe(self, request: RecipeRequest) -> Recipe:
        """
        Generate a new recipe for the request.

        Raises:
            GenerationError: remote error, empty response, or a response
                that does not validate as a complete Recipe
        """
        prompt = build_recipe_prompt(request)
        return await self._structured(prompt, "recipe", "Failed to generate recipe")

    async def tweak_recipe(self, recipe: Recipe, feedback: str) -> Recipe:
        """Regenerate the whole recipe with the user's feedback applied."""
        prompt = build_tweak_prompt(recipe, feedback)
        return await self._structured(prompt, "tweak", "Failed to update recipe")

    async def generate_recipe_image(self, title: str, description: str) -> str | None:
        """
        Best-effort food photo for a recipe.

        Returns:
            A data URI, or None if no key is configured, the call fails,
            or the model returned no image
        """
        if not self.settings.openai_api_key:
            return None

        try:
            image = await call_image(
                prompt=build_image_prompt(title, description),
                model=self.settings.image_model,
                size=self.settings.image_size,
            )
        except Exception as e:
            logger.warning(f"Image generation failed: {e}")
            return None

        if image is None:
            logger.info(f"No image returned for {title!r}")
            return None

        mime, payload = image
        return to_data_uri(mime, payload)

    async def ask_chef_about_recipe(self, recipe: Recipe, question: str) -> str:
        """Answer a free-form question about the recipe."""
        try:
            answer = await call_llm_text(
                prompt=build_chat_prompt(recipe, question),
                operation="chat",
                model=self.settings.text_model,
            )
        except Exception as e:
            logger.warning(f"Chef Q&A failed: {e}")
            return CHAT_FALLBACK
        return answer.strip() or CHAT_FALLBACK

    async def _structured(self, prompt: str, operation: str, message: str) -> Recipe:
        try:
            recipe = await call_llm(
                response_model=Recipe,
                prompt=prompt,
                operation=operation,
                model=self.settings.text_model,
            )
        except Exception as e:
            logger.error(f"{message}: {e}")
            raise GenerationError(f"{message}: {e}") from e

        if recipe is None:
            raise GenerationError(f"{message}: the model returned no content")
        return recipe
