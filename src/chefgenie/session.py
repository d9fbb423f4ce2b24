"""
App session state.

Tracks what the user is looking at: the active recipe and its image,
whether freshly generated or opened from the cookbook. The image request
runs as a background task after the recipe text arrives; if the user has
moved on by the time it resolves, its result is dropped.
"""

import asyncio
import logging

from chefgenie.errors import GenerationError
from chefgenie.generation import RecipeGenerator
from chefgenie.models import Recipe, RecipeRequest, SavedRecipe

logger = logging.getLogger(__name__)

GENERATION_FAILED_MESSAGE = (
    "We couldn't generate a recipe at this moment. Please check your connection and API key."
)


class RecipeSession:
    """State for one user sitting in front of the app."""

    def __init__(self, generator: RecipeGenerator):
        self.generator = generator
        self.active_recipe: Recipe | None = None
        self.image_url: str | None = None
        self.error: str | None = None
        self.loading = False
        self._image_task: asyncio.Task | None = None
        self._tasks: set[asyncio.Task] = set()  # Running image tasks, held until done
        self._epoch = 0  # Bumped on every navigation; stale image results are ignored

    async def create_recipe(self, request: RecipeRequest, *, load_image: bool = True) -> Recipe | None:
        """
        Generate a recipe and start loading its image in the background.

        Args:
            request: The submitted form
            load_image: Whether to request a photo as well

        Returns:
            The recipe, or None with self.error set
        """
        self._clear()
        self.loading = True
        try:
            recipe = await self.generator.generate_recipe(request)
        except GenerationError as e:
            logger.error(f"Recipe generation failed: {e}")
            self.error = GENERATION_FAILED_MESSAGE
            return None
        finally:
            self.loading = False

        self.active_recipe = recipe
        if load_image:
            task = asyncio.create_task(self._load_image(self._epoch, recipe))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            self._image_task = task
        return recipe

    async def _load_image(self, epoch: int, recipe: Recipe) -> None:
        try:
            url = await self.generator.generate_recipe_image(recipe.title, recipe.description)
        except Exception as e:
            logger.error(f"Image generation background error: {e}")
            return

        if epoch != self._epoch:
            logger.debug(f"Discarding image for {recipe.title!r}, user moved on")
            return
        self.image_url = url

    async def wait_for_image(self) -> str | None:
        """Wait for the pending image request, if any, and return the current image."""
        if self._image_task is not None:
            await self._image_task
        return self.image_url

    @property
    def image_pending(self) -> bool:
        return self._image_task is not None and not self._image_task.done()

    def apply_tweak(self, recipe: Recipe) -> None:
        """Swap in a tweaked recipe; the image stays as it was."""
        self.active_recipe = recipe

    def select_saved(self, recipe: SavedRecipe) -> None:
        """Open a cookbook entry in the recipe view."""
        self._clear()
        self.active_recipe = recipe
        self.image_url = recipe.image_url

    def _clear(self) -> None:
        self._epoch += 1
        self._image_task = None
        self.active_recipe = None
        self.image_url = None
        self.error = None
