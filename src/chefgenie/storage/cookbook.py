"""
Cookbook - the user's saved recipes.

Stored as one JSON array under a single key, newest first. Title is the
natural key: saving a recipe whose title already exists replaces that
entry and moves it to the front.
"""

import json
import logging

from pydantic import ValidationError

from chefgenie.errors import StorageWriteError
from chefgenie.models import Recipe, SavedRecipe
from chefgenie.storage.backends import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_KEY = "chefGenie_cookbook"

SAVE_FAILED_MESSAGE = "Could not save recipe. Storage might be full (images take up a lot of space)."


class Cookbook:
    """CRUD and search over saved recipes."""

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_KEY):
        self.store = store
        self.key = key

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_saved(self) -> list[SavedRecipe]:
        """
        All saved recipes, newest first.

        A missing or unparseable record reads as an empty cookbook.
        """
        raw = self.store.get_item(self.key)
        if not raw:
            return []

        try:
            records = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Failed to parse cookbook: {e}")
            return []

        if not isinstance(records, list):
            logger.warning("Failed to parse cookbook: expected a list")
            return []

        recipes = []
        for record in records:
            try:
                recipes.append(SavedRecipe.model_validate(record))
            except ValidationError as e:
                title = record.get("title") if isinstance(record, dict) else None
                logger.warning(f"Skipping unreadable cookbook entry {title!r}: {e.error_count()} errors")
        return recipes

    def find(self, title: str) -> SavedRecipe | None:
        """The saved entry with this exact title, if any."""
        for recipe in self.list_saved():
            if recipe.title == title:
                return recipe
        return None

    def search(self, term: str) -> list[SavedRecipe]:
        """Case-insensitive substring match on title or meal type."""
        needle = term.lower()
        return [
            r for r in self.list_saved()
            if needle in r.title.lower() or needle in r.meal_type.lower()
        ]

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def save(
        self,
        recipe: Recipe,
        image_url: str | None = None,
        rating: int | None = None,
        notes: str | None = None,
    ) -> SavedRecipe:
        """
        Save a recipe, replacing any entry with the same title.

        A SavedRecipe keeps its id and saved_at; a plain Recipe gets new ones.

        Raises:
            StorageWriteError: the store rejected the write
        """
        saved = SavedRecipe.from_recipe(recipe, image_url=image_url, rating=rating, notes=notes)
        others = [r for r in self.list_saved() if r.title != saved.title]
        self._write([saved, *others])
        logger.info(f"Saved {saved.title!r} ({saved.id})")
        return saved

    def update_rating_or_notes(self, title: str, rating: int | None, notes: str | None) -> SavedRecipe | None:
        """
        Overwrite rating and notes of the entry with this title, in place.

        Returns:
            The updated entry, or None if no entry has that title
        """
        recipes = self.list_saved()
        for i, recipe in enumerate(recipes):
            if recipe.title == title:
                updated = recipe.model_copy(update={"rating": rating or None, "notes": notes})
                recipes[i] = SavedRecipe.model_validate(updated.model_dump())
                self._write(recipes)
                return recipes[i]
        return None

    def delete(self, title: str) -> bool:
        """
        Remove the entry with this title.

        Returns:
            True if an entry was removed
        """
        recipes = self.list_saved()
        remaining = [r for r in recipes if r.title != title]
        if len(remaining) == len(recipes):
            return False
        self._write(remaining)
        logger.info(f"Deleted {title!r}")
        return True

    def _write(self, recipes: list[SavedRecipe]) -> None:
        payload = json.dumps([r.to_record() for r in recipes])
        try:
            self.store.set_item(self.key, payload)
        except StorageWriteError:
            logger.error(f"Cookbook write rejected ({len(payload)} bytes)")
            raise
        except OSError as e:
            logger.error(f"Cookbook write failed: {e}")
            raise StorageWriteError(str(e)) from e
