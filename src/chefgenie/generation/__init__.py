"""Recipe generation: prompts and the generative model boundary."""

from chefgenie.generation.prompts import CHAT_FALLBACK
from chefgenie.generation.service import ChefGenieClient, RecipeGenerator

__all__ = [
    "CHAT_FALLBACK",
    "ChefGenieClient",
    "RecipeGenerator",
]
